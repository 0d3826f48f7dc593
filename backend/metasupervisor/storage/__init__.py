"""Chunk storage backends (SQLAlchemy only)."""

from .base import ChunkRepository
from .factory import create_chunk_repository
from .models import decode_embedding, encode_embedding
from .sql import SqlChunkRepository

__all__ = [
    "ChunkRepository",
    "SqlChunkRepository",
    "create_chunk_repository",
    "decode_embedding",
    "encode_embedding",
]
