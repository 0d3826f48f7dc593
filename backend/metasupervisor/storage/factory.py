"""Factory for creating chunk repositories (SQLAlchemy only)."""

from __future__ import annotations

from typing import Dict, Optional

from ..config import database_url
from .base import ChunkRepository
from .sql import SqlChunkRepository


def create_chunk_repository(cfg: Dict, url: Optional[str] = None) -> ChunkRepository:
    db_url = database_url(url) if url else cfg.get("database", {}).get("url", "sqlite:///meta-supervisor.db")
    return SqlChunkRepository(db_url)
