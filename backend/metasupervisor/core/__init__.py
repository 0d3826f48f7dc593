"""Core functionality for meta-supervisor."""

from .models import ChangeType, ChunkType, CodeChunk, FileChange, IndexResult, SearchResult, StoreStats, StoredChunk
from .chunking import Chunker, DefaultChunker, chunk_code
from .embeddings import Embedder, TfIdfVectorizer, cosine_similarity, make_embedder, tokenize

__all__ = [
    "ChangeType",
    "ChunkType",
    "FileChange",
    "CodeChunk",
    "IndexResult",
    "SearchResult",
    "StoreStats",
    "StoredChunk",
    "Chunker",
    "DefaultChunker",
    "chunk_code",
    "Embedder",
    "TfIdfVectorizer",
    "cosine_similarity",
    "make_embedder",
    "tokenize",
]
