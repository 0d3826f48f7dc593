"""Indexing functionality for meta-supervisor."""

from .base import Indexer
from .indexer import DefaultIndexer, iter_files

__all__ = [
    "Indexer",
    "DefaultIndexer",
    "iter_files",
]
