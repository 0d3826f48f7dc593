"""Semantic search for meta-supervisor."""

from .base import Searcher
from .searcher import DefaultSearcher

__all__ = [
    "Searcher",
    "DefaultSearcher",
]
