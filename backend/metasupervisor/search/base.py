"""Searcher Interface."""

from __future__ import annotations

from typing import List, Optional

from ..core import SearchResult


class Searcher:
    """Abstract base class for semantic search."""

    def search(
        self,
        query: str,
        limit: int,
        project_root: Optional[str] = None,
    ) -> List[SearchResult]:
        """Search for code chunks semantically similar to query.

        Args:
            query: Search query text (free text or code)
            limit: Number of results to return
            project_root: Restrict results to one indexed project

        Returns:
            Results sorted by similarity, highest first
        """
        raise NotImplementedError
