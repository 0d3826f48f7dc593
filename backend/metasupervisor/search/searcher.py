"""Semantic search functionality."""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List, Optional

from ..core import SearchResult, TfIdfVectorizer, cosine_similarity
from ..storage import ChunkRepository
from .base import Searcher

logger = logging.getLogger(__name__)


class DefaultSearcher(Searcher):
    """Brute-force cosine search over every stored embedding."""

    def __init__(self, repository: ChunkRepository, vectorizer: TfIdfVectorizer, cfg: Dict):
        self.repository = repository
        self.vectorizer = vectorizer
        search_cfg = cfg.get("search", {})
        self.min_similarity = float(search_cfg.get("min_similarity", 0.01))
        self.similar_pool = int(search_cfg.get("similar_pool", 20))

    def _rank(
        self,
        query: str,
        project_root: Optional[str] = None,
        exclude_file: Optional[str] = None,
    ) -> List[SearchResult]:
        qv = self.vectorizer.embed(query)
        if not qv:
            return []

        results: List[SearchResult] = []
        for chunk in self.repository.iter_chunks(project_root=project_root):
            if not chunk.embedding or chunk.file_path == exclude_file:
                continue
            similarity = cosine_similarity(qv, chunk.embedding)
            if similarity > self.min_similarity:
                results.append(
                    SearchResult(chunk=dataclasses.replace(chunk, embedding=[]), similarity=similarity)
                )

        results.sort(key=lambda r: r.similarity, reverse=True)
        logger.debug(f"Query matched {len(results)} chunks above {self.min_similarity}")
        return results

    def search(
        self,
        query: str,
        limit: int = 10,
        project_root: Optional[str] = None,
    ) -> List[SearchResult]:
        return self._rank(query, project_root=project_root)[:limit]

    def find_similar(
        self,
        content: str,
        threshold: float = 0.5,
        exclude_file: Optional[str] = None,
    ) -> List[SearchResult]:
        """Chunks similar to ``content``, other than those of ``exclude_file``."""
        pool = self._rank(content, exclude_file=exclude_file)[:self.similar_pool]
        return [r for r in pool if r.similarity >= threshold]
