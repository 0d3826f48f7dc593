"""Semantic code store: chunked code + TF-IDF embeddings with similarity search.

The store owns one vectorizer whose corpus state is persisted next to the
chunk table. Indexing a project trains the vectorizer further and never
resets it, so re-indexing the same project grows the document count each
time; call :meth:`SemanticStore.reset_corpus` to start the statistics over.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .config import load_config
from .core import DefaultChunker, IndexResult, SearchResult, StoreStats, StoredChunk, TfIdfVectorizer, make_embedder
from .core.embeddings import STATE_VERSION
from .indexing import DefaultIndexer
from .search import DefaultSearcher
from .storage import ChunkRepository, create_chunk_repository

logger = logging.getLogger(__name__)


class SemanticStore:

    def __init__(
        self,
        repository: Optional[ChunkRepository] = None,
        cfg: Optional[Dict] = None,
    ):
        self.cfg = cfg or load_config()
        self.repository = repository or create_chunk_repository(self.cfg)
        self.chunker = DefaultChunker()
        self.vectorizer = self._load_vectorizer()

    @classmethod
    def open(cls, db_path: Optional[str] = None) -> "SemanticStore":
        """Open (or create) the store at ``db_path`` or the configured location."""
        cfg = load_config(db_path)
        return cls(create_chunk_repository(cfg), cfg)

    def _load_vectorizer(self) -> TfIdfVectorizer:
        vectorizer = make_embedder(self.cfg)
        saved = self.repository.load_state()
        if saved is None:
            return vectorizer

        version, state = saved
        if version != STATE_VERSION:
            logger.warning(f"Ignoring vectorizer state with version {version}, starting empty")
            return vectorizer
        try:
            return TfIdfVectorizer.deserialize(state)
        except ValueError as e:
            logger.warning(f"Corrupt vectorizer state, starting empty: {e}")
            return vectorizer

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def index_project(
        self,
        root: Union[str, Path],
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> IndexResult:
        indexer = DefaultIndexer(self.repository, self.vectorizer, self.chunker, self.cfg)
        return indexer.index(Path(root), on_progress=on_progress)

    def reset_corpus(self) -> None:
        """Drop vocabulary and document frequencies; stored chunks stay."""
        self.vectorizer.reset()
        self.repository.save_state(STATE_VERSION, self.vectorizer.serialize())
        logger.info("Vectorizer corpus reset")

    def clear(self) -> None:
        """Delete every stored chunk and reset the corpus."""
        self.repository.clear()
        self.reset_corpus()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _searcher(self) -> DefaultSearcher:
        return DefaultSearcher(self.repository, self.vectorizer, self.cfg)

    def search(
        self,
        query: str,
        limit: Optional[int] = None,
        project_root: Optional[str] = None,
    ) -> List[SearchResult]:
        if limit is None:
            limit = int(self.cfg.get("search", {}).get("limit", 10))
        return self._searcher().search(query, limit, project_root=project_root)

    def find_similar_to(
        self,
        content: str,
        threshold: float = 0.5,
        exclude_file: Optional[str] = None,
    ) -> List[SearchResult]:
        return self._searcher().find_similar(content, threshold, exclude_file)

    def file_chunks(self, file_path: str) -> List[StoredChunk]:
        return self.repository.file_chunks(file_path)

    def stats(self) -> StoreStats:
        total_chunks, total_files, projects = self.repository.stats()
        return StoreStats(
            total_chunks=total_chunks,
            total_files=total_files,
            project_roots=projects,
            vocabulary_size=self.vectorizer.vocab_size,
        )
