"""Abstract chunk storage interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from ..core.models import StoredChunk


class ChunkRepository(ABC):
    """Abstract base class for chunk + corpus-state storage backends."""

    @abstractmethod
    def replace_project(self, project_root: str, chunks: List[StoredChunk]) -> int:
        """Atomically replace every chunk of ``project_root`` with ``chunks``."""
        pass

    @abstractmethod
    def iter_chunks(self, project_root: Optional[str] = None) -> Iterable[StoredChunk]:
        """Yield stored chunks, embeddings included."""
        pass

    @abstractmethod
    def file_chunks(self, file_path: str) -> List[StoredChunk]:
        """Chunks of one relative file path, without embeddings."""
        pass

    @abstractmethod
    def stats(self) -> Tuple[int, int, List[str]]:
        """Return (total chunks, distinct files, distinct project roots)."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Delete every stored chunk."""
        pass

    @abstractmethod
    def load_state(self) -> Optional[Tuple[int, str]]:
        """Return (version, serialized vectorizer state) or None."""
        pass

    @abstractmethod
    def save_state(self, version: int, state: str) -> None:
        """Overwrite the serialized vectorizer state."""
        pass
