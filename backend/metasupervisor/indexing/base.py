"""Indexer Interface."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from ..core import IndexResult


class Indexer:
    """Abstract base class for code indexing."""

    def index(self, root: Path, on_progress: Optional[Callable[[str], None]] = None) -> IndexResult:
        raise NotImplementedError
