"""Code indexing logic."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..config import DEFAULT_IGNORED_DIRS, DEFAULT_SOURCE_EXTENSIONS
from ..core import Chunker, CodeChunk, IndexResult, StoredChunk, TfIdfVectorizer
from ..core.embeddings import STATE_VERSION
from ..storage import ChunkRepository
from ..utils import is_hidden, read_source
from .base import Indexer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def iter_files(root: Path, cfg: Dict) -> Iterable[Path]:
    """Yield source files under ``root`` in a stable order.

    Hidden entries and ignored directory names are skipped at every level;
    recursion stops at ``indexing.max_depth`` directory levels.
    """
    indexing = cfg.get("indexing", {})
    extensions = {e.lower() for e in indexing.get("extensions", DEFAULT_SOURCE_EXTENSIONS)}
    ignored = set(indexing.get("ignored_dirs", DEFAULT_IGNORED_DIRS))
    max_depth = int(indexing.get("max_depth", 5))

    def walk(directory: Path, depth: int) -> Iterable[Path]:
        if depth >= max_depth:
            return
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.debug(f"Cannot list {directory}: {e}")
            return
        for entry in entries:
            if is_hidden(entry.name) or entry.name in ignored:
                continue
            try:
                if entry.is_dir():
                    yield from walk(Path(entry.path), depth + 1)
                elif entry.is_file() and os.path.splitext(entry.name)[1].lower() in extensions:
                    yield Path(entry.path)
            except OSError:
                continue

    yield from walk(root, 0)


class DefaultIndexer(Indexer):
    """Chunk, train, embed and store one project root in a single batch."""

    def __init__(
        self,
        repository: ChunkRepository,
        vectorizer: TfIdfVectorizer,
        chunker: Chunker,
        cfg: Dict,
    ):
        self.repository = repository
        self.vectorizer = vectorizer
        self.chunker = chunker
        self.cfg = cfg

    def _collect(self, root: Path, progress: ProgressCallback) -> List[Tuple[str, List[CodeChunk]]]:
        files = list(iter_files(root, self.cfg))
        progress(f"Found {len(files)} code files")

        collected: List[Tuple[str, List[CodeChunk]]] = []
        for fp in files:
            text = read_source(fp)
            if text is None:
                continue
            rel = fp.relative_to(root).as_posix()
            collected.append((rel, self.chunker.chunk(text, file_path=rel)))
        return collected

    def index(self, root: Path, on_progress: Optional[ProgressCallback] = None) -> IndexResult:
        def progress(msg: str) -> None:
            logger.info(msg)
            if on_progress:
                on_progress(msg)

        root = root.resolve()
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")
        project_root = str(root)

        collected = self._collect(root, progress)
        contents = [c.content for _, chunks in collected for c in chunks]

        # Train once on the whole project so document frequencies are consistent
        self.vectorizer.train(contents)
        progress(
            f"Vocabulary built: {self.vectorizer.vocab_size} tokens from {len(contents)} chunks"
        )

        records: List[StoredChunk] = []
        for rel, chunks in collected:
            for c in chunks:
                records.append(
                    StoredChunk(
                        id=None,
                        file_path=rel,
                        content=c.content,
                        type=c.type,
                        name=c.name,
                        start_line=c.start_line,
                        end_line=c.end_line,
                        project_root=project_root,
                        embedding=self.vectorizer.embed(c.content),
                    )
                )

        stored = self.repository.replace_project(project_root, records)
        self.repository.save_state(STATE_VERSION, self.vectorizer.serialize())

        progress(f"Indexed {len(collected)} files -> {stored} chunks")
        return IndexResult(files_indexed=len(collected), chunks_stored=stored)
