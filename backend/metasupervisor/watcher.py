"""Debounced file watching on top of watchdog."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, List, Optional, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import DEFAULT_IGNORED_DIRS
from .core import ChangeType, FileChange
from .utils import is_hidden, read_source

logger = logging.getLogger(__name__)

IGNORED_SUFFIXES = (".db", ".lock")

ChangesCallback = Callable[[List[FileChange]], None]


def is_ignored(relative_path: str) -> bool:
    parts = Path(relative_path).parts
    if any(is_hidden(p) or p in DEFAULT_IGNORED_DIRS for p in parts):
        return True
    return relative_path.endswith(IGNORED_SUFFIXES)


class ChangeBuffer(FileSystemEventHandler):
    """Collects file events and flushes them as one batch after a quiet period."""

    def __init__(self, root: Path, on_changes: ChangesCallback, debounce: float = 0.5):
        self.root = root
        self.on_changes = on_changes
        self.debounce = debounce
        self._pending: List[FileChange] = []
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.record(ChangeType.ADD, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.record(ChangeType.CHANGE, event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.record(ChangeType.UNLINK, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.record(ChangeType.UNLINK, event.src_path)
            self.record(ChangeType.ADD, event.dest_path)

    def record(self, change_type: ChangeType, path: Union[str, bytes]) -> None:
        path = os.fsdecode(path)
        relative_path = os.path.relpath(path, self.root)
        if is_ignored(relative_path):
            return

        content = None
        if change_type != ChangeType.UNLINK:
            content = read_source(Path(path))

        change = FileChange(type=change_type, path=path, relative_path=relative_path, content=content)
        logger.debug(f"{change_type.value}: {relative_path}")

        with self._lock:
            self._pending.append(change)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        with self._lock:
            batch, self._pending = self._pending, []
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if batch:
            self.on_changes(batch)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = []


class FileWatcher:

    def __init__(self, root: Union[str, Path], on_changes: ChangesCallback, debounce: float = 0.5):
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise NotADirectoryError(f"Not a directory: {self.root}")
        self.handler = ChangeBuffer(self.root, on_changes, debounce)
        self._observer: Optional[Observer] = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(self.handler, str(self.root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info(f"Watching {self.root}")

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
        self.handler.cancel()
        logger.info(f"Stopped watching {self.root}")
