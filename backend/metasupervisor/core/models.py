"""Data models for meta-supervisor."""

from __future__ import annotations

import dataclasses
import datetime as _dt
from enum import Enum
from typing import Dict, List, Optional


class ChunkType(str, Enum):
    """Structural kind of a code chunk."""

    IMPORT = "import"
    TYPE = "type"
    CLASS = "class"
    FUNCTION = "function"
    EXPORT = "export"
    BLOCK = "block"


@dataclasses.dataclass
class CodeChunk:
    """A contiguous piece of a source file produced by the chunker."""

    content: str
    type: ChunkType
    start_line: int
    end_line: int
    name: Optional[str] = None

    @property
    def line_count(self) -> int:
        return self.content.count("\n") + 1


@dataclasses.dataclass
class StoredChunk:
    """Represents an indexed code chunk with its location and embedding."""

    id: Optional[int]
    file_path: str
    content: str
    type: ChunkType
    name: Optional[str]
    start_line: int
    end_line: int
    project_root: str
    embedding: List[float] = dataclasses.field(default_factory=list)
    created_at: Optional[_dt.datetime] = None

    def to_dict(self) -> Dict:
        """Public view of the chunk; the embedding is never exposed."""
        return {
            "id": self.id,
            "file_path": self.file_path,
            "content": self.content,
            "type": self.type.value,
            "name": self.name,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "project_root": self.project_root,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ChangeType(str, Enum):
    ADD = "add"
    CHANGE = "change"
    UNLINK = "unlink"


@dataclasses.dataclass
class FileChange:
    """A file-system event with the file content read at event time."""

    type: ChangeType
    path: str
    relative_path: str
    content: Optional[str] = None
    timestamp: float = dataclasses.field(default_factory=lambda: _dt.datetime.now().timestamp())


@dataclasses.dataclass
class SearchResult:
    chunk: StoredChunk
    similarity: float


@dataclasses.dataclass
class IndexResult:
    files_indexed: int
    chunks_stored: int


@dataclasses.dataclass
class StoreStats:
    total_chunks: int
    total_files: int
    project_roots: List[str]
    vocabulary_size: int = 0
