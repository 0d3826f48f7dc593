"""Heuristic chunking of TypeScript/JavaScript source into semantic units.

The chunker works on raw lines with regexes and brace counting; it does not
parse. Braces inside strings or comments are counted like any other brace,
which is a known limitation of the approach.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from .models import ChunkType, CodeChunk

logger = logging.getLogger(__name__)

# Lines scanned when looking for the end of a non-brace statement
STATEMENT_LOOKAHEAD = 30

_TYPE_RE = re.compile(r"^(?:export\s+)?(?:type|interface)\s+(\w+)")
_CLASS_RE = re.compile(r"^(?:export\s+)?(?:abstract\s+)?class\s+(\w+)")
_FUNCTION_RE = re.compile(r"^(?:export\s+)?(?:async\s+)?function\s+(\w+)")
_ARROW_RE = re.compile(
    r"^(?:export\s+)?(?:const|let|var)\s+(\w+)\s*(?::\s*[^=]+)?\s*=\s*(?:async\s+)?(?:\(|[a-zA-Z])"
)
_EXPORT_RE = re.compile(r"^export\s+(default|\{)")
_VAR_RE = re.compile(r"^(?:export\s+)?(?:const|let|var)\s+(\w+)")


def _is_import_line(trimmed: str) -> bool:
    return trimmed.startswith("import ") or trimmed.startswith("import{")


def _is_comment(trimmed: str) -> bool:
    return trimmed.startswith("//")


# -----------------------------------------------------------------------------
# Boundary helpers
# -----------------------------------------------------------------------------

def find_statement_end(lines: List[str], start: int, lookahead: int = STATEMENT_LOOKAHEAD) -> int:
    """Find the last line of a non-brace statement.

    Returns the first line ending in ``;`` within the lookahead window, the
    line before a blank line, or ``start`` when neither shows up.
    """
    for i in range(start, min(start + lookahead, len(lines))):
        t = lines[i].strip()
        if t.endswith(";"):
            return i
        if t == "" and i > start:
            return i - 1
    return start


def find_block_end(lines: List[str], start: int, lookahead: int = STATEMENT_LOOKAHEAD) -> int:
    """Find the line where the brace block opened at/after ``start`` closes.

    A construct whose statement ends (``;`` or a blank line) before any
    ``{`` is a plain statement, and the opening brace is only looked for
    within the lookahead window. Falls back to :func:`find_statement_end`
    when no brace opens in time or when the braces never balance.
    """
    depth = 0
    found_open = False

    for i in range(start, len(lines)):
        if not found_open:
            if i >= start + lookahead:
                break
            t = lines[i].strip()
            if t == "" and i > start:
                return i - 1
            if "{" not in t and t.endswith(";"):
                return i
        for ch in lines[i]:
            if ch == "{":
                depth += 1
                found_open = True
            elif ch == "}":
                depth -= 1
                if found_open and depth == 0:
                    return i

    if found_open:
        logger.debug(f"Unbalanced braces from line {start + 1}, using statement boundary")
    return find_statement_end(lines, start, lookahead)


def find_import_block(lines: List[str]) -> Optional[tuple[int, int]]:
    """Locate the contiguous import block.

    Blank lines, ``//`` comments and the body lines of a multi-line
    ``import { ... } from`` list belong to the block; the first other line
    ends it.
    """
    start = -1
    end = -1
    open_braces = 0

    for i, line in enumerate(lines):
        trimmed = line.strip()
        if open_braces > 0:
            open_braces += trimmed.count("{") - trimmed.count("}")
            end = i
            continue
        if _is_import_line(trimmed):
            if start < 0:
                start = i
            end = i
            open_braces = max(0, trimmed.count("{") - trimmed.count("}"))
        elif start >= 0 and trimmed.startswith("} from"):
            end = i
        elif start >= 0 and (trimmed == "" or _is_comment(trimmed) or trimmed.startswith("/*")):
            continue
        elif start >= 0:
            break

    if start < 0:
        return None
    return start, end


# -----------------------------------------------------------------------------
# Interfaces
# -----------------------------------------------------------------------------

class Chunker:
    """Abstract base class for source chunking."""

    def chunk(self, source: str, file_path: Optional[str] = None) -> List[CodeChunk]:
        """Split source text into ordered, non-overlapping chunks.

        Args:
            source: Full text of one file
            file_path: Path of the file (optional, only used for logging)

        Returns:
            Chunks in file order
        """
        raise NotImplementedError


class DefaultChunker(Chunker):
    """Brace-counting chunker for TypeScript/JavaScript-like sources."""

    def __init__(self, lookahead: int = STATEMENT_LOOKAHEAD):
        self.lookahead = lookahead

    def _block(self, lines: List[str], start: int, kind: ChunkType, name: Optional[str]) -> CodeChunk:
        end = find_block_end(lines, start, self.lookahead)
        return CodeChunk(
            content="\n".join(lines[start:end + 1]),
            type=kind,
            start_line=start + 1,
            end_line=end + 1,
            name=name,
        )

    def chunk(self, source: str, file_path: Optional[str] = None) -> List[CodeChunk]:
        lines = source.split("\n")
        chunks: List[CodeChunk] = []

        block = find_import_block(lines)
        if block:
            start, end = block
            content = "\n".join(lines[start:end + 1]).strip()
            if content:
                chunks.append(CodeChunk(
                    content=content,
                    type=ChunkType.IMPORT,
                    start_line=start + 1,
                    end_line=end + 1,
                    name="imports",
                ))

        i = 0
        while i < len(lines):
            if block and block[0] <= i <= block[1]:
                i = block[1] + 1
                continue

            trimmed = lines[i].strip()

            if trimmed == "" or _is_comment(trimmed):
                i += 1
                continue

            m = _TYPE_RE.match(trimmed)
            if m:
                chunk = self._block(lines, i, ChunkType.TYPE, m.group(1))
                chunks.append(chunk)
                i = chunk.end_line
                continue

            m = _CLASS_RE.match(trimmed)
            if m:
                chunk = self._block(lines, i, ChunkType.CLASS, m.group(1))
                chunks.append(chunk)
                i = chunk.end_line
                continue

            m = _FUNCTION_RE.match(trimmed)
            if m:
                chunk = self._block(lines, i, ChunkType.FUNCTION, m.group(1))
                chunks.append(chunk)
                i = chunk.end_line
                continue

            m = _ARROW_RE.match(trimmed)
            if m:
                chunk = self._block(lines, i, ChunkType.FUNCTION, m.group(1))
                # Only function expressions count; plain values fall through
                if "=>" in chunk.content or "function" in chunk.content:
                    chunks.append(chunk)
                    i = chunk.end_line
                    continue

            if _EXPORT_RE.match(trimmed):
                chunk = self._block(lines, i, ChunkType.EXPORT, None)
                chunks.append(chunk)
                i = chunk.end_line
                continue

            m = _VAR_RE.match(trimmed)
            if m:
                end = find_statement_end(lines, i, self.lookahead)
                chunks.append(CodeChunk(
                    content="\n".join(lines[i:end + 1]),
                    type=ChunkType.BLOCK,
                    start_line=i + 1,
                    end_line=end + 1,
                    name=m.group(1),
                ))
                i = end + 1
                continue

            i += 1

        chunks.sort(key=lambda c: c.start_line)
        logger.debug(f"Chunked {file_path or 'source'} into {len(chunks)} chunks")
        return chunks


def chunk_code(source: str, file_path: Optional[str] = None) -> List[CodeChunk]:
    """Chunk source text with the default heuristics (Functional Wrapper)."""
    return DefaultChunker().chunk(source, file_path=file_path)
