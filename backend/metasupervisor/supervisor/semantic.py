"""Embedding-based detection of duplicated code and inconsistent patterns.

Each chunk of the analyzed file is compared against the indexed corpus.
A near match is reported as duplication; a moderate match of the same chunk
type is checked for differences in error handling, async style and return
behavior.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from ..core import ChunkType, CodeChunk, SearchResult, chunk_code
from ..store import SemanticStore
from .findings import RULES, Finding, Severity, SimilarChunk

logger = logging.getLogger(__name__)

RULES.register("semantic-duplication", "Chunk closely matches indexed code")
RULES.register("semantic-inconsistency", "Chunk differs in style from similar indexed code")

SNIPPET_CHARS = 200

_TRY_RE = re.compile(r"try\s*\{")
_ASYNC_RE = re.compile(r"async\s")
_RETURN_RE = re.compile(r"return\s")


def _describe(kind: str, name: Optional[str]) -> str:
    return f'{kind} "{name}"' if name else kind


def _similar_chunk(result: SearchResult) -> SimilarChunk:
    return SimilarChunk(
        file=result.chunk.file_path,
        name=result.chunk.name,
        similarity=result.similarity,
        content=result.chunk.content[:SNIPPET_CHARS],
    )


def detect_inconsistency(chunk: CodeChunk, similar: SearchResult) -> Optional[Tuple[str, str]]:
    """Return ``(message, suggestion)`` for the first differing heuristic, if any."""
    a = chunk.content
    other = similar.chunk
    b = other.content

    a_try, b_try = bool(_TRY_RE.search(a)), bool(_TRY_RE.search(b))
    if a_try != b_try:
        which, theirs = ("has", "lacks") if a_try else ("lacks", "has")
        return (
            f'This {chunk.type.value} {which} error handling, but similar '
            f'{other.type.value} "{other.name}" in {other.file_path} {theirs} it',
            f"Align error handling patterns with similar code in {other.file_path}",
        )

    a_async, b_async = bool(_ASYNC_RE.search(a)), bool(_ASYNC_RE.search(b))
    if a_async != b_async:
        mine = "async" if a_async else "sync"
        theirs = "async" if b_async else "sync"
        return (
            f"This {chunk.type.value} uses {mine} pattern, but similar code in {other.file_path} uses {theirs}",
            "Consider aligning async/sync patterns with similar code",
        )

    if chunk.type == ChunkType.FUNCTION:
        a_ret, b_ret = bool(_RETURN_RE.search(a)), bool(_RETURN_RE.search(b))
        if a_ret != b_ret:
            behavior = "returns a value" if a_ret else "doesn't return"
            return (
                f'This function {behavior}, unlike similar function "{other.name}" in {other.file_path}',
                "Check if return behavior should be consistent",
            )

    return None


class SemanticSupervisor:

    def __init__(
        self,
        store: SemanticStore,
        duplication_threshold: float = 0.7,
        pattern_threshold: float = 0.5,
        min_chunk_lines: int = 3,
    ):
        self.store = store
        self.duplication_threshold = duplication_threshold
        self.pattern_threshold = pattern_threshold
        self.min_chunk_lines = min_chunk_lines

    @classmethod
    def from_config(cls, store: SemanticStore) -> "SemanticSupervisor":
        semantic = store.cfg.get("semantic", {})
        return cls(
            store,
            duplication_threshold=float(semantic.get("duplication_threshold", 0.7)),
            pattern_threshold=float(semantic.get("pattern_threshold", 0.5)),
            min_chunk_lines=int(semantic.get("min_chunk_lines", 3)),
        )

    def analyze_file(self, content: str, file_path: str) -> List[Finding]:
        findings: List[Finding] = []

        for chunk in chunk_code(content, file_path):
            if chunk.line_count < self.min_chunk_lines:
                continue

            similar = self.store.find_similar_to(chunk.content, self.pattern_threshold, file_path)
            if not similar:
                continue

            top = similar[0]
            if top.similarity >= self.duplication_threshold:
                findings.append(self._duplication(chunk, top, file_path))
            elif top.similarity >= self.pattern_threshold and chunk.type == top.chunk.type:
                found = detect_inconsistency(chunk, top)
                if found:
                    message, suggestion = found
                    findings.append(
                        Finding(
                            severity=Severity.INFO,
                            rule="semantic-inconsistency",
                            message=message,
                            file=file_path,
                            line=chunk.start_line,
                            suggestion=suggestion,
                            similar_chunk=_similar_chunk(top),
                        )
                    )

        logger.debug(f"{file_path}: {len(findings)} semantic findings")
        return findings

    def _duplication(self, chunk: CodeChunk, top: SearchResult, file_path: str) -> Finding:
        other = top.chunk
        return Finding(
            severity=Severity.WARNING,
            rule="semantic-duplication",
            message=(
                f"This {_describe(chunk.type.value, chunk.name)} is very similar to existing code "
                f"({top.similarity * 100:.0f}% match)"
            ),
            file=file_path,
            line=chunk.start_line,
            suggestion=(
                f"Possible duplication of {_describe(other.type.value, other.name)} in "
                f"{other.file_path}:{other.start_line}. Consider extracting shared logic."
            ),
            similar_chunk=_similar_chunk(top),
        )
