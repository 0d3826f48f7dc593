"""Findings reported by the rule-based and semantic supervisors."""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, field_validator

_RULE_ID_RE = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class RuleRegistry:
    """Known rule identifiers; findings may only cite registered rules."""

    def __init__(self) -> None:
        self._rules: Dict[str, str] = {}

    def register(self, rule_id: str, description: str = "") -> str:
        if not _RULE_ID_RE.match(rule_id):
            raise ValueError(f"Invalid rule id {rule_id!r}: use kebab-case")
        self._rules.setdefault(rule_id, description)
        return rule_id

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def describe(self, rule_id: str) -> str:
        return self._rules[rule_id]

    def ids(self) -> List[str]:
        return sorted(self._rules)


RULES = RuleRegistry()


class SimilarChunk(BaseModel):
    file: str
    name: Optional[str] = None
    similarity: float
    content: str


class Finding(BaseModel):
    severity: Severity
    rule: str
    message: str
    file: str
    line: Optional[int] = None
    suggestion: Optional[str] = None
    similar_chunk: Optional[SimilarChunk] = None

    @field_validator("rule")
    @classmethod
    def _rule_registered(cls, v: str) -> str:
        if v not in RULES:
            raise ValueError(f"Unknown rule id: {v!r}")
        return v


def summarize(findings: Iterable[Finding]) -> Dict[str, int]:
    """Count findings per severity."""
    counts = {s.value: 0 for s in Severity}
    total = 0
    for f in findings:
        counts[f.severity.value] += 1
        total += 1
    counts["total"] = total
    return counts
