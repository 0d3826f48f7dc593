"""Regex rule scanner for security and code-quality problems."""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Iterable, List, Pattern

from ..core import ChangeType, FileChange
from .findings import RULES, Finding, Severity

logger = logging.getLogger(__name__)

MAX_FILE_LINES = 300
MAX_LINE_LENGTH = 120
MAX_LONG_LINES = 5


@dataclasses.dataclass(frozen=True)
class LineRule:
    rule: str
    pattern: Pattern[str]
    message: str
    severity: Severity


def _rule(rule_id: str, pattern: str, message: str, severity: Severity, flags: int = 0) -> LineRule:
    RULES.register(rule_id, message)
    return LineRule(rule_id, re.compile(pattern, flags), message, severity)


SECURITY_RULES: List[LineRule] = [
    _rule("no-eval", r"eval\s*\(", "eval() is a security risk", Severity.CRITICAL),
    _rule("no-inner-html", r"innerHTML\s*=", "innerHTML assignment can lead to XSS", Severity.CRITICAL),
    _rule(
        "no-dangerous-html",
        r"dangerouslySetInnerHTML",
        "dangerouslySetInnerHTML can lead to XSS",
        Severity.WARNING,
    ),
    _rule("no-document-write", r"document\.write\s*\(", "document.write is unsafe", Severity.WARNING),
    _rule(
        "sql-injection",
        r"\$\{.*\}.*(?:SELECT|INSERT|UPDATE|DELETE|DROP)",
        "Potential SQL injection via template literal",
        Severity.CRITICAL,
        re.IGNORECASE,
    ),
    _rule(
        "command-injection",
        r"exec\s*\(\s*`",
        "Potential command injection via template literal",
        Severity.CRITICAL,
    ),
    _rule(
        "hardcoded-password",
        r"password\s*[:=]\s*[\"'](?!process|env)",
        "Possible hardcoded password",
        Severity.CRITICAL,
        re.IGNORECASE,
    ),
    _rule(
        "hardcoded-api-key",
        r"api[_-]?key\s*[:=]\s*[\"'][a-zA-Z0-9]",
        "Possible hardcoded API key",
        Severity.CRITICAL,
        re.IGNORECASE,
    ),
]

QUALITY_RULES: List[LineRule] = [
    _rule("no-any", r":\s*any\b", 'Avoid using "any" type', Severity.WARNING),
    _rule("no-console-log", r"console\.log\(", "Remove console.log before committing", Severity.INFO),
    _rule("todo-found", r"TODO|FIXME|HACK|XXX", "TODO/FIXME comment found", Severity.INFO),
    _rule("empty-catch", r"catch\s*\(\s*\w*\s*\)\s*\{\s*\}", "Empty catch block swallows errors", Severity.WARNING),
    _rule("empty-catch-promise", r"\.then\(.*\.catch\(\)", "Empty promise catch", Severity.WARNING),
]

RULES.register("file-too-long", f"File exceeds {MAX_FILE_LINES} lines")
RULES.register("long-lines", f"Lines longer than {MAX_LINE_LENGTH} characters")
RULES.register("missing-error-handling", "Async code with await but no try/catch")
RULES.register("missing-type-annotation", "Exported variable without a type annotation")

_ASYNC_RE = re.compile(r"async\s+(function|\(|[a-zA-Z])")
_AWAIT_RE = re.compile(r"await\s")
_TRY_RE = re.compile(r"try\s*\{")
_EXPORT_RE = re.compile(r"^export\s+(function|const|let|var)")
_EXPORT_VAR_RE = re.compile(r"export\s+(const|let|var)\s+\w+\s*=")


class RuleSupervisor:
    """Runs line rules, file-size checks and structural checks over source text."""

    def __init__(self, security: bool = True, quality: bool = True):
        self.line_rules: List[LineRule] = []
        if security:
            self.line_rules.extend(SECURITY_RULES)
        if quality:
            self.line_rules.extend(QUALITY_RULES)

    def analyze_changes(self, changes: Iterable[FileChange]) -> List[Finding]:
        findings: List[Finding] = []
        for change in changes:
            if change.type == ChangeType.UNLINK or not change.content:
                continue
            findings.extend(self.analyze_code(change.content, change.relative_path))
        return findings

    def analyze_code(self, code: str, file_path: str) -> List[Finding]:
        lines = code.split("\n")
        findings = self._line_findings(lines, file_path)
        findings.extend(self._file_findings(lines, file_path))
        findings.extend(self._structural_findings(code, lines, file_path))
        logger.debug(f"{file_path}: {len(findings)} rule findings")
        return findings

    def _line_findings(self, lines: List[str], file_path: str) -> List[Finding]:
        findings = []
        for i, line in enumerate(lines):
            for rule in self.line_rules:
                if not rule.pattern.search(line):
                    continue
                suggestion = None
                if rule in SECURITY_RULES:
                    suggestion = f"Review line {i + 1} for security implications"
                findings.append(
                    Finding(
                        severity=rule.severity,
                        rule=rule.rule,
                        message=rule.message,
                        file=file_path,
                        line=i + 1,
                        suggestion=suggestion,
                    )
                )
        return findings

    def _file_findings(self, lines: List[str], file_path: str) -> List[Finding]:
        findings = []
        if len(lines) > MAX_FILE_LINES:
            findings.append(
                Finding(
                    severity=Severity.WARNING,
                    rule="file-too-long",
                    message=f"File has {len(lines)} lines (max recommended: {MAX_FILE_LINES})",
                    file=file_path,
                    suggestion="Consider splitting into smaller modules",
                )
            )

        long_lines = sum(1 for line in lines if len(line) > MAX_LINE_LENGTH)
        if long_lines > MAX_LONG_LINES:
            findings.append(
                Finding(
                    severity=Severity.INFO,
                    rule="long-lines",
                    message=f"{long_lines} lines exceed {MAX_LINE_LENGTH} characters",
                    file=file_path,
                )
            )
        return findings

    def _structural_findings(self, code: str, lines: List[str], file_path: str) -> List[Finding]:
        findings = []
        if _ASYNC_RE.search(code) and _AWAIT_RE.search(code) and not _TRY_RE.search(code):
            findings.append(
                Finding(
                    severity=Severity.WARNING,
                    rule="missing-error-handling",
                    message="Async code without try/catch error handling",
                    file=file_path,
                    suggestion="Wrap await calls in try/catch blocks",
                )
            )

        if file_path.endswith((".ts", ".tsx")):
            for i, line in enumerate(lines):
                if not _EXPORT_RE.match(line):
                    continue
                if _EXPORT_VAR_RE.search(line) and ":" not in line.split("=")[0]:
                    findings.append(
                        Finding(
                            severity=Severity.INFO,
                            rule="missing-type-annotation",
                            message="Exported variable without explicit type annotation",
                            file=file_path,
                            line=i + 1,
                        )
                    )
                    break
        return findings
