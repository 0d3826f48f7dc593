from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests
from pydantic import BaseModel

from ..config import load_config
from .findings import Severity

logger = logging.getLogger(__name__)

MAX_PROMPT_CODE_CHARS = 8000

SYSTEM_PROMPT = """You are a senior code reviewer and architecture advisor. You analyze code changes for:
1. Security vulnerabilities
2. Performance issues
3. Code quality and maintainability
4. Architectural concerns
5. Best practices violations

Be concise and actionable. Format your response as JSON with this structure:
{
  "summary": "Brief overall assessment",
  "issues": [{"severity": "critical|warning|info", "description": "...", "location": "line or section", "fix": "suggested fix"}],
  "suggestions": ["improvement suggestion 1", "..."],
  "architecturalNotes": ["architectural observation 1", "..."]
}"""

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_FUNCTION_RE = re.compile(r"(?:function\s+\w+|=>\s*\{|\w+\s*\([^)]*\)\s*\{)")
_FUNCTION_START_RE = re.compile(r"(?:function\s|=>)")
_ANY_RE = re.compile(r":\s*any\b")


class LLMResponse(BaseModel):
    content: Optional[str] = None
    finish_reason: str
    usage: Optional[Dict[str, int]] = None
    time_taken: float
    error: Optional[str] = None


class ReviewIssue(BaseModel):
    severity: Severity = Severity.INFO
    description: str = ""
    location: Optional[str] = None
    fix: Optional[str] = None


class ReviewResult(BaseModel):
    summary: str
    issues: List[ReviewIssue] = []
    suggestions: List[str] = []
    architectural_notes: List[str] = []
    source: str = "template"


@dataclass
class LLMConfig:
    api_base: str = "https://api.openai.com/v1"
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    max_tokens: int = 2048
    temperature: float = 0.3
    timeout: int = 30

    @classmethod
    def from_config(cls, cfg: Optional[Dict] = None) -> "LLMConfig":
        llm = (cfg or load_config()).get("llm", {})
        defaults = cls()
        return cls(
            api_base=llm.get("api_base") or defaults.api_base,
            api_key=llm.get("api_key"),
            model=llm.get("model") or defaults.model,
            max_tokens=int(llm.get("max_tokens", defaults.max_tokens)),
            temperature=float(llm.get("temperature", defaults.temperature)),
            timeout=int(llm.get("timeout", defaults.timeout)),
        )


class ChatClient:
    """Client for an OpenAI-compatible chat completions endpoint."""

    def __init__(self, config: Optional[LLMConfig] = None):
        self.config = config or LLMConfig.from_config()
        if not self.config.api_key:
            raise ValueError("LLM_API_KEY environment variable not set")

        self.headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    def chat(self, system_prompt: str, user_message: str) -> LLMResponse:
        messages = []
        if system_prompt and system_prompt.strip():
            messages.append({"role": "system", "content": system_prompt.strip()})
        messages.append({"role": "user", "content": user_message.strip()})

        url = f"{self.config.api_base.rstrip('/')}/chat/completions"
        payload = {
            "model": self.config.model,
            "messages": messages,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }
        start_time = time.time()
        try:
            response = requests.post(
                url,
                headers=self.headers,
                json=payload,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
            if not data.get("choices"):
                raise ValueError(f"Unexpected response format: {data}")

            choice = data["choices"][0]
            usage = data.get("usage") or {}
            return LLMResponse(
                content=(choice.get("message", {}).get("content") or "").strip(),
                finish_reason=choice.get("finish_reason") or "stop",
                usage={
                    "prompt_tokens": usage.get("prompt_tokens", 0),
                    "completion_tokens": usage.get("completion_tokens", 0),
                    "total_tokens": usage.get("total_tokens", 0),
                },
                time_taken=time.time() - start_time,
            )
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"LLM request failed: {e}")
            return LLMResponse(
                finish_reason="error",
                time_taken=time.time() - start_time,
                error=str(e),
            )


def is_llm_available(cfg: Optional[Dict] = None) -> bool:
    return bool(LLMConfig.from_config(cfg).api_key)


def build_prompt(code: str, file_path: str) -> str:
    return f"Analyze this code file:\n\nFile: {file_path}\n\n```\n{code[:MAX_PROMPT_CODE_CHARS]}\n```\n"


def parse_review(content: str) -> ReviewResult:
    """Turn a model reply into a review; non-JSON replies become a raw suggestion."""
    match = _JSON_OBJECT_RE.search(content)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            issues = []
            for item in parsed.get("issues") or []:
                if not isinstance(item, dict):
                    continue
                severity = item.get("severity")
                issues.append(
                    ReviewIssue(
                        severity=severity if severity in {s.value for s in Severity} else Severity.INFO,
                        description=str(item.get("description") or ""),
                        location=item.get("location"),
                        fix=item.get("fix"),
                    )
                )
            return ReviewResult(
                summary=parsed.get("summary") or "LLM analysis complete",
                issues=issues,
                suggestions=[str(s) for s in parsed.get("suggestions") or []],
                architectural_notes=[str(n) for n in parsed.get("architecturalNotes") or []],
                source="llm",
            )

    return ReviewResult(summary=content[:200], suggestions=[content], source="llm")


def template_review(code: str, file_path: str) -> ReviewResult:
    """Heuristic review used when no model is configured or the call fails."""
    lines = code.split("\n")
    issues: List[ReviewIssue] = []
    suggestions: List[str] = []
    notes: List[str] = []

    function_count = len(_FUNCTION_RE.findall(code))
    if function_count > 10:
        suggestions.append(f"File has {function_count} functions, consider splitting into smaller modules")

    max_indent = max((len(line) - len(line.lstrip()) for line in lines), default=0)
    if max_indent > 16:
        issues.append(
            ReviewIssue(
                severity=Severity.WARNING,
                description=f"Deep nesting detected ({max_indent // 2} levels), consider extracting helper functions",
            )
        )

    in_function = False
    start = 0
    depth = 0
    for i, line in enumerate(lines):
        if not in_function and _FUNCTION_START_RE.search(line):
            in_function = True
            start = i
            depth = 0
        if in_function:
            depth += line.count("{") - line.count("}")
            if depth <= 0 and i > start:
                length = i - start
                if length > 50:
                    issues.append(
                        ReviewIssue(
                            severity=Severity.INFO,
                            description=f"Long function (~{length} lines) starting at line {start + 1}",
                            location=f"line {start + 1}",
                        )
                    )
                in_function = False

    imports = [line for line in lines if line.strip().startswith("import ")]
    if len(imports) > 15:
        notes.append(f"File imports from {len(imports)} modules, high coupling, consider if all are needed")

    any_count = len(_ANY_RE.findall(code))
    if any_count:
        suggestions.append(f"Found {any_count} uses of 'any' type, add specific types for better safety")

    if not issues and not suggestions:
        summary = f"{file_path} looks clean, no significant issues detected"
    else:
        summary = f"Found {len(issues)} issue(s) and {len(suggestions)} suggestion(s) in {file_path}"

    return ReviewResult(summary=summary, issues=issues, suggestions=suggestions, architectural_notes=notes)


def review_code(
    code: str,
    file_path: str,
    client: Optional[ChatClient] = None,
    cfg: Optional[Dict] = None,
) -> ReviewResult:
    if client is None and is_llm_available(cfg):
        client = ChatClient(LLMConfig.from_config(cfg))

    if client is not None:
        response = client.chat(SYSTEM_PROMPT, build_prompt(code, file_path))
        if response.content:
            return parse_review(response.content)
        logger.info(f"Falling back to template review for {file_path}")

    return template_review(code, file_path)
