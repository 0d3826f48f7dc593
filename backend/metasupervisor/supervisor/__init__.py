"""Supervisors that turn source text into findings."""

from .findings import RULES, Finding, RuleRegistry, Severity, SimilarChunk, summarize
from .rules import RuleSupervisor
from .semantic import SemanticSupervisor
from .llm_client import ChatClient, LLMConfig, ReviewResult, is_llm_available, review_code

__all__ = [
    "RULES",
    "Finding",
    "RuleRegistry",
    "Severity",
    "SimilarChunk",
    "summarize",
    "RuleSupervisor",
    "SemanticSupervisor",
    "ChatClient",
    "LLMConfig",
    "ReviewResult",
    "is_llm_available",
    "review_code",
]
