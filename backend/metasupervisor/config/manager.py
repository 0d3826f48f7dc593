"""Configuration management for meta-supervisor."""

from __future__ import annotations

import copy
import os
from typing import Dict, List


DEFAULT_SOURCE_EXTENSIONS: List[str] = [
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs",
]

DEFAULT_IGNORED_DIRS: List[str] = [
    "node_modules",
    "dist",
    "build",
]

DEFAULT_CONFIG: Dict = {
    "database": {
        "url": "meta-supervisor.db",
    },
    "embedding": {
        "backend": "tfidf",
    },
    "indexing": {
        "extensions": DEFAULT_SOURCE_EXTENSIONS,
        "ignored_dirs": DEFAULT_IGNORED_DIRS,
        "max_depth": 5,
    },
    "search": {
        "limit": 10,
        "min_similarity": 0.01,
        # Candidate pool size used for duplication lookups
        "similar_pool": 20,
    },
    "semantic": {
        "duplication_threshold": 0.7,
        "pattern_threshold": 0.5,
        "min_chunk_lines": 3,
    },
    "watch": {
        "debounce_seconds": 0.5,
    },
    "llm": {
        "api_base": "https://api.openai.com/v1",
        "api_key": None,
        "model": "gpt-4o-mini",
        "timeout": 30,
        "max_tokens": 2048,
        "temperature": 0.3,
    },
}


def database_url(value: str) -> str:
    """Turn a bare file path into a SQLite URL; leave real URLs untouched.

    Examples:
        'meta-supervisor.db' -> 'sqlite:///meta-supervisor.db'
        'postgresql://u:p@db/ms' -> 'postgresql://u:p@db/ms'
    """
    value = value.strip()
    if "://" in value:
        return value
    if value == ":memory:":
        return "sqlite://"
    return f"sqlite:///{value}"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def load_config(db_path: str | None = None) -> Dict:
    """Load configuration.

    Returns the default configuration with environment overrides applied.
    An explicit ``db_path`` wins over ``META_SUPERVISOR_DB``.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    db = db_path or os.getenv("META_SUPERVISOR_DB") or config["database"]["url"]
    config["database"]["url"] = database_url(db)

    semantic = config["semantic"]
    semantic["duplication_threshold"] = _env_float(
        "META_SUPERVISOR_DUPLICATION_THRESHOLD", semantic["duplication_threshold"]
    )
    semantic["pattern_threshold"] = _env_float(
        "META_SUPERVISOR_PATTERN_THRESHOLD", semantic["pattern_threshold"]
    )

    llm = config["llm"]
    llm["api_base"] = os.getenv("LLM_API_BASE", llm["api_base"]).rstrip("/")
    llm["api_key"] = os.getenv("LLM_API_KEY") or None
    llm["model"] = os.getenv("LLM_MODEL", llm["model"])

    return config
