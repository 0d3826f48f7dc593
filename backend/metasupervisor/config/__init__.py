"""Configuration management for meta-supervisor."""

from .manager import (
    DEFAULT_CONFIG,
    DEFAULT_SOURCE_EXTENSIONS,
    DEFAULT_IGNORED_DIRS,
    database_url,
    load_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_SOURCE_EXTENSIONS",
    "DEFAULT_IGNORED_DIRS",
    "database_url",
    "load_config",
]
