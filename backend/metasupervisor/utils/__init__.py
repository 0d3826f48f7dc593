"""Utility functions for meta-supervisor."""

from .file_utils import (
    is_binary_file,
    is_hidden,
    read_source,
)

__all__ = [
    "is_binary_file",
    "is_hidden",
    "read_source",
]
