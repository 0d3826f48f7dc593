"""File utility functions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def is_binary_file(path: Path) -> bool:
    """Check if file is binary by looking for null bytes."""
    try:
        with path.open("rb") as f:
            sample = f.read(2048)
        return b"\x00" in sample
    except OSError:
        return True


def read_source(path: Path) -> Optional[str]:
    """Read a UTF-8 source file, or None when it is binary or unreadable."""
    if is_binary_file(path):
        logger.debug(f"Skipping binary file: {path}")
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping unreadable file {path}: {e}")
        return None


def is_hidden(name: str) -> bool:
    return name.startswith(".")
