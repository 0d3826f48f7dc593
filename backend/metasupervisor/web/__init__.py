"""HTTP API for meta-supervisor."""

from .app import create_app

__all__ = ["create_app"]
