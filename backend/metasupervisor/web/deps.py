"""Shared route dependencies."""

from fastapi import Request

from ..store import SemanticStore


def get_store(request: Request) -> SemanticStore:
    return request.app.state.store
