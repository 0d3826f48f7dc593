"""Main FastAPI application."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..store import SemanticStore
from .routes import analysis, indexing, search

logger = logging.getLogger(__name__)


def create_app(store: Optional[SemanticStore] = None) -> FastAPI:
    """Build the API around ``store`` (opened from configuration when omitted)."""
    app = FastAPI(title="meta-supervisor", version=__version__)
    app.state.store = store or SemanticStore.open()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_router = APIRouter(prefix="/api")
    api_router.include_router(analysis.router)
    api_router.include_router(indexing.router)
    api_router.include_router(search.router)
    app.include_router(api_router)

    logger.info(f"API ready, store at {app.state.store.cfg['database']['url']}")
    return app
