"""Indexing routes with SSE support."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from pathlib import Path
from typing import AsyncIterator, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from sse_starlette.sse import EventSourceResponse

from ...store import SemanticStore
from ..deps import get_store
from ..schemas import IndexRequest, IndexResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Progress per resolved project root
indexing_progress: Dict[str, Dict] = {}

FINISHED = ("indexed", "error")

# Seconds a finished run stays readable without an SSE client
PROGRESS_TTL = 300.0


def prune_finished(now: float | None = None) -> None:
    now = time.monotonic() if now is None else now
    for key, progress in list(indexing_progress.items()):
        finished_at = progress.get("finished_at")
        if finished_at is not None and now - finished_at > PROGRESS_TTL:
            del indexing_progress[key]


def _resolve(repo_path: str) -> Path:
    path = Path(repo_path).expanduser().resolve()
    if not path.is_dir():
        raise HTTPException(status_code=404, detail=f"Directory not found: {repo_path}")
    return path


@router.post("/index", response_model=IndexResponse)
async def start_indexing(request: IndexRequest, store: SemanticStore = Depends(get_store)):
    root = _resolve(request.repo_path)
    key = str(root)
    prune_finished()
    if indexing_progress.get(key, {}).get("status") == "indexing":
        raise HTTPException(status_code=400, detail="Project is already being indexed")

    progress = {
        "status": "indexing",
        "message": "Starting",
        "files_indexed": 0,
        "chunks_stored": 0,
        "error": None,
        "finished_at": None,
    }
    indexing_progress[key] = progress

    def on_progress(message: str) -> None:
        progress["message"] = message

    try:
        result = await run_in_threadpool(store.index_project, root, on_progress)
    except Exception as e:
        logger.exception(f"Indexing {key} failed")
        progress.update(status="error", error=str(e), finished_at=time.monotonic())
        raise HTTPException(status_code=500, detail=f"Indexing failed: {e}") from e

    progress.update(
        status="indexed",
        files_indexed=result.files_indexed,
        chunks_stored=result.chunks_stored,
        finished_at=time.monotonic(),
    )
    return IndexResponse(repo_path=key, files_indexed=result.files_indexed, chunks_stored=result.chunks_stored)


async def progress_events(key: str, interval: float = 1.0) -> AsyncIterator[Dict]:
    """Yield progress snapshots for ``key`` until indexing finishes."""
    while True:
        progress = dict(indexing_progress.get(key, {}))
        yield {"event": "progress", "data": json.dumps({"repo_path": key, **progress})}

        if progress.get("status") in FINISHED or not progress:
            indexing_progress.pop(key, None)
            break

        await asyncio.sleep(interval)


@router.get("/index/progress")
async def index_progress(repo_path: str):
    """SSE endpoint for real-time indexing progress."""
    key = str(_resolve(repo_path))
    prune_finished()
    if key not in indexing_progress:
        raise HTTPException(status_code=404, detail="No indexing run for this project")
    return EventSourceResponse(progress_events(key))
