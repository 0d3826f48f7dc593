"""Search and statistics routes."""

from fastapi import APIRouter, Depends

from ...store import SemanticStore
from ..deps import get_store
from ..schemas import SearchHit, SearchRequest, SearchResponse, StatsResponse

router = APIRouter()


@router.post("/search", response_model=SearchResponse)
def search(request: SearchRequest, store: SemanticStore = Depends(get_store)):
    hits = store.search(request.query, request.limit, project_root=request.project_root)
    return SearchResponse(results=[SearchHit.from_result(hit) for hit in hits])


@router.get("/stats", response_model=StatsResponse)
def stats(store: SemanticStore = Depends(get_store)):
    s = store.stats()
    return StatsResponse(
        total_chunks=s.total_chunks,
        total_files=s.total_files,
        project_roots=s.project_roots,
        vocabulary_size=s.vocabulary_size,
    )
