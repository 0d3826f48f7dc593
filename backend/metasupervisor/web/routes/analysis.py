"""Health, analysis and review routes."""

from fastapi import APIRouter, Depends

from ... import __version__
from ...store import SemanticStore
from ...supervisor import ReviewResult, RuleSupervisor, SemanticSupervisor, is_llm_available, review_code, summarize
from ..deps import get_store
from ..schemas import AnalyzeRequest, AnalyzeResponse, HealthResponse, ReviewRequest

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(store: SemanticStore = Depends(get_store)):
    return HealthResponse(status="ok", version=__version__, llm_available=is_llm_available(store.cfg))


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(request: AnalyzeRequest, store: SemanticStore = Depends(get_store)):
    """Run the rule scanner and the similarity engine over one file's content."""
    findings = RuleSupervisor().analyze_code(request.code, request.file_path)
    findings.extend(SemanticSupervisor.from_config(store).analyze_file(request.code, request.file_path))
    return AnalyzeResponse(findings=findings, summary=summarize(findings))


@router.post("/review", response_model=ReviewResult)
def review(request: ReviewRequest, store: SemanticStore = Depends(get_store)):
    return review_code(request.code, request.file_path, cfg=store.cfg)
