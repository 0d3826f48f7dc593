from pydantic import BaseModel, Field
from typing import Optional, List, Dict

from ..core import SearchResult
from ..supervisor import Finding


class HealthResponse(BaseModel):
    status: str
    version: str
    llm_available: bool


class AnalyzeRequest(BaseModel):
    code: str
    file_path: str


class AnalyzeResponse(BaseModel):
    findings: List[Finding]
    summary: Dict[str, int]


class ReviewRequest(AnalyzeRequest):
    pass


class IndexRequest(BaseModel):
    repo_path: str


class IndexResponse(BaseModel):
    repo_path: str
    files_indexed: int
    chunks_stored: int


class SearchRequest(BaseModel):
    query: str
    limit: int = Field(10, ge=1, le=100)
    project_root: Optional[str] = None


class SearchHit(BaseModel):
    file_path: str
    project_root: str
    type: str
    name: Optional[str]
    start_line: int
    end_line: int
    similarity: float
    content: str

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchHit":
        chunk = result.chunk
        return cls(
            file_path=chunk.file_path,
            project_root=chunk.project_root,
            type=chunk.type.value,
            name=chunk.name,
            start_line=chunk.start_line,
            end_line=chunk.end_line,
            similarity=result.similarity,
            content=chunk.content,
        )


class SearchResponse(BaseModel):
    results: List[SearchHit]


class StatsResponse(BaseModel):
    total_chunks: int
    total_files: int
    project_roots: List[str]
    vocabulary_size: int
