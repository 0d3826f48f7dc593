"""SQLAlchemy chunk storage backend."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import delete, distinct, func, select
from sqlalchemy.orm import sessionmaker

from ..core.models import ChunkType, StoredChunk
from .base import ChunkRepository
from .database import make_engine, make_session_factory
from .models import CodeChunkRow, VectorizerStateRow, decode_embedding, encode_embedding

logger = logging.getLogger(__name__)


def _to_chunk(row: CodeChunkRow, with_embedding: bool = True) -> StoredChunk:
    return StoredChunk(
        id=row.id,
        file_path=row.file_path,
        content=row.chunk_content,
        type=ChunkType(row.chunk_type),
        name=row.chunk_name,
        start_line=row.start_line,
        end_line=row.end_line,
        project_root=row.project_root,
        embedding=decode_embedding(row.embedding) if with_embedding else [],
        created_at=row.created_at,
    )


class SqlChunkRepository(ChunkRepository):

    def __init__(self, url: str, batch_size: int = 500):
        self.url = url
        self.batch_size = batch_size
        self.engine = make_engine(url)
        self.Session: sessionmaker = make_session_factory(self.engine)

    def replace_project(self, project_root: str, chunks: List[StoredChunk]) -> int:
        rows = [
            CodeChunkRow(
                file_path=c.file_path,
                chunk_content=c.content,
                chunk_type=c.type.value,
                chunk_name=c.name,
                start_line=c.start_line,
                end_line=c.end_line,
                embedding=encode_embedding(c.embedding),
                project_root=project_root,
            )
            for c in chunks
        ]

        with self.Session.begin() as session:
            result = session.execute(
                delete(CodeChunkRow).where(CodeChunkRow.project_root == project_root)
            )
            logger.info(f"Cleared {result.rowcount} old chunks for project: {project_root}")
            for i in range(0, len(rows), self.batch_size):
                session.add_all(rows[i:i + self.batch_size])
                session.flush()

        logger.info(f"Stored {len(rows)} chunks for project: {project_root}")
        return len(rows)

    def iter_chunks(self, project_root: Optional[str] = None) -> Iterable[StoredChunk]:
        stmt = select(CodeChunkRow).order_by(CodeChunkRow.id)
        if project_root:
            stmt = stmt.where(CodeChunkRow.project_root == project_root)

        with self.Session() as session:
            for row in session.execute(stmt).scalars():
                try:
                    yield _to_chunk(row)
                except ValueError as e:
                    logger.warning(f"Skipping chunk {row.id} with unreadable embedding: {e}")

    def file_chunks(self, file_path: str) -> List[StoredChunk]:
        stmt = (
            select(CodeChunkRow)
            .where(CodeChunkRow.file_path == file_path)
            .order_by(CodeChunkRow.start_line)
        )
        with self.Session() as session:
            return [_to_chunk(r, with_embedding=False) for r in session.execute(stmt).scalars()]

    def stats(self) -> Tuple[int, int, List[str]]:
        with self.Session() as session:
            total_chunks = session.execute(select(func.count(CodeChunkRow.id))).scalar_one()
            total_files = session.execute(
                select(func.count(distinct(CodeChunkRow.file_path)))
            ).scalar_one()
            projects = list(
                session.execute(
                    select(CodeChunkRow.project_root).distinct().order_by(CodeChunkRow.project_root)
                ).scalars()
            )
        return total_chunks, total_files, projects

    def clear(self) -> None:
        with self.Session.begin() as session:
            session.execute(delete(CodeChunkRow))
        logger.info("Deleted all stored chunks")

    def load_state(self) -> Optional[Tuple[int, str]]:
        with self.Session() as session:
            row = session.get(VectorizerStateRow, 1)
            if row is None:
                return None
            return row.version, row.state

    def save_state(self, version: int, state: str) -> None:
        with self.Session.begin() as session:
            session.merge(VectorizerStateRow(id=1, version=version, state=state))
        logger.debug(f"Saved vectorizer state ({len(state)} bytes)")
