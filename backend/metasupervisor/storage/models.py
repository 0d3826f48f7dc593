"""SQLAlchemy models."""

from __future__ import annotations

import struct
from typing import List

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, LargeBinary, String, Text
from sqlalchemy.sql import func

from .database import Base

_LENGTH = struct.Struct("<I")


def encode_embedding(vec: List[float]) -> bytes:
    """Pack a vector as a length prefix followed by little-endian float64s."""
    return _LENGTH.pack(len(vec)) + struct.pack(f"<{len(vec)}d", *vec)


def decode_embedding(blob: bytes | None) -> List[float]:
    """Inverse of :func:`encode_embedding`; empty or short blobs give ``[]``."""
    if not blob or len(blob) < _LENGTH.size:
        return []
    (n,) = _LENGTH.unpack_from(blob)
    expected = _LENGTH.size + 8 * n
    if len(blob) != expected:
        raise ValueError(f"Embedding blob has {len(blob)} bytes, expected {expected}")
    return list(struct.unpack_from(f"<{n}d", blob, _LENGTH.size))


class CodeChunkRow(Base):
    """One indexed chunk of one file of one project."""

    __tablename__ = "code_chunks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_path = Column(String(1024), nullable=False, index=True)
    chunk_content = Column(Text, nullable=False)
    chunk_type = Column(String(16), nullable=False)
    chunk_name = Column(String(255))
    start_line = Column(Integer, nullable=False)
    end_line = Column(Integer, nullable=False)
    embedding = Column(LargeBinary)
    project_root = Column(String(1024), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class VectorizerStateRow(Base):
    """Single-row table holding the serialized TF-IDF corpus state."""

    __tablename__ = "vectorizer_state"
    __table_args__ = (CheckConstraint("id = 1", name="ck_vectorizer_state_singleton"),)

    id = Column(Integer, primary_key=True)
    version = Column(Integer, nullable=False)
    state = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
