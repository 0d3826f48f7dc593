"""Shared test fixtures for meta-supervisor."""

from __future__ import annotations

from pathlib import Path

import pytest

from metasupervisor.config import load_config
from metasupervisor.storage import SqlChunkRepository
from metasupervisor.store import SemanticStore

AUTH_TS = """import { hash } from "./crypto";

export function validatePassword(password: string) {
  if (password.length < 8) {
    return false;
  }
  return true;
}
"""

USERS_TS = """async function loadUser(id) {
  try {
    const user = await db.find(id);
    return user;
  } catch (err) {
    return null;
  }
}
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's environment out of configuration."""
    for name in (
        "META_SUPERVISOR_DB",
        "META_SUPERVISOR_DUPLICATION_THRESHOLD",
        "META_SUPERVISOR_PATTERN_THRESHOLD",
        "LLM_API_BASE",
        "LLM_API_KEY",
        "LLM_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def memory_store() -> SemanticStore:
    """A store backed by an in-memory SQLite database."""
    return SemanticStore(SqlChunkRepository("sqlite://"), load_config(":memory:"))


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """A small TypeScript project with ignored and hidden entries."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "auth.ts").write_text(AUTH_TS)
    (root / "src" / "math.js").write_text(
        "export const add = (a, b) => {\n  return a + b;\n};\n"
    )
    (root / "README.md").write_text("# not code\n")
    (root / "node_modules" / "lib").mkdir(parents=True)
    (root / "node_modules" / "lib" / "index.js").write_text("function hidden() {}\n")
    (root / ".cache").mkdir()
    (root / ".cache" / "x.ts").write_text("function cached() {}\n")
    return root


@pytest.fixture
def users_project(tmp_path: Path) -> Path:
    root = tmp_path / "users"
    root.mkdir()
    (root / "users.js").write_text(USERS_TS)
    return root
