"""Tests for the heuristic chunker."""

from __future__ import annotations

from metasupervisor.core import ChunkType, chunk_code
from metasupervisor.core.chunking import find_block_end, find_import_block, find_statement_end


def test_single_function():
    src = "function foo() {\n  if (x) {\n    y();\n  }\n}"
    chunks = chunk_code(src)
    assert len(chunks) == 1
    c = chunks[0]
    assert c.type == ChunkType.FUNCTION
    assert c.name == "foo"
    assert (c.start_line, c.end_line) == (1, 5)
    assert c.content == src


def test_import_block_is_one_chunk():
    src = (
        'import fs from "fs";\n'
        "// helpers\n"
        "import {\n"
        "  join,\n"
        "  resolve,\n"
        '} from "path";\n'
        "\n"
        "export function main() {\n"
        "  return join();\n"
        "}\n"
    )
    chunks = chunk_code(src)
    assert [c.type for c in chunks] == [ChunkType.IMPORT, ChunkType.FUNCTION]
    imports = chunks[0]
    assert imports.name == "imports"
    assert (imports.start_line, imports.end_line) == (1, 6)
    assert chunks[1].name == "main"
    assert chunks[1].start_line == 8


def test_types_classes_and_arrows():
    src = (
        "export interface User {\n"
        "  id: number;\n"
        "}\n"
        "\n"
        "export abstract class Repo {\n"
        "  find() {}\n"
        "}\n"
        "\n"
        "export const fetchUser = async (id: Id) => {\n"
        "  return repo.find(id);\n"
        "};\n"
        "\n"
        "type Id = string;\n"
    )
    chunks = chunk_code(src)
    summary = [(c.type, c.name) for c in chunks]
    assert summary == [
        (ChunkType.TYPE, "User"),
        (ChunkType.CLASS, "Repo"),
        (ChunkType.FUNCTION, "fetchUser"),
        (ChunkType.TYPE, "Id"),
    ]
    assert chunks[3].start_line == chunks[3].end_line == 13


def test_type_alias_does_not_absorb_following_class():
    chunks = chunk_code("type Id = string;\n\nclass Repo {\n  find() {}\n}\n")
    assert [(c.type, c.name, c.start_line, c.end_line) for c in chunks] == [
        (ChunkType.TYPE, "Id", 1, 1),
        (ChunkType.CLASS, "Repo", 3, 5),
    ]


def test_plain_value_is_a_block_not_a_function():
    chunks = chunk_code("const limit = computeLimit(10);\n")
    assert len(chunks) == 1
    assert chunks[0].type == ChunkType.BLOCK
    assert chunks[0].name == "limit"


def test_export_default_and_list():
    src = "export default {\n  name: 'app',\n};\n\nexport { a, b };\n"
    chunks = chunk_code(src)
    assert [c.type for c in chunks] == [ChunkType.EXPORT, ChunkType.EXPORT]
    assert (chunks[0].start_line, chunks[0].end_line) == (1, 3)
    assert chunks[1].start_line == 5


def test_unbalanced_braces_stop_at_statement_boundary():
    lines = ["function broken() {", "  let x = 1;", "  if (x) {", ""] + ["  more();"] * 100
    chunks = chunk_code("\n".join(lines))
    assert chunks[0].type == ChunkType.FUNCTION
    assert chunks[0].end_line == 2


def test_chunks_are_ordered_and_disjoint():
    src = (
        "const a = 1;\n"
        'import x from "x";\n'
        "function f() {\n"
        "  return a;\n"
        "}\n"
    )
    chunks = chunk_code(src)
    starts = [c.start_line for c in chunks]
    assert starts == sorted(starts)
    for prev, nxt in zip(chunks, chunks[1:]):
        assert prev.end_line < nxt.start_line


def test_empty_source():
    assert chunk_code("") == []


class TestBoundaries:
    def test_statement_end_on_semicolon(self):
        assert find_statement_end(["let a =", "  1 +", "  2;"], 0) == 2

    def test_statement_end_before_blank_line(self):
        assert find_statement_end(["let a = b", "", "next"], 0) == 0
        assert find_statement_end(["let a = b", "  .c()", "", "x"], 0) == 1

    def test_statement_end_within_lookahead(self):
        assert find_statement_end(["x"] * 50, 0, lookahead=30) == 0

    def test_block_end_without_braces(self):
        assert find_block_end(["type A = B;", "const c = 1;"], 0) == 0

    def test_statement_ends_before_a_later_brace(self):
        assert find_block_end(["type A = B;", "", "class C {", "}"], 0) == 0
        assert find_block_end(["const f = g", "", "function h() {", "}"], 0) == 0

    def test_opening_brace_searched_within_lookahead(self):
        lines = ["function f()"] + ["  x"] * 40 + ["{", "}"]
        assert find_block_end(lines, 0, lookahead=30) == 0
        assert find_block_end(["function f()", "{", "}"], 0) == 2

    def test_no_imports(self):
        assert find_import_block(["const a = 1;"]) is None
