"""
Command-line interface for meta-supervisor.

Indexes projects into the semantic store, searches them, and supervises
files with the rule scanner and the similarity engine.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .core import ChangeType, FileChange, SearchResult
from .store import SemanticStore
from .supervisor import Finding, RuleSupervisor, SemanticSupervisor, Severity, summarize
from .utils import read_source

console = Console()

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


def _store(ctx: click.Context) -> SemanticStore:
    if ctx.obj.get("store") is None:
        ctx.obj["store"] = SemanticStore.open(ctx.obj.get("db"))
    return ctx.obj["store"]


def render_findings(findings: List[Finding]) -> None:
    if not findings:
        console.print("[green]No findings[/green]")
        return

    table = Table(title=f"{len(findings)} finding(s)")
    table.add_column("Severity")
    table.add_column("Rule")
    table.add_column("Location")
    table.add_column("Message")
    for f in findings:
        location = f"{f.file}:{f.line}" if f.line else f.file
        style = SEVERITY_STYLES[f.severity]
        table.add_row(f"[{style}]{f.severity.value}[/{style}]", f.rule, location, f.message)
    console.print(table)

    counts = summarize(findings)
    console.print(
        f"critical: {counts['critical']}  warning: {counts['warning']}  info: {counts['info']}"
    )


def render_hits(hits: List[SearchResult]) -> None:
    if not hits:
        console.print("[yellow]No matches[/yellow]")
        return

    table = Table()
    table.add_column("Score", justify="right")
    table.add_column("Location")
    table.add_column("Chunk")
    for hit in hits:
        chunk = hit.chunk
        label = f"{chunk.type.value} {chunk.name}" if chunk.name else chunk.type.value
        table.add_row(
            f"{hit.similarity:.3f}",
            f"{chunk.file_path}:{chunk.start_line}-{chunk.end_line}",
            label,
        )
    console.print(table)


def supervise(store: SemanticStore, changes: List[FileChange]) -> List[Finding]:
    """Run every supervisor over a batch of file changes."""
    findings = RuleSupervisor().analyze_changes(changes)
    semantic = SemanticSupervisor.from_config(store)
    for change in changes:
        if change.type == ChangeType.UNLINK or not change.content:
            continue
        findings.extend(semantic.analyze_file(change.content, change.relative_path))
    return findings


@click.group()
@click.option("--db", envvar="META_SUPERVISOR_DB", help="Database path or URL")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(__version__)
@click.pass_context
def cli(ctx, db, verbose):
    """Semantic code indexing and supervision."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["db"] = db


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def index(ctx, path):
    """Index every source file under PATH."""
    store = _store(ctx)
    with console.status("Indexing...") as status:
        result = store.index_project(path, on_progress=lambda msg: status.update(msg))
    console.print(
        f"[green]✓ Indexed {result.files_indexed} files -> {result.chunks_stored} chunks[/green]"
    )


@cli.command()
@click.argument("query")
@click.option("--limit", "-n", type=click.IntRange(min=1), default=10, show_default=True)
@click.option("--project", help="Restrict results to one project root")
@click.pass_context
def search(ctx, query, limit, project):
    """Search indexed code for QUERY."""
    if project:
        project = str(Path(project).resolve())
    render_hits(_store(ctx).search(query, limit, project_root=project))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def analyze(ctx, file):
    """Analyze FILE with the rule scanner and the similarity engine."""
    content = read_source(file)
    if content is None:
        raise click.ClickException(f"Cannot read {file} as text")
    change = FileChange(type=ChangeType.CHANGE, path=str(file), relative_path=str(file), content=content)
    findings = supervise(_store(ctx), [change])
    render_findings(findings)
    if any(f.severity == Severity.CRITICAL for f in findings):
        ctx.exit(1)


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def watch(ctx, directory):
    """Watch DIRECTORY and report findings as files change."""
    from .watcher import FileWatcher

    store = _store(ctx)
    debounce = float(store.cfg.get("watch", {}).get("debounce_seconds", 0.5))

    def on_changes(changes: List[FileChange]) -> None:
        names = ", ".join(f"{c.type.value} {c.relative_path}" for c in changes)
        console.print(f"[dim]{names}[/dim]")
        render_findings(supervise(store, changes))

    watcher = FileWatcher(directory, on_changes, debounce=debounce)
    watcher.start()
    console.print(f"Watching [bold]{watcher.root}[/bold] (Ctrl+C to stop)")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()


@cli.command()
@click.pass_context
def stats(ctx):
    """Show store statistics."""
    s = _store(ctx).stats()
    table = Table(show_header=False)
    table.add_row("Chunks", str(s.total_chunks))
    table.add_row("Files", str(s.total_files))
    table.add_row("Vocabulary", str(s.vocabulary_size))
    table.add_row("Projects", "\n".join(s.project_roots) or "-")
    console.print(table)


@cli.command(name="reset-corpus")
@click.confirmation_option(prompt="Reset vocabulary and document frequencies?")
@click.pass_context
def reset_corpus(ctx):
    """Forget the vectorizer corpus; stored chunks are kept."""
    _store(ctx).reset_corpus()
    console.print("[green]✓ Corpus reset[/green]")


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
@click.pass_context
def serve(ctx, host, port):
    """Run the HTTP API."""
    import uvicorn

    from .web import create_app

    uvicorn.run(create_app(_store(ctx)), host=host, port=port)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
