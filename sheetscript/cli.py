from __future__ import annotations

import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from sheetscript.config import StoryFileSetting, settings
from sheetscript.errors import SheetScriptError
from sheetscript.modules.pipeline.schemas import CompileRunResult, DialogueDatabase
from sheetscript.modules.pipeline.service import run_compilation

app = typer.Typer(help="Compile spreadsheet story scripts into dialogue graphs")


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=str(level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


def parse_story_option(value: str) -> StoryFileSetting:
    path, sep, title = value.rpartition("=")
    if not sep or not path.strip() or not title.strip():
        raise typer.BadParameter(f"--story expects PATH=TITLE, got '{value}'")
    return StoryFileSetting(path=path.strip(), title=title.strip())


def load_previous_database(path: Path) -> DialogueDatabase | None:
    if not path.exists():
        return None
    try:
        return DialogueDatabase.model_validate_json(path.read_text(encoding="utf-8"))
    except (ValidationError, OSError) as exc:
        typer.echo(f"warning: ignoring unreadable database {path}: {exc}")
        return None


def write_outputs(result: CompileRunResult, output_dir: Path) -> tuple[Path, Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    database_path = settings.database_path(output_dir)
    catalog_path = settings.catalog_path(output_dir)
    database_path.write_text(result.database.model_dump_json(indent=2), encoding="utf-8")
    catalog_path.write_text(result.catalog.model_dump_json(indent=2), encoding="utf-8")
    return database_path, catalog_path


def _print_diagnostics(result: CompileRunResult, *, verbose: bool) -> None:
    for entry in result.diagnostics:
        if verbose or entry.level != "INFO":
            typer.echo(entry.format())


@app.command("compile")
def compile_command(
    root: Path | None = typer.Option(None, "--root", help="Directory the sheet paths are relative to"),
    output_dir: Path | None = typer.Option(None, "--output", help="Directory for the compiled JSON"),
    story: list[str] | None = typer.Option(None, "--story", help="Story sheet as PATH=TITLE; repeatable"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compile and report without writing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print INFO diagnostics too"),
) -> None:
    configure_logging("DEBUG" if verbose else None)
    active = settings
    if story:
        active = settings.model_copy(update={"story_files": [parse_story_option(value) for value in story]})
    target_dir = Path(output_dir or active.output_dir)
    sources = active.compile_sources(root)

    try:
        result = run_compilation(
            sources,
            previous=load_previous_database(active.database_path(target_dir)),
            separator=active.field_separator,
            encoding=active.source_encoding,
        )
    except SheetScriptError as exc:
        typer.echo(f"error: {exc.message}")
        raise typer.Exit(code=1) from exc

    _print_diagnostics(result, verbose=verbose)
    node_count = sum(len(graph.nodes) for graph in result.database.documents)
    typer.echo(
        f"documents: {len(result.database.documents)} rows: {result.total_rows} "
        f"nodes: {node_count} cross_links: {result.cross_links_added}"
    )
    if not dry_run:
        database_path, catalog_path = write_outputs(result, target_dir)
        typer.echo(f"database: {database_path}")
        typer.echo(f"catalog: {catalog_path}")
    if result.status == "ok_with_warnings":
        typer.echo("completed with warnings")
    else:
        typer.echo("ok")


@app.command("inspect")
def inspect_command(
    database: Path = typer.Argument(..., help="Compiled database JSON"),
    document: str | None = typer.Option(None, "--document", help="Only show this document title"),
) -> None:
    loaded = load_previous_database(database)
    if loaded is None:
        typer.echo(f"error: cannot read database {database}")
        raise typer.Exit(code=1)

    graphs = loaded.documents
    if document:
        selected = loaded.document(document)
        if selected is None:
            typer.echo(f"error: no document titled '{document}'")
            raise typer.Exit(code=1)
        graphs = [selected]

    for graph in graphs:
        typer.echo(f"[{graph.document_id}] {graph.title} (conversant {graph.conversant_id})")
        for node in graph.nodes:
            label = node.title or (node.body_text.splitlines() or [""])[0]
            targets = ", ".join(f"{edge.destination_document}:{edge.destination_node}" for edge in node.outgoing_edges)
            typer.echo(f"  {node.local_id:>4} actor={node.speaker_actor_id} {label!r} -> [{targets}]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
