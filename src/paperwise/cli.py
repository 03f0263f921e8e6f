"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from paperwise.analysis.analyzer import SuggestionAnalyzer
from paperwise.analysis.stats import document_stats, readability_level
from paperwise.cache.analysis_cache import AnalysisCache
from paperwise.clients.llm_client import LLMClient
from paperwise.config import load_config
from paperwise.document.model import RichDocument
from paperwise.engine.store import SuggestionStore
from paperwise.errors import AnalysisFailed
from paperwise.models.analysis import AnalysisSettings

app = typer.Typer(
    name="paperwise",
    help="AI writing suggestions anchored to your document",
    no_args_is_help=True,
)
console = Console()

CATEGORY_COLORS = {
    "spelling": "red",
    "grammar": "yellow",
    "style": "blue",
    "clarity": "magenta",
    "tone": "cyan",
}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_document(file: Path, block_separator: str) -> RichDocument:
    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)

    suffix = file.suffix.lower()
    if suffix == ".docx":
        return RichDocument.from_docx(file, block_separator=block_separator)
    if suffix == ".json":
        data = json.loads(file.read_text(encoding="utf-8"))
        return RichDocument.from_prosemirror(data, block_separator=block_separator)
    return RichDocument.from_text(file.read_text(encoding="utf-8"), block_separator=block_separator)


def _print_stats(text: str) -> None:
    stats = document_stats(text)
    level, description = readability_level(stats.flesch_kincaid)
    console.print(
        Panel(
            f"Words: {stats.words} | Characters: {stats.characters} | "
            f"Reading time: {stats.reading_time} min\n"
            f"Grade: {stats.flesch_kincaid} ({level}, {description}) | "
            f"Reading ease: {stats.flesch_reading_ease}",
            title="Document",
        )
    )


@app.command()
def check(
    file: Path = typer.Argument(help="Document to check (.txt, .md, .json, .docx)"),
    formality: str = typer.Option(None, "--formality", help="casual | neutral | formal"),
    audience: str = typer.Option(None, "--audience", help="general | knowledgeable | expert"),
    domain: str = typer.Option(None, "--domain", help="academic | business | general | email | casual | creative"),
    apply_all: bool = typer.Option(False, "--apply-all", help="Accept every suggestion and write the result"),
    output: Path = typer.Option(None, "--output", "-o", help="Where to write corrected text (with --apply-all)"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Skip the analysis cache"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Analyze a document once and list the suggestions."""
    _setup_logging(verbose)
    config = load_config()
    document = _load_document(file, config.document.block_separator)
    text = document.text

    if len(text.strip()) < config.scheduler.min_text_length:
        console.print(
            f"[yellow]Text too short to analyze (minimum {config.scheduler.min_text_length} characters).[/yellow]"
        )
        raise typer.Exit(1)
    if len(text) > config.scheduler.max_text_length:
        console.print(
            f"[red]Text too long: {len(text)} characters (maximum {config.scheduler.max_text_length}).[/red]"
        )
        raise typer.Exit(1)

    defaults = config.analysis
    try:
        settings = AnalysisSettings(
            formality=formality or defaults.formality,
            audience=audience or defaults.audience,
            domain=domain or defaults.domain,
        )
    except ValueError as e:
        console.print(f"[red]Invalid analysis settings: {e}[/red]")
        raise typer.Exit(1)

    if verbose:
        console.print(f"[dim]File: {file} ({len(text)} chars)[/dim]")
        console.print(
            f"[dim]Settings: {settings.formality.value}/{settings.audience.value}/{settings.domain.value}[/dim]"
        )

    cache = None
    if config.cache.enabled and not no_cache:
        cache = AnalysisCache(db_path=config.cache.resolved_db_path, ttl_days=config.cache.ttl_days)

    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    analyzer = SuggestionAnalyzer(
        llm,
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
        cache=cache,
    )

    with console.status("Analyzing..."):
        try:
            entries = asyncio.run(analyzer(text, settings))
        except AnalysisFailed as e:
            console.print(f"[red]Analysis failed: {e}[/red]")
            raise typer.Exit(1)

    store = SuggestionStore()
    store.merge(entries, text)

    if verbose:
        tokens = llm.get_token_summary()
        console.print(f"[dim]Tokens: {tokens['input']} in / {tokens['output']} out[/dim]")

    if not len(store):
        console.print("[green]No suggestions. Looks good![/green]")
    else:
        table = Table(title=f"Suggestions ({len(store)})")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Type")
        table.add_column("Original")
        table.add_column("Suggestion", style="green")
        table.add_column("Why", style="dim")
        for i, s in enumerate(store.list(), 1):
            color = CATEGORY_COLORS.get(s.category.value, "white")
            table.add_row(
                str(i),
                f"[{color}]{s.category.value}[/{color}]",
                s.original_text,
                s.replacement_text,
                s.explanation,
            )
        console.print(table)

    _print_stats(text)

    if apply_all and len(store):
        accepted = 0
        for applied in store.accept_many([s.id for s in store.list()]):
            try:
                document.apply(applied)
            except ValueError as e:
                console.print(f"[yellow]Skipped suggestion: {e}[/yellow]")
                continue
            accepted += 1

        if output is None:
            output = file.with_name(f"{file.stem}.corrected.txt")
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(document.text, encoding="utf-8")
        console.print(f"\n[green]Applied {accepted} suggestion(s): {output}[/green]")


@app.command()
def stats(
    file: Path = typer.Argument(help="Document (.txt, .md, .json, .docx)"),
) -> None:
    """Show word count, reading time and readability."""
    config = load_config()
    document = _load_document(file, config.document.block_separator)
    _print_stats(document.text)


@app.command("cache-clear")
def cache_clear() -> None:
    """Remove every cached analysis result."""
    config = load_config()
    cache = AnalysisCache(db_path=config.cache.resolved_db_path, ttl_days=config.cache.ttl_days)
    removed = cache.clear()
    console.print(f"[green]Removed {removed} cached analysis result(s).[/green]")


if __name__ == "__main__":
    app()
