"""
Cessation RAG CLI - Command Line Interface
"""

import json
import logging
import click
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markdown import Markdown
from rich.progress import Progress, SpinnerColumn, TextColumn
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

console = Console()

# Paths
BASE_DIR = Path(__file__).parent.resolve()
DATA_DIR = BASE_DIR / "data"
CHUNK_STORE_PATH = DATA_DIR / "chunks.json"


def _load_rag(store_path: str, no_embeddings: bool):
    from cessation_rag.server.config import get_settings
    from cessation_rag.server.dependencies import build_rag

    settings = get_settings().model_copy(update={
        "chunk_store_path": Path(store_path),
        "use_embeddings": not no_embeddings,
    })

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console
    ) as progress:
        progress.add_task("Loading search engine...", total=None)
        return build_rag(settings)


def _print_chunks(result, verbose: bool):
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", width=3)
    table.add_column("Citation", style="cyan", width=30)
    table.add_column("Text", width=60)
    table.add_column("Score", justify="right", width=7)
    if verbose:
        table.add_column("K/S/E", justify="right", width=16)

    for i, scored in enumerate(result.chunks, 1):
        text = scored.chunk.content
        row = [
            str(i),
            scored.chunk.get_citation(),
            text[:200] + "..." if len(text) > 200 else text,
            f"{scored.score:.3f}",
        ]
        if verbose:
            b = scored.breakdown
            row.append(f"{b.keyword:.2f}/{b.synonym:.2f}/{b.semantic:.2f}")
        table.add_row(*row)

    console.print(table)


def _print_analysis(analysis):
    console.print(f"[bold cyan]Intent:[/bold cyan] {analysis.intent}")
    console.print(f"[bold cyan]Category:[/bold cyan] {analysis.category.value}  "
                  f"[bold cyan]Complexity:[/bold cyan] {analysis.complexity.value}")
    console.print(f"[bold cyan]Keywords:[/bold cyan] {', '.join(analysis.keywords)}")
    if analysis.expanded_keywords:
        console.print(f"[bold cyan]Expanded:[/bold cyan] {', '.join(analysis.expanded_keywords)}")


@click.group()
@click.version_option(version="1.0.0")
@click.option("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING)")
def cli(log_level: str):
    """Cessation RAG CLI - Smoking-cessation regulation search"""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@cli.command()
@click.argument("question")
@click.option("--store", "-s", default=str(CHUNK_STORE_PATH), help="Chunk store JSON file")
@click.option("--max-chunks", "-k", default=None, type=int, help="Maximum number of context chunks")
@click.option("--no-embeddings", is_flag=True, help="Disable the semantic signal")
@click.option("--verbose", "-v", is_flag=True, help="Show analysis, score breakdown and metrics")
def search(question: str, store: str, max_chunks, no_embeddings: bool, verbose: bool):
    """Retrieve ranked context for a question (no answer generation)."""
    from cessation_rag.errors import AnalysisUnavailable
    from cessation_rag.retrieval import build_quality_report

    rag = _load_rag(store, no_embeddings)

    console.print(Panel.fit(f"[bold]{question}[/bold]", title="❓ Question"))

    try:
        result = rag.search(question, max_chunks)
    except AnalysisUnavailable as e:
        console.print(f"[red]Question analysis unavailable: {e}[/red]")
        raise SystemExit(1)

    if verbose:
        _print_analysis(result.analysis)

    if result.is_empty:
        console.print("\n[yellow]No relevant context found.[/yellow]")
        return

    console.print(f"\n[bold green]📋 {len(result.chunks)} chunks selected:[/bold green]")
    _print_chunks(result, verbose)

    if verbose:
        metrics = result.metrics
        console.print(
            f"\n[dim]Processed {metrics.total_processed} candidates, "
            f"{metrics.unique_results} unique, avg relevance {metrics.average_relevance:.3f}, "
            f"{metrics.execution_time_ms:.0f}ms[/dim]"
        )
        report = build_quality_report(result.quality)
        console.print(f"[dim]Quality score: {report.overall_score:.2f}[/dim]")
        for recommendation in report.recommendations:
            console.print(f"  • {recommendation}")


@cli.command()
@click.argument("question")
@click.option("--store", "-s", default=str(CHUNK_STORE_PATH), help="Chunk store JSON file")
@click.option("--max-chunks", "-k", default=None, type=int, help="Maximum number of context chunks")
@click.option("--no-embeddings", is_flag=True, help="Disable the semantic signal")
def ask(question: str, store: str, max_chunks, no_embeddings: bool):
    """Answer a question from the regulation corpus."""
    rag = _load_rag(store, no_embeddings)

    console.print(Panel.fit(f"[bold]{question}[/bold]", title="❓ Question"))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console
    ) as progress:
        progress.add_task("Searching...", total=None)
        answer = rag.ask(question, max_chunks)

    border = "green" if answer.ok else "yellow"
    console.print(Panel(Markdown(answer.answer), title="💡 Answer", border_style=border))

    if answer.sources:
        console.print("\n[bold yellow]📌 Sources:[/bold yellow]")
        for source in answer.sources:
            console.print(f"  • {source.citation}")


@cli.command()
@click.option("--store", "-s", default=str(CHUNK_STORE_PATH), help="Chunk store JSON file")
@click.option("--no-embeddings", is_flag=True, help="Disable the semantic signal")
def chat(store: str, no_embeddings: bool):
    """Start an interactive chat session."""
    rag = _load_rag(store, no_embeddings)

    console.print(Panel.fit(
        "[bold blue]금연 규정 상담[/bold blue]\n"
        "Ask questions about smoking-cessation laws and guidelines.\n"
        "Type 'exit' or 'quit' to end the session.",
        title="💬 Chat"
    ))

    while True:
        try:
            question = console.input("[bold cyan]You:[/bold cyan] ").strip()

            if not question:
                continue

            if question.lower() in ("exit", "quit", "q"):
                console.print("[dim]Goodbye![/dim]")
                break

            answer = rag.ask(question)

            console.print("\n[bold green]Assistant:[/bold green]")
            console.print(Markdown(answer.answer))
            if answer.sources:
                citations = [s.citation for s in answer.sources[:3]]
                console.print(f"\n[dim]Sources: {', '.join(citations)}[/dim]")
            console.print()

        except (KeyboardInterrupt, EOFError):
            console.print("\n[dim]Goodbye![/dim]")
            break


@cli.command()
@click.option("--store", "-s", default=str(CHUNK_STORE_PATH), help="Chunk store JSON file")
def stats(store: str):
    """Show statistics about the chunk store."""
    from cessation_rag.chunk_store import JsonDocumentStore
    from cessation_rag.errors import StoreUnavailable

    store_path = Path(store)

    try:
        stats = JsonDocumentStore(store_path).get_stats()
    except StoreUnavailable as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    console.print(Panel.fit(
        "[bold blue]Chunk Store Statistics[/bold blue]",
        title="📊 Stats"
    ))

    table = Table()
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Documents", str(stats["total_documents"]))
    table.add_row("Chunks", str(stats["total_chunks"]))
    table.add_row("Store Location", str(store_path))

    console.print(table)


@cli.command()
@click.option("--store", "-s", default=str(CHUNK_STORE_PATH), help="Chunk store JSON file")
@click.option("--json-output", is_flag=True, help="Print the report as JSON")
def validate(store: str, json_output: bool):
    """Check the chunk store for missing fields, duplicates and sample data."""
    from cessation_rag.chunk_store import JsonDocumentStore
    from cessation_rag.errors import StoreUnavailable
    from cessation_rag.validation import validate_chunk_records

    try:
        records = JsonDocumentStore(Path(store)).list_chunks()
    except StoreUnavailable as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    report = validate_chunk_records(records)

    if json_output:
        click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        if report.is_valid:
            console.print("[green]✓ Data validation passed[/green]")
        else:
            console.print("[red]✗ Data validation failed[/red]")

        if report.issues:
            console.print("\n[bold red]🚨 Issues:[/bold red]")
            for i, issue in enumerate(report.issues, 1):
                console.print(f"  {i}. {issue}")

        if report.warnings:
            console.print("\n[bold yellow]⚠️ Warnings:[/bold yellow]")
            for i, warning in enumerate(report.warnings, 1):
                console.print(f"  {i}. {warning}")

        table = Table(title="Validation Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        for key, value in report.stats.items():
            table.add_row(key, str(value))
        console.print(table)

    if not report.is_valid:
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
