"""Run command implementation."""

import typer
from rich.panel import Panel
from rich.table import Table

from ..config import load_categories, load_sources
from ..db import CategoryRepository, SourceRepository
from ..enrichment import TextExtractor
from ..models import RunReport
from ..pipeline import IngestionOrchestrator
from .common import console, load_config_or_exit, open_store


def print_run_report(report: RunReport) -> None:
    """Print a run report as a table."""
    table = Table(title="Fetch Summary")
    table.add_column("Source", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("New articles", style="green", justify="right")
    table.add_column("Error", style="dim")

    for detail in report.details:
        table.add_row(
            detail.name,
            "[green]✓[/green]" if detail.success else "[red]✗[/red]",
            str(detail.article_count),
            detail.error or "",
        )

    console.print(table)
    style = "green" if report.errors == 0 else "yellow"
    console.print(Panel(
        f"Sources processed: {report.sources_processed}\n"
        f"Articles added: {report.articles_added}\n"
        f"Errors: {report.errors}",
        style=style,
    ))


def run_command(
    extract_text: bool = typer.Option(
        True,
        "--extract/--no-extract",
        help="Extract page text for articles with thin summaries",
    ),
) -> None:
    """Fetch every enabled source and store new articles."""
    config = load_config_or_exit()

    try:
        sources_config = load_sources(config.sources_path)
        categories_config = load_categories(config.categories_path) if config.categories_path.exists() else []
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    store = open_store(config)
    try:
        sources_repo = SourceRepository(store)
        categories_repo = CategoryRepository(store)
        sources_repo.sync_sources(sources_config)
        categories_repo.sync_categories(categories_config)

        ingestion = config.config.ingestion
        extraction = config.config.extraction
        extractor = None
        if extract_text and ingestion.extract_text:
            extractor = TextExtractor(
                timeout=extraction.timeout,
                user_agent=extraction.user_agent,
                max_redirects=extraction.max_redirects,
            )

        orchestrator = IngestionOrchestrator(store, config=ingestion, extractor=extractor)
        report = orchestrator.run_ingestion_sync(
            sources_repo.get_all_sources(),
            categories_repo.get_all_categories(),
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Run interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Run failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        store.close()

    if report.sources_processed == 0:
        console.print("[yellow]No enabled sources found.[/yellow]")
        return
    print_run_report(report)
