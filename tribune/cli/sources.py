"""Sources management commands."""

import asyncio
from typing import List, Optional

import typer
from rich.table import Table

from ..config import Config, SourceConfig, load_sources, save_sources
from ..db import DocumentNotFoundError, SourceRepository
from ..ingestion import SourceFetcher
from ..models import ScrapeSelectors, Source
from .common import console, load_config_or_exit, open_store

sources_app = typer.Typer(help="Manage news sources")


def _load_or_exit(config: Config) -> List[SourceConfig]:
    try:
        return load_sources(config.sources_path)
    except FileNotFoundError:
        console.print("[red]Sources file not found. Run 'tribune init' first.[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _find(sources: List[SourceConfig], name: str) -> SourceConfig:
    for source in sources:
        if source.name == name or source.source_id == name:
            return source
    console.print(f"[red]Source '{name}' not found.[/red]")
    raise typer.Exit(1)


@sources_app.command("list")
def sources_list() -> None:
    """List all configured sources."""
    sources = _load_or_exit(Config())

    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Strategy", style="magenta")
    table.add_column("Category", style="magenta")
    table.add_column("Priority", style="green")
    table.add_column("Enabled", style="yellow")
    table.add_column("URL", style="blue")

    for source in sorted(sources, key=lambda s: (s.priority, s.name.lower())):
        table.add_row(
            source.source_id,
            source.name,
            source.strategy,
            source.category,
            str(source.priority),
            "✓" if source.enabled else "✗",
            source.url,
        )

    console.print(table)


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="Feed or page URL"),
    strategy: str = typer.Option("feed", "--strategy", "-s", help="Fetch strategy (feed, scrape)"),
    category: str = typer.Option("general", "--category", "-c", help="Display category"),
    priority: int = typer.Option(5, "--priority", "-p", help="Priority (1-10)", min=1, max=10),
    container: Optional[str] = typer.Option(None, "--container", help="Scrape: article container selector"),
    headline: Optional[str] = typer.Option(None, "--headline", help="Scrape: headline selector"),
    link: Optional[str] = typer.Option(None, "--link", help="Scrape: link selector"),
    summary: Optional[str] = typer.Option(None, "--summary", help="Scrape: summary selector"),
    image: Optional[str] = typer.Option(None, "--image", help="Scrape: image selector"),
    date: Optional[str] = typer.Option(None, "--date", help="Scrape: date selector"),
) -> None:
    """Add a new source."""
    config = Config()
    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        sources = []

    if any(s.name == name or s.url == url for s in sources):
        console.print(f"[red]Source '{name}' or URL already exists.[/red]")
        raise typer.Exit(1)

    selectors = None
    if container and headline and link:
        selectors = ScrapeSelectors(
            container=container,
            headline=headline,
            link=link,
            summary=summary,
            image=image,
            date=date,
        )
    elif strategy == "scrape":
        console.print("[yellow]⚠️  Scrape source added without --container/--headline/--link; it will fail until selectors are set.[/yellow]")

    try:
        new_source = SourceConfig(
            name=name,
            url=url,
            strategy=strategy,
            selectors=selectors,
            category=category,
            priority=priority,
        )
    except ValueError as e:
        console.print(f"[red]Invalid source: {e}[/red]")
        raise typer.Exit(1)

    sources.append(new_source)
    save_sources(sources, config.sources_path)

    console.print(f"[green]✅ Added source: {name} ({new_source.source_id})[/green]")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name or ID to remove"),
) -> None:
    """Remove a source from configuration and the store."""
    config = load_config_or_exit()
    sources = _load_or_exit(config)
    target = _find(sources, name)

    save_sources([s for s in sources if s is not target], config.sources_path)

    store = open_store(config)
    try:
        SourceRepository(store).delete_source(target.source_id)
    finally:
        store.close()
    console.print(f"[green]✅ Removed source: {target.name}[/green]")


@sources_app.command("toggle")
def sources_toggle(
    name: str = typer.Argument(..., help="Source name or ID to enable or disable"),
) -> None:
    """Flip a source's enabled flag."""
    config = load_config_or_exit()
    sources = _load_or_exit(config)
    target = _find(sources, name)

    target.enabled = not target.enabled
    save_sources(sources, config.sources_path)

    store = open_store(config)
    try:
        SourceRepository(store).set_enabled(target.source_id, target.enabled)
    except DocumentNotFoundError:
        console.print("[dim]Source not stored yet; the next run will sync it.[/dim]")
    finally:
        store.close()

    state = "[green]enabled[/green]" if target.enabled else "[yellow]disabled[/yellow]"
    console.print(f"✅ {target.name} is now {state}")


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
    limit: int = typer.Option(5, "--limit", "-l", help="Records to show per source"),
) -> None:
    """Fetch sources without storing anything and show what comes back."""
    config = load_config_or_exit()
    sources = _load_or_exit(config)

    if name:
        sources = [_find(sources, name)]

    fetcher = SourceFetcher(config.config.ingestion)

    for source_config in sources:
        if not source_config.enabled and not name:
            console.print(f"[yellow]⚠️  {source_config.name}: Disabled[/yellow]")
            continue

        source = Source(id=source_config.source_id, **source_config.model_dump(exclude={"id"}))
        result = asyncio.run(fetcher.fetch(source))

        if not result.success:
            console.print(f"[red]❌ {source.name}: Failed - {result.error_message}[/red]")
            continue

        console.print(f"[green]✅ {source.name}: {len(result.records)} records[/green]")
        for record in result.records[:limit]:
            console.print(f"   • {record.title or record.headline or '(no title)'}")
            console.print(f"     [dim]{record.link or record.url or '(no link)'}[/dim]")


@sources_app.command("health")
def sources_health() -> None:
    """Show stored health for every source."""
    config = load_config_or_exit()
    store = open_store(config)
    try:
        sources = SourceRepository(store).get_all_sources()
    except Exception as e:
        console.print(f"[red]Failed to read sources: {e}[/red]")
        raise typer.Exit(1)
    finally:
        store.close()

    if not sources:
        console.print("[yellow]No sources stored yet. Run 'tribune run' first.[/yellow]")
        return

    table = Table(title="Source Health")
    table.add_column("Name", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Failures", justify="right")
    table.add_column("Last success", style="dim")
    table.add_column("Total", justify="right", style="green")
    table.add_column("Avg/fetch", justify="right", style="green")
    table.add_column("Last error", style="red")

    status_styles = {"active": "green", "error": "red", "disabled": "yellow"}
    for source in sources:
        style = status_styles.get(source.status, "white")
        table.add_row(
            source.name,
            f"[{style}]{source.status}[/{style}]",
            str(source.consecutive_failures),
            source.last_success_at.strftime("%Y-%m-%d %H:%M") if source.last_success_at else "never",
            str(source.total_articles_fetched),
            f"{source.average_articles_per_fetch:.1f}",
            source.error_message or "",
        )

    console.print(table)
