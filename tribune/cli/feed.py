"""Read-side commands: serendipity feed, run logs and retention cleanup."""

import random
from typing import Optional

import typer
from rich.table import Table

from ..db import ArticleRepository, RunReportRepository
from ..serendipity import DistributionSampler, get_serendipity_articles
from .common import console, load_config_or_exit, open_store


def serendipity_command(
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of articles"),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Look-back window in days"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for a reproducible sample"),
) -> None:
    """Show a random selection of recent articles balanced across sources."""
    config = load_config_or_exit()
    settings = config.config.serendipity
    count = count if count is not None else settings.default_count
    days = days if days is not None else settings.window_days

    store = open_store(config)
    try:
        articles = get_serendipity_articles(
            ArticleRepository(store),
            count,
            window_days=days,
            sampler=DistributionSampler(random.Random(seed)),
        )
    except Exception as e:
        console.print(f"[red]Failed to load articles: {e}[/red]")
        raise typer.Exit(1)
    finally:
        store.close()

    if not articles:
        console.print(f"[yellow]No articles fetched in the last {days} days.[/yellow]")
        return

    table = Table(title=f"Serendipity ({len(articles)} articles, last {days} days)")
    table.add_column("Source", style="magenta")
    table.add_column("Title", style="cyan")
    table.add_column("Published", style="dim")
    table.add_column("URL", style="blue")

    for article in articles:
        table.add_row(
            article.source_name,
            article.title,
            article.published_date.strftime("%Y-%m-%d") if article.published_date else "",
            article.url,
        )

    console.print(table)


def logs_command(
    limit: int = typer.Option(10, "--limit", "-l", help="Number of runs to show"),
) -> None:
    """Show recent ingestion runs."""
    config = load_config_or_exit()
    store = open_store(config)
    try:
        reports = RunReportRepository(store).get_recent(limit)
    except Exception as e:
        console.print(f"[red]Failed to load run logs: {e}[/red]")
        raise typer.Exit(1)
    finally:
        store.close()

    if not reports:
        console.print("[yellow]No runs recorded yet.[/yellow]")
        return

    table = Table(title="Recent Runs")
    table.add_column("When", style="cyan")
    table.add_column("Sources", justify="right")
    table.add_column("Articles", justify="right", style="green")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Failed sources", style="dim")

    for report in reports:
        failed = ", ".join(d.name for d in report.details if not d.success)
        table.add_row(
            report.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            str(report.sources_processed),
            str(report.articles_added),
            str(report.errors),
            failed,
        )

    console.print(table)


def cleanup_command(
    article_days: Optional[int] = typer.Option(None, "--article-days", help="Keep articles this many days"),
    log_days: Optional[int] = typer.Option(None, "--log-days", help="Keep run logs this many days"),
) -> None:
    """Delete old articles and run logs."""
    config = load_config_or_exit()
    retention = config.config.retention
    article_days = article_days if article_days is not None else retention.article_days
    log_days = log_days if log_days is not None else retention.run_report_days

    store = open_store(config)
    try:
        articles_deleted = ArticleRepository(store).delete_old_articles(article_days)
        logs_deleted = RunReportRepository(store).delete_old(log_days)
    except Exception as e:
        console.print(f"[red]Cleanup failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        store.close()

    console.print(
        f"[green]✅ Deleted {articles_deleted} articles older than {article_days} days "
        f"and {logs_deleted} run logs older than {log_days} days[/green]"
    )
