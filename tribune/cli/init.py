"""Init command implementation."""

from pathlib import Path
from typing import List

import typer
from rich.panel import Panel

from ..config import (
    CategoryConfig,
    ConfigModel,
    SourceConfig,
    save_categories,
    save_config,
    save_sources,
)
from ..db import init_database, validate_connection
from .common import console


def create_default_sources() -> List[SourceConfig]:
    """Create default news sources."""
    return [
        SourceConfig(
            name="Hacker News",
            url="https://hnrss.org/frontpage",
            category="tech",
            update_frequency="hourly",
            notes="Top stories from Hacker News community",
        ),
        SourceConfig(
            name="TechCrunch",
            url="https://techcrunch.com/feed/",
            category="tech",
            update_frequency="hourly",
            notes="Latest technology news and startup coverage",
        ),
        SourceConfig(
            name="Ars Technica",
            url="https://feeds.arstechnica.com/arstechnica/index",
            category="tech",
            notes="In-depth tech news and analysis",
        ),
        SourceConfig(
            name="BBC News",
            url="http://feeds.bbci.co.uk/news/rss.xml",
            category="general",
            update_frequency="hourly",
            priority=3,
            notes="Global news from BBC",
        ),
        SourceConfig(
            name="NPR News",
            url="https://feeds.npr.org/1001/rss.xml",
            category="general",
            notes="National Public Radio news",
        ),
    ]


def create_default_categories() -> List[CategoryConfig]:
    """Create default categorization rules."""
    return [
        CategoryConfig(
            name="Technology",
            slug="tech",
            color="#3b82f6",
            icon="💻",
            keywords=["software", "startup", "ai", "programming", "open source"],
            domains=["techcrunch.com", "arstechnica.com", "hnrss.org"],
            order=1,
        ),
        CategoryConfig(
            name="Science",
            slug="science",
            color="#10b981",
            icon="🔬",
            keywords=["research", "study", "scientists", "space", "climate"],
            order=2,
        ),
        CategoryConfig(
            name="World",
            slug="world",
            color="#f59e0b",
            icon="🌍",
            sources=["BBC News", "NPR News"],
            order=3,
        ),
    ]


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "tribune",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    backend: str = typer.Option("postgres", "--backend", help="Store backend (postgres, memory)"),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("tribune", "--db-name", help="Database name"),
    db_user: str = typer.Option("tribune", "--db-user", help="Database user"),
    seed: bool = typer.Option(
        True,
        "--seed/--no-seed",
        help="Seed default sources and categories",
    ),
) -> None:
    """Initialize Tribune configuration and database."""
    console.print(Panel.fit("📰 Tribune - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"
    categories_path = config_dir / "categories.yaml"

    try:
        config = ConfigModel(
            store={"backend": backend},
            postgres={
                "host": db_host,
                "port": db_port,
                "database": db_name,
                "user": db_user,
                "password_env": "TRIBUNE_DB_PASSWORD",
            },
        )
    except ValueError as e:
        console.print(f"[red]Invalid option: {e}[/red]")
        raise typer.Exit(1)

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    sources = create_default_sources() if seed else []
    categories = create_default_categories() if seed else []
    save_sources(sources, sources_path)
    console.print(f"✅ Created sources: {sources_path} ({len(sources)} sources)")
    save_categories(categories, categories_path)
    console.print(f"✅ Created categories: {categories_path} ({len(categories)} categories)")

    if config.store.backend == "postgres":
        console.print("\n[bold]Testing database connection...[/bold]")
        db_config = config.postgres.model_dump()

        if not validate_connection(db_config):
            console.print(
                "[red]❌ Database connection failed![/red]\n"
                "Please ensure Postgres is running and credentials are correct.\n"
                "Set the password via environment variable: "
                "[bold]export TRIBUNE_DB_PASSWORD=your_password[/bold]"
            )
            raise typer.Exit(1)

        console.print("✅ Database connection successful")

        console.print("\n[bold]Initializing database schema...[/bold]")
        try:
            init_database(db_config)
            console.print("✅ Database schema initialized")
        except Exception as e:
            console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
            raise typer.Exit(1)

    console.print(
        Panel(
            f"[green]✅ Tribune initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n"
            f"Categories: {categories_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export TRIBUNE_DB_PASSWORD=your_password[/bold]\n"
            f"2. Run: [bold]tribune run[/bold]",
            style="green",
        )
    )
