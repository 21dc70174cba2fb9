"""Helpers shared by CLI commands."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..config import Config
from ..db import DocumentStore, create_store, validate_connection

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def load_config_or_exit() -> Config:
    config = Config()
    try:
        config.config
    except FileNotFoundError:
        console.print("[red]Config file not found. Run 'tribune init' first.[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return config


def open_store(config: Config) -> DocumentStore:
    """Build the configured store, checking Postgres connectivity first."""
    backend = config.config.store.backend
    if backend == "postgres":
        console.print("[dim]Checking database connection...[/dim]")
        if not validate_connection(config.get_db_config()):
            console.print("[red]❌ Database connection failed![/red]")
            console.print("Please check your database configuration and ensure Postgres is running.")
            raise typer.Exit(1)
    return create_store(backend, config.get_db_config())
