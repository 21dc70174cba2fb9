"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .common import setup_logging
from .feed import cleanup_command, logs_command, serendipity_command
from .init import init_command
from .run import run_command
from .sources import sources_app

app = typer.Typer(
    name="tribune",
    help="Tribune - News aggregation and serendipity feed",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    setup_logging(verbose)


# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("serendipity")(serendipity_command)
app.command("logs")(logs_command)
app.command("cleanup")(cleanup_command)
app.add_typer(sources_app, name="sources", help="Manage news sources")


if __name__ == "__main__":
    app()
