"""CLI application using Typer."""

import sys

import typer

from mangagate.cli.commands.config import config_app
from mangagate.cli.commands.fetch import fetch
from mangagate.cli.commands.serve import serve
from mangagate.cli.console import print_error
from mangagate.cli.exceptions import CliError
from mangagate.exceptions import MangagateError

__all__ = ["app", "main"]

app = typer.Typer(
    name="mangagate",
    help="MangaDex aggregator API and tools.",
    add_completion=True,
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Mangagate CLI entry point.
    """
    from mangagate.logging import configure_logging

    configure_logging("DEBUG" if verbose else "INFO")


app.add_typer(config_app, name="config")

app.command(name="serve")(serve)
app.command(name="fetch")(fetch)


def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except CliError as e:
        print_error(e.message)
        sys.exit(e.exit_code)
    except MangagateError as e:
        print_error(e.message)
        sys.exit(1)
    except Exception as e:
        print_error(f"An unexpected error occurred: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
