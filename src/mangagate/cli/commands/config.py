import typer
from rich.table import Table

from mangagate.cli.console import console
from mangagate.cli.utils import load_settings

config_app = typer.Typer(no_args_is_help=True, help="Inspect Mangagate configuration.")


@config_app.command()
def show() -> None:
    """Display the effective configuration."""
    settings = load_settings()

    table = Table(title="Mangagate Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))

    console.print(table)
