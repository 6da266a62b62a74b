from pydantic import ValidationError

from mangagate.cli.console import err_console
from mangagate.cli.exceptions import ConfigError
from mangagate.models.config import Settings

__all__ = ["handle_validation_error", "load_settings"]


def handle_validation_error(e: ValidationError) -> None:
    err_console.print("[bold red]Configuration Error:[/bold red]")
    for error in e.errors():
        field_name = ".".join(str(loc) for loc in error["loc"]) or "Global Config"
        message = error["msg"]
        input_value = error.get("input")
        err_console.print(
            f"  Field [bold]{field_name}[/bold]: {message} "
            f"(Invalid Value: [red]{input_value!r}[/red])"
        )


def load_settings() -> Settings:
    """Read settings from the environment, reporting validation errors per field."""
    try:
        return Settings()
    except ValidationError as e:
        handle_validation_error(e)
        err_console.print("[dim]Hint: settings are read from MANGAGATE_* variables or .env[/dim]")
        raise ConfigError("Configuration validation failed.") from e
