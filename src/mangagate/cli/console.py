"""Rich consoles shared by the mangagate commands."""

from rich.console import Console

__all__ = [
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]

console = Console()
"""Command output: tables, fetched responses."""

err_console = Console(stderr=True)
"""Errors and warnings, kept off stdout so fetched bodies can be piped."""


def print_error(message: str) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {message}")


def print_warning(message: str) -> None:
    err_console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_success(message: str) -> None:
    console.print(f"[bold green]{message}[/bold green]")


def print_info(message: str) -> None:
    console.print(f"[blue]{message}[/blue]")
