from mangagate.exceptions import MangagateError

__all__ = ["CliError", "ConfigError", "FetchError"]


class CliError(MangagateError):
    """Base exception for errors reported by the CLI."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CliError):
    """Raised when the settings are invalid."""


class FetchError(CliError):
    """Raised when a fetch issued from the command line fails."""
