__all__ = [
    "AttemptFailure",
    "MangagateError",
    "NetworkFailure",
    "NotFoundError",
    "StatusFailure",
    "TimeoutFailure",
    "TransportFailure",
    "UpstreamError",
]


class MangagateError(Exception):
    """Base exception for all Mangagate errors."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UpstreamError(MangagateError):
    """Raised when an upstream lookup fails or returns unusable data."""


class NotFoundError(MangagateError):
    """Raised when the requested resource does not exist upstream."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)


class NetworkFailure(MangagateError):
    """Raised when every attempt of a resilient fetch has failed."""

    def __init__(self, url: str, attempts: int, last_error: "AttemptFailure") -> None:
        super().__init__(f"Request to {url} failed after {attempts} attempt(s): {last_error}")
        self.url = url
        self.attempts = attempts
        self.last_error = last_error


class AttemptFailure(Exception):
    """A single attempt of a resilient fetch did not produce a usable response."""


class TimeoutFailure(AttemptFailure):
    """No response arrived within the per-attempt timeout."""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(f"No response from {url} within {timeout}s")
        self.url = url
        self.timeout = timeout


class TransportFailure(AttemptFailure):
    """Low-level network error (connection refused, DNS failure, ...)."""


class StatusFailure(AttemptFailure):
    """A response arrived but its status code is not a success."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"HTTP error! Status: {status_code} ({url})")
        self.url = url
        self.status_code = status_code
