from .fetch import FetchOptions, resilient_fetch
from .session import create_http_client

__all__ = ["FetchOptions", "create_http_client", "resilient_fetch"]
