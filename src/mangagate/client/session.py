import httpx

__all__ = ["create_http_client"]


def create_http_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """
    Build the shared async client used for all upstream calls.

    The client itself has no timeout; every resilient fetch attempt enforces its own.
    """
    return httpx.AsyncClient(
        timeout=None,
        follow_redirects=True,
        limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
        transport=transport,
    )
