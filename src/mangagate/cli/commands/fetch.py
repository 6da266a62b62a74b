import asyncio
from typing import Annotated

import typer

from mangagate.cli.console import console, print_success, print_warning
from mangagate.cli.exceptions import FetchError
from mangagate.cli.utils import load_settings
from mangagate.client import create_http_client, resilient_fetch
from mangagate.exceptions import NetworkFailure


async def _fetch_async(url: str, timeout: float, retries: int, backoff: float) -> None:
    async with create_http_client() as client:
        try:
            response = await resilient_fetch(
                client, url, timeout=timeout, max_retries=retries, backoff=backoff
            )
        except NetworkFailure as e:
            raise FetchError(e.message) from e

    console.print(f"Status: [green]{response.status_code}[/green]")
    console.print(f"Content-Type: {response.headers.get('content-type', 'unknown')}")
    try:
        console.print(f"Response: {response.json()}")
    except ValueError:
        print_warning("Response body is not JSON, showing the first 200 characters")
        console.print(f"Response: {response.text[:200]}...")


def fetch(
    url: Annotated[str, typer.Argument(help="Absolute URL to fetch")],
    timeout: Annotated[
        float | None, typer.Option("--timeout", "-t", help="Seconds per attempt")
    ] = None,
    retries: Annotated[
        int | None, typer.Option("--retries", "-r", min=1, help="Total attempts")
    ] = None,
) -> None:
    """
    Fetch a URL with the retry policy used for upstream calls.

    Useful to check that MangaDex is reachable from this host.
    """
    settings = load_settings()
    asyncio.run(
        _fetch_async(
            url,
            timeout or settings.fetch_timeout,
            retries or settings.max_retries,
            settings.retry_backoff,
        )
    )
    print_success("Fetch complete.")
