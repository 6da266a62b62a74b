"""Bounded-timeout, bounded-retry HTTP fetch."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from mangagate.constants import DEFAULT_BACKOFF, DEFAULT_FETCH_TIMEOUT, DEFAULT_MAX_RETRIES
from mangagate.exceptions import (
    AttemptFailure,
    NetworkFailure,
    StatusFailure,
    TimeoutFailure,
    TransportFailure,
)

__all__ = ["FetchOptions", "resilient_fetch"]

SleepFunc = Callable[[float], Awaitable[Any]]


class FetchOptions(BaseModel):
    """Request descriptor passed through to the transport unmodified."""

    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    headers: dict[str, str] = {}
    params: list[tuple[str, str]] | dict[str, str] | None = None
    body: bytes | None = None


def _announce_retry(url: str, max_retries: int) -> Callable[[RetryCallState], None]:
    def before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(f"Retrying ({retry_state.attempt_number}/{max_retries})... {url}: {error}")

    return before_sleep


async def _attempt(
    client: httpx.AsyncClient, url: str, options: FetchOptions, timeout: float
) -> httpx.Response:
    request = client.build_request(
        options.method,
        url,
        headers=options.headers,
        params=options.params,
        content=options.body,
    )
    try:
        # wait_for cancels the pending send on expiry, which releases its connection
        response = await asyncio.wait_for(client.send(request), timeout=timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise TimeoutFailure(url, timeout) from e
    except httpx.RequestError as e:
        raise TransportFailure(f"{type(e).__name__}: {e} ({url})") from e

    if not response.is_success:
        raise StatusFailure(url, response.status_code)
    return response


async def resilient_fetch(
    client: httpx.AsyncClient,
    url: str,
    options: FetchOptions | None = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    backoff: float = DEFAULT_BACKOFF,
    sleep: SleepFunc = asyncio.sleep,
) -> httpx.Response:
    """
    Perform one logical request, retrying failed attempts with a fixed backoff.

    Timeouts, transport errors and non-2xx statuses are all retried the same way.
    The backoff is not counted against the per-attempt timeout.

    Args:
        client: HTTP client used for every attempt.
        url: Absolute target URL.
        options: Method, headers, query params and body of the request.
        timeout: Seconds to wait for each attempt's response.
        max_retries: Total number of attempts, at least 1.
        backoff: Seconds to wait between attempts.
        sleep: Coroutine function used for the backoff wait.

    Returns:
        The first successful response.

    Raises:
        ValueError: If max_retries is lower than 1.
        NetworkFailure: If every attempt failed. Carries the last attempt failure.
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries),
        wait=wait_fixed(backoff),
        retry=retry_if_exception_type(AttemptFailure),
        before_sleep=_announce_retry(url, max_retries),
        sleep=sleep,
        reraise=True,
    )
    try:
        return await retrying(_attempt, client, url, options or FetchOptions(), timeout)
    except AttemptFailure as e:
        raise NetworkFailure(url, max_retries, e) from e
