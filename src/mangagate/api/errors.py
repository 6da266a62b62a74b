from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from mangagate.exceptions import MangagateError, UpstreamError

__all__ = ["register_error_handlers", "upstream_errors"]


@contextmanager
def upstream_errors(message: str) -> Iterator[None]:
    """
    Turn any failure inside the block into a 500 ``UpstreamError`` carrying ``message``.

    Errors that already map to another status (404, ...) pass through unchanged.
    """
    try:
        yield
    except Exception as e:
        if isinstance(e, MangagateError) and e.status_code != 500:
            raise
        logger.error(f"{message}: {e}")
        raise UpstreamError(message) from e


async def _handle_mangagate_error(request: Request, exc: MangagateError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MangagateError, _handle_mangagate_error)  # type: ignore[arg-type]
