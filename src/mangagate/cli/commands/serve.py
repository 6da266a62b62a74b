from typing import Annotated

import typer
import uvicorn

from mangagate.cli.console import print_info
from mangagate.cli.utils import load_settings


def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes")] = False,
) -> None:
    """
    Run the HTTP API.

    Host and port default to MANGAGATE_HOST / MANGAGATE_PORT.
    """
    settings = load_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port

    print_info(f"Serving on http://{bind_host}:{bind_port}")
    uvicorn.run(
        "mangagate.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )
