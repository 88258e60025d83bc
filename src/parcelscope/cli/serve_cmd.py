"""CLI command that runs the HTTP API."""

from __future__ import annotations

from typing import Optional

import typer


def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: settings.api.host)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Listen port (default: PORT / settings.api.port)."),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes (development only)."),
) -> None:
    """Serve GET /health and POST /api/scrape."""
    import uvicorn

    from parcelscope.settings import get_settings

    settings = get_settings()
    uvicorn.run(
        "parcelscope.api.app:app",
        host=host or settings.api.host,
        port=port or settings.api.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )
