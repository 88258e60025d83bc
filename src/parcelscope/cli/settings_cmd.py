"""CLI commands for inspecting and validating parcelscope settings."""

from __future__ import annotations

import json

import typer
from rich.console import Console

settings_app = typer.Typer(help="Inspect and validate parcelscope configuration.")
console = Console()

_REDACTED = "***"


@settings_app.command("show")
def show_settings() -> None:
    """Display the currently resolved settings (the auth token is redacted)."""
    from parcelscope.settings import get_settings

    settings = get_settings()
    data = settings.model_dump(mode="json")
    if data["api"].get("auth_token"):
        data["api"]["auth_token"] = _REDACTED
    console.print_json(json.dumps(data, indent=2, default=str))


@settings_app.command("validate")
def validate_settings() -> None:
    """Validate settings and report any issues."""
    from parcelscope.settings import get_settings

    try:
        settings = get_settings()
        console.print("[green]✓[/green] Settings are valid.")
        console.print(f"  Environment: {settings.env}")
        console.print(f"  Listen port: {settings.api.port}")
        console.print(f"  Auth: {'token required' if settings.auth_enabled else 'any token accepted'}")
        console.print(f"  Tracking page: {settings.target.tracking_url_template}")
    except Exception as e:
        console.print(f"[red]✗[/red] Settings validation failed: {e}")
        raise typer.Exit(code=1)
