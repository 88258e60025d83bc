"""Unified CLI entry point for parcelscope.

Config precedence: settings.default.toml -> settings.local.toml -> PORT/AUTH_TOKEN -> env vars (PARCELSCOPE_* with double underscores) -> CLI flags.
"""

from __future__ import annotations

from typing import Optional

import typer
from dotenv import load_dotenv

from parcelscope import __version__ as VERSION
from parcelscope.cli.scrape_cmd import scrape_command
from parcelscope.cli.serve_cmd import serve_command
from parcelscope.cli.settings_cmd import settings_app

APP_HELP = (
    "parcelscope: parcel tracking lookups via headless-browser API interception. "
    "Config precedence: settings.default.toml -> settings.local.toml -> env vars (PARCELSCOPE_* with __) -> CLI flags."
)

app = typer.Typer(add_completion=True, help=APP_HELP)

app.command("scrape")(scrape_command)
app.command("serve")(serve_command)
app.add_typer(settings_app, name="settings")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level."),
) -> None:
    """Show help when no subcommand is provided."""
    if version:
        typer.echo(f"parcelscope {VERSION}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    load_dotenv()

    from parcelscope.logging_config import configure_logging

    configure_logging(log_level)


if __name__ == "__main__":
    app()
