"""CLI command for a one-off tracking lookup."""

from __future__ import annotations

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

console = Console()
err_console = Console(stderr=True)


def scrape_command(
    tracking_number: str = typer.Argument(..., help="Carrier-issued tracking number."),
    timeout_ms: Optional[int] = typer.Option(
        None, "--timeout-ms", "-t", min=0, help="How long to wait for the tracking API response."
    ),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window."),
    raw: bool = typer.Option(False, "--raw", help="Print compact JSON without formatting."),
) -> None:
    """Look up TRACKING_NUMBER and print the tracking site's API payload as JSON."""
    from parcelscope.exceptions import InvalidTrackingNumberError
    from parcelscope.models.scrape import ScrapeOptions
    from parcelscope.tracking.scraper import scrape_tracking

    options = ScrapeOptions(timeout_ms=timeout_ms, headless=False if headed else None)

    try:
        with Progress(
            SpinnerColumn(), TextColumn("[progress.description]{task.description}"), console=err_console
        ) as progress:
            task = progress.add_task(f"Tracking {tracking_number}...", total=None)
            data = asyncio.run(scrape_tracking(tracking_number, options))
            progress.update(task, completed=True)
    except InvalidTrackingNumberError as e:
        err_console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(code=2)
    except Exception as e:
        err_console.print(f"[red]✗[/red] Scrape failed: {e}")
        raise typer.Exit(code=1)

    if raw:
        typer.echo(json.dumps(data, default=str))
    else:
        console.print_json(json.dumps(data, default=str))
