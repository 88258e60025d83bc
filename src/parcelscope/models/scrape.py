"""Wire models for ``POST /api/scrape`` and ``GET /health``.

Field names on the wire are camelCase (``trackingNumber``, ``timeoutMs``);
Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Puppeteer-style headless mode names, treated as headless=True.
HeadlessMode = Literal["new", "shell"]


def utc_timestamp(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-05-01T12:00:00.000Z``."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ScrapeOptions(BaseModel):
    """Per-request scrape options. Unset fields fall back to settings."""

    model_config = ConfigDict(populate_by_name=True)

    timeout_ms: int | None = Field(
        None,
        alias="timeoutMs",
        ge=0,
        description="How long to wait for the tracking API response, in milliseconds.",
    )
    headless: bool | HeadlessMode | None = Field(
        None,
        description="Run the browser without a visible window. \"new\" and \"shell\" are accepted as true.",
    )


class ScrapeRequest(BaseModel):
    """Body of a ``POST /api/scrape`` request.

    ``trackingNumber`` is optional at the schema level so that a missing
    value is reported as a 400 by the route rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    tracking_number: str | None = Field(
        None,
        alias="trackingNumber",
        description="Carrier-issued shipment identifier.",
    )
    options: ScrapeOptions | None = None


class ScrapeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    tracking_number: str = Field(..., alias="trackingNumber")
    data: Any = Field(None, description="Tracking API payload, passed through unmodified.")
    timestamp: str = Field(default_factory=utc_timestamp)


class ErrorResponse(BaseModel):
    """JSON envelope for every non-2xx response."""

    success: bool = False
    error: str
    timestamp: str = Field(default_factory=utc_timestamp)


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str = Field(default_factory=utc_timestamp)
