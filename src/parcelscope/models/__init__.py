"""Request and response models for the scrape API."""

from parcelscope.models.scrape import (
    ErrorResponse,
    HealthResponse,
    ScrapeOptions,
    ScrapeRequest,
    ScrapeResponse,
    utc_timestamp,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ScrapeOptions",
    "ScrapeRequest",
    "ScrapeResponse",
    "utc_timestamp",
]
