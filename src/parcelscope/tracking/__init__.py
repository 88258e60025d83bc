"""Tracking lookups: drive the tracking site and return its API payload."""

from parcelscope.tracking.scraper import build_tracking_url, scrape_tracking, validate_tracking_number

__all__ = ["build_tracking_url", "scrape_tracking", "validate_tracking_number"]
