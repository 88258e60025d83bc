"""parcelscope exception hierarchy."""

from __future__ import annotations


class ParcelScopeError(Exception):
    """Base exception for all parcelscope errors."""


class InvalidTrackingNumberError(ParcelScopeError, ValueError):
    """Raised when a tracking number is missing, empty, or not a string."""

    def __init__(self, message: str = "trackingNumber must be a non-empty string") -> None:
        super().__init__(message)


class ScrapeTimeoutError(ParcelScopeError):
    """Raised when no tracking API response is intercepted in time.

    Attributes:
        timeout_ms: The capture window that elapsed.
    """

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"Timed out waiting for tracking API response after {timeout_ms} ms")


class NavigationError(ParcelScopeError):
    """Raised when the browser cannot reach the tracking page.

    Attributes:
        url: The page that failed to load.
        reason: Short human-readable cause (e.g. ``name not resolved``).
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Navigation to {url} failed: {reason}")
