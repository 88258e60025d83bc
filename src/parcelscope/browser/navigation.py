"""Page navigation with readable failure reasons.

Wraps Playwright's ``page.goto`` so that Chromium network error codes and
navigation timeouts surface as :class:`~parcelscope.exceptions.NavigationError`
instead of raw Playwright errors.
"""

from __future__ import annotations

import logging
from typing import Literal

from playwright.async_api import Error as PlaywrightError, Page, Response, TimeoutError as PlaywrightTimeout

from parcelscope.exceptions import NavigationError

logger = logging.getLogger(__name__)

# Chromium error codes that mean the tracking site is unreachable.
_NETWORK_ERRORS: tuple[str, ...] = (
    "ERR_NAME_NOT_RESOLVED",
    "ERR_CONNECTION_REFUSED",
    "ERR_CONNECTION_RESET",
    "ERR_CONNECTION_CLOSED",
    "ERR_INTERNET_DISCONNECTED",
    "ERR_PROXY_CONNECTION_FAILED",
    "ERR_SSL_PROTOCOL_ERROR",
    "ERR_CERT_AUTHORITY_INVALID",
    "ERR_CERT_COMMON_NAME_INVALID",
    "ERR_ADDRESS_UNREACHABLE",
)

WaitUntil = Literal["commit", "domcontentloaded", "load", "networkidle"]


def network_error_reason(message: str) -> str | None:
    """Return a readable reason if *message* carries a known Chromium network error code."""
    for pattern in _NETWORK_ERRORS:
        if pattern in message:
            return pattern.replace("ERR_", "").replace("_", " ").lower()
    return None


async def open_page(
    page: Page,
    url: str,
    *,
    timeout_ms: int = 60_000,
    wait_until: WaitUntil = "domcontentloaded",
) -> Response | None:
    """Navigate *page* to *url*.

    Args:
        page: Playwright page instance.
        url: Target URL to navigate to.
        timeout_ms: Navigation timeout in milliseconds (``0`` disables it).
        wait_until: Load state that completes the navigation.

    Returns:
        The main-frame ``Response``, or ``None`` if the page did not produce one.

    Raises:
        NavigationError: On a network error code or navigation timeout.
        PlaywrightError: On any other Playwright failure.
    """
    try:
        logger.debug("goto %s (wait_until=%s, timeout=%dms)", url, wait_until, timeout_ms)
        return await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
    except PlaywrightTimeout as exc:
        logger.warning("Navigation to %s timed out after %d ms", url, timeout_ms)
        raise NavigationError(url, f"timed out after {timeout_ms} ms") from exc
    except PlaywrightError as exc:
        reason = network_error_reason(str(exc))
        if reason is None:
            raise
        logger.warning("Navigation to %s failed: %s", url, reason)
        raise NavigationError(url, reason) from exc
