"""Scrape a parcel's tracking data by intercepting the tracking site's API.

Each call launches its own Chromium instance, opens the public tracking page
for the parcel, and waits for the page's background request to the site's
internal parcels API.  The JSON body of that response is returned as-is.
The browser is always torn down, whatever the outcome.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from playwright.async_api import async_playwright

from parcelscope.browser.interceptor import ApiResponseInterceptor, CapturedResponse
from parcelscope.browser.navigation import open_page
from parcelscope.browser.profile import apply_stealth_scripts, profile_from_settings
from parcelscope.exceptions import InvalidTrackingNumberError, ScrapeTimeoutError
from parcelscope.models.scrape import ScrapeOptions
from parcelscope.settings import get_settings

if TYPE_CHECKING:
    from playwright.async_api import Page

    from parcelscope.settings.config import Settings

logger = logging.getLogger(__name__)

# Characters JavaScript's encodeURIComponent leaves untouched besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def validate_tracking_number(tracking_number: Any) -> str:
    """Return *tracking_number* stripped of surrounding whitespace.

    Raises:
        InvalidTrackingNumberError: If it is not a string or is blank.
    """
    if not isinstance(tracking_number, str) or not tracking_number.strip():
        raise InvalidTrackingNumberError()
    return tracking_number.strip()


def build_tracking_url(tracking_number: str, template: str) -> str:
    """Fill the ``{tracking_number}`` placeholder of *template* with the percent-encoded number."""
    return template.format(tracking_number=quote(tracking_number, safe=_URI_COMPONENT_SAFE))


async def scrape_tracking(
    tracking_number: str,
    options: ScrapeOptions | None = None,
    *,
    settings: Settings | None = None,
) -> Any:
    """Fetch the tracking site's API payload for *tracking_number*.

    Args:
        tracking_number: Carrier-issued shipment identifier.
        options: Per-call overrides for the capture timeout and headless mode.
        settings: Resolved settings; defaults to :func:`get_settings`.

    Returns:
        The parsed JSON body of the first intercepted API response, or
        ``{"error": "Failed to parse JSON"}`` if that body was not JSON.

    Raises:
        InvalidTrackingNumberError: Before any browser is launched.
        ScrapeTimeoutError: If no matching response arrives within the timeout.
        NavigationError: If the tracking page cannot be reached first.
    """
    tracking_number = validate_tracking_number(tracking_number)
    settings = settings or get_settings()
    options = options or ScrapeOptions()

    timeout_ms = settings.target.default_timeout_ms if options.timeout_ms is None else options.timeout_ms
    url = build_tracking_url(tracking_number, settings.target.tracking_url_template)
    profile = profile_from_settings(settings, headless=options.headless)
    interceptor = ApiResponseInterceptor(settings.target.api_url_prefix)

    logger.info("Scraping %s (timeout=%dms, headless=%s)", url, timeout_ms, profile.launch_args["headless"])

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(**profile.launch_args)
        context = None
        page = None
        try:
            context = await browser.new_context(**profile.context_args)
            page = await context.new_page()
            if settings.browser.apply_stealth_scripts:
                await apply_stealth_scripts(page)

            interceptor.attach(page)
            captured = await _capture_during_navigation(
                page,
                url,
                interceptor,
                timeout_ms=timeout_ms,
                settings=settings,
            )
        finally:
            interceptor.detach()
            await _close_all(page, context, browser)

    logger.info("Captured tracking data for %s from %s", tracking_number, captured.url)
    return captured.body


async def _capture_during_navigation(
    page: Page,
    url: str,
    interceptor: ApiResponseInterceptor,
    *,
    timeout_ms: int,
    settings: Settings,
) -> CapturedResponse:
    """Navigate to *url* and race the interceptor's capture against *timeout_ms*.

    The timer starts when this is called, not when navigation completes.  A
    capture wins even if navigation is still running; a navigation failure
    only surfaces if nothing has been captured yet.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000
    capture = interceptor.captured
    navigation = asyncio.create_task(
        open_page(
            page,
            url,
            timeout_ms=settings.browser.navigation_timeout_ms,
            wait_until=settings.browser.wait_until,
        )
    )
    pending: set[asyncio.Future[Any]] = {capture, navigation}

    try:
        while not capture.done():
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise ScrapeTimeoutError(timeout_ms)
            done, pending = await asyncio.wait(pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED)
            if navigation in done and not capture.done():
                navigation.result()
        return capture.result()
    finally:
        if not navigation.done():
            navigation.cancel()
        await asyncio.gather(navigation, return_exceptions=True)


async def _close_all(*resources: Any) -> None:
    """Close page, context, and browser in order; failures are logged, not raised."""
    for resource in resources:
        if resource is None:
            continue
        try:
            await resource.close()
        except Exception as exc:
            logger.warning("Ignoring error while closing %s: %s", type(resource).__name__, exc)
