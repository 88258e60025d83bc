"""Interception of the tracking site's own API responses.

The tracking page renders results from a background XHR to its internal
API.  Instead of scraping the rendered HTML, ``ApiResponseInterceptor``
listens to every network response the page receives and captures the first
one whose URL starts with the configured API prefix.

Attach to a page **before** navigation:

.. code-block:: python

    interceptor = ApiResponseInterceptor("https://parcelsapp.com/api/v2/parcels")
    interceptor.attach(page)
    await page.goto(url)
    captured = await interceptor.captured
    interceptor.detach()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from playwright.async_api import Error as PlaywrightError

if TYPE_CHECKING:
    from playwright.async_api import Page, Response

logger = logging.getLogger(__name__)

UNPARSEABLE_BODY: dict[str, str] = {"error": "Failed to parse JSON"}


@dataclass
class CapturedResponse:
    """The intercepted API response."""

    url: str
    status: int
    body: Any


class ApiResponseInterceptor:
    """One-shot capture of the first response matching *url_prefix*.

    The first matching response claims the capture even if a second match
    finishes downloading sooner.  A body that cannot be parsed as JSON is
    replaced by :data:`UNPARSEABLE_BODY` rather than failing the capture.

    Args:
        url_prefix: Absolute URL prefix of the site's internal API.
    """

    def __init__(self, url_prefix: str) -> None:
        self.url_prefix = url_prefix
        self._page: Page | None = None
        self._future: asyncio.Future[CapturedResponse] | None = None
        self._claimed = False
        self._handler = self._on_response

    @property
    def attached(self) -> bool:
        return self._page is not None

    @property
    def captured(self) -> asyncio.Future[CapturedResponse]:
        """Future resolved with the :class:`CapturedResponse`."""
        if self._future is None:
            raise RuntimeError("Interceptor has not been attached to a page")
        return self._future

    def matches(self, url: str) -> bool:
        return url.startswith(self.url_prefix)

    def attach(self, page: Page) -> None:
        """Register the response handler on a Playwright page.

        Must be called from a running event loop, before ``page.goto(...)``.
        """
        self._future = asyncio.get_running_loop().create_future()
        self._claimed = False
        page.on("response", self._handler)
        self._page = page
        logger.debug("Response interceptor attached (prefix=%s)", self.url_prefix)

    def detach(self) -> None:
        """Remove the response handler. Safe to call more than once."""
        if self._page is None:
            return
        page, self._page = self._page, None
        page.remove_listener("response", self._handler)
        logger.debug("Response interceptor detached")

    async def _on_response(self, response: Response) -> None:
        """Handle a Playwright ``response`` event."""
        url = response.url
        if self._claimed or not self.matches(url):
            return
        self._claimed = True
        logger.info("Intercepted tracking API response: %s (HTTP %s)", url, response.status)

        try:
            body = await response.json()
        except (PlaywrightError, ValueError) as exc:
            logger.warning("Tracking API response from %s is not valid JSON: %s", url, exc)
            body = dict(UNPARSEABLE_BODY)
        except Exception as exc:
            if not self.attached:
                # Capture already abandoned; nobody awaits the future any more.
                logger.debug("Dropping late tracking API read failure from %s: %s", url, exc)
                return
            self.detach()
            if self._future is not None and not self._future.done():
                self._future.set_exception(exc)
            return

        self.detach()
        if self._future is not None and not self._future.done():
            self._future.set_result(CapturedResponse(url=url, status=response.status, body=body))
