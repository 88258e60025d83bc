"""Browser launch profile and anti-detection patches.

Provides a ``BrowserProfile`` that configures Playwright's ``launch()`` and
``new_context()`` calls with a fixed desktop fingerprint (user agent and
viewport), sandbox flags for containerised hosts, and an optional proxy.

Usage::

    from parcelscope.browser.profile import apply_stealth_scripts, profile_from_settings

    profile = profile_from_settings(settings)
    browser = await pw.chromium.launch(**profile.launch_args)
    context = await browser.new_context(**profile.context_args)
    page = await context.new_page()
    await apply_stealth_scripts(page)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from playwright.async_api import Page

    from parcelscope.settings.config import Settings

logger = logging.getLogger(__name__)

# Chromium flags required when running as root inside containers.
NO_SANDBOX_ARGS: list[str] = ["--no-sandbox", "--disable-setuid-sandbox"]

# Injected via page.add_init_script() so it runs before any site script.
_STEALTH_SCRIPTS: str = """
// Hide the automation flag
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });

// Headless Chromium lacks chrome.runtime
if (!window.chrome) window.chrome = {};
if (!window.chrome.runtime) window.chrome.runtime = {};

// Headless Chromium reports zero plugins
Object.defineProperty(navigator, 'plugins', {
    get: () => [1, 2, 3, 4, 5],
});

Object.defineProperty(navigator, 'languages', {
    get: () => ['en-US', 'en'],
});

// Headless Chromium answers 'denied' for notifications without a prompt
const originalQuery = window.navigator.permissions.query;
window.navigator.permissions.query = (parameters) =>
    parameters.name === 'notifications'
        ? Promise.resolve({ state: Notification.permission })
        : originalQuery(parameters);
"""


@dataclass
class BrowserProfile:
    """All Playwright launch + context arguments for a single scrape."""

    # Arguments for pw.chromium.launch()
    launch_args: dict[str, Any] = field(default_factory=dict)

    # Arguments for browser.new_context()
    context_args: dict[str, Any] = field(default_factory=dict)

    user_agent: str = ""
    viewport: dict[str, int] = field(default_factory=dict)
    proxy_url: str = ""


def build_browser_profile(
    *,
    headless: bool = True,
    user_agent: str = "",
    viewport_width: int = 1366,
    viewport_height: int = 900,
    sandbox: bool = False,
    proxy: str = "",
) -> BrowserProfile:
    """Build a ``BrowserProfile`` with a fixed desktop fingerprint.

    Args:
        headless: Run browser in headless mode.
        user_agent: User-agent string for the context; Playwright's default when empty.
        viewport_width: Viewport width in CSS pixels.
        viewport_height: Viewport height in CSS pixels.
        sandbox: Keep Chromium's sandbox enabled.
        proxy: Optional proxy server URL.

    Returns:
        A ``BrowserProfile`` ready for Playwright.
    """
    profile = BrowserProfile()

    profile.launch_args["headless"] = headless
    if not sandbox:
        profile.launch_args["args"] = list(NO_SANDBOX_ARGS)

    proxy_url = proxy.strip()
    if proxy_url:
        profile.launch_args["proxy"] = {"server": proxy_url}
        profile.proxy_url = proxy_url
        logger.debug("Using proxy: %s", proxy_url)

    ctx = profile.context_args
    if user_agent:
        ctx["user_agent"] = user_agent
        profile.user_agent = user_agent

    viewport = {"width": viewport_width, "height": viewport_height}
    ctx["viewport"] = viewport
    profile.viewport = viewport

    return profile


def profile_from_settings(settings: Settings, *, headless: bool | str | None = None) -> BrowserProfile:
    """Build the profile described by ``settings.browser``.

    Args:
        settings: Resolved application settings.
        headless: Per-call override of ``settings.browser.headless``. Mode
            names such as ``"new"`` or ``"shell"`` mean headless.
    """
    browser = settings.browser
    if headless is None:
        headless = browser.headless
    elif isinstance(headless, str):
        headless = True
    return build_browser_profile(
        headless=headless,
        user_agent=browser.user_agent,
        viewport_width=browser.viewport_width,
        viewport_height=browser.viewport_height,
        sandbox=browser.sandbox,
        proxy=browser.proxy,
    )


async def apply_stealth_scripts(page: Page) -> None:
    """Inject stealth JavaScript into a Playwright page.

    Call this **before** navigating to the target URL so the scripts
    execute in every frame from the start.
    """
    await page.add_init_script(_STEALTH_SCRIPTS)
    logger.debug("Stealth scripts injected")
