"""parcelscope test configuration: shared fixtures for unit and integration tests."""

from __future__ import annotations

import asyncio
import json
import os
from typing import Any

import pytest


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

_ENV_PREFIX = "PARCELSCOPE_"
_PLAIN_ENV_VARS = ("PORT", "AUTH_TOKEN")


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Drop parcelscope env vars and clear the settings LRU cache between tests."""
    from parcelscope.settings.config import get_settings

    for key in list(os.environ):
        if key.startswith(_ENV_PREFIX) or key in _PLAIN_ENV_VARS:
            monkeypatch.delenv(key, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def auth_token(monkeypatch) -> str:
    """Configure a server-side AUTH_TOKEN and return it."""
    from parcelscope.settings.config import get_settings

    token = "s3cret-token"
    monkeypatch.setenv("AUTH_TOKEN", token)
    get_settings.cache_clear()
    return token


# ---------------------------------------------------------------------------
# Playwright fakes
# ---------------------------------------------------------------------------


class FakeResponse:
    """Stand-in for ``playwright.async_api.Response``."""

    def __init__(
        self,
        url: str,
        body: Any = None,
        *,
        status: int = 200,
        invalid_json: bool = False,
        json_error: Exception | None = None,
        json_delay: float = 0.0,
    ) -> None:
        self.url = url
        self.status = status
        self._body = body
        self._invalid_json = invalid_json
        self._json_error = json_error
        self._json_delay = json_delay

    async def json(self) -> Any:
        if self._json_delay:
            await asyncio.sleep(self._json_delay)
        if self._json_error is not None:
            raise self._json_error
        if self._invalid_json:
            raise json.JSONDecodeError("Expecting value", "<html></html>", 0)
        return self._body


class FakePage:
    """Stand-in for ``playwright.async_api.Page``.

    ``goto`` replays *responses* to the registered ``response`` handlers the
    way Playwright does: each handler call is scheduled as a task.
    """

    def __init__(
        self,
        responses: list[FakeResponse] | None = None,
        *,
        goto_error: Exception | None = None,
        goto_delay: float = 0.0,
        close_error: Exception | None = None,
    ) -> None:
        self.responses = responses or []
        self.goto_error = goto_error
        self.goto_delay = goto_delay
        self.close_error = close_error
        self.handlers: dict[str, list[Any]] = {}
        self.init_scripts: list[str] = []
        self.goto_calls: list[dict[str, Any]] = []
        self.closed = False
        self._tasks: list[asyncio.Task] = []

    def on(self, event: str, handler) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler) -> None:
        self.handlers[event].remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self.handlers.get(event, []))

    async def add_init_script(self, script: str) -> None:
        self.init_scripts.append(script)

    async def goto(self, url: str, wait_until: str | None = None, timeout: float | None = None):
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self.goto_error is not None:
            raise self.goto_error
        for response in self.responses:
            self.emit(response)
            await asyncio.sleep(0)
        if self.goto_delay:
            await asyncio.sleep(self.goto_delay)
        return None

    def emit(self, response: FakeResponse) -> None:
        loop = asyncio.get_running_loop()
        for handler in list(self.handlers.get("response", [])):
            self._tasks.append(loop.create_task(handler(response)))

    async def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeContext:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.closed = False

    async def new_page(self) -> FakePage:
        return self.page

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.context: FakeContext | None = None
        self.context_args: dict[str, Any] = {}
        self.closed = False

    async def new_context(self, **kwargs: Any) -> FakeContext:
        self.context_args = kwargs
        self.context = FakeContext(self.page)
        return self.context

    async def close(self) -> None:
        self.closed = True


class FakePlaywright:
    """Stand-in for the object yielded by ``async_playwright()``."""

    def __init__(self, page: FakePage) -> None:
        self.browser = FakeBrowser(page)
        self.launch_args: dict[str, Any] = {}
        self.launch_count = 0
        self.chromium = self

    async def launch(self, **kwargs: Any) -> FakeBrowser:
        self.launch_args = kwargs
        self.launch_count += 1
        return self.browser


class _FakePlaywrightManager:
    def __init__(self, pw: FakePlaywright) -> None:
        self.pw = pw

    async def __aenter__(self) -> FakePlaywright:
        return self.pw

    async def __aexit__(self, *exc_info: Any) -> None:
        return None


@pytest.fixture()
def make_page():
    """Factory for ``FakePage`` instances."""
    return FakePage


@pytest.fixture()
def make_response():
    """Factory for ``FakeResponse`` instances."""
    return FakeResponse


@pytest.fixture()
def fake_playwright(monkeypatch):
    """Return an installer that routes the scraper's ``async_playwright`` to a fake.

    Usage::

        pw = fake_playwright(FakePage([FakeResponse(url, body)]))
    """

    def install(page: FakePage) -> FakePlaywright:
        pw = FakePlaywright(page)
        monkeypatch.setattr("parcelscope.tracking.scraper.async_playwright", lambda: _FakePlaywrightManager(pw))
        return pw

    return install


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests that require external services or real I/O")
    config.addinivalue_line("markers", "slow: marks tests that take more than a few seconds")
