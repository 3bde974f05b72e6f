# contact_scout/crawler/browser.py
"""
Playwright-backed browsing capability.

:class:`BrowserPool` owns one Chromium instance and hands out
:class:`PlaywrightSurface` objects; each surface lives in its own
``BrowserContext`` so routing rules and cookies never leak between domains.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional, Set

from playwright.async_api import Browser, BrowserContext, Page, Playwright, Route, async_playwright

from contact_scout.crawler.models import ProbeResult

logger = logging.getLogger("ContactScout.browser")

BROWSER_ARGS = [
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-setuid-sandbox",
]


class BrowserUnavailable(RuntimeError):
    """Raised when a surface is requested from a browser that is not running."""


class PlaywrightSurface:
    """One page in a dedicated context."""

    def __init__(self, context: BrowserContext, page: Page, timeout: float) -> None:
        self._context = context
        self._page = page
        self._timeout_ms = timeout * 1000
        self._blocked: frozenset[str] = frozenset()
        self.closed = False

    @property
    def url(self) -> str:
        return self._page.url

    async def navigate(self, url: str, wait_until: str = "domcontentloaded") -> None:
        await self._page.goto(url, wait_until=wait_until, timeout=self._timeout_ms)

    async def content(self) -> str:
        return await self._page.content()

    async def head(self, url: str) -> ProbeResult:
        response = await self._page.request.head(url, timeout=self._timeout_ms)
        try:
            return ProbeResult(status=response.status, headers=dict(response.headers))
        finally:
            await response.dispose()

    async def block_resource_types(self, types: Iterable[str]) -> None:
        self._blocked = frozenset(t.lower() for t in types)
        if self._blocked:
            await self._page.route("**/*", self._route_handler)

    async def _route_handler(self, route: Route) -> None:
        if route.request.resource_type in self._blocked:
            await route.abort()
        else:
            await route.continue_()

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await self._context.close()
        except Exception as exc:
            logger.debug("Context close failed: %s", exc)


class BrowserPool:
    """Launches Chromium lazily and tracks every open surface for draining."""

    def __init__(self, *, headless: bool = True, user_agent: Optional[str] = None, timeout: float = 30.0) -> None:
        self.headless = headless
        self.user_agent = user_agent
        self.timeout = timeout
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._surfaces: Set[PlaywrightSurface] = set()
        self._lock = asyncio.Lock()
        self._shut_down = False

    @classmethod
    def from_config(cls, config) -> BrowserPool:
        return cls(headless=config.headless, user_agent=config.user_agent, timeout=config.page_timeout)

    async def __aenter__(self) -> BrowserPool:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    async def start(self) -> None:
        async with self._lock:
            if self._shut_down:
                raise BrowserUnavailable("browser pool has been shut down")
            if self._browser is not None:
                return
            self._playwright = await async_playwright().start()
            try:
                self._browser = await self._playwright.chromium.launch(
                    headless=self.headless, args=BROWSER_ARGS
                )
            except Exception as exc:
                await self._playwright.stop()
                self._playwright = None
                raise BrowserUnavailable(f"Failed to launch Chromium: {exc}") from exc
            logger.info("Chromium started (%s mode)", "headless" if self.headless else "visible")

    def is_connected(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def open_surface(self) -> PlaywrightSurface:
        if not self.is_connected():
            raise BrowserUnavailable("browser is not connected")
        assert self._browser is not None
        context = await self._browser.new_context(user_agent=self.user_agent)
        page = await context.new_page()
        surface = PlaywrightSurface(context, page, self.timeout)
        self._surfaces.add(surface)
        return surface

    async def release(self, surface: PlaywrightSurface) -> None:
        self._surfaces.discard(surface)
        await surface.close()

    @property
    def open_surfaces(self) -> int:
        return len(self._surfaces)

    async def shutdown(self) -> None:
        """Close every open surface, then the browser. Safe to call repeatedly."""
        async with self._lock:
            self._shut_down = True
            surfaces, self._surfaces = list(self._surfaces), set()
            for surface in surfaces:
                await surface.close()
            if self._browser is not None:
                try:
                    if self._browser.is_connected():
                        await self._browser.close()
                        logger.info("Browser closed")
                except Exception as exc:
                    logger.error("Error on closing the browser: %s", exc)
                self._browser = None
            if self._playwright is not None:
                try:
                    await self._playwright.stop()
                except Exception as exc:
                    logger.debug("Playwright stop failed: %s", exc)
                self._playwright = None


__all__ = ["BROWSER_ARGS", "BrowserPool", "BrowserUnavailable", "PlaywrightSurface"]
