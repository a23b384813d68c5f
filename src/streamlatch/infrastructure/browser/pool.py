"""Lazily launched Chromium for driving player pages.

A single browser and context are shared by every page the CLI opens.
Concurrent first calls wait on an asyncio lock: the first caller launches
Chromium, later callers receive the same context.
"""

from __future__ import annotations

import asyncio

import structlog
from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

log = structlog.get_logger(__name__)

# Audio previews start from a programmatic play() call, not a user gesture.
_CHROMIUM_ARGS = ("--autoplay-policy=no-user-gesture-required",)


class BrowserPool:
    """Owns the Playwright driver, one Chromium process and one context.

    Usage::

        pool = BrowserPool(headless=False)
        page = await pool.new_page()
        ...
        await pool.cleanup()
    """

    def __init__(self, *, headless: bool = True, timeout_ms: int = 30_000) -> None:
        self._headless = headless
        self._timeout_ms = timeout_ms
        self._pw: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        """Whether the browser is currently connected."""
        return self._browser is not None and self._browser.is_connected()

    async def _ensure_context(self) -> BrowserContext:
        """Launch browser + context (double-check lock)."""
        if self._context is not None and self.is_running:
            return self._context
        async with self._lock:
            if self._context is not None and self.is_running:
                return self._context

            # Clean up stale state if the browser crashed
            if self._pw is not None:
                await self.cleanup()

            self._pw = await async_playwright().start()
            self._browser = await self._pw.chromium.launch(
                headless=self._headless,
                args=list(_CHROMIUM_ARGS),
            )
            self._context = await self._browser.new_context()
            self._context.set_default_timeout(self._timeout_ms)
            log.info("browser_launched", headless=self._headless)
            return self._context

    async def new_page(self) -> Page:
        """Create a new page in the shared context."""
        ctx = await self._ensure_context()
        return await ctx.new_page()

    async def cleanup(self) -> None:
        """Close context, browser and Playwright (idempotent)."""
        if self._context is not None:
            try:
                await self._context.close()
            except Exception:  # noqa: BLE001
                log.warning("browser_context_close_error", exc_info=True)
            self._context = None
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception:  # noqa: BLE001
                log.warning("browser_close_error", exc_info=True)
            self._browser = None
        if self._pw is not None:
            try:
                await self._pw.stop()
            except Exception:  # noqa: BLE001
                log.warning("playwright_stop_error", exc_info=True)
            self._pw = None
        log.debug("browser_cleaned_up")
