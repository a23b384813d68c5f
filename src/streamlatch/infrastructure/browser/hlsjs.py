"""hls.js as the dynamically loaded adaptive-streaming client.

The library is injected into the page once (``PageScriptLoader``) and each
session wraps a ``JSHandle`` to one ``Hls`` instance living in the page.
"""

from __future__ import annotations

import asyncio

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import JSHandle, Page

from streamlatch.domain.exceptions import ScriptLoadError, StreamingClientError
from streamlatch.domain.ports import MediaElementPort
from streamlatch.infrastructure.browser.page_adapters import PageMediaElement

log = structlog.get_logger(__name__)

DEFAULT_HLS_JS_URL = "https://cdn.jsdelivr.net/npm/hls.js@1.4.0/dist/hls.min.js"

_SCRIPT_PRESENT_JS = """
(src) => Array.from(document.scripts).some((s) => s.getAttribute('src') === src)
"""

_ATTACH_MEDIA_JS = """
(hls, media) => new Promise((resolve) => {
  hls.once(window.Hls.Events.MEDIA_ATTACHED, () => resolve());
  hls.attachMedia(media);
})
"""


class PageScriptLoader:
    """Adds external scripts to a page at most once.

    The document itself is the record of what is loaded: a URL that
    already has a ``<script src>`` tag returns immediately.  The lock
    makes concurrent callers wait for the first injection instead of
    adding a second tag.
    """

    def __init__(self, page: Page) -> None:
        self._page = page
        self._lock = asyncio.Lock()

    async def ensure_loaded(self, url: str) -> None:
        async with self._lock:
            if await self._page.evaluate(_SCRIPT_PRESENT_JS, url):
                return
            try:
                await self._page.add_script_tag(url=url)
            except PlaywrightError as exc:
                raise ScriptLoadError(f"failed to load {url}: {exc.message}") from exc
            log.info("client_script_loaded", url=url)


class HlsJsSession:
    """One ``Hls`` instance bound to at most one media element."""

    def __init__(self, handle: JSHandle, *, attach_timeout: float = 10.0) -> None:
        self._handle = handle
        self._attach_timeout = attach_timeout

    async def attach_media(self, element: MediaElementPort) -> None:
        if not isinstance(element, PageMediaElement):
            raise StreamingClientError(
                f"hls.js cannot bind to {type(element).__name__}"
            )
        try:
            await asyncio.wait_for(
                self._handle.evaluate(_ATTACH_MEDIA_JS, element.handle),
                timeout=self._attach_timeout,
            )
        except TimeoutError as exc:
            raise StreamingClientError("hls.js MEDIA_ATTACHED never fired") from exc

    async def load_source(self, url: str) -> None:
        await self._handle.evaluate("(hls, src) => hls.loadSource(src)", url)

    async def destroy(self) -> None:
        try:
            await self._handle.evaluate("(hls) => hls.destroy()")
        finally:
            await self._handle.dispose()


class HlsJsClient:
    """Creates hls.js sessions in a page once the library is loaded."""

    def __init__(
        self,
        page: Page,
        *,
        script_url: str = DEFAULT_HLS_JS_URL,
        attach_timeout: float = 10.0,
    ) -> None:
        self._page = page
        self._script_url = script_url
        self._attach_timeout = attach_timeout

    @property
    def script_url(self) -> str:
        return self._script_url

    async def is_supported(self) -> bool:
        return bool(
            await self._page.evaluate("() => !!(window.Hls && window.Hls.isSupported())")
        )

    async def create_session(self) -> HlsJsSession:
        try:
            handle = await self._page.evaluate_handle("() => new window.Hls()")
        except PlaywrightError as exc:
            raise StreamingClientError(f"cannot construct Hls: {exc.message}") from exc
        return HlsJsSession(handle, attach_timeout=self._attach_timeout)
