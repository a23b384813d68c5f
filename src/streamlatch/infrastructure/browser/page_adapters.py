"""Playwright adapters for the player page: surface, element, playlist, player.

The page owns the playlist (``window.currentPlaylist``) and the play
function (``window.playPlaylistTrack``); these adapters read and drive
them through ``page.evaluate`` without holding any page state locally.
"""

from __future__ import annotations

from typing import Any

import structlog
from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError

from streamlatch.domain.exceptions import MediaPlayRejected

log = structlog.get_logger(__name__)

DEFAULT_CONTAINER_SELECTOR = "#modalBody"
DEFAULT_MEDIA_SELECTOR = "audio.preview-audio"
DEFAULT_PLAYLIST_GLOBAL = "currentPlaylist"
DEFAULT_PLAY_FUNCTION = "playPlaylistTrack"

# Where PageHook keeps the page's own play function once it is wrapped.
ORIGINAL_PLAY_GLOBAL = "__streamlatchOriginalPlay"

_SOURCE_CHILD_JS = """
(el) => {
  const source = el.querySelector('source');
  return source && source.src ? source.src : '';
}
"""


class PageMediaElement:
    """``<audio>``/``<video>`` element inside a Playwright page."""

    def __init__(self, handle: ElementHandle) -> None:
        self._handle = handle

    @property
    def handle(self) -> ElementHandle:
        return self._handle

    async def current_src(self) -> str:
        return await self._handle.evaluate("(el) => el.currentSrc || ''")

    async def src_attribute(self) -> str:
        return await self._handle.evaluate("(el) => el.src || ''")

    async def source_child_src(self) -> str:
        return await self._handle.evaluate(_SOURCE_CHILD_JS)

    async def can_play_type(self, mime_type: str) -> str:
        return await self._handle.evaluate(
            "(el, type) => el.canPlayType(type)", mime_type
        )

    async def set_src(self, url: str) -> None:
        await self._handle.evaluate("(el, url) => { el.src = url; }", url)

    async def play(self) -> None:
        try:
            await self._handle.evaluate("(el) => el.play()")
        except PlaywrightError as exc:
            raise MediaPlayRejected(exc.message) from exc


class PagePlayerSurface:
    """Finds the preview media element inside the player modal."""

    def __init__(
        self,
        page: Page,
        *,
        container_selector: str = DEFAULT_CONTAINER_SELECTOR,
        media_selector: str = DEFAULT_MEDIA_SELECTOR,
    ) -> None:
        self._page = page
        self._container_selector = container_selector
        self._media_selector = media_selector

    async def find_media_element(self) -> PageMediaElement | None:
        container = await self._page.query_selector(self._container_selector)
        if container is None:
            return None
        media = await container.query_selector(self._media_selector)
        if media is None:
            return None
        return PageMediaElement(media)


class PagePlaylist:
    """The page-global playlist array, addressed by index."""

    def __init__(self, page: Page, *, global_name: str = DEFAULT_PLAYLIST_GLOBAL) -> None:
        self._page = page
        self._global_name = global_name

    async def length(self) -> int:
        return await self._page.evaluate(
            "(name) => Array.isArray(window[name]) ? window[name].length : 0",
            self._global_name,
        )

    async def get(self, index: int) -> str:
        return await self._page.evaluate(
            "([name, i]) => window[name][i]", [self._global_name, index]
        )

    async def set(self, index: int, url: str) -> None:
        await self._page.evaluate(
            "([name, i, url]) => { window[name][i] = url; }",
            [self._global_name, index, url],
        )


class PagePlayer:
    """Calls the page's own play function.

    Once ``PageHook`` has wrapped the page global, the saved original is
    called instead so the wrapper never re-enters itself.
    """

    def __init__(self, page: Page, *, function_name: str = DEFAULT_PLAY_FUNCTION) -> None:
        self._page = page
        self._function_name = function_name

    async def play(self, index: Any) -> Any:
        return await self._page.evaluate(
            "([name, saved, i]) => (window[saved] || window[name])(i)",
            [self._function_name, ORIGINAL_PLAY_GLOBAL, index],
        )
