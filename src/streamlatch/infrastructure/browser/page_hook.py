"""Route the page's own play calls through a ``PlaybackAttacher``.

After ``install()``, ``window.playPlaylistTrack(i)`` called by the page's
UI forwards to the attacher via an exposed binding; the original function
is kept under ``ORIGINAL_PLAY_GLOBAL`` and is what ``PagePlayer`` calls.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from playwright.async_api import Page

from streamlatch.infrastructure.browser.page_adapters import (
    DEFAULT_PLAY_FUNCTION,
    ORIGINAL_PLAY_GLOBAL,
)

log = structlog.get_logger(__name__)

BINDING_NAME = "__streamlatchPlay"

_HAS_FUNCTION_JS = "(name) => typeof window[name] === 'function'"

_INSTALL_JS = """
([name, saved, binding]) => {
  if (window[saved]) return false;
  window[saved] = window[name];
  window[name] = (idx) => window[binding](idx);
  return true;
}
"""


class PageHook:
    """Installs the play wrapper into a page, once."""

    def __init__(self, page: Page, *, function_name: str = DEFAULT_PLAY_FUNCTION) -> None:
        self._page = page
        self._function_name = function_name
        self._exposed = False

    async def install(self, play: Callable[[Any], Awaitable[Any]]) -> bool:
        """Wrap the page's play function with *play*.

        Returns False when the page has no play function to wrap.
        Installing again on the same document is a no-op.
        """
        if not await self._page.evaluate(_HAS_FUNCTION_JS, self._function_name):
            log.info("page_hook_skipped", function=self._function_name)
            return False

        if not self._exposed:
            await self._page.expose_function(BINDING_NAME, play)
            self._exposed = True

        replaced = await self._page.evaluate(
            _INSTALL_JS, [self._function_name, ORIGINAL_PLAY_GLOBAL, BINDING_NAME]
        )
        if replaced:
            log.info("page_hook_installed", function=self._function_name)
        return True
