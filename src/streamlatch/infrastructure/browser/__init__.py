from .hlsjs import DEFAULT_HLS_JS_URL, HlsJsClient, HlsJsSession, PageScriptLoader
from .page_adapters import (
    PageMediaElement,
    PagePlayer,
    PagePlayerSurface,
    PagePlaylist,
)
from .page_hook import PageHook
from .pool import BrowserPool

__all__ = [
    "DEFAULT_HLS_JS_URL",
    "BrowserPool",
    "HlsJsClient",
    "HlsJsSession",
    "PageHook",
    "PageMediaElement",
    "PagePlayer",
    "PagePlayerSurface",
    "PagePlaylist",
    "PageScriptLoader",
]
