"""Composition root: build the resolver, browser and page-bound attacher."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import httpx
import structlog
from playwright.async_api import Page

from streamlatch.application.use_cases import PlaybackAttacher
from streamlatch.infrastructure.browser import (
    BrowserPool,
    HlsJsClient,
    PageHook,
    PagePlayer,
    PagePlayerSurface,
    PagePlaylist,
    PageScriptLoader,
)
from streamlatch.infrastructure.config.schema import AppConfig
from streamlatch.infrastructure.resolver import HttpxStreamResolver

log = structlog.get_logger(__name__)


@dataclass
class Runtime:
    """Process-wide resources, closed together by ``open_runtime()``."""

    config: AppConfig
    http_client: httpx.AsyncClient
    resolver: HttpxStreamResolver
    browser: BrowserPool


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": config.http_user_agent},
        timeout=config.http_timeout_seconds,
        follow_redirects=True,
    )


def build_resolver(
    config: AppConfig, http_client: httpx.AsyncClient
) -> HttpxStreamResolver:
    return HttpxStreamResolver(
        http_client,
        max_depth=config.resolver_max_depth,
        timeout=config.http_timeout_seconds,
        max_manifest_bytes=config.http_max_manifest_bytes,
    )


def build_page_attacher(
    page: Page, config: AppConfig, resolver: HttpxStreamResolver
) -> PlaybackAttacher:
    """Wire a ``PlaybackAttacher`` to the player living in *page*."""
    playback = config.playback
    return PlaybackAttacher(
        play=PagePlayer(page, function_name=playback.play_function).play,
        playlist=PagePlaylist(page, global_name=playback.playlist_global),
        resolver=resolver,
        surface=PagePlayerSurface(
            page,
            container_selector=playback.container_selector,
            media_selector=playback.media_selector,
        ),
        streaming_client=HlsJsClient(
            page,
            script_url=playback.client_script_url,
            attach_timeout=playback.attach_timeout_seconds,
        ),
        script_loader=PageScriptLoader(page),
        hls_mime_type=playback.hls_mime_type,
        settle_delay=playback.settle_delay_seconds,
    )


async def install_on_page(
    page: Page, config: AppConfig, resolver: HttpxStreamResolver
) -> PlaybackAttacher | None:
    """Build an attacher for *page* and route the page's play calls through it.

    Returns None when the page has no play function to wrap.
    """
    attacher = build_page_attacher(page, config, resolver)
    hook = PageHook(page, function_name=config.playback.play_function)
    if not await hook.install(attacher):
        return None
    return attacher


@asynccontextmanager
async def open_runtime(config: AppConfig) -> AsyncIterator[Runtime]:
    """Create shared resources and release them on exit."""
    http_client = build_http_client(config)
    browser = BrowserPool(
        headless=config.playwright_headless,
        timeout_ms=config.playwright_timeout_ms,
    )
    runtime = Runtime(
        config=config,
        http_client=http_client,
        resolver=build_resolver(config, http_client),
        browser=browser,
    )
    log.debug("runtime_opened", max_depth=config.resolver_max_depth)
    try:
        yield runtime
    finally:
        await browser.cleanup()
        await http_client.aclose()
        log.debug("runtime_closed")
