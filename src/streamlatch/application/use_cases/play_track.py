"""Play-track decorator: resolve the playlist entry, play, then attach HLS.

caller -> resolve entry -> rewrite playlist -> external play(index)
-> (settle delay) -> locate media element -> classify source
-> native HLS or loaded client session.

The wrapper is strictly best-effort: whatever goes wrong in resolution
or attachment, the wrapped play function still runs with the original
index and its own errors reach the caller unchanged.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from streamlatch.application.use_cases.session_slot import SessionSlot
from streamlatch.application.use_cases.streaming_providers import (
    ClientLibraryProvider,
    NativeHlsProvider,
)
from streamlatch.domain.entities import (
    HLS_MIME_TYPE,
    AttachOutcome,
    MediaSourceKind,
    classify_media_source,
)
from streamlatch.domain.ports import (
    AdaptiveStreamingProvider,
    MediaElementPort,
    PlayerSurfacePort,
    PlaylistPort,
    ScriptLoaderPort,
    StreamingClientPort,
    StreamingSessionPort,
    StreamResolverPort,
)

log = structlog.get_logger(__name__)

PlayFn = Callable[[Any], Awaitable[Any]]

DEFAULT_SETTLE_DELAY = 0.15


async def playing_source(element: MediaElementPort) -> str:
    """Current source, else the ``src`` attribute, else a nested ``<source>``."""
    return (
        await element.current_src()
        or await element.src_attribute()
        or await element.source_child_src()
    )


class PlaybackAttacher:
    """Wraps an external ``play(index)`` with stream resolution and HLS attachment.

    Usage::

        attacher = PlaybackAttacher(
            play=player.play,
            playlist=playlist,
            resolver=resolver,
            surface=surface,
            streaming_client=client,
            script_loader=loader,
        )
        await attacher(3)  # same call shape as player.play(3)
        await attacher.aclose()

    The attacher owns the session slot; nothing else holds the live
    streaming session.
    """

    def __init__(
        self,
        *,
        play: PlayFn,
        playlist: PlaylistPort,
        resolver: StreamResolverPort,
        surface: PlayerSurfacePort,
        streaming_client: StreamingClientPort,
        script_loader: ScriptLoaderPort,
        hls_mime_type: str = HLS_MIME_TYPE,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ) -> None:
        self._play = play
        self._playlist = playlist
        self._resolver = resolver
        self._surface = surface
        self._settle_delay = settle_delay
        self._slot = SessionSlot()
        self._providers: tuple[AdaptiveStreamingProvider, ...] = (
            NativeHlsProvider(hls_mime_type),
            ClientLibraryProvider(streaming_client, script_loader, self._slot),
        )
        self._pending: set[asyncio.Task[AttachOutcome]] = set()

    @property
    def live_session(self) -> StreamingSessionPort | None:
        return self._slot.live

    @property
    def destroyed_sessions(self) -> int:
        return self._slot.destroy_calls

    @property
    def pending_attachments(self) -> int:
        return len(self._pending)

    # ------------------------------------------------------------------
    # Wrapped play
    # ------------------------------------------------------------------

    async def __call__(self, index: Any) -> Any:
        try:
            prepared = await self._prepare(index)
        except Exception:  # noqa: BLE001
            log.warning("play_track_prepare_failed", index=index, exc_info=True)
            prepared = False

        result = await self._play(index)

        if prepared:
            self._schedule_attach()
        return result

    async def _prepare(self, index: Any) -> bool:
        """Resolve and rewrite the entry at *index*.

        Returns False when the index bypasses the wrapper entirely.
        """
        if not isinstance(index, int) or isinstance(index, bool):
            log.debug("play_track_bypass", reason="non_integer_index", index=index)
            return False
        length = await self._playlist.length()
        if not 0 <= index < length:
            log.debug(
                "play_track_bypass",
                reason="out_of_range",
                index=index,
                length=length,
            )
            return False

        track = await self._playlist.get(index)
        resolved = await self._resolver.resolve(track)
        if resolved and resolved != track:
            await self._playlist.set(index, resolved)
            log.info(
                "playlist_entry_resolved",
                index=index,
                original=track[:120],
                resolved=resolved[:120],
            )
        return True

    # ------------------------------------------------------------------
    # Deferred attachment
    # ------------------------------------------------------------------

    def _schedule_attach(self) -> None:
        task = asyncio.create_task(self._deferred_attach())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deferred_attach(self) -> AttachOutcome:
        await asyncio.sleep(self._settle_delay)
        return await self.attach_now()

    async def attach_now(self) -> AttachOutcome:
        """Run one attachment pass against the current player surface.

        Never raises; failures are logged and reported as ``FAILED``.
        """
        try:
            return await self._attach()
        except Exception:  # noqa: BLE001
            log.warning("hls_attach_failed", exc_info=True)
            return AttachOutcome.FAILED

    async def _attach(self) -> AttachOutcome:
        element = await self._surface.find_media_element()
        if element is None:
            return AttachOutcome.NO_ELEMENT

        src = await playing_source(element)
        if not src:
            return AttachOutcome.NO_SOURCE

        if classify_media_source(src) is not MediaSourceKind.HLS:
            return AttachOutcome.NOT_HLS

        for provider in self._providers:
            if not await provider.is_available(element):
                continue
            outcome = await provider.attach(element, src)
            log.info(
                "hls_attached",
                provider=provider.name,
                outcome=outcome.value,
                src=src[:120],
            )
            return outcome
        return AttachOutcome.UNSUPPORTED

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait until every scheduled attachment pass has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel pending attachment passes and destroy the live session."""
        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        await self._slot.release()
