"""Single-instance lifecycle for the live adaptive-streaming session."""

from __future__ import annotations

import asyncio

import structlog

from streamlatch.domain.ports import (
    MediaElementPort,
    StreamingClientPort,
    StreamingSessionPort,
)

log = structlog.get_logger(__name__)


class SessionSlot:
    """Holds at most one live streaming session.

    ``replace()`` releases the previous session before constructing the
    next one, so two pipelines are never bound to the same element.
    Replacements are serialised by a lock; whichever pass completes last
    stays live.
    """

    def __init__(self) -> None:
        self._live: StreamingSessionPort | None = None
        self._destroy_calls = 0
        self._lock = asyncio.Lock()

    @property
    def live(self) -> StreamingSessionPort | None:
        return self._live

    @property
    def destroy_calls(self) -> int:
        """Number of destroy calls issued to superseded sessions."""
        return self._destroy_calls

    async def replace(
        self,
        client: StreamingClientPort,
        element: MediaElementPort,
        src: str,
    ) -> StreamingSessionPort:
        """Destroy the live session, then build, bind and load a new one.

        The new session is stored before binding so that a failed bind
        is still released by the next replacement.
        """
        async with self._lock:
            await self._release_locked()
            session = await client.create_session()
            self._live = session
            await session.attach_media(element)
            await session.load_source(src)
            log.debug("hls_session_replaced", src=src[:120])
            return session

    async def release(self) -> None:
        """Destroy the live session, if any."""
        async with self._lock:
            await self._release_locked()

    async def _release_locked(self) -> None:
        previous, self._live = self._live, None
        if previous is None:
            return
        self._destroy_calls += 1
        try:
            await previous.destroy()
        except Exception:  # noqa: BLE001
            log.warning("hls_session_destroy_failed", exc_info=True)
