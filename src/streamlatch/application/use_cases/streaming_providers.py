"""Strategies that make an HLS source playable on a media element.

``NativeHlsProvider`` hands the source straight to the element when the
runtime decodes HLS itself.  ``ClientLibraryProvider`` loads an
adaptive-streaming client on demand and binds a fresh session to the
element.
"""

from __future__ import annotations

import structlog

from streamlatch.application.use_cases.session_slot import SessionSlot
from streamlatch.domain.entities import HLS_MIME_TYPE, AttachOutcome
from streamlatch.domain.exceptions import MediaPlayRejected
from streamlatch.domain.ports import (
    MediaElementPort,
    ScriptLoaderPort,
    StreamingClientPort,
)

log = structlog.get_logger(__name__)


class NativeHlsProvider:
    """Uses the element's own HLS decoder (e.g. Safari)."""

    name = "native"

    def __init__(self, mime_type: str = HLS_MIME_TYPE) -> None:
        self._mime_type = mime_type

    async def is_available(self, element: MediaElementPort) -> bool:
        return bool(await element.can_play_type(self._mime_type))

    async def attach(self, element: MediaElementPort, src: str) -> AttachOutcome:
        await element.set_src(src)
        try:
            await element.play()
        except MediaPlayRejected as exc:
            # autoplay policy and friends; not a failure
            log.debug("native_hls_play_rejected", src=src[:120], reason=str(exc))
        return AttachOutcome.NATIVE


class ClientLibraryProvider:
    """Loads the streaming client script once and binds a new session."""

    name = "client"

    def __init__(
        self,
        client: StreamingClientPort,
        loader: ScriptLoaderPort,
        slot: SessionSlot,
    ) -> None:
        self._client = client
        self._loader = loader
        self._slot = slot

    async def is_available(self, element: MediaElementPort) -> bool:
        # Support can only be checked once the script is loaded.
        return True

    async def attach(self, element: MediaElementPort, src: str) -> AttachOutcome:
        await self._loader.ensure_loaded(self._client.script_url)
        if not await self._client.is_supported():
            log.info("hls_client_unsupported", script=self._client.script_url)
            return AttachOutcome.UNSUPPORTED
        await self._slot.replace(self._client, element, src)
        return AttachOutcome.CLIENT
