"""Ports for the dynamically loaded adaptive-streaming client."""

from __future__ import annotations

from typing import Protocol

from streamlatch.domain.entities import AttachOutcome
from streamlatch.domain.ports.media_element import MediaElementPort


class ScriptLoaderPort(Protocol):
    """Loads an external client script into the player runtime."""

    async def ensure_loaded(self, url: str) -> None:
        """Load *url* once per runtime lifetime.

        Safe to call concurrently and repeatedly; a URL that is already
        loaded returns immediately without re-fetching.
        Raises ``ScriptLoadError`` on failure.
        """
        ...


class StreamingSessionPort(Protocol):
    """One live adaptive-streaming engine instance."""

    async def attach_media(self, element: MediaElementPort) -> None:
        """Bind to *element*; returns once the media-attached event fired."""
        ...

    async def load_source(self, url: str) -> None:
        ...

    async def destroy(self) -> None:
        """Release the media pipeline held by this instance."""
        ...


class StreamingClientPort(Protocol):
    """Factory for adaptive-streaming sessions (e.g. hls.js)."""

    @property
    def script_url(self) -> str:
        """Location of the client library script."""
        ...

    async def is_supported(self) -> bool:
        """Whether the runtime can host the client (MediaSource present)."""
        ...

    async def create_session(self) -> StreamingSessionPort:
        ...


class AdaptiveStreamingProvider(Protocol):
    """Strategy that makes an HLS source playable on a media element."""

    @property
    def name(self) -> str:
        ...

    async def is_available(self, element: MediaElementPort) -> bool:
        """Whether this strategy applies to *element* in this runtime."""
        ...

    async def attach(self, element: MediaElementPort, src: str) -> AttachOutcome:
        ...
