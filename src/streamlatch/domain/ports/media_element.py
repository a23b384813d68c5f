"""Ports for the media element and the player surface that hosts it."""

from __future__ import annotations

from typing import Protocol


class MediaElementPort(Protocol):
    """The active audio-capable media element of the player UI."""

    async def current_src(self) -> str:
        """Resolved source currently playing (``""`` when none)."""
        ...

    async def src_attribute(self) -> str:
        """Configured ``src`` of the element (``""`` when unset)."""
        ...

    async def source_child_src(self) -> str:
        """``src`` of a nested ``<source>`` element (``""`` when absent)."""
        ...

    async def can_play_type(self, mime_type: str) -> str:
        """Native decode support: ``""``, ``"maybe"`` or ``"probably"``."""
        ...

    async def set_src(self, url: str) -> None:
        ...

    async def play(self) -> None:
        """Start playback.

        Raises ``MediaPlayRejected`` when the runtime refuses to play.
        """
        ...


class PlayerSurfacePort(Protocol):
    """Locates the active media element inside the player container."""

    async def find_media_element(self) -> MediaElementPort | None:
        """Return the media element, or None when the player is not open."""
        ...
