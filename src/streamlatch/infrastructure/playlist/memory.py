"""List-backed playlist for embedding without a browser."""

from __future__ import annotations

from collections.abc import Iterable


class InMemoryPlaylist:
    """Ordered track URLs held in a Python list.

    The list is shared by reference: writes through ``set()`` are visible
    to anyone holding ``tracks``.
    """

    def __init__(self, tracks: Iterable[str] | None = None) -> None:
        self.tracks: list[str] = list(tracks or [])

    async def length(self) -> int:
        return len(self.tracks)

    async def get(self, index: int) -> str:
        return self.tracks[index]

    async def set(self, index: int, url: str) -> None:
        self.tracks[index] = url
