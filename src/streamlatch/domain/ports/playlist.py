"""Port for the shared, externally owned playlist."""

from __future__ import annotations

from typing import Protocol


class PlaylistPort(Protocol):
    """Ordered sequence of track URLs owned by the external player.

    Implementations:
      - InMemoryPlaylist (list-backed)
      - PagePlaylist (``window.currentPlaylist`` in a Playwright page)
    """

    async def length(self) -> int:
        """Number of tracks currently in the playlist."""
        ...

    async def get(self, index: int) -> str:
        """Return the track URL at *index*."""
        ...

    async def set(self, index: int, url: str) -> None:
        """Overwrite the track URL at *index*."""
        ...
