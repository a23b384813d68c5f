"""Port for resolving candidate media URLs to playable leaf URLs."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class StreamResolverPort(Protocol):
    """Resolves a candidate media URL to the actual playable resource.

    Implementations follow redirects and nested HLS manifests.  They
    never raise: on failure they return the best URL known so far.
    """

    async def resolve(self, url: str) -> str:
        """Return the leaf URL for *url* (possibly *url* itself)."""
        ...
