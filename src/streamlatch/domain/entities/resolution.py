"""Domain entities for stream resolution.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ResolutionFallback(str, Enum):
    """Why a resolution chain stopped before reaching a leaf reference."""

    FETCH_FAILED = "fetch_failed"
    DEPTH_EXHAUSTED = "depth_exhausted"
    CYCLE = "cycle"
    EMPTY_MANIFEST = "empty_manifest"
    NO_REFERENCE = "no_reference"


@dataclass
class ResolutionState:
    """Transient bookkeeping for a single resolution chain.

    ``depth`` grows by exactly one per nested manifest followed.
    ``visited`` holds every URL fetched so far and backs the cycle guard.
    """

    original_url: str
    current_url: str
    depth: int = 0
    requests: int = 0
    visited: set[str] = field(default_factory=set)

    @classmethod
    def start(cls, url: str) -> ResolutionState:
        return cls(original_url=url, current_url=url)

    def descend(self, url: str) -> None:
        self.current_url = url
        self.depth += 1


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving a candidate media URL.

    ``url`` is always usable: when the chain fails part-way it holds the
    best URL known at that point and ``fallback`` says why.
    """

    url: str
    requests: int = 0
    depth: int = 0
    fallback: ResolutionFallback | None = None
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback is not None

    @classmethod
    def from_state(
        cls,
        state: ResolutionState,
        url: str,
        *,
        fallback: ResolutionFallback | None = None,
        error: str | None = None,
    ) -> ResolutionResult:
        return cls(
            url=url,
            requests=state.requests,
            depth=state.depth,
            fallback=fallback,
            error=error,
        )
