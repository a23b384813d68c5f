"""Resolve candidate media URLs through redirects and nested HLS manifests.

Resolution is an explicit loop over :class:`ResolutionState` rather than
recursion, so the termination bound is visible in one place: at most
``max_depth + 1`` fetches per chain.  Every step has a defined fallback
URL; the resolver never raises.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog

from streamlatch.domain.entities import (
    ResolutionFallback,
    ResolutionResult,
    ResolutionState,
)
from streamlatch.infrastructure.resolver.manifest import (
    iter_reference_lines,
    join_reference,
    looks_like_playlist,
    url_has_playlist_suffix,
)

log = structlog.get_logger(__name__)

DEFAULT_MAX_DEPTH = 4
DEFAULT_MAX_MANIFEST_BYTES = 1024 * 1024

_NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


@dataclass(frozen=True)
class _Descend:
    """Step result: the manifest points at another manifest."""

    url: str


class HttpxStreamResolver:
    """Resolves a URL to its final playable resource.

    Usage::

        async with httpx.AsyncClient() as client:
            resolver = HttpxStreamResolver(client)
            leaf = await resolver.resolve("https://cdn.example/a.m3u8")
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        timeout: float = 10.0,
        max_manifest_bytes: int = DEFAULT_MAX_MANIFEST_BYTES,
    ) -> None:
        self._http_client = http_client
        self._max_depth = max_depth
        self._timeout = timeout
        self._max_manifest_bytes = max_manifest_bytes

    @property
    def max_depth(self) -> int:
        return self._max_depth

    async def resolve(self, url: str) -> str:
        """Return the leaf URL for *url*; never raises."""
        result = await self.resolve_detailed(url)
        return result.url

    async def resolve_detailed(self, url: str) -> ResolutionResult:
        """Resolve *url* and report how the chain ended."""
        if not url:
            return ResolutionResult(url=url)

        state = ResolutionState.start(url)
        while True:
            if state.depth > self._max_depth:
                log.debug(
                    "stream_resolve_depth_exhausted",
                    url=state.current_url[:120],
                    depth=state.depth,
                )
                result = ResolutionResult.from_state(
                    state,
                    state.current_url,
                    fallback=ResolutionFallback.DEPTH_EXHAUSTED,
                )
                break

            step = await self._step(state)
            if isinstance(step, _Descend):
                state.descend(step.url)
                continue
            result = step
            break

        log.debug(
            "stream_resolved",
            url=url[:120],
            resolved=result.url[:120],
            requests=result.requests,
            depth=result.depth,
            fallback=result.fallback.value if result.fallback else None,
        )
        return result

    async def _step(self, state: ResolutionState) -> ResolutionResult | _Descend:
        """Fetch ``state.current_url`` once and decide where to go next."""
        url = state.current_url
        state.visited.add(url)
        state.requests += 1

        try:
            async with self._http_client.stream(
                "GET",
                url,
                headers=_NO_CACHE_HEADERS,
                follow_redirects=True,
                timeout=self._timeout,
            ) as resp:
                final_url = str(resp.url)
                if resp.is_error:
                    # logged only; the final URL is still the candidate
                    log.debug(
                        "stream_resolve_error_status",
                        url=final_url[:120],
                        status=resp.status_code,
                    )
                content_type = resp.headers.get("content-type", "")
                if not looks_like_playlist(final_url, content_type):
                    return ResolutionResult.from_state(state, final_url)
                text = await self._read_manifest(resp)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            error = str(exc) or type(exc).__name__
            log.warning(
                "stream_resolve_fetch_failed",
                url=url[:120],
                depth=state.depth,
                error=error,
            )
            return ResolutionResult.from_state(
                state, url, fallback=ResolutionFallback.FETCH_FAILED, error=error
            )
        except Exception as exc:  # noqa: BLE001
            log.exception("stream_resolve_error", url=url[:120], depth=state.depth)
            return ResolutionResult.from_state(
                state,
                url,
                fallback=ResolutionFallback.FETCH_FAILED,
                error=type(exc).__name__,
            )

        state.visited.add(final_url)
        return self._follow_manifest(state, final_url, text)

    def _follow_manifest(
        self, state: ResolutionState, final_url: str, text: str
    ) -> ResolutionResult | _Descend:
        """Pick the first usable reference of a fetched manifest.

        Only the first reference that parses as a URL is consulted.
        """
        if not text.strip():
            return ResolutionResult.from_state(
                state, final_url, fallback=ResolutionFallback.EMPTY_MANIFEST
            )

        for line in iter_reference_lines(text):
            candidate = join_reference(final_url, line)
            if candidate is None:
                log.debug(
                    "stream_resolve_reference_skipped",
                    manifest=final_url[:120],
                    line=line[:120],
                )
                continue
            if not url_has_playlist_suffix(candidate):
                return ResolutionResult.from_state(state, candidate)
            if candidate in state.visited:
                log.info(
                    "stream_resolve_cycle",
                    manifest=final_url[:120],
                    reference=candidate[:120],
                )
                return ResolutionResult.from_state(
                    state, candidate, fallback=ResolutionFallback.CYCLE
                )
            return _Descend(candidate)

        return ResolutionResult.from_state(
            state, final_url, fallback=ResolutionFallback.NO_REFERENCE
        )

    async def _read_manifest(self, resp: httpx.Response) -> str:
        """Read a manifest body, capped at ``max_manifest_bytes``."""
        chunks: list[bytes] = []
        size = 0
        async for chunk in resp.aiter_bytes():
            remaining = self._max_manifest_bytes - size
            chunks.append(chunk[:remaining])
            size += min(len(chunk), remaining)
            if size >= self._max_manifest_bytes:
                log.warning(
                    "stream_resolve_manifest_truncated",
                    url=str(resp.url)[:120],
                    limit=self._max_manifest_bytes,
                )
                break
        # RFC 8216: playlists are UTF-8
        return b"".join(chunks).decode("utf-8", errors="replace")
