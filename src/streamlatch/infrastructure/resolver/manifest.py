"""HLS manifest sniffing helpers: playlist detection and reference lookup.

Only what is needed to find "the one playable endpoint" lives here:
no variant selection, no segment enumeration.

References are narrowed to absolute http(s) URLs: a manifest line that
joins to any other scheme (``data:``, ``ftp:``, ``blob:``) is treated like
an unparsable line and skipped.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from urllib.parse import urljoin

import httpx

from streamlatch.domain.entities import has_playlist_suffix

# text/plain is deliberately included: manifest servers often mislabel
# playlists.  It also matches ordinary text assets.
_PLAYLIST_CONTENT_TYPE_RE = re.compile(
    r"application/vnd\.apple\.mpegurl"
    r"|application/x-mpegurl"
    r"|audio/x-mpegurl"
    r"|audio/mpegurl"
    r"|text/plain",
    re.IGNORECASE,
)

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def url_has_playlist_suffix(url: str) -> bool:
    """Like :func:`has_playlist_suffix` but for a full URL (query ignored)."""
    try:
        return has_playlist_suffix(httpx.URL(url).path)
    except httpx.InvalidURL:
        return False


def is_playlist_content_type(content_type: str) -> bool:
    return bool(_PLAYLIST_CONTENT_TYPE_RE.search(content_type or ""))


def looks_like_playlist(final_url: str, content_type: str) -> bool:
    """URL shape OR declared content type.

    CDNs rewrite extensions away and manifest servers mislabel content
    types, so either signal alone is enough.
    """
    return url_has_playlist_suffix(final_url) or is_playlist_content_type(
        content_type
    )


def iter_reference_lines(playlist_text: str) -> Iterator[str]:
    """Yield the URI lines of a playlist in order.

    Lines are stripped; blank lines and ``#`` directives/comments are
    skipped.
    """
    for raw_line in _LINE_SPLIT_RE.split(playlist_text):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        yield line


def join_reference(base_url: str, reference: str) -> str | None:
    """Resolve a playlist reference against *base_url*.

    Absolute and relative references are both supported.  Returns
    ``None`` when the result is not an absolute http(s) URL with a host,
    so non-http schemes are rejected even when they parse.
    """
    try:
        joined = urljoin(base_url, reference)
        parsed = httpx.URL(joined)
    except (ValueError, httpx.InvalidURL):
        return None
    if parsed.scheme not in ("http", "https") or not parsed.host:
        return None
    return joined
