from .manifest import (
    has_playlist_suffix,
    is_playlist_content_type,
    iter_reference_lines,
    join_reference,
    looks_like_playlist,
    url_has_playlist_suffix,
)
from .stream_resolver import DEFAULT_MAX_DEPTH, HttpxStreamResolver

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "HttpxStreamResolver",
    "has_playlist_suffix",
    "is_playlist_content_type",
    "iter_reference_lines",
    "join_reference",
    "looks_like_playlist",
    "url_has_playlist_suffix",
]
