"""Domain entities for media playback attachment."""

from __future__ import annotations

from enum import Enum
from urllib.parse import urlsplit

PLAYLIST_SUFFIXES = (".m3u8", ".m3u")
HLS_MIME_TYPE = "application/vnd.apple.mpegurl"


class MediaSourceKind(str, Enum):
    """Classification of a media element's currently playing source."""

    HLS = "hls"
    OTHER = "other"


class AttachOutcome(str, Enum):
    """How a deferred attachment pass ended."""

    NO_ELEMENT = "no_element"  # player UI not open
    NO_SOURCE = "no_source"
    NOT_HLS = "not_hls"  # native playback proceeds untouched
    NATIVE = "native"
    CLIENT = "client"
    UNSUPPORTED = "unsupported"  # client library loaded but unusable here
    FAILED = "failed"


def has_playlist_suffix(path: str) -> bool:
    """Return whether a URL path ends in ``.m3u8`` or ``.m3u``.

    >>> has_playlist_suffix("/live/Master.M3U8")
    True
    >>> has_playlist_suffix("/audio/track.mp3")
    False
    """
    return path.lower().endswith(PLAYLIST_SUFFIXES)


def classify_media_source(src: str) -> MediaSourceKind:
    """Classify a media source URL as HLS or not.

    The path suffix decides.  When the URL cannot be parsed at all a
    plain substring check is used instead.
    """
    try:
        parts = urlsplit(src)
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError:
        is_hls = ".m3u" in src.lower()
    else:
        is_hls = has_playlist_suffix(parts.path)
    return MediaSourceKind.HLS if is_hls else MediaSourceKind.OTHER
