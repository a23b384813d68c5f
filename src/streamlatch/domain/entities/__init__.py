from .playback import (
    HLS_MIME_TYPE,
    PLAYLIST_SUFFIXES,
    AttachOutcome,
    MediaSourceKind,
    classify_media_source,
    has_playlist_suffix,
)
from .resolution import ResolutionFallback, ResolutionResult, ResolutionState

__all__ = [
    "HLS_MIME_TYPE",
    "PLAYLIST_SUFFIXES",
    "AttachOutcome",
    "MediaSourceKind",
    "ResolutionFallback",
    "ResolutionResult",
    "ResolutionState",
    "classify_media_source",
    "has_playlist_suffix",
]
