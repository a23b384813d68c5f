from .play_track import PlaybackAttacher, playing_source
from .session_slot import SessionSlot
from .streaming_providers import ClientLibraryProvider, NativeHlsProvider

__all__ = [
    "ClientLibraryProvider",
    "NativeHlsProvider",
    "PlaybackAttacher",
    "SessionSlot",
    "playing_source",
]
