from .media_element import MediaElementPort, PlayerSurfacePort
from .playlist import PlaylistPort
from .stream_resolver import StreamResolverPort
from .streaming_client import (
    AdaptiveStreamingProvider,
    ScriptLoaderPort,
    StreamingClientPort,
    StreamingSessionPort,
)

__all__ = [
    "AdaptiveStreamingProvider",
    "MediaElementPort",
    "PlayerSurfacePort",
    "PlaylistPort",
    "ScriptLoaderPort",
    "StreamResolverPort",
    "StreamingClientPort",
    "StreamingSessionPort",
]
