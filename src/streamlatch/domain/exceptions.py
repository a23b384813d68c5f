"""Playback attachment exceptions."""

from __future__ import annotations


class StreamlatchError(Exception):
    """Base class for all streamlatch errors."""


class ScriptLoadError(StreamlatchError):
    """Raised when the adaptive-streaming client script fails to load."""


class MediaPlayRejected(StreamlatchError):
    """Raised when a media element rejects ``play()`` (e.g. autoplay policy)."""


class StreamingClientError(StreamlatchError):
    """Raised when an adaptive-streaming session cannot be built or bound."""
