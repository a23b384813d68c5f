"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streamlatch",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": "streamlatch/0.1.0",
        "max_manifest_bytes": 1024 * 1024,
    },
    "resolver": {
        "max_depth": 4,
    },
    "playback": {
        "settle_delay_seconds": 0.15,
        "container_selector": "#modalBody",
        "media_selector": "audio.preview-audio",
        "hls_mime_type": "application/vnd.apple.mpegurl",
        "client_script_url": "https://cdn.jsdelivr.net/npm/hls.js@1.4.0/dist/hls.min.js",
        "playlist_global": "currentPlaylist",
        "play_function": "playPlaylistTrack",
    },
    "playwright": {
        "headless": True,
        "timeout_ms": 30_000,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
}
