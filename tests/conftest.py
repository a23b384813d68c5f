"""Shared test fixtures for the streamlatch test suite."""

from __future__ import annotations

from typing import Any

import pytest

from streamlatch.domain.exceptions import MediaPlayRejected
from streamlatch.infrastructure.playlist import InMemoryPlaylist

# ---------------------------------------------------------------------------
# In-memory doubles for the playback ports
# ---------------------------------------------------------------------------


class FakeMediaElement:
    """Media element with scriptable sources and native HLS support."""

    def __init__(
        self,
        *,
        current_src: str = "",
        src: str = "",
        source_child: str = "",
        native_hls: str = "",
        reject_play: bool = False,
    ) -> None:
        self.current = current_src
        self.src = src
        self.source_child = source_child
        self.native_hls = native_hls
        self.reject_play = reject_play
        self.play_calls = 0
        self.set_src_calls: list[str] = []

    async def current_src(self) -> str:
        return self.current

    async def src_attribute(self) -> str:
        return self.src

    async def source_child_src(self) -> str:
        return self.source_child

    async def can_play_type(self, mime_type: str) -> str:
        return self.native_hls

    async def set_src(self, url: str) -> None:
        self.set_src_calls.append(url)
        self.src = url

    async def play(self) -> None:
        self.play_calls += 1
        if self.reject_play:
            raise MediaPlayRejected("NotAllowedError")


class FakeSurface:
    def __init__(self, element: FakeMediaElement | None = None) -> None:
        self.element = element
        self.lookups = 0

    async def find_media_element(self) -> FakeMediaElement | None:
        self.lookups += 1
        return self.element


class FakeSession:
    def __init__(self, number: int) -> None:
        self.number = number
        self.attached_to: Any = None
        self.loaded: str | None = None
        self.destroyed = False

    async def attach_media(self, element: Any) -> None:
        self.attached_to = element

    async def load_source(self, url: str) -> None:
        self.loaded = url

    async def destroy(self) -> None:
        self.destroyed = True


class FakeStreamingClient:
    def __init__(self, *, supported: bool = True) -> None:
        self.supported = supported
        self.sessions: list[FakeSession] = []

    @property
    def script_url(self) -> str:
        return "https://cdn.example.com/hls.min.js"

    async def is_supported(self) -> bool:
        return self.supported

    async def create_session(self) -> FakeSession:
        session = FakeSession(len(self.sessions) + 1)
        self.sessions.append(session)
        return session


class FakeScriptLoader:
    def __init__(self) -> None:
        self.loaded: list[str] = []

    async def ensure_loaded(self, url: str) -> None:
        if url not in self.loaded:
            self.loaded.append(url)


class FakeResolver:
    """Maps URLs through a dict; unknown URLs resolve to themselves."""

    def __init__(self, mapping: dict[str, str] | None = None) -> None:
        self.mapping = mapping or {}
        self.calls: list[str] = []

    async def resolve(self, url: str) -> str:
        self.calls.append(url)
        return self.mapping.get(url, url)


class RecordingPlay:
    """Stand-in for the external play(index) function."""

    def __init__(self, *, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[Any] = []

    async def __call__(self, index: Any) -> Any:
        self.calls.append(index)
        if self.error is not None:
            raise self.error
        return self.result


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def playlist() -> InMemoryPlaylist:
    """Three-track playlist: HLS master, plain MP3, HLS master."""
    return InMemoryPlaylist(
        [
            "https://cdn.example.com/a/master.m3u8",
            "https://cdn.example.com/b/track.mp3",
            "https://cdn.example.com/c/master.m3u8",
        ]
    )


@pytest.fixture()
def streaming_client() -> FakeStreamingClient:
    return FakeStreamingClient()


@pytest.fixture()
def script_loader() -> FakeScriptLoader:
    return FakeScriptLoader()
