"""Tests for the manifest sniffing helpers."""

from __future__ import annotations

import pytest

from streamlatch.infrastructure.resolver.manifest import (
    is_playlist_content_type,
    iter_reference_lines,
    join_reference,
    looks_like_playlist,
    url_has_playlist_suffix,
)

# ---------------------------------------------------------------------------
# Playlist detection
# ---------------------------------------------------------------------------


class TestUrlHasPlaylistSuffix:
    def test_suffix_before_query(self) -> None:
        assert url_has_playlist_suffix("https://cdn.example.com/a.m3u8?t=1") is True

    def test_suffix_only_in_query(self) -> None:
        assert url_has_playlist_suffix("https://cdn.example.com/p?f=a.m3u8") is False

    def test_uppercase(self) -> None:
        assert url_has_playlist_suffix("https://cdn.example.com/A.M3U") is True

    def test_plain_media(self) -> None:
        assert url_has_playlist_suffix("https://cdn.example.com/a.mp3") is False


class TestIsPlaylistContentType:
    @pytest.mark.parametrize(
        "content_type",
        [
            "application/vnd.apple.mpegurl",
            "application/vnd.apple.mpegurl; charset=utf-8",
            "application/x-mpegURL",
            "audio/x-mpegurl",
            "audio/mpegurl",
            "text/plain",
            "TEXT/PLAIN; charset=UTF-8",
        ],
    )
    def test_playlist_types(self, content_type: str) -> None:
        assert is_playlist_content_type(content_type) is True

    @pytest.mark.parametrize(
        "content_type", ["audio/mpeg", "video/mp2t", "text/html", "", "application/json"]
    )
    def test_other_types(self, content_type: str) -> None:
        assert is_playlist_content_type(content_type) is False


class TestLooksLikePlaylist:
    def test_either_signal_is_enough(self) -> None:
        assert looks_like_playlist("https://cdn.example.com/a.m3u8", "audio/mpeg")
        assert looks_like_playlist(
            "https://cdn.example.com/stream", "application/vnd.apple.mpegurl"
        )

    def test_neither_signal(self) -> None:
        assert not looks_like_playlist("https://cdn.example.com/a.mp3", "audio/mpeg")


# ---------------------------------------------------------------------------
# Reference lines
# ---------------------------------------------------------------------------


class TestIterReferenceLines:
    def test_skips_directives_and_blank_lines(self) -> None:
        text = "#EXTM3U\n\n#EXT-X-STREAM-INF:BANDWIDTH=1\nlow.m3u8\n  \nhigh.m3u8\n"
        assert list(iter_reference_lines(text)) == ["low.m3u8", "high.m3u8"]

    def test_crlf_and_whitespace(self) -> None:
        text = "#EXTM3U\r\n   seg-1.ts  \r\n#EXT-X-ENDLIST\r\n"
        assert list(iter_reference_lines(text)) == ["seg-1.ts"]

    def test_indented_comment_is_skipped(self) -> None:
        assert list(iter_reference_lines("   # note\nx.ts")) == ["x.ts"]

    def test_empty(self) -> None:
        assert list(iter_reference_lines("")) == []


class TestJoinReference:
    def test_relative(self) -> None:
        assert (
            join_reference("https://cdn.example.com/live/master.m3u8", "v1/index.m3u8")
            == "https://cdn.example.com/live/v1/index.m3u8"
        )

    def test_root_relative(self) -> None:
        assert (
            join_reference("https://cdn.example.com/live/master.m3u8", "/seg/1.ts")
            == "https://cdn.example.com/seg/1.ts"
        )

    def test_absolute(self) -> None:
        assert (
            join_reference("https://cdn.example.com/a.m3u8", "https://other.example/b.ts")
            == "https://other.example/b.ts"
        )

    def test_invalid_ipv6_is_rejected(self) -> None:
        assert join_reference("https://cdn.example.com/a.m3u8", "http://[oops") is None

    def test_non_http_scheme_is_rejected(self) -> None:
        assert join_reference("https://cdn.example.com/a.m3u8", "data:text/plain,x") is None

    @pytest.mark.parametrize(
        "reference",
        ["ftp://files.example/seg.ts", "blob:https://cdn.example.com/1", "file:///tmp/a.ts"],
    )
    def test_other_schemes_are_rejected(self, reference: str) -> None:
        assert join_reference("https://cdn.example.com/a.m3u8", reference) is None
