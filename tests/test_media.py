from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from funnelbuilder.core.media import (
    EMPTY_VIDEO_PLACEHOLDER,
    INVALID_VIDEO_PLACEHOLDER,
    resolve_video_embed,
    vimeo_id,
    youtube_id,
)


def test_youtube_links_become_embed_urls() -> None:
    expected = "https://www.youtube.com/embed/dQw4w9WgXcQ"
    for url in (
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://youtube.com/shorts/dQw4w9WgXcQ",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
    ):
        embed = resolve_video_embed(url, "youtube")
        assert embed.kind == "youtube"
        assert embed.src == expected
        assert embed.is_iframe


def test_vimeo_links_become_player_urls() -> None:
    embed = resolve_video_embed("https://vimeo.com/76979871", "vimeo")
    assert embed.src == "https://player.vimeo.com/video/76979871"
    assert vimeo_id("https://example.com/76979871") is None


def test_unrecognised_url_for_declared_type_is_invalid() -> None:
    embed = resolve_video_embed("https://example.com/clip", "youtube")
    assert embed.kind == "invalid"
    assert embed.placeholder == INVALID_VIDEO_PLACEHOLDER
    assert youtube_id("https://www.youtube.com/watch?v=") is None


def test_empty_url_shows_player_placeholder() -> None:
    assert resolve_video_embed("", "youtube").placeholder == EMPTY_VIDEO_PLACEHOLDER
    assert resolve_video_embed("https://youtu.be/dQw4w9WgXcQ", "none").kind == "none"


def test_plain_files_play_directly() -> None:
    embed = resolve_video_embed("https://cdn.example.com/vsl.mp4", "video")
    assert embed.kind == "file"
    assert embed.src == "https://cdn.example.com/vsl.mp4"
    assert embed.placeholder is None
    assert resolve_video_embed("javascript:alert(1)", "video").kind == "invalid"
