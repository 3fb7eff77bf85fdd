"""Video sales letter (VSL) embed resolution."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlparse

logger = logging.getLogger(__name__)

EMPTY_VIDEO_PLACEHOLDER = "VSL Video Player"
INVALID_VIDEO_PLACEHOLDER = "Invalid video URL"

_YOUTUBE_HOSTS = {"youtube.com", "www.youtube.com", "m.youtube.com", "youtube-nocookie.com", "www.youtube-nocookie.com"}
_YOUTUBE_ID = re.compile(r"^[A-Za-z0-9_-]{6,}$")
_VIMEO_HOSTS = {"vimeo.com", "www.vimeo.com", "player.vimeo.com"}


@dataclass(frozen=True)
class VideoEmbed:
    kind: str  # youtube | vimeo | file | invalid | none
    src: str = ""

    @property
    def is_iframe(self) -> bool:
        return self.kind in {"youtube", "vimeo"}

    @property
    def placeholder(self) -> Optional[str]:
        if self.kind == "none":
            return EMPTY_VIDEO_PLACEHOLDER
        if self.kind == "invalid":
            return INVALID_VIDEO_PLACEHOLDER
        return None


def youtube_id(url: str) -> Optional[str]:
    parsed = urlparse(url.strip())
    host = (parsed.hostname or "").lower()
    candidate = ""
    if host == "youtu.be":
        candidate = parsed.path.lstrip("/").split("/")[0]
    elif host in _YOUTUBE_HOSTS:
        parts = [p for p in parsed.path.split("/") if p]
        if parts[:1] == ["watch"]:
            candidate = (parse_qs(parsed.query).get("v") or [""])[0]
        elif len(parts) >= 2 and parts[0] in {"embed", "shorts", "live", "v"}:
            candidate = parts[1]
    return candidate if _YOUTUBE_ID.match(candidate) else None


def vimeo_id(url: str) -> Optional[str]:
    parsed = urlparse(url.strip())
    if (parsed.hostname or "").lower() not in _VIMEO_HOSTS:
        return None
    for part in parsed.path.split("/"):
        if part.isdigit():
            return part
    return None


def resolve_video_embed(url: Optional[str], kind: Optional[str] = None) -> VideoEmbed:
    """Turn a stored VSL url/type pair into something the page can render.

    An unrecognised URL for a declared youtube or vimeo type resolves to
    ``invalid`` so the page shows an explicit placeholder instead of a
    broken frame.
    """

    url = (url or "").strip()
    kind = (kind or "").strip().lower()
    if not url or kind == "none":
        return VideoEmbed("none")

    video_id = youtube_id(url)
    if video_id and kind in {"", "youtube", "video"}:
        return VideoEmbed("youtube", f"https://www.youtube.com/embed/{video_id}")
    video_id = vimeo_id(url)
    if video_id and kind in {"", "vimeo", "video"}:
        return VideoEmbed("vimeo", f"https://player.vimeo.com/video/{video_id}")

    if kind in {"youtube", "vimeo"}:
        logger.warning("Unrecognised %s URL: %s", kind, url)
        return VideoEmbed("invalid")

    scheme = urlparse(url).scheme.lower()
    if scheme in {"http", "https", "file", ""}:
        return VideoEmbed("file", url)
    logger.warning("Unsupported video URL scheme %r: %s", scheme, url)
    return VideoEmbed("invalid")
