"""Media references: recognizing media URLs and swapping them for local filenames."""

import re
from typing import Literal

from ..core.utils import media_filename, url_extension
from .result import RenderResult

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "svg", "webp", "bmp"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg", "oga", "m4a", "aac", "flac", "opus"})
VIDEO_EXTENSIONS = frozenset({"mp4", "webm", "ogv", "mov", "m4v"})

URL_RE = re.compile(r"https?://[^\s\"'<>\[\]]+")
# Sentence punctuation that follows a URL in running text
TRAILING_PUNCTUATION = ".,;:!?)"


def media_kind(url: str) -> Literal["image", "audio", "video"] | None:
    ext = url_extension(url)
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext in AUDIO_EXTENSIONS:
        return "audio"
    if ext in VIDEO_EXTENSIONS:
        return "video"
    return None


def render_plain(text: str) -> RenderResult:
    """
    Handle a plain-text field: no notation is rendered, but every media URL
    is replaced by the filename it will have inside the package.
    """
    media: dict[str, str] = {}

    def replace(m: re.Match[str]) -> str:
        url = m.group(0).rstrip(TRAILING_PUNCTUATION)
        rest = m.group(0)[len(url) :]
        if media_kind(url) is None:
            return m.group(0)
        name = media_filename(url)
        media[name] = url
        return name + rest

    return RenderResult(html=URL_RE.sub(replace, text), media=media)
