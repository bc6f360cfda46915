"""Rendering of Scrapbox notation into card HTML."""

from .html import convert
from .media import media_kind, render_plain
from .result import RenderResult

__all__ = [
    "convert",
    "media_kind",
    "render_plain",
    "RenderResult",
]
