"""Utility functions for scrapbox2anki."""

import hashlib
import posixpath
import re
from urllib.parse import quote, urlsplit

SCRAPBOX_ORIGIN = "https://scrapbox.io"

_ESCAPE_MAP = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}
_ESCAPE_RE = re.compile(r"[&<>\"']")

# Characters encodeTitleURI leaves alone, and those it still encodes at the end
_NO_ENCODE_CHARS = '@$&+=:;",'
_NO_TAIL_CHARS = ':;",'


def escape_html(text: str) -> str:
    """Escape the five HTML special characters."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPE_MAP[m.group(0)], text)


def to_title_lc(title: str) -> str:
    """
    Normalize a page title for comparison.

    Examples:
        >>> to_title_lc("Hello World")
        'hello_world'
    """
    return title.replace(" ", "_").lower()


def encode_title_uri(title: str) -> str:
    """
    Encode a page title the way Scrapbox builds page URLs.

    - Spaces become `_`
    - `@$&+=:;",` stay as they are, except `:;",` in last position
    - Everything else goes through encodeURIComponent rules

    Examples:
        >>> encode_title_uri("a b?")
        'a_b%3F'
    """
    out = []
    last = len(title) - 1
    for i, char in enumerate(title):
        if char == " ":
            out.append("_")
        elif char not in _NO_ENCODE_CHARS or (i == last and char in _NO_TAIL_CHARS):
            out.append(quote(char, safe="-_.!~*'()"))
        else:
            out.append(char)
    return "".join(out)


def page_url(project: str, title: str) -> str:
    return f"{SCRAPBOX_ORIGIN}/{project}/{encode_title_uri(title)}"


def url_extension(url: str) -> str:
    """Lower-cased extension of the URL path, without the dot ("" when none)."""
    ext = posixpath.splitext(urlsplit(url).path)[1]
    return ext[1:].lower()


def media_filename(url: str) -> str:
    """Stable local filename for a media URL."""
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()
    ext = url_extension(url)
    return f"{digest}.{ext}" if ext else digest
