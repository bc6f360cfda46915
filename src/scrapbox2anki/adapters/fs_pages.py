import asyncio
import json
from pathlib import Path
from typing import Any, Iterable, Iterator
from urllib.parse import unquote

import yaml

from ..core.errors import PageFormatError, PageNotFoundError
from ..core.model import Line, Page
from ..core.ports import PageSource
from ..core.utils import to_title_lc

PAGE_SUFFIXES = (".json", ".yaml", ".yml")


def page_filename(title: str, suffix: str = ".json") -> str:
    """File name a page is stored under; "/" cannot appear in file names."""
    return title.replace("%", "%25").replace("/", "%2F") + suffix


def _timestamp(value: Any, where: str) -> int:
    if isinstance(value, bool):
        raise PageFormatError(f"{where} must be an integer timestamp.")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise PageFormatError(f"{where} must be an integer timestamp.") from e


def page_from_dict(data: Any) -> Page:
    """
    Build a Page from a Scrapbox page dump.

    Lines may be objects ({text, id, created, updated}) or bare strings,
    which take the page's timestamps.
    """
    if not isinstance(data, dict):
        raise PageFormatError("A page must be an object.")
    title = data.get("title")
    if not isinstance(title, str):
        raise PageFormatError("A page must have a string `title`.")
    raw_lines = data.get("lines", [])
    if not isinstance(raw_lines, list):
        raise PageFormatError(f"{title}: `lines` must be an array.")

    created = _timestamp(data.get("created", 0), f"{title}: `created`")
    updated = _timestamp(data.get("updated", created), f"{title}: `updated`")
    lines = []
    for i, raw in enumerate(raw_lines):
        if isinstance(raw, str):
            lines.append(Line(text=raw, id=f"{i}", created=created, updated=updated))
            continue
        if not isinstance(raw, dict) or not isinstance(raw.get("text"), str):
            raise PageFormatError(f"{title}: line {i} must have a string `text`.")
        where = f"{title}: line {i}"
        lines.append(
            Line(
                text=raw["text"],
                id=str(raw.get("id", i)),
                created=_timestamp(raw.get("created", created), f"{where} `created`"),
                updated=_timestamp(raw.get("updated", updated), f"{where} `updated`"),
            )
        )
    return Page(title=title, created=created, updated=updated, lines=tuple(lines))


def load_page_file(path: Path) -> Page:
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (UnicodeDecodeError, ValueError, RecursionError, yaml.YAMLError) as e:
        raise PageFormatError(f"{path}: {e}") from e
    return page_from_dict(data)


class FsPageSource(PageSource):
    """
    Pages stored as <root>/<project>/<title>.json (or .yaml/.yml).

    The folder of a project is scanned once, on the first lookup; pages
    added to it afterwards are not seen by this source.
    """

    def __init__(self, root: Path):
        self.root = root
        self._index: dict[str, dict[str, Path]] = {}

    def _files(self, project: str) -> Iterator[Path]:
        folder = self.root / project
        if not folder.is_dir():
            return
        for p in sorted(folder.iterdir()):
            if p.is_file() and p.suffix in PAGE_SUFFIXES:
                yield p

    def _titles(self, project: str) -> dict[str, Path]:
        index = self._index.get(project)
        if index is None:
            index = {}
            for p in self._files(project):
                index.setdefault(to_title_lc(unquote(p.stem)), p)
            index = self._index.setdefault(project, index)
        return index

    def _load(self, project: str, title: str) -> Page:
        path = self._titles(project).get(to_title_lc(title))
        if path is None:
            raise PageNotFoundError(project, title)
        return load_page_file(path)

    async def get_page(self, project: str, title: str) -> Page:
        return await asyncio.to_thread(self._load, project, title)

    def list_titles(self, project: str) -> Iterable[str]:
        for p in self._files(project):
            yield unquote(p.stem)
