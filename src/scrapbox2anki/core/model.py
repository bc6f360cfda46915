from __future__ import annotations
import re
from dataclasses import dataclass, field

from .utils import to_title_lc


@dataclass(frozen=True)
class Line:
    text: str
    id: str
    created: int  # epoch seconds
    updated: int  # epoch seconds


@dataclass(frozen=True)
class Page:
    title: str
    created: int
    updated: int
    lines: tuple[Line, ...] = ()


@dataclass(frozen=True, eq=False)
class Path:
    """Identifies a page. Titles compare the way Scrapbox compares them."""

    project: str
    title: str

    def key(self) -> tuple[str, str]:
        return (self.project, to_title_lc(self.title))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    def __str__(self) -> str:
        return f"/{self.project}/{self.title}"


_PATH_RE = re.compile(r"^/([\w\-]+)/(.+)$", re.ASCII)


def parse_path(path: str, default_project: str) -> Path:
    """Split "/project/title" into a Path; anything else is a title in default_project."""
    m = _PATH_RE.match(path)
    if m:
        return Path(project=m.group(1), title=m.group(2))
    return Path(project=default_project, title=path)


@dataclass(frozen=True)
class RawField:
    is_markup: bool  # False when the code block name carries a "(lang)" suffix
    content: str


@dataclass(frozen=True)
class RawNote:
    """A note as assembled from code blocks, before rendering."""

    guid: str
    id: int  # ms
    updated: int  # ms
    fields: dict[str, RawField] = field(default_factory=dict)


@dataclass(frozen=True)
class AssembledPage:
    notes: list[RawNote] = field(default_factory=list)
    deck: Path | None = None
    note_type: Path | None = None


@dataclass(frozen=True)
class Note:
    guid: str
    id: int
    updated: int
    tags: list[str]
    fields: dict[str, str]  # "" is the unnamed field
    media: dict[str, str] = field(default_factory=dict)  # filename -> url
    deck: Path | None = None
    note_type: Path | None = None


@dataclass(frozen=True)
class Field:
    name: str
    description: str | None = None
    rtl: bool | None = None
    font: str | None = None
    font_size: int | float | None = None


@dataclass(frozen=True)
class Template:
    name: str
    question: str
    answer: str


@dataclass(frozen=True)
class Deck:
    id: int | float
    name: str
    updated: int = 0
    description: str | None = None


@dataclass(frozen=True)
class NoteType:
    id: int | float
    name: str
    fields: tuple[Field, ...]
    templates: tuple[Template, ...]
    updated: int = 0
    css: str | None = None
    latex: tuple[str, str] | None = None  # (preamble, postamble)
    is_cloze: bool | None = None


@dataclass(frozen=True)
class NoteRecord:
    """A note bound to its deck and note type, ready for a package builder."""

    guid: str
    id: int
    updated: int
    tags: list[str]
    fields: dict[str, str]  # ordered like note_type.fields
    deck: Deck
    note_type: NoteType
    media: dict[str, str] = field(default_factory=dict)


SOURCE_URL_FIELD = "SourceURL"

# Appended to every note type; holds the link back to the source page
RESERVED_FIELDS = (Field(name=SOURCE_URL_FIELD, description="問題の取得元URL"),)

DEFAULT_DECK = Deck(id=1, name="default")

DEFAULT_NOTE_TYPE = NoteType(
    id=1677417085373,
    name="Basic (Cloze)",
    fields=(
        Field(name="Text", description="問題文"),
        *RESERVED_FIELDS,
    ),
    templates=(
        Template(
            name="Card 1",
            question="{{cloze:Text}}\n{{type:Text}}",
            answer='{{cloze:Text}}<br><a href="{{SourceURL}}">source</a>',
        ),
    ),
    is_cloze=True,
)
