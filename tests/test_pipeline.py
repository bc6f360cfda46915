"""Tests for turning pages into bound note records."""

import asyncio

from scrapbox2anki.adapters.scrapbox_parser import ScrapboxParser
from scrapbox2anki.core.errors import PageNotFoundError
from scrapbox2anki.core.model import (
    DEFAULT_NOTE_TYPE,
    SOURCE_URL_FIELD,
    Field,
    Line,
    Note,
    NoteType,
    Page,
    Path,
)
from scrapbox2anki.core.utils import to_title_lc
from scrapbox2anki.pipeline import (
    MakeNotesResult,
    PageWarning,
    format_report,
    make_notes,
    map_fields,
)
from scrapbox2anki.resolve import ResolutionCache


def make_page(title: str, *body: str) -> Page:
    lines = tuple(
        Line(text=t, id=f"l{i}", created=i, updated=i)
        for i, t in enumerate([title, *body])
    )
    return Page(title=title, created=0, updated=len(lines), lines=lines)


class MemoryPageSource:
    def __init__(self, *pages: Page):
        self.pages = {to_title_lc(p.title): p for p in pages}

    async def get_page(self, project: str, title: str) -> Page:
        await asyncio.sleep(0)
        page = self.pages.get(to_title_lc(title))
        if page is None:
            raise PageNotFoundError(project, title)
        return page

    def list_titles(self, project: str):
        return [p.title for p in self.pages.values()]


DECK = make_page("deck-D", "code:deck.json", ' {"id": 7, "name": "D"}')
NOTE_TYPE = make_page(
    "notetype-NT",
    "code:noteType.json",
    ' {"id": 8, "name": "NT", "fields": ["Front", "Back"]}',
    "code:c1.question.html",
    " {{Front}}",
    "code:c1.answer.html",
    " {{Back}}",
)


def run(pages: list[Page]) -> MakeNotesResult:
    cache = ResolutionCache(MemoryPageSource(DECK, NOTE_TYPE), ScrapboxParser())
    return asyncio.run(make_notes("p", pages, cache, ScrapboxParser()))


def test_map_fields_orders_like_note_type():
    """Test the unnamed field fills the first field only when it is not named."""
    note = Note(guid="g", id=1, updated=1, tags=[], fields={"": "text", SOURCE_URL_FIELD: "u"})
    assert map_fields(note, DEFAULT_NOTE_TYPE) == {"Text": "text", SOURCE_URL_FIELD: "u"}

    note_type = NoteType(
        id=1, name="QA", fields=(Field("Q"), Field("A")), templates=()
    )
    note = Note(guid="g", id=1, updated=1, tags=[], fields={"": "x", "Q": "q"})
    assert map_fields(note, note_type) == {"Q": "q", "A": ""}


def test_bound_page():
    """Test a page naming its deck and note type produces records and no warning."""
    page = make_page(
        "C",
        "[deck-D.icon][notetype-NT.icon]",
        "code:c.note.Front",
        " front",
        "code:c.note.Back",
        " back",
    )
    result = run([page])

    [record] = result.records
    assert record.deck.name == "D"
    assert record.note_type.name == "NT"
    assert record.fields == {
        "Front": "front",
        "Back": "back",
        SOURCE_URL_FIELD: "https://scrapbox.io/p/C#l2",
    }
    assert record.tags == ["p", "C"]
    assert not result.has_issues


def test_warnings_and_errors():
    """Test unspecified references, skipped notes and broken references are reported."""
    page_a = make_page(
        "A",
        "code:q.note",
        " hello",
        "code:e.note.other",
        " not in the note type",
    )
    page_b = make_page("B", "[deck-Missing.icon]", "code:b.note", " hi")
    page_c = make_page("Plain page", "no notes here")
    result = run([page_a, page_b, page_c])

    assert [r.guid for r in result.records] == ["q", "b"]
    assert result.records[0].fields["Text"] == "hello"
    assert result.warnings == {
        "/p/A": PageWarning(
            deck_not_specified=True, note_type_not_specified=True, skipped=1
        ),
        "/p/B": PageWarning(
            deck_not_specified=False, note_type_not_specified=True, skipped=0
        ),
    }
    missing = Path("p", "deck-Missing")
    assert list(result.errors) == [missing]
    assert isinstance(result.errors[missing], PageNotFoundError)
    assert result.has_issues


def test_format_report():
    """Test the report lists warnings as a table and errors by reference."""
    page_a = make_page("A", "code:q.note", " hello", "code:e.note.other", " x")
    page_b = make_page("B", "[deck-Missing.icon]", "code:b.note", " hi")
    report = format_report(run([page_a, page_b]))

    lines = report.split("\n")
    assert lines[0] == "There are 2 warnings and 1 errors."
    assert "\t/p/A\tx\tx\t1" in lines
    assert "\t/p/B\to\tx\t0" in lines
    assert "\t/p/deck-Missing\tPageNotFoundError: /p/deck-Missing is not found." in lines


def test_empty_input():
    """Test no pages give an empty result."""
    result = run([])
    assert result.records == []
    assert not result.has_issues
