"""Turn pages into note records bound to their deck and note type."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .core.errors import Scrapbox2AnkiError
from .core.model import SOURCE_URL_FIELD, Note, NoteRecord, NoteType, Page, Path
from .core.ports import Tokenizer
from .extract.notes import parse_notes
from .resolve import ResolutionCache

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageWarning:
    deck_not_specified: bool
    note_type_not_specified: bool
    skipped: int  # notes with nothing but a source URL


@dataclass
class MakeNotesResult:
    records: list[NoteRecord] = field(default_factory=list)
    warnings: dict[str, PageWarning] = field(default_factory=dict)  # page path -> warning
    errors: dict[Path, Scrapbox2AnkiError] = field(default_factory=dict)

    @property
    def has_issues(self) -> bool:
        return bool(self.warnings or self.errors)


def map_fields(note: Note, note_type: NoteType) -> dict[str, str]:
    """
    Order the note's fields like the note type. The unnamed field fills the
    first field when the note does not name it.
    """
    out = {}
    for i, f in enumerate(note_type.fields):
        content = note.fields.get(f.name)
        if content is None and i == 0:
            content = note.fields.get("")
        out[f.name] = content or ""
    return out


async def bind_note(note: Note, cache: ResolutionCache) -> NoteRecord | None:
    """Resolve deck and note type; None when the note has nothing to ask."""
    deck = await cache.resolve_deck(note.deck)
    note_type = await cache.resolve_note_type(note.note_type)
    fields = map_fields(note, note_type)
    if all(not v.strip() for name, v in fields.items() if name != SOURCE_URL_FIELD):
        LOGGER.info("note %s: no content for note type %s, skipped", note.guid, note_type.name)
        return None
    return NoteRecord(
        guid=note.guid,
        id=note.id,
        updated=note.updated,
        tags=note.tags,
        fields=fields,
        deck=deck,
        note_type=note_type,
        media=note.media,
    )


async def _page_records(
    project: str, page: Page, cache: ResolutionCache, tokenizer: Tokenizer
) -> tuple[list[NoteRecord], PageWarning | None]:
    notes = parse_notes(project, page.title, page.lines, tokenizer)
    if not notes:
        return [], None

    bound = await asyncio.gather(*(bind_note(note, cache) for note in notes))
    records = [r for r in bound if r is not None]

    # deck / note type references are per page
    warning = PageWarning(
        deck_not_specified=notes[0].deck is None,
        note_type_not_specified=notes[0].note_type is None,
        skipped=len(bound) - len(records),
    )
    if warning.deck_not_specified or warning.note_type_not_specified or warning.skipped:
        return records, warning
    return records, None


async def make_notes(
    project: str,
    pages: Sequence[Page],
    cache: ResolutionCache,
    tokenizer: Tokenizer,
) -> MakeNotesResult:
    """
    Build note records for every page. Deck / note type failures never raise:
    they fall back to the defaults and are reported in ``errors``.
    """
    per_page = await asyncio.gather(
        *(_page_records(project, page, cache, tokenizer) for page in pages)
    )
    result = MakeNotesResult()
    for page, (records, warning) in zip(pages, per_page):
        result.records.extend(records)
        if warning is not None:
            result.warnings[str(Path(project, page.title))] = warning
    result.errors = dict(cache.errors)
    LOGGER.info(
        "%d notes from %d pages (%d warnings, %d errors)",
        len(result.records),
        len(pages),
        len(result.warnings),
        len(result.errors),
    )
    return result


def format_report(result: MakeNotesResult) -> str:
    """Human-readable summary of warnings and errors, one item per line."""
    lines = [
        f"There are {len(result.warnings)} warnings and {len(result.errors)} errors.",
        "",
        "Warnings:",
        "\t(page)\t(has deck?)\t(has note type?)\t(skipped)",
    ]
    for path, warning in result.warnings.items():
        lines.append(
            "\t".join(
                [
                    f"\t{path}",
                    "x" if warning.deck_not_specified else "o",
                    "x" if warning.note_type_not_specified else "o",
                    str(warning.skipped),
                ]
            )
        )
    lines += ["", "Errors:"]
    for ref, error in result.errors.items():
        lines.append(f"\t{ref}\t{error.name}: {error.message}")
    return "\n".join(lines)
