"""Assemble flashcard notes from the code blocks of a page."""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..core.model import (
    SOURCE_URL_FIELD,
    AssembledPage,
    Line,
    Note,
    Path,
    RawField,
    RawNote,
    parse_path,
)
from ..core.nodes import TitleBlock
from ..core.ports import Tokenizer
from ..core.utils import page_url, to_title_lc
from ..render import RenderResult, convert, render_plain
from .icons import get_icons
from .note_title import detect_note_title
from .walker import to_code_block, walk_packs

LOGGER = logging.getLogger(__name__)


@dataclass
class _NoteAccumulator:
    guid: str
    id: float = math.inf
    updated: float = -math.inf
    fields: dict[str, RawField] = field(default_factory=dict)

    def freeze(self) -> RawNote:
        return RawNote(
            guid=self.guid,
            id=int(self.id),
            updated=int(self.updated),
            fields=dict(self.fields),
        )


def assemble_notes(
    project: str, title: str, lines: Sequence[Line], tokenizer: Tokenizer
) -> AssembledPage:
    """
    Collect raw notes and the deck / note type references of one page.

    Code blocks named ``<guid>.note[.<field>][(lang)]`` are merged by guid.
    The first icon starting with ``deck-`` (``notetype-``) names the deck
    (note type) page; blocks are no longer inspected once both are known.
    """
    if not lines:
        return AssembledPage()

    notes: dict[str, _NoteAccumulator] = {}
    deck_ref: Path | None = None
    note_type_ref: Path | None = None

    for pack, span in walk_packs(lines, tokenizer):
        if pack.kind in ("line", "table"):
            if deck_ref and note_type_ref:
                continue
            for icon in get_icons(tokenizer.to_block(pack)):
                lowered = icon.lower()
                if deck_ref is None and lowered.startswith("deck-"):
                    deck_ref = parse_path(icon, project)
                if note_type_ref is None and lowered.startswith("notetype-"):
                    note_type_ref = parse_path(icon, project)
            continue

        if pack.kind != "codeBlock":
            continue

        block = to_code_block(pack, tokenizer)
        note_title = detect_note_title(block.file_name)
        if note_title is None:
            continue

        acc = notes.get(note_title.guid)
        if acc is None:
            source_url = f"{page_url(project, title)}#{span[0].id}"
            acc = _NoteAccumulator(
                guid=note_title.guid,
                fields={SOURCE_URL_FIELD: RawField(is_markup=False, content=source_url)},
            )
            notes[note_title.guid] = acc

        # The oldest line of any contributing block dates the note
        acc.id = min([acc.id, *(line.created * 1000 for line in span)])
        acc.updated = max([acc.updated, *(line.updated * 1000 for line in span)])

        prev = acc.fields.get(note_title.name)
        if prev is None:
            acc.fields[note_title.name] = RawField(note_title.is_markup, block.content)
        else:
            acc.fields[note_title.name] = RawField(
                prev.is_markup and note_title.is_markup,
                f"{prev.content}\n{block.content}" if prev.content else block.content,
            )

    LOGGER.debug("/%s/%s: %d notes assembled", project, title, len(notes))
    return AssembledPage(
        notes=[acc.freeze() for acc in notes.values()],
        deck=deck_ref,
        note_type=note_type_ref,
    )


def render_fields(
    note: RawNote, project: str, tokenizer: Tokenizer
) -> dict[str, RenderResult]:
    results = {}
    for name, raw in note.fields.items():
        if name == SOURCE_URL_FIELD:
            results[name] = RenderResult(html=raw.content)
            continue
        if not raw.is_markup:
            results[name] = render_plain(raw.content)
            continue
        blocks = [
            b
            for b in tokenizer.parse(raw.content, has_title=False)
            if not isinstance(b, TitleBlock)
        ]
        results[name] = convert(blocks, project)
    return results


def dedupe_tags(tags: Sequence[str]) -> list[str]:
    """Keep the first spelling of every tag, comparing like page titles."""
    seen: set[str] = set()
    out = []
    for tag in tags:
        key = to_title_lc(tag)
        if key in seen:
            continue
        seen.add(key)
        out.append(tag)
    return out


def parse_notes(
    project: str, title: str, lines: Sequence[Line], tokenizer: Tokenizer
) -> list[Note]:
    """Assemble and render the notes of one page."""
    page = assemble_notes(project, title, lines, tokenizer)
    out = []
    for raw in page.notes:
        results = render_fields(raw, project, tokenizer)
        # The source project and page title always come first
        tags = [project, title]
        media: dict[str, str] = {}
        for result in results.values():
            tags.extend(result.tags)
            media.update(result.media)
        out.append(
            Note(
                guid=raw.guid,
                id=raw.id,
                updated=raw.updated,
                tags=dedupe_tags(tags),
                fields={name: result.html for name, result in results.items()},
                media=media,
                deck=page.deck,
                note_type=page.note_type,
            )
        )
    return out
