import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from ..core.model import Deck, NoteRecord, NoteType
from ..core.ports import PackageBuilder


# Keys as they are written in the settings blocks of a page
_SETTING_KEYS = {"font_size": "fontSize", "is_cloze": "isCloze"}


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {_SETTING_KEYS.get(k, k): v for k, v in data.items() if v is not None}


def deck_to_dict(deck: Deck) -> dict[str, Any]:
    return _compact(asdict(deck))


def note_type_to_dict(note_type: NoteType) -> dict[str, Any]:
    data = asdict(note_type)
    data["fields"] = [_compact(f) for f in data["fields"]]
    return _compact(data)


class JsonBundleBuilder(PackageBuilder):
    """
    Write records as one JSON document for an external package builder.

    Decks and note types are stored once, keyed by id; notes refer to them.
    """

    def bundle(self, records: list[NoteRecord]) -> dict[str, Any]:
        decks: dict[str, Any] = {}
        note_types: dict[str, Any] = {}
        media: dict[str, str] = {}
        notes = []
        for r in records:
            decks.setdefault(str(r.deck.id), deck_to_dict(r.deck))
            note_types.setdefault(str(r.note_type.id), note_type_to_dict(r.note_type))
            media.update(r.media)
            notes.append(
                {
                    "guid": r.guid,
                    "id": r.id,
                    "updated": r.updated,
                    "tags": r.tags,
                    "fields": r.fields,
                    "deck": r.deck.id,
                    "noteType": r.note_type.id,
                }
            )
        return {"notes": notes, "decks": decks, "noteTypes": note_types, "media": media}

    def build(self, records: list[NoteRecord], out: Path) -> None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(
            json.dumps(self.bundle(records), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
