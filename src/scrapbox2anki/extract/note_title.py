import re
from dataclasses import dataclass

LANG_SUFFIX_RE = re.compile(r"^(.+)\(([^()]+)\)$")
NOTE_NAME_RE = re.compile(r"^(.+?)\.note(?:|\.(.+))$")


@dataclass(frozen=True)
class NoteTitle:
    guid: str  # the note the field belongs to
    name: str  # field name, "" for the unnamed field
    is_markup: bool  # parse the content as Scrapbox notation


def detect_note_title(file_name: str) -> NoteTitle | None:
    """
    Read guid and field name from a code block file name.

    Examples:
        >>> detect_note_title("jK99#2pa.note.answer(txt)")
        NoteTitle(guid='jK99#2pa', name='answer', is_markup=False)
        >>> detect_note_title("javascript") is None
        True
    """
    if ".note" not in file_name:
        return None

    lang = LANG_SUFFIX_RE.match(file_name)
    trimmed = lang.group(1) if lang else file_name
    m = NOTE_NAME_RE.match(trimmed)
    if not m:
        return None
    return NoteTitle(guid=m.group(1), name=m.group(2) or "", is_markup=lang is None)
