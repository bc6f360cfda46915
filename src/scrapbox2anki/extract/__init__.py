"""Extraction of notes, decks and note types from page lines."""

from .deck import parse_deck
from .note_title import NoteTitle, detect_note_title
from .note_type import parse_note_type
from .notes import assemble_notes, parse_notes

__all__ = [
    "assemble_notes",
    "detect_note_title",
    "NoteTitle",
    "parse_deck",
    "parse_note_type",
    "parse_notes",
]
