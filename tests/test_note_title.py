"""Tests for note code block name detection."""

import pytest

from scrapbox2anki.extract.note_title import NoteTitle, detect_note_title


@pytest.mark.parametrize(
    "file_name, expected",
    [
        ("abc.note", NoteTitle(guid="abc", name="", is_markup=True)),
        ("abc.note.question", NoteTitle(guid="abc", name="question", is_markup=True)),
        ("abc.note(js)", NoteTitle(guid="abc", name="", is_markup=False)),
        ("jK99#2pa.note.answer(txt)", NoteTitle(guid="jK99#2pa", name="answer", is_markup=False)),
        ("a.note.b.c", NoteTitle(guid="a", name="b.c", is_markup=True)),
        ("x.note.f(a)(b)", NoteTitle(guid="x", name="f(a)", is_markup=False)),
        ("日本語.note.解答", NoteTitle(guid="日本語", name="解答", is_markup=True)),
    ],
)
def test_detect_note_title(file_name, expected):
    """Test guid, field name and markup flag are read from the name."""
    assert detect_note_title(file_name) == expected


@pytest.mark.parametrize(
    "file_name",
    ["javascript", "foo.md", "abc.notes", ".note", "deck.json", "style(css)"],
)
def test_detect_note_title_rejects(file_name):
    """Test names that are not note blocks."""
    assert detect_note_title(file_name) is None
