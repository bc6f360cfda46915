"""Tests for reading decks from pages."""

import pytest

from scrapbox2anki.adapters.scrapbox_parser import ScrapboxParser
from scrapbox2anki.core.errors import (
    ConfigValidationError,
    DeckNotFoundError,
    DeckSyntaxError,
    InvalidDeckError,
)
from scrapbox2anki.core.model import Deck, Line
from scrapbox2anki.extract import parse_deck


def page(*texts, updated=None):
    """Lines of a page; updated[i] (default 10 * i) dates line i."""
    return [
        Line(
            text=text,
            id=f"l{i}",
            created=0,
            updated=updated[i] if updated else 10 * i,
        )
        for i, text in enumerate(texts)
    ]


def test_parse_deck_from_json():
    """Test a deck.json block; updated comes from its own lines only."""
    lines = page(
        "Deck page",
        "code:deck.json",
        ' {"id": 1, "name": "x"}',
        "unrelated",
        updated=[99, 20, 30, 500],
    )
    assert parse_deck(lines, ScrapboxParser()) == Deck(id=1, name="x", updated=30)


def test_parse_deck_with_description():
    """Test the optional description."""
    lines = page("Deck", "code:deck.json", ' {"id": 2, "name": "x", "description": "d"}')
    deck = parse_deck(lines, ScrapboxParser())
    assert deck.description == "d"


def test_parse_deck_fragments_are_joined():
    """Test several blocks ending in deck.json form one document."""
    lines = page(
        "Deck",
        "code:deck.json",
        ' {"id": 3,',
        "code:my.deck.json",
        ' "name": "joined"}',
    )
    deck = parse_deck(lines, ScrapboxParser())
    assert (deck.id, deck.name) == (3, "joined")


def test_parse_deck_from_table():
    """Test key/value rows of a table:deck."""
    lines = page("Deck", "table:deck", " name\tMy deck", " id\t42")
    deck = parse_deck(lines, ScrapboxParser())
    assert (deck.id, deck.name) == (42, "My deck")
    assert deck.updated == 30


def test_json_overrides_table():
    """Test JSON members win over table rows."""
    lines = page(
        "Deck",
        "table:deck",
        " name\tfrom table",
        " id\t42",
        "code:deck.json",
        ' {"name": "from json"}',
    )
    deck = parse_deck(lines, ScrapboxParser())
    assert (deck.id, deck.name) == (42, "from json")


def test_empty_page():
    """Test an empty page has no deck."""
    with pytest.raises(DeckNotFoundError):
        parse_deck([], ScrapboxParser())


def test_page_without_settings():
    """Test a page without deck blocks."""
    lines = page("Deck", "just text", "code:other.json", " {}")
    with pytest.raises(DeckNotFoundError, match="No deck settings"):
        parse_deck(lines, ScrapboxParser())


@pytest.mark.parametrize(
    "body",
    ["{name", '{"id": NaN, "name": "x"}', "[" * 100_000 + "]" * 100_000],
    ids=["truncated", "nan", "too-deep"],
)
def test_syntax_error(body):
    """Test malformed JSON, NaN and nesting too deep to decode included."""
    lines = page("Deck", "code:deck.json", f" {body}")
    with pytest.raises(DeckSyntaxError):
        parse_deck(lines, ScrapboxParser())


@pytest.mark.parametrize(
    "body, field",
    [
        ('{"name": "x"}', "id"),
        ('{"id": true, "name": "x"}', "id"),
        ('{"id": "1", "name": "x"}', "id"),
        ('{"id": 1}', "name"),
        ('{"id": 1, "name": 5}', "name"),
        ('{"id": 1, "name": "  "}', "name"),
        ('{"id": 1, "name": "x", "description": 1}', "description"),
    ],
)
def test_invalid_deck(body, field):
    """Test each validation failure names the offending member."""
    lines = page("Deck", "code:deck.json", f" {body}")
    with pytest.raises(InvalidDeckError) as exc_info:
        parse_deck(lines, ScrapboxParser())
    assert exc_info.value.field == field
    assert isinstance(exc_info.value, ConfigValidationError)


def test_non_object_deck():
    """Test JSON that is not an object."""
    lines = page("Deck", "code:deck.json", " [1, 2]")
    with pytest.raises(InvalidDeckError, match="must be an object"):
        parse_deck(lines, ScrapboxParser())
