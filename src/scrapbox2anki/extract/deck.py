from collections.abc import Sequence
from typing import Any

from ..core.errors import DeckNotFoundError, DeckSyntaxError, InvalidDeckError
from ..core.model import Deck, Line
from ..core.nodes import TableBlock
from ..core.ports import Tokenizer
from .settings import is_number, read_settings, read_table
from .walker import to_code_block, walk_packs

DECK_FILE = "deck.json"
DECK_TABLE = "deck"


def parse_deck(lines: Sequence[Line], tokenizer: Tokenizer) -> Deck:
    """
    Read the deck defined on a page.

    Settings come from code blocks whose name ends with ``deck.json``
    (fragments are concatenated) and from a ``table:deck`` of key/value rows.

    Raises:
        DeckNotFoundError: the page is empty or defines no deck
        DeckSyntaxError: the JSON does not parse
        InvalidDeckError: a member is missing or has the wrong type
    """
    if not lines:
        raise DeckNotFoundError("This is an empty page so no deck is found.")

    json_text = ""
    table: dict[str, Any] = {}
    updated = 0  # epoch seconds
    for pack, span in walk_packs(lines, tokenizer):
        if pack.kind == "codeBlock":
            block = to_code_block(pack, tokenizer)
            if not block.file_name.endswith(DECK_FILE):
                continue
            json_text += f"\n{block.content}"
        elif pack.kind == "table":
            table_block = tokenizer.to_block(pack)
            if not isinstance(table_block, TableBlock) or table_block.file_name != DECK_TABLE:
                continue
            read_table(table_block, table)
        else:
            continue
        updated = max([updated, *(line.updated for line in span)])

    deck = read_settings(
        json_text, table, "deck", DeckNotFoundError, DeckSyntaxError, InvalidDeckError
    )

    if "name" not in deck:
        raise InvalidDeckError("Deck name is not found.", field="name")
    if not isinstance(deck["name"], str):
        raise InvalidDeckError("Deck name must be string.", field="name")
    if not deck["name"].strip():
        raise InvalidDeckError("Deck name must not be empty.", field="name")
    if "id" not in deck:
        raise InvalidDeckError("Deck id not found.", field="id")
    if not is_number(deck["id"]):
        raise InvalidDeckError("Deck id must be number.", field="id")
    if "description" in deck and not isinstance(deck["description"], str):
        raise InvalidDeckError("Deck description must be string.", field="description")

    return Deck(
        id=deck["id"],
        name=deck["name"],
        updated=updated,
        description=deck.get("description"),
    )
