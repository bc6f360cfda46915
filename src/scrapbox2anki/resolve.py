"""Single-flight resolution of deck / note type page references."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from .core.errors import Scrapbox2AnkiError
from .core.model import DEFAULT_DECK, DEFAULT_NOTE_TYPE, Deck, Line, NoteType, Path
from .core.ports import PageSource, Tokenizer
from .extract.deck import parse_deck
from .extract.note_type import parse_note_type

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class ResolutionCache:
    """
    Deck and note type lookups for one conversion run.

    The first request for a page starts one fetch-then-parse task and stores
    it before it runs; every later request for the same page (titles compared
    case-insensitively) awaits that task. Entries are never evicted, so
    create one cache per run.
    """

    def __init__(
        self,
        source: PageSource,
        tokenizer: Tokenizer,
        default_deck: Deck = DEFAULT_DECK,
        default_note_type: NoteType = DEFAULT_NOTE_TYPE,
    ):
        self.source = source
        self.tokenizer = tokenizer
        self.default_deck = default_deck
        self.default_note_type = default_note_type
        self.errors: dict[Path, Scrapbox2AnkiError] = {}
        self.fetch_count = 0
        self._decks: dict[Path, asyncio.Task[Deck]] = {}
        self._note_types: dict[Path, asyncio.Task[NoteType]] = {}

    def get_deck(self, path: Path) -> asyncio.Task[Deck]:
        """Shared task resolving ``path``; it raises on fetch or parse failure."""
        return self._single_flight(self._decks, path, parse_deck, "deck")

    def get_note_type(self, path: Path) -> asyncio.Task[NoteType]:
        return self._single_flight(self._note_types, path, parse_note_type, "note type")

    async def resolve_deck(self, path: Path | None) -> Deck:
        """Deck for ``path``, or the default deck when absent or broken."""
        if path is None:
            return self.default_deck
        try:
            return await self.get_deck(path)
        except Scrapbox2AnkiError as e:
            self._record(path, e, "deck")
            return self.default_deck

    async def resolve_note_type(self, path: Path | None) -> NoteType:
        if path is None:
            return self.default_note_type
        try:
            return await self.get_note_type(path)
        except Scrapbox2AnkiError as e:
            self._record(path, e, "note type")
            return self.default_note_type

    def _single_flight(
        self,
        tasks: dict[Path, asyncio.Task[T]],
        path: Path,
        parse: Callable[[Sequence[Line], Tokenizer], T],
        label: str,
    ) -> asyncio.Task[T]:
        task = tasks.get(path)
        if task is not None:
            LOGGER.debug("%s %s: cache hit", label, path)
            return task
        LOGGER.debug("%s %s: cache miss, fetching", label, path)
        task = asyncio.ensure_future(self._load(path, parse))
        tasks[path] = task
        return task

    async def _load(
        self, path: Path, parse: Callable[[Sequence[Line], Tokenizer], T]
    ) -> T:
        self.fetch_count += 1
        page = await self.source.get_page(path.project, path.title)
        return parse(page.lines, self.tokenizer)

    def _record(self, path: Path, error: Scrapbox2AnkiError, label: str) -> None:
        if path in self.errors:
            return
        LOGGER.warning(
            "%s %s: %s %s; using the default", label, path, error.name, error.message
        )
        self.errors[path] = error
