from pathlib import Path as FsPath
from typing import Iterable, Protocol

from .model import NoteRecord, Page
from .nodes import Block, Pack


class PageSource(Protocol):
    """
    Where pages come from. Raises PageNotFoundError for unknown pages.
    """

    async def get_page(self, project: str, title: str) -> Page:
        pass

    def list_titles(self, project: str) -> Iterable[str]:
        pass


class Tokenizer(Protocol):
    """
    Split page text into packs of rows and convert them into blocks.

    Every block reports how many source rows it consumed, so callers can walk
    the timestamped page lines in lock-step.
    """

    def pack_rows(self, text: str, has_title: bool) -> list[Pack]:
        pass

    def to_block(self, pack: Pack) -> Block:
        pass

    def parse(self, text: str, has_title: bool) -> list[Block]:
        pass


class PackageBuilder(Protocol):
    """
    Serialize finished records into a flashcard package.
    """

    def build(self, records: list[NoteRecord], out: FsPath) -> None:
        pass
