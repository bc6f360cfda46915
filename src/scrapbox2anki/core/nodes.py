"""Syntax tree produced by a Tokenizer: packs, blocks and inline nodes."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal, Union


@dataclass(frozen=True)
class Row:
    indent: int
    text: str  # including the indent


@dataclass
class Pack:
    kind: Literal["title", "line", "table", "codeBlock"]
    rows: list[Row] = field(default_factory=list)


# Inline nodes


@dataclass(frozen=True)
class PlainNode:
    text: str


@dataclass(frozen=True)
class BlankNode:
    text: str


@dataclass(frozen=True)
class StrongNode:
    nodes: tuple[Node, ...]


@dataclass(frozen=True)
class DecorationNode:
    decos: tuple[str, ...]  # "*-1".."*-10" for stars, otherwise the symbol itself
    nodes: tuple[Node, ...]


@dataclass(frozen=True)
class QuoteNode:
    nodes: tuple[Node, ...]


@dataclass(frozen=True)
class CodeNode:
    text: str


@dataclass(frozen=True)
class CommandLineNode:
    symbol: str  # "$" or "%"
    text: str


@dataclass(frozen=True)
class HelpfeelNode:
    text: str


@dataclass(frozen=True)
class FormulaNode:
    formula: str


@dataclass(frozen=True)
class NumberListNode:
    number: int
    nodes: tuple[Node, ...]


@dataclass(frozen=True)
class ImageNode:
    src: str
    link: str = ""


@dataclass(frozen=True)
class StrongImageNode:
    src: str


PathType = Literal["root", "relative"]


@dataclass(frozen=True)
class IconNode:
    path: str  # "name" or "/project/name"
    path_type: PathType


@dataclass(frozen=True)
class StrongIconNode:
    path: str
    path_type: PathType


@dataclass(frozen=True)
class LinkNode:
    path_type: Literal["absolute", "root", "relative"]
    href: str
    content: str = ""


@dataclass(frozen=True)
class HashTagNode:
    href: str


@dataclass(frozen=True)
class GoogleMapNode:
    latitude: float
    longitude: float
    zoom: int
    place: str = ""


Node = Union[
    PlainNode,
    BlankNode,
    StrongNode,
    DecorationNode,
    QuoteNode,
    CodeNode,
    CommandLineNode,
    HelpfeelNode,
    FormulaNode,
    NumberListNode,
    ImageNode,
    StrongImageNode,
    IconNode,
    StrongIconNode,
    LinkNode,
    HashTagNode,
    GoogleMapNode,
]


# Blocks


@dataclass(frozen=True)
class TitleBlock:
    text: str
    row_count: int = 1


@dataclass(frozen=True)
class LineBlock:
    indent: int
    nodes: tuple[Node, ...]
    row_count: int = 1


@dataclass(frozen=True)
class TableBlock:
    indent: int
    file_name: str
    cells: tuple[tuple[tuple[Node, ...], ...], ...]  # rows -> cells -> nodes
    raw_cells: tuple[tuple[str, ...], ...]
    row_count: int


@dataclass(frozen=True)
class CodeBlock:
    indent: int
    file_name: str
    content: str
    row_count: int


Block = Union[TitleBlock, LineBlock, TableBlock, CodeBlock]
