import re

from ..core.nodes import (
    BlankNode,
    Block,
    CodeBlock,
    CodeNode,
    CommandLineNode,
    DecorationNode,
    FormulaNode,
    GoogleMapNode,
    HashTagNode,
    HelpfeelNode,
    IconNode,
    ImageNode,
    LineBlock,
    LinkNode,
    Node,
    NumberListNode,
    Pack,
    PlainNode,
    QuoteNode,
    Row,
    StrongIconNode,
    StrongImageNode,
    StrongNode,
    TableBlock,
    TitleBlock,
)
from ..core.ports import Tokenizer

INDENT_RE = re.compile(r"^\s+")
CODE_START_RE = re.compile(r"^(\s*)code:(.+)$")
TABLE_START_RE = re.compile(r"^(\s*)table:(.+)$")

COMMAND_LINE_RE = re.compile(r"^([$%]) (.+)$")
HELPFEEL_RE = re.compile(r"^\? (.+)$")
NUMBER_LIST_RE = re.compile(r"^(\d+)\. (.*)$")

INLINE_RE = re.compile(
    r"(?P<code>`[^`]*`)"
    r"|(?P<formula>\[\$ (?P<formula_text>[^\]]*?) ?\])"
    r"|(?P<strong>\[\[(?P<strong_text>(?:[^\[\]]|\[[^\[\]]*\])+)\]\])"
    r"|(?P<bracket>\[(?P<bracket_text>(?:[^\[\]]|\[[^\[\]]*\])*)\])"
    r"|(?P<hashtag>(?<!\S)#(?P<tag>[^\s\[\]]+))"
    r"|(?P<url>https?://[^\s\]]+)"
)

DECO_RE = re.compile(r"^([*!\"#%&'()+,\-./{|}<>_~]+)\s+(.*)$", re.DOTALL)
ICON_RE = re.compile(r"^(.+?)\.icon(?:\*([1-9]\d*))?$")
MAP_RE = re.compile(
    r"^([NS])(\d+(?:\.\d+)?),([EW])(\d+(?:\.\d+)?),Z(\d+)(?:\s+(.*))?$"
)
IMAGE_URL_RE = re.compile(
    r"^(?:https?://\S+\.(?:png|jpe?g|gif|svg|webp|bmp)(?:\?\S*)?"
    r"|https://(?:i\.)?gyazo\.com/[0-9a-f]{32}(?:/raw)?)$",
    re.IGNORECASE,
)
URL_RE = re.compile(r"^https?://\S+$")
URL_FIRST_RE = re.compile(r"^(https?://\S+)\s+(.*)$", re.DOTALL)
URL_LAST_RE = re.compile(r"^(.*?)\s+(https?://\S+)$", re.DOTALL)

MAX_STARS = 10


def parse_to_rows(text: str) -> list[Row]:
    rows = []
    for ln in text.split("\n"):
        m = INDENT_RE.match(ln)
        rows.append(Row(indent=len(m.group(0)) if m else 0, text=ln))
    return rows


class ScrapboxParser(Tokenizer):
    def pack_rows(self, text: str, has_title: bool) -> list[Pack]:
        packs: list[Pack] = []
        for i, row in enumerate(parse_to_rows(text)):
            if has_title and i == 0:
                packs.append(Pack("title", [row]))
                continue

            # Rows indented deeper than a code/table header belong to it
            last = packs[-1] if packs else None
            if (
                last is not None
                and last.kind in ("codeBlock", "table")
                and row.indent > last.rows[0].indent
            ):
                last.rows.append(row)
                continue

            if CODE_START_RE.match(row.text):
                packs.append(Pack("codeBlock", [row]))
            elif TABLE_START_RE.match(row.text):
                packs.append(Pack("table", [row]))
            else:
                packs.append(Pack("line", [row]))
        return packs

    def to_block(self, pack: Pack) -> Block:
        head = pack.rows[0]
        indent = head.indent
        if pack.kind == "title":
            return TitleBlock(text=head.text)

        if pack.kind == "codeBlock":
            return CodeBlock(
                indent=indent,
                file_name=head.text[indent + len("code:"):],
                content="\n".join(row.text[indent + 1:] for row in pack.rows[1:]),
                row_count=len(pack.rows),
            )

        if pack.kind == "table":
            raw_cells = tuple(
                tuple(row.text[indent + 1:].split("\t")) for row in pack.rows[1:]
            )
            return TableBlock(
                indent=indent,
                file_name=head.text[indent + len("table:"):],
                cells=tuple(
                    tuple(tuple(self.parse_inline(cell)) for cell in row)
                    for row in raw_cells
                ),
                raw_cells=raw_cells,
                row_count=len(pack.rows),
            )

        return LineBlock(indent=indent, nodes=tuple(self.parse_line(head.text[indent:])))

    def parse(self, text: str, has_title: bool) -> list[Block]:
        return [self.to_block(pack) for pack in self.pack_rows(text, has_title)]

    def parse_line(self, text: str) -> list[Node]:
        """Parse one line, honouring the prefixes that only apply at line start."""
        if text.startswith(">"):
            return [QuoteNode(nodes=tuple(self.parse_inline(text[1:])))]
        m = COMMAND_LINE_RE.match(text)
        if m:
            return [CommandLineNode(symbol=m.group(1), text=m.group(2))]
        m = HELPFEEL_RE.match(text)
        if m:
            return [HelpfeelNode(text=m.group(1))]
        m = NUMBER_LIST_RE.match(text)
        if m:
            return [
                NumberListNode(
                    number=int(m.group(1)), nodes=tuple(self.parse_inline(m.group(2)))
                )
            ]
        return self.parse_inline(text)

    def parse_inline(self, text: str) -> list[Node]:
        nodes: list[Node] = []
        pos = 0
        for m in INLINE_RE.finditer(text):
            if m.start() > pos:
                nodes.append(PlainNode(text=text[pos:m.start()]))
            nodes.extend(self._token(m))
            pos = m.end()
        if pos < len(text):
            nodes.append(PlainNode(text=text[pos:]))
        return nodes

    def _token(self, m: re.Match[str]) -> list[Node]:
        if m.group("code") is not None:
            return [CodeNode(text=m.group("code")[1:-1])]
        if m.group("formula") is not None:
            return [FormulaNode(formula=m.group("formula_text"))]
        if m.group("strong") is not None:
            return self._strong(m.group("strong_text"))
        if m.group("bracket") is not None:
            return self._bracket(m.group("bracket_text"))
        if m.group("hashtag") is not None:
            return [HashTagNode(href=m.group("tag"))]
        return [LinkNode(path_type="absolute", href=m.group("url"))]

    def _strong(self, inner: str) -> list[Node]:
        if IMAGE_URL_RE.match(inner):
            return [StrongImageNode(src=inner)]
        icon = ICON_RE.match(inner)
        if icon:
            path = icon.group(1)
            node = StrongIconNode(path=path, path_type=_path_type(path))
            return [node] * int(icon.group(2) or 1)
        return [StrongNode(nodes=tuple(self.parse_inline(inner)))]

    def _bracket(self, inner: str) -> list[Node]:
        if inner == "":
            return [PlainNode(text="[]")]
        if inner.strip() == "":
            return [BlankNode(text=inner)]

        deco = DECO_RE.match(inner)
        if deco:
            return [
                DecorationNode(
                    decos=_decos(deco.group(1)),
                    nodes=tuple(self.parse_inline(deco.group(2))),
                )
            ]

        icon = ICON_RE.match(inner)
        if icon:
            path = icon.group(1)
            node = IconNode(path=path, path_type=_path_type(path))
            return [node] * int(icon.group(2) or 1)

        gmap = MAP_RE.match(inner)
        if gmap:
            lat = float(gmap.group(2)) * (-1 if gmap.group(1) == "S" else 1)
            lng = float(gmap.group(4)) * (-1 if gmap.group(3) == "W" else 1)
            return [
                GoogleMapNode(
                    latitude=lat,
                    longitude=lng,
                    zoom=int(gmap.group(5)),
                    place=gmap.group(6) or "",
                )
            ]

        image = self._image(inner)
        if image is not None:
            return [image]

        if URL_RE.match(inner):
            return [LinkNode(path_type="absolute", href=inner)]
        m = URL_FIRST_RE.match(inner)
        if m:
            return [LinkNode(path_type="absolute", href=m.group(1), content=m.group(2))]
        m = URL_LAST_RE.match(inner)
        if m:
            return [LinkNode(path_type="absolute", href=m.group(2), content=m.group(1))]

        if inner.startswith("/"):
            return [LinkNode(path_type="root", href=inner)]
        return [LinkNode(path_type="relative", href=inner)]

    def _image(self, inner: str) -> ImageNode | None:
        parts = inner.split()
        if len(parts) == 1 and IMAGE_URL_RE.match(parts[0]):
            return ImageNode(src=parts[0])
        if len(parts) == 2:
            first, second = parts
            if IMAGE_URL_RE.match(first) and URL_RE.match(second):
                return ImageNode(src=first, link=second)
            if URL_RE.match(first) and IMAGE_URL_RE.match(second):
                return ImageNode(src=second, link=first)
        return None


def _path_type(path: str) -> str:
    return "root" if path.startswith("/") else "relative"


def _decos(chars: str) -> tuple[str, ...]:
    decos: list[str] = []
    stars = chars.count("*")
    if stars:
        decos.append(f"*-{min(stars, MAX_STARS)}")
    for c in chars:
        if c != "*" and c not in decos:
            decos.append(c)
    return tuple(decos)
