"""
Scrapbox notation to HTML.

- Indentation becomes nested <ul>/<li>
- Top-level lines are separated with <br/>
- Hashtags are cut out and returned as tags (no de-duplication here)
- Links to audio/video files become <audio>/<video> pointing at the
  filename the media will get in the package
"""

import re
from collections.abc import Sequence
from typing import assert_never

from ..core.nodes import (
    BlankNode,
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
    PlainNode,
    QuoteNode,
    StrongIconNode,
    StrongImageNode,
    StrongNode,
    TableBlock,
)
from ..core.utils import SCRAPBOX_ORIGIN, encode_title_uri, escape_html, media_filename
from .media import media_kind
from .result import RenderResult

I_UNIT = "  "

ROOT_PATH_RE = re.compile(r"^/[^/]+/(.*)", re.DOTALL)

BodyBlock = LineBlock | TableBlock | CodeBlock


def convert(blocks: Sequence[BodyBlock], project: str) -> RenderResult:
    """
    Render parsed field content.

    Args:
        blocks: Blocks of the field content (parsed without a title line)
        project: Project the page belongs to; relative links resolve against it

    Returns:
        RenderResult with the HTML, the hashtags and the media map
    """
    renderer = _HtmlRenderer(project)
    html = renderer.render(blocks)
    return RenderResult(html=html, tags=renderer.tags, media=renderer.media)


class _HtmlRenderer:
    def __init__(self, project: str):
        self.project = project
        self.tags: list[str] = []
        self.media: dict[str, str] = {}

    def render(self, blocks: Sequence[BodyBlock]) -> str:
        if not blocks:
            return ""
        # Every level is relative to the shallowest block
        top = min(block.indent for block in blocks)

        level = 0
        result: list[str] = []
        for i, block in enumerate(blocks):
            new_level = block.indent - top

            for lv in range(level, new_level, -1):
                result.append(f"{I_UNIT * (lv - 1)}</ul>")
            for lv in range(level, new_level):
                result.append(f'{I_UNIT * lv}<ul class="level-{lv + 1}">')

            if isinstance(block, CodeBlock):
                result.append(_nest(self.code_block(block), new_level))
            elif isinstance(block, TableBlock):
                result.append(_nest(self.table(block), new_level))
            elif isinstance(block, LineBlock):
                content = self.nodes(block.nodes)
                if new_level == 0:
                    result.append(content if i + 1 == len(blocks) else f"{content}<br/>")
                else:
                    result.append(f"{I_UNIT * new_level}<li>{content}</li>")
            else:
                assert_never(block)

            level = new_level

        for lv in range(level, 0, -1):
            result.append(f"{I_UNIT * (lv - 1)}</ul>")
        return "\n".join(result)

    def code_block(self, block: CodeBlock) -> str:
        return "\n".join(
            [
                '<figure class="codeBlock">',
                f"{I_UNIT}<figcaption><code>{escape_html(block.file_name)}</code></figcaption>",
                f"{I_UNIT}<pre><code>{escape_html(block.content)}</code></pre>",
                "</figure>",
            ]
        )

    def table(self, table: TableBlock) -> str:
        rows = [[self.nodes(cell) for cell in row] for row in table.cells]
        head, body = (rows[0], rows[1:]) if rows else ([], [])
        i2, i3 = I_UNIT * 2, I_UNIT * 3
        return "\n".join(
            [
                '<table class="table">',
                f"{I_UNIT}<caption>{escape_html(table.file_name)}</caption>",
                f"{I_UNIT}<thead>",
                f"{i2}<tr>",
                "\n".join(f"{i3}<th>{cell}</th>" for cell in head),
                f"{i2}</tr>",
                f"{I_UNIT}</thead>",
                f"{I_UNIT}<tbody>",
                "\n".join(
                    f"{i2}<tr>\n"
                    + "\n".join(f"{i3}<td>{cell}</td>" for cell in row)
                    + f"\n{i2}</tr>"
                    for row in body
                ),
                f"{I_UNIT}</tbody>",
                "</table>",
            ]
        )

    def nodes(self, nodes: Sequence[Node]) -> str:
        return "".join(self.node(node) for node in nodes)

    def node(self, node: Node) -> str:
        if isinstance(node, PlainNode):
            return escape_html(node.text)
        if isinstance(node, BlankNode):
            return node.text
        if isinstance(node, QuoteNode):
            return f'<span class="quote">{self.nodes(node.nodes)}</span>'
        if isinstance(node, StrongNode):
            return f"<strong>{self.nodes(node.nodes)}</strong>"
        if isinstance(node, DecorationNode):
            inner = self.nodes(node.nodes)
            if not node.decos:
                return inner
            classes = " ".join(f"deco-{escape_html(deco)}" for deco in node.decos)
            return f'<span class="{classes}">{inner}</span>'
        if isinstance(node, CodeNode):
            return f'<code class="code">{escape_html(node.text)}</code>'
        if isinstance(node, CommandLineNode):
            return f'<code class="cli">{escape_html(node.symbol)} {escape_html(node.text)}</code>'
        if isinstance(node, HelpfeelNode):
            return f'<code class="helpfeel">? {escape_html(node.text)}</code>'
        if isinstance(node, FormulaNode):
            return f"\\( {escape_html(node.formula)} \\)"
        if isinstance(node, NumberListNode):
            return f"{node.number}. {self.nodes(node.nodes)}"
        if isinstance(node, ImageNode):
            return _image(node.src)
        if isinstance(node, StrongImageNode):
            return f"<strong>{_image(node.src)}</strong>"
        if isinstance(node, IconNode):
            return self.icon(node.path, node.path_type)
        if isinstance(node, StrongIconNode):
            return f"<strong>{self.icon(node.path, node.path_type)}</strong>"
        if isinstance(node, LinkNode):
            return self.link(node)
        if isinstance(node, HashTagNode):
            self.tags.append(node.href)
            return ""
        if isinstance(node, GoogleMapNode):
            return _google_map(node)
        assert_never(node)

    def icon(self, path: str, path_type: str) -> str:
        if path_type == "root":
            href = f"{SCRAPBOX_ORIGIN}{path}"
            src = f"{SCRAPBOX_ORIGIN}/api/pages{path}/icon"
            alt = ROOT_PATH_RE.sub(r"\1", path)
        else:
            href = f"{SCRAPBOX_ORIGIN}/{self.project}/{path}"
            src = f"{SCRAPBOX_ORIGIN}/api/pages/{self.project}/{path}/icon"
            alt = path
        return (
            f'<a class="icon" target="_blank" href="{escape_html(href)}">'
            f'<img src="{escape_html(src)}" alt="{escape_html(alt)}" /></a>'
        )

    def link(self, node: LinkNode) -> str:
        if node.path_type == "root":
            return (
                f'<a class="page-link" target="_blank" '
                f'href="{SCRAPBOX_ORIGIN}{escape_html(node.href)}">{escape_html(node.href)}</a>'
            )
        if node.path_type == "relative":
            target = escape_html(encode_title_uri(node.href))
            return (
                f'<a class="page-link" target="_blank" '
                f'href="{SCRAPBOX_ORIGIN}/{self.project}/{target}">{escape_html(node.href)}</a>'
            )

        kind = media_kind(node.href)
        if kind in ("audio", "video"):
            name = media_filename(node.href)
            self.media[name] = node.href
            return f'<{kind} controls src="{escape_html(name)}"></{kind}>'
        return (
            f'<a class="link" target="_blank" href="{escape_html(node.href)}">'
            f"{escape_html(node.content or node.href)}</a>"
        )


def _nest(html: str, level: int) -> str:
    """Wrap a multi-line block in <li> at the given list level."""
    if level == 0:
        return html
    indent = I_UNIT * level
    inner = "\n".join(f"{indent}{I_UNIT}{line}" for line in html.split("\n"))
    return f"{indent}<li>\n{inner}\n{indent}</li>"


def _image(src: str) -> str:
    return f'<img class="image" src="{escape_html(src)}" />'


def _num(value: float) -> str:
    return str(int(value)) if value == int(value) else repr(value)


def _google_map(node: GoogleMapNode) -> str:
    lat, lng = _num(node.latitude), _num(node.longitude)
    place = escape_html(node.place)
    return (
        f'<a class="google-map" href="https://www.google.com/maps/search/'
        f'{place}/@{lat},{lng},{node.zoom}z">N{lat},E{lng},Z{node.zoom} {place}</a>'
    )
