"""Tests for the Scrapbox notation tokenizer."""

from scrapbox2anki.adapters.scrapbox_parser import ScrapboxParser, parse_to_rows
from scrapbox2anki.core.nodes import (
    BlankNode,
    CodeBlock,
    CodeNode,
    CommandLineNode,
    DecorationNode,
    FormulaNode,
    GoogleMapNode,
    HashTagNode,
    IconNode,
    ImageNode,
    LineBlock,
    LinkNode,
    NumberListNode,
    PlainNode,
    QuoteNode,
    Row,
    StrongIconNode,
    StrongNode,
    TableBlock,
    TitleBlock,
)


def test_parse_to_rows_indent():
    """Test rows record their leading whitespace."""
    assert parse_to_rows("a\n  b\n\tc") == [
        Row(indent=0, text="a"),
        Row(indent=2, text="  b"),
        Row(indent=1, text="\tc"),
    ]


def test_pack_rows_kinds():
    """Test rows are grouped into title, code block, table and line packs."""
    parser = ScrapboxParser()
    packs = parser.pack_rows(
        "Title\ncode:a.js\n x\n y\ntable:t\n a\tb\nline\n indented", has_title=True
    )

    assert [p.kind for p in packs] == ["title", "codeBlock", "table", "line", "line"]
    assert [len(p.rows) for p in packs] == [1, 3, 2, 1, 1]


def test_pack_rows_without_title():
    """Test the first row is an ordinary line when there is no title."""
    packs = ScrapboxParser().pack_rows("code:x\n 1", has_title=False)

    assert [p.kind for p in packs] == ["codeBlock"]


def test_code_block_content():
    """Test code block content drops the header row and one indent level."""
    blocks = ScrapboxParser().parse("Title\n code:b.py\n  x = 1\n   y = 2", has_title=True)

    assert blocks[0] == TitleBlock(text="Title")
    assert blocks[1] == CodeBlock(
        indent=1, file_name="b.py", content="x = 1\n y = 2", row_count=3
    )


def test_table_block_cells():
    """Test table rows are split on tabs and cells parsed inline."""
    [block] = ScrapboxParser().parse("table:deck\n name\tx\n id\t2", has_title=False)

    assert isinstance(block, TableBlock)
    assert block.file_name == "deck"
    assert block.raw_cells == (("name", "x"), ("id", "2"))
    assert block.cells[0][1] == (PlainNode(text="x"),)
    assert block.row_count == 3


def test_line_block_indent():
    """Test line blocks carry their indent and parse the rest."""
    [block] = ScrapboxParser().parse("  hello", has_title=False)

    assert block == LineBlock(indent=2, nodes=(PlainNode(text="hello"),))


def test_parse_line_prefixes():
    """Test prefixes that only count at the start of a line."""
    parser = ScrapboxParser()

    assert parser.parse_line("> quoted") == [QuoteNode(nodes=(PlainNode(text=" quoted"),))]
    assert parser.parse_line("$ ls -la") == [CommandLineNode(symbol="$", text="ls -la")]
    assert parser.parse_line("3. third") == [
        NumberListNode(number=3, nodes=(PlainNode(text="third"),))
    ]


def test_parse_inline_basic_tokens():
    """Test code, formula, strong and plain text."""
    parser = ScrapboxParser()

    assert parser.parse_inline("a `b` c") == [
        PlainNode(text="a "),
        CodeNode(text="b"),
        PlainNode(text=" c"),
    ]
    assert parser.parse_inline("[$ x^2 ]") == [FormulaNode(formula="x^2")]
    assert parser.parse_inline("[[strong]]") == [StrongNode(nodes=(PlainNode(text="strong"),))]
    assert parser.parse_inline("[]") == [PlainNode(text="[]")]
    assert parser.parse_inline("[  ]") == [BlankNode(text="  ")]


def test_parse_inline_decoration():
    """Test decoration characters, stars counted into a level."""
    parser = ScrapboxParser()

    assert parser.parse_inline("[** big]") == [
        DecorationNode(decos=("*-2",), nodes=(PlainNode(text="big"),))
    ]
    assert parser.parse_inline("[*/ both]") == [
        DecorationNode(decos=("*-1", "/"), nodes=(PlainNode(text="both"),))
    ]


def test_parse_inline_hashtag():
    """Test hashtags need whitespace or line start before the #."""
    parser = ScrapboxParser()

    assert parser.parse_inline("#tag here") == [HashTagNode(href="tag"), PlainNode(text=" here")]
    assert parser.parse_inline("a#b") == [PlainNode(text="a#b")]


def test_parse_inline_icons():
    """Test relative, root and repeated icons."""
    parser = ScrapboxParser()

    assert parser.parse_inline("[deck-foo.icon]") == [
        IconNode(path="deck-foo", path_type="relative")
    ]
    assert parser.parse_inline("[/proj/deck-x.icon]") == [
        IconNode(path="/proj/deck-x", path_type="root")
    ]
    assert parser.parse_inline("[me.icon*3]") == [
        IconNode(path="me", path_type="relative")
    ] * 3
    assert parser.parse_inline("[[me.icon]]") == [
        StrongIconNode(path="me", path_type="relative")
    ]


def test_parse_inline_links():
    """Test page links and external links with and without text."""
    parser = ScrapboxParser()

    assert parser.parse_inline("[page name]") == [
        LinkNode(path_type="relative", href="page name")
    ]
    assert parser.parse_inline("[/other/page]") == [
        LinkNode(path_type="root", href="/other/page")
    ]
    assert parser.parse_inline("[https://example.com Example]") == [
        LinkNode(path_type="absolute", href="https://example.com", content="Example")
    ]
    assert parser.parse_inline("[Example https://example.com]") == [
        LinkNode(path_type="absolute", href="https://example.com", content="Example")
    ]
    assert parser.parse_inline("see https://example.com") == [
        PlainNode(text="see "),
        LinkNode(path_type="absolute", href="https://example.com"),
    ]


def test_parse_inline_image_and_map():
    """Test image brackets and location brackets."""
    parser = ScrapboxParser()

    assert parser.parse_inline("[https://example.com/a.png]") == [
        ImageNode(src="https://example.com/a.png")
    ]
    assert parser.parse_inline("[N35.5,E139.7,Z14 Tokyo]") == [
        GoogleMapNode(latitude=35.5, longitude=139.7, zoom=14, place="Tokyo")
    ]
