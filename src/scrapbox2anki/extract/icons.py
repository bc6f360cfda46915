from ..core.nodes import (
    Block,
    DecorationNode,
    IconNode,
    LineBlock,
    Node,
    QuoteNode,
    StrongIconNode,
    TableBlock,
)


def get_icons(block: Block) -> list[str]:
    """Return the paths of every icon in a line or table, in document order."""
    if isinstance(block, LineBlock):
        return [icon for node in block.nodes for icon in _icons_of(node)]
    if isinstance(block, TableBlock):
        return [
            icon
            for row in block.cells
            for cell in row
            for node in cell
            for icon in _icons_of(node)
        ]
    return []


def _icons_of(node: Node) -> list[str]:
    if isinstance(node, (IconNode, StrongIconNode)):
        return [node.path]
    if isinstance(node, (DecorationNode, QuoteNode)):
        return [icon for child in node.nodes for icon in _icons_of(child)]
    return []
