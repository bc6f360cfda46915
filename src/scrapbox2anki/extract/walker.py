"""Walk a page's packs together with the timestamped lines they came from."""

from collections.abc import Iterator, Sequence

from ..core.errors import TokenizerContractError
from ..core.model import Line
from ..core.nodes import CodeBlock, Pack
from ..core.ports import Tokenizer


def walk_packs(
    lines: Sequence[Line], tokenizer: Tokenizer
) -> Iterator[tuple[Pack, Sequence[Line]]]:
    """
    Yield each pack with the slice of ``lines`` it spans.

    Only the page lines carry ids and timestamps, so the offset is
    advanced by every pack's row count, titles included.
    """
    text = "\n".join(line.text for line in lines)
    offset = 0
    for pack in tokenizer.pack_rows(text, has_title=True):
        count = len(pack.rows)
        yield pack, lines[offset : offset + count]
        offset += count


def to_code_block(pack: Pack, tokenizer: Tokenizer) -> CodeBlock:
    block = tokenizer.to_block(pack)
    if not isinstance(block, CodeBlock):
        raise TokenizerContractError(
            f"a codeBlock pack converted to {type(block).__name__}"
        )
    return block
