"""Line splitting and blank-line-delimited block parsing for SubRip and WebVTT."""

from collections.abc import Callable, Iterable, Iterator
from typing import TypeVar

T = TypeVar("T")

BlockParser = Callable[[str, int], tuple[T, int] | None]
BlocksParser = Callable[[str], tuple[list[T], str] | None]

_BLOCK_SEPARATOR = "\n\n"


def iter_lines(content: str | Iterable[str]) -> Iterator[str]:
    """Yield lines without their line terminators.

    Args:
        content: Whole decoded text, or an iterable of lines (with or
            without trailing newlines, e.g. an open text file)

    Yields:
        Each line with any trailing ``\\n`` / ``\\r\\n`` removed
    """
    if isinstance(content, str):
        lines: Iterable[str] = content.split("\n")
        if lines[-1] == "":
            lines.pop()
    else:
        lines = content
    for line in lines:
        yield line.removesuffix("\n").removesuffix("\r")


def take_until_end_of_block(text: str, pos: int) -> tuple[str, int]:
    """Take text up to the end of the current block.

    A block ends at the first blank line (``\\n\\n``, consumed) or where
    only whitespace remains (consumed up to the end of the text).

    Args:
        text: Text being parsed
        pos: Start of the block

    Returns:
        Block content and the position just past its terminator
    """
    tail_start = max(pos, len(text.rstrip(" \t\r\n")))
    separator = text.find(_BLOCK_SEPARATOR, pos)
    if separator != -1 and separator <= tail_start:
        return text[pos:separator], separator + len(_BLOCK_SEPARATOR)
    return text[pos:tail_start], len(text)


def parse_separated(
    text: str, parse_block: BlockParser[T]
) -> tuple[list[T], str] | None:
    """Parse one or more blocks separated by blank lines.

    Args:
        text: Accumulated text
        parse_block: Parser for a single block at a position

    Returns:
        Parsed blocks and the unconsumed remainder, or None when not even
        the first block parses
    """
    first = parse_block(text, 0)
    if first is None:
        return None
    block, pos = first
    blocks = [block]
    while text.startswith(_BLOCK_SEPARATOR, pos):
        result = parse_block(text, pos + len(_BLOCK_SEPARATOR))
        if result is None:
            break
        block, pos = result
        blocks.append(block)
    return blocks, text[pos:]


def iter_blocks(
    content: str | Iterable[str], parse_blocks: BlocksParser[T]
) -> Iterator[T]:
    """Stream blocks out of a line source.

    Lines are accumulated in a queue which is parsed whenever a blank line
    arrives and once more at the end of input. Text that fails to parse stays
    queued until more lines arrive; unconsumed text after a successful parse
    is carried forward.

    Args:
        content: Whole decoded text or an iterable of lines
        parse_blocks: Parser turning the queue into blocks plus remainder

    Yields:
        Parsed blocks in input order
    """
    queue = ""
    for line in iter_lines(content):
        queue += line + "\n"
        if line:
            continue
        result = parse_blocks(queue)
        if result is None:
            continue
        blocks, queue = result
        yield from blocks

    if queue.strip():
        result = parse_blocks(queue)
        if result is not None:
            yield from result[0]
