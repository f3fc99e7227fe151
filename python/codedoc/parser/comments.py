"""
Separates delimited comments from a Char stream.

The scanner walks the stream once with an explicit cursor. At each position the
comment delimiters are tried in the order given and the first one whose start
symbol matches wins. A comment then runs until its end symbol, or to the end of
the stream when the end symbol never appears.
"""

from typing import List, Optional, Sequence, Tuple

import structlog

from codedoc.models import Char, CommentDelimiter, Word

logger = structlog.get_logger(__name__)


def get_filler_char(index: int) -> Char:
    return Char(index, 1, " ")


def _match_symbol(chars: Sequence[Char], pos: int, symbol: str) -> int:
    """Returns the utf16 size of `symbol` if it occurs at `pos`, else -1."""
    if pos + len(symbol) > len(chars):
        return -1
    size = 0
    for offset, ch in enumerate(symbol):
        char = chars[pos + offset]
        if char.content != ch:
            return -1
        size += char.size
    return size


def _match_comment(chars: Sequence[Char], pos: int, delimiter: CommentDelimiter) -> Optional[Tuple[Word, int]]:
    """
    Tries to read one comment starting at `pos`.
    Returns the comment Word and the cursor position after it, or None.
    """
    size = _match_symbol(chars, pos, delimiter.start_symbol)
    if size < 0:
        return None

    parts = [delimiter.start_symbol]
    cursor = pos + len(delimiter.start_symbol)

    while cursor < len(chars):
        end_size = _match_symbol(chars, cursor, delimiter.end_symbol)
        if end_size >= 0:
            parts.append(delimiter.end_symbol)
            size += end_size
            cursor += len(delimiter.end_symbol)
            break
        char = chars[cursor]
        parts.append(char.content)
        size += char.size
        cursor += 1

    return Word(chars[pos].index, size, "".join(parts)), cursor


def separate_comments(
    chars: Sequence[Char], delimiters: Sequence[CommentDelimiter]
) -> Tuple[List[Char], List[Word]]:
    """
    Splits Chars into code Chars and comment Words.

    Each comment is replaced in the code Chars by a single filler space at the
    comment's start index, so `hello/**/world` still tokenizes as two words.
    Non-comment Chars keep their order and indices.
    """
    code_chars: List[Char] = []
    comments: List[Word] = []
    pos = 0

    while pos < len(chars):
        for delimiter in delimiters:
            match = _match_comment(chars, pos, delimiter)
            if match is not None:
                comment, pos = match
                comments.append(comment)
                code_chars.append(get_filler_char(comment.index))
                logger.debug("Found comment", index=comment.index, size=comment.size)
                break
        else:
            code_chars.append(chars[pos])
            pos += 1

    return code_chars, comments
