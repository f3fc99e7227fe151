from typing import List, Tuple

import structlog

from codedoc.models import Char, Document
from codedoc.parser.words import strip_space
from codedoc.utils.utf16 import rune_width16

logger = structlog.get_logger(__name__)

BEGIN_SYMBOL = "~~begin~~"  # marks the start of the highlighted region
END_SYMBOL = "~~end~~"  # marks its end


def chars_from_text(text: str, start_index: int = 0) -> List[Char]:
    """Splits text into Chars, assigning running utf16 indices from `start_index`."""
    chars = []
    index = start_index
    for ch in text:
        size = rune_width16(ch)
        chars.append(Char(index, size, ch))
        index += size
    return chars


def get_chars(doc: Document, begin_symbol: str = BEGIN_SYMBOL, end_symbol: str = END_SYMBOL) -> List[Char]:
    """
    Flattens the text runs between the begin and end sentinels into Chars
    positioned in document utf16 coordinates. Both sentinels are excluded and
    compared case-insensitively against the trimmed run content.

    A document without a begin sentinel yields no Chars.
    """
    chars: List[Char] = []
    begin = False
    begin_key = begin_symbol.casefold()
    end_key = end_symbol.casefold()

    for par in doc.iter_text_elements():
        content = strip_space(par.content).casefold()
        if content == end_key:
            return chars
        if not begin:
            if content == begin_key:
                begin = True
            continue
        chars.extend(chars_from_text(par.content, par.start_index))

    if begin:
        logger.debug("End sentinel not found, region runs to end of document", end_symbol=end_symbol)
    return chars


def get_range(chars: List[Char]) -> Tuple[int, int]:
    """Returns the utf16 (start, end) covered by a non-empty sequence of Chars."""
    if not chars:
        raise ValueError("Cannot compute the range of an empty Char sequence")
    last = chars[-1]
    return chars[0].index, last.index + last.size
