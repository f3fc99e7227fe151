import re
from typing import List

from codedoc.models import Char, Word
from codedoc.utils.utf16 import text_width16

# Unicode White_Space. Narrower than str.isspace(), which also counts the
# \x1c-\x1f information separators.
SPACE_CHARS = "\t\n\v\f\r \x85\xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000"
_SPACE_RUN = re.compile("[" + re.escape(SPACE_CHARS) + "]+")


def is_space(ch: str) -> bool:
    return ch != "" and ch in SPACE_CHARS


def split_fields(text: str) -> List[str]:
    """Splits `text` around runs of whitespace, dropping empty fields."""
    return [field for field in _SPACE_RUN.split(text) if field]


def strip_space(text: str) -> str:
    return text.strip(SPACE_CHARS)


def get_words(chars: List[Char]) -> List[Word]:
    """
    Splits Chars into whitespace-delimited Words. Each Word starts at the index
    of its first Char and measures its text in utf16 units.
    """
    words: List[Word] = []
    buffer: List[str] = []
    index = 0

    for char in chars:
        if is_space(char.content):
            if buffer:
                text = "".join(buffer)
                words.append(Word(index, text_width16(text), text))
                buffer = []
            continue
        if not buffer:
            index = char.index
        buffer.append(char.content)

    if buffer:
        text = "".join(buffer)
        words.append(Word(index, text_width16(text), text))
    return words
