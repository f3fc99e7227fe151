"""
Conversions between code-point, UTF-16 and document offsets.

Document positions are measured in UTF-16 code units, while Python strings are
indexed by code point. Every code point above the Basic Multilingual Plane
occupies a surrogate pair, i.e. two units.
"""

from typing import Tuple

from codedoc.errors import NotFoundError


def rune_width16(ch: str) -> int:
    """Size of a single code point in UTF-16 units (1 or 2)."""
    return 1 if ord(ch) <= 0xFFFF else 2


def text_width16(text: str) -> int:
    """Size of a string in UTF-16 units."""
    if not text:
        return 0
    return sum(rune_width16(ch) for ch in text)


def substring_offsets16(needle: str, haystack: str, offset: int = 0, start: int = 0) -> Tuple[int, int]:
    """
    Returns the UTF-16 (start, end) of the first occurrence of `needle` in
    `haystack` at or after code-point index `start`, shifted by `offset`.

    Raises NotFoundError when the needle is absent. Callers that obtained the
    needle from a match against the same haystack never hit this.
    """
    index = haystack.find(needle, start)
    if index == -1:
        raise NotFoundError(needle, haystack)

    start16 = offset + text_width16(haystack[:index])
    return start16, start16 + text_width16(needle)


def codepoint_index_from_utf16(text: str, units: int) -> int:
    """
    Converts a UTF-16 unit count into a code-point index into `text`.
    A count that lands inside a surrogate pair rounds down to the pair's start.
    """
    remaining = max(0, units)
    idx = 0
    while idx < len(text):
        width = rune_width16(text[idx])
        if remaining < width:
            break
        remaining -= width
        idx += 1
    return idx
