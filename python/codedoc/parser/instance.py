import re
from typing import List, Optional

import structlog
from pydantic import BaseModel, Field, PrivateAttr

from codedoc.diff import generate_edits_from_text
from codedoc.models import FormatDirective, Word
from codedoc.parser.chars import chars_from_text
from codedoc.parser.comments import separate_comments
from codedoc.requests import Range, Request, delete, get_range, insert, update_foreground_color
from codedoc.style.colors import Color
from codedoc.style.fonts import DEFAULT_FONT, DEFAULT_FONT_SIZE
from codedoc.style.languages import (
    DEFAULT_LANGUAGE,
    DEFAULT_SHORTCUT_SETTING,
    Language,
    Shortcut,
    get_default_language,
    get_language,
)
from codedoc.style.themes import DEFAULT_THEME, Theme, get_theme
from codedoc.utils.utf16 import rune_width16, substring_offsets16, text_width16

logger = structlog.get_logger(__name__)


class InstanceDefaults(BaseModel):
    """Values applied to any field a code instance's header left unset."""

    language: str = DEFAULT_LANGUAGE
    theme: str = DEFAULT_THEME
    font: str = DEFAULT_FONT
    font_size: float = Field(DEFAULT_FONT_SIZE, gt=0, allow_inf_nan=False)
    shortcuts: bool = DEFAULT_SHORTCUT_SETTING


class CodeInstance(BaseModel):
    """
    A section of the document with a config header and a code body.

    `start_index` and `end_index` delimit the body in document utf16 units.
    Every mutation of `code` keeps `end_index == start_index + width16(code)`.
    """

    code: str = ""
    start_index: int = 0
    end_index: int = 0
    theme: Optional[str] = None
    font: Optional[str] = None
    font_size: Optional[float] = None
    language: Optional[Language] = None
    shortcuts: Optional[bool] = None
    format: Optional[FormatDirective] = None
    diagnostics: List[str] = Field(default_factory=list)

    # Maps a code-point index into `code` to its document utf16 index.
    # Holds len(code) + 1 entries so that match ends map too.
    _to_utf16: List[int] = PrivateAttr(default_factory=list)
    _mapped_code: Optional[str] = PrivateAttr(default=None)

    def get_range(self, segment_id: Optional[str] = None) -> Range:
        return get_range(self.start_index, self.end_index, segment_id)

    def get_theme(self) -> Theme:
        theme = get_theme(self.theme or DEFAULT_THEME)
        if theme is None:
            theme = get_theme(DEFAULT_THEME)
        return theme

    def set_defaults(self, defaults: Optional[InstanceDefaults] = None):
        defaults = defaults or InstanceDefaults()
        if self.language is None:
            self.language = get_language(defaults.language) or get_default_language()
        if self.format is None:
            self.format = FormatDirective()
        if self.font is None:
            self.font = defaults.font
        if self.font_size is None:
            self.font_size = defaults.font_size
        if self.theme is None:
            self.theme = defaults.theme
        if self.shortcuts is None:
            self.shortcuts = defaults.shortcuts

    def describe(self) -> dict:
        """A JSON-friendly view of the instance."""
        return {
            "code": self.code,
            "start_index": self.start_index,
            "end_index": self.end_index,
            "language": self.language.name if self.language else None,
            "theme": self.theme,
            "font": self.font,
            "font_size": self.font_size,
            "shortcuts": self.shortcuts,
            "format": self.format.model_dump() if self.format else None,
            "diagnostics": list(self.diagnostics),
        }

    def note(self, message: str):
        """Records a rejected directive."""
        self.diagnostics.append(message)
        logger.warning(message)

    def map_to_utf16(self):
        """
        Rebuilds the code-point -> utf16 map from `code` and resets `end_index`
        accordingly. `code` must not be empty: even an empty Google Doc keeps
        its trailing newline.
        """
        if not self.code:
            raise ValueError("code must not be empty")

        index = self.start_index
        mapping = []
        for ch in self.code:
            mapping.append(index)
            index += rune_width16(ch)
        mapping.append(index)

        self._to_utf16 = mapping
        self._mapped_code = self.code
        self.end_index = index

    def replace(self, shortcut: Shortcut, segment_id: Optional[str] = None) -> List[Request]:
        """
        Gets the requests replacing every match of the shortcut's regex with its
        replacement, updating `code` and `end_index` after each one.

        The replacement must not itself match the regex.
        """
        reqs: List[Request] = []
        while True:
            match = shortcut.regex.search(self.code)
            if match is None:
                return reqs

            start, end = match.span()
            if start == end:
                logger.warning("Ignoring empty shortcut match", pattern=shortcut.regex.pattern)
                return reqs

            del_start, del_end = substring_offsets16(match.group(0), self.code, self.start_index, start)

            # delete target and insert replacement string
            reqs.append(delete(get_range(del_start, del_end, segment_id)))
            reqs.append(insert(shortcut.replace, del_start, segment_id))

            self.end_index += text_width16(shortcut.replace) - (del_end - del_start)
            self.code = self.code[:start] + shortcut.replace + self.code[end:]

    def highlight(self, regex: re.Pattern, color: Color, segment_id: Optional[str] = None) -> List[Request]:
        """Gets the requests colouring every match of `regex`. Does not modify the instance."""
        if self._mapped_code != self.code:
            self.map_to_utf16()

        reqs: List[Request] = []
        for match in regex.finditer(self.code):
            start, end = match.span()
            if start == end:
                continue
            r = get_range(self._to_utf16[start], self._to_utf16[end], segment_id)
            reqs.append(update_foreground_color(color, r))
        return reqs

    def reformat(self, formatted: str, segment_id: Optional[str] = None) -> List[Request]:
        """
        Gets the requests turning the current code into `formatted`, then
        adopts `formatted` as the code.
        """
        if formatted == self.code:
            return []
        reqs = generate_edits_from_text(self.code, formatted, self.start_index, segment_id)
        self.end_index += text_width16(formatted) - text_width16(self.code)
        self.code = formatted
        return reqs

    def comment_words(self) -> List[Word]:
        """Comments in the code body, positioned in document utf16 units."""
        if self.language is None or not self.language.comments:
            return []
        _, comments = separate_comments(chars_from_text(self.code, self.start_index), self.language.comments)
        return comments
