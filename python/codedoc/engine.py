from typing import List, Optional, Tuple

import structlog

from codedoc.config import Settings
from codedoc.errors import FormatError
from codedoc.models import Char, Document, Word
from codedoc.parser.chars import get_chars, get_range as get_char_range
from codedoc.parser.comments import separate_comments
from codedoc.parser.extract import get_code_instances
from codedoc.parser.instance import CodeInstance
from codedoc.parser.words import get_words
from codedoc.requests import (
    Request,
    clear_background_color,
    delete,
    get_range,
    insert,
    update_background_color,
    update_bold,
    update_document_background,
    update_font,
    update_foreground_color,
)
from codedoc.style.colors import Color
from codedoc.style.format import get_formatter
from codedoc.style.languages import get_default_language, get_language
from codedoc.style.themes import DEFAULT_THEME, get_theme
from codedoc.utils.utf16 import text_width16

logger = structlog.get_logger(__name__)


class HighlightEngine:
    """
    Turns one document snapshot into a batch of edit requests.

    The sentinel region and the code instances are processed from the end of
    the document to the start, so the text edits of one part cannot shift the
    offsets of a part that comes before it.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.segment_id = self.settings.segment_id

    def process(self, document: Document) -> List[Request]:
        chars = get_chars(document, self.settings.begin_symbol, self.settings.end_symbol)
        region = self.highlight_region(chars)
        region_start = chars[0].index if chars else None

        reqs: List[Request] = []
        instances = get_code_instances(document, self.settings.defaults)
        for instance in reversed(instances):
            if region and instance.start_index < region_start:
                reqs.extend(region)
                region = []
            reqs.extend(self.process_instance(instance))
        reqs.extend(region)

        logger.info(
            "Highlight pass complete",
            document_id=document.document_id,
            instances=len(instances),
            requests=len(reqs),
        )
        return reqs

    # --- Sentinel region ---

    def highlight_region(self, chars: List[Char]) -> List[Request]:
        """
        Lowercases mis-cased keywords and expands shortcuts, last word first,
        then styles the region in the coordinates those edits leave behind.
        """
        if not chars:
            return []

        language = get_language(self.settings.region_language)
        if language is None:
            logger.warning("Unknown region language, using default", language=self.settings.region_language)
            language = get_default_language()
        theme = get_theme(self.settings.region_theme) or get_theme(DEFAULT_THEME)

        code_chars, comments = separate_comments(chars, language.comments)
        colors = language.keyword_colors(theme)
        shortcuts = language.shortcuts if self.settings.region_shortcuts else {}

        edits: List[Request] = []
        keywords: List[Tuple[Word, Color]] = []
        shifts: List[Tuple[int, int]] = []  # (index of replaced word, utf16 delta)
        for word in reversed(get_words(code_chars)):
            lower = word.content.lower()
            color = colors.get(lower)
            replacement = lower if color is not None else shortcuts.get(lower)
            if replacement is not None and replacement != word.content:
                edits.extend(self._replace_word(word, replacement))
                size = text_width16(replacement)
                shifts.append((word.index, size - word.size))
                word = Word(word.index, size, replacement)
            if color is not None:
                keywords.append((word, color))

        def shift(index: int) -> int:
            return index + sum(delta for at, delta in shifts if at < index)

        start, end = get_char_range(chars)
        region = get_range(start, shift(end), self.segment_id)
        defaults = self.settings.defaults
        reqs: List[Request] = edits + [
            update_document_background(theme.background),
            clear_background_color(region),
            update_font(defaults.font, defaults.font_size, region),
            update_foreground_color(theme.foreground, region),
        ]
        for word, color in reversed(keywords):
            reqs.append(self._color_span(shift(word.index), word.size, color))

        # comments last so they win over any keyword inside them
        reqs.extend(self._color_span(shift(c.index), c.size, theme.comment) for c in comments)

        logger.debug("Highlighted region", start=start, end=end, replaced=len(shifts), comments=len(comments))
        return reqs

    def _replace_word(self, word: Word, replacement: str) -> List[Request]:
        logger.debug("Replacing region word", word=word.content, replacement=replacement, index=word.index)
        return [
            delete(get_range(word.index, word.end, self.segment_id)),
            insert(replacement, word.index, self.segment_id),
        ]

    def _color_span(self, index: int, size: int, color: Color) -> Request:
        return update_foreground_color(color, get_range(index, index + size, self.segment_id))

    def _color_word(self, word: Word, color: Color) -> Request:
        return self._color_span(word.index, word.size, color)

    # --- Code instances ---

    def process_instance(self, instance: CodeInstance) -> List[Request]:
        reqs: List[Request] = []

        if instance.shortcuts:
            for shortcut in instance.language.compiled_shortcuts():
                reqs.extend(instance.replace(shortcut, self.segment_id))

        if instance.format is not None and instance.format.bold:
            reqs.extend(self._format(instance))

        instance.map_to_utf16()
        reqs.extend(self.style_instance(instance))
        return reqs

    def _format(self, instance: CodeInstance) -> List[Request]:
        reqs: List[Request] = []
        formatter = get_formatter(instance.language.name, self.settings.formatters)
        if formatter is not None:
            try:
                reqs.extend(instance.reformat(formatter(instance.code), self.segment_id))
            except FormatError as e:
                logger.warning("Skipping format", language=instance.language.name, error=str(e))

        # the directive sits in the header, before any body edit
        span = get_range(instance.format.start_index, instance.format.end_index, self.segment_id)
        reqs.append(update_bold(False, span))
        return reqs

    def style_instance(self, instance: CodeInstance) -> List[Request]:
        theme = instance.get_theme()
        language = instance.language
        body = instance.get_range(self.segment_id)

        reqs: List[Request] = [
            update_font(instance.font, instance.font_size, body),
            update_background_color(theme.background, body),
            update_foreground_color(theme.foreground, body),
        ]

        for regex, color in language.highlight_patterns(theme):
            reqs.extend(instance.highlight(regex, color, self.segment_id))
        for regex, color in language.keyword_patterns(theme):
            reqs.extend(instance.highlight(regex, color, self.segment_id))

        reqs.extend(self._color_word(c, theme.comment) for c in instance.comment_words())
        return reqs
