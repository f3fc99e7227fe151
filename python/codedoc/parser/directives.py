"""
Recognizes the configuration directives found between <conf> and </conf>.

Each directive sets exactly one field of a CodeInstance. The first directive
for a field wins; later duplicates and unknown values are recorded on the
instance and logged, never raised.
"""

import re
from typing import Callable, Tuple

from codedoc.errors import NotFoundError
from codedoc.models import FormatDirective, ParagraphElement
from codedoc.parser.instance import CodeInstance
from codedoc.style.fonts import get_font, parse_font_size
from codedoc.style.languages import get_language
from codedoc.style.themes import get_theme
from codedoc.utils.utf16 import substring_offsets16

FORMAT_DIRECTIVE = "#format"  # must be bolded to format the code
SHORTCUTS_DIRECTIVE = "#shortcuts"  # must be bolded to enable shortcuts

LANG_REGEX = re.compile(r"^#lang=([\w-]+)$", re.IGNORECASE)
FONT_REGEX = re.compile(r"^#font=([\w-]+)$", re.IGNORECASE)
FONT_SIZE_REGEX = re.compile(r"^#size=(\S+)$", re.IGNORECASE)
THEME_REGEX = re.compile(r"^#theme=([\w-]+)$", re.IGNORECASE)

Recognizer = Callable[[CodeInstance, str, ParagraphElement], bool]


def _duplicate(instance: CodeInstance, token: str) -> bool:
    instance.note(f"Duplicate directive ignored: `{token}`")
    return True


def _check_format(instance: CodeInstance, token: str, par: ParagraphElement) -> bool:
    if token.casefold() != FORMAT_DIRECTIVE:
        return False
    if instance.format is not None:
        return _duplicate(instance, token)
    try:
        start, end = substring_offsets16(token, par.content, par.start_index)
    except NotFoundError as e:
        instance.note(f"Could not locate format directive: {e}")
        return True
    instance.format = FormatDirective(bold=par.bold, start_index=start, end_index=end)
    return True


def _check_shortcuts(instance: CodeInstance, token: str, par: ParagraphElement) -> bool:
    if token.casefold() != SHORTCUTS_DIRECTIVE:
        return False
    if instance.shortcuts is not None:
        return _duplicate(instance, token)
    instance.shortcuts = par.bold
    return True


def _check_language(instance: CodeInstance, token: str, par: ParagraphElement) -> bool:
    match = LANG_REGEX.match(token)
    if not match:
        return False
    if instance.language is not None:
        return _duplicate(instance, token)
    lang = get_language(match.group(1))
    if lang is None:
        instance.note(f"Unknown language: `{match.group(1)}`")
    else:
        instance.language = lang
    return True


def _check_font(instance: CodeInstance, token: str, par: ParagraphElement) -> bool:
    match = FONT_REGEX.match(token)
    if not match:
        return False
    if instance.font is not None:
        return _duplicate(instance, token)
    font = get_font(match.group(1))
    if font is None:
        instance.note(f"Unknown font: `{match.group(1)}`")
    else:
        instance.font = font
    return True


def _check_font_size(instance: CodeInstance, token: str, par: ParagraphElement) -> bool:
    match = FONT_SIZE_REGEX.match(token)
    if not match:
        return False
    if instance.font_size is not None:
        return _duplicate(instance, token)
    size = parse_font_size(match.group(1))
    if size is None:
        instance.note(f"Invalid font size: `{match.group(1)}`")
    else:
        instance.font_size = size
    return True


def _check_theme(instance: CodeInstance, token: str, par: ParagraphElement) -> bool:
    match = THEME_REGEX.match(token)
    if not match:
        return False
    if instance.theme is not None:
        return _duplicate(instance, token)
    theme = get_theme(match.group(1))
    if theme is None:
        instance.note(f"Unknown theme: `{match.group(1)}`")
    else:
        instance.theme = theme.name
    return True


# Tried in order, first recognizer to claim the token wins.
RECOGNIZERS: Tuple[Recognizer, ...] = (
    _check_format,
    _check_shortcuts,
    _check_language,
    _check_font,
    _check_font_size,
    _check_theme,
)


def apply_directive(instance: CodeInstance, token: str, par: ParagraphElement) -> bool:
    """
    Applies one header token to the instance. Returns False (after logging)
    when no directive recognizes the token.
    """
    for recognizer in RECOGNIZERS:
        if recognizer(instance, token, par):
            return True
    instance.note(f"Unexpected config token: `{token}`")
    return False
