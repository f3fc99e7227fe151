import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from codedoc.models import CommentDelimiter
from codedoc.style.colors import Color
from codedoc.style.themes import Theme

DEFAULT_LANGUAGE = "go"
DEFAULT_SHORTCUT_SETTING = False

_STRING_PATTERN = r'"(?:[^"\\\n]|\\.)*"'
_CHAR_PATTERN = r"'(?:[^'\\\n]|\\.)*'"
_NUMBER_PATTERN = r"\b\d+(?:\.\d+)?\b"


@dataclass(frozen=True)
class Shortcut:
    """A compiled shortcut: every match of `regex` becomes `replace`."""

    regex: re.Pattern
    replace: str


class Language(BaseModel):
    name: str
    keywords: Dict[str, List[str]] = Field(default_factory=dict)  # category -> words
    shortcuts: Dict[str, str] = Field(default_factory=dict)  # lowercase token -> replacement
    comments: List[CommentDelimiter] = Field(default_factory=list)
    patterns: Dict[str, str] = Field(default_factory=dict)  # category -> regex

    def keyword_colors(self, theme: Theme) -> Dict[str, Color]:
        """Maps each lowercase keyword to its display colour under `theme`."""
        colors: Dict[str, Color] = {}
        for category, words in self.keywords.items():
            color = theme.color_for(category)
            for word in words:
                colors[word.lower()] = color
        return colors

    def keyword_patterns(self, theme: Theme) -> List[tuple[re.Pattern, Color]]:
        """One whole-word pattern per keyword category, longest words first."""
        result = []
        for category, words in self.keywords.items():
            if not words:
                continue
            ordered = sorted(words, key=len, reverse=True)
            regex = re.compile(r"\b(?:" + "|".join(re.escape(w) for w in ordered) + r")\b")
            result.append((regex, theme.color_for(category)))
        return result

    def highlight_patterns(self, theme: Theme) -> List[tuple[re.Pattern, Color]]:
        return [(re.compile(p), theme.color_for(category)) for category, p in self.patterns.items()]

    def compiled_shortcuts(self) -> List[Shortcut]:
        return [
            Shortcut(re.compile(r"\b" + re.escape(token) + r"\b", re.IGNORECASE), replacement)
            for token, replacement in self.shortcuts.items()
        ]


_C_STYLE_COMMENTS = [
    CommentDelimiter(start_symbol="//", end_symbol="\n"),
    CommentDelimiter(start_symbol="/*", end_symbol="*/"),
]

_LANGUAGES = {
    lang.name: lang
    for lang in (
        Language(
            name="go",
            keywords={
                "keyword": (
                    "break case chan const continue default defer else fallthrough for func go goto "
                    "if import interface map package range return select struct switch type var"
                ).split(),
                "type": (
                    "bool byte complex64 complex128 error float32 float64 int int8 int16 int32 int64 "
                    "rune string uint uint8 uint16 uint32 uint64 uintptr any"
                ).split(),
                "literal": "true false nil iota".split(),
                "builtin": "append cap close copy delete len make new panic print println recover".split(),
            },
            shortcuts={
                "iferr": "if err != nil {\n\treturn err\n}",
                "fori": "for i := 0; i < n; i++ {\n}",
            },
            comments=_C_STYLE_COMMENTS,
            patterns={"string": _STRING_PATTERN + "|`[^`]*`", "number": _NUMBER_PATTERN},
        ),
        Language(
            name="java",
            keywords={
                "keyword": (
                    "abstract assert break case catch class continue default do else enum extends final "
                    "finally for if implements import instanceof interface native new package private "
                    "protected public return static super switch synchronized this throw throws try "
                    "volatile while"
                ).split(),
                "type": "boolean byte char double float int long short void var String".split(),
                "literal": "true false null".split(),
            },
            shortcuts={
                "sout": "System.out.println();",
                "psvm": "public static void main(String[] args) {\n}",
            },
            comments=_C_STYLE_COMMENTS,
            patterns={"string": _STRING_PATTERN + "|" + _CHAR_PATTERN, "number": _NUMBER_PATTERN},
        ),
        Language(
            name="javascript",
            keywords={
                "keyword": (
                    "async await break case catch class const continue debugger default delete do else "
                    "export extends finally for function if import in instanceof let new of return "
                    "static super switch this throw try typeof var void while yield"
                ).split(),
                "literal": "true false null undefined NaN".split(),
                "builtin": "console document window".split(),
            },
            shortcuts={"clog": "console.log();"},
            comments=_C_STYLE_COMMENTS,
            patterns={"string": _STRING_PATTERN + "|" + _CHAR_PATTERN, "number": _NUMBER_PATTERN},
        ),
        Language(
            name="python",
            keywords={
                "keyword": (
                    "and as assert async await break class continue def del elif else except finally "
                    "for from global if import in is lambda nonlocal not or pass raise return try while "
                    "with yield"
                ).split(),
                "literal": "True False None".split(),
                "builtin": "print len range enumerate zip dict list set tuple str int float".split(),
            },
            shortcuts={"ifmain": 'if __name__ == "__main__":'},
            comments=[
                CommentDelimiter(start_symbol="#", end_symbol="\n"),
                CommentDelimiter(start_symbol='"""', end_symbol='"""'),
            ],
            patterns={"string": _STRING_PATTERN + "|" + _CHAR_PATTERN, "number": _NUMBER_PATTERN},
        ),
    )
}


def get_language(name: str) -> Optional[Language]:
    return _LANGUAGES.get(name.lower())


def get_default_language() -> Language:
    return _LANGUAGES[DEFAULT_LANGUAGE]


def language_names() -> List[str]:
    return sorted(_LANGUAGES)
