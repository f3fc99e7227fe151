from typing import Dict, Optional

from pydantic import BaseModel, Field

from codedoc.style.colors import Color

DEFAULT_THEME = "monokai"


class Theme(BaseModel):
    """Colours used for one code instance. `categories` colours keyword groups."""

    name: str
    background: Color
    foreground: Color
    comment: Color
    categories: Dict[str, Color] = Field(default_factory=dict)

    def color_for(self, category: str) -> Color:
        return self.categories.get(category, self.foreground)


def _theme(name: str, background: str, foreground: str, comment: str, **categories: str) -> Theme:
    return Theme(
        name=name,
        background=Color.from_hex(background),
        foreground=Color.from_hex(foreground),
        comment=Color.from_hex(comment),
        categories={k: Color.from_hex(v) for k, v in categories.items()},
    )


_THEMES = {
    t.name: t
    for t in (
        _theme(
            "monokai",
            "#272822",
            "#F8F8F2",
            "#75715E",
            keyword="#F92672",
            type="#66D9EF",
            literal="#AE81FF",
            builtin="#A6E22E",
            string="#E6DB74",
            number="#AE81FF",
        ),
        _theme(
            "dracula",
            "#282A36",
            "#F8F8F2",
            "#6272A4",
            keyword="#FF79C6",
            type="#8BE9FD",
            literal="#BD93F9",
            builtin="#50FA7B",
            string="#F1FA8C",
            number="#BD93F9",
        ),
        _theme(
            "solarized_light",
            "#FDF6E3",
            "#657B83",
            "#93A1A1",
            keyword="#859900",
            type="#B58900",
            literal="#2AA198",
            builtin="#268BD2",
            string="#2AA198",
            number="#D33682",
        ),
        _theme(
            "github",
            "#FFFFFF",
            "#24292E",
            "#6A737D",
            keyword="#D73A49",
            type="#6F42C1",
            literal="#005CC5",
            builtin="#005CC5",
            string="#032F62",
            number="#005CC5",
        ),
    )
}


def get_theme(name: str) -> Optional[Theme]:
    return _THEMES.get(name.lower())


def theme_names() -> list[str]:
    return sorted(_THEMES)
