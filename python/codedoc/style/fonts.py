import math
from typing import Optional

DEFAULT_FONT = "Courier New"
DEFAULT_FONT_SIZE = 11.0

# Monospace families available in Google Docs. Directive keys use
# underscores in place of spaces, e.g. `#font=roboto_mono`.
_FONTS = {
    name.lower().replace(" ", "_"): name
    for name in (
        "Courier New",
        "Consolas",
        "Cousine",
        "Fira Code",
        "IBM Plex Mono",
        "Inconsolata",
        "JetBrains Mono",
        "Roboto Mono",
        "Source Code Pro",
        "Space Mono",
        "Ubuntu Mono",
    )
}


def get_font(key: str) -> Optional[str]:
    """Returns the font family for a directive key, or None if unknown."""
    return _FONTS.get(key.lower().replace("-", "_"))


def parse_font_size(value: str) -> Optional[float]:
    """Parses a font size in points. Non-positive, non-finite or malformed sizes yield None."""
    try:
        size = float(value)
    except ValueError:
        return None
    if not math.isfinite(size) or size <= 0:
        return None
    return size
