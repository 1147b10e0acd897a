"""Avatar color parsing. Colors are ARGB ints (0xAARRGGBB)."""

import logging

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_COLOR = 0xFFCCCCCC  # light gray

NAMED_COLORS = {
    "black": 0xFF000000,
    "darkgray": 0xFF444444,
    "gray": 0xFF888888,
    "lightgray": 0xFFCCCCCC,
    "white": 0xFFFFFFFF,
    "red": 0xFFFF0000,
    "green": 0xFF00FF00,
    "blue": 0xFF0000FF,
    "yellow": 0xFFFFFF00,
    "cyan": 0xFF00FFFF,
    "magenta": 0xFFFF00FF,
    "aqua": 0xFF00FFFF,
    "fuchsia": 0xFFFF00FF,
    "darkgrey": 0xFF444444,
    "grey": 0xFF888888,
    "lightgrey": 0xFFCCCCCC,
    "lime": 0xFF00FF00,
    "maroon": 0xFF800000,
    "navy": 0xFF000080,
    "olive": 0xFF808000,
    "purple": 0xFF800080,
    "silver": 0xFFC0C0C0,
    "teal": 0xFF008080,
}


def parse_color(value: str) -> int:
    """Parse #RRGGBB, #AARRGGBB or a color name. Raises ValueError otherwise."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"Unknown color: {value!r}")
    if value.startswith("#"):
        digits = value[1:]
        if len(digits) not in (6, 8) or not all(c in "0123456789abcdefABCDEF" for c in digits):
            raise ValueError(f"Unknown color: {value!r}")
        color = int(digits, 16)
        if len(digits) == 6:
            color |= 0xFF000000
        return color
    named = NAMED_COLORS.get(value.lower())
    if named is None:
        raise ValueError(f"Unknown color: {value!r}")
    return named


def avatar_color(value: str | None) -> int:
    """Color for an avatar background; falls back to the default instead of raising."""
    try:
        return parse_color(value)
    except ValueError:
        logger.debug("Malformed avatar color %r, using default", value)
        return DEFAULT_AVATAR_COLOR


def rgb(color: int) -> tuple[int, int, int]:
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def to_hex(color: int) -> str:
    """#RRGGBB form (alpha dropped)."""
    return "#{:02X}{:02X}{:02X}".format(*rgb(color))
