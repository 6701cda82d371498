"""
Highlight categories and their display colors.

Colors come from a built-in table and can be borrowed from any Pygments
style, so the terminal front-end can follow the user's preferred scheme.
"""

import curses
from enum import Enum
from typing import Dict, Tuple, Optional, Any, Final

from pygments.styles import get_style_by_name
from pygments.token import Token

RGB = Tuple[int, int, int]


class HighlightType(Enum):
    """Lexical category assigned to a single grapheme."""

    NONE = 'none'
    NUMBER = 'number'
    MATCH = 'match'
    STRING = 'string'
    CHARACTER = 'character'
    COMMENT = 'comment'
    MULTILINE_COMMENT = 'multiline_comment'
    PRIMARY_KEYWORDS = 'primary_keywords'
    SECONDARY_KEYWORDS = 'secondary_keywords'


HIGHLIGHT_COLORS: Final[Dict[HighlightType, RGB]] = {
    HighlightType.NUMBER: (220, 163, 163),
    HighlightType.MATCH: (38, 139, 210),
    HighlightType.STRING: (211, 54, 130),
    HighlightType.CHARACTER: (108, 113, 196),
    HighlightType.COMMENT: (133, 153, 0),
    HighlightType.MULTILINE_COMMENT: (133, 153, 0),
    HighlightType.PRIMARY_KEYWORDS: (181, 137, 0),
    HighlightType.SECONDARY_KEYWORDS: (42, 161, 152),
    HighlightType.NONE: (255, 255, 255),
}

TOKEN_TYPES: Final[Dict[HighlightType, Any]] = {
    HighlightType.NUMBER: Token.Literal.Number,
    HighlightType.STRING: Token.Literal.String,
    HighlightType.CHARACTER: Token.Literal.String.Char,
    HighlightType.COMMENT: Token.Comment.Single,
    HighlightType.MULTILINE_COMMENT: Token.Comment.Multiline,
    HighlightType.PRIMARY_KEYWORDS: Token.Keyword,
    HighlightType.SECONDARY_KEYWORDS: Token.Keyword.Type,
    HighlightType.NONE: Token.Text,
}

# Pair numbers start at 1; pair 0 is the terminal default.
COLOR_PAIRS: Final[Dict[HighlightType, int]] = {
    HighlightType.PRIMARY_KEYWORDS: 1,    # Yellow
    HighlightType.STRING: 2,              # Magenta
    HighlightType.COMMENT: 3,             # Green
    HighlightType.MULTILINE_COMMENT: 3,   # Green
    HighlightType.SECONDARY_KEYWORDS: 4,  # Cyan
    HighlightType.CHARACTER: 5,           # Blue
    HighlightType.NUMBER: 6,              # Red
    HighlightType.MATCH: 7,               # Black on blue
    HighlightType.NONE: 0,                # Default
}

RESET_FG: Final[str] = '\x1b[39m'


CUSTOM_COLOR_BASE: Final[int] = 16


def init_color_pairs(palette: Optional['Palette'] = None) -> None:
    """
    Initialize curses color pairs for every highlight category.

    When a palette is given and the terminal can redefine colors, the pairs
    use the palette's exact RGB values; otherwise the basic eight colors
    are used.
    """

    if (palette is not None and curses.can_change_color()
            and curses.COLORS >= CUSTOM_COLOR_BASE + len(COLOR_PAIRS)):
        for hl_type, pair in COLOR_PAIRS.items():
            if pair == 0:
                continue

            r, g, b = palette.color_for(hl_type)
            color = CUSTOM_COLOR_BASE + pair
            curses.init_color(color, r * 1000 // 255, g * 1000 // 255, b * 1000 // 255)
            if hl_type == HighlightType.MATCH:
                curses.init_pair(pair, curses.COLOR_BLACK, color)
            else:
                curses.init_pair(pair, color, -1)
        return

    curses.init_pair(COLOR_PAIRS[HighlightType.PRIMARY_KEYWORDS], curses.COLOR_YELLOW, -1)
    curses.init_pair(COLOR_PAIRS[HighlightType.STRING], curses.COLOR_MAGENTA, -1)
    curses.init_pair(COLOR_PAIRS[HighlightType.COMMENT], curses.COLOR_GREEN, -1)
    curses.init_pair(COLOR_PAIRS[HighlightType.SECONDARY_KEYWORDS], curses.COLOR_CYAN, -1)
    curses.init_pair(COLOR_PAIRS[HighlightType.CHARACTER], curses.COLOR_BLUE, -1)
    curses.init_pair(COLOR_PAIRS[HighlightType.NUMBER], curses.COLOR_RED, -1)
    curses.init_pair(COLOR_PAIRS[HighlightType.MATCH], curses.COLOR_BLACK, curses.COLOR_BLUE)


def color_pair_for(hl_type: HighlightType) -> int:
    """Get the curses attribute for a highlight category."""

    return curses.color_pair(COLOR_PAIRS.get(hl_type, 0))


def _parse_hex_color(value: str) -> Optional[RGB]:
    value = value.lstrip('#')
    if len(value) == 3:
        value = ''.join(c * 2 for c in value)

    if len(value) != 6:
        return None

    try:
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
    except ValueError:
        return None


class Palette:
    """Maps highlight categories to RGB foreground colors."""

    def __init__(self, colors: Optional[Dict[HighlightType, RGB]] = None) -> None:
        self._colors: Dict[HighlightType, RGB] = dict(HIGHLIGHT_COLORS)
        if colors:
            self._colors.update(colors)

    @classmethod
    def from_style(cls, style_name: str) -> 'Palette':
        """
        Build a palette from a Pygments style.

        Args:
            style_name: Name of a registered Pygments style, e.g. 'monokai'

        Returns:
            A palette where every category the style colors is overridden

        Raises:
            pygments.util.ClassNotFound: If the style does not exist
        """

        style = get_style_by_name(style_name)

        colors = {}
        for hl_type, token_type in TOKEN_TYPES.items():
            color = style.style_for_token(token_type).get('color')
            if not color:
                continue

            rgb = _parse_hex_color(color)
            if rgb is not None:
                colors[hl_type] = rgb

        return cls(colors)

    def color_for(self, hl_type: HighlightType) -> RGB:
        return self._colors.get(hl_type, HIGHLIGHT_COLORS[HighlightType.NONE])

    def fg(self, hl_type: HighlightType) -> str:
        """ANSI 24-bit foreground escape sequence for a category."""

        r, g, b = self.color_for(hl_type)
        return f'\x1b[38;2;{r};{g};{b}m'


DEFAULT_PALETTE: Final[Palette] = Palette()
