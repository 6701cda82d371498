"""
Grapheme cluster helpers built on the regex module's \\X matcher.
"""

import string
from typing import List, Final

import regex

GRAPHEME_PATTERN: Final = regex.compile(r'\X')

ASCII_WHITESPACE: Final[str] = ' \t\n\r\x0c'


def split_graphemes(text: str) -> List[str]:
    """Split text into extended grapheme clusters."""

    if not text:
        return []

    return GRAPHEME_PATTERN.findall(text)


def count_graphemes(text: str) -> int:
    """Count the extended grapheme clusters in text."""

    if not text:
        return 0

    return sum(1 for _ in GRAPHEME_PATTERN.finditer(text))


def grapheme_offsets(graphemes: List[str]) -> List[int]:
    """
    Get the string offset at which each grapheme starts.

    The returned list has one extra entry holding the total length, so that
    offsets[i] is valid for every grapheme index i in [0, len(graphemes)].
    """

    offsets = [0]
    for grapheme in graphemes:
        offsets.append(offsets[-1] + len(grapheme))

    return offsets


def is_separator(grapheme: str) -> bool:
    """Check if a grapheme holds ASCII punctuation or ASCII whitespace."""

    return any(c in string.punctuation or c in ASCII_WHITESPACE for c in grapheme)


def is_ascii_digit(c: str) -> bool:
    return '0' <= c <= '9'
