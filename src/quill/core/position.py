"""
Cursor positions and search directions shared by the document and the UI.
"""

from dataclasses import dataclass
from enum import Enum


class SearchDirection(Enum):
    FORWARD = 'forward'
    BACKWARD = 'backward'


@dataclass
class Position:
    """A location in the document; col is a grapheme index within the row."""
    row: int = 0
    col: int = 0
