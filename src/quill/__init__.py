"""
Quill - a terminal text editor with grapheme-aware editing and syntax highlighting.
"""

import logging

from .core import Document, Row, Position, SearchDirection, FileType, HighlightType

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ['Document', 'Row', 'Position', 'SearchDirection', 'FileType', 'HighlightType']
