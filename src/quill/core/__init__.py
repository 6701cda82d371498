"""
Core package for the text buffer and syntax highlighting.

This package implements the Row and Document classes that hold the edited
text, the FileType language profiles and the HighlightType categories used
to color it.
"""

from .document import Document
from .errors import DocumentError, NotFoundError, PermissionDeniedError, OtherIOError
from .filetype import FileType, HighlightingOptions
from .highlighting import HighlightType, Palette
from .position import Position, SearchDirection
from .row import Row

__all__ = [
    'Document',
    'DocumentError',
    'NotFoundError',
    'PermissionDeniedError',
    'OtherIOError',
    'FileType',
    'HighlightingOptions',
    'HighlightType',
    'Palette',
    'Position',
    'SearchDirection',
    'Row',
]
