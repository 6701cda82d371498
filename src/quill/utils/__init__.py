"""
Utility package for editor search support.
"""

from .search import SearchEngine, SearchResult

__all__ = [
    'SearchEngine',
    'SearchResult'
]
