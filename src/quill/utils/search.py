"""
Search functionality for the editor.
"""

import logging
from typing import List, Optional

from ..core.document import Document
from ..core.position import Position, SearchDirection
from ..core.graphemes import count_graphemes

logger = logging.getLogger(__name__)


class SearchResult:
    """Represents a search result with position and match information."""

    def __init__(self, position: Position, length: int, match: str):
        self.position = position
        self.length = length
        self.match = match

    def __repr__(self) -> str:
        return f"SearchResult({self.position!r}, {self.length}, {self.match!r})"


class SearchEngine:
    """Searches a document for text, forward and backward from a position."""

    def __init__(self, document: Document) -> None:
        self.document = document

    def _result(self, query: str, position: Optional[Position]) -> Optional[SearchResult]:
        if position is None:
            return None

        return SearchResult(position, count_graphemes(query), query)

    def find_next(self, query: str, start: Position) -> Optional[SearchResult]:
        """
        Find the first occurrence at or after a position.

        Args:
            query: The text to search for
            start: Position to start searching from

        Returns:
            Optional[SearchResult]: The search result if found
        """

        if not query:
            return None

        return self._result(query, self.document.find(query, start, SearchDirection.FORWARD))

    def find_previous(self, query: str, start: Position) -> Optional[SearchResult]:
        """
        Find the last occurrence before a position.

        The search starts one grapheme before `start`, so a match at the
        cursor is skipped and repeated calls walk backward through matches.
        """

        if not query:
            return None

        if start.col > 0:
            position = Position(start.row, start.col - 1)
        elif start.row > 0:
            position = Position(start.row - 1, self.document.row_len(start.row - 1))
        else:
            return None

        return self._result(query, self.document.find(query, position, SearchDirection.BACKWARD))

    def find_all(self, query: str) -> List[SearchResult]:
        """
        Find all non-overlapping occurrences of a query.

        Args:
            query: The text to search for

        Returns:
            List[SearchResult]: All search results in document order
        """

        if not query or self.document.is_empty():
            return []

        results = []
        position = Position(0, 0)

        while True:
            result = self.find_next(query, position)
            if not result:
                break

            results.append(result)
            position = Position(result.position.row, result.position.col + max(result.length, 1))

        logger.debug("Found %d matches for %r", len(results), query)
        return results

    @staticmethod
    def match_index(result: SearchResult, results: List[SearchResult]) -> int:
        """Get the 1-based index of a result among all results, 0 if absent."""

        for index, candidate in enumerate(results, start=1):
            if candidate.position == result.position:
                return index

        return 0
