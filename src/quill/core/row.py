"""
Row module: a single line of text addressed by grapheme index.
"""

from functools import lru_cache
from typing import List, Optional, Tuple

from .filetype import HighlightingOptions
from .highlighting import HighlightType, Palette, DEFAULT_PALETTE, RESET_FG
from .position import SearchDirection
from .graphemes import (
    split_graphemes,
    count_graphemes,
    grapheme_offsets,
    is_separator,
    is_ascii_digit,
)


class Row:
    """One line of the document, stored without its terminator."""

    def __init__(self, string: str = "") -> None:
        self.string = string
        self.highlighting: List[HighlightType] = []
        self.is_highlighted = False
        self._len = count_graphemes(string)
        self._carried_in = False
        self._carried_out = False
        self._highlighted_word: Optional[str] = None

    def __len__(self) -> int:
        return self._len

    def __repr__(self) -> str:
        return f"Row({self.string!r})"

    def is_empty(self) -> bool:
        return self._len == 0

    def graphemes(self) -> List[str]:
        return split_graphemes(self.string)

    def get_string(self) -> str:
        return self.string

    def as_bytes(self) -> bytes:
        return self.string.encode('utf-8')

    def _set_string(self, string: str) -> None:
        self.string = string
        self._len = count_graphemes(string)
        self.is_highlighted = False

    def insert(self, at: int, c: str) -> None:
        """Insert a character before the grapheme at the given index."""

        if at >= self._len:
            self._set_string(self.string + c)
            return

        graphemes = self.graphemes()
        at = max(0, at)
        self._set_string(''.join(graphemes[:at]) + c + ''.join(graphemes[at:]))

    def delete(self, at: int) -> None:
        """Delete the grapheme at the given index."""

        if at < 0 or at >= self._len:
            return

        graphemes = self.graphemes()
        del graphemes[at]
        self._set_string(''.join(graphemes))

    def append(self, other: 'Row') -> None:
        self._set_string(self.string + other.string)

    def split(self, at: int) -> 'Row':
        """
        Split the row at a grapheme index.

        Keeps graphemes before the index in this row and returns a new row
        holding the rest.
        """

        graphemes = self.graphemes()
        at = max(0, min(at, len(graphemes)))

        tail = Row(''.join(graphemes[at:]))
        self._set_string(''.join(graphemes[:at]))
        return tail

    def spans(self, start: int, end: int) -> List[Tuple[str, HighlightType]]:
        """
        Get the visible part of the row grouped by highlight category.

        Args:
            start: First grapheme index of the window
            end: Grapheme index one past the end of the window

        Returns:
            A list of (text, highlight type) tuples; tabs are shown as a space
        """

        end = min(end, self._len)
        start = max(0, min(start, end))

        result: List[Tuple[str, HighlightType]] = []
        graphemes = self.graphemes()
        for index in range(start, end):
            grapheme = graphemes[index]
            hl_type = HighlightType.NONE
            if self.is_highlighted and index < len(self.highlighting):
                hl_type = self.highlighting[index]

            text = grapheme.replace('\t', ' ')
            if result and result[-1][1] == hl_type:
                result[-1] = (result[-1][0] + text, hl_type)
            else:
                result.append((text, hl_type))

        return result

    def render(self, start: int, end: int, palette: Palette = DEFAULT_PALETTE) -> str:
        """Render a grapheme window as a string with ANSI color changes."""

        parts = []
        current = HighlightType.NONE
        for text, hl_type in self.spans(start, end):
            if hl_type != current:
                current = hl_type
                parts.append(palette.fg(hl_type))
            parts.append(text)

        parts.append(RESET_FG)
        return ''.join(parts)

    def find(self, query: str, at: int, direction: SearchDirection) -> Optional[int]:
        """
        Find a query in the row.

        Args:
            query: Text to look for
            at: Grapheme index to search from
            direction: FORWARD finds the first match starting at or after
                `at`, BACKWARD the last match starting at or before `at`

        Returns:
            The grapheme index of the match, or None
        """

        if not query or self._len == 0:
            return None

        at = max(0, min(at, self._len))
        offsets = grapheme_offsets(self.graphemes())
        boundaries = {offset: index for index, offset in enumerate(offsets)}

        if direction == SearchDirection.FORWARD:
            match = self.string.find(query, offsets[at])
            while match != -1 and match not in boundaries:
                match = self.string.find(query, match + 1)
        else:
            limit = offsets[at] + len(query)
            match = self.string.rfind(query, 0, limit)
            while match != -1 and match not in boundaries:
                match = self.string.rfind(query, 0, match + len(query) - 1)

        if match == -1:
            return None

        return boundaries[match]

    def highlight(self, opts: HighlightingOptions, word: Optional[str],
                  start_with_comment: bool) -> bool:
        """
        Recompute highlight categories for the row.

        Args:
            opts: Highlighting options of the document's file type
            word: Active search word to mark as MATCH, if any
            start_with_comment: Whether the row starts inside an unterminated
                block comment opened by a previous row

        Returns:
            Whether the row ends inside an unterminated block comment
        """

        if (self.is_highlighted and word is None and self._highlighted_word is None
                and self._carried_in == start_with_comment):
            return self._carried_out

        graphemes = self.graphemes()
        length = len(graphemes)
        marks: List[HighlightType] = []
        in_comment = start_with_comment
        index = 0

        while index < length:
            if in_comment:
                end, in_comment = _close_multiline_comment(graphemes, index)
                marks.extend([HighlightType.MULTILINE_COMMENT] * (end - index))
                index = end
                continue

            end, hl_type, in_comment = _match_token(graphemes, index, opts)
            marks.extend([hl_type] * (end - index))
            index = end

        self.highlighting = marks
        self._highlight_match(word)

        self.is_highlighted = True
        self._carried_in = start_with_comment
        self._carried_out = in_comment
        self._highlighted_word = word
        return in_comment

    def _highlight_match(self, word: Optional[str]) -> None:
        """Mark every non-overlapping occurrence of the search word."""

        if not word:
            return

        word_len = count_graphemes(word)
        index = 0
        while True:
            match = self.find(word, index, SearchDirection.FORWARD)
            if match is None:
                break

            next_index = min(match + word_len, self._len)
            for i in range(match, next_index):
                self.highlighting[i] = HighlightType.MATCH

            if next_index <= index:
                break
            index = next_index


def _close_multiline_comment(graphemes: List[str], index: int) -> Tuple[int, bool]:
    """Find where an open block comment ends; returns (end, still_open)."""

    for i in range(index, len(graphemes) - 1):
        if '*' in graphemes[i] and '/' in graphemes[i + 1]:
            return i + 2, False

    return len(graphemes), True


def _match_token(graphemes: List[str], index: int,
                 opts: HighlightingOptions) -> Tuple[int, HighlightType, bool]:
    """
    Classify the token starting at index.

    Returns (end, highlight type, opens_block_comment). Rules are tried in
    priority order and the first one that matches wins.
    """

    length = len(graphemes)
    grapheme = graphemes[index]
    next_grapheme = graphemes[index + 1] if index + 1 < length else None

    if opts.characters and "'" in grapheme and next_grapheme is not None:
        closing = index + 3 if '\\' in next_grapheme else index + 2
        if closing < length and "'" in graphemes[closing]:
            return closing + 1, HighlightType.CHARACTER, False

    if opts.comments and '/' in grapheme and next_grapheme is not None and '/' in next_grapheme:
        return length, HighlightType.COMMENT, False

    if (opts.multiline_comments and '/' in grapheme
            and next_grapheme is not None and '*' in next_grapheme):
        end, still_open = _close_multiline_comment(graphemes, index + 2)
        return end, HighlightType.MULTILINE_COMMENT, still_open

    for keywords, hl_type in ((opts.primary_keywords, HighlightType.PRIMARY_KEYWORDS),
                              (opts.secondary_keywords, HighlightType.SECONDARY_KEYWORDS)):
        end = _match_keyword(graphemes, index, keywords)
        if end is not None:
            return end, hl_type, False

    if opts.strings and '"' in grapheme:
        end = index + 1
        while end < length:
            if '\\' in graphemes[end]:
                end += 2
                continue
            end += 1
            if '"' in graphemes[end - 1]:
                break
        return min(end, length), HighlightType.STRING, False

    if opts.numbers and any(is_ascii_digit(c) for c in grapheme):
        if index == 0 or is_separator(graphemes[index - 1]):
            end = index + 1
            while end < length and all(c == '.' or is_ascii_digit(c) for c in graphemes[end]):
                end += 1
            return end, HighlightType.NUMBER, False

    return index + 1, HighlightType.NONE, False


def _match_keyword(graphemes: List[str], index: int, keywords: Tuple[str, ...]) -> Optional[int]:
    """Match a whole-word keyword at index; returns the end index or None."""

    if index > 0 and not is_separator(graphemes[index - 1]):
        return None

    for keyword in keywords:
        end = index + _keyword_length(keyword)
        if end > len(graphemes) or end == index:
            continue

        if end < len(graphemes) and not is_separator(graphemes[end]):
            continue

        if ''.join(graphemes[index:end]) == keyword:
            return end

    return None


@lru_cache(maxsize=None)
def _keyword_length(keyword: str) -> int:
    return count_graphemes(keyword)
