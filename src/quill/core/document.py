"""
Document module: the ordered rows of a file plus persistence metadata.
"""

import logging
import os
import shutil
import tempfile
from typing import List, Optional

from .errors import from_os_error
from .filetype import FileType
from .position import Position, SearchDirection
from .row import Row

logger = logging.getLogger(__name__)


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


class Document:
    """The text buffer being edited."""

    def __init__(self, rows: Optional[List[Row]] = None, file_name: Optional[str] = None) -> None:
        self.rows: List[Row] = rows if rows is not None else []
        self.file_name = file_name
        self.dirty = False
        self.file_type = FileType.from_filename(file_name) if file_name else FileType()

    @classmethod
    def open(cls, file_name: str) -> 'Document':
        """
        Load a document from a file.

        Content ending with a line terminator gets an extra empty last row,
        so saving the document writes the final newline back.

        Args:
            file_name: Path of the file to read

        Returns:
            The loaded document

        Raises:
            NotFoundError: If the file does not exist
            PermissionDeniedError: If the file cannot be read
            OtherIOError: On any other read or decoding failure
        """

        try:
            with open(file_name, 'r', encoding='utf-8', newline='') as f:
                contents = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not open %s: %s", file_name, e)
            raise from_os_error(e, file_name, 'open') from e

        rows = []
        if contents:
            for line in contents.split('\n'):
                if line.endswith('\r'):
                    line = line[:-1]
                rows.append(Row(line))

        logger.debug("Opened %s with %d rows", file_name, len(rows))
        return cls(rows, file_name)

    def save(self) -> bool:
        """
        Save the document to its file name.

        Rows are joined with a single newline and no trailing newline is
        added. The content is written to a temporary file that then replaces
        the target, so a failed save keeps the previous file intact. A symlink
        is followed to the file it points to; a new file gets 0666 minus the
        umask.

        Returns:
            bool: True if the document was saved, False if it has no file name

        Raises:
            DocumentError: If the file cannot be written
        """

        if not self.file_name:
            return False

        # Saving through a symlink updates the file it points to.
        target = os.path.realpath(self.file_name)
        directory = os.path.dirname(target)
        content = '\n'.join(row.get_string() for row in self.rows)

        temp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', newline='', dir=directory,
                prefix=f".{os.path.basename(target)}.", suffix='.tmp', delete=False
            ) as f:
                temp_name = f.name
                f.write(content)

            if os.path.exists(target):
                shutil.copymode(target, temp_name)
            else:
                os.chmod(temp_name, 0o666 & ~_current_umask())
            os.replace(temp_name, target)
        except OSError as e:
            logger.warning("Could not save %s: %s", self.file_name, e)
            if temp_name and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise from_os_error(e, self.file_name, 'save') from e

        file_type = FileType.from_filename(self.file_name)
        if file_type != self.file_type:
            self.file_type = file_type
            self._unhighlight_rows(0)

        self.dirty = False
        logger.debug("Saved %s with %d rows", self.file_name, len(self.rows))
        return True

    def __len__(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.rows

    def is_dirty(self) -> bool:
        return self.dirty

    def file_type_name(self) -> str:
        return self.file_type.name

    def row(self, index: int) -> Optional[Row]:
        if 0 <= index < len(self.rows):
            return self.rows[index]

        return None

    def row_len(self, index: int) -> int:
        """Get the grapheme count of a row, 0 if there is no such row."""

        row = self.row(index)
        if row is None:
            return 0

        return len(row)

    def insert(self, at: Position, c: str) -> None:
        """Insert a character; a newline splits the row at the position."""

        self.dirty = True

        if c == '\n':
            self._insert_newline(at)
        elif self.is_empty():
            row = Row()
            row.insert(0, c)
            self.rows.append(row)
        else:
            if at.row >= len(self.rows):
                self.rows.append(Row())
            self.rows[min(max(at.row, 0), len(self.rows) - 1)].insert(at.col, c)

        self._unhighlight_rows(at.row)

    def _insert_newline(self, at: Position) -> None:
        if self.is_empty():
            self.rows.append(Row())
            self.rows.append(Row())
            return

        if at.row >= len(self.rows):
            self.rows.append(Row())
            return

        row_index = max(at.row, 0)
        new_row = self.rows[row_index].split(at.col)
        self.rows.insert(row_index + 1, new_row)

    def delete(self, at: Position) -> None:
        """
        Delete the grapheme at the position.

        At the end of a row the following row is joined onto it. Deleting at
        the end of the last row, or outside the document, does nothing.
        """

        row = self.row(at.row)
        if row is None:
            return

        col = min(max(at.col, 0), len(row))
        next_row = self.row(at.row + 1)
        if col == len(row) and next_row is None:
            return

        self.dirty = True

        if col == len(row):
            del self.rows[at.row + 1]
            row.append(next_row)
        else:
            row.delete(col)

        self._unhighlight_rows(at.row)

    def _unhighlight_rows(self, start: int) -> None:
        """Invalidate highlighting from the row above start to the end."""

        for row in self.rows[max(start - 1, 0):]:
            row.is_highlighted = False

    def find(self, query: str, at: Position, direction: SearchDirection) -> Optional[Position]:
        """
        Search the document for a query, hopping rows until it is found.

        Args:
            query: Text to look for
            at: Position to search from
            direction: FORWARD searches to the end of the document, BACKWARD
                to its start

        Returns:
            The position of the match, or None
        """

        if not 0 <= at.row < len(self.rows):
            return None

        position = Position(at.row, at.col)
        while 0 <= position.row < len(self.rows):
            col = self.rows[position.row].find(query, position.col, direction)
            if col is not None:
                position.col = col
                return position

            if direction == SearchDirection.FORWARD:
                position.row += 1
                position.col = 0
            else:
                position.row -= 1
                position.col = self.row_len(position.row)

        return None

    def highlight(self, word: Optional[str] = None, until: Optional[int] = None) -> None:
        """
        Highlight rows from the top of the document.

        Args:
            word: Active search word to mark in every highlighted row
            until: Last visible row; rows up to one past it are highlighted.
                None highlights the whole document.
        """

        end = len(self.rows)
        if until is not None:
            end = min(until + 2, len(self.rows))

        start_with_comment = False
        for row in self.rows[:end]:
            start_with_comment = row.highlight(self.file_type.hl_opts, word, start_with_comment)
