"""
Input handler module for processing keyboard events.
"""

import curses
import logging
from typing import Optional, Callable, Dict, List, Union, Final

from ..core.errors import DocumentError
from ..core.graphemes import split_graphemes
from ..core.position import Position
from ..utils.search import SearchEngine, SearchResult
from .window import WindowManager

logger = logging.getLogger(__name__)

Key = Union[int, str]

QUIT_TIMES: Final[int] = 3
ESC: Final[int] = 27
CTRL_F: Final[int] = ord('f') & 0x1f
CTRL_Q: Final[int] = ord('q') & 0x1f
CTRL_S: Final[int] = ord('s') & 0x1f

ENTER_KEYS: Final = (ord('\n'), ord('\r'), curses.KEY_ENTER)
BACKSPACE_KEYS: Final = (curses.KEY_BACKSPACE, 127, ord('\b'))

HELP_STATUS_MESSAGE: Final[str] = "HELP: Ctrl-F = find | Ctrl-S = save | Ctrl-Q = quit"
SEARCH_PROMPT: Final[str] = "Search (ESC to cancel, Arrows to navigate): "
SAVE_AS_PROMPT: Final[str] = "Save as: "
UNSAVED_CHANGES_STATUS_MESSAGE: Final[str] = (
    "WARNING! File has unsaved changes. Press Ctrl-Q {times} more times to quit."
)


class InputHandler:
    """Handles keyboard input and executes corresponding actions."""

    def __init__(self, window_manager: WindowManager) -> None:
        self.window_manager = window_manager
        self.window_manager.input_handler = self
        self.document = window_manager.document
        self.should_quit = False
        self.quit_times = QUIT_TIMES

        self.search_mode = False
        self.search_query = ""
        self.search_results: List[SearchResult] = []
        self.current_result: Optional[SearchResult] = None
        self.search_engine = SearchEngine(self.document)
        self._saved_cursor: Optional[Position] = None
        self._saved_offset: Optional[Position] = None

        self.save_as_mode = False
        self.save_as_query = ""

        self.command_handlers: Dict[int, Callable[[], None]] = self._setup_handlers()

    def _setup_handlers(self) -> Dict[int, Callable[[], None]]:
        """Set up the keyboard command handlers."""

        handlers: Dict[int, Callable[[], None]] = {
            curses.KEY_LEFT: self._move_left,
            curses.KEY_RIGHT: self._move_right,
            curses.KEY_UP: self._move_up,
            curses.KEY_DOWN: self._move_down,
            curses.KEY_HOME: self._move_line_start,
            curses.KEY_END: self._move_line_end,
            curses.KEY_PPAGE: self._page_up,
            curses.KEY_NPAGE: self._page_down,

            curses.KEY_DC: self._delete_char,
            ord('\t'): self._handle_tab,

            CTRL_Q: self._quit,
            CTRL_S: self._save,
            CTRL_F: self._start_search,
        }

        for key in ENTER_KEYS:
            handlers[key] = self._handle_enter
        for key in BACKSPACE_KEYS:
            handlers[key] = self._backspace

        return handlers

    @property
    def cursor(self) -> Position:
        return self.window_manager.cursor

    @cursor.setter
    def cursor(self, position: Position) -> None:
        self.window_manager.cursor = position

    def handle_input(self, key: Key) -> bool:
        """Handle a single keyboard input. Returns False if should quit."""

        key = self._normalize_key(key)

        if self.search_mode or self.save_as_mode:
            self._handle_prompt_input(key)
            self.window_manager.scroll()
            return True

        if isinstance(key, str):
            self._insert_char(key)
        elif key in self.command_handlers:
            self.command_handlers[key]()

        if self.should_quit:
            return False

        if key != CTRL_Q and self.quit_times < QUIT_TIMES:
            self.quit_times = QUIT_TIMES
            self.window_manager.set_status_message("")

        self.window_manager.scroll()
        return True

    @staticmethod
    def _normalize_key(key: Key) -> Key:
        """Turn control characters delivered as strings into key codes."""

        if isinstance(key, str) and len(key) == 1 and (ord(key) < 32 or ord(key) == 127):
            return ord(key)

        return key

    def prompt_text(self) -> Optional[str]:
        """Text of the active prompt for the message bar, or None."""

        if self.save_as_mode:
            return SAVE_AS_PROMPT + self.save_as_query

        if not self.search_mode:
            return None

        text = SEARCH_PROMPT + self.search_query
        if self.current_result is not None and self.search_results:
            index = SearchEngine.match_index(self.current_result, self.search_results)
            text += f"  [{index}/{len(self.search_results)}]"

        return text

    def _insert_char(self, char: str) -> None:
        """Insert typed text at the cursor."""

        for c in char:
            self.document.insert(self.cursor, c)

            row = self.document.row(self.cursor.row)
            if row is None:
                continue

            graphemes = row.graphemes()
            # Completing a multi-codepoint grapheme leaves the cursor in place.
            if self.cursor.col < len(graphemes) and graphemes[self.cursor.col] == c:
                self._move_right()

    def _move_left(self) -> None:
        if self.cursor.col > 0:
            self.cursor.col -= 1
        elif self.cursor.row > 0:
            self.cursor.row -= 1
            self.cursor.col = self.document.row_len(self.cursor.row)

    def _move_right(self) -> None:
        if self.cursor.col < self.document.row_len(self.cursor.row):
            self.cursor.col += 1
        elif self.cursor.row < len(self.document) - 1:
            self.cursor.row += 1
            self.cursor.col = 0

    def _clamp_col(self) -> None:
        self.cursor.col = min(self.cursor.col, self.document.row_len(self.cursor.row))

    def _move_up(self) -> None:
        self.cursor.row = max(0, self.cursor.row - 1)
        self._clamp_col()

    def _move_down(self) -> None:
        if self.cursor.row < len(self.document) - 1:
            self.cursor.row += 1
        self._clamp_col()

    def _move_line_start(self) -> None:
        self.cursor.col = 0

    def _move_line_end(self) -> None:
        self.cursor.col = self.document.row_len(self.cursor.row)

    def _page_up(self) -> None:
        self.cursor.row = max(0, self.cursor.row - self.window_manager.text_height)
        self._clamp_col()

    def _page_down(self) -> None:
        last_row = max(0, len(self.document) - 1)
        self.cursor.row = min(self.cursor.row + self.window_manager.text_height, last_row)
        self._clamp_col()

    def _delete_char(self) -> None:
        """Delete character at cursor."""

        self.document.delete(self.cursor)

    def _backspace(self) -> None:
        """Delete character before cursor."""

        if self.cursor.col > 0 or self.cursor.row > 0:
            self._move_left()
            self.document.delete(self.cursor)

    def _handle_enter(self) -> None:
        """Split the row at the cursor."""

        self.document.insert(self.cursor, '\n')
        self.cursor = Position(self.cursor.row + 1, 0)

    def _handle_tab(self) -> None:
        self._insert_char('\t')

    def _quit(self) -> None:
        """Quit, asking for confirmation while there are unsaved changes."""

        if self.quit_times > 0 and self.document.is_dirty():
            self.window_manager.set_status_message(
                UNSAVED_CHANGES_STATUS_MESSAGE.format(times=self.quit_times)
            )
            self.quit_times -= 1
            return

        self.should_quit = True

    def _save(self) -> None:
        """Save the document, asking for a file name if it has none."""

        if not self.document.file_name:
            self.save_as_mode = True
            self.save_as_query = ""
            return

        self._write()

    def _write(self) -> None:
        try:
            self.document.save()
        except DocumentError as e:
            logger.warning("Save failed: %s", e)
            self.window_manager.set_status_message(f"Error writing file: {e}")
            return

        self.window_manager.set_status_message("File saved successfully.")

    def _start_search(self) -> None:
        """Start incremental search mode."""

        self.search_mode = True
        self.search_query = ""
        self.search_results = []
        self.current_result = None
        self._saved_cursor = Position(self.cursor.row, self.cursor.col)
        self._saved_offset = Position(self.window_manager.offset.row, self.window_manager.offset.col)

    def _handle_prompt_input(self, key: Key) -> None:
        """Edit the active prompt's query or finish the prompt."""

        if key == ESC:
            self._finish_prompt(accepted=False)
            return

        if key in ENTER_KEYS:
            self._finish_prompt(accepted=True)
            return

        query_changed = False
        if key in BACKSPACE_KEYS:
            self._set_query(_drop_last_grapheme(self._query()))
            query_changed = True
        elif isinstance(key, str):
            self._set_query(self._query() + key)
            query_changed = True

        if self.search_mode:
            self._search_step(key, query_changed)

    def _query(self) -> str:
        return self.save_as_query if self.save_as_mode else self.search_query

    def _set_query(self, query: str) -> None:
        if self.save_as_mode:
            self.save_as_query = query
        else:
            self.search_query = query

    def _search_step(self, key: Key, query_changed: bool) -> None:
        """Move to the next or previous match of the current query."""

        query = self.search_query
        if not query:
            self.search_results = []
            self.current_result = None
            return

        if query_changed:
            self.search_results = self.search_engine.find_all(query)

        if key in (curses.KEY_RIGHT, curses.KEY_DOWN):
            start = Position(self.cursor.row, self.cursor.col + 1)
            result = self.search_engine.find_next(query, start)
        elif key in (curses.KEY_LEFT, curses.KEY_UP):
            result = self.search_engine.find_previous(query, self.cursor)
        else:
            result = self.search_engine.find_next(query, self.cursor)

        if result is None:
            return

        self.current_result = result
        self.cursor = Position(result.position.row, result.position.col)

    def _finish_prompt(self, accepted: bool) -> None:
        if self.save_as_mode:
            self.save_as_mode = False
            file_name, self.save_as_query = self.save_as_query, ""
            if not accepted or not file_name:
                self.window_manager.set_status_message("Save aborted.")
                return

            self.document.file_name = file_name
            self._write()
            return

        self.search_mode = False
        self.search_query = ""
        self.search_results = []
        self.current_result = None

        if not accepted and self._saved_cursor is not None and self._saved_offset is not None:
            self.cursor = self._saved_cursor
            self.window_manager.offset = self._saved_offset

        self._saved_cursor = None
        self._saved_offset = None


def _drop_last_grapheme(text: str) -> str:
    return ''.join(split_graphemes(text)[:-1])
