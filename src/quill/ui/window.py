"""
Window management module for the editor UI.
"""

import curses
import os
import time
from typing import Optional, TYPE_CHECKING

from wcwidth import wcswidth

from .. import __version__
from ..core.document import Document
from ..core.graphemes import split_graphemes
from ..core.highlighting import Palette, init_color_pairs, color_pair_for
from ..core.position import Position

if TYPE_CHECKING:
    from .input_handler import InputHandler


def safe_addstr(window: 'curses.window', y: int, x: int, string: str, attr: int = 0) -> None:
    """Safely add a string to a window, truncating it to the cells left on the line."""

    height, width = window.getmaxyx()
    if y >= height or x >= width:
        return

    available = width - x
    if available <= 0:
        return

    if display_width(string) > available:
        string = truncate_to_width(string, available)

    try:
        window.addstr(y, x, string, attr)
    except curses.error:
        pass


def display_width(text: str) -> int:
    """Number of terminal cells a string occupies."""

    width = wcswidth(text)
    if width < 0:
        return len(text)

    return width


def truncate_to_width(text: str, cells: int) -> str:
    """Keep the leading graphemes of text that fit in the given number of cells."""

    used = 0
    kept = []
    for grapheme in split_graphemes(text):
        used += display_width(grapheme)
        if used > cells:
            break
        kept.append(grapheme)

    return ''.join(kept)


class WindowManager:
    """Manages the curses windows, the viewport and the status lines."""

    STATUS_MESSAGE_DURATION = 5
    STATUS_BAR_PAIR = 10

    def __init__(self, stdscr: 'curses.window', document: Document,
                 palette: Optional[Palette] = None) -> None:
        self.stdscr = stdscr
        self.height, self.width = stdscr.getmaxyx()
        self.document = document
        self.palette = palette

        self.cursor = Position()
        self.offset = Position()
        self.text_window: Optional['curses.window'] = None
        self.status_window: Optional['curses.window'] = None
        self.message_window: Optional['curses.window'] = None
        self.input_handler: Optional['InputHandler'] = None
        self.status_message = ""
        self.status_message_time = 0.0

        curses.start_color()
        init_color_pairs(palette)
        curses.init_pair(self.STATUS_BAR_PAIR, curses.COLOR_BLACK, curses.COLOR_WHITE)

        self.setup_windows()

    @property
    def text_height(self) -> int:
        return max(1, self.height - 2)

    def setup_windows(self) -> None:
        """Create and position all windows."""

        self.text_window = curses.newwin(self.text_height, self.width, 0, 0)
        self.status_window = curses.newwin(1, self.width, self.text_height, 0)
        self.message_window = curses.newwin(1, self.width, self.text_height + 1, 0)

    def set_status_message(self, message: str) -> None:
        self.status_message = message
        self.status_message_time = time.time()

    def refresh_all(self) -> None:
        """Highlight the visible rows and redraw every window."""

        search_word = None
        if self.input_handler and self.input_handler.search_mode:
            search_word = self.input_handler.search_query or None

        if search_word:
            self.document.highlight(search_word)
        else:
            self.document.highlight(None, self.offset.row + self.text_height)

        self.draw_rows()
        self.draw_status()
        self.draw_message()
        curses.doupdate()

    def draw_rows(self) -> None:
        """Draw the visible rows with their highlight colors."""

        if not self.text_window:
            return

        self.text_window.erase()

        for screen_row in range(self.text_height):
            row_index = self.offset.row + screen_row
            row = self.document.row(row_index)

            if row is None:
                if self.document.is_empty() and screen_row == self.text_height // 3:
                    self.draw_welcome_message(screen_row)
                else:
                    safe_addstr(self.text_window, screen_row, 0, "~")
                continue

            x = 0
            for text, hl_type in row.spans(self.offset.col, self.offset.col + self.width):
                safe_addstr(self.text_window, screen_row, x, text, color_pair_for(hl_type))
                x += display_width(text)

        self.draw_cursor()
        self.text_window.noutrefresh()

    def draw_cursor(self) -> None:
        """Show the cursor cell in reverse video."""

        if not self.text_window:
            return

        y = self.cursor.row - self.offset.row
        if not 0 <= y < self.text_height:
            return

        x = 0
        row = self.document.row(self.cursor.row)
        if row is not None:
            x = sum(display_width(text) for text, _ in row.spans(self.offset.col, self.cursor.col))

        if x >= self.width:
            return

        try:
            self.text_window.chgat(y, x, 1, curses.A_REVERSE)
        except curses.error:
            pass

    def draw_welcome_message(self, screen_row: int) -> None:
        """Draw the centred welcome line shown for an empty document."""

        message = f"Quill editor -- version {__version__}"
        padding = max(0, (self.width - len(message) - 1) // 2)
        safe_addstr(self.text_window, screen_row, 0, "~" + " " * padding + message)

    def draw_status(self) -> None:
        """Draw the status bar."""

        if not self.status_window:
            return

        self.status_window.erase()

        name = self.document.file_name or '[No Name]'
        name = os.path.basename(name)[:20]
        status = f"{name} - {len(self.document)} lines"
        if self.document.is_dirty():
            status += " (modified)"

        pos_info = (
            f"{self.document.file_type_name()} | "
            f"Ln {self.cursor.row + 1}, Col {self.cursor.col + 1}"
        )

        # The last cell is left empty; writing it would move the curses cursor off-screen.
        available_width = self.width - 1 - len(pos_info)
        if len(status) > available_width:
            status = status[:max(0, available_width)]
        else:
            status += " " * (available_width - len(status))

        attr = curses.color_pair(self.STATUS_BAR_PAIR) | curses.A_BOLD
        safe_addstr(self.status_window, 0, 0, (status + pos_info)[:self.width - 1], attr)
        self.status_window.noutrefresh()

    def draw_message(self) -> None:
        """Draw the message bar; messages expire after a few seconds."""

        if not self.message_window:
            return

        self.message_window.erase()

        prompt = self.input_handler.prompt_text() if self.input_handler else None
        if prompt is not None:
            safe_addstr(self.message_window, 0, 0, prompt)
        elif self.status_message:
            if time.time() - self.status_message_time < self.STATUS_MESSAGE_DURATION:
                attr = curses.A_BOLD if self.status_message.startswith(("ERR", "Error")) else 0
                safe_addstr(self.message_window, 0, 0, self.status_message, attr)
            else:
                self.status_message = ""

        self.message_window.noutrefresh()

    def scroll(self) -> None:
        """Adjust the viewport offset so the cursor stays visible."""

        if self.cursor.row < self.offset.row:
            self.offset.row = self.cursor.row
        elif self.cursor.row >= self.offset.row + self.text_height:
            self.offset.row = self.cursor.row - self.text_height + 1

        if self.cursor.col < self.offset.col:
            self.offset.col = self.cursor.col
        elif self.cursor.col >= self.offset.col + self.width:
            self.offset.col = self.cursor.col - self.width + 1

    def resize(self) -> None:
        """Handle terminal resize events."""

        self.height, self.width = self.stdscr.getmaxyx()
        self.setup_windows()
        self.scroll()
