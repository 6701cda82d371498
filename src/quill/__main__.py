"""
Entry point for Quill.
"""

import argparse
import curses
import logging
import os
import sys
from typing import Optional, Tuple

from pygments.util import ClassNotFound

from .core.document import Document
from .core.errors import DocumentError
from .core.highlighting import Palette
from .ui.input_handler import InputHandler, HELP_STATUS_MESSAGE
from .ui.window import WindowManager

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Quill - Terminal Text Editor with Syntax Highlighting"
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=str,
        help="File to open"
    )
    parser.add_argument(
        "--style",
        type=str,
        default=None,
        help="Pygments style used for highlight colors (e.g. monokai)"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Write log records to this file"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Minimum level of log records"
    )
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], level: str) -> None:
    """Log to a file; the terminal belongs to curses while the editor runs."""

    if not log_file:
        return

    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_document(file_name: Optional[str]) -> Tuple[Document, str]:
    """
    Load the document to edit.

    Returns:
        A (document, status message) tuple. A file that does not exist yet
        gives an empty document bound to that name.
    """

    if not file_name:
        return Document(), HELP_STATUS_MESSAGE

    if not os.path.exists(file_name):
        return Document(file_name=file_name), f"New file: {file_name}"

    try:
        return Document.open(file_name), HELP_STATUS_MESSAGE
    except DocumentError as e:
        logger.error("Could not open %s: %s", file_name, e)
        return Document(), f"ERR: Could not open file: {file_name}"


def main_with_args(stdscr: 'curses.window', args: argparse.Namespace, palette: Optional[Palette]) -> None:
    """Main function with command line arguments."""

    curses.use_default_colors()
    curses.curs_set(0)

    document, status = load_document(args.file)

    window_manager = WindowManager(stdscr, document, palette)
    input_handler = InputHandler(window_manager)
    window_manager.set_status_message(status)

    while True:
        current_height, current_width = stdscr.getmaxyx()
        if (current_height, current_width) != (window_manager.height, window_manager.width):
            window_manager.resize()

        window_manager.refresh_all()

        try:
            key = stdscr.get_wch()
        except curses.error:
            continue

        if key == curses.KEY_RESIZE:
            window_manager.resize()
            continue

        if not input_handler.handle_input(key):
            break


def main() -> None:
    """Entry point for the application."""

    args = parse_args()
    setup_logging(args.log_file, args.log_level)

    palette = None
    if args.style:
        try:
            palette = Palette.from_style(args.style)
        except ClassNotFound:
            print(f"Unknown style: {args.style}", file=sys.stderr)
            sys.exit(2)

    try:
        curses.wrapper(main_with_args, args, palette)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
