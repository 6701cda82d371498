import curses
import os
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from quill.core.document import Document
from quill.core.highlighting import HighlightType
from quill.core.position import Position
from quill.core.row import Row
from quill.ui.input_handler import (
    InputHandler,
    CTRL_F,
    CTRL_Q,
    CTRL_S,
    ESC,
    QUIT_TIMES,
)
from quill.ui.window import WindowManager, display_width, safe_addstr, truncate_to_width


class EditorTestCase(unittest.TestCase):

    def setUp(self):
        window_patcher = patch('quill.ui.window.curses')
        colors_patcher = patch('quill.core.highlighting.curses')
        self.mock_curses = window_patcher.start()
        colors_patcher.start()
        self.addCleanup(window_patcher.stop)
        self.addCleanup(colors_patcher.stop)

        self.mock_curses.newwin.return_value.getmaxyx.return_value = (24, 80)
        self.stdscr = self.mock_curses.initscr()
        self.stdscr.getmaxyx.return_value = (24, 80)

    def make_handler(self, lines=None, file_name=None):
        document = Document([Row(line) for line in lines or []], file_name)
        window_manager = WindowManager(self.stdscr, document)
        return InputHandler(window_manager)

    def type_text(self, handler, text):
        for c in text:
            handler.handle_input(c)

    def contents(self, handler):
        return [row.get_string() for row in handler.document.rows]


class TestEditing(EditorTestCase):

    def test_typing_into_empty_document(self):
        handler = self.make_handler()
        self.type_text(handler, "hi")
        self.assertEqual(self.contents(handler), ["hi"])
        self.assertEqual(handler.cursor, Position(0, 2))
        self.assertTrue(handler.document.is_dirty())

    def test_completing_a_grapheme_keeps_cursor(self):
        handler = self.make_handler()
        handler.handle_input("\U0001F1E8")
        handler.handle_input("\U0001F1FF")
        self.assertEqual(handler.document.row_len(0), 1)
        self.assertEqual(handler.cursor, Position(0, 1))

    def test_enter_and_backspace(self):
        handler = self.make_handler(["abc"])
        handler.cursor = Position(0, 1)

        handler.handle_input("\n")
        self.assertEqual(self.contents(handler), ["a", "bc"])
        self.assertEqual(handler.cursor, Position(1, 0))

        handler.handle_input(curses.KEY_BACKSPACE)
        self.assertEqual(self.contents(handler), ["abc"])
        self.assertEqual(handler.cursor, Position(0, 1))

    def test_backspace_at_document_start(self):
        handler = self.make_handler(["abc"])
        handler.handle_input(127)
        self.assertEqual(self.contents(handler), ["abc"])
        self.assertFalse(handler.document.is_dirty())

    def test_delete_key(self):
        handler = self.make_handler(["ab", "cd"])
        handler.cursor = Position(0, 2)
        handler.handle_input(curses.KEY_DC)
        self.assertEqual(self.contents(handler), ["abcd"])

    def test_cursor_movement(self):
        handler = self.make_handler(["abc", "d"])
        handler.handle_input(curses.KEY_END)
        self.assertEqual(handler.cursor, Position(0, 3))
        handler.handle_input(curses.KEY_DOWN)
        self.assertEqual(handler.cursor, Position(1, 1))
        handler.handle_input(curses.KEY_RIGHT)
        self.assertEqual(handler.cursor, Position(1, 1))
        handler.handle_input(curses.KEY_HOME)
        handler.handle_input(curses.KEY_LEFT)
        self.assertEqual(handler.cursor, Position(0, 3))

    def test_scroll_follows_cursor(self):
        handler = self.make_handler(["x"] * 50)
        for _ in range(30):
            handler.handle_input(curses.KEY_DOWN)
        self.assertEqual(handler.cursor.row, 30)
        self.assertEqual(handler.window_manager.offset.row, 30 - 22 + 1)


class TestQuit(EditorTestCase):

    def test_clean_document_quits_immediately(self):
        handler = self.make_handler(["abc"])
        self.assertFalse(handler.handle_input(CTRL_Q))

    def test_dirty_document_needs_repeated_quit(self):
        handler = self.make_handler()
        self.type_text(handler, "x")

        for times in range(QUIT_TIMES, 0, -1):
            self.assertTrue(handler.handle_input("\x11"))
            self.assertIn(f"{times} more times", handler.window_manager.status_message)

        self.assertFalse(handler.handle_input(CTRL_Q))

    def test_other_key_resets_quit_counter(self):
        handler = self.make_handler()
        self.type_text(handler, "x")
        handler.handle_input(CTRL_Q)
        handler.handle_input(curses.KEY_LEFT)
        self.assertEqual(handler.quit_times, QUIT_TIMES)
        self.assertEqual(handler.window_manager.status_message, "")


class TestSave(EditorTestCase):

    def setUp(self):
        super().setUp()
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def test_save_as(self):
        handler = self.make_handler()
        self.type_text(handler, "x")
        path = os.path.join(self.temp_dir.name, "out.rs")

        handler.handle_input(CTRL_S)
        self.assertTrue(handler.save_as_mode)
        self.type_text(handler, path)
        self.assertEqual(handler.prompt_text(), "Save as: " + path)
        handler.handle_input(10)

        self.assertFalse(handler.save_as_mode)
        self.assertEqual(handler.document.file_name, path)
        self.assertEqual(handler.document.file_type_name(), "Rust")
        self.assertFalse(handler.document.is_dirty())
        self.assertEqual(handler.window_manager.status_message, "File saved successfully.")
        with open(path, encoding='utf-8') as f:
            self.assertEqual(f.read(), "x")

    def test_save_as_aborted(self):
        handler = self.make_handler(["x"])
        handler.handle_input(CTRL_S)
        handler.handle_input("a")
        handler.handle_input(ESC)
        self.assertFalse(handler.save_as_mode)
        self.assertIsNone(handler.document.file_name)
        self.assertEqual(handler.window_manager.status_message, "Save aborted.")

    def test_save_error_is_reported(self):
        path = os.path.join(self.temp_dir.name, "missing", "out.txt")
        handler = self.make_handler(["x"], path)
        handler.handle_input(CTRL_S)
        self.assertTrue(handler.window_manager.status_message.startswith("Error writing file:"))
        self.assertFalse(os.path.exists(path))


class TestSearch(EditorTestCase):

    def test_incremental_search(self):
        handler = self.make_handler(["foo bar", "bar foo"])
        handler.handle_input(CTRL_F)
        self.assertTrue(handler.search_mode)

        self.type_text(handler, "bar")
        self.assertEqual(handler.cursor, Position(0, 4))
        self.assertTrue(handler.prompt_text().endswith("bar  [1/2]"))

        handler.handle_input(curses.KEY_RIGHT)
        self.assertEqual(handler.cursor, Position(1, 0))
        self.assertTrue(handler.prompt_text().endswith("[2/2]"))

        handler.handle_input(curses.KEY_LEFT)
        self.assertEqual(handler.cursor, Position(0, 4))

        handler.handle_input(10)
        self.assertFalse(handler.search_mode)
        self.assertIsNone(handler.prompt_text())
        self.assertEqual(handler.cursor, Position(0, 4))

    def test_escape_restores_cursor(self):
        handler = self.make_handler(["foo bar", "bar foo"])
        handler.handle_input(CTRL_F)
        self.type_text(handler, "bar")
        handler.handle_input(curses.KEY_DOWN)
        self.assertEqual(handler.cursor, Position(1, 0))

        handler.handle_input(ESC)
        self.assertFalse(handler.search_mode)
        self.assertEqual(handler.cursor, Position(0, 0))

    def test_backspace_edits_query(self):
        handler = self.make_handler(["foo bar"])
        handler.handle_input(CTRL_F)
        self.type_text(handler, "bax")
        self.assertEqual(handler.cursor, Position(0, 4))
        handler.handle_input(curses.KEY_BACKSPACE)
        self.assertEqual(handler.search_query, "ba")
        self.assertEqual(self.contents(handler), ["foo bar"])

    def test_search_word_is_highlighted_on_refresh(self):
        handler = self.make_handler(["foo bar"])
        handler.handle_input(CTRL_F)
        self.type_text(handler, "bar")
        handler.window_manager.refresh_all()

        row = handler.document.rows[0]
        self.assertEqual(row.highlighting[4:], [HighlightType.MATCH] * 3)
        self.mock_curses.doupdate.assert_called()


class TestWindowManager(EditorTestCase):

    def test_refresh_highlights_visible_rows(self):
        handler = self.make_handler(["x"] * 100, "lib.rs")
        handler.window_manager.refresh_all()
        rows = handler.document.rows
        self.assertTrue(all(row.is_highlighted for row in rows[:24]))
        self.assertFalse(any(row.is_highlighted for row in rows[24:]))

    def test_refresh_empty_document(self):
        handler = self.make_handler()
        handler.window_manager.refresh_all()
        text_window = handler.window_manager.text_window
        drawn = [call.args[2] for call in text_window.addstr.call_args_list]
        self.assertTrue(any("Quill editor -- version" in text for text in drawn))

    def test_status_bar(self):
        handler = self.make_handler(["fn main() {}"], "main.rs")
        self.type_text(handler, "x")
        handler.window_manager.draw_status()
        status_window = handler.window_manager.status_window
        text = status_window.addstr.call_args.args[2]
        self.assertIn("main.rs - 1 lines (modified)", text)
        self.assertIn("Rust | Ln 1, Col 2", text)

    def test_wide_text_is_clipped_to_window_width(self):
        handler = self.make_handler(["日本語" * 40, "ab" + "\U0001F600" * 60])
        handler.window_manager.refresh_all()

        text_window = handler.window_manager.text_window
        for call in text_window.addstr.call_args_list:
            y, x, text = call.args[:3]
            self.assertLessEqual(x + display_width(text), 80, (y, x, text))

        drawn = [call.args[2] for call in text_window.addstr.call_args_list]
        self.assertIn("日本語" * 13 + "日", drawn)


class TestSafeAddstr(unittest.TestCase):

    def setUp(self):
        self.window = MagicMock()
        self.window.getmaxyx.return_value = (24, 5)

    def test_truncates_by_cells(self):
        safe_addstr(self.window, 0, 0, "日本語テキスト")
        self.window.addstr.assert_called_once_with(0, 0, "日本", 0)

    def test_truncation_keeps_whole_graphemes(self):
        safe_addstr(self.window, 0, 1, "e\u0301" * 5)
        self.window.addstr.assert_called_once_with(0, 1, "e\u0301" * 4, 0)

    def test_text_that_fits_is_unchanged(self):
        safe_addstr(self.window, 3, 1, "日本", 7)
        self.window.addstr.assert_called_once_with(3, 1, "日本", 7)

    def test_outside_window_is_skipped(self):
        safe_addstr(self.window, 24, 0, "x")
        safe_addstr(self.window, 0, 5, "x")
        self.window.addstr.assert_not_called()

    def test_truncate_to_width(self):
        self.assertEqual(truncate_to_width("a日b", 2), "a")
        self.assertEqual(truncate_to_width("a日b", 3), "a日")
        self.assertEqual(truncate_to_width("abc", 0), "")


if __name__ == '__main__':
    unittest.main()
