import os
import tempfile
import unittest
from unittest.mock import patch

from quill.__main__ import parse_args, load_document, main
from quill.core.highlighting import HighlightType, Palette
from quill.ui.input_handler import HELP_STATUS_MESSAGE


class TestArguments(unittest.TestCase):

    def test_defaults(self):
        args = parse_args([])
        self.assertIsNone(args.file)
        self.assertIsNone(args.style)
        self.assertIsNone(args.log_file)
        self.assertEqual(args.log_level, "WARNING")

    def test_options(self):
        args = parse_args(["main.rs", "--style", "monokai", "--log-level", "DEBUG"])
        self.assertEqual(args.file, "main.rs")
        self.assertEqual(args.style, "monokai")
        self.assertEqual(args.log_level, "DEBUG")

    def test_invalid_log_level(self):
        with patch('sys.stderr'), self.assertRaises(SystemExit):
            parse_args(["--log-level", "LOUD"])


class TestLoadDocument(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def test_no_file(self):
        document, message = load_document(None)
        self.assertTrue(document.is_empty())
        self.assertIsNone(document.file_name)
        self.assertEqual(message, HELP_STATUS_MESSAGE)

    def test_existing_file(self):
        path = os.path.join(self.temp_dir.name, "main.rs")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("fn main() {}\n")

        document, message = load_document(path)
        self.assertEqual(len(document), 2)
        self.assertEqual(document.file_type_name(), "Rust")
        self.assertEqual(message, HELP_STATUS_MESSAGE)

    def test_new_file(self):
        path = os.path.join(self.temp_dir.name, "new.go")
        document, message = load_document(path)
        self.assertTrue(document.is_empty())
        self.assertEqual(document.file_name, path)
        self.assertEqual(document.file_type_name(), "Go")
        self.assertEqual(message, f"New file: {path}")

    def test_unreadable_file(self):
        path = os.path.join(self.temp_dir.name, "bad.txt")
        with open(path, 'wb') as f:
            f.write(b"\xff\xfe")

        with self.assertLogs('quill.__main__', level='ERROR'):
            document, message = load_document(path)
        self.assertTrue(document.is_empty())
        self.assertEqual(message, f"ERR: Could not open file: {path}")


class TestMain(unittest.TestCase):

    @patch('quill.__main__.curses.wrapper')
    @patch('sys.argv', ['quill', '--style', 'monokai'])
    def test_style_palette_is_passed_to_editor(self, mock_wrapper):
        main()
        palette = mock_wrapper.call_args.args[2]
        self.assertIsInstance(palette, Palette)
        self.assertEqual(palette.color_for(HighlightType.PRIMARY_KEYWORDS), (102, 217, 239))

    @patch('quill.__main__.curses.wrapper')
    @patch('sys.argv', ['quill', '--style', 'no-such-style'])
    def test_unknown_style_exits(self, mock_wrapper):
        with patch('sys.stderr'), self.assertRaises(SystemExit) as ctx:
            main()
        self.assertEqual(ctx.exception.code, 2)
        mock_wrapper.assert_not_called()


if __name__ == '__main__':
    unittest.main()
