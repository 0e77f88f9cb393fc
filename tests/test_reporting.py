"""
Test suite for diagnostic sinks and the token dump.
"""

import io
import os
import sys
import tempfile
import unittest
from pathlib import Path

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from minipas.lexer import tokenize_string, Token, TokenType, ErrorKind
from minipas.reporting import (
    ConsoleSink, FileSink, MemorySink, format_diagnostic, format_token_line,
    render_token_dump, write_token_dump,
)


class TestTokenDump(unittest.TestCase):
    """The .dyd line format."""

    def test_keyword_line(self):
        """Symbol right-aligned in 16 columns, then a two-digit label."""
        line = format_token_line(Token(TokenType.BEGIN, "begin"))

        self.assertEqual(line, " " * 11 + "begin 01")
        self.assertEqual(len(line), 19)

    def test_identifier_and_literal_lines(self):
        """Identifiers and literals print their value."""
        tokens, _ = tokenize_string("count 42")

        self.assertEqual(format_token_line(tokens[0]), " " * 11 + "count 10")
        self.assertEqual(format_token_line(tokens[1]), " " * 14 + "42 11")

    def test_line_end_markers(self):
        """EOL and EOF have fixed symbols and the last two labels."""
        self.assertEqual(format_token_line(Token(TokenType.EOL, "\n")), " " * 12 + "\\EOL 24")
        self.assertEqual(format_token_line(Token(TokenType.EOF, "")), " " * 12 + "\\EOF 25")

    def test_render_whole_program(self):
        """One line per token, EOF included."""
        tokens, _ = tokenize_string("begin\nend")
        dump = render_token_dump(tokens)

        self.assertEqual(dump.splitlines(), [
            " " * 11 + "begin 01",
            " " * 12 + "\\EOL 24",
            " " * 13 + "end 02",
            " " * 12 + "\\EOF 25",
        ])
        self.assertTrue(dump.endswith("\n"))

    def test_write_replaces_previous_dump(self):
        """Writing a dump overwrites the file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "prog.dyd"
            path.write_text("stale\n", encoding="utf-8")

            tokens, _ = tokenize_string("end")
            written = write_token_dump(tokens, path)

            self.assertEqual(written, path)
            self.assertEqual(path.read_text(encoding="utf-8"), render_token_dump(tokens))


class TestSinks(unittest.TestCase):
    """Where diagnostics go."""

    def test_format_diagnostic(self):
        self.assertEqual(format_diagnostic(7, ErrorKind.MISSING_END),
                         "LINE7: missing END: this block is not closed")

    def test_console_sink(self):
        """The console sink prints one line per diagnostic."""
        stream = io.StringIO()
        sink = ConsoleSink(stream)
        sink.report(3, ErrorKind.MISSING_THEN)

        self.assertEqual(stream.getvalue(), "LINE3: expected 'then'\n")
        self.assertEqual(sink.count, 1)
        self.assertTrue(sink.has_reports)

    def test_memory_sink(self):
        sink = MemorySink()
        self.assertFalse(sink.has_reports)

        sink.report(1, ErrorKind.INVALID_NUMBER)
        sink.report(2, ErrorKind.MISSING_SEMICOLON)

        self.assertEqual(sink.kinds, [ErrorKind.INVALID_NUMBER, ErrorKind.MISSING_SEMICOLON])
        self.assertEqual(sink.lines(), [
            "LINE1: invalid number",
            "LINE2: missing a ';' at the end of the statement",
        ])

    def test_file_sink_appends(self):
        """Without reset, earlier contents are kept."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "prog.err"
            path.write_text("LINE9: old\n", encoding="utf-8")

            sink = FileSink(path)
            sink.report(1, ErrorKind.MISSING_END)

            self.assertEqual(path.read_text(encoding="utf-8").splitlines(), [
                "LINE9: old",
                "LINE1: missing END: this block is not closed",
            ])

    def test_file_sink_reset(self):
        """With reset, a stale file is removed and recreated by the first report."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "prog.err"
            path.write_text("LINE9: old\n", encoding="utf-8")

            sink = FileSink(path, reset=True)
            self.assertFalse(path.exists())

            sink.report(2, ErrorKind.EXPECTED_IDENTIFIER)
            self.assertEqual(path.read_text(encoding="utf-8"),
                             "LINE2: expected identifier in this field\n")

    def test_file_sink_is_created_lazily(self):
        """No report, no file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "prog.err"
            sink = FileSink(path, reset=True)

            self.assertFalse(path.exists())
            self.assertFalse(sink.has_reports)


if __name__ == '__main__':
    unittest.main()
