"""
Test suite for the MiniPas lexer.

Tests cover:
- Token kinds for keywords, operators and punctuation
- Identifier and integer literal scanning
- The three lexical errors and line-skip recovery
- Line tracking and determinism
"""

import unittest
import sys
import os
import tempfile

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from minipas.lexer.lexer import Lexer, tokenize_string, tokenize_file
from minipas.lexer.tokens import Token, TokenType, MAX_IDENTIFIER_LENGTH
from minipas.lexer.errors import ErrorKind, ErrorRecovery
from minipas.reporting import MemorySink, render_token_dump


def types_of(tokens):
    return [token.type for token in tokens]


class TestLexerTokens(unittest.TestCase):
    """Token recognition."""

    def _tokenize(self, source: str):
        tokens, errors = tokenize_string(source)
        self.assertEqual(errors, [], f"Unexpected lexical errors: {errors}")
        return tokens

    def test_simple_block(self):
        """A minimal program lexes to the expected kinds."""
        tokens = self._tokenize("begin integer x ; end")

        self.assertEqual(types_of(tokens), [
            TokenType.BEGIN, TokenType.INTEGER, TokenType.IDENTIFIER,
            TokenType.SEMICOLON, TokenType.END, TokenType.EOF,
        ])
        self.assertEqual(tokens[2], Token(TokenType.IDENTIFIER, "x", "x"))

    def test_reserved_words(self):
        """Every reserved word maps to its own token type."""
        tokens = self._tokenize("begin end integer function if then else read write")

        self.assertEqual(types_of(tokens), [
            TokenType.BEGIN, TokenType.END, TokenType.INTEGER, TokenType.FUNCTION,
            TokenType.IF, TokenType.THEN, TokenType.ELSE, TokenType.READ,
            TokenType.WRITE, TokenType.EOF,
        ])

    def test_reserved_words_are_case_sensitive(self):
        """Capitalised keywords are plain identifiers."""
        tokens = self._tokenize("Begin END")

        self.assertEqual(types_of(tokens), [
            TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.EOF,
        ])

    def test_operators_and_punctuation(self):
        """Single and two-character operators are recognised."""
        tokens = self._tokenize("<= <> < >= > := = - * ( ) ;")

        self.assertEqual(types_of(tokens), [
            TokenType.LESS_EQUAL, TokenType.NOT_EQUAL, TokenType.LESS_THAN,
            TokenType.GREATER_EQUAL, TokenType.GREATER_THAN, TokenType.ASSIGN,
            TokenType.EQUAL, TokenType.MINUS, TokenType.MULTIPLY,
            TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.SEMICOLON,
            TokenType.EOF,
        ])

    def test_operators_without_spaces(self):
        """Longest match applies when operators touch their operands."""
        tokens = self._tokenize("x:=a<>b>=c<d")

        self.assertEqual(types_of(tokens), [
            TokenType.IDENTIFIER, TokenType.ASSIGN, TokenType.IDENTIFIER,
            TokenType.NOT_EQUAL, TokenType.IDENTIFIER, TokenType.GREATER_EQUAL,
            TokenType.IDENTIFIER, TokenType.LESS_THAN, TokenType.IDENTIFIER,
            TokenType.EOF,
        ])

    def test_integer_literal_value(self):
        """Integer literals carry their numeric value."""
        tokens = self._tokenize("12345")

        self.assertEqual(tokens[0].type, TokenType.INTEGER_LITERAL)
        self.assertEqual(tokens[0].value, 12345)

    def test_number_then_identifier_with_separator(self):
        """'123 abc' is a literal followed by an identifier."""
        tokens = self._tokenize("123 abc")

        self.assertEqual(tokens, [
            Token(TokenType.INTEGER_LITERAL, "123", 123),
            Token(TokenType.IDENTIFIER, "abc", "abc"),
            Token(TokenType.EOF, ""),
        ])

    def test_number_followed_by_underscore(self):
        """An underscore is not a letter, so '123_' splits cleanly."""
        tokens = self._tokenize("123_")

        self.assertEqual(types_of(tokens), [
            TokenType.INTEGER_LITERAL, TokenType.IDENTIFIER, TokenType.EOF,
        ])
        self.assertEqual(tokens[1].value, "_")

    def test_identifier_characters(self):
        """Identifiers start with a letter or underscore and may contain digits."""
        tokens = self._tokenize("_tmp1 a_b2")

        self.assertEqual([token.value for token in tokens[:2]], ["_tmp1", "a_b2"])

    def test_identifier_at_maximum_length(self):
        """An identifier of exactly the maximum length is legal."""
        name = "a" * MAX_IDENTIFIER_LENGTH
        tokens = self._tokenize(name)

        self.assertEqual(tokens[0], Token(TokenType.IDENTIFIER, name, name))

    def test_illegal_character_is_not_an_error(self):
        """Characters outside the language become ILLEGAL tokens silently."""
        tokens = self._tokenize("a , b")

        self.assertEqual(types_of(tokens), [
            TokenType.IDENTIFIER, TokenType.ILLEGAL, TokenType.IDENTIFIER, TokenType.EOF,
        ])
        self.assertEqual(tokens[1].value, ",")

    def test_newlines_become_eol_tokens(self):
        """Each newline yields an EOL token; other whitespace is skipped."""
        tokens = self._tokenize("x\r\n\ty\n")

        self.assertEqual(types_of(tokens), [
            TokenType.IDENTIFIER, TokenType.EOL, TokenType.IDENTIFIER,
            TokenType.EOL, TokenType.EOF,
        ])

    def test_source_locations(self):
        """Tokens remember the line and column they start at."""
        tokens = self._tokenize("begin\n  x")

        identifier = tokens[2]
        self.assertEqual(identifier.location.line, 2)
        self.assertEqual(identifier.location.column, 3)
        self.assertEqual(identifier.line, 2)

    def test_token_equality_ignores_location(self):
        """Two identifiers with the same name are equal token values."""
        tokens = self._tokenize("x\nx")

        self.assertEqual(tokens[0], tokens[2])
        self.assertNotEqual(tokens[0].location, tokens[2].location)
        self.assertEqual(len({tokens[0], tokens[2]}), 1)


class TestLexerEndOfFile(unittest.TestCase):
    """The EOF token is always present exactly once, at the end."""

    SOURCES = [
        "",
        "   ",
        "\n\n",
        "begin integer x ; end",
        "123abc",
        ":",
        "abcdefghijklmnopqrstuvwxyz",
        "x := 1 + 2 @ 3",
    ]

    def test_single_trailing_eof(self):
        """Exactly one EOF, always the last token."""
        for source in self.SOURCES:
            with self.subTest(source=source):
                tokens, _ = tokenize_string(source)
                eofs = [token for token in tokens if token.type == TokenType.EOF]
                self.assertEqual(len(eofs), 1)
                self.assertEqual(tokens[-1].type, TokenType.EOF)


class TestLexerErrors(unittest.TestCase):
    """Lexical errors and line-skip recovery."""

    def test_identifier_overflow(self):
        """An identifier longer than the maximum is reported and its line skipped."""
        tokens, errors = tokenize_string("abcdefghijklmnopq x\nyy")

        self.assertEqual([error.kind for error in errors], [ErrorKind.OVERFLOW_IDENTIFIER])
        self.assertEqual(errors[0].line, 1)
        self.assertEqual(types_of(tokens), [
            TokenType.ILLEGAL, TokenType.EOL, TokenType.IDENTIFIER, TokenType.EOF,
        ])
        self.assertEqual(tokens[0].value, "q")
        self.assertEqual(tokens[2].value, "yy")

    def test_invalid_number(self):
        """Digits glued to letters are an invalid number."""
        tokens, errors = tokenize_string("123abc")

        self.assertEqual([error.kind for error in errors], [ErrorKind.INVALID_NUMBER])
        self.assertEqual(types_of(tokens), [TokenType.ILLEGAL, TokenType.EOF])

    def test_invalid_number_recovers_on_next_line(self):
        """Scanning resumes after the newline following the bad literal."""
        tokens, errors = tokenize_string("x := 12ab ; y\nread")

        self.assertEqual(len(errors), 1)
        self.assertEqual(types_of(tokens), [
            TokenType.IDENTIFIER, TokenType.ASSIGN, TokenType.ILLEGAL,
            TokenType.EOL, TokenType.READ, TokenType.EOF,
        ])

    def test_integer_overflow(self):
        """Literals beyond the 64-bit range are invalid numbers."""
        tokens, errors = tokenize_string("99999999999999999999")

        self.assertEqual([error.kind for error in errors], [ErrorKind.INVALID_NUMBER])
        self.assertEqual(tokens[0].type, TokenType.ILLEGAL)

    def test_largest_integer_is_accepted(self):
        """2**63 - 1 still fits."""
        tokens, errors = tokenize_string(str(2 ** 63 - 1))

        self.assertEqual(errors, [])
        self.assertEqual(tokens[0].value, 2 ** 63 - 1)

    def test_lone_colon(self):
        """A ':' without '=' is reported and the rest of the line dropped."""
        tokens, errors = tokenize_string(":x := 1\nread")

        self.assertEqual([error.kind for error in errors], [ErrorKind.FAIL_MATCHING_SEMICOLON])
        self.assertEqual(types_of(tokens), [
            TokenType.ILLEGAL, TokenType.EOL, TokenType.READ, TokenType.EOF,
        ])
        self.assertEqual(tokens[0].value, ":")

    def test_errors_reach_the_sink_with_their_line(self):
        """Lexical errors are reported to the sink as they happen."""
        sink = MemorySink()
        lexer = Lexer("x\n12ab\ny\n:", sink=sink)
        lexer.tokenize()

        self.assertEqual(sink.kinds, [ErrorKind.INVALID_NUMBER, ErrorKind.FAIL_MATCHING_SEMICOLON])
        self.assertEqual([diagnostic.line for diagnostic in sink.diagnostics], [2, 4])
        self.assertTrue(lexer.has_errors())

    def test_scanning_continues_after_errors(self):
        """Several bad lines each get their own error."""
        _, errors = tokenize_string("1a\n2b\n3c")

        self.assertEqual([error.line for error in errors], [1, 2, 3])


class TestErrorHelpers(unittest.TestCase):
    """Error records and keyword suggestions."""

    def test_lexical_kinds(self):
        self.assertTrue(ErrorKind.INVALID_NUMBER.is_lexical)
        self.assertTrue(ErrorKind.OVERFLOW_IDENTIFIER.is_lexical)
        self.assertFalse(ErrorKind.MISSING_END.is_lexical)

    def test_lexical_error_to_diagnostic(self):
        _, errors = tokenize_string("x\n7up")
        diagnostic = errors[0].to_diagnostic("prog.pas")

        self.assertEqual(diagnostic.line, 2)
        self.assertEqual(diagnostic.filename, "prog.pas")
        self.assertEqual(str(diagnostic), "LINE2: invalid number")

    def test_keyword_suggestions(self):
        """Closest reserved words first, exact matches excluded."""
        self.assertEqual(ErrorRecovery.suggest_keyword_corrections("wirte"), ["write"])
        self.assertIn("function", ErrorRecovery.suggest_keyword_corrections("fuction"))
        self.assertEqual(ErrorRecovery.suggest_keyword_corrections("begin"), [])
        self.assertEqual(ErrorRecovery.suggest_keyword_corrections("counter"), [])

    def test_near_miss(self):
        self.assertTrue(ErrorRecovery.is_near_miss("fucntion", "function"))
        self.assertFalse(ErrorRecovery.is_near_miss("function", "function"))
        self.assertFalse(ErrorRecovery.is_near_miss("factor", "function"))

    def test_token_properties(self):
        tokens, _ = tokenize_string("if x <= 1")

        self.assertTrue(tokens[0].is_keyword)
        self.assertFalse(tokens[1].is_keyword)
        self.assertTrue(tokens[1].is_identifier)
        self.assertTrue(tokens[2].is_relational)
        self.assertEqual(tokens[2].label, 14)

    def test_tokenize_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "prog.pas")
            with open(path, "w", encoding="utf-8") as f:
                f.write("begin end\n")

            tokens, errors = tokenize_file(path)

        self.assertEqual(errors, [])
        self.assertEqual(types_of(tokens), [
            TokenType.BEGIN, TokenType.END, TokenType.EOL, TokenType.EOF,
        ])


class TestLexerDeterminism(unittest.TestCase):
    """Re-running the lexer gives identical output."""

    SOURCE = "begin\n  integer k;\n  k := 12 * (k - 3);\n  write(k);\n  99x\nend\n"

    def test_repeated_runs_are_identical(self):
        """Same lexer, two runs: same tokens and dump."""
        lexer = Lexer(self.SOURCE)
        first = list(lexer.tokenize())
        second = list(lexer.tokenize())

        self.assertEqual(first, second)
        self.assertEqual(render_token_dump(first), render_token_dump(second))

    def test_separate_lexers_agree(self):
        """Interning caches are per run and never change the result."""
        first, first_errors = tokenize_string(self.SOURCE)
        second, second_errors = tokenize_string(self.SOURCE)

        self.assertEqual(first, second)
        self.assertEqual(first_errors, second_errors)
        self.assertEqual(render_token_dump(first), render_token_dump(second))


if __name__ == '__main__':
    unittest.main()
