"""
MiniPas Lexer - turns source text into a token list

Hand-written finite-state scanner with a single character of lookahead.
Bad input never stops the scan: the three lexical errors (identifier
overflow, digits glued to letters, a lone ':') are reported, the rest of
the offending line is thrown away, and scanning picks up on the next line.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .tokens import (
    Token, TokenType, SourceLocation, RESERVED_WORDS, SINGLE_CHAR_TOKENS,
    MAX_IDENTIFIER_LENGTH, MAX_INTEGER_VALUE
)
from .errors import ErrorKind, LexicalError

logger = logging.getLogger(__name__)


class Lexer:
    """
    MiniPas lexical analyzer.

    Converts a source string into a list of tokens terminated by exactly
    one EOF token. Lexical errors are collected in ``errors`` and, when a
    sink is supplied, reported to it as they happen.
    """

    def __init__(self, source: str, filename: str = "<unknown>", sink=None,
                 max_identifier_length: int = MAX_IDENTIFIER_LENGTH):
        """
        Initialize the lexer with source code.

        Args:
            source: Complete source text
            filename: Name of source file for diagnostics
            sink: Optional DiagnosticSink receiving lexical errors
            max_identifier_length: Longest legal identifier
        """
        self.source = source
        self.filename = filename
        self.sink = sink
        self.max_identifier_length = max_identifier_length

        self.pos = 0
        self.line = 1
        self.column = 1
        self.lexeme = ""
        self.tokens: List[Token] = []
        self.errors: List[LexicalError] = []

        # Intern caches, valid for a single tokenize() run
        self._word_table: Dict[str, Token] = {}
        self._literal_table: Dict[int, Token] = {}

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source.

        Returns:
            List of tokens, the last one being the only EOF token
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.lexeme = ""
        self.tokens = []
        self.errors = []
        self._word_table = {}
        self._literal_table = {}

        while True:
            self._skip_whitespace()
            token = self._next_token()
            logger.debug("token %s at line %d", token, token.line)
            self.tokens.append(token)
            if token.type == TokenType.EOF:
                break

        return self.tokens

    def _next_token(self) -> Token:
        """Scan one token starting at the current position."""
        self.lexeme = ""
        location = self._location()

        if self._at_end():
            return Token(TokenType.EOF, "", None, location)

        char = self._current()

        if char == '\n':
            self._advance()
            return Token(TokenType.EOL, "\n", None, location)

        if char in SINGLE_CHAR_TOKENS:
            self._advance()
            return Token(SINGLE_CHAR_TOKENS[char], char, None, location)

        if char == '<':
            return self._tokenize_less(location)

        if char == '>':
            return self._tokenize_greater(location)

        if char == ':':
            return self._tokenize_assign(location)

        if self._is_identifier_start(char):
            return self._tokenize_identifier_or_keyword(location)

        if self._is_digit(char):
            return self._tokenize_integer(location)

        # Not part of the language; the parser decides what to make of it
        self._advance()
        return Token(TokenType.ILLEGAL, char, char, location)

    def _tokenize_less(self, location: SourceLocation) -> Token:
        """Tokenize '<', '<=' or '<>'."""
        lookahead = self._peek()
        if lookahead == '=':
            self._advance_by(2)
            return Token(TokenType.LESS_EQUAL, "<=", None, location)
        if lookahead == '>':
            self._advance_by(2)
            return Token(TokenType.NOT_EQUAL, "<>", None, location)
        self._advance()
        return Token(TokenType.LESS_THAN, "<", None, location)

    def _tokenize_greater(self, location: SourceLocation) -> Token:
        """Tokenize '>' or '>='."""
        if self._peek() == '=':
            self._advance_by(2)
            return Token(TokenType.GREATER_EQUAL, ">=", None, location)
        self._advance()
        return Token(TokenType.GREATER_THAN, ">", None, location)

    def _tokenize_assign(self, location: SourceLocation) -> Token:
        """Tokenize ':='; a ':' on its own is a lexical error."""
        if self._peek() == '=':
            self._advance_by(2)
            return Token(TokenType.ASSIGN, ":=", None, location)

        self._advance()
        self._error(ErrorKind.FAIL_MATCHING_SEMICOLON, location, ":")
        self._skip_bad_line()
        return Token(TokenType.ILLEGAL, ":", ":", location)

    def _tokenize_identifier_or_keyword(self, location: SourceLocation) -> Token:
        """Tokenize an identifier or reserved word."""
        while not self._at_end() and self._is_identifier_continue(self._current()):
            if len(self.lexeme) >= self.max_identifier_length:
                surplus = self._current()
                self._error(ErrorKind.OVERFLOW_IDENTIFIER, location, self.lexeme + surplus)
                self._skip_bad_line()
                return Token(TokenType.ILLEGAL, surplus, surplus, location)
            self.lexeme += self._current()
            self._advance()

        token_type = RESERVED_WORDS.get(self.lexeme)
        if token_type is not None:
            return Token(token_type, self.lexeme, None, location)

        return self._word(location)

    def _tokenize_integer(self, location: SourceLocation) -> Token:
        """Tokenize an integer literal."""
        value = 0
        while not self._at_end() and self._is_digit(self._current()):
            value = value * 10 + int(self._current())
            self.lexeme += self._current()
            self._advance()

        # Digits followed directly by a letter, e.g. 123abc
        following = self._current()
        if following.isalpha():
            self._error(ErrorKind.INVALID_NUMBER, location, self.lexeme + following)
            self._skip_bad_line()
            return Token(TokenType.ILLEGAL, following, following, location)

        if value > MAX_INTEGER_VALUE:
            self._error(ErrorKind.INVALID_NUMBER, location, self.lexeme)
            self._skip_bad_line()
            return Token(TokenType.ILLEGAL, self.lexeme[0], self.lexeme[0], location)

        return self._literal(value, location)

    def _word(self, location: SourceLocation) -> Token:
        """Look the identifier up in the word table, interning it on a miss."""
        cached = self._word_table.get(self.lexeme)
        if cached is None:
            cached = Token(TokenType.IDENTIFIER, self.lexeme, self.lexeme, location)
            self._word_table[self.lexeme] = cached
        return Token(TokenType.IDENTIFIER, self.lexeme, cached.value, location)

    def _literal(self, value: int, location: SourceLocation) -> Token:
        """Look the value up in the literal table, interning it on a miss."""
        cached = self._literal_table.get(value)
        if cached is None:
            cached = Token(TokenType.INTEGER_LITERAL, self.lexeme, value, location)
            self._literal_table[value] = cached
        return Token(TokenType.INTEGER_LITERAL, self.lexeme, cached.value, location)

    def _error(self, kind: ErrorKind, location: SourceLocation, lexeme: str):
        """Record a lexical error and forward it to the sink."""
        error = LexicalError(kind, self.line, location.column, lexeme)
        self.errors.append(error)
        logger.debug("lexical error %s at line %d: %r", kind.name, self.line, lexeme)
        if self.sink is not None:
            self.sink.report(self.line, kind)

    def _skip_bad_line(self):
        """Discard everything up to the next newline; the newline itself is kept."""
        while not self._at_end() and self._current() != '\n':
            self._advance()

    def _skip_whitespace(self):
        """Skip whitespace other than newlines."""
        while not self._at_end():
            char = self._current()
            if char == '\n' or not char.isspace():
                break
            self._advance()

    def _is_identifier_start(self, char: str) -> bool:
        return char.isalpha() or char == '_'

    def _is_identifier_continue(self, char: str) -> bool:
        return char.isalnum() or char == '_'

    def _is_digit(self, char: str) -> bool:
        return '0' <= char <= '9'

    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _current(self) -> str:
        """Character under the cursor, '\\0' past the end."""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return '\0'

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return '\0'

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0


def tokenize_string(source: str, filename: str = "<string>",
                    sink=None) -> Tuple[List[Token], List[LexicalError]]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for diagnostics
        sink: Optional DiagnosticSink for lexical errors

    Returns:
        The token list and the lexical errors found while scanning
    """
    lexer = Lexer(source, filename, sink=sink)
    tokens = lexer.tokenize()
    return tokens, lexer.errors


def tokenize_file(filepath: str, sink=None) -> Tuple[List[Token], List[LexicalError]]:
    """
    Convenience function to tokenize a source file.

    Raises:
        OSError: If the file cannot be read
    """
    from ..driver import SourceLoader

    source_file = SourceLoader().load(filepath)
    return tokenize_string(source_file.text, source_file.path, sink=sink)
