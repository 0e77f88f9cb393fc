"""
Error handling for the MiniPas parser.

Provides the exception used to unwind out of the recursive descent on the
first syntax or declaration error, and the panic-mode recovery strategies
the parser uses to find its next synchronisation point.
"""

from typing import List, Optional, Sequence

from ..lexer.tokens import Token, TokenType
from ..lexer.errors import Diagnostic, ErrorKind


class ParseError(Exception):
    """
    Exception raised when the parser detects an error.

    Carries the diagnostic kind, the line counted by the parser's cursor
    and the token at which the problem was found.
    """

    def __init__(self, kind: ErrorKind, line: int, token: Optional[Token] = None):
        super().__init__(f"LINE{line}: {kind.message}")
        self.kind = kind
        self.line = line
        self.token = token
        self.diagnostic = Diagnostic(kind, line)

    def __str__(self) -> str:
        return str(self.diagnostic)


class RecoveryStrategy:
    """
    Panic-mode recovery.

    Given the raw token list and the index where an error was detected,
    ``synchronize`` returns the index from which analysis could resume.
    """

    name = "base"

    def synchronize(self, tokens: Sequence[Token], position: int) -> int:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SkipToLineEnd(RecoveryStrategy):
    """Discard the rest of the current line."""

    name = "line"

    def synchronize(self, tokens: Sequence[Token], position: int) -> int:
        while position < len(tokens):
            token_type = tokens[position].type
            if token_type == TokenType.EOF:
                return position
            if token_type == TokenType.EOL:
                return position + 1
            position += 1
        return position


class SkipToStatementBoundary(RecoveryStrategy):
    """Discard input up to and including the next ';'."""

    name = "statement"

    def synchronize(self, tokens: Sequence[Token], position: int) -> int:
        while position < len(tokens):
            token_type = tokens[position].type
            if token_type == TokenType.EOF:
                return position
            if token_type == TokenType.SEMICOLON:
                return position + 1
            position += 1
        return position


RECOVERY_STRATEGIES = {
    SkipToLineEnd.name: SkipToLineEnd,
    SkipToStatementBoundary.name: SkipToStatementBoundary,
}


def get_recovery_strategy(name: str) -> RecoveryStrategy:
    """Look a recovery strategy up by its command-line name."""
    try:
        return RECOVERY_STRATEGIES[name]()
    except KeyError:
        choices = ", ".join(sorted(RECOVERY_STRATEGIES))
        raise ValueError(f"unknown recovery strategy {name!r} (choose from {choices})") from None


def recovery_names() -> List[str]:
    return sorted(RECOVERY_STRATEGIES)
