"""
Error handling for the MiniPas front end.

Defines the closed set of diagnostic kinds shared by the lexer and the
parser, their human-readable messages, and the records used to carry a
diagnostic from the component that detects it to a DiagnosticSink.
"""

from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass


class ErrorKind(Enum):
    """Every diagnostic the front end can emit."""

    SYNTAX_ERROR = "syntax_error"
    WRONG_RESERVE_YOU_MEAN_FUNCTION = "wrong_reserve_function"
    WRONG_RESERVE_YOU_MEAN_READ = "wrong_reserve_read"
    WRONG_RESERVE_YOU_MEAN_WRITE = "wrong_reserve_write"
    WRONG_ASSIGN_TOKEN = "wrong_assign_token"
    INVALID_TYPE_EXPECTED_INTEGER = "invalid_type"
    INVALID_NUMBER = "invalid_number"
    OVERFLOW_IDENTIFIER = "overflow_identifier"
    FAIL_MATCHING_SEMICOLON = "fail_matching_semicolon"
    MISSING_SEMICOLON = "missing_semicolon"
    MISSING_LEFT_PARENTHESIS = "missing_left_parenthesis"
    MISSING_RIGHT_PARENTHESIS = "missing_right_parenthesis"
    MISSING_IF = "missing_if"
    MISSING_THEN = "missing_then"
    MISSING_ELSE = "missing_else"
    MISSING_MULTIPLY = "missing_multiply"
    SYNTAX_ERROR_EXPECTED_A_BLOCK = "expected_block"
    FAIL_MATCHING = "fail_matching"
    MISSING_END = "missing_end"
    EXPECTED_IDENTIFIER = "expected_identifier"
    FOUND_REPEAT_DECLARATION_IN_THIS_FIELD = "repeat_declaration"

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]

    @property
    def is_lexical(self) -> bool:
        """Check if the kind is raised by the lexer rather than the parser."""
        return self in LEXICAL_ERROR_KINDS


ERROR_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.SYNTAX_ERROR: "syntax error, unknown token",
    ErrorKind.WRONG_RESERVE_YOU_MEAN_FUNCTION: "wrong reserve: you mean 'function'?",
    ErrorKind.WRONG_RESERVE_YOU_MEAN_READ: "wrong reserve: you mean 'read'?",
    ErrorKind.WRONG_RESERVE_YOU_MEAN_WRITE: "wrong reserve: you mean 'write'?",
    ErrorKind.WRONG_ASSIGN_TOKEN: "wrong assign operator: you mean ':='?",
    ErrorKind.INVALID_TYPE_EXPECTED_INTEGER: "invalid type: expected INTEGER",
    ErrorKind.INVALID_NUMBER: "invalid number",
    ErrorKind.OVERFLOW_IDENTIFIER: "identifier length overflow",
    ErrorKind.FAIL_MATCHING_SEMICOLON: "':' must be followed by '='",
    ErrorKind.MISSING_SEMICOLON: "missing a ';' at the end of the statement",
    ErrorKind.MISSING_LEFT_PARENTHESIS: "expected '('",
    ErrorKind.MISSING_RIGHT_PARENTHESIS: "expected ')' to close the parenthesis",
    ErrorKind.MISSING_IF: "expected 'if'",
    ErrorKind.MISSING_THEN: "expected 'then'",
    ErrorKind.MISSING_ELSE: "expected 'else'",
    ErrorKind.MISSING_MULTIPLY: "expected '*'",
    ErrorKind.SYNTAX_ERROR_EXPECTED_A_BLOCK: "syntax error, expected a block",
    ErrorKind.FAIL_MATCHING: "symbol matching error",
    ErrorKind.MISSING_END: "missing END: this block is not closed",
    ErrorKind.EXPECTED_IDENTIFIER: "expected identifier in this field",
    ErrorKind.FOUND_REPEAT_DECLARATION_IN_THIS_FIELD: "this symbol's declaration repeated in this field",
}

LEXICAL_ERROR_KINDS = frozenset({
    ErrorKind.INVALID_NUMBER,
    ErrorKind.OVERFLOW_IDENTIFIER,
    ErrorKind.FAIL_MATCHING_SEMICOLON,
})


@dataclass(frozen=True)
class Diagnostic:
    """A reported diagnostic: what went wrong and on which line."""
    kind: ErrorKind
    line: int
    severity: str = "error"
    filename: Optional[str] = None

    @property
    def message(self) -> str:
        return self.kind.message

    def __str__(self) -> str:
        return f"LINE{self.line}: {self.message}"


@dataclass(frozen=True)
class LexicalError:
    """
    A lexical error recorded by the lexer.

    Lexical errors never abort scanning; the lexer keeps one record per
    error and goes on after skipping the rest of the offending line.
    """
    kind: ErrorKind
    line: int
    column: int
    lexeme: str

    def to_diagnostic(self, filename: Optional[str] = None) -> Diagnostic:
        return Diagnostic(self.kind, self.line, filename=filename)

    def __str__(self) -> str:
        return f"LINE{self.line}: {self.kind.message} ({self.lexeme!r})"


class ErrorRecovery:
    """
    Keyword near-miss detection.

    Used by the parser to turn a misspelled reserved word into a more
    helpful diagnostic than a generic syntax error.
    """

    @staticmethod
    def suggest_keyword_corrections(invalid_word: str, max_distance: int = 2) -> List[str]:
        """Reserved words within ``max_distance`` edits of ``invalid_word``."""
        from .tokens import RESERVED_WORDS

        word = invalid_word.lower()
        suggestions = []
        for keyword in RESERVED_WORDS:
            distance = ErrorRecovery._edit_distance(word, keyword)
            if 0 < distance <= max_distance:
                suggestions.append((distance, keyword))

        return [keyword for _, keyword in sorted(suggestions)]

    @staticmethod
    def is_near_miss(word: str, keyword: str, max_distance: int = 2) -> bool:
        """True if ``word`` is a misspelling (not an exact match) of ``keyword``."""
        distance = ErrorRecovery._edit_distance(word.lower(), keyword)
        return 0 < distance <= max_distance

    @staticmethod
    def _edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery._edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]
