"""
Token definitions for the MiniPas lexer.

This module defines every token type of the MiniPas teaching language:
- Reserved words (begin, end, integer, function, if, then, else, read, write)
- Operators and punctuation (- * := = <> < <= > >= ( ) ;)
- Identifiers and integer literals
- Structural markers (end of line, end of file) and illegal characters

It also carries the fixed numeric labels used by the token dump file.
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Any, Dict


# Identifiers longer than this are a lexical error
MAX_IDENTIFIER_LENGTH = 16

# Integer literals are accumulated in a signed 64-bit value
MAX_INTEGER_VALUE = 2 ** 63 - 1


class TokenType(Enum):
    """
    Enumeration of all token types in MiniPas.

    Organized by category, mirroring the dump labels.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOL = auto()                    # End of line (drives line counting only)
    EOF = auto()                    # End of file
    ILLEGAL = auto()                # Unrecognized character

    # ========================================================================
    # Identifiers and Literals
    # ========================================================================
    IDENTIFIER = auto()             # x, count, _tmp
    INTEGER_LITERAL = auto()        # 42

    # ========================================================================
    # Keywords
    # ========================================================================
    BEGIN = auto()                  # begin
    END = auto()                    # end
    INTEGER = auto()                # integer
    FUNCTION = auto()               # function
    IF = auto()                     # if
    THEN = auto()                   # then
    ELSE = auto()                   # else
    READ = auto()                   # read
    WRITE = auto()                  # write

    # ========================================================================
    # Operators
    # ========================================================================
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    ASSIGN = auto()                 # :=

    # Relational operators
    EQUAL = auto()                  # =
    NOT_EQUAL = auto()              # <>
    LESS_THAN = auto()              # <
    LESS_EQUAL = auto()             # <=
    GREATER_THAN = auto()           # >
    GREATER_EQUAL = auto()          # >=

    # ========================================================================
    # Punctuation
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    SEMICOLON = auto()              # ;


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for diagnostics and debugging output.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token of a MiniPas program.

    Tokens compare structurally: only the type and the semantic value
    (identifier name, literal value, illegal character) take part in
    equality and hashing. Two identifiers named ``x`` are equal tokens no
    matter where they were scanned.
    """
    type: TokenType
    lexeme: str = field(compare=False)          # Raw text from source
    value: Any = None                           # Name, int value or offending char
    location: SourceLocation = field(default=None, compare=False)

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def line(self) -> int:
        """Source line the token starts on (0 when unknown)."""
        return self.location.line if self.location else 0

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a reserved word."""
        return self.type in RESERVED_TYPES

    @property
    def is_relational(self) -> bool:
        """Check if this token is a relational operator."""
        return self.type in RELATIONAL_OPERATORS

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDENTIFIER

    @property
    def label(self) -> int:
        """Numeric label written to the token dump (0 for unlisted kinds)."""
        return TOKEN_LABELS.get(self.type, 0)

    @property
    def symbol(self) -> str:
        """Text written to the token dump for this token."""
        if self.type in (TokenType.IDENTIFIER, TokenType.ILLEGAL):
            return str(self.value)
        if self.type == TokenType.INTEGER_LITERAL:
            return str(self.value)
        return TOKEN_SYMBOLS[self.type]


# Lookup tables, built once at import time

RESERVED_WORDS: Dict[str, TokenType] = {
    "begin": TokenType.BEGIN,
    "end": TokenType.END,
    "integer": TokenType.INTEGER,
    "function": TokenType.FUNCTION,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "read": TokenType.READ,
    "write": TokenType.WRITE,
}

RESERVED_TYPES = frozenset(RESERVED_WORDS.values())

# Operators and punctuation that are always a single character
SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    ";": TokenType.SEMICOLON,
    "=": TokenType.EQUAL,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
}

RELATIONAL_OPERATORS = frozenset({
    TokenType.EQUAL,
    TokenType.NOT_EQUAL,
    TokenType.LESS_THAN,
    TokenType.LESS_EQUAL,
    TokenType.GREATER_THAN,
    TokenType.GREATER_EQUAL,
})

TOKEN_SYMBOLS: Dict[TokenType, str] = {
    TokenType.BEGIN: "begin",
    TokenType.END: "end",
    TokenType.INTEGER: "integer",
    TokenType.IF: "if",
    TokenType.THEN: "then",
    TokenType.ELSE: "else",
    TokenType.FUNCTION: "function",
    TokenType.READ: "read",
    TokenType.WRITE: "write",
    TokenType.EQUAL: "=",
    TokenType.NOT_EQUAL: "<>",
    TokenType.LESS_EQUAL: "<=",
    TokenType.LESS_THAN: "<",
    TokenType.GREATER_EQUAL: ">=",
    TokenType.GREATER_THAN: ">",
    TokenType.MINUS: "-",
    TokenType.MULTIPLY: "*",
    TokenType.ASSIGN: ":=",
    TokenType.LEFT_PAREN: "(",
    TokenType.RIGHT_PAREN: ")",
    TokenType.SEMICOLON: ";",
    TokenType.EOL: "\\EOL",
    TokenType.EOF: "\\EOF",
}

# Fixed labels of the .dyd token dump
TOKEN_LABELS: Dict[TokenType, int] = {
    TokenType.BEGIN: 1,
    TokenType.END: 2,
    TokenType.INTEGER: 3,
    TokenType.IF: 4,
    TokenType.THEN: 5,
    TokenType.ELSE: 6,
    TokenType.FUNCTION: 7,
    TokenType.READ: 8,
    TokenType.WRITE: 9,
    TokenType.IDENTIFIER: 10,
    TokenType.INTEGER_LITERAL: 11,
    TokenType.EQUAL: 12,
    TokenType.NOT_EQUAL: 13,
    TokenType.LESS_EQUAL: 14,
    TokenType.LESS_THAN: 15,
    TokenType.GREATER_EQUAL: 16,
    TokenType.GREATER_THAN: 17,
    TokenType.MINUS: 18,
    TokenType.MULTIPLY: 19,
    TokenType.ASSIGN: 20,
    TokenType.LEFT_PAREN: 21,
    TokenType.RIGHT_PAREN: 22,
    TokenType.SEMICOLON: 23,
    TokenType.EOL: 24,
    TokenType.EOF: 25,
}
