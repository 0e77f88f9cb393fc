"""
MiniPas Lexer Package

Implements the finite-state lexical scanner for the MiniPas teaching
language.

Key Features:
- One-character lookahead for the multi-character operators (:= <= <> >=)
- Reserved-word lookup through a static table
- Per-run interning of identifiers and integer literals
- Line-skip error recovery with line-tagged diagnostics
"""

from .tokens import Token, TokenType, SourceLocation, MAX_IDENTIFIER_LENGTH
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import ErrorKind, Diagnostic, LexicalError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "MAX_IDENTIFIER_LENGTH",
    "tokenize_string",
    "tokenize_file",
    "ErrorKind",
    "Diagnostic",
    "LexicalError",
]
