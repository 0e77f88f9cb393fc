"""
MiniPas Parser Package

Implements the recursive descent parser for the MiniPas language. The
parser validates syntax and declarations against a scope stack; it does
not build a syntax tree.

Key Features:
- One method per grammar non-terminal
- FOLLOW-set driven repetition for the declaration and statement tables
- Scoped redeclaration checks with shadowing across function bodies
- Swappable panic-mode recovery strategies
"""

from .parser import Parser, AnalysisResult, parse_string
from .errors import (
    ParseError, RecoveryStrategy, SkipToLineEnd, SkipToStatementBoundary,
    get_recovery_strategy,
)

__all__ = [
    # Core parser
    "Parser",
    "AnalysisResult",
    "parse_string",

    # Error handling
    "ParseError",
    "RecoveryStrategy",
    "SkipToLineEnd",
    "SkipToStatementBoundary",
    "get_recovery_strategy",
]
