"""
MiniPas Compiler Package

Front end for MiniPas, a small Pascal-like teaching language: a
finite-state lexer and a scope-aware recursive descent parser that
validate a program and report line-tagged diagnostics.

Architecture:
    minipas/
    ├── lexer/           # Tokenization and lexical errors
    ├── analyzer/        # Scope stack and symbol tables
    ├── parser/          # Syntax analysis and declaration checks
    ├── reporting.py     # Diagnostic sinks and the token dump
    ├── driver.py        # Source loading and the lex-then-parse pipeline
    └── cli.py           # Command-line entry point

License: MIT
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer
from .parser import Parser
from .analyzer import SymbolEnvironment
from .driver import compile_source, compile_file, CompilerOptions

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "SymbolEnvironment",

    # Pipeline
    "compile_source",
    "compile_file",
    "CompilerOptions",

    # Version info
    "__version__",
    "__license__",
]
