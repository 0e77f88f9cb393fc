"""
Diagnostic sinks and the token dump.

The lexer and the parser only know the DiagnosticSink interface; whether a
diagnostic ends up on the console, in a ``.err`` file or in memory is
decided by whoever builds the pipeline.
"""

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union

from .lexer.errors import Diagnostic, ErrorKind
from .lexer.tokens import Token

logger = logging.getLogger(__name__)

# Width of the right-aligned symbol column in the token dump
SYMBOL_FIELD_WIDTH = 16


def format_diagnostic(line: int, kind: ErrorKind) -> str:
    """Render a diagnostic the way every sink writes it."""
    return str(Diagnostic(kind, line))


class DiagnosticSink(ABC):
    """Receives diagnostics from the lexer and the parser."""

    def __init__(self):
        self.count = 0

    def report(self, line: int, kind: ErrorKind) -> None:
        self.count += 1
        self._emit(line, kind)

    @abstractmethod
    def _emit(self, line: int, kind: ErrorKind) -> None:
        raise NotImplementedError

    @property
    def has_reports(self) -> bool:
        return self.count > 0


class ConsoleSink(DiagnosticSink):
    """Prints diagnostics; nothing is persisted."""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream

    def _emit(self, line: int, kind: ErrorKind) -> None:
        print(format_diagnostic(line, kind), file=self.stream or sys.stdout)


class FileSink(DiagnosticSink):
    """
    Appends diagnostics to an error file, one line each.

    The file is created by the first report, so a clean run leaves none.
    With ``reset=True`` a file left by an earlier run is removed when the
    sink is created, so it holds only the diagnostics of the current run.
    """

    def __init__(self, path: Union[str, Path], reset: bool = False):
        super().__init__()
        self.path = Path(path)
        if reset and self.path.exists():
            self.path.unlink()

    def _emit(self, line: int, kind: ErrorKind) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(format_diagnostic(line, kind) + "\n")


class MemorySink(DiagnosticSink):
    """Keeps diagnostics in a list."""

    def __init__(self):
        super().__init__()
        self.diagnostics: List[Diagnostic] = []

    def _emit(self, line: int, kind: ErrorKind) -> None:
        self.diagnostics.append(Diagnostic(kind, line))

    @property
    def kinds(self) -> List[ErrorKind]:
        return [diagnostic.kind for diagnostic in self.diagnostics]

    def lines(self) -> List[str]:
        return [str(diagnostic) for diagnostic in self.diagnostics]


def format_token_line(token: Token) -> str:
    """One token dump line: symbol right-aligned, then the two-digit label."""
    return f"{token.symbol:>{SYMBOL_FIELD_WIDTH}} {token.label:02d}"


def render_token_dump(tokens: Iterable[Token]) -> str:
    """Render the full ``.dyd`` contents for a token list."""
    return "".join(format_token_line(token) + "\n" for token in tokens)


def write_token_dump(tokens: Iterable[Token], path: Union[str, Path]) -> Path:
    """Write the token dump file, replacing any previous one."""
    path = Path(path)
    path.write_text(render_token_dump(tokens), encoding="utf-8")
    logger.debug("wrote token dump %s", path)
    return path
