"""
Compilation driver: load a source file, lex it, parse it, write outputs.

The lexer runs over the whole source first; the parser then works on the
finished token list.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .lexer.lexer import Lexer
from .lexer.tokens import Token
from .lexer.errors import LexicalError
from .analyzer.symbol_table import SymbolEnvironment
from .parser.parser import Parser, AnalysisResult
from .parser.errors import get_recovery_strategy
from .reporting import ConsoleSink, FileSink, DiagnosticSink, write_token_dump

logger = logging.getLogger(__name__)

MODES = ("console", "file")

STATUS_COMPILED = "compiled"
STATUS_SYNTAX_ERROR = "syntax error"

IN_MEMORY_SOURCE = "<string>"


@dataclass(frozen=True)
class SourceFile:
    """A loaded source: ``name`` is the path without its suffix."""
    name: str
    path: str
    text: str


class SourceLoader:
    """Reads a whole source file into memory."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def load(self, path: Union[str, Path]) -> SourceFile:
        path = Path(path)
        text = path.read_text(encoding=self.encoding)
        logger.debug("loaded %s (%d characters)", path, len(text))
        return SourceFile(name=str(path.with_suffix("")), path=str(path), text=text)


@dataclass
class CompilerOptions:
    """Settings for one compilation run."""
    mode: str = "console"               # "console" or "file"
    dump_tokens: bool = True            # write <name>.dyd
    recovery: str = "line"              # "line" or "statement"
    output_dir: Optional[str] = None    # defaults to the source's directory

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"unknown mode {self.mode!r} (choose from {', '.join(MODES)})")
        # Fail early on a bad strategy name
        get_recovery_strategy(self.recovery)

    def output_path(self, source_name: str, suffix: str) -> Path:
        base = Path(source_name)
        if self.output_dir is not None:
            base = Path(self.output_dir) / base.name
        return base.with_name(base.name + suffix)


@dataclass
class CompilationResult:
    """Everything one run produced."""
    tokens: List[Token]
    lexical_errors: List[LexicalError]
    analysis: AnalysisResult
    dump_path: Optional[Path] = None
    error_path: Optional[Path] = None

    @property
    def succeeded(self) -> bool:
        return not self.lexical_errors and self.analysis.success

    @property
    def status(self) -> str:
        return STATUS_COMPILED if self.succeeded else STATUS_SYNTAX_ERROR


def _output_name(filename: str, options: CompilerOptions) -> Optional[str]:
    """Base name for output files, None when there is nowhere to put them."""
    if filename != IN_MEMORY_SOURCE:
        return str(Path(filename).with_suffix(""))
    if options.output_dir is not None:
        return "program"
    return None


def _make_sink(options: CompilerOptions, name: Optional[str]) -> DiagnosticSink:
    if options.mode == "file" and name is not None:
        return FileSink(options.output_path(name, ".err"), reset=True)
    return ConsoleSink()


def compile_source(source: str, options: Optional[CompilerOptions] = None,
                   filename: str = IN_MEMORY_SOURCE, sink: Optional[DiagnosticSink] = None,
                   env: Optional[SymbolEnvironment] = None) -> CompilationResult:
    """
    Run the lexer and the parser over ``source``.

    Output files are named after ``filename`` without its suffix. A source
    with no filename only gets output files when ``options.output_dir`` is
    set (as ``program.dyd`` / ``program.err``); otherwise diagnostics go to
    the console and no dump is written.
    """
    options = options or CompilerOptions()
    name = _output_name(filename, options)
    if sink is None:
        sink = _make_sink(options, name)

    lexer = Lexer(source, filename, sink=sink)
    tokens = lexer.tokenize()
    logger.info("%s: %d tokens, %d lexical errors", filename, len(tokens), len(lexer.errors))

    dump_path = None
    if options.dump_tokens and name is not None:
        dump_path = write_token_dump(tokens, options.output_path(name, ".dyd"))

    parser = Parser(tokens, env=env, sink=sink,
                    recovery=get_recovery_strategy(options.recovery), filename=filename)
    analysis = parser.analyse()

    result = CompilationResult(
        tokens=tokens,
        lexical_errors=list(lexer.errors),
        analysis=analysis,
        dump_path=dump_path,
        error_path=sink.path if isinstance(sink, FileSink) and sink.has_reports else None,
    )
    logger.info("%s: %s", filename, result.status)
    return result


def compile_file(path: Union[str, Path], options: Optional[CompilerOptions] = None,
                 loader: Optional[SourceLoader] = None) -> CompilationResult:
    """
    Load ``path`` and compile it.

    Raises:
        OSError: If the source cannot be read
        UnicodeDecodeError: If the source is not valid in the loader's encoding
    """
    source_file = (loader or SourceLoader()).load(path)
    return compile_source(source_file.text, options, filename=source_file.path)
