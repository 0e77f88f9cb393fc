#!/usr/bin/env python3
"""
MiniPas Compiler Front End
==========================

Lexes and parses a MiniPas source file, writes the token dump and reports
the first error.

Usage:
    minipas <source> [options]

Options:
    --mode console|file         Print diagnostics, or append them to <name>.err
    --no-dump                   Do not write the <name>.dyd token dump
    --recovery line|statement   Panic-mode recovery strategy
    --output-dir DIR            Write output files to DIR
    -v, --verbose               Debug logging
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .driver import CompilerOptions, MODES, compile_file
from .parser.errors import recovery_names

EXIT_OK = 0
EXIT_SYNTAX_ERROR = 1
EXIT_IO_ERROR = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minipas",
        description="MiniPas lexer and parser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    minipas test/fact.pas                   # Diagnostics on the console
    minipas test/fact.pas --mode file       # Diagnostics in test/fact.err
    minipas test/fact.pas --no-dump -v      # No token dump, debug logging
        """
    )

    parser.add_argument('source',
                        help='MiniPas source file')
    parser.add_argument('--mode', choices=MODES, default='console',
                        help='Where diagnostics go (default: console)')
    parser.add_argument('--no-dump', action='store_true',
                        help='Do not write the token dump file')
    parser.add_argument('--recovery', choices=recovery_names(), default='line',
                        help='Panic-mode recovery strategy (default: line)')
    parser.add_argument('--output-dir', default=None,
                        help='Directory for the .dyd and .err files')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line."""
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = CompilerOptions(
        mode=args.mode,
        dump_tokens=not args.no_dump,
        recovery=args.recovery,
        output_dir=args.output_dir,
    )

    try:
        result = compile_file(args.source, options)
    except (OSError, UnicodeDecodeError) as e:
        print(f"minipas: cannot read {args.source}: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    print(result.status)
    return EXIT_OK if result.succeeded else EXIT_SYNTAX_ERROR


if __name__ == "__main__":
    sys.exit(main())
