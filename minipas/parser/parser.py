"""
MiniPas Recursive Descent Parser

One method per non-terminal of the MiniPas grammar. Declarations are
checked against a SymbolEnvironment as they are parsed: every begin...end
block opens a scope, and a name may not be declared twice in the same
scope.

Analysis is single-shot: the first error is reported, the recovery
strategy moves the cursor to its synchronisation point, and the run ends
with a failed result.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..lexer.tokens import Token, TokenType
from ..lexer.errors import ErrorKind, ErrorRecovery
from ..analyzer.symbol_table import (
    SymbolEnvironment, GLOBAL_OWNER, VARIABLE_KIND, PARAMETER_KIND
)
from .errors import ParseError, RecoveryStrategy, SkipToLineEnd

logger = logging.getLogger(__name__)


# Tokens that may legally follow the declaration table
DECLARATION_TABLE_FOLLOW = frozenset({
    TokenType.READ,
    TokenType.WRITE,
    TokenType.IF,
    TokenType.IDENTIFIER,
    TokenType.END,
    TokenType.EOF,
})

# Tokens that may legally follow the execution table
EXECUTION_TABLE_FOLLOW = frozenset({TokenType.END, TokenType.EOF})

STATEMENT_START = frozenset({
    TokenType.READ,
    TokenType.WRITE,
    TokenType.IF,
    TokenType.IDENTIFIER,
})

# Tokens that can begin a factor
OPERAND_START = frozenset({
    TokenType.IDENTIFIER,
    TokenType.INTEGER_LITERAL,
    TokenType.LEFT_PAREN,
})

# Deepest combined nesting of blocks, if statements and parentheses
MAX_NESTING_DEPTH = 100


@dataclass
class AnalysisResult:
    """Outcome of one ``Parser.analyse()`` run."""
    environment: SymbolEnvironment
    error: Optional[ErrorKind] = None
    line: Optional[int] = None
    resume_position: Optional[int] = None  # Token index recovery stopped at

    @property
    def success(self) -> bool:
        return self.error is None

    def has_errors(self) -> bool:
        """Check if analysis found an error."""
        return self.error is not None

    def __str__(self) -> str:
        if self.success:
            return "compiled"
        return f"LINE{self.line}: {self.error.message}"


class Parser:
    """
    MiniPas recursive descent parser.

    Consumes the complete token list produced by the lexer. End-of-line
    tokens never reach the grammar: the cursor steps over them and counts
    them to know which line it is on.
    """

    def __init__(self, tokens: Sequence[Token], env: Optional[SymbolEnvironment] = None,
                 sink=None, recovery: Optional[RecoveryStrategy] = None,
                 filename: str = "<unknown>"):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer
            env: Symbol environment to declare into (a fresh one by default)
            sink: Optional DiagnosticSink receiving the first error
            recovery: Panic-mode recovery strategy (skip to line end by default)
            filename: Name of the source for log messages
        """
        self.tokens: List[Token] = list(tokens)
        self.env = env if env is not None else SymbolEnvironment()
        self.sink = sink
        self.recovery = recovery if recovery is not None else SkipToLineEnd()
        self.filename = filename

        self.current = 0
        self.previous = -1
        self.line = 1
        self._crossed_line = False
        # (function name, parameter name) for each function body being parsed
        self._functions: List[Tuple[str, Optional[str]]] = []
        self._depth = 0

        if self.tokens and self.tokens[-1].type == TokenType.EOF:
            self._eof = self.tokens[-1]
        else:
            self._eof = Token(TokenType.EOF, "", None)

    def analyse(self) -> AnalysisResult:
        """
        Parse the whole program.

        Returns:
            AnalysisResult, successful or carrying the first error and its line
        """
        self.current = 0
        self.previous = -1
        self.line = 1
        self._functions = []
        self._depth = 0
        self._skip_line_ends()

        try:
            try:
                self._parse_program()
            except RecursionError:
                # Interpreter recursion limit lower than MAX_NESTING_DEPTH needs
                raise self._error(ErrorKind.SYNTAX_ERROR) from None
        except ParseError as error:
            self._report(error)
            resume = self._recover()
            return AnalysisResult(self.env, error.kind, error.line, resume)

        logger.debug("%s: analysis succeeded", self.filename)
        return AnalysisResult(self.env)

    # ------------------------------------------------------------------
    # Program structure
    # ------------------------------------------------------------------

    def _parse_program(self):
        """<program> -> <block>"""
        self._parse_block()

    def _parse_block(self):
        """<block> -> begin <decl_table> <exec_table> end"""
        self._consume(TokenType.BEGIN, ErrorKind.SYNTAX_ERROR_EXPECTED_A_BLOCK)
        with self._nested(), self.env.scope():
            self._parse_declaration_table()
            self._parse_execution_table()
            self._consume(TokenType.END, ErrorKind.MISSING_END)

    def _parse_function_body(self, name: str, parameter: Optional[str]):
        """<function_body> -> begin <decl_table> <exec_table> end"""
        self._functions.append((name, parameter))
        try:
            self._parse_block()
        finally:
            self._functions.pop()

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _parse_declaration_table(self):
        """<decl_table> -> { <decl> ; }"""
        while True:
            token = self._peek()
            if token.type != TokenType.INTEGER:
                if token.type in DECLARATION_TABLE_FOLLOW:
                    return
                if token.type == TokenType.FUNCTION:
                    raise self._error(ErrorKind.INVALID_TYPE_EXPECTED_INTEGER, token)
                raise self._unexpected(ErrorKind.SYNTAX_ERROR)

            self._parse_declaration()
            self._consume(TokenType.SEMICOLON, ErrorKind.MISSING_SEMICOLON)

    def _parse_declaration(self):
        """<decl> -> integer <decl_tail>"""
        self._consume(TokenType.INTEGER, ErrorKind.INVALID_TYPE_EXPECTED_INTEGER)
        self._parse_declaration_tail()

    def _parse_declaration_tail(self):
        """<decl_tail> -> <variable> | function <ident> ( <expr> ) ; <function_body>"""
        if self._match(TokenType.FUNCTION):
            self._parse_function_declaration()
            return

        token = self._peek()
        if (token.is_identifier and self._peek_next().is_identifier
                and ErrorRecovery.is_near_miss(token.value, "function")):
            raise self._error(ErrorKind.WRONG_RESERVE_YOU_MEAN_FUNCTION, token)

        line = self.line
        name = self._parse_identifier()
        self._declare_variable(name, line)

    def _parse_function_declaration(self):
        """Function declaration after 'integer function'."""
        line = self.line
        name = self._parse_identifier()
        if self.env.is_redeclared_in_current_scope(name):
            raise self._error(ErrorKind.FOUND_REPEAT_DECLARATION_IN_THIS_FIELD, line=line)
        self.env.declare_procedure(name)

        self._consume(TokenType.LEFT_PAREN, ErrorKind.MISSING_LEFT_PARENTHESIS)
        parameter = self._parse_parameter()
        self._consume(TokenType.RIGHT_PAREN, ErrorKind.MISSING_RIGHT_PARENTHESIS)
        self._consume(TokenType.SEMICOLON, ErrorKind.MISSING_SEMICOLON)
        self._parse_function_body(name, parameter)

    def _parse_parameter(self) -> Optional[str]:
        """
        <parameter> -> <expr>

        Returns the identifier's name when the whole parameter is a single
        identifier, None otherwise.
        """
        start = self.current
        first = self._peek()
        self._parse_expression()
        if first.is_identifier and self.previous == start:
            return first.value
        return None

    def _declare_variable(self, name: str, line: int):
        if self.env.is_redeclared_in_current_scope(name):
            raise self._error(ErrorKind.FOUND_REPEAT_DECLARATION_IN_THIS_FIELD, line=line)

        if self._functions:
            owner, parameter = self._functions[-1]
        else:
            owner, parameter = GLOBAL_OWNER, None
        kind = PARAMETER_KIND if name == parameter else VARIABLE_KIND
        self.env.declare_variable(name, owner, kind)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_execution_table(self):
        """<exec_table> -> { <exec_stmt> ; }"""
        while True:
            token = self._peek()
            if token.type in EXECUTION_TABLE_FOLLOW:
                return
            if token.type not in STATEMENT_START:
                raise self._unexpected(ErrorKind.SYNTAX_ERROR)

            self._parse_statement()
            self._consume(TokenType.SEMICOLON, ErrorKind.MISSING_SEMICOLON)

    def _parse_statement(self):
        """<exec_stmt> -> <read_stmt> | <write_stmt> | <if_stmt> | <assign_stmt>"""
        token_type = self._peek().type
        if token_type == TokenType.READ:
            self._parse_read_statement()
        elif token_type == TokenType.WRITE:
            self._parse_write_statement()
        elif token_type == TokenType.IF:
            self._parse_if_statement()
        elif token_type == TokenType.IDENTIFIER:
            self._parse_assignment()
        else:
            raise self._unexpected(ErrorKind.SYNTAX_ERROR)

    def _parse_assignment(self):
        """<assign_stmt> -> <ident> := <expr>"""
        token = self._peek()
        following = self._peek_next()

        if following.type == TokenType.LEFT_PAREN:
            misspelt = self._misspelt_io_keyword(token.value)
            if misspelt is not None:
                raise self._error(misspelt, token)
        elif following.is_identifier:
            # Looks like "<type> <name>" with a type other than integer
            raise self._error(ErrorKind.INVALID_TYPE_EXPECTED_INTEGER, token)

        self._parse_identifier()
        self._consume(TokenType.ASSIGN, ErrorKind.WRONG_ASSIGN_TOKEN)
        self._parse_expression()

    def _parse_if_statement(self):
        """<if_stmt> -> if <condition> then <exec_stmt> else <exec_stmt>"""
        self._consume(TokenType.IF, ErrorKind.MISSING_IF)
        with self._nested():
            self._parse_condition()
            self._consume(TokenType.THEN, ErrorKind.MISSING_THEN)
            self._parse_statement()
            self._consume(TokenType.ELSE, ErrorKind.MISSING_ELSE)
            self._parse_statement()

    def _parse_read_statement(self):
        """<read_stmt> -> read ( <ident> )"""
        self._consume(TokenType.READ, ErrorKind.WRONG_RESERVE_YOU_MEAN_READ)
        self._consume(TokenType.LEFT_PAREN, ErrorKind.MISSING_LEFT_PARENTHESIS)
        self._parse_identifier()
        self._consume(TokenType.RIGHT_PAREN, ErrorKind.MISSING_RIGHT_PARENTHESIS)

    def _parse_write_statement(self):
        """<write_stmt> -> write ( <ident> )"""
        self._consume(TokenType.WRITE, ErrorKind.WRONG_RESERVE_YOU_MEAN_WRITE)
        self._consume(TokenType.LEFT_PAREN, ErrorKind.MISSING_LEFT_PARENTHESIS)
        self._parse_identifier()
        self._consume(TokenType.RIGHT_PAREN, ErrorKind.MISSING_RIGHT_PARENTHESIS)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_condition(self):
        """<condition> -> <expr> <relop> <expr>"""
        self._parse_expression()
        self._parse_relational_operator()
        self._parse_expression()

    def _parse_relational_operator(self) -> Token:
        """<relop> -> = | <> | < | <= | > | >="""
        if self._peek().is_relational:
            return self._advance()
        raise self._unexpected(ErrorKind.SYNTAX_ERROR)

    def _parse_expression(self):
        """<expr> -> <term> { - <term> }"""
        self._parse_term()
        while self._match(TokenType.MINUS):
            self._parse_term()

    def _parse_term(self):
        """<term> -> <factor> { * <factor> }"""
        self._parse_factor()
        while self._match(TokenType.MULTIPLY):
            self._parse_factor()

        # Two operands side by side on one line, e.g. "2 x"
        token = self._peek()
        if (token.type in OPERAND_START and not self._crossed_line
                and not (token.is_identifier and self._peek_next().type == TokenType.ASSIGN)):
            raise self._error(ErrorKind.MISSING_MULTIPLY, token)

    def _parse_factor(self):
        """<factor> -> ( <expr> ) | <integer> | <ident> [ ( <expr> ) ]"""
        token = self._peek()

        if token.type == TokenType.LEFT_PAREN:
            self._advance()
            with self._nested():
                self._parse_expression()
            self._consume(TokenType.RIGHT_PAREN, ErrorKind.MISSING_RIGHT_PARENTHESIS)
        elif token.type == TokenType.INTEGER_LITERAL:
            self._advance()
        elif token.type == TokenType.IDENTIFIER:
            self._advance()
            # Call suffix; arity is not checked against the declaration
            if self._match(TokenType.LEFT_PAREN):
                with self._nested():
                    self._parse_parameter()
                self._consume(TokenType.RIGHT_PAREN, ErrorKind.MISSING_RIGHT_PARENTHESIS)
        else:
            raise self._unexpected(ErrorKind.SYNTAX_ERROR)

    def _parse_identifier(self) -> str:
        """<ident>"""
        token = self._peek()
        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return token.value
        raise self._unexpected(ErrorKind.EXPECTED_IDENTIFIER)

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _nested(self):
        """Count one level of nesting; too deep is a syntax error."""
        if self._depth >= MAX_NESTING_DEPTH:
            raise self._error(ErrorKind.SYNTAX_ERROR)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def _peek(self) -> Token:
        """Current token, EOF past the end."""
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        return self._eof

    def _peek_next(self) -> Token:
        """The grammar token after the current one."""
        index = self.current + 1
        while index < len(self.tokens) and self.tokens[index].type == TokenType.EOL:
            index += 1
        if index < len(self.tokens):
            return self.tokens[index]
        return self._eof

    def _advance(self) -> Token:
        """Consume the current token, stepping over any line ends after it."""
        token = self._peek()
        if self.current < len(self.tokens) and token.type != TokenType.EOF:
            self.previous = self.current
            self.current += 1
            self._crossed_line = False
            self._skip_line_ends()
        return token

    def _skip_line_ends(self):
        while self.current < len(self.tokens) and self.tokens[self.current].type == TokenType.EOL:
            self.line += 1
            self.current += 1
            self._crossed_line = True

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type == token_type

    def _match(self, token_type: TokenType) -> bool:
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType, kind: ErrorKind) -> Token:
        """Consume token of expected type or raise ``kind``."""
        if self._check(token_type):
            return self._advance()
        raise self._unexpected(kind)

    # ------------------------------------------------------------------
    # Error handling
    # ------------------------------------------------------------------

    def _error(self, kind: ErrorKind, token: Optional[Token] = None,
               line: Optional[int] = None) -> ParseError:
        return ParseError(kind, self.line if line is None else line, token or self._peek())

    def _unexpected(self, kind: ErrorKind) -> ParseError:
        """Error for the current token; an illegal character is a matching failure."""
        token = self._peek()
        if token.type == TokenType.ILLEGAL:
            kind = ErrorKind.FAIL_MATCHING
        return self._error(kind, token)

    def _misspelt_io_keyword(self, word: str) -> Optional[ErrorKind]:
        """Map a near-miss of 'read' or 'write' to its diagnostic."""
        for keyword in ErrorRecovery.suggest_keyword_corrections(word):
            if keyword == "read":
                return ErrorKind.WRONG_RESERVE_YOU_MEAN_READ
            if keyword == "write":
                return ErrorKind.WRONG_RESERVE_YOU_MEAN_WRITE
        return None

    def _report(self, error: ParseError):
        logger.debug("%s: %s at token %s", self.filename, error, error.token)
        if self.sink is not None:
            self.sink.report(error.line, error.kind)

    def _recover(self) -> int:
        """Move the cursor to the recovery strategy's synchronisation point."""
        start = min(self.current, len(self.tokens))
        resume = self.recovery.synchronize(self.tokens, start)
        skipped = self.tokens[start:resume]
        self.line += sum(1 for token in skipped if token.type == TokenType.EOL)
        self.current = resume
        self._skip_line_ends()
        logger.debug("recovered with %r: skipped %d tokens, resuming at line %d",
                     self.recovery, len(skipped), self.line)
        return resume


def parse_string(source: str, filename: str = "<string>", sink=None,
                 recovery: Optional[RecoveryStrategy] = None,
                 env: Optional[SymbolEnvironment] = None) -> AnalysisResult:
    """
    Convenience function to lex and parse a source string.

    Lexical errors go to the same sink as the parser's error.
    """
    from ..lexer import tokenize_string

    tokens, _ = tokenize_string(source, filename, sink=sink)
    parser = Parser(tokens, env=env, sink=sink, recovery=recovery, filename=filename)
    return parser.analyse()
