"""
Symbol table and scope management for MiniPas.

Implements a stack of per-block symbol tables with support for:
- Lexical scoping (one scope per begin...end block)
- Redeclaration checks restricted to the innermost scope
- Shadowing of outer declarations by inner ones
- Innermost-to-outermost name resolution
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


# Owner recorded for variables declared in the program block
GLOBAL_OWNER = "global"

# VariableEntry.kind values
VARIABLE_KIND = 0
PARAMETER_KIND = 1


class ScopeStackError(RuntimeError):
    """Raised when the scope stack is used out of order (a caller bug)."""


@dataclass
class VariableEntry:
    """A declared variable."""
    name: str
    owner: str          # Owning procedure, GLOBAL_OWNER at top level
    kind: int           # VARIABLE_KIND or PARAMETER_KIND
    level: int          # Level of the declaring scope

    @property
    def is_parameter(self) -> bool:
        return self.kind == PARAMETER_KIND

    def __str__(self) -> str:
        role = "param" if self.is_parameter else "var"
        return f"{self.name} ({role} of {self.owner}, level {self.level})"


@dataclass
class ProcedureEntry:
    """A declared function."""
    name: str
    level: int
    # Parameter/return type placeholder, unused beyond arity-1 functions
    param_types: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.name} (function, level {self.level})"


@dataclass
class Scope:
    """Represents the names declared directly inside one block."""
    level: int
    variables: Dict[str, VariableEntry] = field(default_factory=dict)
    procedures: Dict[str, ProcedureEntry] = field(default_factory=dict)

    def contains(self, name: str) -> bool:
        """Check whether this scope alone declares ``name``."""
        return name in self.variables or name in self.procedures

    def __str__(self) -> str:
        symbol_count = len(self.variables) + len(self.procedures)
        return f"Scope(level {self.level}, {symbol_count} symbols)"


class SymbolEnvironment:
    """
    Manages the stack of scopes for one parse.

    Only the top scope is ever mutated; lookups walk the stack from the
    top down so inner declarations shadow outer ones.
    """

    def __init__(self):
        self.scopes: List[Scope] = []

    def enter_scope(self) -> Scope:
        """Push a new empty scope."""
        scope = Scope(level=len(self.scopes))
        self.scopes.append(scope)
        logger.debug("enter scope level %d", scope.level)
        return scope

    def exit_scope(self) -> Scope:
        """Pop the innermost scope."""
        if not self.scopes:
            raise ScopeStackError("exit_scope() called with no open scope")
        scope = self.scopes.pop()
        logger.debug("exit scope level %d", scope.level)
        return scope

    @contextmanager
    def scope(self) -> Iterator[Scope]:
        """Open a scope for the duration of a ``with`` block."""
        opened = self.enter_scope()
        try:
            yield opened
        finally:
            if not self.scopes or self.scopes[-1] is not opened:
                raise ScopeStackError(f"scope level {opened.level} closed out of order")
            self.exit_scope()

    @property
    def current_scope(self) -> Scope:
        if not self.scopes:
            raise ScopeStackError("no open scope")
        return self.scopes[-1]

    @property
    def depth(self) -> int:
        return len(self.scopes)

    def __len__(self) -> int:
        return len(self.scopes)

    def declare_variable(self, name: str, owner: str = GLOBAL_OWNER,
                         kind: int = VARIABLE_KIND) -> VariableEntry:
        """Declare a variable in the current scope, replacing any entry of the same name."""
        scope = self.current_scope
        entry = VariableEntry(name, owner, kind, scope.level)
        scope.variables[name] = entry
        logger.debug("declare variable %s", entry)
        return entry

    def declare_procedure(self, name: str) -> ProcedureEntry:
        """Declare a function in the current scope, replacing any entry of the same name."""
        scope = self.current_scope
        entry = ProcedureEntry(name, scope.level)
        scope.procedures[name] = entry
        logger.debug("declare procedure %s", entry)
        return entry

    def is_redeclared_in_current_scope(self, name: str) -> bool:
        """Check if the current scope already declares ``name``."""
        return self.current_scope.contains(name)

    def resolve(self, name: str) -> bool:
        """Check if ``name`` is visible from the current scope."""
        return any(scope.contains(name) for scope in reversed(self.scopes))

    def lookup_variable(self, name: str) -> Optional[VariableEntry]:
        """Find the innermost variable called ``name``."""
        for scope in reversed(self.scopes):
            if name in scope.variables:
                return scope.variables[name]
        return None

    def lookup_procedure(self, name: str) -> Optional[ProcedureEntry]:
        """Find the innermost function called ``name``."""
        for scope in reversed(self.scopes):
            if name in scope.procedures:
                return scope.procedures[name]
        return None

    def __str__(self) -> str:
        return f"SymbolEnvironment(depth {self.depth})"
