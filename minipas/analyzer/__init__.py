"""
MiniPas Analyzer Package

Scope and symbol management used by the parser while it validates
declarations.
"""

from .symbol_table import (
    SymbolEnvironment, Scope, VariableEntry, ProcedureEntry, ScopeStackError,
    GLOBAL_OWNER, VARIABLE_KIND, PARAMETER_KIND,
)

__all__ = [
    "SymbolEnvironment", "Scope", "VariableEntry", "ProcedureEntry",
    "ScopeStackError", "GLOBAL_OWNER", "VARIABLE_KIND", "PARAMETER_KIND",
]
