"""
IR Models

Symbols, the Scope Tree arena, type info, relations and per-unit documents.
"""

from .core import (
    BindingKind,
    CaptureKind,
    RelationKind,
    ScopeKind,
    Span,
    SymbolKind,
    UnitStatus,
    WildcardKind,
)
from .document import UnitDeclarations, UnitResult
from .relation import Binding, Diagnostic, Relation
from .scope import Scope, ScopeArena, node_key
from .symbol import Symbol
from .types import ImportTable, ResolvedType, TypeInfo, UnitContext

__all__ = [
    # Enums
    "SymbolKind",
    "ScopeKind",
    "RelationKind",
    "BindingKind",
    "CaptureKind",
    "WildcardKind",
    "UnitStatus",
    "Span",
    # Scope Tree
    "Symbol",
    "Scope",
    "ScopeArena",
    "node_key",
    # Types
    "ImportTable",
    "UnitContext",
    "TypeInfo",
    "ResolvedType",
    # Results
    "Relation",
    "Binding",
    "Diagnostic",
    "UnitDeclarations",
    "UnitResult",
]
