"""
Foundation: Intermediate Representation (IR)

Key components:
- models: Symbols, Scope Tree arena, type info, relations, unit documents
- qualified_names: Qualified name strategy
"""

from .models import (
    Binding,
    BindingKind,
    CaptureKind,
    Diagnostic,
    ImportTable,
    Relation,
    RelationKind,
    ResolvedType,
    Scope,
    ScopeArena,
    ScopeKind,
    Span,
    Symbol,
    SymbolKind,
    TypeInfo,
    UnitContext,
    UnitDeclarations,
    UnitResult,
    UnitStatus,
    WildcardKind,
)
from .qualified_names import QualifiedNameBuilder, erase_type, method_signature

__all__ = [
    # Models
    "Symbol",
    "Scope",
    "ScopeArena",
    "ImportTable",
    "UnitContext",
    "TypeInfo",
    "ResolvedType",
    "Relation",
    "Binding",
    "Diagnostic",
    "UnitDeclarations",
    "UnitResult",
    "Span",
    # Enums
    "SymbolKind",
    "ScopeKind",
    "RelationKind",
    "BindingKind",
    "CaptureKind",
    "WildcardKind",
    "UnitStatus",
    # Naming
    "QualifiedNameBuilder",
    "erase_type",
    "method_signature",
]
