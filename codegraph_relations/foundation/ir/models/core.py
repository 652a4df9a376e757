"""
IR Core Models

Enums and Span shared by symbols, scopes and relations.
"""

from dataclasses import dataclass
from enum import Enum


# ============================================================
# Enums
# ============================================================


class SymbolKind(str, Enum):
    """Declared entity kinds (also used for relation endpoints)"""

    PACKAGE = "Package"
    CLASS = "Class"
    INTERFACE = "Interface"
    ENUM = "Enum"
    RECORD = "Record"
    ANNOTATION_TYPE = "AnnotationType"
    ENUM_CONSTANT = "EnumConstant"
    FIELD = "Field"
    METHOD = "Method"
    CONSTRUCTOR = "Constructor"
    PARAMETER = "Parameter"
    VARIABLE = "Variable"  # local, catch parameter, resource, pattern binding
    LAMBDA = "Lambda"
    ANONYMOUS_CLASS = "AnonymousClass"
    INITIALIZER = "Initializer"

    # Endpoint-only kinds (never declared in the analysed sources)
    PRIMITIVE = "Primitive"
    TYPE_PARAMETER = "TypeParameter"
    EXTERNAL = "External"
    UNKNOWN = "Unknown"

    @property
    def is_type(self) -> bool:
        return self in TYPE_KINDS


TYPE_KINDS = frozenset(
    {
        SymbolKind.CLASS,
        SymbolKind.INTERFACE,
        SymbolKind.ENUM,
        SymbolKind.RECORD,
        SymbolKind.ANNOTATION_TYPE,
        SymbolKind.ANONYMOUS_CLASS,
    }
)


class ScopeKind(str, Enum):
    """Scope Tree node kinds"""

    UNIT = "Unit"
    TYPE = "Type"
    ANONYMOUS_CLASS = "AnonymousClass"
    METHOD = "Method"
    INITIALIZER = "Initializer"
    LAMBDA = "Lambda"
    BLOCK = "Block"

    @property
    def is_type(self) -> bool:
        return self in (ScopeKind.TYPE, ScopeKind.ANONYMOUS_CLASS)

    @property
    def is_function(self) -> bool:
        """Scopes that qualify parameters/locals and own lambda/anonymous counters"""
        return self in (ScopeKind.METHOD, ScopeKind.INITIALIZER, ScopeKind.LAMBDA)

    @property
    def is_capture_boundary(self) -> bool:
        return self in (ScopeKind.LAMBDA, ScopeKind.ANONYMOUS_CLASS)


class RelationKind(str, Enum):
    """Closed set of relation kinds"""

    CALL = "CALL"
    USE = "USE"
    ASSIGN = "ASSIGN"
    CAST = "CAST"
    THROW = "THROW"
    RETURN = "RETURN"
    PARAMETER = "PARAMETER"
    TYPE_ARG = "TYPE_ARG"
    CAPTURE = "CAPTURE"
    CREATE = "CREATE"
    EXTEND = "EXTEND"
    IMPLEMENT = "IMPLEMENT"
    ANNOTATION = "ANNOTATION"


class BindingKind(str, Enum):
    """How a reference was bound"""

    LOCAL = "local"
    PARAMETER = "parameter"
    FIELD = "field"
    MEMBER = "member"  # instance method of an enclosing type
    STATIC = "static"
    INHERITED = "inherited"
    STATIC_IMPORT = "static_import"
    TYPE = "type"
    EXTERNAL = "external"
    UNRESOLVED = "unresolved"
    DENIED = "visibility_denied"

    @property
    def is_resolved(self) -> bool:
        return self not in (BindingKind.EXTERNAL, BindingKind.UNRESOLVED, BindingKind.DENIED)


class CaptureKind(str, Enum):
    """What a lambda/anonymous body captured"""

    LOCAL_VARIABLE = "local_variable"
    PARAMETER = "parameter"
    FIELD = "field"
    STATIC = "static"


class WildcardKind(str, Enum):
    EXTENDS = "extends"
    SUPER = "super"
    UNBOUNDED = "unbounded"


class UnitStatus(str, Enum):
    """Per-unit processing outcome"""

    OK = "ok"
    PARSE_FAILED = "parse_failed"
    FAILED = "failed"


# ============================================================
# Common Structures
# ============================================================


@dataclass(frozen=True)
class Span:
    """Source code location (1-indexed lines, 0-indexed columns)"""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def to_dict(self) -> dict[str, int]:
        return {
            "start_line": self.start_line,
            "start_col": self.start_col,
            "end_line": self.end_line,
            "end_col": self.end_col,
        }
