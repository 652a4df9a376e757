"""
Relation, Binding and Diagnostic models
"""

from dataclasses import dataclass, field
from typing import Any

from .core import BindingKind, RelationKind, Span, SymbolKind
from .symbol import Symbol


@dataclass(frozen=True)
class Relation:
    """
    Typed edge between two entities. Append-only, never mutated after emission.

    Attributes:
        source: Source qualified name (always a declared Symbol)
        source_kind: Source symbol kind
        target: Target qualified name (declared, external or unresolved)
        target_kind: Target kind
        kind: Relation kind
        attributes: Flat key/value map (str/int/bool/None or list of str)
        span: Location of the relation site
    """

    source: str
    source_kind: SymbolKind
    target: str
    target_kind: SymbolKind
    kind: RelationKind
    attributes: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    span: Span | None = field(default=None, compare=False)

    @property
    def is_external(self) -> bool:
        return bool(self.attributes.get("is_external") or self.attributes.get("unresolved"))

    def to_dict(self) -> dict[str, Any]:
        """Serialized record form."""
        data = {
            "sourceQualifiedName": self.source,
            "sourceKind": self.source_kind.value,
            "targetQualifiedName": self.target,
            "targetKind": self.target_kind.value,
            "relationKind": self.kind.value,
            "attributes": dict(self.attributes),
        }
        if self.span is not None:
            data["span"] = self.span.to_dict()
        return data


@dataclass(frozen=True)
class Binding:
    """
    Resolution outcome of a reference.

    Attributes:
        kind: How the reference was bound (or why it was not)
        symbol: Bound symbol (also set for DENIED bindings)
        target: Target qualified name; for external/unresolved bindings a best-effort name
        target_kind: Target kind
        boundaries: Capture-boundary scope handles crossed, innermost first
        owner: Qualified name of the type the member was found on
        reason: Denial reason for DENIED bindings
        candidates: Unrelated owners of an ambiguous member, the chosen owner first
    """

    kind: BindingKind
    target: str
    target_kind: SymbolKind
    symbol: Symbol | None = None
    boundaries: tuple[int, ...] = ()
    owner: str | None = None
    reason: str | None = None
    candidates: tuple[str, ...] = ()

    @classmethod
    def to_symbol(cls, symbol: Symbol, kind: BindingKind, **kwargs: Any) -> "Binding":
        return cls(kind=kind, target=symbol.qualified_name, target_kind=symbol.kind, symbol=symbol, **kwargs)

    @classmethod
    def unresolved(cls, name: str, target_kind: SymbolKind = SymbolKind.UNKNOWN) -> "Binding":
        return cls(kind=BindingKind.UNRESOLVED, target=name, target_kind=target_kind)

    @classmethod
    def external(cls, name: str, target_kind: SymbolKind = SymbolKind.EXTERNAL) -> "Binding":
        return cls(kind=BindingKind.EXTERNAL, target=name, target_kind=target_kind)

    def status_attributes(self) -> dict[str, Any]:
        """Attributes every relation built from this binding carries."""
        attributes: dict[str, Any] = {}
        if self.kind == BindingKind.DENIED:
            attributes.update(visibility_denied=True, denied_reason=self.reason)
        elif self.kind == BindingKind.EXTERNAL:
            attributes["is_external"] = True
        elif self.kind == BindingKind.UNRESOLVED:
            attributes.update(is_external=True, unresolved=True)
        if self.candidates:
            attributes["ambiguous_candidates"] = list(self.candidates)
        return attributes


@dataclass(frozen=True)
class Diagnostic:
    """
    Non-fatal problem found while processing a unit.

    Codes: skipped_node, duplicate_declaration, ambiguous_member,
    captured_variable_reassigned, duplicate_symbol, parse_failed, unit_failed.
    """

    code: str
    message: str
    file_path: str
    span: Span | None = None
    detail: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        data = {"code": self.code, "message": self.message, "filePath": self.file_path, "detail": dict(self.detail)}
        if self.span is not None:
            data["span"] = self.span.to_dict()
        return data
