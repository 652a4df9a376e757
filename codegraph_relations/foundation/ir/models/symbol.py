"""
Symbol model

A Symbol is created exactly once, during the declaration pass, and is never
mutated afterwards. Cross references (owning scope) are arena handles.
"""

from dataclasses import dataclass, field
from typing import Any

from .core import Span, SymbolKind

ACCESS_MODIFIERS = ("public", "protected", "private")


@dataclass(frozen=True, eq=False)
class Symbol:
    """
    Declared entity.

    Attributes:
        handle: Index in the declaring unit's arena
        qualified_name: Globally unique identity
        name: Simple name as written
        kind: Entity kind
        scope: Handle of the owning scope (non-owning back-reference)
        file_path: Declaring unit
        span: Declaration span
        declared_type: Raw declared type text (field/local/parameter type, method return type)
        modifiers: Java modifiers (public, static, final, ...)
        annotations: Annotation names as written (without "@")
        position: Byte offset of the declaration point; locals are visible from here on
        metadata: Kind specific details (owner, parameter_types, index, synthetic, ...)
    """

    handle: int
    qualified_name: str
    name: str
    kind: SymbolKind
    scope: int
    file_path: str
    span: Span | None = None
    declared_type: str | None = None
    modifiers: frozenset[str] = frozenset()
    annotations: tuple[str, ...] = ()
    position: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_final(self) -> bool:
        return "final" in self.modifiers

    @property
    def is_synthetic(self) -> bool:
        return bool(self.metadata.get("synthetic"))

    @property
    def owner(self) -> str | None:
        """Qualified name of the declaring type, for members."""
        return self.metadata.get("owner")

    @property
    def visibility(self) -> str:
        for modifier in ACCESS_MODIFIERS:
            if modifier in self.modifiers:
                return modifier
        return "package"

    @property
    def parameter_types(self) -> tuple[str, ...]:
        return tuple(self.metadata.get("parameter_types", ()))

    @property
    def is_varargs(self) -> bool:
        return bool(self.metadata.get("is_varargs"))

    def to_dict(self) -> dict[str, Any]:
        data = {
            "qualifiedName": self.qualified_name,
            "name": self.name,
            "kind": self.kind.value,
            "filePath": self.file_path,
            "declaredType": self.declared_type,
            "modifiers": sorted(self.modifiers),
            "annotations": list(self.annotations),
            "metadata": dict(self.metadata),
        }
        if self.span is not None:
            data["span"] = self.span.to_dict()
        return data

    def __repr__(self) -> str:
        return f"Symbol({self.kind.value} {self.qualified_name})"
