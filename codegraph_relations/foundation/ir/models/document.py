"""
Per-unit documents

UnitDeclarations is the output of the declaration pass (merged into the
project index at the barrier); UnitResult is the final per-unit outcome.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .core import RelationKind, UnitStatus
from .relation import Diagnostic, Relation
from .scope import ScopeArena
from .symbol import Symbol
from .types import TypeInfo, UnitContext

if TYPE_CHECKING:
    from ...parsing import AstTree


@dataclass
class UnitDeclarations:
    """
    Everything one unit declares.

    Attributes:
        context: Package and imports
        arena: Scope Tree and Symbols of the unit
        tree: Parsed tree (kept for the expression pass)
        symbols: Declared symbols keyed by qualified name
        types: Declared types keyed by qualified name
        diagnostics: Declaration-pass diagnostics
    """

    context: UnitContext
    arena: ScopeArena
    tree: "AstTree | None" = None
    symbols: dict[str, Symbol] = field(default_factory=dict)
    types: dict[str, TypeInfo] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def file_path(self) -> str:
        return self.context.file_path

    @property
    def unit_scope(self) -> int:
        return 0


@dataclass
class UnitResult:
    """
    Outcome of processing one unit.

    A failed unit carries no relations: partial results are discarded.
    """

    file_path: str
    status: UnitStatus = UnitStatus.OK
    relations: list[Relation] = field(default_factory=list)
    symbols: dict[str, Symbol] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == UnitStatus.OK

    def by_kind(self, kind: RelationKind) -> list[Relation]:
        return [r for r in self.relations if r.kind == kind]

    def stats(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for relation in self.relations:
            counts[relation.kind.value] = counts.get(relation.kind.value, 0) + 1
        return counts
