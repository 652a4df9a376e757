"""
Capture Analyzer

Attributes free variables of lambda, anonymous-class and local-class bodies.
Each bound reference that crossed capture boundaries produces one CAPTURE
relation per boundary, from that boundary's own symbol; depth counts
boundaries from the declaring scope inward (outermost boundary = 1).

Effective finality is only known once the whole unit has been walked, so
relations are materialized by `relations()` at the end of the expression pass.
"""

from dataclasses import dataclass

from ..ir.models import (
    Binding,
    CaptureKind,
    Diagnostic,
    Relation,
    RelationKind,
    ScopeArena,
    Span,
    Symbol,
    SymbolKind,
)


@dataclass
class _Capture:
    boundary: Symbol
    target: Symbol
    kind: CaptureKind
    depth: int
    implicit_this: bool
    span: Span | None


class CaptureAnalyzer:
    """Collects captures for one unit, in first-seen order."""

    def __init__(self, arena: ScopeArena):
        self.arena = arena
        self.diagnostics: list[Diagnostic] = []
        self._captures: dict[tuple[int, str], _Capture] = {}
        self._written: set[str] = set()

    def record(self, binding: Binding, span: Span | None = None, implicit_this: bool = True) -> None:
        """Register a bound reference; no-op unless it crossed a capture boundary."""
        symbol = binding.symbol
        if symbol is None or not binding.boundaries or not binding.kind.is_resolved:
            return
        kind = self._capture_kind(symbol)
        if kind is None:
            return

        # boundaries are innermost first; depth 1 is the boundary nearest the declaration
        for depth, handle in enumerate(reversed(binding.boundaries), start=1):
            boundary = self.arena.owner_symbol(self.arena.scope(handle))
            if boundary is None:
                continue
            key = (boundary.handle, symbol.qualified_name)
            if key not in self._captures:
                self._captures[key] = _Capture(
                    boundary=boundary,
                    target=symbol,
                    kind=kind,
                    depth=depth,
                    implicit_this=implicit_this and kind == CaptureKind.FIELD,
                    span=span,
                )

    def note_write(self, symbol: Symbol | None) -> None:
        """A local or parameter was assigned outside its initializer."""
        if symbol is not None and symbol.kind in (SymbolKind.VARIABLE, SymbolKind.PARAMETER):
            self._written.add(symbol.qualified_name)

    def relations(self) -> list[Relation]:
        """CAPTURE relations plus `captured_variable_reassigned` diagnostics."""
        relations = []
        reported: set[str] = set()
        for capture in self._captures.values():
            target = capture.target
            attributes: dict = {
                "capture_kind": capture.kind.value,
                "depth": capture.depth,
                "variable_name": target.name,
            }
            if capture.kind in (CaptureKind.LOCAL_VARIABLE, CaptureKind.PARAMETER):
                effectively_final = target.is_final or target.qualified_name not in self._written
                attributes["is_effectively_final"] = effectively_final
                if not effectively_final and target.qualified_name not in reported:
                    reported.add(target.qualified_name)
                    self.diagnostics.append(
                        Diagnostic(
                            code="captured_variable_reassigned",
                            message=f"Captured variable '{target.name}' is reassigned",
                            file_path=self.arena.file_path,
                            span=capture.span,
                            detail={"variable": target.qualified_name, "captured_by": capture.boundary.qualified_name},
                        )
                    )
            elif capture.kind == CaptureKind.FIELD:
                attributes["is_implicit_this"] = capture.implicit_this
            else:
                attributes["is_static"] = True

            relations.append(
                Relation(
                    source=capture.boundary.qualified_name,
                    source_kind=capture.boundary.kind,
                    target=target.qualified_name,
                    target_kind=target.kind,
                    kind=RelationKind.CAPTURE,
                    attributes=attributes,
                    span=capture.span,
                )
            )
        return relations

    @staticmethod
    def _capture_kind(symbol: Symbol) -> CaptureKind | None:
        if symbol.kind == SymbolKind.VARIABLE:
            return CaptureKind.LOCAL_VARIABLE
        if symbol.kind == SymbolKind.PARAMETER:
            return CaptureKind.PARAMETER
        if symbol.kind in (SymbolKind.FIELD, SymbolKind.ENUM_CONSTANT):
            return CaptureKind.STATIC if symbol.is_static else CaptureKind.FIELD
        return None
