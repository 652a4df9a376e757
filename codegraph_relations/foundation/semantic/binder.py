"""
Binder

Resolves simple names (no explicit receiver) against the Scope Tree:

    local > parameter > enclosing-block local > instance field (own, then inherited)
          > static field > static import > external

Type scopes are searched through their whole supertype chain before the walk
continues outward. Once the walk leaves a static scope (static method,
static initializer, static field initializer, static nested type), instance
members found further out bind as DENIED with reason `static_context`.
"""

from ..ir.models import Binding, BindingKind, ResolvedType, Scope, Span, SymbolKind, UnitDeclarations
from .member_resolver import MemberMatch, MemberResolver
from .type_resolver import TypeResolver


class Binder:
    """
    Name binding for one unit.

    Example:
        ```python
        binder = Binder(unit, types, members)
        binding = binder.resolve(scope, "count", position=node.start_byte)
        binding.kind  # BindingKind.FIELD
        ```
    """

    def __init__(self, unit: UnitDeclarations, types: TypeResolver, members: MemberResolver):
        self.unit = unit
        self.arena = unit.arena
        self.types = types
        self.members = members

    def resolve(self, scope: Scope, name: str, position: int, span: Span | None = None) -> Binding:
        """
        Bind a variable-like simple name.

        Args:
            scope: Scope of the reference
            name: Identifier as written
            position: Byte offset of the reference (locals are visible from their declarator on)
            span: Reference location, for diagnostics

        Returns:
            Binding (LOCAL, PARAMETER, FIELD, INHERITED, STATIC, STATIC_IMPORT, DENIED,
            EXTERNAL or UNRESOLVED)
        """
        boundaries: list[int] = []
        static_context = False

        for current in self.arena.ancestors(scope.handle):
            if current.kind.is_type:
                match = self.members.find_field(current.type_qn, name, span)
                if match is not None:
                    return self._member_binding(match, scope, boundaries, static_context, BindingKind.FIELD)
            else:
                handle = current.variables.get(name)
                if handle is not None:
                    symbol = self.arena.symbol(handle)
                    if symbol.position <= position:
                        kind = BindingKind.PARAMETER if symbol.kind == SymbolKind.PARAMETER else BindingKind.LOCAL
                        return Binding.to_symbol(symbol, kind, boundaries=tuple(boundaries))

            if self.arena.is_capture_boundary(current):
                boundaries.append(current.handle)
            if current.is_static:
                static_context = True

        return self._static_import_field(name, span)

    def resolve_method(
        self,
        scope: Scope,
        name: str,
        arg_types: list[ResolvedType | None] | None = None,
        span: Span | None = None,
    ) -> Binding:
        """Bind an unqualified method call (`run()`, `helper(x)`)."""
        boundaries: list[int] = []
        static_context = False

        for current in self.arena.ancestors(scope.handle):
            if current.kind.is_type:
                match = self.members.find_method(current.type_qn, name, arg_types, span)
                if match is not None:
                    return self._member_binding(match, scope, boundaries, static_context, BindingKind.MEMBER)
            if self.arena.is_capture_boundary(current):
                boundaries.append(current.handle)
            if current.is_static:
                static_context = True

        return self._static_import_method(name, arg_types, span)

    def resolve_type(self, scope: Scope, name: str) -> ResolvedType | None:
        """Simple or dotted type name as seen from `scope`; None when nothing knows it."""
        head, _, rest = name.partition(".")
        found = self.types.lookup(head, scope=scope)
        if found is None:
            return None
        return self.types.resolve_name(name, scope=scope) if rest else found

    # ============================================================
    # Helpers
    # ============================================================

    def _member_binding(
        self,
        match: MemberMatch,
        scope: Scope,
        boundaries: list[int],
        static_context: bool,
        instance_kind: BindingKind,
    ) -> Binding:
        symbol = match.symbol
        if symbol is None:
            return Binding.external(match.target)
        found = {"boundaries": tuple(boundaries), "owner": match.owner, "candidates": match.candidates}

        if not symbol.is_static and static_context:
            return Binding.to_symbol(symbol, BindingKind.DENIED, reason="static_context", **found)

        reason = self.members.access_denied(symbol, scope)
        if reason is not None:
            return Binding.to_symbol(symbol, BindingKind.DENIED, reason=reason, **found)

        if symbol.is_static:
            kind = BindingKind.STATIC
        elif match.depth > 0:
            kind = BindingKind.INHERITED
        else:
            kind = instance_kind
        return Binding.to_symbol(symbol, kind, **found)

    def _static_import_field(self, name: str, span: Span | None) -> Binding:
        imports = self.unit.context.imports
        owner = imports.static_single.get(name)
        if owner is not None:
            match = self.members.find_field(owner, name, span)
            if match is not None and match.symbol is not None:
                return Binding.to_symbol(match.symbol, BindingKind.STATIC_IMPORT, owner=match.owner)
            return Binding.external(f"{owner}.{name}")

        for owner in imports.static_wildcards:
            match = self.members.find_field(owner, name, span)
            if match is not None and match.symbol is not None:
                return Binding.to_symbol(match.symbol, BindingKind.STATIC_IMPORT, owner=match.owner)
        return Binding.unresolved(name)

    def _static_import_method(self, name: str, arg_types: list[ResolvedType | None] | None, span: Span | None) -> Binding:
        imports = self.unit.context.imports
        owner = imports.static_single.get(name)
        if owner is not None:
            match = self.members.find_method(owner, name, arg_types, span)
            if match is not None and match.symbol is not None:
                return Binding.to_symbol(match.symbol, BindingKind.STATIC_IMPORT, owner=match.owner)
            return Binding.external(f"{owner}.{name}")

        for owner in imports.static_wildcards:
            match = self.members.find_method(owner, name, arg_types, span)
            if match is not None and match.symbol is not None:
                return Binding.to_symbol(match.symbol, BindingKind.STATIC_IMPORT, owner=match.owner)
        return Binding.unresolved(name, SymbolKind.METHOD)
