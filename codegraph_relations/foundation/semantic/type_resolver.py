"""
Type Resolver

Resolves type references as written (simple, scoped, parameterized,
wildcard, array, primitive) to ResolvedType, and lists the type arguments
that become TYPE_ARG relations.

Simple name lookup order:
1. type variables and local classes along the lexical scope chain
2. member types of the enclosing types (own and inherited)
3. single imports, same package, wildcard imports
4. implicit java.lang, builtin table, known external types
5. unresolved (kept as written, flagged external)
"""

import re
from collections import deque
from dataclasses import dataclass, field

from ..ir.models import ResolvedType, Scope, Symbol, SymbolKind, TypeInfo, UnitContext, UnitDeclarations, WildcardKind
from . import builtins
from .project_index import ProjectIndex

_TOKEN_RE = re.compile(r"[A-Za-z_$][\w$]*|\.\.\.|[<>,\[\]?.&]")
_ANNOTATION_RE = re.compile(r"@[\w.]+(\s*\([^)]*\))?\s*")

OBJECT = ResolvedType("java.lang.Object", SymbolKind.CLASS, is_external=True)


@dataclass
class TypeRef:
    """Type as written, before resolution."""

    name: str
    arguments: list["TypeRef"] = field(default_factory=list)
    dimensions: int = 0
    wildcard: WildcardKind | None = None
    bound: "TypeRef | None" = None

    @property
    def is_wildcard(self) -> bool:
        return self.wildcard is not None


@dataclass(frozen=True)
class TypeArgument:
    """One type-argument position of a parameterized type."""

    parent: ResolvedType
    target: ResolvedType
    index: int
    depth: int
    wildcard: WildcardKind | None = None


def parse_type(text: str | None) -> TypeRef | None:
    """
    Parse type text into a TypeRef.

    Examples:
        "Map<String, List<? extends Number>>[]"
        "final String..."
    """
    tokens = [t for t in _TOKEN_RE.findall(_ANNOTATION_RE.sub("", text or "")) if t != "final"]
    if not tokens:
        return None
    ref, _ = _parse(tokens, 0)
    return ref


def _parse(tokens: list[str], i: int) -> tuple[TypeRef, int]:
    def peek(j: int) -> str:
        return tokens[j] if j < len(tokens) else ""

    if peek(i) == "?":
        i += 1
        if peek(i) in ("extends", "super"):
            kind = WildcardKind(peek(i))
            bound, i = _parse(tokens, i + 1)
            return TypeRef("?", wildcard=kind, bound=bound), i
        return TypeRef("?", wildcard=WildcardKind.UNBOUNDED), i

    parts = [peek(i)]
    i += 1
    arguments: list[TypeRef] = []
    while True:
        if peek(i) == "<":
            arguments = []
            i += 1
            while peek(i) not in (">", ""):
                if peek(i) == ",":
                    i += 1
                    continue
                argument, i = _parse(tokens, i)
                arguments.append(argument)
            i += 1
        elif peek(i) == "." and peek(i + 1) not in ("", "<", "[", "..."):
            parts.append(peek(i + 1))
            i += 2
        else:
            break

    dimensions = 0
    while peek(i) == "[":
        dimensions += 1
        i += 2
    if peek(i) == "...":
        dimensions += 1
        i += 1
    # Intersection bounds: the first type is the erasure
    while peek(i) == "&":
        _, i = _parse(tokens, i + 1)
    return TypeRef(".".join(parts), arguments, dimensions), i


class TypeResolver:
    """
    Resolves type references for one unit against the frozen project index.

    Not shared across threads: caches are per resolver.
    """

    def __init__(self, index: ProjectIndex, unit: UnitDeclarations):
        self.index = index
        self.unit = unit
        self.arena = unit.arena
        self.inferred: dict[str, ResolvedType] = {}
        self._supertypes: dict[str, list[ResolvedType]] = {}
        self._resolving: set[str] = set()
        self._symbol_types: dict[str, ResolvedType | None] = {}

    # ============================================================
    # Types by name
    # ============================================================

    def get_type(self, qualified_name: str | None) -> TypeInfo | None:
        if qualified_name is None:
            return None
        return self.unit.types.get(qualified_name) or self.index.get_type(qualified_name)

    def declared(self, qualified_name: str, dimensions: int = 0) -> ResolvedType:
        """ResolvedType for a qualified name (declared, builtin or external)."""
        info = self.get_type(qualified_name)
        if info is not None:
            return ResolvedType(qualified_name, info.kind, dimensions)
        if qualified_name in builtins.PRIMITIVE_TYPES:
            return ResolvedType(qualified_name, SymbolKind.PRIMITIVE, dimensions)
        kind = builtins.kind_of_builtin(qualified_name) or SymbolKind.EXTERNAL
        return ResolvedType(qualified_name, kind, dimensions, is_external=True)

    # ============================================================
    # Resolution
    # ============================================================

    def resolve(self, text: str | None, scope: Scope) -> ResolvedType | None:
        """Resolve type text in a lexical scope of this unit. None for `var`/missing text."""
        ref = parse_type(text)
        if ref is None or (ref.name == "var" and self._lexical(ref.name, scope) is None):
            return None
        return self.resolve_ref(ref, scope=scope)

    def resolve_in_type(self, text: str | None, info: TypeInfo, type_vars: tuple[str, ...] = ()) -> ResolvedType | None:
        """Resolve type text as seen from inside a declared type (any unit)."""
        ref = parse_type(text)
        if ref is None or ref.name == "var":
            return None
        if self._same_unit(info):
            return self.resolve_ref(ref, scope=self.arena.scope(info.scope))
        return self.resolve_ref(ref, info=info, type_vars=type_vars)

    def resolve_ref(
        self,
        ref: TypeRef,
        scope: Scope | None = None,
        info: TypeInfo | None = None,
        type_vars: tuple[str, ...] = (),
    ) -> ResolvedType:
        if ref.is_wildcard:
            return self.resolve_ref(ref.bound, scope, info, type_vars) if ref.bound is not None else OBJECT

        base = self.resolve_name(ref.name, scope, info, type_vars)
        arguments = tuple(self.resolve_ref(a, scope, info, type_vars) for a in ref.arguments)
        return ResolvedType(
            base.qualified_name,
            base.kind,
            base.dimensions + ref.dimensions,
            base.is_external,
            arguments,
            base.bound,
        )

    def resolve_name(
        self,
        name: str,
        scope: Scope | None = None,
        info: TypeInfo | None = None,
        type_vars: tuple[str, ...] = (),
    ) -> ResolvedType:
        """Resolve a simple or dotted type name; unresolvable names come back as Unknown."""
        if name in builtins.PRIMITIVE_TYPES:
            return ResolvedType(name, SymbolKind.PRIMITIVE)

        head, _, rest = name.partition(".")
        found = self.lookup(head, scope, info, type_vars)
        if found is not None:
            if not rest:
                return found
            if found.kind != SymbolKind.TYPE_PARAMETER:
                return self._descend(found, rest.split("."))

        if rest:
            return self._qualified(name)
        return ResolvedType(name, SymbolKind.UNKNOWN, is_external=True)

    def lookup(
        self,
        name: str,
        scope: Scope | None = None,
        info: TypeInfo | None = None,
        type_vars: tuple[str, ...] = (),
    ) -> ResolvedType | None:
        """Simple type name lookup; None when no tier knows the name."""
        if scope is not None:
            found = self._lexical(name, scope)
            context = self.unit.context
        elif info is not None:
            found = self._in_type_chain(name, info, type_vars)
            context = info.context
        else:
            found, context = None, self.unit.context
        if found is not None:
            return found
        return self._in_context(name, context)

    def _lexical(self, name: str, scope: Scope) -> ResolvedType | None:
        for current in self.arena.ancestors(scope.handle):
            if name in current.type_params:
                return self._type_variable(name, current.type_params[name], current)
            if name in current.types:
                return self.declared(current.types[name])
            if current.kind.is_type and current.type_qn:
                member = self.member_type(current.type_qn, name)
                if member is not None:
                    return self.declared(member)
        return None

    def _in_type_chain(self, name: str, info: TypeInfo, type_vars: tuple[str, ...]) -> ResolvedType | None:
        if name in type_vars:
            return ResolvedType(name, SymbolKind.TYPE_PARAMETER, bound=OBJECT)
        current: TypeInfo | None = info
        while current is not None:
            if name in current.type_params:
                bound = current.type_params[name]
                resolved_bound = OBJECT if bound in ("Object", name) else self.resolve_name(bound, info=current)
                return ResolvedType(name, SymbolKind.TYPE_PARAMETER, bound=resolved_bound)
            if current.name == name and current.kind != SymbolKind.ANONYMOUS_CLASS:
                return self.declared(current.qualified_name)
            member = self.member_type(current.qualified_name, name)
            if member is not None:
                return self.declared(member)
            current = self.get_type(current.outer)
        return None

    def _in_context(self, name: str, context: UnitContext) -> ResolvedType | None:
        imports = context.imports
        if name in imports.single:
            return self.declared(imports.single[name])

        local = self.index.type_in_package(context.package, name)
        if local is not None:
            return self.declared(local.qualified_name)

        for package in imports.wildcards:
            found = self.index.type_in_package(package, name)
            if found is not None:
                return self.declared(found.qualified_name)
            outer = self.get_type(package)
            if outer is not None and name in outer.member_types:
                return self.declared(outer.member_types[name])
            builtin = builtins.in_known_package(package, name)
            if builtin is not None:
                return ResolvedType(builtin[0], builtin[1], is_external=True)

        builtin = builtins.java_lang(name) or builtins.builtin_type(name)
        if builtin is not None:
            return ResolvedType(builtin[0], builtin[1], is_external=True)

        external = self.index.external_type(name)
        if external is not None:
            return ResolvedType(external, SymbolKind.EXTERNAL, is_external=True)
        return None

    def _type_variable(self, name: str, bound: str, scope: Scope) -> ResolvedType:
        if bound in ("Object", name):
            return ResolvedType(name, SymbolKind.TYPE_PARAMETER, bound=OBJECT)
        parent = self.arena.scope(scope.parent) if scope.parent is not None else scope
        resolved_bound = self.resolve_name(bound, scope=parent)
        return ResolvedType(name, SymbolKind.TYPE_PARAMETER, bound=resolved_bound)

    def _descend(self, found: ResolvedType, parts: list[str]) -> ResolvedType:
        current = found
        for part in parts:
            member = None if current.is_external else self.member_type(current.qualified_name, part)
            if member is not None:
                current = self.declared(member)
            else:
                current = ResolvedType(f"{current.qualified_name}.{part}", SymbolKind.EXTERNAL, is_external=True)
        return current

    def _qualified(self, name: str) -> ResolvedType:
        """Fully qualified name, possibly naming a member type (`pkg.Outer.Inner`)."""
        parts = name.split(".")
        for cut in range(len(parts), 0, -1):
            prefix = ".".join(parts[:cut])
            if self.get_type(prefix) is not None:
                return self._descend(self.declared(prefix), parts[cut:])
        return self.declared(name)

    # ============================================================
    # Hierarchy
    # ============================================================

    def supertypes(self, qualified_name: str) -> list[ResolvedType]:
        """
        Direct supertypes: superclass first, then interfaces in declaration order.

        Enums and records get their implicit java.lang supertype. Cyclic
        hierarchies are cut at the first revisit.
        """
        cached = self._supertypes.get(qualified_name)
        if cached is not None:
            return cached
        if qualified_name in self._resolving:
            return []
        info = self.get_type(qualified_name)
        if info is None:
            return []

        self._resolving.add(qualified_name)
        try:
            result: list[ResolvedType] = []
            if info.superclass:
                result.append(self._resolve_supertype(info.superclass, info))
            elif info.kind == SymbolKind.ENUM:
                result.append(ResolvedType("java.lang.Enum", SymbolKind.CLASS, is_external=True))
            elif info.kind == SymbolKind.RECORD:
                result.append(ResolvedType("java.lang.Record", SymbolKind.CLASS, is_external=True))
            for text in info.interfaces:
                result.append(self._resolve_supertype(text, info))
        finally:
            self._resolving.discard(qualified_name)

        self._supertypes[qualified_name] = result
        return result

    def superclass(self, qualified_name: str) -> ResolvedType | None:
        info = self.get_type(qualified_name)
        if info is None or info.is_interface:
            return None
        supertypes = self.supertypes(qualified_name)
        if supertypes and (info.superclass or info.kind in (SymbolKind.ENUM, SymbolKind.RECORD)):
            return supertypes[0]
        return OBJECT

    def _resolve_supertype(self, text: str, info: TypeInfo) -> ResolvedType:
        resolved = self.resolve_in_type(text, info)
        if resolved is None:
            return ResolvedType(text, SymbolKind.UNKNOWN, is_external=True)
        return resolved

    def hierarchy(self, qualified_name: str) -> list[tuple[str, int]]:
        """Breadth-first (type, depth) walk of the type and all its supertypes."""
        seen: set[str] = set()
        order: list[tuple[str, int]] = []
        queue = deque([(qualified_name, 0)])
        while queue:
            current, depth = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            order.append((current, depth))
            for supertype in self.supertypes(current):
                queue.append((supertype.qualified_name, depth + 1))
        return order

    def is_subtype(self, qualified_name: str, ancestor: str) -> bool:
        if qualified_name == ancestor or ancestor == OBJECT.qualified_name:
            return True
        return any(name == ancestor for name, _ in self.hierarchy(qualified_name))

    def member_type(self, qualified_name: str, name: str) -> str | None:
        """Member type `name` declared in the type or inherited from a supertype."""
        for current, _ in self.hierarchy(qualified_name):
            info = self.get_type(current)
            if info is not None and name in info.member_types:
                return info.member_types[name]
        return None

    # ============================================================
    # Symbol types and type arguments
    # ============================================================

    def symbol_type(self, symbol: Symbol) -> ResolvedType | None:
        """Static type of a symbol: variable type, method return type, or the type itself."""
        key = symbol.qualified_name
        if key in self.inferred:
            return self.inferred[key]
        if key in self._symbol_types:
            return self._symbol_types[key]

        result: ResolvedType | None
        if symbol.kind.is_type:
            result = self.declared(symbol.qualified_name)
        elif symbol.kind == SymbolKind.CONSTRUCTOR and symbol.owner:
            result = self.declared(symbol.owner)
        elif symbol.declared_type is None:
            result = None
        elif symbol.file_path == self.unit.file_path:
            result = self.resolve(symbol.declared_type, self._declaring_scope(symbol))
        else:
            info = self.get_type(symbol.owner)
            type_vars = tuple(symbol.metadata.get("type_parameters", ()))
            result = self.resolve_in_type(symbol.declared_type, info, type_vars) if info is not None else None

        self._symbol_types[key] = result
        return result

    def _declaring_scope(self, symbol: Symbol) -> Scope:
        """Scope the declared type is written in; generic methods see their own type variables."""
        scope = self.arena.scope(symbol.scope)
        if symbol.kind == SymbolKind.METHOD and symbol.metadata.get("type_parameters"):
            for handle in scope.children:
                child = self.arena.scope(handle)
                if child.owner == symbol.handle:
                    return child
        return scope

    def erasure(self, resolved: ResolvedType | None) -> ResolvedType | None:
        """Type variables are looked up through their bound."""
        if resolved is None or resolved.kind != SymbolKind.TYPE_PARAMETER:
            return resolved
        bound = resolved.bound or OBJECT
        return bound.with_dimensions(bound.dimensions + resolved.dimensions)

    def type_arguments(self, text: str | None, scope: Scope) -> list[TypeArgument]:
        """Every type-argument position of a written type, outermost first."""
        ref = parse_type(text)
        if ref is None or not ref.arguments and not ref.is_wildcard:
            return []
        result: list[TypeArgument] = []
        self._collect_arguments(ref, self.resolve_ref(ref, scope=scope), 1, scope, result)
        return result

    def _collect_arguments(
        self, ref: TypeRef, parent: ResolvedType, depth: int, scope: Scope, out: list[TypeArgument]
    ) -> None:
        for index, argument in enumerate(ref.arguments):
            if argument.is_wildcard:
                target = self.resolve_ref(argument.bound, scope=scope) if argument.bound is not None else OBJECT
                out.append(TypeArgument(parent, target, index, depth, argument.wildcard))
                if argument.bound is not None:
                    self._collect_arguments(argument.bound, target, depth + 1, scope, out)
            else:
                target = self.resolve_ref(argument, scope=scope)
                out.append(TypeArgument(parent, target, index, depth))
                self._collect_arguments(argument, target, depth + 1, scope, out)

    def _same_unit(self, info: TypeInfo) -> bool:
        return info.context.file_path == self.unit.file_path and info.qualified_name in self.unit.types
