"""
Qualified Name Strategy

Deterministic identity for every declaration:

- types:          "pkg.Outer.Inner"
- methods:        "pkg.Outer.run(String,int[])"   (erased parameter types)
- fields:         "pkg.Outer.count"
- params/locals:  "pkg.Outer.run(String).x"
- block locals:   "pkg.Outer.run(String).block$2.x$1"
- lambdas:        "pkg.Outer.run(String).lambda$1", nested ".lambda$1.lambda$1"
- anonymous:      "pkg.Outer.run(String).$1"
- initializers:   "pkg.Outer.$static$1", "pkg.Outer.$instance$1"
"""

import re
from collections.abc import Iterable, Mapping

from .models import Scope, ScopeArena, ScopeKind

_ANNOTATION_RE = re.compile(r"@[\w.]+(\s*\([^)]*\))?\s*")
_MODIFIER_RE = re.compile(r"\bfinal\s+")


def strip_generics(raw: str) -> str:
    """Remove every `<...>` section, nested ones included."""
    out = []
    depth = 0
    for ch in raw:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth = max(depth - 1, 0)
        elif depth == 0:
            out.append(ch)
    return "".join(out)


def erase_type(raw: str, type_vars: Mapping[str, str] | None = None) -> str:
    """
    Structural erasure of a type as written.

    Generic arguments, annotations and `final` are dropped, varargs become
    an array dimension, and type variables erase to their bound.

    Examples:
        "Map<String, List<Integer>>" -> "Map"
        "String..."                  -> "String[]"
        "T[]" with {"T": "Object"}   -> "Object[]"
    """
    text = _MODIFIER_RE.sub("", _ANNOTATION_RE.sub("", raw))
    varargs = text.rstrip().endswith("...")
    text = strip_generics(text.replace("...", ""))
    text = "".join(text.split())

    dims = text.count("[]")
    base = text.replace("[]", "")
    if type_vars and base in type_vars:
        base = type_vars[base]
    if varargs:
        dims += 1
    return base + "[]" * dims


def method_signature(name: str, parameter_types: Iterable[str]) -> str:
    """`name(T1,T2)` from already erased parameter types."""
    return f"{name}({','.join(parameter_types)})"


def join(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def indexed(name: str, index: int) -> str:
    return f"{name}${index}"


class QualifiedNameBuilder:
    """
    Issues qualified names against a unit's Scope Tree.

    Every method takes the handle of the scope the declaration lives in; an
    unknown handle raises ScopeContractError (via the arena). Issued names
    are tracked so a redeclaration at the same level still gets a distinct
    name.
    """

    def __init__(self, arena: ScopeArena):
        self.arena = arena
        self._issued: set[str] = set()

    def _unique(self, qualified_name: str) -> str:
        candidate = qualified_name
        n = 1
        while candidate in self._issued:
            n += 1
            candidate = indexed(qualified_name, n)
        self._issued.add(candidate)
        return candidate

    def _naming_owner(self, handle: int) -> Scope:
        """Nearest scope that numbers lambdas and anonymous classes."""
        scope = self.arena.enclosing(handle, lambda s: s.kind.is_function or s.kind.is_type or s.kind == ScopeKind.UNIT)
        return scope if scope is not None else self.arena.scope(handle)

    def for_type(self, handle: int, name: str) -> str:
        scope = self.arena.scope(handle)
        if scope.kind == ScopeKind.BLOCK:
            scope = self._naming_owner(handle)
        return self._unique(join(scope.naming_prefix, name))

    def for_method(self, handle: int, name: str, parameter_types: Iterable[str]) -> str:
        scope = self.arena.scope(handle)
        return self._unique(join(scope.naming_prefix, method_signature(name, parameter_types)))

    def for_member(self, handle: int, name: str) -> str:
        """Fields, enum constants and record components."""
        return self._unique(join(self.arena.scope(handle).naming_prefix, name))

    def for_variable(self, handle: int, name: str) -> str:
        """Parameters and locals; block-level locals are counted per block."""
        scope = self.arena.scope(handle)
        if scope.kind == ScopeKind.BLOCK:
            k = scope.next_index(f"var:{name}")
            return self._unique(join(scope.naming_prefix, indexed(name, k)))
        return self._unique(join(scope.naming_prefix, name))

    def for_block(self, parent: int) -> str:
        scope = self.arena.scope(parent)
        return self._unique(join(scope.naming_prefix, indexed("block", scope.next_index("block"))))

    def for_lambda(self, handle: int) -> str:
        owner = self._naming_owner(handle)
        return self._unique(join(owner.naming_prefix, indexed("lambda", owner.next_index("lambda"))))

    def for_anonymous(self, handle: int) -> str:
        owner = self._naming_owner(handle)
        return self._unique(join(owner.naming_prefix, f"${owner.next_index('anonymous')}"))

    def for_initializer(self, handle: int, is_static: bool) -> str:
        scope = self.arena.scope(handle)
        label = "$static" if is_static else "$instance"
        return self._unique(join(scope.naming_prefix, indexed(label, scope.next_index(label))))
