"""
Scope Tree

Scopes and Symbols of one unit live in a ScopeArena and refer to each other
through integer handles, so parent links never own their target.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from codegraph_relations.exceptions import ScopeContractError

from .core import ScopeKind, Span, SymbolKind
from .symbol import Symbol

NodeKey = tuple[int, int, str]


def node_key(node: Any) -> NodeKey:
    """Stable key of a tree-sitter node within one tree."""
    return (node.start_byte, node.end_byte, node.type)


@dataclass
class Scope:
    """
    Scope Tree node.

    Attributes:
        handle: Index in the arena
        kind: Scope kind
        naming_prefix: Qualified name prefix for declarations made here
        parent: Parent scope handle (None for the unit scope)
        owner: Handle of the symbol that introduced this scope
        is_static: Static context (static method/initializer/field initializer, static nested type)
        type_qn: Qualified name of the type, for type scopes
        children: Child scope handles, in creation order
        variables: Fields/parameters/locals declared at this level
        methods: Methods/constructors declared at this level, overloads in order
        types: Member or local types declared at this level (simple name -> qualified name)
        type_params: Type variables introduced here (name -> erased bound)
        counters: Per-kind sequence counters (block, lambda, anonymous, ...)
    """

    handle: int
    kind: ScopeKind
    naming_prefix: str
    parent: int | None = None
    owner: int | None = None
    is_static: bool = False
    type_qn: str | None = None
    children: list[int] = field(default_factory=list)
    variables: dict[str, int] = field(default_factory=dict)
    methods: dict[str, list[int]] = field(default_factory=dict)
    types: dict[str, str] = field(default_factory=dict)
    type_params: dict[str, str] = field(default_factory=dict)
    counters: dict[str, int] = field(default_factory=dict)

    def next_index(self, counter: str) -> int:
        """Advance and return a sequence counter (1-based, never decreases)."""
        value = self.counters.get(counter, 0) + 1
        self.counters[counter] = value
        return value


class ScopeArena:
    """
    Owns every Scope and Symbol of one unit.

    Handles are list indices and stay valid for the arena's lifetime.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self.scopes: list[Scope] = []
        self.symbols: list[Symbol] = []
        self._scope_by_node: dict[NodeKey, int] = {}
        self._symbol_by_node: dict[NodeKey, int] = {}

    # ============================================================
    # Scopes
    # ============================================================

    def new_scope(self, kind: ScopeKind, naming_prefix: str, parent: int | None = None, **attrs: Any) -> Scope:
        if parent is not None:
            self.scope(parent)
        scope = Scope(handle=len(self.scopes), kind=kind, naming_prefix=naming_prefix, parent=parent, **attrs)
        self.scopes.append(scope)
        if parent is not None:
            self.scopes[parent].children.append(scope.handle)
        return scope

    def scope(self, handle: int | None) -> Scope:
        if handle is None or not 0 <= handle < len(self.scopes):
            raise ScopeContractError("Scope does not exist", scope_handle=handle)
        return self.scopes[handle]

    def bind_node(self, node: Any, scope: Scope) -> None:
        self._scope_by_node[node_key(node)] = scope.handle

    def scope_for_node(self, node: Any) -> Scope | None:
        handle = self._scope_by_node.get(node_key(node))
        return None if handle is None else self.scopes[handle]

    def ancestors(self, handle: int) -> Iterator[Scope]:
        """Yield the scope itself, then each parent up to the unit scope."""
        current: int | None = handle
        while current is not None:
            scope = self.scope(current)
            yield scope
            current = scope.parent

    def enclosing(self, handle: int, predicate: Callable[[Scope], bool]) -> Scope | None:
        for scope in self.ancestors(handle):
            if predicate(scope):
                return scope
        return None

    def enclosing_type(self, handle: int) -> Scope | None:
        return self.enclosing(handle, lambda s: s.kind.is_type)

    def enclosing_function(self, handle: int) -> Scope | None:
        return self.enclosing(handle, lambda s: s.kind.is_function)

    def is_capture_boundary(self, scope: Scope) -> bool:
        """Lambdas, anonymous classes and non-static classes declared in a body."""
        if scope.kind.is_capture_boundary:
            return True
        if scope.kind != ScopeKind.TYPE or scope.is_static or scope.parent is None:
            return False
        return not (self.scope(scope.parent).kind.is_type or self.scope(scope.parent).kind == ScopeKind.UNIT)

    # ============================================================
    # Symbols
    # ============================================================

    def add_symbol(
        self,
        qualified_name: str,
        name: str,
        kind: SymbolKind,
        scope: int,
        span: Span | None = None,
        node: Any = None,
        **attrs: Any,
    ) -> Symbol:
        self.scope(scope)
        symbol = Symbol(
            handle=len(self.symbols),
            qualified_name=qualified_name,
            name=name,
            kind=kind,
            scope=scope,
            file_path=self.file_path,
            span=span,
            **attrs,
        )
        self.symbols.append(symbol)
        if node is not None:
            self._symbol_by_node[node_key(node)] = symbol.handle
        return symbol

    def symbol(self, handle: int) -> Symbol:
        return self.symbols[handle]

    def symbol_for_node(self, node: Any) -> Symbol | None:
        handle = self._symbol_by_node.get(node_key(node))
        return None if handle is None else self.symbols[handle]

    def declare_variable(self, scope: Scope, symbol: Symbol) -> bool:
        """Insert into the scope's variable table; False if the name is taken at this level."""
        if symbol.name in scope.variables:
            return False
        scope.variables[symbol.name] = symbol.handle
        return True

    def declare_method(self, scope: Scope, symbol: Symbol) -> None:
        scope.methods.setdefault(symbol.name, []).append(symbol.handle)

    def owner_symbol(self, scope: Scope) -> Symbol | None:
        return None if scope.owner is None else self.symbols[scope.owner]

    def __len__(self) -> int:
        return len(self.symbols)
