"""
Member Resolver

Field and method lookup rooted at a type: breadth-first over the ordered
supertype list (superclass first, then interfaces), shallowest match wins,
ties between unrelated owners are reported as `ambiguous_member`.
"""

from dataclasses import dataclass

from ..ir.models import Diagnostic, ResolvedType, Scope, Span, Symbol, SymbolKind, UnitDeclarations
from . import builtins
from .type_resolver import TypeResolver


@dataclass(frozen=True)
class MemberMatch:
    """
    Result of a member lookup.

    Attributes:
        owner: Type the member was found on
        depth: Supertype distance from the lookup root (0 = the type itself)
        symbol: Declared member, None for builtin JDK members
        member_type: Qualified type of a builtin field / return type of a builtin method
        ambiguous: Other unrelated owners declaring the member at the same depth
        builtin_name: Member name, for builtin JDK members
    """

    owner: str
    depth: int
    symbol: Symbol | None = None
    member_type: str | None = None
    ambiguous: tuple[str, ...] = ()
    builtin_name: str = ""

    @property
    def target(self) -> str:
        if self.symbol is not None:
            return self.symbol.qualified_name
        return f"{self.owner}.{self.builtin_name}"

    @property
    def is_static(self) -> bool:
        return self.symbol is not None and self.symbol.is_static

    @property
    def candidates(self) -> tuple[str, ...]:
        """Every unrelated owner of an ambiguous member, this match's owner first."""
        return (self.owner, *self.ambiguous) if self.ambiguous else ()


class MemberResolver:
    """Looks up fields and methods of a type, and checks their visibility."""

    def __init__(self, unit: UnitDeclarations, types: TypeResolver):
        self.unit = unit
        self.types = types
        self.diagnostics: list[Diagnostic] = []
        self._reported: set[tuple[str, tuple[str, ...]]] = set()

    # ============================================================
    # Fields
    # ============================================================

    def find_field(self, type_qn: str | None, name: str, span: Span | None = None) -> MemberMatch | None:
        if not type_qn:
            return None
        matches: list[MemberMatch] = []
        best_depth: int | None = None
        for owner, depth in self.types.hierarchy(type_qn):
            if best_depth is not None and depth > best_depth:
                break
            info = self.types.get_type(owner)
            if info is not None and name in info.fields:
                matches.append(MemberMatch(owner, depth, symbol=info.fields[name]))
                best_depth = depth
            elif info is None:
                builtin = builtins.BUILTIN_FIELDS.get(owner, {}).get(name)
                if builtin is not None:
                    matches.append(MemberMatch(owner, depth, member_type=builtin, builtin_name=name))
                    best_depth = depth

        if not matches:
            return None
        first = matches[0]
        ambiguous = self._unrelated(first.owner, [m.owner for m in matches[1:]])
        if ambiguous:
            self._report_ambiguous(name, first.owner, ambiguous, span)
            return MemberMatch(first.owner, first.depth, first.symbol, first.member_type, ambiguous, first.builtin_name)
        return first

    # ============================================================
    # Methods
    # ============================================================

    def find_method(
        self,
        type_qn: str | None,
        name: str,
        arg_types: list[ResolvedType | None] | None = None,
        span: Span | None = None,
    ) -> MemberMatch | None:
        """
        Resolve a method call on a type.

        Overridden signatures resolve to the most derived declaration; the
        remaining overloads are ranked by select_overload().
        """
        if not type_qn:
            return None
        by_signature: dict[tuple[str, ...], list[MemberMatch]] = {}
        builtin: MemberMatch | None = None
        for owner, depth in self.types.hierarchy(type_qn):
            info = self.types.get_type(owner)
            if info is None:
                returns = builtins.BUILTIN_METHOD_RETURNS.get(owner, {}).get(name)
                if returns is not None and builtin is None:
                    builtin = MemberMatch(owner, depth, member_type=returns, builtin_name=name)
                continue
            for method in info.methods.get(name, []):
                if method.kind != SymbolKind.METHOD:
                    continue
                matches = by_signature.setdefault(method.parameter_types, [])
                if not matches or matches[0].depth == depth:
                    matches.append(MemberMatch(owner, depth, symbol=method))

        if not by_signature:
            if builtin is not None:
                return builtin
            return None

        candidates = [matches[0] for matches in by_signature.values()]
        chosen = self.select_overload(candidates, arg_types)
        same = by_signature[chosen.symbol.parameter_types]
        ambiguous = self._unrelated(chosen.owner, [m.owner for m in same[1:] if not self._is_abstract(m.symbol)])
        if ambiguous and not self._is_abstract(chosen.symbol):
            self._report_ambiguous(name, chosen.owner, ambiguous, span)
            return MemberMatch(chosen.owner, chosen.depth, chosen.symbol, ambiguous=ambiguous)
        return chosen

    def find_constructor(
        self, type_qn: str | None, arg_types: list[ResolvedType | None] | None = None
    ) -> MemberMatch | None:
        info = self.types.get_type(type_qn)
        if info is None:
            return None
        candidates = [MemberMatch(info.qualified_name, 0, symbol=c) for c in info.constructors()]
        if not candidates:
            return None
        return self.select_overload(candidates, arg_types)

    def select_overload(
        self, candidates: list[MemberMatch], arg_types: list[ResolvedType | None] | None
    ) -> MemberMatch:
        """
        Pick one overload.

        Arity first (varargs accept n-1 or more arguments), then how well the
        known argument types match the erased parameter types, then lookup
        depth and declaration order.
        """
        if arg_types is None or len(candidates) == 1:
            return candidates[0]
        count = len(arg_types)

        def arity(match: MemberMatch) -> int:
            params = len(match.symbol.parameter_types)
            if params == count:
                return 2
            if match.symbol.is_varargs and count >= params - 1:
                return 1
            return 0

        viable = [m for m in candidates if arity(m)] or candidates
        ranked = sorted(
            enumerate(viable),
            key=lambda item: (-arity(item[1]), -self._type_score(item[1].symbol, arg_types), item[1].depth, item[0]),
        )
        return ranked[0][1]

    def _type_score(self, method: Symbol, arg_types: list[ResolvedType | None]) -> int:
        score = 0
        params = method.parameter_types
        for i, arg in enumerate(arg_types):
            if arg is None or not params:
                continue
            param = params[min(i, len(params) - 1)]
            if method.is_varargs and i >= len(params) - 1 and param.endswith("[]") and arg.dimensions == 0:
                param = param[:-2]
            score += self._compatibility(param, arg)
        return score

    def _compatibility(self, param: str, arg: ResolvedType) -> int:
        dims = param.count("[]")
        base = param.replace("[]", "")
        if dims != arg.dimensions:
            return 0
        arg_simple = arg.qualified_name.rpartition(".")[2]
        if base in (arg.qualified_name, arg_simple):
            return 3
        if arg.is_primitive or base in builtins.PRIMITIVE_TYPES:
            return 1 if _BOXES.get(base) == arg_simple or _BOXES.get(arg_simple) == base else 0
        if base == "Object":
            return 1
        ancestors = {name.rpartition(".")[2] for name, _ in self.types.hierarchy(arg.qualified_name)}
        return 2 if base in ancestors else 0

    # ============================================================
    # Visibility
    # ============================================================

    def access_denied(self, symbol: Symbol | None, scope: Scope) -> str | None:
        """Denial reason for accessing a declared member from `scope`, or None."""
        if symbol is None or not symbol.owner:
            return None
        owner = self.types.get_type(symbol.owner)
        if owner is None or owner.is_interface:
            return None
        visibility = symbol.visibility
        if visibility == "public":
            return None

        site = self.unit.arena.enclosing_type(scope.handle)
        site_qn = site.type_qn if site is not None else None
        if visibility == "private":
            return None if self._top_level(site_qn) == self._top_level(owner.qualified_name) else "private"

        same_package = owner.package == self.unit.context.package
        if visibility == "package":
            return None if same_package else "package_private"
        if same_package:
            return None
        current = site_qn
        while current is not None:
            if self.types.is_subtype(current, owner.qualified_name):
                return None
            info = self.types.get_type(current)
            current = info.outer if info is not None else None
        return "protected"

    def _top_level(self, qualified_name: str | None) -> str | None:
        info = self.types.get_type(qualified_name)
        while info is not None and info.outer is not None:
            info = self.types.get_type(info.outer)
        return info.qualified_name if info is not None else qualified_name

    # ============================================================
    # Helpers
    # ============================================================

    def _unrelated(self, owner: str, others: list[str]) -> tuple[str, ...]:
        return tuple(
            other
            for other in others
            if other != owner
            and not self.types.is_subtype(owner, other)
            and not self.types.is_subtype(other, owner)
        )

    def _report_ambiguous(self, name: str, owner: str, others: tuple[str, ...], span: Span | None) -> None:
        key = (name, (owner, *others))
        if key in self._reported:
            return
        self._reported.add(key)
        self.diagnostics.append(
            Diagnostic(
                code="ambiguous_member",
                message=f"'{name}' is inherited from unrelated types {', '.join((owner, *others))}",
                file_path=self.unit.file_path,
                span=span,
                detail={"member": name, "chosen": owner, "candidates": [owner, *others]},
            )
        )

    @staticmethod
    def _is_abstract(symbol: Symbol | None) -> bool:
        return symbol is not None and "abstract" in symbol.modifiers


_BOXES = {
    "int": "Integer",
    "long": "Long",
    "double": "Double",
    "float": "Float",
    "boolean": "Boolean",
    "char": "Character",
    "byte": "Byte",
    "short": "Short",
    "Integer": "int",
    "Long": "long",
    "Double": "double",
    "Float": "float",
    "Boolean": "boolean",
    "Character": "char",
    "Byte": "byte",
    "Short": "short",
}
