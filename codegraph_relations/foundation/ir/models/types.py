"""
Type-level models: imports, unit context, declared type info, resolved types.
"""

from dataclasses import dataclass, field

from .core import SymbolKind
from .symbol import Symbol


@dataclass
class ImportTable:
    """
    Imports of one unit.

    Attributes:
        single: Simple name -> qualified name (`import a.b.C;`)
        wildcards: Package or type names (`import a.b.*;`)
        static_single: Member name -> owner qualified name (`import static a.B.m;`)
        static_wildcards: Owner qualified names (`import static a.B.*;`)
    """

    single: dict[str, str] = field(default_factory=dict)
    wildcards: list[str] = field(default_factory=list)
    static_single: dict[str, str] = field(default_factory=dict)
    static_wildcards: list[str] = field(default_factory=list)

    def add(self, path: str, is_static: bool = False, is_wildcard: bool = False) -> None:
        if is_static and is_wildcard:
            self.static_wildcards.append(path)
        elif is_static:
            owner, _, member = path.rpartition(".")
            self.static_single[member] = owner
        elif is_wildcard:
            self.wildcards.append(path)
        else:
            self.single[path.rpartition(".")[2]] = path


@dataclass
class UnitContext:
    """Name-resolution context shared by every type of one unit."""

    file_path: str
    package: str = ""
    imports: ImportTable = field(default_factory=ImportTable)

    def qualify(self, name: str) -> str:
        return f"{self.package}.{name}" if self.package else name


@dataclass
class TypeInfo:
    """
    Declared type, as stored in the project index.

    Supertypes are kept as written and resolved lazily (in the declaring
    unit's context) once every unit has been declared.

    Attributes:
        qualified_name: Type identity
        kind: Class/Interface/Enum/Record/AnnotationType/AnonymousClass
        symbol: Declaring symbol
        context: Declaring unit's package/imports
        scope: Type scope handle in the declaring unit's arena
        outer: Enclosing type's qualified name (lexically), if any
        superclass: Raw `extends` type of a class
        interfaces: Raw implemented (or, for interfaces, extended) types in declaration order
        type_params: Type variable name -> erased bound
        fields: Fields and enum constants
        methods: Methods and constructors by simple name, overloads in declaration order
        member_types: Member type simple name -> qualified name
        is_static: Top-level, static nested, or implicitly static (interfaces, enums, records)
    """

    qualified_name: str
    name: str
    kind: SymbolKind
    symbol: Symbol
    context: UnitContext
    scope: int
    outer: str | None = None
    superclass: str | None = None
    interfaces: list[str] = field(default_factory=list)
    type_params: dict[str, str] = field(default_factory=dict)
    fields: dict[str, Symbol] = field(default_factory=dict)
    methods: dict[str, list[Symbol]] = field(default_factory=dict)
    member_types: dict[str, str] = field(default_factory=dict)
    is_static: bool = True

    @property
    def package(self) -> str:
        return self.context.package

    @property
    def is_interface(self) -> bool:
        return self.kind in (SymbolKind.INTERFACE, SymbolKind.ANNOTATION_TYPE)

    def add_method(self, symbol: Symbol) -> None:
        self.methods.setdefault(symbol.name, []).append(symbol)

    def constructors(self) -> list[Symbol]:
        return [m for m in self.methods.get(self.constructor_name, []) if m.kind == SymbolKind.CONSTRUCTOR]

    @property
    def constructor_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class ResolvedType:
    """
    Result of resolving a type reference.

    Attributes:
        qualified_name: Erased element type identity (e.g. "java.util.List", "int", "T")
        kind: Class/Interface/... for declared types, Primitive, TypeParameter, External or Unknown
        dimensions: Array dimension count
        is_external: Not declared in the analysed sources
        type_arguments: Resolved type arguments, in order (empty when raw or non-generic)
        bound: Erased bound, for type variables
    """

    qualified_name: str
    kind: SymbolKind
    dimensions: int = 0
    is_external: bool = False
    type_arguments: tuple["ResolvedType", ...] = ()
    bound: "ResolvedType | None" = None

    @property
    def is_primitive(self) -> bool:
        return self.kind == SymbolKind.PRIMITIVE

    @property
    def is_array(self) -> bool:
        return self.dimensions > 0

    def element(self) -> "ResolvedType":
        """Type of one array access (`a[i]`)."""
        return ResolvedType(
            self.qualified_name, self.kind, max(self.dimensions - 1, 0), self.is_external, self.type_arguments
        )

    def with_dimensions(self, dimensions: int) -> "ResolvedType":
        return ResolvedType(self.qualified_name, self.kind, dimensions, self.is_external, self.type_arguments)

    @property
    def display(self) -> str:
        return self.qualified_name + "[]" * self.dimensions
