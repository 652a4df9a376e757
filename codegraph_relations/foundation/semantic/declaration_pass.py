"""
Declaration Pass

Single top-down walk that builds a unit's Scope Tree and registers every
declared Symbol (types, members, parameters, locals, lambdas, anonymous
classes, initializers). Runs before any expression pass so forward
references resolve regardless of textual order.
"""

from typing import Any

from tree_sitter import Node as TSNode

from codegraph_relations.infra.config import ExtractionConfig
from codegraph_relations.infra.observability import get_logger

from ..ir.models import (
    Diagnostic,
    ImportTable,
    Scope,
    ScopeArena,
    ScopeKind,
    Symbol,
    SymbolKind,
    TypeInfo,
    UnitContext,
    UnitDeclarations,
)
from ..ir.qualified_names import QualifiedNameBuilder, erase_type
from ..parsing import AstTree

logger = get_logger(__name__)

TYPE_DECLARATIONS = {
    "class_declaration": SymbolKind.CLASS,
    "interface_declaration": SymbolKind.INTERFACE,
    "enum_declaration": SymbolKind.ENUM,
    "record_declaration": SymbolKind.RECORD,
    "annotation_type_declaration": SymbolKind.ANNOTATION_TYPE,
}

ANNOTATION_NODES = ("marker_annotation", "annotation")


class DeclarationPass:
    """
    Builds the Scope Tree of one unit.

    Example:
        ```python
        ast = AstTree.parse(SourceFile.from_content("A.java", code))
        declarations = DeclarationPass(ast).run()
        declarations.symbols["pkg.A.run()"]
        ```
    """

    def __init__(self, ast: AstTree, config: ExtractionConfig | None = None):
        self._ast = ast
        self._config = config or ExtractionConfig()
        self._file_path = ast.source.file_path
        self._arena = ScopeArena(self._file_path)
        self._names = QualifiedNameBuilder(self._arena)
        self._context = UnitContext(file_path=self._file_path)
        self._types: dict[str, TypeInfo] = {}
        self._diagnostics: list[Diagnostic] = []
        self._handlers = {
            "package_declaration": self._skip,
            "import_declaration": self._skip,
            "field_declaration": self._declare_fields,
            "constant_declaration": self._declare_fields,
            "method_declaration": self._declare_method,
            "constructor_declaration": self._declare_method,
            "compact_constructor_declaration": self._declare_method,
            "annotation_type_element_declaration": self._declare_method,
            "enum_constant": self._declare_enum_constant,
            "static_initializer": self._declare_initializer,
            "block": self._declare_block,
            "switch_block": self._declare_block,
            "local_variable_declaration": self._declare_locals,
            "lambda_expression": self._declare_lambda,
            "object_creation_expression": self._visit_object_creation,
            "for_statement": self._declare_for,
            "enhanced_for_statement": self._declare_enhanced_for,
            "catch_clause": self._declare_catch,
            "try_with_resources_statement": self._declare_try_with_resources,
            "instanceof_expression": self._declare_pattern,
            "type_pattern": self._declare_type_pattern,
        }
        for node_type in TYPE_DECLARATIONS:
            self._handlers[node_type] = self._declare_type

    # ============================================================
    # Entry point
    # ============================================================

    def run(self) -> UnitDeclarations:
        """
        Walk the unit and return its declarations.

        Returns:
            UnitDeclarations with the populated arena, symbols and types
        """
        root = self._ast.root
        self._read_header(root)

        unit_scope = self._arena.new_scope(ScopeKind.UNIT, self._context.package)
        self._arena.bind_node(root, unit_scope)
        if self._context.package:
            self._arena.add_symbol(
                self._context.package,
                self._context.package.rpartition(".")[2],
                SymbolKind.PACKAGE,
                unit_scope.handle,
            )

        for child in root.named_children:
            self._visit(child, unit_scope)

        symbols = {symbol.qualified_name: symbol for symbol in self._arena.symbols}
        logger.debug(
            "declaration_pass_complete",
            file_path=self._file_path,
            scopes=len(self._arena.scopes),
            symbols=len(symbols),
            types=len(self._types),
        )
        return UnitDeclarations(
            context=self._context,
            arena=self._arena,
            tree=self._ast,
            symbols=symbols,
            types=self._types,
            diagnostics=self._diagnostics,
        )

    def _read_header(self, root: TSNode) -> None:
        """Package and imports come first so member types resolve against them."""
        imports = ImportTable()
        for child in root.named_children:
            if child.type == "package_declaration":
                name = next((c for c in child.named_children if c.type in ("scoped_identifier", "identifier")), None)
                self._context.package = self._text(name)
            elif child.type == "import_declaration":
                is_static = any(c.type == "static" for c in child.children)
                is_wildcard = any(c.type == "asterisk" for c in child.children)
                path = next((c for c in child.named_children if c.type in ("scoped_identifier", "identifier")), None)
                if path is not None:
                    imports.add(self._text(path), is_static=is_static, is_wildcard=is_wildcard)
        self._context.imports = imports

    # ============================================================
    # Traversal
    # ============================================================

    def _visit(self, node: TSNode, scope: Scope) -> None:
        if node.type == "ERROR" or node.is_missing:
            self._skipped(node)
            return

        handler = self._handlers.get(node.type)
        if handler is not None:
            handler(node, scope)
            return

        for child in node.named_children:
            self._visit(child, scope)

    def _visit_children(self, node: TSNode | None, scope: Scope) -> None:
        if node is None:
            return
        for child in node.named_children:
            self._visit(child, scope)

    def _visit_body(self, body: TSNode | None, scope: Scope) -> None:
        """Visit a body block's statements directly in `scope` (no new block scope)."""
        if body is None:
            return
        if body.type in ("block", "constructor_body"):
            self._arena.bind_node(body, scope)
            self._visit_children(body, scope)
        else:
            self._visit(body, scope)

    def _skip(self, node: TSNode, scope: Scope) -> None:
        return None

    def _skipped(self, node: TSNode) -> None:
        snippet = self._text(node)[:60]
        self._diagnostics.append(
            Diagnostic(
                code="skipped_node",
                message=f"Malformed syntax skipped: {snippet!r}",
                file_path=self._file_path,
                span=self._ast.get_span(node),
                detail={"node_type": node.type},
            )
        )

    # ============================================================
    # Types
    # ============================================================

    def _declare_type(self, node: TSNode, scope: Scope) -> None:
        kind = TYPE_DECLARATIONS[node.type]
        name = self._text(node.child_by_field_name("name"))
        modifiers, annotations = self._modifiers(node)
        outer_scope = self._arena.enclosing_type(scope.handle)
        outer = outer_scope.type_qn if outer_scope is not None else None
        is_member = scope.kind.is_type
        is_static = (
            outer is None
            or "static" in modifiers
            or kind != SymbolKind.CLASS
            or (is_member and self._types[outer].is_interface)
        )
        type_params = self._type_parameters(node)
        superclass, interfaces = self._supertypes(node)

        qualified_name = self._names.for_type(scope.handle, name)
        symbol = self._arena.add_symbol(
            qualified_name,
            name,
            kind,
            scope.handle,
            span=self._ast.get_span(node),
            node=node,
            modifiers=frozenset(modifiers),
            annotations=tuple(annotations),
            position=node.start_byte,
            metadata={
                "owner": outer,
                "type_parameters": list(type_params),
                "superclass": superclass,
                "interfaces": list(interfaces),
                "is_local": not is_member and scope.kind != ScopeKind.UNIT,
            },
        )
        type_scope = self._arena.new_scope(
            ScopeKind.TYPE,
            qualified_name,
            parent=scope.handle,
            owner=symbol.handle,
            is_static=is_static and outer is not None,
            type_qn=qualified_name,
        )
        type_scope.type_params.update(type_params)
        self._arena.bind_node(node, type_scope)

        info = TypeInfo(
            qualified_name=qualified_name,
            name=name,
            kind=kind,
            symbol=symbol,
            context=self._context,
            scope=type_scope.handle,
            outer=outer,
            superclass=superclass,
            interfaces=interfaces,
            type_params=type_params,
            is_static=is_static,
        )
        self._types[qualified_name] = info
        scope.types[name] = qualified_name
        if is_member:
            self._types[outer].member_types[name] = qualified_name

        if kind == SymbolKind.RECORD:
            self._declare_record_components(node, type_scope, info)

        body = node.child_by_field_name("body")
        if body is not None:
            self._visit_children(body, type_scope)

        if self._config.emit_synthetic_members:
            self._add_synthetic_members(node, type_scope, info)

    def _supertypes(self, node: TSNode) -> tuple[str | None, list[str]]:
        superclass = None
        interfaces: list[str] = []
        superclass_node = node.child_by_field_name("superclass")
        if superclass_node is not None and superclass_node.named_children:
            superclass = self._text(superclass_node.named_children[0])

        interfaces_node = node.child_by_field_name("interfaces")
        if interfaces_node is None:
            interfaces_node = next((c for c in node.named_children if c.type == "extends_interfaces"), None)
        if interfaces_node is not None:
            for type_node in self.type_list(interfaces_node):
                interfaces.append(self._text(type_node))
        return superclass, interfaces

    @staticmethod
    def type_list(node: TSNode) -> list[TSNode]:
        """Types of a super_interfaces/extends_interfaces/throws clause."""
        types = []
        for child in node.named_children:
            if child.type == "type_list":
                types.extend(c for c in child.named_children if c.type not in ANNOTATION_NODES)
            elif child.type not in ANNOTATION_NODES:
                types.append(child)
        return types

    def _declare_record_components(self, node: TSNode, type_scope: Scope, info: TypeInfo) -> None:
        params = node.child_by_field_name("parameters")
        components = []
        for index, param in enumerate(self._formal_parameters(params)):
            name, raw_type, is_varargs, _, annotations, param_node = param
            symbol = self._arena.add_symbol(
                self._names.for_member(type_scope.handle, name),
                name,
                SymbolKind.FIELD,
                type_scope.handle,
                span=self._ast.get_span(param_node),
                node=param_node,
                declared_type=raw_type,
                modifiers=frozenset({"private", "final"}),
                annotations=tuple(annotations),
                position=param_node.start_byte,
                metadata={"owner": info.qualified_name, "record_component": True, "index": index},
            )
            self._declare_variable(type_scope, symbol, param_node)
            info.fields[name] = symbol
            components.append((name, raw_type, is_varargs))
        info.symbol.metadata["record_components"] = components

    def _add_synthetic_members(self, node: TSNode, type_scope: Scope, info: TypeInfo) -> None:
        """Implicit constructors, enum helpers and record accessors."""
        type_vars = self._type_vars(type_scope)
        if info.kind in (SymbolKind.CLASS, SymbolKind.ENUM) and not info.constructors():
            visibility = "private" if info.kind == SymbolKind.ENUM else "public"
            self._synthetic_method(type_scope, info, info.name, [], None, {visibility}, SymbolKind.CONSTRUCTOR)

        if info.kind == SymbolKind.ENUM:
            self._synthetic_method(type_scope, info, "values", [], f"{info.name}[]", {"public", "static"})
            self._synthetic_method(
                type_scope, info, "valueOf", [("name", "String", False)], info.name, {"public", "static"}
            )

        if info.kind == SymbolKind.RECORD:
            components = info.symbol.metadata.get("record_components", [])
            erased = [erase_type(raw, type_vars) for _, raw, _ in components]
            if not any(list(c.parameter_types) == erased for c in info.constructors()):
                self._synthetic_method(type_scope, info, info.name, components, None, {"public"}, SymbolKind.CONSTRUCTOR)
            for name, raw_type, _ in components:
                if not any(not m.parameter_types for m in info.methods.get(name, [])):
                    self._synthetic_method(type_scope, info, name, [], raw_type, {"public"})

    def _synthetic_method(
        self,
        type_scope: Scope,
        info: TypeInfo,
        name: str,
        params: list[tuple[str, str, bool]],
        return_type: str | None,
        modifiers: set[str],
        kind: SymbolKind = SymbolKind.METHOD,
    ) -> Symbol:
        type_vars = self._type_vars(type_scope)
        erased = [erase_type(raw, type_vars) for _, raw, _ in params]
        symbol = self._arena.add_symbol(
            self._names.for_method(type_scope.handle, name, erased),
            name,
            kind,
            type_scope.handle,
            declared_type=return_type,
            modifiers=frozenset(modifiers),
            position=info.symbol.position,
            metadata={
                "owner": info.qualified_name,
                "parameter_types": erased,
                "declared_parameter_types": [raw for _, raw, *_ in params],
                "parameter_names": [p[0] for p in params],
                "is_varargs": bool(params and params[-1][2]),
                "synthetic": True,
            },
        )
        self._arena.declare_method(type_scope, symbol)
        info.add_method(symbol)
        return symbol

    # ============================================================
    # Members
    # ============================================================

    def _declare_fields(self, node: TSNode, scope: Scope) -> None:
        info = self._types.get(scope.type_qn or "")
        modifiers, annotations = self._modifiers(node)
        if info is not None and info.is_interface:
            modifiers |= {"public", "static", "final"}
        raw_type = self._text(node.child_by_field_name("type"))

        for declarator in node.children_by_field_name("declarator"):
            name = self._text(declarator.child_by_field_name("name"))
            declared_type = raw_type + self._dimensions(declarator)
            symbol = self._arena.add_symbol(
                self._names.for_member(scope.handle, name),
                name,
                SymbolKind.FIELD,
                scope.handle,
                span=self._ast.get_span(declarator),
                node=declarator,
                declared_type=declared_type,
                modifiers=frozenset(modifiers),
                annotations=tuple(annotations),
                position=declarator.start_byte,
                metadata={"owner": scope.type_qn},
            )
            self._declare_variable(scope, symbol, declarator)
            if info is not None:
                info.fields.setdefault(name, symbol)

            value = declarator.child_by_field_name("value")
            if value is not None:
                init_scope = self._arena.new_scope(
                    ScopeKind.INITIALIZER,
                    symbol.qualified_name,
                    parent=scope.handle,
                    owner=symbol.handle,
                    is_static="static" in modifiers,
                )
                self._arena.bind_node(declarator, init_scope)
                self._visit(value, init_scope)

    def _declare_enum_constant(self, node: TSNode, scope: Scope) -> None:
        info = self._types[scope.type_qn]
        name = self._text(node.child_by_field_name("name"))
        _, annotations = self._modifiers(node)
        symbol = self._arena.add_symbol(
            self._names.for_member(scope.handle, name),
            name,
            SymbolKind.ENUM_CONSTANT,
            scope.handle,
            span=self._ast.get_span(node),
            node=node,
            declared_type=info.name,
            modifiers=frozenset({"public", "static", "final"}),
            annotations=tuple(annotations),
            position=node.start_byte,
            metadata={"owner": info.qualified_name},
        )
        self._declare_variable(scope, symbol, node)
        info.fields.setdefault(name, symbol)

        init_scope = self._arena.new_scope(
            ScopeKind.INITIALIZER, symbol.qualified_name, parent=scope.handle, owner=symbol.handle, is_static=True
        )
        self._arena.bind_node(node, init_scope)
        self._visit_children(node.child_by_field_name("arguments"), init_scope)
        body = node.child_by_field_name("body")
        if body is not None:
            self._declare_anonymous(body, info.name, init_scope)

    def _declare_method(self, node: TSNode, scope: Scope) -> None:
        info = self._types.get(scope.type_qn or "")
        is_constructor = node.type in ("constructor_declaration", "compact_constructor_declaration")
        kind = SymbolKind.CONSTRUCTOR if is_constructor else SymbolKind.METHOD
        name = self._text(node.child_by_field_name("name"))
        modifiers, annotations = self._modifiers(node)
        if info is not None and info.is_interface:
            modifiers.add("public")
            if not modifiers & {"default", "static", "private"}:
                modifiers.add("abstract")

        method_type_params = self._type_parameters(node)
        type_vars = {**self._type_vars(scope), **method_type_params}

        if node.type == "compact_constructor_declaration" and info is not None:
            params = [
                (n, raw, varargs, frozenset(), [], node)
                for n, raw, varargs in info.symbol.metadata.get("record_components", [])
            ]
        else:
            params = self._formal_parameters(node.child_by_field_name("parameters"))

        erased = [erase_type(raw, type_vars) for _, raw, *_ in params]
        return_type = None
        if not is_constructor:
            return_type = self._text(node.child_by_field_name("type")) + self._dimensions(node)
        throws = next((c for c in node.named_children if c.type == "throws"), None)

        symbol = self._arena.add_symbol(
            self._names.for_method(scope.handle, name, erased),
            name,
            kind,
            scope.handle,
            span=self._ast.get_span(node),
            node=node,
            declared_type=return_type,
            modifiers=frozenset(modifiers),
            annotations=tuple(annotations),
            position=node.start_byte,
            metadata={
                "owner": scope.type_qn,
                "parameter_types": erased,
                "declared_parameter_types": [raw for _, raw, *_ in params],
                "parameter_names": [p[0] for p in params],
                "is_varargs": bool(params and params[-1][2]),
                "type_parameters": list(method_type_params),
                "throws": [self._text(t) for t in self.type_list(throws)] if throws is not None else [],
                "is_compact": node.type == "compact_constructor_declaration",
            },
        )
        self._arena.declare_method(scope, symbol)
        if info is not None:
            info.add_method(symbol)

        method_scope = self._arena.new_scope(
            ScopeKind.METHOD,
            symbol.qualified_name,
            parent=scope.handle,
            owner=symbol.handle,
            is_static="static" in modifiers,
        )
        method_scope.type_params.update(method_type_params)
        self._arena.bind_node(node, method_scope)

        for index, (pname, raw_type, is_varargs, pmods, pannotations, pnode) in enumerate(params):
            self._declare_parameter(method_scope, pnode, pname, raw_type, index, is_varargs, pmods, pannotations)

        self._visit_body(node.child_by_field_name("body"), method_scope)

    def _declare_initializer(self, node: TSNode, scope: Scope) -> None:
        is_static = node.type == "static_initializer"
        qualified_name = self._names.for_initializer(scope.handle, is_static)
        symbol = self._arena.add_symbol(
            qualified_name,
            qualified_name.rpartition(".")[2],
            SymbolKind.INITIALIZER,
            scope.handle,
            span=self._ast.get_span(node),
            node=node,
            modifiers=frozenset({"static"}) if is_static else frozenset(),
            position=node.start_byte,
            metadata={"owner": scope.type_qn},
        )
        init_scope = self._arena.new_scope(
            ScopeKind.INITIALIZER, qualified_name, parent=scope.handle, owner=symbol.handle, is_static=is_static
        )
        self._arena.bind_node(node, init_scope)
        body = node if node.type == "block" else next((c for c in node.named_children if c.type == "block"), None)
        self._visit_body(body, init_scope)

    # ============================================================
    # Executable code
    # ============================================================

    def _declare_block(self, node: TSNode, scope: Scope) -> None:
        if scope.kind.is_type and node.type == "block":
            self._declare_initializer(node, scope)
            return
        block_scope = self._arena.new_scope(ScopeKind.BLOCK, self._names.for_block(scope.handle), parent=scope.handle)
        self._arena.bind_node(node, block_scope)
        self._visit_children(node, block_scope)

    def _new_block_scope(self, node: TSNode, scope: Scope) -> Scope:
        block_scope = self._arena.new_scope(ScopeKind.BLOCK, self._names.for_block(scope.handle), parent=scope.handle)
        self._arena.bind_node(node, block_scope)
        return block_scope

    def _declare_locals(self, node: TSNode, scope: Scope) -> None:
        modifiers, annotations = self._modifiers(node)
        raw_type = self._text(node.child_by_field_name("type"))
        for declarator in node.children_by_field_name("declarator"):
            name = self._text(declarator.child_by_field_name("name"))
            self._declare_local(
                scope,
                declarator,
                name,
                raw_type + self._dimensions(declarator),
                modifiers,
                annotations,
            )
            value = declarator.child_by_field_name("value")
            if value is not None:
                self._visit(value, scope)

    def _declare_local(
        self,
        scope: Scope,
        node: TSNode,
        name: str,
        raw_type: str | None,
        modifiers: set[str] | frozenset[str] = frozenset(),
        annotations: list[str] | None = None,
        **metadata: Any,
    ) -> Symbol:
        owner = self._arena.enclosing_function(scope.handle)
        symbol = self._arena.add_symbol(
            self._names.for_variable(scope.handle, name),
            name,
            SymbolKind.VARIABLE,
            scope.handle,
            span=self._ast.get_span(node),
            node=node,
            declared_type=raw_type,
            modifiers=frozenset(modifiers),
            annotations=tuple(annotations or ()),
            position=node.start_byte,
            metadata={"function": owner.naming_prefix if owner else None, **metadata},
        )
        self._declare_variable(scope, symbol, node)
        return symbol

    def _declare_parameter(
        self,
        scope: Scope,
        node: TSNode,
        name: str,
        raw_type: str | None,
        index: int,
        is_varargs: bool = False,
        modifiers: frozenset[str] | set[str] = frozenset(),
        annotations: list[str] | None = None,
    ) -> Symbol:
        symbol = self._arena.add_symbol(
            self._names.for_variable(scope.handle, name),
            name,
            SymbolKind.PARAMETER,
            scope.handle,
            span=self._ast.get_span(node),
            node=None if self._arena.symbol_for_node(node) is not None else node,
            declared_type=raw_type,
            modifiers=frozenset(modifiers),
            annotations=tuple(annotations or ()),
            position=node.start_byte,
            metadata={"function": scope.naming_prefix, "index": index, "is_varargs": is_varargs},
        )
        self._declare_variable(scope, symbol, node)
        return symbol

    def _declare_lambda(self, node: TSNode, scope: Scope) -> None:
        qualified_name = self._names.for_lambda(scope.handle)
        symbol = self._arena.add_symbol(
            qualified_name,
            qualified_name.rpartition(".")[2],
            SymbolKind.LAMBDA,
            scope.handle,
            span=self._ast.get_span(node),
            node=node,
            position=node.start_byte,
        )
        lambda_scope = self._arena.new_scope(ScopeKind.LAMBDA, qualified_name, parent=scope.handle, owner=symbol.handle)
        self._arena.bind_node(node, lambda_scope)

        params = node.child_by_field_name("parameters")
        if params is None:
            params = node.named_children[0] if node.named_children else None
        if params is not None and params.type == "identifier":
            self._declare_parameter(lambda_scope, params, self._text(params), None, 0)
        elif params is not None and params.type == "inferred_parameters":
            for index, ident in enumerate(c for c in params.named_children if c.type == "identifier"):
                self._declare_parameter(lambda_scope, ident, self._text(ident), None, index)
        elif params is not None and params.type == "formal_parameters":
            for index, (pname, raw, varargs, pmods, pannotations, pnode) in enumerate(self._formal_parameters(params)):
                self._declare_parameter(lambda_scope, pnode, pname, raw, index, varargs, pmods, pannotations)

        self._visit_body(node.child_by_field_name("body"), lambda_scope)

    def _visit_object_creation(self, node: TSNode, scope: Scope) -> None:
        for child in node.named_children:
            if child.type == "class_body":
                self._declare_anonymous(child, self._text(node.child_by_field_name("type")), scope)
            else:
                self._visit(child, scope)

    def _declare_anonymous(self, body: TSNode, supertype: str, scope: Scope) -> None:
        qualified_name = self._names.for_anonymous(scope.handle)
        outer_scope = self._arena.enclosing_type(scope.handle)
        outer = outer_scope.type_qn if outer_scope is not None else None
        symbol = self._arena.add_symbol(
            qualified_name,
            qualified_name.rpartition(".")[2],
            SymbolKind.ANONYMOUS_CLASS,
            scope.handle,
            span=self._ast.get_span(body),
            node=body,
            position=body.start_byte,
            metadata={"owner": outer, "supertype": supertype},
        )
        anon_scope = self._arena.new_scope(
            ScopeKind.ANONYMOUS_CLASS,
            qualified_name,
            parent=scope.handle,
            owner=symbol.handle,
            type_qn=qualified_name,
        )
        self._arena.bind_node(body, anon_scope)
        self._types[qualified_name] = TypeInfo(
            qualified_name=qualified_name,
            name=symbol.name,
            kind=SymbolKind.ANONYMOUS_CLASS,
            symbol=symbol,
            context=self._context,
            scope=anon_scope.handle,
            outer=outer,
            superclass=supertype,
            is_static=False,
        )
        self._visit_children(body, anon_scope)

    def _declare_for(self, node: TSNode, scope: Scope) -> None:
        for_scope = self._new_block_scope(node, scope)
        body = node.child_by_field_name("body")
        for child in node.named_children:
            if child == body:
                continue
            self._visit(child, for_scope)
        self._visit_body(body, for_scope)

    def _declare_enhanced_for(self, node: TSNode, scope: Scope) -> None:
        for_scope = self._new_block_scope(node, scope)
        modifiers, annotations = self._modifiers(node)
        name_node = node.child_by_field_name("name")
        raw_type = self._text(node.child_by_field_name("type")) + self._dimensions(node)
        self._visit(node.child_by_field_name("value"), for_scope)
        self._declare_local(for_scope, name_node, self._text(name_node), raw_type, modifiers, annotations, role="loop")
        self._visit_body(node.child_by_field_name("body"), for_scope)

    def _declare_catch(self, node: TSNode, scope: Scope) -> None:
        catch_scope = self._new_block_scope(node, scope)
        param = next((c for c in node.named_children if c.type == "catch_formal_parameter"), None)
        if param is not None:
            modifiers, annotations = self._modifiers(param)
            catch_type = next((c for c in param.named_children if c.type == "catch_type"), None)
            name_node = param.child_by_field_name("name")
            self._declare_local(
                catch_scope,
                param,
                self._text(name_node),
                self._text(catch_type),
                modifiers,
                annotations,
                role="catch_parameter",
            )
        self._visit_body(node.child_by_field_name("body"), catch_scope)

    def _declare_try_with_resources(self, node: TSNode, scope: Scope) -> None:
        try_scope = self._new_block_scope(node, scope)
        resources = node.child_by_field_name("resources")
        for resource in resources.named_children if resources is not None else []:
            if resource.type != "resource":
                continue
            type_node = resource.child_by_field_name("type")
            if type_node is None:
                self._visit_children(resource, try_scope)
                continue
            modifiers, annotations = self._modifiers(resource)
            name_node = resource.child_by_field_name("name")
            self._declare_local(
                try_scope,
                resource,
                self._text(name_node),
                self._text(type_node) + self._dimensions(resource),
                modifiers,
                annotations,
                role="resource",
            )
            self._visit(resource.child_by_field_name("value"), try_scope)
        self._visit_body(node.child_by_field_name("body"), try_scope)
        for child in node.named_children:
            if child.type in ("catch_clause", "finally_clause"):
                self._visit(child, scope)

    def _declare_pattern(self, node: TSNode, scope: Scope) -> None:
        self._visit(node.child_by_field_name("left"), scope)
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            type_node = node.child_by_field_name("right")
            self._declare_local(scope, name_node, self._text(name_node), self._text(type_node), role="pattern")
        pattern = node.child_by_field_name("pattern")
        if pattern is not None:
            self._visit(pattern, scope)

    def _declare_type_pattern(self, node: TSNode, scope: Scope) -> None:
        name_node = node.named_children[-1] if node.named_children else None
        if name_node is None or name_node.type != "identifier":
            return
        types = [c for c in node.named_children[:-1] if c.type != "modifiers"]
        type_node = types[0] if types else None
        self._declare_local(scope, name_node, self._text(name_node), self._text(type_node), role="pattern")

    # ============================================================
    # Helpers
    # ============================================================

    def _declare_variable(self, scope: Scope, symbol: Symbol, node: TSNode) -> None:
        if not self._arena.declare_variable(scope, symbol):
            self._diagnostics.append(
                Diagnostic(
                    code="duplicate_declaration",
                    message=f"'{symbol.name}' is already declared in this scope",
                    file_path=self._file_path,
                    span=self._ast.get_span(node),
                    detail={"qualified_name": symbol.qualified_name},
                )
            )

    def _formal_parameters(self, params: TSNode | None) -> list[tuple]:
        """(name, raw_type, is_varargs, modifiers, annotations, node) per parameter."""
        result: list[tuple] = []
        if params is None:
            return result
        for param in params.named_children:
            if param.type == "formal_parameter":
                modifiers, annotations = self._modifiers(param)
                raw_type = self._text(param.child_by_field_name("type")) + self._dimensions(param)
                name = self._text(param.child_by_field_name("name"))
                result.append((name, raw_type, False, frozenset(modifiers), annotations, param))
            elif param.type == "spread_parameter":
                modifiers, annotations = self._modifiers(param)
                type_node = next(
                    (c for c in param.named_children if c.type not in ("modifiers", "variable_declarator")
                     and c.type not in ANNOTATION_NODES),
                    None,
                )
                declarator = next((c for c in param.named_children if c.type == "variable_declarator"), None)
                name_node = declarator.child_by_field_name("name") if declarator is not None else None
                result.append((self._text(name_node), self._text(type_node) + "...", True, frozenset(modifiers), annotations, param))
        return result

    def _modifiers(self, node: TSNode) -> tuple[set[str], list[str]]:
        modifiers: set[str] = set()
        annotations: list[str] = []
        mods = next((c for c in node.children if c.type == "modifiers"), None)
        if mods is None:
            return modifiers, annotations
        for child in mods.children:
            if child.type in ANNOTATION_NODES:
                annotations.append(self._text(child.child_by_field_name("name")))
            else:
                modifiers.add(self._text(child))
        return modifiers, annotations

    def _type_parameters(self, node: TSNode) -> dict[str, str]:
        params: dict[str, str] = {}
        type_params = node.child_by_field_name("type_parameters")
        if type_params is None:
            type_params = next((c for c in node.named_children if c.type == "type_parameters"), None)
        if type_params is None:
            return params
        for param in type_params.named_children:
            if param.type != "type_parameter":
                continue
            name_node = next((c for c in param.named_children if c.type in ("type_identifier", "identifier")), None)
            bound = next((c for c in param.named_children if c.type == "type_bound"), None)
            bound_type = bound.named_children[0] if bound is not None and bound.named_children else None
            params[self._text(name_node)] = erase_type(self._text(bound_type)) if bound_type is not None else "Object"
        return params

    def _type_vars(self, scope: Scope) -> dict[str, str]:
        merged: dict[str, str] = {}
        for ancestor in reversed(list(self._arena.ancestors(scope.handle))):
            merged.update(ancestor.type_params)
        return merged

    def _dimensions(self, node: TSNode) -> str:
        dims = node.child_by_field_name("dimensions")
        return "[]" * self._text(dims).count("[") if dims is not None else ""

    def _text(self, node: TSNode | None) -> str:
        return self._ast.get_text(node)
