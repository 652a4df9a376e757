"""
Relation Emitter (expression pass)

Walks one unit after the project index is frozen and classifies every
declaration, statement and expression into relations:

    CREATE > THROW > CALL > ASSIGN > CAST > USE
    PARAMETER, RETURN, TYPE_ARG, EXTEND, IMPLEMENT, ANNOTATION (declarations)
    CAPTURE (appended last, by the capture analyzer)

The source of every relation is the symbol owning the innermost executable
scope (method, constructor, lambda, initializer, field initializer); type
level relations use the declaring type.
"""

import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from tree_sitter import Node as TSNode

from codegraph_relations.exceptions import InternalContractError
from codegraph_relations.infra.config import ExtractionConfig
from codegraph_relations.infra.observability import get_logger

from ..ir.models import (
    Binding,
    BindingKind,
    Diagnostic,
    Relation,
    RelationKind,
    ResolvedType,
    ScopeKind,
    Symbol,
    SymbolKind,
    UnitDeclarations,
    node_key,
)
from . import builtins
from .binder import Binder
from .capture import CaptureAnalyzer
from .member_resolver import MemberMatch, MemberResolver
from .project_index import ProjectIndex
from .type_resolver import TypeResolver

logger = get_logger(__name__)

# Relation kind -> emitting handlers. Checked for exhaustiveness on construction.
EMITTERS: dict[RelationKind, tuple[str, ...]] = {
    RelationKind.CREATE: ("_visit_object_creation", "_visit_array_creation", "_visit_method_reference"),
    RelationKind.THROW: ("_visit_throw", "_emit_throws_clause"),
    RelationKind.CALL: ("_visit_method_invocation", "_visit_method_reference", "_visit_constructor_invocation"),
    RelationKind.ASSIGN: ("_visit_assignment", "_visit_update", "_emit_initializer"),
    RelationKind.CAST: ("_visit_cast", "_visit_instanceof", "_visit_type_pattern"),
    RelationKind.USE: ("_visit_identifier", "_visit_field_access"),
    RelationKind.PARAMETER: ("_emit_parameters",),
    RelationKind.RETURN: ("_emit_return_type",),
    RelationKind.TYPE_ARG: ("_emit_type_args",),
    RelationKind.CAPTURE: ("_emit_captures",),
    RelationKind.EXTEND: ("_emit_supertypes",),
    RelationKind.IMPLEMENT: ("_emit_supertypes", "_emit_anonymous_supertype"),
    RelationKind.ANNOTATION: ("_emit_annotations",),
}

COMMENTS = frozenset({"line_comment", "block_comment", "comment"})

# Nodes never walked generically (handled by their parent, or carry no references)
SKIPPED = COMMENTS | {
    "package_declaration",
    "import_declaration",
    "modifiers",
    "marker_annotation",
    "annotation",
    "type_identifier",
    "scoped_type_identifier",
    "generic_type",
    "array_type",
    "integral_type",
    "floating_point_type",
    "boolean_type",
    "void_type",
    "type_arguments",
    "type_parameters",
    "dimensions",
    "superclass",
    "super_interfaces",
    "extends_interfaces",
    "permits",
    "throws",
    "formal_parameters",
    "formal_parameter",
    "spread_parameter",
    "catch_formal_parameter",
    "inferred_parameters",
    "variable_declarator",
    "break_statement",
    "continue_statement",
}

TYPE_NODES = frozenset(
    {
        "type_identifier",
        "scoped_type_identifier",
        "generic_type",
        "array_type",
        "integral_type",
        "floating_point_type",
        "boolean_type",
        "void_type",
    }
)

TYPE_DECLARATIONS = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "enum_declaration",
        "record_declaration",
        "annotation_type_declaration",
    }
)

_QUALIFIED_RE = re.compile(r"[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*")

_BOOLEAN_OPERATORS = frozenset({"==", "!=", "<", ">", "<=", ">=", "&&", "||", "!", "instanceof"})
_NUMERIC_ORDER = ("double", "float", "long", "int", "char", "short", "byte")


def _primitive(name: str) -> ResolvedType:
    return ResolvedType(name, SymbolKind.PRIMITIVE)


STRING = ResolvedType("java.lang.String", SymbolKind.CLASS, is_external=True)
BOOLEAN = _primitive("boolean")
INT = _primitive("int")


@dataclass(frozen=True)
class Usage:
    """How an expression is used at its site (USE `usage_role` and argument details)."""

    role: str = "read"
    argument_index: int | None = None
    call_site: str | None = None

    def attributes(self) -> dict:
        attributes: dict = {"usage_role": self.role}
        if self.role == "argument":
            attributes["argument_index"] = self.argument_index
            attributes["call_site"] = self.call_site
        return attributes


READ = Usage()


class RelationEmitter:
    """
    Expression pass for one unit.

    Example:
        ```python
        emitter = RelationEmitter(declarations, index)
        relations = emitter.run()
        emitter.diagnostics
        ```
    """

    def __init__(self, unit: UnitDeclarations, index: ProjectIndex, config: ExtractionConfig | None = None):
        self.unit = unit
        self.ast = unit.tree
        self.arena = unit.arena
        self.config = config or ExtractionConfig()
        self.types = TypeResolver(index, unit)
        self.members = MemberResolver(unit, self.types)
        self.binder = Binder(unit, self.types, self.members)
        self.captures = CaptureAnalyzer(self.arena)
        self.relations: list[Relation] = []
        self.diagnostics: list[Diagnostic] = []

        self._scope = self.arena.scope(unit.unit_scope)
        self._source: Symbol | None = None
        self._dry = False
        self._dry_types: dict = {}
        self._switch_types: list[ResolvedType | None] = []
        self._pattern_subject: str | None = None

        self._dispatch: dict[str, Callable[[TSNode, Usage], ResolvedType | None]] = {
            "field_declaration": self._visit_field_declaration,
            "constant_declaration": self._visit_field_declaration,
            "method_declaration": self._visit_method,
            "constructor_declaration": self._visit_method,
            "compact_constructor_declaration": self._visit_method,
            "annotation_type_element_declaration": self._visit_method,
            "enum_constant": self._visit_enum_constant,
            "local_variable_declaration": self._visit_local_declaration,
            "resource": self._visit_resource,
            "enhanced_for_statement": self._visit_enhanced_for,
            "for_statement": self._visit_for,
            "if_statement": self._visit_conditional,
            "while_statement": self._visit_conditional,
            "do_statement": self._visit_conditional,
            "switch_expression": self._visit_switch,
            "switch_label": self._visit_switch_label,
            "labeled_statement": self._visit_labeled,
            "return_statement": self._visit_return,
            "throw_statement": self._visit_throw,
            "lambda_expression": self._visit_lambda,
            "object_creation_expression": self._visit_object_creation,
            "array_creation_expression": self._visit_array_creation,
            "method_invocation": self._visit_method_invocation,
            "method_reference": self._visit_method_reference,
            "explicit_constructor_invocation": self._visit_constructor_invocation,
            "assignment_expression": self._visit_assignment,
            "update_expression": self._visit_update,
            "cast_expression": self._visit_cast,
            "instanceof_expression": self._visit_instanceof,
            "type_pattern": self._visit_type_pattern,
            "identifier": self._visit_identifier,
            "field_access": self._visit_field_access,
            "array_access": self._visit_array_access,
            "parenthesized_expression": self._visit_parenthesized,
            "binary_expression": self._visit_binary,
            "unary_expression": self._visit_unary,
            "ternary_expression": self._visit_ternary,
            "this": self._visit_this,
            "class_literal": self._visit_class_literal,
        }
        for node_type in TYPE_DECLARATIONS:
            self._dispatch[node_type] = self._visit_type_declaration
        for node_type, literal in _LITERALS.items():
            self._dispatch[node_type] = self._literal(literal)

        self._check_exhaustive()

    def _check_exhaustive(self) -> None:
        missing = [kind.value for kind in RelationKind if not EMITTERS.get(kind)]
        unknown = [name for names in EMITTERS.values() for name in names if not hasattr(self, name)]
        if missing or unknown:
            raise InternalContractError(
                "Relation classifier is not exhaustive",
                {"missing_kinds": missing, "unknown_handlers": unknown},
            )

    # ============================================================
    # Entry point
    # ============================================================

    def run(self) -> list[Relation]:
        """
        Walk the unit and return its ordered relations.

        CAPTURE relations come last, in first-seen order.
        """
        if self.ast is None:
            return []
        for child in self.ast.root.named_children:
            self._expr(child)
        self._emit_captures()

        self.diagnostics.extend(self.members.diagnostics)
        self.diagnostics.extend(self.captures.diagnostics)
        logger.debug(
            "expression_pass_complete",
            file_path=self.unit.file_path,
            relations=len(self.relations),
            diagnostics=len(self.diagnostics),
        )
        return self.relations

    # ============================================================
    # Traversal
    # ============================================================

    def _expr(self, node: TSNode | None, usage: Usage = READ) -> ResolvedType | None:
        """Visit a node, emit its relations and return its static type (if any)."""
        if node is None or node.type in SKIPPED or node.type == "ERROR" or node.is_missing:
            return None
        if self._dry:
            key = node_key(node)
            if key in self._dry_types:
                return self._dry_types[key]

        with self._entered(node):
            handler = self._dispatch.get(node.type)
            if handler is not None:
                result = handler(node, usage)
            else:
                for child in node.named_children:
                    self._expr(child)
                result = None

        if self._dry:
            self._dry_types[node_key(node)] = result
        return result

    def _type_of(self, node: TSNode) -> ResolvedType | None:
        """Static type of an expression, without emitting anything."""
        previous = self._dry
        self._dry = True
        try:
            return self._expr(node)
        finally:
            self._dry = previous

    @contextmanager
    def _entered(self, node: TSNode) -> Iterator[None]:
        scope = self.arena.scope_for_node(node)
        if scope is None or scope.handle == self._scope.handle:
            yield
            return
        saved = (self._scope, self._source)
        self._scope = scope
        if scope.kind != ScopeKind.BLOCK:
            owner = self.arena.owner_symbol(scope)
            if owner is not None:
                self._source = owner
        try:
            yield
        finally:
            self._scope, self._source = saved

    # ============================================================
    # Declarations
    # ============================================================

    def _visit_type_declaration(self, node: TSNode, usage: Usage) -> None:
        symbol = self.arena.symbol_for_node(node)
        if symbol is None:
            return None
        self._emit_annotations(node, symbol, "TYPE")
        self._emit_supertypes(node, symbol)

        info = self.types.get_type(symbol.qualified_name)
        if info is not None and info.kind == SymbolKind.RECORD:
            for component in info.fields.values():
                if component.metadata.get("record_component"):
                    self._emit_type_args(component.declared_type, component)

        body = node.child_by_field_name("body")
        if body is not None:
            for child in body.named_children:
                self._expr(child)
        return None

    def _emit_supertypes(self, node: TSNode, symbol: Symbol) -> None:
        info = self.types.get_type(symbol.qualified_name)
        if info is None:
            return
        superclass = node.child_by_field_name("superclass")
        if superclass is not None and superclass.named_children:
            self._emit_supertype(RelationKind.EXTEND, superclass.named_children[0], symbol, 0)

        interfaces = node.child_by_field_name("interfaces")
        kind = RelationKind.IMPLEMENT
        if interfaces is None:
            interfaces = next((c for c in node.named_children if c.type == "extends_interfaces"), None)
            kind = RelationKind.EXTEND
        if interfaces is not None:
            for index, type_node in enumerate(_type_list(interfaces)):
                self._emit_supertype(kind, type_node, symbol, index)

    def _emit_supertype(self, kind: RelationKind, type_node: TSNode, symbol: Symbol, index: int) -> None:
        text = self._text(type_node)
        info = self.types.get_type(symbol.qualified_name)
        resolved = self.types.resolve_in_type(text, info) if info is not None else None
        if resolved is None:
            resolved = ResolvedType(text, SymbolKind.UNKNOWN, is_external=True)
        self._emit_type(
            kind, resolved, type_node, source=symbol, index=index, has_type_arguments=bool(resolved.type_arguments)
        )
        self._emit_type_args(text, symbol)

    def _emit_anonymous_supertype(self, body: TSNode, supertype: ResolvedType, kind: RelationKind) -> None:
        anonymous = self.arena.symbol_for_node(body)
        if anonymous is None:
            return
        self._emit_type(kind, supertype, body, source=anonymous, index=0, is_anonymous=True)

    def _visit_field_declaration(self, node: TSNode, usage: Usage) -> None:
        type_text = self._text(node.child_by_field_name("type"))
        for declarator in node.children_by_field_name("declarator"):
            symbol = self.arena.symbol_for_node(declarator)
            if symbol is None:
                continue
            self._emit_annotations(node, symbol, "FIELD")
            self._emit_type_args(type_text, symbol)
            value = declarator.child_by_field_name("value")
            if value is not None:
                with self._entered(declarator):
                    self._emit_initializer(symbol, value)
        return None

    def _visit_enum_constant(self, node: TSNode, usage: Usage) -> None:
        symbol = self.arena.symbol_for_node(node)
        if symbol is None:
            return None
        self._emit_annotations(node, symbol, "ENUM_CONSTANT")
        enum_type = self.types.declared(symbol.owner) if symbol.owner else None

        arguments = self._arguments(node.child_by_field_name("arguments"))
        if arguments and enum_type is not None:
            arg_types = [self._type_of(a) for a in arguments]
            match = self.members.find_constructor(enum_type.qualified_name, arg_types)
            binding = self._constructor_binding(match, enum_type)
            self._emit_binding(
                RelationKind.CALL,
                binding,
                node,
                is_constructor=True,
                is_enum_constant=True,
                args_count=len(arguments),
            )
            for index, argument in enumerate(arguments):
                self._expr(argument, Usage("argument", index, binding.target))

        body = node.child_by_field_name("body")
        if body is not None and enum_type is not None:
            self._emit_anonymous_supertype(body, enum_type, RelationKind.EXTEND)
            with self._entered(body):
                for child in body.named_children:
                    self._expr(child)
        return None

    def _visit_method(self, node: TSNode, usage: Usage) -> None:
        symbol = self.arena.symbol_for_node(node)
        if symbol is None:
            return None
        target = "CONSTRUCTOR" if symbol.kind == SymbolKind.CONSTRUCTOR else "METHOD"
        self._emit_annotations(node, symbol, target)
        if symbol.kind == SymbolKind.METHOD:
            self._emit_return_type(node, symbol)
        self._emit_parameters(symbol)
        throws = next((c for c in node.named_children if c.type == "throws"), None)
        if throws is not None:
            self._emit_throws_clause(throws, symbol)

        body = node.child_by_field_name("body")
        if body is not None:
            for child in body.named_children:
                self._expr(child)
        return None

    def _emit_return_type(self, node: TSNode, symbol: Symbol) -> None:
        raw = symbol.declared_type
        if not raw or raw == "void":
            return
        resolved = self.types.symbol_type(symbol)
        if resolved is None:
            return
        self._emit_type(
            RelationKind.RETURN,
            resolved,
            node.child_by_field_name("type") or node,
            is_primitive=resolved.is_primitive,
            is_array=resolved.is_array,
            dimensions=resolved.dimensions,
            has_type_arguments=bool(resolved.type_arguments),
        )
        self._emit_type_args(raw, symbol)

    def _emit_parameters(self, function: Symbol) -> None:
        scope = self._scope
        if scope.owner != function.handle:
            return
        for handle in scope.variables.values():
            parameter = self.arena.symbol(handle)
            if parameter.kind != SymbolKind.PARAMETER:
                continue
            self._emit_annotations(None, parameter, "PARAMETER")
            resolved = self.types.symbol_type(parameter)
            if resolved is None:
                continue
            self._emit_type(
                RelationKind.PARAMETER,
                resolved,
                None,
                span=parameter.span,
                parameter_name=parameter.name,
                index=parameter.metadata.get("index", 0),
                is_varargs=bool(parameter.metadata.get("is_varargs")),
                is_final=parameter.is_final,
            )
            self._emit_type_args(parameter.declared_type, function)

    def _emit_throws_clause(self, throws: TSNode, symbol: Symbol) -> None:
        for index, type_node in enumerate(_type_list(throws)):
            resolved = self.types.resolve(self._text(type_node), self._scope)
            if resolved is None:
                continue
            self._emit_type(
                RelationKind.THROW,
                resolved,
                type_node,
                is_signature=True,
                index=index,
                is_runtime=self._is_runtime(resolved),
            )

    def _emit_annotations(self, node: TSNode | None, symbol: Symbol, target: str) -> None:
        """ANNOTATION relations from the annotated symbol to each annotation type."""
        if node is None:
            node = self._declaration_node(symbol)
        if node is None:
            return
        modifiers = next((c for c in node.children if c.type == "modifiers"), None)
        if modifiers is None:
            return
        for annotation in modifiers.named_children:
            if annotation.type not in ("marker_annotation", "annotation"):
                continue
            name = self._text(annotation.child_by_field_name("name"))
            resolved = self.types.resolve(name, self._scope) or ResolvedType(name, SymbolKind.UNKNOWN, is_external=True)
            value, params = self._annotation_arguments(annotation.child_by_field_name("arguments"))
            self._emit_type(
                RelationKind.ANNOTATION,
                resolved,
                annotation,
                source=symbol,
                annotation_target=target,
                annotation_value=value,
                annotation_params=params,
            )

    def _declaration_node(self, symbol: Symbol) -> TSNode | None:
        """Parameter declaration node, found by position within the current declaration."""
        if symbol.span is None or self.ast is None:
            return None
        node = self.ast.root.descendant_for_byte_range(symbol.position, symbol.position)
        while node is not None and node.type not in ("formal_parameter", "spread_parameter"):
            if node.start_byte < symbol.position:
                return None
            node = node.parent
        return node

    def _annotation_arguments(self, arguments: TSNode | None) -> tuple[str | None, list[str] | None]:
        if arguments is None:
            return None, None
        pairs = [c for c in arguments.named_children if c.type == "element_value_pair"]
        if pairs:
            params = []
            for pair in pairs:
                key = self._text(pair.child_by_field_name("key"))
                params.append(f"{key}={self._text(pair.child_by_field_name('value'))}")
            return None, params
        values = [c for c in arguments.named_children if c.type not in COMMENTS]
        return (self._text(values[0]) if values else None), None

    def _emit_type_args(self, text: str | None, source: Symbol | None = None) -> None:
        if not self.config.emit_type_args or not text or "<" not in text:
            return
        for argument in self.types.type_arguments(text, self._scope):
            self._emit_type(
                RelationKind.TYPE_ARG,
                argument.target,
                None,
                source=source,
                parent_type=argument.parent.qualified_name,
                index=argument.index,
                depth=argument.depth,
                is_wildcard=argument.wildcard is not None,
                wildcard_kind=argument.wildcard.value if argument.wildcard is not None else None,
                dimensions=argument.target.dimensions or None,
            )

    def _emit_captures(self) -> None:
        self.relations.extend(self.captures.relations())

    # ============================================================
    # Statements
    # ============================================================

    def _visit_local_declaration(self, node: TSNode, usage: Usage) -> None:
        if self._dry:
            return None
        type_text = self._text(node.child_by_field_name("type"))
        self._emit_type_args(type_text, self._source)
        for declarator in node.children_by_field_name("declarator"):
            symbol = self.arena.symbol_for_node(declarator)
            if symbol is None:
                continue
            self._emit_annotations(node, symbol, "LOCAL_VARIABLE")
            value = declarator.child_by_field_name("value")
            if value is not None:
                self._emit_initializer(symbol, value)
        return None

    def _visit_resource(self, node: TSNode, usage: Usage) -> None:
        symbol = self.arena.symbol_for_node(node)
        value = node.child_by_field_name("value")
        if symbol is None or value is None:
            for child in node.named_children:
                self._expr(child)
            return None
        self._emit_annotations(node, symbol, "LOCAL_VARIABLE")
        self._emit_type_args(symbol.declared_type, self._source)
        self._emit_initializer(symbol, value)
        return None

    def _emit_initializer(self, symbol: Symbol, value: TSNode) -> None:
        """Declarator `T x = value`: the value is walked first, then one ASSIGN per target."""
        targets, shared = self._assignment_chain(value)
        value_type = self._expr(shared)
        if symbol.declared_type == "var" and self.config.infer_var_types and value_type is not None:
            self.types.inferred[symbol.qualified_name] = value_type
        if self._dry:
            return None
        attributes = {
            "operator": "=",
            "value_expression": self._text(shared),
            "is_compound": False,
            "is_initializer": True,
        }
        if targets:
            attributes.update(is_chained=True, chain_index=0)
        self._emit(RelationKind.ASSIGN, symbol.qualified_name, symbol.kind, value, **attributes)
        self._emit_assignments(targets, self._text(shared), chained=True, first_index=1)
        return None

    def _visit_enhanced_for(self, node: TSNode, usage: Usage) -> None:
        iterable = self._expr(node.child_by_field_name("value"), Usage("iterable"))
        name_node = node.child_by_field_name("name")
        variable = self.arena.symbol_for_node(name_node) if name_node is not None else None
        if variable is not None:
            self._emit_annotations(node, variable, "LOCAL_VARIABLE")
            self._emit_type_args(variable.declared_type, self._source)
            if variable.declared_type == "var" and iterable is not None and self.config.infer_var_types:
                element = iterable.element() if iterable.is_array else next(iter(iterable.type_arguments), None)
                if element is not None:
                    self.types.inferred[variable.qualified_name] = element
        self._expr(node.child_by_field_name("body"))
        return None

    def _visit_for(self, node: TSNode, usage: Usage) -> None:
        condition = node.child_by_field_name("condition")
        for child in node.named_children:
            self._expr(child, Usage("condition") if child == condition else READ)
        return None

    def _visit_conditional(self, node: TSNode, usage: Usage) -> None:
        condition = node.child_by_field_name("condition")
        for child in node.named_children:
            self._expr(child, Usage("condition") if child == condition else READ)
        return None

    def _visit_switch(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        condition = node.child_by_field_name("condition")
        subject = self._expr(condition, Usage("condition"))
        self._switch_types.append(self.types.erasure(subject))
        saved = self._pattern_subject
        self._pattern_subject = self._text(_unwrap(condition)) if condition is not None else None
        try:
            self._expr(node.child_by_field_name("body"))
        finally:
            self._switch_types.pop()
            self._pattern_subject = saved
        return None

    def _visit_switch_label(self, node: TSNode, usage: Usage) -> None:
        subject = self._switch_types[-1] if self._switch_types else None
        for child in node.named_children:
            if child.type == "identifier" and subject is not None:
                match = self.members.find_field(subject.qualified_name, self._text(child), self._span(child))
                if match is not None and match.symbol is not None:
                    binding = Binding.to_symbol(match.symbol, BindingKind.STATIC, owner=match.owner)
                    self._emit_binding(RelationKind.USE, binding, child, usage_role="read", is_case_label=True)
                    continue
            self._expr(child)
        return None

    def _visit_labeled(self, node: TSNode, usage: Usage) -> None:
        for child in node.named_children:
            if child.type != "identifier":
                self._expr(child)
        return None

    def _visit_return(self, node: TSNode, usage: Usage) -> None:
        for child in node.named_children:
            self._expr(child, Usage("return_value"))
        return None

    def _visit_throw(self, node: TSNode, usage: Usage) -> None:
        expression = next((c for c in node.named_children if c.type not in COMMENTS), None)
        if expression is None:
            return None
        thrown = self._expr(expression, Usage("thrown"))
        inner = _unwrap(expression)
        is_rethrow = False
        if inner.type == "identifier":
            binding = self.binder.resolve(self._scope, self._text(inner), inner.start_byte)
            is_rethrow = binding.symbol is not None and binding.symbol.metadata.get("role") == "catch_parameter"
        if thrown is None:
            thrown = ResolvedType(self._text(expression), SymbolKind.UNKNOWN, is_external=True)
        self._emit_type(
            RelationKind.THROW,
            thrown,
            node,
            is_signature=False,
            is_runtime=self._is_runtime(thrown),
            is_rethrow=is_rethrow,
            thrown_expression=self._text(expression),
        )
        return None

    # ============================================================
    # Functions
    # ============================================================

    def _visit_lambda(self, node: TSNode, usage: Usage) -> None:
        if self._dry:
            return None
        symbol = self.arena.symbol_for_node(node)
        if symbol is not None:
            self._emit_parameters(symbol)
        body = node.child_by_field_name("body")
        if body is None:
            return None
        if body.type == "block":
            for child in body.named_children:
                self._expr(child)
        else:
            self._expr(body, Usage("return_value"))
        return None

    # ============================================================
    # Creation
    # ============================================================

    def _visit_object_creation(self, node: TSNode, usage: Usage) -> ResolvedType:
        outer = node.child_by_field_name("object")
        if outer is not None:
            self._receiver(outer)

        type_node = node.child_by_field_name("type")
        raw = self._text(type_node)
        created = self.types.resolve(raw, self._scope) or ResolvedType(raw, SymbolKind.UNKNOWN, is_external=True)
        arguments = self._arguments(node.child_by_field_name("arguments"))
        body = next((c for c in node.named_children if c.type == "class_body"), None)

        constructor: MemberMatch | None = None
        if body is None:
            constructor = self.members.find_constructor(created.qualified_name, [self._type_of(a) for a in arguments])
        call_site = constructor.target if constructor is not None else created.qualified_name
        self._emit_type(
            RelationKind.CREATE,
            created,
            node,
            constructor=constructor.target if constructor is not None else None,
            args_count=len(arguments),
            is_anonymous=body is not None,
            is_array=False,
            has_type_arguments="<" in raw,
            is_diamond=raw.endswith("<>"),
        )
        self._emit_type_args(raw, self._source)
        for index, argument in enumerate(arguments):
            self._expr(argument, Usage("argument", index, call_site))

        if body is not None and not self._dry:
            self._emit_anonymous_supertype(body, created, RelationKind.IMPLEMENT)
            with self._entered(body):
                for child in body.named_children:
                    self._expr(child)
        return created

    def _visit_array_creation(self, node: TSNode, usage: Usage) -> ResolvedType:
        raw = self._text(node.child_by_field_name("type"))
        element = self.types.resolve(raw, self._scope) or ResolvedType(raw, SymbolKind.UNKNOWN, is_external=True)
        sized = [c for c in node.children_by_field_name("dimensions") if c.type == "dimensions_expr"]
        dimensions = len(sized) + sum(self._text(c).count("[") for c in node.children_by_field_name("dimensions") if c.type == "dimensions")
        created = element.with_dimensions(element.dimensions + max(dimensions, 1))
        self._emit_type(
            RelationKind.CREATE,
            element,
            node,
            is_array=True,
            dimensions=created.dimensions,
            has_initializer=node.child_by_field_name("value") is not None,
        )
        for dimension in sized:
            for child in dimension.named_children:
                self._expr(child, Usage("operand"))
        self._expr(node.child_by_field_name("value"))
        return created

    # ============================================================
    # Calls
    # ============================================================

    def _visit_method_invocation(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        name = self._text(node.child_by_field_name("name"))
        receiver_node = node.child_by_field_name("object")
        arguments = self._arguments(node.child_by_field_name("arguments"))
        type_arguments = node.child_by_field_name("type_arguments")
        span = self._span(node)

        receiver_type: ResolvedType | None = None
        receiver_is_type = False
        if receiver_node is not None:
            receiver_type, receiver_is_type = self._receiver(receiver_node)
        arg_types = [self._type_of(a) for a in arguments]

        match: MemberMatch | None = None
        if receiver_node is None:
            binding = self.binder.resolve_method(self._scope, name, arg_types, span)
            if binding.kind == BindingKind.UNRESOLVED:
                binding = self._inherited_external(name, binding)
        else:
            lookup = self.types.erasure(receiver_type)
            if lookup is not None and not lookup.is_array:
                match = self.members.find_method(lookup.qualified_name, name, arg_types, span)
            binding = self._method_binding(match, lookup, name)

        callee = binding.symbol
        attributes = {
            "receiver": self._text(receiver_node) if receiver_node is not None else None,
            "receiver_type": receiver_type.display if receiver_type is not None else None,
            "is_static": receiver_is_type or (callee is not None and callee.is_static),
            "is_inherited": binding.kind == BindingKind.INHERITED,
            "is_chained": receiver_node is not None and _unwrap(receiver_node).type == "method_invocation",
            "is_varargs": callee is not None and callee.is_varargs,
            "args_count": len(arguments),
        }
        if type_arguments is not None:
            attributes["type_arguments"] = [self._text(t) for t in type_arguments.named_children]
        self._emit_binding(RelationKind.CALL, binding, node, **attributes)

        for index, argument in enumerate(arguments):
            self._expr(argument, Usage("argument", index, binding.target))
        explicit = [self._text(t) for t in type_arguments.named_children] if type_arguments is not None else []
        return self._return_type(binding, match, receiver_type, explicit, arg_types)

    def _visit_method_reference(self, node: TSNode, usage: Usage) -> None:
        named = [c for c in node.named_children if c.type not in COMMENTS and c.type != "type_arguments"]
        if not named:
            return None
        receiver_node = named[0]
        is_constructor = node.children[-1].type == "new"
        name = "new" if is_constructor else self._text(node.children[-1])

        if receiver_node.type in TYPE_NODES:
            receiver_type = self.types.resolve(self._text(receiver_node), self._scope)
            receiver_is_type = True
        else:
            receiver_type, receiver_is_type = self._receiver(receiver_node)
        lookup = self.types.erasure(receiver_type)

        if is_constructor and lookup is not None and lookup.is_array:
            # int[]::new
            self._emit_type(
                RelationKind.CREATE,
                lookup.with_dimensions(0),
                node,
                is_array=True,
                dimensions=lookup.dimensions,
                is_method_reference=True,
            )
            return None

        match: MemberMatch | None = None
        if is_constructor:
            if lookup is not None:
                match = self.members.find_constructor(lookup.qualified_name)
            binding = self._constructor_binding(match, lookup)
        else:
            if lookup is not None and not lookup.is_array:
                match = self.members.find_method(lookup.qualified_name, name, None, self._span(node))
            binding = self._method_binding(match, lookup, name)

        self._emit_binding(
            RelationKind.CALL,
            binding,
            node,
            receiver=self._text(receiver_node),
            receiver_type=receiver_type.display if receiver_type is not None else None,
            is_static=receiver_is_type and not is_constructor,
            is_functional=True,
            is_method_reference=True,
            is_constructor=is_constructor,
        )
        return None

    def _visit_constructor_invocation(self, node: TSNode, usage: Usage) -> None:
        delegate = node.child_by_field_name("constructor")
        outer = node.child_by_field_name("object")
        if outer is not None:
            self._receiver(outer)
        arguments = self._arguments(node.child_by_field_name("arguments"))
        arg_types = [self._type_of(a) for a in arguments]

        this_type = self._this_type()
        owner = self._super_type() if delegate is not None and delegate.type == "super" else this_type
        match = self.members.find_constructor(owner.qualified_name, arg_types) if owner is not None else None
        binding = self._constructor_binding(match, owner)
        self._emit_binding(
            RelationKind.CALL,
            binding,
            node,
            is_constructor=True,
            delegation=delegate.type if delegate is not None else None,
            args_count=len(arguments),
            is_varargs=binding.symbol is not None and binding.symbol.is_varargs,
        )
        for index, argument in enumerate(arguments):
            self._expr(argument, Usage("argument", index, binding.target))
        return None

    def _method_binding(self, match: MemberMatch | None, lookup: ResolvedType | None, name: str) -> Binding:
        if match is None:
            if lookup is None or lookup.kind == SymbolKind.UNKNOWN:
                target = f"{lookup.qualified_name}.{name}" if lookup is not None else name
                return Binding.unresolved(target, SymbolKind.METHOD)
            if lookup.is_array:
                return Binding.external(f"java.lang.Object.{name}")
            owner = self._external_ancestor(lookup.qualified_name)
            if owner is None and name in builtins.OBJECT_METHODS:
                owner = "java.lang.Object"
            if owner is None:
                if lookup.is_external:
                    return Binding.external(f"{lookup.qualified_name}.{name}")
                return Binding.unresolved(f"{lookup.qualified_name}.{name}", SymbolKind.METHOD)
            return Binding.external(f"{owner}.{name}")

        if match.symbol is None:
            return Binding.external(match.target)
        found = {"owner": match.owner, "candidates": match.candidates}
        reason = self.members.access_denied(match.symbol, self._scope)
        if reason is not None:
            return Binding.to_symbol(match.symbol, BindingKind.DENIED, reason=reason, **found)
        if match.symbol.is_static:
            kind = BindingKind.STATIC
        elif match.depth > 0:
            kind = BindingKind.INHERITED
        else:
            kind = BindingKind.MEMBER
        return Binding.to_symbol(match.symbol, kind, **found)

    def _constructor_binding(self, match: MemberMatch | None, owner: ResolvedType | None) -> Binding:
        if match is not None and match.symbol is not None:
            reason = self.members.access_denied(match.symbol, self._scope)
            if reason is not None:
                return Binding.to_symbol(match.symbol, BindingKind.DENIED, owner=match.owner, reason=reason)
            return Binding.to_symbol(match.symbol, BindingKind.MEMBER, owner=match.owner)
        if owner is None:
            return Binding.unresolved("<init>", SymbolKind.CONSTRUCTOR)
        simple = owner.qualified_name.rpartition(".")[2]
        if owner.kind == SymbolKind.UNKNOWN:
            return Binding.unresolved(f"{owner.qualified_name}.{simple}", SymbolKind.CONSTRUCTOR)
        return Binding.external(f"{owner.qualified_name}.{simple}")

    def _inherited_external(self, name: str, unresolved: Binding) -> Binding:
        """Unqualified call not declared anywhere: attribute it to an external supertype."""
        for scope in self.arena.ancestors(self._scope.handle):
            if scope.kind.is_type and scope.type_qn:
                owner = self._external_ancestor(scope.type_qn)
                if owner is not None:
                    return Binding.external(f"{owner}.{name}")
        if name in builtins.OBJECT_METHODS:
            return Binding.external(f"java.lang.Object.{name}")
        return unresolved

    def _external_ancestor(self, qualified_name: str) -> str | None:
        for name, depth in self.types.hierarchy(qualified_name):
            if depth > 0 and self.types.get_type(name) is None:
                return name
        return None

    def _return_type(
        self,
        binding: Binding,
        match: MemberMatch | None,
        receiver: ResolvedType | None,
        type_arguments: list[str] | None = None,
        arg_types: list[ResolvedType | None] | None = None,
    ) -> ResolvedType | None:
        if match is not None and match.symbol is None and match.member_type:
            return self.types.declared(match.member_type)
        if binding.symbol is None:
            return None
        returned = self.types.symbol_type(binding.symbol)
        if returned is None or returned.kind != SymbolKind.TYPE_PARAMETER:
            return returned
        method_params = list(binding.symbol.metadata.get("type_parameters", ()))
        if returned.qualified_name in method_params:
            argument = self._method_type_argument(
                binding.symbol, method_params.index(returned.qualified_name), type_arguments or [], arg_types or []
            )
            if argument is None:
                return returned
            return argument.with_dimensions(argument.dimensions + returned.dimensions)
        if receiver is None:
            return returned
        info = self.types.get_type(binding.owner)
        if info is None or receiver.qualified_name != info.qualified_name:
            return returned
        names = list(info.type_params)
        if returned.qualified_name in names:
            index = names.index(returned.qualified_name)
            if index < len(receiver.type_arguments):
                argument = receiver.type_arguments[index]
                return argument.with_dimensions(argument.dimensions + returned.dimensions)
        return returned

    def _method_type_argument(
        self, method: Symbol, index: int, type_arguments: list[str], arg_types: list[ResolvedType | None]
    ) -> ResolvedType | None:
        """`<T>` of a generic method: explicit `this.<String>m()` first, then a parameter declared as `T`."""
        if index < len(type_arguments):
            return self.types.resolve(type_arguments[index], self._scope)
        name = method.metadata["type_parameters"][index]
        for position, raw in enumerate(method.metadata.get("declared_parameter_types", ())):
            if position >= len(arg_types) or arg_types[position] is None:
                continue
            actual = arg_types[position]
            if raw == name:
                inferred = actual
            elif raw in (f"{name}...", f"{name}[]") and actual.is_array:
                inferred = actual.element()
            elif raw == f"{name}..." and len(arg_types) == position + 1:
                inferred = actual
            else:
                continue
            if not inferred.is_primitive and inferred.kind != SymbolKind.TYPE_PARAMETER:
                return inferred
        return None

    # ============================================================
    # Assignment
    # ============================================================

    def _visit_assignment(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        """`a = b = v`: one ASSIGN per target, outer to inner, all sharing `v`."""
        targets, value = self._assignment_chain(node)
        value_type = self._expr(value)
        if self._dry:
            return value_type
        self._emit_assignments(targets, self._text(value), chained=len(targets) > 1)
        return value_type

    def _assignment_chain(self, node: TSNode | None) -> tuple[list[tuple[TSNode, str]], TSNode | None]:
        """Unwrap nested assignments into (target, operator) pairs, outer first, and the shared value."""
        targets: list[tuple[TSNode, str]] = []
        while node is not None and _unwrap(node).type == "assignment_expression":
            inner = _unwrap(node)
            targets.append((inner.child_by_field_name("left"), self._text(inner.child_by_field_name("operator"))))
            node = inner.child_by_field_name("right")
        return targets, node

    def _emit_assignments(
        self, targets: list[tuple[TSNode, str]], value_text: str, chained: bool, first_index: int = 0
    ) -> None:
        for index, (left, operator) in enumerate(targets, start=first_index):
            binding, extra = self._assign_target(left)
            attributes = {
                "operator": operator,
                "value_expression": value_text,
                "is_compound": operator != "=",
                "is_initializer": False,
                **extra,
            }
            if chained:
                attributes["is_chained"] = True
                attributes["chain_index"] = index
            self._emit_binding(RelationKind.ASSIGN, binding, left, **attributes)

    def _visit_update(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        operand = next((c for c in node.named_children if c.type not in COMMENTS), None)
        if operand is None:
            return None
        if self._dry:
            return self._expr(operand)
        operator = next((c.type for c in node.children if c.type in ("++", "--")), "++")
        is_prefix = node.children[0].type in ("++", "--")
        binding, extra = self._assign_target(operand)
        self._emit_binding(
            RelationKind.ASSIGN,
            binding,
            node,
            operator=operator,
            value_expression=self._text(node),
            is_compound=True,
            is_initializer=False,
            is_unary_update=True,
            is_postfix=not is_prefix,
            **extra,
        )
        return self.types.symbol_type(binding.symbol) if binding.symbol is not None else None

    def _assign_target(self, node: TSNode, element: bool = False) -> tuple[Binding, dict]:
        """Bind an assignment target; array elements bind to the array variable."""
        node = _unwrap(node)
        if node.type == "identifier":
            binding = self.binder.resolve(self._scope, self._text(node), node.start_byte, self._span(node))
            self.captures.record(binding, self._span(node))
            if not element:
                self.captures.note_write(binding.symbol)
            return binding, {}

        if node.type == "field_access":
            receiver_node = node.child_by_field_name("object")
            binding = self._field_binding(node, receiver_node)
            return binding, {"receiver": self._text(receiver_node)}

        if node.type == "array_access":
            index = node.child_by_field_name("index")
            binding, extra = self._assign_target(node.child_by_field_name("array"), element=True)
            self._expr(index, Usage("operand"))
            return binding, {**extra, "is_array_element": True, "index_expression": self._text(index)}

        self._expr(node)
        return Binding.unresolved(self._text(node)), {}

    # ============================================================
    # Casts and patterns
    # ============================================================

    def _visit_cast(self, node: TSNode, usage: Usage) -> ResolvedType:
        type_node = node.child_by_field_name("type")
        raw = self._text(type_node)
        target = self.types.resolve(raw, self._scope) or ResolvedType(raw, SymbolKind.UNKNOWN, is_external=True)
        value = node.child_by_field_name("value")
        self._emit_type(
            RelationKind.CAST,
            target,
            node,
            value_expression=self._text(value),
            is_primitive=target.is_primitive,
            is_array=target.is_array,
            is_pattern_matching=False,
        )
        self._emit_type_args(raw, self._source)
        self._expr(value)
        return target

    def _visit_instanceof(self, node: TSNode, usage: Usage) -> ResolvedType:
        left = node.child_by_field_name("left")
        self._expr(left, Usage("operand"))
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            raw = self._text(node.child_by_field_name("right"))
            target = self.types.resolve(raw, self._scope) or ResolvedType(raw, SymbolKind.UNKNOWN, is_external=True)
            self._emit_type(
                RelationKind.CAST,
                target,
                node,
                value_expression=self._text(left),
                is_primitive=target.is_primitive,
                is_array=target.is_array,
                is_pattern_matching=True,
                pattern_variable=self._text(name_node),
            )
            variable = self.arena.symbol_for_node(name_node)
            if variable is not None:
                self.types.inferred.setdefault(variable.qualified_name, target)
        pattern = node.child_by_field_name("pattern")
        if pattern is not None:
            saved = self._pattern_subject
            self._pattern_subject = self._text(left)
            try:
                self._expr(pattern)
            finally:
                self._pattern_subject = saved
        return BOOLEAN

    def _visit_type_pattern(self, node: TSNode, usage: Usage) -> None:
        name_node = node.named_children[-1] if node.named_children else None
        types = [c for c in node.named_children[:-1] if c.type != "modifiers"]
        if name_node is None or not types:
            return None
        raw = self._text(types[0])
        target = self.types.resolve(raw, self._scope) or ResolvedType(raw, SymbolKind.UNKNOWN, is_external=True)
        self._emit_type(
            RelationKind.CAST,
            target,
            node,
            value_expression=self._pattern_subject,
            is_primitive=target.is_primitive,
            is_array=target.is_array,
            is_pattern_matching=True,
            pattern_variable=self._text(name_node),
        )
        return None

    # ============================================================
    # Reads
    # ============================================================

    def _visit_identifier(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        binding = self.binder.resolve(self._scope, self._text(node), node.start_byte, self._span(node))
        self._emit_binding(RelationKind.USE, binding, node, **usage.attributes())
        if not self._dry:
            self.captures.record(binding, self._span(node))
        if binding.symbol is None:
            return None
        return self.types.symbol_type(binding.symbol)

    def _visit_field_access(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        field_node = node.child_by_field_name("field")
        receiver_node = node.child_by_field_name("object")
        if field_node is not None and field_node.type == "this":
            return self._type_name(receiver_node)

        type_name = self._type_name(node)
        if type_name is not None:
            return type_name

        name = self._text(field_node)
        binding = self._field_binding(node, receiver_node)
        if binding.kind == BindingKind.UNRESOLVED and binding.target == "length":
            return INT
        self._emit_binding(
            RelationKind.USE, binding, node, receiver=self._text(receiver_node), **usage.attributes()
        )
        if binding.symbol is not None:
            return self.types.symbol_type(binding.symbol)
        builtin = self._builtin_field_type(binding.target)
        if builtin is not None:
            return builtin
        return None if name != "length" else INT

    def _field_binding(self, node: TSNode, receiver_node: TSNode) -> Binding:
        """Bind `receiver.field`; emits the receiver's own relations."""
        name = self._text(node.child_by_field_name("field"))
        receiver_type, is_type = self._receiver(receiver_node)
        lookup = self.types.erasure(receiver_type)
        if lookup is None:
            return Binding.unresolved(name)
        if lookup.is_array and name == "length":
            return Binding.unresolved("length")

        match = self.members.find_field(lookup.qualified_name, name, self._span(node))
        if match is None:
            if lookup.kind == SymbolKind.UNKNOWN:
                return Binding.unresolved(f"{lookup.qualified_name}.{name}")
            return Binding.external(f"{lookup.qualified_name}.{name}")
        if match.symbol is None:
            return Binding.external(match.target)

        symbol = match.symbol
        found = {"owner": match.owner, "candidates": match.candidates}
        reason = self.members.access_denied(symbol, self._scope)
        if reason is not None:
            return Binding.to_symbol(symbol, BindingKind.DENIED, reason=reason, **found)
        if symbol.is_static:
            kind = BindingKind.STATIC
        else:
            kind = BindingKind.INHERITED if match.depth > 0 else BindingKind.FIELD
        inner = _unwrap(receiver_node)
        boundaries = self._boundaries_to_type() if inner.type in ("this", "super") else ()
        binding = Binding.to_symbol(symbol, kind, boundaries=boundaries, **found)
        if boundaries and not self._dry:
            self.captures.record(binding, self._span(node), implicit_this=False)
        return binding

    def _builtin_field_type(self, target: str) -> ResolvedType | None:
        owner, _, name = target.rpartition(".")
        field_type = builtins.BUILTIN_FIELDS.get(owner, {}).get(name)
        return self.types.declared(field_type) if field_type is not None else None

    def _visit_array_access(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        array = self._expr(node.child_by_field_name("array"), usage)
        self._expr(node.child_by_field_name("index"), Usage("operand"))
        return array.element() if array is not None and array.is_array else None

    def _visit_parenthesized(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        result = None
        for child in node.named_children:
            result = self._expr(child, usage)
        return result

    def _visit_binary(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        operator = self._text(node.child_by_field_name("operator"))
        left = self._expr(node.child_by_field_name("left"), Usage("operand"))
        right = self._expr(node.child_by_field_name("right"), Usage("operand"))
        if operator in _BOOLEAN_OPERATORS:
            return BOOLEAN
        if operator == "+" and STRING in (left, right):
            return STRING
        for name in _NUMERIC_ORDER:
            if any(t is not None and t.is_primitive and t.qualified_name == name for t in (left, right)):
                return _primitive("int" if name in ("char", "short", "byte") else name)
        return left or right

    def _visit_unary(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        operator = self._text(node.child_by_field_name("operator"))
        operand = self._expr(node.child_by_field_name("operand"), Usage("operand"))
        return BOOLEAN if operator == "!" else operand

    def _visit_ternary(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        self._expr(node.child_by_field_name("condition"), Usage("condition"))
        consequence = self._expr(node.child_by_field_name("consequence"), usage)
        alternative = self._expr(node.child_by_field_name("alternative"), usage)
        return consequence or alternative

    def _visit_this(self, node: TSNode, usage: Usage) -> ResolvedType | None:
        return self._this_type()

    def _visit_class_literal(self, node: TSNode, usage: Usage) -> ResolvedType:
        return ResolvedType("java.lang.Class", SymbolKind.CLASS, is_external=True)

    @staticmethod
    def _literal(resolved: ResolvedType | None) -> Callable[[TSNode, Usage], ResolvedType | None]:
        def visit(node: TSNode, usage: Usage) -> ResolvedType | None:
            if resolved is not None and resolved.qualified_name == "int" and node.type.endswith("integer_literal"):
                text = node.text.decode("utf-8", errors="replace") if node.text else ""
                if text.endswith(("l", "L")):
                    return _primitive("long")
            if resolved is not None and resolved.qualified_name == "double":
                text = node.text.decode("utf-8", errors="replace") if node.text else ""
                if text.endswith(("f", "F")):
                    return _primitive("float")
            return resolved

        return visit

    # ============================================================
    # Receivers
    # ============================================================

    def _receiver(self, node: TSNode) -> tuple[ResolvedType | None, bool]:
        """Static type of a receiver expression and whether it names a type."""
        inner = _unwrap(node)
        if inner.type == "this":
            return self._this_type(), False
        if inner.type == "super":
            return self._super_type(), False
        if inner.type in ("identifier", "field_access"):
            type_name = self._type_name(inner)
            if type_name is not None:
                return type_name, True
        return self._expr(node, Usage("receiver")), False

    def _type_name(self, node: TSNode | None) -> ResolvedType | None:
        """Type denoted by an identifier / dotted name, when it is not a variable."""
        if node is None:
            return None
        node = _unwrap(node)
        if node.type == "identifier":
            name = self._text(node)
            if self.binder.resolve(self._scope, name, node.start_byte).kind != BindingKind.UNRESOLVED:
                return None
            return self.binder.resolve_type(self._scope, name)
        if node.type != "field_access":
            return None

        receiver_node = node.child_by_field_name("object")
        field_node = node.child_by_field_name("field")
        if field_node is None or field_node.type != "identifier":
            return None
        name = self._text(field_node)
        owner = self._type_name(receiver_node)
        if owner is None:
            text = self._text(node)
            if not _QUALIFIED_RE.fullmatch(text):
                return None
            head = text.partition(".")[0]
            if self.binder.resolve(self._scope, head, node.start_byte).kind != BindingKind.UNRESOLVED:
                return None
            if head[:1].islower() and name[:1].isupper():
                return self.types.resolve_name(text, scope=self._scope)
            return None

        if self.members.find_field(owner.qualified_name, name) is not None:
            return None
        member = None if owner.is_external else self.types.member_type(owner.qualified_name, name)
        if member is not None:
            return self.types.declared(member)
        if owner.is_external and name[:1].isupper() and not name.isupper():
            return ResolvedType(f"{owner.qualified_name}.{name}", SymbolKind.EXTERNAL, is_external=True)
        return None

    def _this_type(self) -> ResolvedType | None:
        scope = self.arena.enclosing_type(self._scope.handle)
        return self.types.declared(scope.type_qn) if scope is not None and scope.type_qn else None

    def _super_type(self) -> ResolvedType | None:
        this_type = self._this_type()
        return self.types.superclass(this_type.qualified_name) if this_type is not None else None

    def _boundaries_to_type(self) -> tuple[int, ...]:
        boundaries = []
        for scope in self.arena.ancestors(self._scope.handle):
            if scope.kind.is_type:
                break
            if scope.kind == ScopeKind.LAMBDA:
                boundaries.append(scope.handle)
        return tuple(boundaries)

    # ============================================================
    # Emission helpers
    # ============================================================

    def _emit(
        self,
        kind: RelationKind,
        target: str,
        target_kind: SymbolKind,
        node: TSNode | None,
        source: Symbol | None = None,
        span=None,
        **attributes,
    ) -> None:
        if self._dry:
            return
        source = source or self._source
        if source is None:
            return
        self.relations.append(
            Relation(
                source=source.qualified_name,
                source_kind=source.kind,
                target=target,
                target_kind=target_kind,
                kind=kind,
                attributes={k: v for k, v in attributes.items() if v is not None},
                span=span if span is not None else (self._span(node) if node is not None else None),
            )
        )

    def _emit_binding(self, kind: RelationKind, binding: Binding, node: TSNode | None, **attributes) -> None:
        attributes.update(binding.status_attributes())
        attributes["binding_kind"] = binding.kind.value
        self._emit(kind, binding.target, binding.target_kind, node, **attributes)

    def _emit_type(self, kind: RelationKind, resolved: ResolvedType, node: TSNode | None, **attributes) -> None:
        if resolved.kind == SymbolKind.UNKNOWN:
            attributes.update(is_external=True, unresolved=True)
        elif resolved.is_external:
            attributes["is_external"] = True
        self._emit(kind, resolved.qualified_name, resolved.kind, node, **attributes)

    def _is_runtime(self, resolved: ResolvedType | None) -> bool:
        if resolved is None:
            return False
        for name, _ in self.types.hierarchy(resolved.qualified_name):
            if name in builtins.UNCHECKED_EXCEPTIONS:
                return True
        return False

    def _arguments(self, node: TSNode | None) -> list[TSNode]:
        if node is None:
            return []
        return [c for c in node.named_children if c.type not in COMMENTS]

    def _text(self, node: TSNode | None) -> str:
        return self.ast.get_text(node) if self.ast is not None else ""

    def _span(self, node: TSNode):
        return self.ast.get_span(node)


_LITERALS: dict[str, ResolvedType | None] = {
    "decimal_integer_literal": INT,
    "hex_integer_literal": INT,
    "octal_integer_literal": INT,
    "binary_integer_literal": INT,
    "decimal_floating_point_literal": _primitive("double"),
    "hex_floating_point_literal": _primitive("double"),
    "true": BOOLEAN,
    "false": BOOLEAN,
    "character_literal": _primitive("char"),
    "string_literal": STRING,
    "text_block": STRING,
    "null_literal": None,
}


def _unwrap(node: TSNode) -> TSNode:
    while node is not None and node.type == "parenthesized_expression" and node.named_children:
        node = node.named_children[0]
    return node


def _type_list(node: TSNode) -> list[TSNode]:
    types = []
    for child in node.named_children:
        if child.type == "type_list":
            types.extend(c for c in child.named_children if c.type not in ("marker_annotation", "annotation"))
        elif child.type not in ("marker_annotation", "annotation") and child.type not in COMMENTS:
            types.append(child)
    return types
