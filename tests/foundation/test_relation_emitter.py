"""
Relation Emitter Tests

Tests for the expression pass, one relation kind at a time.
"""

import pytest

from codegraph_relations.exceptions import InternalContractError
from codegraph_relations.foundation.ir.models import RelationKind, SymbolKind
from codegraph_relations.foundation.semantic import ProjectIndex, relation_emitter
from codegraph_relations.foundation.semantic.relation_emitter import EMITTERS, RelationEmitter


def single(relations):
    assert len(relations) == 1, relations
    return relations[0]


class TestClassifier:
    """Test the relation kind table."""

    def test_every_kind_has_an_emitter(self):
        """Test the kind table covers the closed set of relation kinds."""
        assert set(EMITTERS) == set(RelationKind)

    def test_missing_kind_is_a_contract_violation(self, declare, monkeypatch):
        """Test construction fails loudly when a kind has no handler."""
        unit = declare("class A {}")
        index = ProjectIndex()
        index.merge(unit)
        index.freeze()
        table = {k: v for k, v in EMITTERS.items() if k != RelationKind.CAST}
        monkeypatch.setattr(relation_emitter, "EMITTERS", table)

        with pytest.raises(InternalContractError) as exc_info:
            RelationEmitter(unit, index)

        assert exc_info.value.context["missing_kinds"] == ["CAST"]


class TestCalls:
    """Test CALL relations."""

    def test_receiver_call_and_chain(self, extract):
        """Test receiver typing through a chained call."""
        result = extract(
            """
            class Repo { String find(int id) { return null; } }
            class Service {
                Repo repo;
                void run() { String s = repo.find(1).trim(); }
            }
            """
        )

        relations = [r for r in result.relations if r.source == "Service.run()"]
        find, trim = [r for r in relations if r.kind == RelationKind.CALL]

        assert [r.kind for r in relations] == [
            RelationKind.USE,
            RelationKind.CALL,
            RelationKind.CALL,
            RelationKind.ASSIGN,
        ]
        assert find.target == "Repo.find(int)"
        assert find.attributes["receiver"] == "repo"
        assert find.attributes["receiver_type"] == "Repo"
        assert find.attributes["args_count"] == 1
        assert find.attributes["is_chained"] is False
        assert trim.target == "java.lang.String.trim"
        assert trim.attributes["receiver_type"] == "java.lang.String"
        assert trim.attributes["is_chained"] is True
        assert relations[0].attributes["usage_role"] == "receiver"

    def test_static_call_on_type(self, extract, select):
        """Test a type receiver marks the call static."""
        result = extract(
            """
            class A {
                int m() { return Math.max(1, 2); }
            }
            """
        )

        call = single(select(result, RelationKind.CALL))

        assert call.target == "java.lang.Math.max"
        assert call.attributes["is_static"] is True
        assert call.attributes["is_external"] is True
        assert select(result, RelationKind.USE) == []

    def test_overload_by_argument_type(self, extract, select):
        """Test overloads are chosen by argument types."""
        result = extract(
            """
            class A {
                void f(int x) {}
                void f(String s) {}
                void m() {
                    f("a");
                    f(1);
                }
            }
            """
        )

        targets = [c.target for c in select(result, RelationKind.CALL, source="A.m()")]

        assert targets == ["A.f(String)", "A.f(int)"]

    def test_varargs_call(self, extract, select):
        """Test varargs methods accept extra arguments."""
        result = extract(
            """
            class A {
                void log(String fmt, Object... args) {}
                void m() { log("a", 1, 2); }
            }
            """
        )

        call = single(select(result, RelationKind.CALL, source="A.m()"))

        assert call.target == "A.log(String,Object[])"
        assert call.attributes["is_varargs"] is True
        assert call.attributes["args_count"] == 3

    def test_call_arguments_carry_call_site(self, extract, select):
        """Test argument reads record their position and callee."""
        result = extract(
            """
            class A {
                void put(int k, int v) {}
                void m(int a, int b) { put(a, b); }
            }
            """
        )

        uses = select(result, RelationKind.USE, source="A.m(int,int)")

        assert [(u.target, u.attributes["argument_index"]) for u in uses] == [
            ("A.m(int,int).a", 0),
            ("A.m(int,int).b", 1),
        ]
        assert {u.attributes["call_site"] for u in uses} == {"A.put(int,int)"}

    def test_var_inferred_receiver(self, extract, select):
        """Test `var` locals take the type of their initializer."""
        result = extract(
            """
            import java.util.ArrayList;
            class A {
                void m() {
                    var list = new ArrayList<String>();
                    list.add("a");
                }
            }
            """
        )

        call = single(select(result, RelationKind.CALL, source="A.m()"))

        assert call.target == "java.util.ArrayList.add"
        assert call.attributes["receiver_type"] == "java.util.ArrayList"

    def test_generic_receiver_substitution(self, extract, select):
        """Test a type variable return is substituted from the receiver's arguments."""
        result = extract(
            """
            class Box<T> {
                T get() { return null; }
            }
            class Item { void use() {} }
            class A {
                void m(Box<Item> box) { box.get().use(); }
            }
            """
        )

        targets = [c.target for c in select(result, RelationKind.CALL, source="A.m(Box)")]

        assert targets == ["Box.get()", "Item.use()"]

    def test_generic_method_explicit_type_argument(self, extract, select):
        """Test `this.<String>id(..)` returns the explicit type argument."""
        result = extract(
            """
            class G {
                <T> T id(T t) { return t; }
                void m() { this.<String>id("a").length(); }
            }
            """
        )

        targets = [c.target for c in select(result, RelationKind.CALL, source="G.m()")]

        assert targets == ["G.id(Object)", "java.lang.String.length"]

    def test_generic_method_inferred_from_argument(self, extract, select):
        """Test a method type variable takes the type of the argument declared as it."""
        result = extract(
            """
            class Item { void use() {} }
            class G {
                static <T> T first(T t) { return t; }
                void m(Item item) { first(item).use(); }
            }
            """
        )

        targets = [c.target for c in select(result, RelationKind.CALL, source="G.m(Item)")]

        assert targets == ["G.first(Object)", "Item.use()"]

    def test_method_reference(self, extract, select):
        """Test method and constructor references."""
        result = extract(
            """
            import java.util.function.Function;
            import java.util.function.Supplier;
            class Foo {}
            class A {
                void m() {
                    Function<Object, String> f = String::valueOf;
                    Supplier<Foo> s = Foo::new;
                }
            }
            """
        )

        by_target = {c.target: c.attributes for c in select(result, RelationKind.CALL, source="A.m()")}

        assert by_target["java.lang.String.valueOf"]["is_method_reference"] is True
        assert by_target["java.lang.String.valueOf"]["is_static"] is True
        assert by_target["Foo.Foo()"]["is_constructor"] is True
        assert by_target["Foo.Foo()"]["is_functional"] is True

    def test_constructor_delegation(self, extract, select):
        """Test this(...) and super(...) calls."""
        result = extract(
            """
            class A { A(int x) {} }
            class B extends A {
                B() { this(1); }
                B(int y) { super(y); }
            }
            """
        )

        this_call = single(select(result, RelationKind.CALL, source="B.B()"))
        super_call = single(select(result, RelationKind.CALL, source="B.B(int)"))

        assert this_call.target == "B.B(int)"
        assert this_call.attributes["delegation"] == "this"
        assert super_call.target == "A.A(int)"
        assert super_call.attributes["delegation"] == "super"

    def test_enum_constant_constructor(self, extract, select):
        """Test enum constant arguments call the enum constructor."""
        result = extract(
            """
            enum Planet {
                EARTH(1.0);
                Planet(double mass) {}
            }
            """
        )

        call = single(select(result, RelationKind.CALL, source="Planet.EARTH"))

        assert call.target == "Planet.Planet(double)"
        assert call.attributes["is_enum_constant"] is True


class TestCreation:
    """Test CREATE relations."""

    def test_declared_constructor(self, extract, select):
        """Test object creation names the chosen constructor."""
        result = extract(
            """
            class Point { Point(int x, int y) {} }
            class A {
                Object m() { return new Point(1, 2); }
            }
            """
        )

        create = single(select(result, RelationKind.CREATE))

        assert create.target == "Point"
        assert create.target_kind == SymbolKind.CLASS
        assert create.attributes["constructor"] == "Point.Point(int,int)"
        assert create.attributes["args_count"] == 2
        assert "is_external" not in create.attributes

    def test_diamond(self, extract, select):
        """Test diamond creation of an external generic type."""
        result = extract(
            """
            import java.util.*;
            class A {
                List<String> m() { return new ArrayList<>(); }
            }
            """
        )

        create = single(select(result, RelationKind.CREATE))

        assert create.target == "java.util.ArrayList"
        assert create.attributes["is_diamond"] is True
        assert create.attributes["is_external"] is True
        assert "constructor" not in create.attributes

    def test_arrays(self, extract, select):
        """Test array creation records element type and dimensions."""
        result = extract(
            """
            class A {
                void m() {
                    int[][] grid = new int[3][];
                    String[] names = new String[] {"a"};
                }
            }
            """
        )

        grid, names = select(result, RelationKind.CREATE)

        assert grid.target == "int"
        assert grid.attributes["is_array"] is True
        assert grid.attributes["dimensions"] == 2
        assert names.target == "java.lang.String"
        assert names.attributes["has_initializer"] is True

    def test_array_constructor_reference(self, extract, select):
        """Test `int[]::new` creates an array instead of calling a constructor."""
        result = extract(
            """
            import java.util.function.IntFunction;
            class A {
                void m() { IntFunction<int[]> f = int[]::new; }
            }
            """
        )

        create = single(select(result, RelationKind.CREATE))

        assert create.target == "int"
        assert create.attributes["is_array"] is True
        assert create.attributes["dimensions"] == 1
        assert create.attributes["is_method_reference"] is True
        assert select(result, RelationKind.CALL, source="A.m()") == []

    def test_anonymous_class(self, extract, select):
        """Test anonymous creation implements its supertype."""
        result = extract(
            """
            class A {
                void helper() {}
                void m() {
                    Runnable r = new Runnable() {
                        public void run() { helper(); }
                    };
                }
            }
            """
        )

        create = single(select(result, RelationKind.CREATE))
        implement = single(select(result, RelationKind.IMPLEMENT))
        call = single(select(result, RelationKind.CALL))

        assert create.target == "java.lang.Runnable"
        assert create.attributes["is_anonymous"] is True
        assert implement.source == "A.m().$1"
        assert implement.target == "java.lang.Runnable"
        assert call.source == "A.m().$1.run()"
        assert call.target == "A.helper()"


class TestAssignment:
    """Test ASSIGN relations."""

    def test_initializers(self, extract, select):
        """Test field and local initializers."""
        result = extract(
            """
            class A {
                int size = 10;
                void m() { int x = size; }
            }
            """
        )

        field_init = single(select(result, RelationKind.ASSIGN, target="A.size"))
        local_init = single(select(result, RelationKind.ASSIGN, target="A.m().x"))

        assert field_init.source == "A.size"
        assert field_init.attributes["is_initializer"] is True
        assert field_init.attributes["value_expression"] == "10"
        assert local_init.source == "A.m()"

    def test_compound_and_update(self, extract, select):
        """Test compound operators and ++/--."""
        result = extract(
            """
            class A {
                int count;
                void m(int x) {
                    count += x;
                    count++;
                    --count;
                }
            }
            """
        )

        compound, postfix, prefix = select(result, RelationKind.ASSIGN, source="A.m(int)")

        assert compound.attributes["operator"] == "+="
        assert compound.attributes["is_compound"] is True
        assert postfix.attributes["is_unary_update"] is True
        assert postfix.attributes["is_postfix"] is True
        assert prefix.attributes["operator"] == "--"
        assert prefix.attributes["is_postfix"] is False

    def test_chained_assignment(self, extract, select):
        """Test each target of `a = b = v` gets one relation, outer first."""
        result = extract(
            """
            class A {
                int a, b;
                void m() { a = b = 5; }
            }
            """
        )

        outer, inner = select(result, RelationKind.ASSIGN, source="A.m()")

        assert (outer.target, outer.attributes["chain_index"]) == ("A.a", 0)
        assert (inner.target, inner.attributes["chain_index"]) == ("A.b", 1)
        assert outer.attributes["value_expression"] == "5"
        assert inner.attributes["value_expression"] == "5"

    def test_chained_initializer(self, extract, select):
        """Test `int x = a = 5;` assigns the shared value to both targets."""
        result = extract(
            """
            class A {
                void m() {
                    int a;
                    int x = a = 5;
                }
            }
            """
        )

        declared, inner = select(result, RelationKind.ASSIGN, source="A.m()")

        assert declared.target == "A.m().x"
        assert declared.attributes["is_initializer"] is True
        assert declared.attributes["is_chained"] is True
        assert declared.attributes["chain_index"] == 0
        assert declared.attributes["value_expression"] == "5"
        assert inner.target == "A.m().a"
        assert inner.attributes["is_initializer"] is False
        assert inner.attributes["chain_index"] == 1
        assert inner.attributes["value_expression"] == "5"

    def test_array_element_and_this_field(self, extract, select):
        """Test array elements bind to the array, `this.x` to the field."""
        result = extract(
            """
            class A {
                int count;
                void m(int[] arr, int i) {
                    arr[i] = 3;
                    this.count = i;
                }
            }
            """
        )

        element, field = select(result, RelationKind.ASSIGN, source="A.m(int[],int)")

        assert element.target == "A.m(int[],int).arr"
        assert element.attributes["is_array_element"] is True
        assert element.attributes["index_expression"] == "i"
        assert field.target == "A.count"
        assert field.attributes["receiver"] == "this"


class TestAmbiguity:
    """Test members inherited from unrelated supertypes."""

    def test_ambiguous_default_method(self, extract, select):
        """Test both call forms pick the first owner and list every candidate."""
        result = extract(
            """
            interface I1 { default void go() {} }
            interface I2 { default void go() {} }
            class C implements I1, I2 {
                void m(C other) {
                    go();
                    other.go();
                }
            }
            """
        )

        calls = select(result, RelationKind.CALL, source="C.m(C)")
        (diagnostic,) = [d for d in result.diagnostics if d.code == "ambiguous_member"]

        assert [c.target for c in calls] == ["I1.go()", "I1.go()"]
        assert all(c.attributes["ambiguous_candidates"] == ["I1", "I2"] for c in calls)
        assert diagnostic.detail == {"member": "go", "chosen": "I1", "candidates": ["I1", "I2"]}

    def test_ambiguous_interface_constant(self, extract, select):
        """Test a constant declared by two interfaces."""
        result = extract(
            """
            interface I1 { int LIMIT = 1; }
            interface I2 { int LIMIT = 2; }
            class C implements I1, I2 {
                int m() { return LIMIT; }
            }
            """
        )

        use = single(select(result, RelationKind.USE, source="C.m()"))
        (diagnostic,) = [d for d in result.diagnostics if d.code == "ambiguous_member"]

        assert use.target == "I1.LIMIT"
        assert use.attributes["ambiguous_candidates"] == ["I1", "I2"]
        assert diagnostic.detail["member"] == "LIMIT"
        assert diagnostic.detail["candidates"] == ["I1", "I2"]

    def test_single_owner_not_ambiguous(self, extract, select):
        """Test a default method overridden in the class is not ambiguous."""
        result = extract(
            """
            interface I1 { default void go() {} }
            interface I2 { default void go() {} }
            class C implements I1, I2 {
                public void go() {}
                void m() { go(); }
            }
            """
        )

        call = single(select(result, RelationKind.CALL, source="C.m()"))

        assert call.target == "C.go()"
        assert "ambiguous_candidates" not in call.attributes
        assert not [d for d in result.diagnostics if d.code == "ambiguous_member"]


class TestCasts:
    """Test CAST relations."""

    def test_explicit_cast(self, extract, select):
        """Test a cast expression."""
        result = extract(
            """
            class A {
                String m(Object o) { return (String) o; }
            }
            """
        )

        cast = single(select(result, RelationKind.CAST))

        assert cast.target == "java.lang.String"
        assert cast.attributes["value_expression"] == "o"
        assert cast.attributes["is_pattern_matching"] is False

    def test_pattern_matching(self, extract, select):
        """Test instanceof with a binding is a pattern cast; without one it is not."""
        result = extract(
            """
            class A {
                int m(Object o) {
                    if (o instanceof Integer) {}
                    if (o instanceof String s) { return s.length(); }
                    return 0;
                }
            }
            """
        )

        cast = single(select(result, RelationKind.CAST))
        call = single(select(result, RelationKind.CALL))

        assert cast.target == "java.lang.String"
        assert cast.attributes["is_pattern_matching"] is True
        assert cast.attributes["pattern_variable"] == "s"
        assert call.attributes["receiver_type"] == "java.lang.String"

    def test_primitive_cast(self, extract, select):
        """Test primitive casts are flagged."""
        result = extract(
            """
            class A {
                int m(double d) { return (int) d; }
            }
            """
        )

        cast = single(select(result, RelationKind.CAST))

        assert cast.target == "int"
        assert cast.target_kind == SymbolKind.PRIMITIVE
        assert cast.attributes["is_primitive"] is True


class TestThrows:
    """Test THROW relations."""

    def test_signature_and_statement(self, extract, select):
        """Test throws clauses and throw statements."""
        result = extract(
            """
            import java.io.IOException;
            class A {
                void m() throws IOException {
                    throw new IllegalStateException("x");
                }
            }
            """
        )

        signature, statement = select(result, RelationKind.THROW)

        assert signature.target == "java.io.IOException"
        assert signature.attributes["is_signature"] is True
        assert signature.attributes["is_runtime"] is False
        assert statement.target == "java.lang.IllegalStateException"
        assert statement.attributes["is_signature"] is False
        assert statement.attributes["is_runtime"] is True
        assert statement.attributes["is_rethrow"] is False

    def test_rethrow(self, extract, select):
        """Test rethrowing a catch parameter."""
        result = extract(
            """
            class A {
                void m() throws Exception {
                    try {
                    } catch (Exception e) {
                        throw e;
                    }
                }
            }
            """
        )

        statement = select(result, RelationKind.THROW)[-1]

        assert statement.target == "java.lang.Exception"
        assert statement.attributes["is_rethrow"] is True
        assert statement.attributes["thrown_expression"] == "e"

    def test_custom_runtime_exception(self, extract, select):
        """Test runtime-ness follows the declared hierarchy."""
        result = extract(
            """
            class AppError extends RuntimeException {}
            class A {
                void m() { throw new AppError(); }
            }
            """
        )

        statement = single(select(result, RelationKind.THROW))

        assert statement.target == "AppError"
        assert statement.attributes["is_runtime"] is True


class TestSignatures:
    """Test RETURN and PARAMETER relations."""

    def test_return_types(self, extract, select):
        """Test generic, primitive array and void returns."""
        result = extract(
            """
            import java.util.List;
            class A {
                List<String> names() { return null; }
                int[] sizes() { return null; }
                void nothing() {}
            }
            """
        )

        names = single(select(result, RelationKind.RETURN, source="A.names()"))
        sizes = single(select(result, RelationKind.RETURN, source="A.sizes()"))

        assert names.target == "java.util.List"
        assert names.attributes["has_type_arguments"] is True
        assert sizes.target == "int"
        assert sizes.attributes["is_array"] is True
        assert sizes.attributes["dimensions"] == 1
        assert select(result, RelationKind.RETURN, source="A.nothing()") == []
        assert single(select(result, RelationKind.TYPE_ARG, source="A.names()")).target == "java.lang.String"

    def test_parameters(self, extract, select):
        """Test parameter types, order, finality and varargs."""
        result = extract(
            """
            class A {
                void m(final String s, int... rest) {}
            }
            """
        )

        first, second = select(result, RelationKind.PARAMETER, source="A.m(String,int[])")

        assert first.target == "java.lang.String"
        assert first.attributes["parameter_name"] == "s"
        assert first.attributes["index"] == 0
        assert first.attributes["is_final"] is True
        assert second.target == "int"
        assert second.attributes["is_varargs"] is True

    def test_lambda_parameters(self, extract, select):
        """Test explicitly typed lambda parameters; inferred ones have no type."""
        result = extract(
            """
            import java.util.function.*;
            class A {
                void m() {
                    Function<String, Integer> f = (String x) -> x.length();
                    Function<String, Integer> g = y -> y.length();
                }
            }
            """
        )

        parameter = single(select(result, RelationKind.PARAMETER, source="A.m().lambda$1"))

        assert parameter.target == "java.lang.String"
        assert select(result, RelationKind.PARAMETER, source="A.m().lambda$2") == []


class TestTypeRelations:
    """Test EXTEND, IMPLEMENT and ANNOTATION relations."""

    def test_supertypes(self, extract, select):
        """Test superclass and interfaces in declaration order."""
        result = extract(
            """
            class B {}
            class A extends B implements Runnable, Comparable<A> {
                public void run() {}
                public int compareTo(A other) { return 0; }
            }
            interface Task extends Runnable {}
            """
        )

        extend = single(select(result, RelationKind.EXTEND, source="A"))
        implements = select(result, RelationKind.IMPLEMENT, source="A")

        assert extend.target == "B"
        assert [(i.target, i.attributes["index"]) for i in implements] == [
            ("java.lang.Runnable", 0),
            ("java.lang.Comparable", 1),
        ]
        assert implements[1].attributes["has_type_arguments"] is True
        assert single(select(result, RelationKind.TYPE_ARG, source="A")).target == "A"
        assert single(select(result, RelationKind.EXTEND, source="Task")).target == "java.lang.Runnable"

    def test_annotations(self, extract, select):
        """Test annotations on types, methods and parameters."""
        result = extract(
            """
            @Deprecated
            class A {
                @Override
                public String toString() { return ""; }
                void m(@SuppressWarnings("unused") int p) {}
            }
            """
        )

        by_source = {r.source: r for r in select(result, RelationKind.ANNOTATION)}

        assert by_source["A"].target == "java.lang.Deprecated"
        assert by_source["A"].attributes["annotation_target"] == "TYPE"
        assert by_source["A.toString()"].attributes["annotation_target"] == "METHOD"
        assert by_source["A.m(int).p"].target == "java.lang.SuppressWarnings"
        assert by_source["A.m(int).p"].attributes["annotation_value"] == '"unused"'

    def test_annotation_parameters(self, extract, select):
        """Test key=value annotation arguments."""
        result = extract(
            """
            @interface Route { String path(); int weight(); }
            class A {
                @Route(path = "/x", weight = 2)
                void handle() {}
            }
            """
        )

        annotation = single(select(result, RelationKind.ANNOTATION, source="A.handle()"))

        assert annotation.target == "Route"
        assert annotation.attributes["annotation_params"] == ['path="/x"', "weight=2"]


class TestUsageRoles:
    """Test USE relations and their roles."""

    def test_condition_and_operand(self, extract, select):
        """Test reads in conditions and operators."""
        result = extract(
            """
            class A {
                boolean ready;
                int m(int a, int b) {
                    if (ready) { return a + b; }
                    return 0;
                }
            }
            """
        )

        roles = [(u.target, u.attributes["usage_role"]) for u in select(result, RelationKind.USE)]

        assert roles == [
            ("A.ready", "condition"),
            ("A.m(int,int).a", "operand"),
            ("A.m(int,int).b", "operand"),
        ]

    def test_enum_case_labels(self, extract, select):
        """Test switch labels over an enum bind to its constants."""
        result = extract(
            """
            enum Color { RED, GREEN }
            class P {
                String name(Color c) {
                    switch (c) {
                        case RED: return "r";
                        default: return "x";
                    }
                }
            }
            """
        )

        label = single(select(result, RelationKind.USE, target="Color.RED"))

        assert label.attributes["is_case_label"] is True
        assert label.attributes["binding_kind"] == "static"

    def test_external_field_access(self, extract, select):
        """Test JDK static fields are external reads."""
        result = extract(
            """
            class A {
                int m() { return Integer.MAX_VALUE; }
            }
            """
        )

        use = single(select(result, RelationKind.USE))

        assert use.target == "java.lang.Integer.MAX_VALUE"
        assert use.attributes["receiver"] == "Integer"
        assert use.attributes["is_external"] is True

    def test_array_length_is_not_a_relation(self, extract, select):
        """Test `arr.length` reads the array without a member relation."""
        result = extract(
            """
            class A {
                int m(int[] arr) { return arr.length; }
            }
            """
        )

        uses = select(result, RelationKind.USE)

        assert [u.target for u in uses] == ["A.m(int[]).arr"]


class TestUnitResult:
    """Test the per-unit result."""

    def test_stats_and_serialization(self, extract):
        """Test per-kind counts and the serialized record form."""
        result = extract(
            """
            class A {
                void m() { m(); }
            }
            """
        )

        record = result.by_kind(RelationKind.CALL)[0].to_dict()

        assert result.ok
        assert result.stats() == {"CALL": 1}
        assert record["sourceQualifiedName"] == "A.m()"
        assert record["targetQualifiedName"] == "A.m()"
        assert record["relationKind"] == "CALL"
        assert record["span"]["start_line"] == 2
