"""
Binder Tests

Tests for simple-name binding: lexical precedence, inheritance, static
context, visibility and static imports.
"""

from codegraph_relations.foundation.ir.models import RelationKind


def single(relations):
    assert len(relations) == 1, relations
    return relations[0]


class TestLexicalPrecedence:
    """Test the local > parameter > field lookup order."""

    def test_block_local_does_not_leak(self, extract, select):
        """Test a name declared in a closed block falls back to the field."""
        result = extract(
            """
            class A {
                int f;
                void m() {
                    { int f = 1; }
                    System.out.println(f);
                }
            }
            """
        )

        use = single(select(result, RelationKind.USE, source="A.m()", target="A.f"))

        assert use.attributes["binding_kind"] == "field"
        assert use.attributes["usage_role"] == "argument"
        assert use.attributes["argument_index"] == 0
        assert use.attributes["call_site"] == "java.io.PrintStream.println"
        assert select(result, RelationKind.USE, target="A.m().block$1.f$1") == []

    def test_parameter_shadows_field(self, extract, select):
        """Test a parameter hides a field of the same name."""
        result = extract(
            """
            class A {
                int f;
                int m(int f) { return f; }
            }
            """
        )

        use = single(select(result, RelationKind.USE, source="A.m(int)"))

        assert use.target == "A.m(int).f"
        assert use.attributes["binding_kind"] == "parameter"
        assert use.attributes["usage_role"] == "return_value"

    def test_local_visible_from_declarator(self, extract, select):
        """Test a reference before a local's declarator binds outward."""
        result = extract(
            """
            class A {
                int f;
                void m() {
                    int a = f;
                    int f = 2;
                    int b = f;
                }
            }
            """
        )

        targets = [r.target for r in select(result, RelationKind.USE, source="A.m()")]

        assert targets == ["A.f", "A.m().f"]

    def test_nested_block_sees_outer_local(self, extract, select):
        """Test inner blocks see locals of enclosing blocks."""
        result = extract(
            """
            class A {
                void m() {
                    int total = 0;
                    if (true) {
                        int x = total;
                    }
                }
            }
            """
        )

        use = single(select(result, RelationKind.USE, target="A.m().total"))

        assert use.attributes["binding_kind"] == "local"


class TestMembers:
    """Test field and method binding through types."""

    def test_inherited_field(self, extract, select):
        """Test fields declared on a superclass bind as inherited."""
        result = extract(
            """
            class B { protected int x; }
            class C extends B {
                void m() { x = 1; }
            }
            """
        )

        assign = single(select(result, RelationKind.ASSIGN, source="C.m()"))

        assert assign.target == "B.x"
        assert assign.attributes["binding_kind"] == "inherited"

    def test_outer_class_field(self, extract, select):
        """Test inner classes see fields of their enclosing class."""
        result = extract(
            """
            class Outer {
                int size;
                class Inner {
                    int read() { return size; }
                }
            }
            """
        )

        use = single(select(result, RelationKind.USE, source="Outer.Inner.read()"))

        assert use.target == "Outer.size"
        assert use.attributes["binding_kind"] == "field"

    def test_unqualified_calls(self, extract, select):
        """Test own, inherited and external-supertype methods."""
        result = extract(
            """
            class Base { void shared() {} }
            class A extends Base {
                void helper() {}
                void m() {
                    helper();
                    shared();
                    toString();
                }
            }
            """
        )

        calls = select(result, RelationKind.CALL, source="A.m()")

        assert [(c.target, c.attributes["binding_kind"]) for c in calls] == [
            ("A.helper()", "member"),
            ("Base.shared()", "inherited"),
            ("java.lang.Object.toString", "external"),
        ]
        assert calls[1].attributes["is_inherited"] is True
        assert calls[2].attributes["is_external"] is True

    def test_method_from_external_superclass(self, extract, select):
        """Test undeclared calls are attributed to an external supertype."""
        result = extract(
            """
            class Worker extends Thread {
                void go() { start(); }
            }
            """
        )

        call = single(select(result, RelationKind.CALL, source="Worker.go()"))

        assert call.target == "java.lang.Thread.start"
        assert call.attributes["binding_kind"] == "external"

    def test_unresolved_name(self, extract, select):
        """Test unknown names are kept and flagged."""
        result = extract(
            """
            class A {
                int m() { return nope; }
            }
            """
        )

        use = single(select(result, RelationKind.USE, source="A.m()"))

        assert use.target == "nope"
        assert use.attributes["unresolved"] is True
        assert use.attributes["is_external"] is True


class TestStaticContext:
    """Test instance members referenced from static code."""

    def test_instance_field_from_static_method(self, extract, select):
        """Test the reference is emitted but marked denied."""
        result = extract(
            """
            class A {
                int count;
                static int s() { return count; }
            }
            """
        )

        use = single(select(result, RelationKind.USE, source="A.s()"))

        assert use.target == "A.count"
        assert use.attributes["binding_kind"] == "visibility_denied"
        assert use.attributes["visibility_denied"] is True
        assert use.attributes["denied_reason"] == "static_context"

    def test_static_field_from_static_method(self, extract, select):
        """Test static members are fine in static code."""
        result = extract(
            """
            class A {
                static int total;
                static int s() { return total; }
            }
            """
        )

        use = single(select(result, RelationKind.USE, source="A.s()"))

        assert use.attributes["binding_kind"] == "static"
        assert "visibility_denied" not in use.attributes

    def test_instance_method_from_static_nested_class(self, extract, select):
        """Test a static nested class cannot reach outer instance methods."""
        result = extract(
            """
            class Outer {
                void ping() {}
                static class Nested {
                    void go() { ping(); }
                }
            }
            """
        )

        call = single(select(result, RelationKind.CALL, source="Outer.Nested.go()"))

        assert call.target == "Outer.ping()"
        assert call.attributes["denied_reason"] == "static_context"

    def test_static_initializer(self, extract, select):
        """Test static initializers are static context too."""
        result = extract(
            """
            class A {
                int value;
                static { int copy = value; }
            }
            """
        )

        use = single(select(result, RelationKind.USE, source="A.$static$1"))

        assert use.attributes["denied_reason"] == "static_context"


class TestVisibility:
    """Test access checks on declared members."""

    def test_private_member_of_other_class(self, extract, select):
        """Test private members are denied outside their top-level type."""
        result = extract(
            """
            class A { private int secret; }
            class B {
                int m(A a) { return a.secret; }
            }
            """
        )

        use = single(select(result, RelationKind.USE, target="A.secret"))

        assert use.attributes["denied_reason"] == "private"

    def test_private_member_within_nest(self, extract, select):
        """Test nested types share access to private members."""
        result = extract(
            """
            class Outer {
                private int secret;
                static class Nested {
                    int m(Outer o) { return o.secret; }
                }
            }
            """
        )

        use = single(select(result, RelationKind.USE, target="Outer.secret"))

        assert use.attributes["binding_kind"] == "field"

    def test_package_and_protected_across_packages(self, process, select):
        """Test package-private and protected rules between packages."""
        batch = process(
            {
                "p1/A.java": """
                    package p1;
                    public class A {
                        int hidden;
                        protected int guarded;
                        public int shown;
                    }
                """,
                "p2/B.java": """
                    package p2;
                    import p1.A;
                    class Sub extends A {
                        int m() { return guarded; }
                    }
                    class Other {
                        int m(A a) { return a.hidden + a.guarded + a.shown; }
                    }
                """,
            }
        )
        unit = batch.units[1]

        sub = single(select(unit, RelationKind.USE, source="p2.Sub.m()"))
        other = {r.target: r.attributes for r in select(unit, RelationKind.USE, source="p2.Other.m(A)")
                 if r.target.startswith("p1.A.")}

        assert sub.attributes["binding_kind"] == "inherited"
        assert other["p1.A.hidden"]["denied_reason"] == "package_private"
        assert other["p1.A.guarded"]["denied_reason"] == "protected"
        assert other["p1.A.shown"]["binding_kind"] == "field"


class TestStaticImports:
    """Test names brought in by static imports."""

    def test_static_import_of_declared_method(self, process, select):
        """Test single static imports bind to the declared member."""
        batch = process(
            {
                "util/Helpers.java": """
                    package util;
                    public class Helpers {
                        public static int twice(int x) { return 2 * x; }
                    }
                """,
                "app/A.java": """
                    package app;
                    import static util.Helpers.twice;
                    class A {
                        int m() { return twice(2); }
                    }
                """,
            }
        )

        call = single(select(batch.units[1], RelationKind.CALL, source="app.A.m()"))

        assert call.target == "util.Helpers.twice(int)"
        assert call.attributes["binding_kind"] == "static_import"

    def test_static_import_of_jdk_field(self, extract, select):
        """Test static imports of JDK members are external."""
        result = extract(
            """
            import static java.lang.Math.PI;
            class A {
                double m() { return PI; }
            }
            """
        )

        use = single(select(result, RelationKind.USE, source="A.m()"))

        assert use.target == "java.lang.Math.PI"
        assert use.attributes["binding_kind"] == "external"

    def test_wildcard_static_import(self, process, select):
        """Test wildcard static imports are searched after the scope chain."""
        batch = process(
            {
                "cfg/Limits.java": """
                    package cfg;
                    public class Limits { public static final int MAX = 10; }
                """,
                "app/A.java": """
                    package app;
                    import static cfg.Limits.*;
                    class A {
                        int m() { return MAX; }
                    }
                """,
            }
        )

        use = single(select(batch.units[1], RelationKind.USE, source="app.A.m()"))

        assert use.target == "cfg.Limits.MAX"
        assert use.attributes["binding_kind"] == "static_import"
