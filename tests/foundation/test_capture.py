"""
Capture Analyzer Tests

Tests for CAPTURE relations out of lambdas, anonymous classes and local classes.
"""

from codegraph_relations.foundation.ir.models import RelationKind


def single(relations):
    assert len(relations) == 1, relations
    return relations[0]


class TestLocalCaptures:
    """Test captured locals and parameters."""

    def test_lambda_captures_local(self, extract, select):
        """Test a lambda reading an outer local."""
        result = extract(
            """
            class A {
                void m() {
                    int base = 1;
                    Runnable r = () -> System.out.println(base);
                }
            }
            """
        )

        capture = single(select(result, RelationKind.CAPTURE))

        assert capture.source == "A.m().lambda$1"
        assert capture.target == "A.m().base"
        assert capture.attributes == {
            "capture_kind": "local_variable",
            "depth": 1,
            "variable_name": "base",
            "is_effectively_final": True,
        }
        assert result.relations[-1] == capture

    def test_reassigned_local_is_diagnosed(self, extract, select):
        """Test a captured local written after the lambda is not effectively final."""
        result = extract(
            """
            class A {
                void m() {
                    int base = 1;
                    Runnable r = () -> System.out.println(base);
                    base = 2;
                }
            }
            """
        )

        capture = single(select(result, RelationKind.CAPTURE))
        diagnostics = [d for d in result.diagnostics if d.code == "captured_variable_reassigned"]

        assert capture.attributes["is_effectively_final"] is False
        assert len(diagnostics) == 1
        assert diagnostics[0].detail == {"variable": "A.m().base", "captured_by": "A.m().lambda$1"}

    def test_final_local_stays_final(self, extract, select):
        """Test a declared-final local is always effectively final."""
        result = extract(
            """
            class A {
                void m() {
                    final int base = 1;
                    Runnable r = () -> System.out.println(base);
                }
            }
            """
        )

        capture = single(select(result, RelationKind.CAPTURE))

        assert capture.attributes["is_effectively_final"] is True
        assert result.diagnostics == []

    def test_nested_lambda_depths(self, extract, select):
        """Test each boundary crossed gets its own capture, outermost at depth 1."""
        result = extract(
            """
            class A {
                void m(int p) {
                    Runnable outer = () -> {
                        Runnable inner = () -> System.out.println(p);
                    };
                }
            }
            """
        )

        captures = select(result, RelationKind.CAPTURE, target="A.m(int).p")

        assert [(c.source, c.attributes["depth"]) for c in captures] == [
            ("A.m(int).lambda$1", 1),
            ("A.m(int).lambda$1.lambda$1", 2),
        ]
        assert {c.attributes["capture_kind"] for c in captures} == {"parameter"}

    def test_lambda_own_locals_not_captured(self, extract, select):
        """Test variables declared inside the lambda are not captures."""
        result = extract(
            """
            import java.util.function.Function;
            class A {
                void m() {
                    Function<Integer, Integer> f = x -> {
                        int y = x + 1;
                        return y;
                    };
                }
            }
            """
        )

        assert select(result, RelationKind.CAPTURE) == []

    def test_repeated_reads_captured_once(self, extract, select):
        """Test one capture per boundary and variable."""
        result = extract(
            """
            class A {
                void m() {
                    int n = 2;
                    Runnable r = () -> System.out.println(n + n);
                }
            }
            """
        )

        assert len(select(result, RelationKind.CAPTURE)) == 1


class TestMemberCaptures:
    """Test captured fields."""

    def test_implicit_and_explicit_this(self, extract, select):
        """Test `count` and `this.count` inside lambdas."""
        result = extract(
            """
            class A {
                int count;
                void m() {
                    Runnable r = () -> System.out.println(count);
                    Runnable s = () -> System.out.println(this.count);
                }
            }
            """
        )

        implicit = single(select(result, RelationKind.CAPTURE, source="A.m().lambda$1"))
        explicit = single(select(result, RelationKind.CAPTURE, source="A.m().lambda$2"))

        assert implicit.target == "A.count"
        assert implicit.attributes["capture_kind"] == "field"
        assert implicit.attributes["is_implicit_this"] is True
        assert explicit.attributes["is_implicit_this"] is False

    def test_static_field(self, extract, select):
        """Test static fields are captured as static."""
        result = extract(
            """
            class A {
                static int total;
                void m() {
                    Runnable r = () -> System.out.println(total);
                }
            }
            """
        )

        capture = single(select(result, RelationKind.CAPTURE))

        assert capture.attributes["capture_kind"] == "static"
        assert capture.attributes["is_static"] is True


class TestAnonymousClassCaptures:
    """Test captures out of anonymous class bodies."""

    def test_anonymous_class_is_the_capture_source(self, extract, select):
        """Test the anonymous class symbol owns the capture."""
        result = extract(
            """
            class A {
                void m() {
                    int limit = 3;
                    Runnable r = new Runnable() {
                        public void run() { System.out.println(limit); }
                    };
                }
            }
            """
        )

        capture = single(select(result, RelationKind.CAPTURE))
        use = single(select(result, RelationKind.USE, target="A.m().limit"))

        assert capture.source == "A.m().$1"
        assert capture.attributes["depth"] == 1
        assert use.source == "A.m().$1.run()"

    def test_anonymous_class_own_fields_not_captured(self, extract, select):
        """Test fields declared in the anonymous body are its own members."""
        result = extract(
            """
            class A {
                void m() {
                    Runnable r = new Runnable() {
                        int calls;
                        public void run() { calls++; }
                    };
                }
            }
            """
        )

        assign = single(select(result, RelationKind.ASSIGN, target="A.m().$1.calls"))

        assert assign.attributes["binding_kind"] == "field"
        assert select(result, RelationKind.CAPTURE) == []


class TestLocalClassCaptures:
    """Test captures out of classes declared inside a method body."""

    def test_local_class_is_the_capture_source(self, extract, select):
        """Test a local class method reading an outer parameter and an enclosing field."""
        result = extract(
            """
            class A {
                int c;
                void m(int p) {
                    class Loc {
                        int q() { return c + p; }
                    }
                }
            }
            """
        )

        captures = select(result, RelationKind.CAPTURE)

        assert [(r.source, r.target) for r in captures] == [
            ("A.m(int).Loc", "A.c"),
            ("A.m(int).Loc", "A.m(int).p"),
        ]
        assert captures[0].attributes["capture_kind"] == "field"
        assert captures[1].attributes["capture_kind"] == "parameter"
        assert captures[1].attributes["depth"] == 1

    def test_local_class_own_members_not_captured(self, extract, select):
        """Test fields of the local class itself stay plain member accesses."""
        result = extract(
            """
            class A {
                void m() {
                    class Counter {
                        int n;
                        void inc() { n++; }
                    }
                }
            }
            """
        )

        assert select(result, RelationKind.CAPTURE) == []

    def test_member_class_is_not_a_boundary(self, extract, select):
        """Test member classes reading outer fields produce no capture."""
        result = extract(
            """
            class A {
                int c;
                class Inner {
                    int q() { return c; }
                }
            }
            """
        )

        assert select(result, RelationKind.CAPTURE) == []
