"""
Batch Processor Tests

Tests for the two-phase batch run: declaration passes, the index barrier,
expression passes and per-unit failure handling.
"""

from unittest.mock import patch

import pytest

from codegraph_relations.exceptions import InternalContractError
from codegraph_relations.foundation.generators import JavaRelationGenerator
from codegraph_relations.foundation.ir.models import RelationKind, UnitStatus
from codegraph_relations.foundation.parsing import SourceFile
from codegraph_relations.foundation.semantic import RelationEmitter
from codegraph_relations.infra.config import FilterConfig, ProcessingConfig
from codegraph_relations.pipeline import BatchProcessor, process_sources

SERVICE = """
    package app;
    public class Service {
        public void run() {}
    }
"""

CLIENT = """
    package app;
    class Client {
        void go(Service service) {
            service.run();
        }
    }
"""


class TestCrossUnitResolution:
    """Test references between units of one batch."""

    @pytest.mark.parametrize("order", [("Service", "Client"), ("Client", "Service")])
    def test_reference_resolves_regardless_of_order(self, process, select, order):
        """Test the barrier makes every declaration visible to every unit."""
        code = {"Service": SERVICE, "Client": CLIENT}
        batch = process({f"app/{name}.java": code[name] for name in order})
        client = next(u for u in batch.units if u.file_path == "app/Client.java")

        (call,) = select(client, RelationKind.CALL)

        assert call.target == "app.Service.run()"
        assert call.attributes["binding_kind"] == "member"
        assert "is_external" not in call.attributes

    def test_type_from_other_package(self, process, select):
        """Test imported project types resolve to their declaration."""
        batch = process(
            {
                "model/User.java": "package model; public class User { public String name; }",
                "app/Greeter.java": """
                    package app;
                    import model.User;
                    class Greeter {
                        String greet(User user) { return user.name; }
                    }
                """,
            }
        )

        (parameter,) = select(batch.units[1], RelationKind.PARAMETER)
        (use,) = select(batch.units[1], RelationKind.USE, target="model.User.name")

        assert parameter.target == "model.User"
        assert use.attributes["binding_kind"] == "field"

    def test_same_package_without_import(self, process, select):
        """Test types of the same package need no import."""
        batch = process(
            {
                "p/Base.java": "package p; public class Base {}",
                "p/Impl.java": "package p; public class Impl extends Base {}",
            }
        )

        (extend,) = select(batch.units[1], RelationKind.EXTEND)

        assert extend.target == "p.Base"
        assert "is_external" not in extend.attributes


class TestBatchBehaviour:
    """Test ordering, diagnostics and failure isolation."""

    def test_results_in_input_order(self, process):
        """Test unit results follow the input order with several workers."""
        units = {f"p/C{i}.java": f"package p; class C{i} {{ void m() {{}} }}" for i in range(12)}

        batch = process(units, config=ProcessingConfig(max_workers=4))

        assert [u.file_path for u in batch.units] == list(units)
        assert batch.index.frozen
        assert len(batch.failed) == 0

    def test_duplicate_type_reported_on_later_unit(self, process):
        """Test a cross-unit name collision becomes a diagnostic, not a crash."""
        batch = process(
            {
                "one/A.java": "package p; class A {}",
                "two/A.java": "package p; class A { int x; }",
            }
        )
        first, second = batch.units

        assert [d.code for d in first.diagnostics] == []
        assert [d.code for d in second.diagnostics] == ["duplicate_symbol"]
        assert second.diagnostics[0].detail["existing_path"] == "one/A.java"
        assert second.ok

    def test_unparseable_unit_reported(self):
        """Test a unit without a parser degrades to a parse failure."""
        sources = [
            SourceFile.from_content("A.java", "class A { void m() { m(); } }"),
            SourceFile.from_content("legacy.cob", "IDENTIFICATION DIVISION.", language="cobol"),
        ]

        batch = BatchProcessor().process(sources)
        good, bad = batch.units

        assert good.ok
        assert bad.status == UnitStatus.PARSE_FAILED
        assert bad.relations == []
        assert bad.diagnostics[0].code == "parse_failed"
        assert batch.failed == [bad]

    def test_failing_unit_discards_partial_results(self, process):
        """Test an error during one unit's walk leaves the other units intact."""
        original = RelationEmitter.run

        def run(emitter):
            if emitter.unit.file_path == "Bad.java":
                raise RuntimeError("walk failed")
            return original(emitter)

        with patch.object(RelationEmitter, "run", autospec=True, side_effect=run):
            batch = process(
                {
                    "Good.java": "class Good { void m() { m(); } }",
                    "Bad.java": "class Bad { void m() { m(); } }",
                }
            )
        good, bad = batch.units

        assert good.stats() == {"CALL": 1}
        assert bad.status == UnitStatus.FAILED
        assert bad.relations == []
        assert "RuntimeError" in bad.error

    def test_contract_violation_is_fatal(self, process):
        """Test engine invariant violations are not absorbed as unit failures."""
        with patch.object(RelationEmitter, "run", side_effect=InternalContractError("broken")):
            with pytest.raises(InternalContractError):
                process({"A.java": "class A {}"})

    def test_batch_aggregates(self, process):
        """Test batch-level relation list and stats."""
        batch = process(
            {
                "A.java": "class A { void m() { m(); } }",
                "B.java": "class B { void n() { n(); n(); } }",
            }
        )

        assert batch.stats() == {"CALL": 3}
        assert len(batch.relations) == 3

    def test_process_sources_wrapper(self):
        """Test the convenience wrapper returns unit results."""
        units = process_sources([SourceFile.from_content("A.java", "class A {}")])

        assert [u.file_path for u in units] == ["A.java"]


class TestFilteringAndConfig:
    """Test settings passed through the processor."""

    def test_balanced_filter_drops_external_calls(self, process, select):
        """Test the noise filter runs on every unit result."""
        code = {
            "A.java": """
                class A {
                    void helper() {}
                    void m() throws java.io.IOException {
                        helper();
                        System.out.println("x");
                    }
                }
            """
        }

        raw = process(code)
        balanced = process(code, filter_config=FilterConfig(noise_level="balanced"))

        assert [c.target for c in select(raw.units[0], RelationKind.CALL)] == [
            "A.helper()",
            "java.io.PrintStream.println",
        ]
        assert [c.target for c in select(balanced.units[0], RelationKind.CALL)] == ["A.helper()"]
        assert len(select(balanced.units[0], RelationKind.THROW)) == 1

    def test_generator_receives_extraction_config(self):
        """Test the default generator is built from the extraction config."""
        processor = BatchProcessor()

        assert isinstance(processor.generator, JavaRelationGenerator)
        assert processor.generator.config is processor.extraction
