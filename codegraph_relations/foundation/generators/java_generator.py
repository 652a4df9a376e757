"""
Java Relation Generator

Parses a Java unit with tree-sitter and drives its two semantic passes.
A unit that fails mid-walk keeps none of its partial relations.
"""

from tree_sitter import Parser

from codegraph_relations.exceptions import InternalContractError, ParseError, UnsupportedLanguageError
from codegraph_relations.infra.observability import get_logger, log_error

from ..ir.models import Diagnostic, ScopeArena, UnitContext, UnitDeclarations, UnitResult, UnitStatus
from ..parsing import AstTree, SourceFile
from ..semantic.declaration_pass import DeclarationPass
from ..semantic.project_index import ProjectIndex
from ..semantic.relation_emitter import RelationEmitter
from .base import RelationGenerator

logger = get_logger(__name__)


class JavaRelationGenerator(RelationGenerator):
    """
    Relation generator for Java.

    Example:
        ```python
        generator = JavaRelationGenerator()
        result = generator.generate(SourceFile.from_content("A.java", code))
        result.by_kind(RelationKind.CALL)
        ```
    """

    language = "java"

    def declare(self, source: SourceFile, parser: Parser | None = None) -> UnitDeclarations:
        """
        Parse and declare one unit.

        A unit that cannot be parsed comes back without a tree and with a
        `parse_failed` diagnostic; it is never merged into the index.
        """
        try:
            ast = AstTree.parse(source, parser)
        except (ParseError, UnsupportedLanguageError) as e:
            log_error(logger, "unit_parse_failed", e, file_path=source.file_path)
            return self._unparsed(source, str(e))

        if ast.root.type == "ERROR":
            logger.warning("unit_parse_failed", file_path=source.file_path, reason="root_is_error")
            return self._unparsed(source, "Syntax tree root is an error node")

        try:
            return DeclarationPass(ast, self.config).run()
        except InternalContractError:
            raise
        except Exception as e:
            log_error(logger, "unit_failed", e, file_path=source.file_path, phase="declaration")
            return self._unparsed(source, f"{type(e).__name__}: {e}", code="unit_failed")

    def extract(self, declarations: UnitDeclarations, index: ProjectIndex) -> UnitResult:
        if declarations.tree is None:
            code = declarations.diagnostics[0].code if declarations.diagnostics else "parse_failed"
            return UnitResult(
                file_path=declarations.file_path,
                status=UnitStatus.FAILED if code == "unit_failed" else UnitStatus.PARSE_FAILED,
                diagnostics=list(declarations.diagnostics),
                error=code,
            )

        diagnostics = list(declarations.diagnostics)
        try:
            emitter = RelationEmitter(declarations, index, self.config)
            relations = emitter.run()
        except InternalContractError:
            raise
        except Exception as e:
            log_error(logger, "unit_failed", e, file_path=declarations.file_path)
            return UnitResult(
                file_path=declarations.file_path,
                status=UnitStatus.FAILED,
                symbols=declarations.symbols,
                diagnostics=diagnostics,
                error=f"{type(e).__name__}: {e}",
            )

        diagnostics.extend(emitter.diagnostics)
        logger.debug(
            "unit_extracted",
            file_path=declarations.file_path,
            relations=len(relations),
            diagnostics=len(diagnostics),
        )
        return UnitResult(
            file_path=declarations.file_path,
            relations=relations,
            symbols=declarations.symbols,
            diagnostics=diagnostics,
        )

    @staticmethod
    def _unparsed(source: SourceFile, message: str, code: str = "parse_failed") -> UnitDeclarations:
        return UnitDeclarations(
            context=UnitContext(file_path=source.file_path),
            arena=ScopeArena(source.file_path),
            diagnostics=[Diagnostic(code=code, message=message, file_path=source.file_path)],
        )
