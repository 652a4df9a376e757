"""
Mermaid HTML Exporter

Renders unit results as a single `graph LR` page:

    subgraph per unit   every declared symbol of the file
    src -- KIND --> tgt one edge per relation (self edges skipped)

Targets outside the analysed sources are drawn once, outside any subgraph,
labelled "(ext)".
"""

from pathlib import Path

from codegraph_relations.foundation.ir.models import Relation, SymbolKind, UnitResult
from codegraph_relations.infra.observability import get_logger

logger = get_logger(__name__)

VISUALIZATION_FILE = "visualization.html"

HTML_HEADER = (
    '<!DOCTYPE html><html><head><meta charset="UTF-8">'
    '<script src="https://cdn.jsdelivr.net/npm/mermaid/dist/mermaid.min.js"></script></head>\n'
    '<body><div class="mermaid">graph LR'
)
HTML_FOOTER = (
    "</div><script>mermaid.initialize({startOnLoad:true, maxTextSize:1000000});</script></body></html>"
)

_ID_REPLACEMENTS = str.maketrans(
    {".": "_", "(": "_", ")": "_", "[": "_", "]": "_", " ": "_", "$": "_", ",": "_", "/": "_", "@": "at"}
)


def safe_id(name: str) -> str:
    """Mermaid node id for a qualified name or file path."""
    return "n_" + name.translate(_ID_REPLACEMENTS)


def node_shape(name: str, kind: SymbolKind) -> str:
    label = f'"{name.replace(chr(34), "#quot;")} <small>({kind.value})</small>"'
    if kind == SymbolKind.INTERFACE:
        return f"([{label}])"
    if kind == SymbolKind.METHOD:
        return f"[/{label}/]"
    return f"[{label}]"


class MermaidExporter:
    """
    Exports unit results as a Mermaid flowchart page.

    Example:
        ```python
        MermaidExporter(output_dir).export(batch.units)
        ```
    """

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)

    def export(self, units: list[UnitResult]) -> dict[str, int]:
        """
        Write visualization.html for the given units.

        Returns:
            Number of nodes and edges drawn
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        nodes, edges = self.render(units)
        with open(self.output_dir / VISUALIZATION_FILE, "w", encoding="utf-8") as f:
            f.write("\n".join([HTML_HEADER, *nodes, *edges, HTML_FOOTER]))
            f.write("\n")

        counts = {
            "nodes": sum(1 for line in nodes if line.lstrip().startswith("n_")),
            "edges": len(edges),
        }
        logger.info("mermaid_export_complete", output_dir=str(self.output_dir), **counts)
        return counts

    def render(self, units: list[UnitResult]) -> tuple[list[str], list[str]]:
        """Graph body lines: subgraphs and external nodes, then edges."""
        nodes: list[str] = []
        declared: set[str] = set()
        for unit in units:
            nodes.append(f"  subgraph {safe_id(unit.file_path)} [📄 {unit.file_path}]")
            for symbol in unit.symbols.values():
                node = safe_id(symbol.qualified_name)
                declared.add(node)
                nodes.append(f"    {node}{node_shape(symbol.name, symbol.kind)}")
            nodes.append("  end")

        external: dict[str, Relation] = {}
        edges: list[str] = []
        for relation in (r for unit in units for r in unit.relations):
            source, target = safe_id(relation.source), safe_id(relation.target)
            if source == target:
                continue
            if target not in declared:
                external.setdefault(target, relation)
            edges.append(f"  {source} -- {relation.kind.value} --> {target}")

        for node, relation in external.items():
            name = relation.target.rpartition(".")[2] or relation.target
            nodes.append(f"  {node}{node_shape(name + ' (ext)', relation.target_kind)}")
        return nodes, edges
