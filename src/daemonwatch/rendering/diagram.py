"""
Mermaid flowchart of memory usage over time.

The diagram is assembled as a small graph (subgraphs of nodes, edges, style
classes) and serialized to Mermaid text in one place. Each downsampled
timestamp gets a subgraph holding one node per process sampled at that time
plus an aggregate node; edges chain each process and the aggregate from one
sampled timestamp to the next.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..analysis.aggregation import aggregate_at, downsample_timeline
from ..models.samples import ParsedLog, Series, SeriesKey

PROCESS_CLASS = "process"
AGGREGATE_CLASS = "aggregated"
DEFAULT_CLASS_DEFS: Dict[str, str] = {
    PROCESS_CLASS: "fill:#4ECDC4,stroke:#333,stroke-width:2px",
    AGGREGATE_CLASS: "fill:#FF6B6B,stroke:#333,stroke-width:2px",
}

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9]")
_INDENT = "    "


def sanitize_node_id(text: str) -> str:
    """
    Replace every non-alphanumeric character with `_`.

    Distinct inputs can map to the same id (`"1-a"` and `"1_a"`); such
    collisions merge nodes in the rendered diagram.
    """
    return _UNSAFE_ID_CHARS.sub("_", text)


def _escape_label(text: str) -> str:
    return text.replace('"', "#quot;")


@dataclass(frozen=True)
class DiagramNode:
    id: str
    label: str
    style_class: str


@dataclass(frozen=True)
class DiagramEdge:
    source: str
    target: str


@dataclass
class DiagramSubgraph:
    id: str
    title: str
    nodes: List[DiagramNode] = field(default_factory=list)


@dataclass
class MermaidDiagram:
    """
    A left-to-right flowchart whose time columns sit inside one outer
    subgraph.
    """

    title: str = "Memory Usage Over Time"
    subgraphs: List[DiagramSubgraph] = field(default_factory=list)
    edges: List[DiagramEdge] = field(default_factory=list)
    class_defs: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CLASS_DEFS))
    theme: str = "dark"

    @property
    def nodes(self) -> List[DiagramNode]:
        return [node for subgraph in self.subgraphs for node in subgraph.nodes]

    def node_ids_by_class(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {name: [] for name in self.class_defs}
        for node in self.nodes:
            grouped.setdefault(node.style_class, []).append(node.id)
        return grouped

    def to_mermaid(self) -> str:
        lines = [
            f"%%{{init: {{'theme': '{self.theme}'}}}}%%",
            "flowchart LR",
            f'{_INDENT}subgraph Time["{_escape_label(self.title)}"]',
            f"{_INDENT * 2}direction TB",
        ]
        for subgraph in self.subgraphs:
            lines.append(f'{_INDENT * 2}subgraph {subgraph.id}["{_escape_label(subgraph.title)}"]')
            for node in subgraph.nodes:
                lines.append(f'{_INDENT * 3}{node.id}["{_escape_label(node.label)}"]')
            lines.append(f"{_INDENT * 2}end")
        lines.append(f"{_INDENT}end")

        if self.edges:
            lines.append("")
        for edge in self.edges:
            lines.append(f"{_INDENT}{edge.source} --> {edge.target}")

        lines.append("")
        for name, style in self.class_defs.items():
            lines.append(f"{_INDENT}classDef {name} {style}")
        for name, node_ids in self.node_ids_by_class().items():
            if node_ids:
                lines.append(f"{_INDENT}class {','.join(node_ids)} {name}")
        return "\n".join(lines)


def _process_node_id(base_id: str, index: int) -> str:
    return f"{base_id}_{index}"


def _aggregate_node_id(index: int) -> str:
    return f"Agg_{index}"


def build_diagram(parsed: ParsedLog) -> MermaidDiagram:
    """
    Build the flowchart for a parsed log.

    Aggregate labels sum every series at the sampled timestamp. A process
    edge is drawn only when the process was sampled at both ends of it; the
    aggregate chain is never broken.
    """
    sampled = downsample_timeline(parsed.timeline)
    entries: List[Tuple[SeriesKey, str, Series]] = [
        (key, sanitize_node_id(key.label), series) for key, series in parsed.series.items()
    ]

    diagram = MermaidDiagram()
    for i, timestamp in enumerate(sampled):
        subgraph = DiagramSubgraph(id=f"T{i}", title=timestamp)
        for key, base_id, series in entries:
            if not series.has(timestamp):
                continue
            subgraph.nodes.append(
                DiagramNode(
                    id=_process_node_id(base_id, i),
                    label=f"{key.label}<br/>{series.value_at(timestamp):.0f}MB",
                    style_class=PROCESS_CLASS,
                )
            )
        subgraph.nodes.append(
            DiagramNode(
                id=_aggregate_node_id(i),
                label=f"Aggregated<br/>{aggregate_at(parsed.series, timestamp):.0f}MB",
                style_class=AGGREGATE_CLASS,
            )
        )
        diagram.subgraphs.append(subgraph)

    for _, base_id, series in entries:
        for i in range(1, len(sampled)):
            if series.has(sampled[i - 1]) and series.has(sampled[i]):
                diagram.edges.append(
                    DiagramEdge(_process_node_id(base_id, i - 1), _process_node_id(base_id, i))
                )

    for i in range(1, len(sampled)):
        diagram.edges.append(DiagramEdge(_aggregate_node_id(i - 1), _aggregate_node_id(i)))

    return diagram


def render_diagram(parsed: ParsedLog) -> str:
    """Mermaid text for a parsed log."""
    return build_diagram(parsed).to_mermaid()
