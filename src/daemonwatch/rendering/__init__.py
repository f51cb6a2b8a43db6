"""
Renderers for the parsed log: a Mermaid flowchart and a Plotly vector chart.
"""

from .chart import (
    AGGREGATE_NAME,
    ChartLayout,
    build_chart,
    compute_chart_layout,
    gridline_values,
    save_chart,
    series_color,
    x_label_stride,
    y_axis_max,
)
from .diagram import (
    AGGREGATE_CLASS,
    PROCESS_CLASS,
    DiagramEdge,
    DiagramNode,
    DiagramSubgraph,
    MermaidDiagram,
    build_diagram,
    render_diagram,
    sanitize_node_id,
)

__all__ = [
    "AGGREGATE_NAME",
    "ChartLayout",
    "build_chart",
    "compute_chart_layout",
    "gridline_values",
    "save_chart",
    "series_color",
    "x_label_stride",
    "y_axis_max",
    "AGGREGATE_CLASS",
    "PROCESS_CLASS",
    "DiagramEdge",
    "DiagramNode",
    "DiagramSubgraph",
    "MermaidDiagram",
    "build_diagram",
    "render_diagram",
    "sanitize_node_id",
]
