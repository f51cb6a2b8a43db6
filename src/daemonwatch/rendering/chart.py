"""
Vector chart of daemon memory usage using Plotly.

The chart plots every series at full resolution against the complete
timeline: one solid line per process instance and a dashed aggregate line
drawn last so it sits on top. The y-axis runs from zero to the peak value
rounded up to the next 1000 MB, with dashed gridlines every 500 MB. The
figure is exported to SVG with Kaleido, which fetches its own Chrome build
when none is installed; an interactive HTML copy is always written next to
it.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import List

import kaleido
import plotly.graph_objects as go

from ..analysis.aggregation import aggregate_series
from ..models.samples import ParsedLog

logger = logging.getLogger(__name__)

# --- Module Constants ---

CHART_WIDTH = 1400
CHART_HEIGHT = 800
CHART_MARGIN = {"t": 60, "r": 300, "b": 100, "l": 100}
CHART_TITLE = "Build Process Memory Usage Over Time"

GRID_UNIT_MB = 1000
GRIDLINE_STEP_MB = 500
TARGET_X_LABELS = 15
X_LABEL_ANGLE = 45

SERIES_PALETTE = ["#FF9B9B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEEAD", "#D4A5A5"]
SERIES_OPACITY = 0.8
AGGREGATE_COLOR = "black"
AGGREGATE_OPACITY = 0.9
AGGREGATE_NAME = "Aggregated RSS"


def y_axis_max(peak_mb: float) -> int:
    """
    Round the peak up to the next grid unit (1000 MB).

    An empty or all-zero run still gets one grid unit so the axis has height.
    """
    return max(int(math.ceil(peak_mb / GRID_UNIT_MB)) * GRID_UNIT_MB, GRID_UNIT_MB)


def gridline_values(axis_max: int) -> List[int]:
    return list(range(0, axis_max + 1, GRIDLINE_STEP_MB))


def x_label_stride(point_count: int) -> int:
    """Stride that shows roughly TARGET_X_LABELS tick labels."""
    return max(math.ceil(point_count / TARGET_X_LABELS), 1)


def series_color(index: int) -> str:
    return SERIES_PALETTE[index % len(SERIES_PALETTE)]


@dataclass(frozen=True)
class ChartLayout:
    """
    Derived scale of the chart.

    Attributes:
        y_axis_max: Top of the y-axis in MB.
        gridlines: Gridline positions in MB, from 0 to y_axis_max.
        label_indices: Timeline indices that get an x tick label.
        x_span: Width of the x-axis in timeline steps; 1 for a single point.
        aggregate: Aggregate RSS for each timeline entry.
    """

    y_axis_max: int
    gridlines: List[int]
    label_indices: List[int]
    x_span: int
    aggregate: List[float]


def compute_chart_layout(parsed: ParsedLog) -> ChartLayout:
    aggregate = aggregate_series(parsed.series, parsed.timeline)
    peak = max(
        [value for series in parsed.series.values() for value in series.rss] + aggregate,
        default=0.0,
    )
    axis_max = y_axis_max(peak)
    n = len(parsed.timeline)
    return ChartLayout(
        y_axis_max=axis_max,
        gridlines=gridline_values(axis_max),
        label_indices=list(range(0, n, x_label_stride(n))),
        x_span=max(n - 1, 1),
        aggregate=aggregate,
    )


def build_chart(parsed: ParsedLog) -> go.Figure:
    """
    Build the memory chart for a parsed log.

    Args:
        parsed: Output of the log parser.

    Returns:
        A Plotly figure with one trace per series followed by the aggregate.
    """
    layout = compute_chart_layout(parsed)
    position = {timestamp: i for i, timestamp in enumerate(parsed.timeline)}

    fig = go.Figure()
    for idx, (key, series) in enumerate(parsed.series.items()):
        fig.add_trace(
            go.Scatter(
                x=[position[timestamp] for timestamp in series.timestamps],
                y=list(series.rss),
                mode="lines",
                name=key.label,
                line={"color": series_color(idx), "width": 2},
                opacity=SERIES_OPACITY,
                customdata=list(series.timestamps),
                hovertemplate="%{customdata}: %{y:.1f} MB<extra>" + key.label + "</extra>",
            )
        )

    fig.add_trace(
        go.Scatter(
            x=list(range(len(parsed.timeline))),
            y=layout.aggregate,
            mode="lines",
            name=AGGREGATE_NAME,
            line={"color": AGGREGATE_COLOR, "width": 2, "dash": "dash"},
            opacity=AGGREGATE_OPACITY,
            customdata=list(parsed.timeline),
            hovertemplate="%{customdata}: %{y:.1f} MB<extra>" + AGGREGATE_NAME + "</extra>",
        )
    )

    fig.update_layout(
        title={"text": CHART_TITLE, "x": 0.5, "xanchor": "center", "font": {"size": 24}},
        width=CHART_WIDTH,
        height=CHART_HEIGHT,
        margin=CHART_MARGIN,
        plot_bgcolor="white",
        paper_bgcolor="white",
        showlegend=True,
        legend={
            "x": 1.02,
            "y": 1,
            "xanchor": "left",
            "yanchor": "top",
            "bgcolor": "white",
            "bordercolor": "#e0e0e0",
            "borderwidth": 1,
            "font": {"size": 14},
        },
    )
    fig.update_xaxes(
        title_text="Time",
        range=[0, layout.x_span],
        tickmode="array",
        tickvals=layout.label_indices,
        ticktext=[parsed.timeline[i] for i in layout.label_indices],
        tickangle=X_LABEL_ANGLE,
        showgrid=False,
        showline=True,
        linecolor="black",
        linewidth=2,
        zeroline=False,
    )
    fig.update_yaxes(
        title_text="Memory Usage (MB)",
        range=[0, layout.y_axis_max],
        tickmode="linear",
        tick0=0,
        dtick=GRIDLINE_STEP_MB,
        ticksuffix="MB",
        showgrid=True,
        gridcolor="#e0e0e0",
        griddash="dash",
        showline=True,
        linecolor="black",
        linewidth=2,
        zeroline=False,
    )
    return fig


def _export_svg(fig: go.Figure, svg_path: Path) -> None:
    """
    Write the SVG with Kaleido.

    Kaleido drives a headless Chrome. When the first attempt fails, Kaleido's
    own helper fetches a Chrome build and the export is retried once.
    """
    try:
        fig.write_image(svg_path, format="svg", width=CHART_WIDTH, height=CHART_HEIGHT)
        return
    except Exception as e:
        logger.info(f"SVG export failed ({type(e).__name__}: {e}); fetching Chrome for Kaleido and retrying")

    chrome_path = kaleido.get_chrome_sync()
    logger.info(f"Chrome for Kaleido available at: {chrome_path}")
    fig.write_image(svg_path, format="svg", width=CHART_WIDTH, height=CHART_HEIGHT)


def save_chart(fig: go.Figure, svg_path: Path) -> List[Path]:
    """
    Save the figure as SVG and as interactive HTML beside it.

    The HTML copy is always written. A failed SVG export (no Chrome could be
    found or fetched for Kaleido) is logged as a warning rather than raised.

    Returns:
        The files actually written, SVG first when present.
    """
    svg_path.parent.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    try:
        _export_svg(fig, svg_path)
        logger.info(f"Static chart saved to: {svg_path}")
        written.append(svg_path)
    except Exception as e:
        logger.warning(
            f"Failed to save static chart to SVG (Kaleido could not start Chrome): {e}. "
            f"The interactive HTML chart is still written."
        )

    html_path = svg_path.with_suffix(".html")
    fig.write_html(html_path)
    logger.info(f"Interactive chart saved to: {html_path}")
    written.append(html_path)
    return written
