"""
Markdown build summary.

Combines the Mermaid diagram, the overall figures and per-process details
into one section appended to the CI platform's build-summary file.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..analysis.statistics import RunStatistics

logger = logging.getLogger(__name__)

SECTION_TITLE = "## Build Process Analysis"
NO_DATA_TEXT = "No data"
GRAPH_DESCRIPTIONS = {".svg": "A detailed SVG graph", ".html": "An interactive HTML graph"}
LOG_SUFFIX = ".log"


def _format_mb(value: Optional[float]) -> str:
    return NO_DATA_TEXT if value is None else f"{value:.2f} MB"


def artifact_note(artifact_files: Sequence[Path]) -> Optional[str]:
    """
    Describe the published files, or None when nothing was published.

    The SVG is named only when it was actually written; otherwise the HTML
    chart is mentioned in its place.
    """
    suffixes = {Path(path).suffix for path in artifact_files}
    graph = next((GRAPH_DESCRIPTIONS[s] for s in (".svg", ".html") if s in suffixes), None)
    has_log = LOG_SUFFIX in suffixes

    if graph and has_log:
        subject = f"{graph} and log file are"
    elif graph:
        subject = f"{graph} is"
    elif has_log:
        subject = "The log file is"
    else:
        return None
    return f"> Note: {subject} available in the artifacts of this workflow run."


def compose_summary(
    diagram_text: str,
    stats: RunStatistics,
    artifact_files: Sequence[Path] = (),
) -> str:
    """
    Build the Markdown section for one run.

    Args:
        diagram_text: Mermaid source, embedded verbatim in a fenced block.
        stats: Figures from `compute_statistics`.
        artifact_files: Files published as artifacts. The closing note
            mentions only what is among them.
    """
    lines = [
        SECTION_TITLE,
        "",
        "### Build Process Graph",
        "```mermaid",
        diagram_text,
        "```",
        "",
        "### Overview",
        f"- Number of processes monitored: {stats.series_count}",
        f"- Maximum RSS observed: {_format_mb(stats.max_rss_mb)}",
        f"- Monitoring duration: {stats.duration}",
        "",
        "### Process Details",
    ]

    if not stats.has_data:
        lines.append(f"{NO_DATA_TEXT}: no watched processes were sampled during this run.")
    for entry in stats.per_series:
        lines.extend(
            [
                f"#### {entry.label}",
                f"- Maximum RSS: {entry.max_rss_mb:.2f} MB",
                f"- Average RSS: {entry.avg_rss_mb:.2f} MB",
                f"- Number of measurements: {entry.sample_count}",
                f"- Last measurement: {entry.last_rss_mb:.2f} MB",
                "",
            ]
        )

    note = artifact_note(artifact_files)
    if note:
        lines.extend(["", note])
    return "\n".join(lines) + "\n"


def summary_sink_path(env_var: str, environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Path of the build-summary file named by `env_var`, if set."""
    value = (environ if environ is not None else os.environ).get(env_var, "").strip()
    return Path(value) if value else None


def append_to_summary_sink(sink_path: Path, text: str) -> None:
    """
    Append `text` to the summary file, keeping anything already in it.
    """
    sink_path.parent.mkdir(parents=True, exist_ok=True)
    existing = sink_path.exists() and sink_path.stat().st_size > 0
    with open(sink_path, "a", encoding="utf-8") as f:
        if existing:
            f.write("\n\n")
        f.write(text)
    logger.info(f"Appended build summary to {sink_path}")
