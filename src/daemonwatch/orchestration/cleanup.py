"""
The end-of-job pipeline.

Stops the sampler, turns its log into a diagram, a chart and statistics,
writes the renders to disk, and only then publishes artifacts and appends the
build summary. A failure in publishing or in the summary sink never discards
renders that were already written.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from ..analysis.log_parser import parse_log_file
from ..analysis.statistics import RunStatistics, compute_statistics
from ..models.config import MonitorConfig
from ..models.samples import ParsedLog
from ..rendering.chart import build_chart, save_chart
from ..rendering.diagram import render_diagram
from ..reporting.artifacts import ArtifactPublisher, artifact_name
from ..reporting.summary import append_to_summary_sink, compose_summary, summary_sink_path
from ..validation import ErrorSeverity, handle_file_error
from .supervisor import SamplerSupervisor

logger = logging.getLogger(__name__)


@dataclass
class CleanupResult:
    """What the cleanup pipeline produced."""

    sampler_stopped: bool
    parsed: ParsedLog
    statistics: RunStatistics
    diagram_text: str
    summary_text: str
    chart_files: List[Path] = field(default_factory=list)
    published_files: List[Path] = field(default_factory=list)
    summary_path: Optional[Path] = None


def render_chart_files(parsed: ParsedLog, chart_path: Path) -> List[Path]:
    """Build and save the chart. Failures are logged and yield no files."""
    try:
        return save_chart(build_chart(parsed), chart_path)
    except Exception as e:
        logger.error(f"Failed to render memory chart {chart_path}: {type(e).__name__}: {e}", exc_info=True)
        return []


def run_cleanup(
    config: MonitorConfig,
    supervisor: Optional[SamplerSupervisor] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CleanupResult:
    """
    Run the full cleanup pipeline.

    Args:
        config: Monitor configuration.
        supervisor: Used to stop the sampler; built from `config` if omitted.
        environ: Environment used for the job name and summary sink.
    """
    supervisor = supervisor or SamplerSupervisor(config)
    sampler_stopped = supervisor.stop_from_pid_file()

    logger.info("Generating memory usage graph...")
    parsed = parse_log_file(config.paths.log_file)
    diagram_text = render_diagram(parsed)
    statistics = compute_statistics(parsed)
    chart_files = render_chart_files(parsed, config.paths.chart_file)

    publisher = ArtifactPublisher(config.report.artifact_dir, name=artifact_name(environ))
    logger.info("Publishing artifacts...")
    published_files = publisher.publish([config.paths.log_file, *chart_files])

    summary_text = compose_summary(diagram_text, statistics, artifact_files=published_files)
    sink = summary_sink_path(config.report.summary_env_var, environ)
    if sink is None:
        logger.info(f"{config.report.summary_env_var} is not set; skipping build summary")
    else:
        try:
            append_to_summary_sink(sink, summary_text)
        except OSError as e:
            handle_file_error(
                e, f"appending build summary to {sink}",
                severity=ErrorSeverity.ERROR, reraise=False, logger=logger,
            )
            sink = None

    return CleanupResult(
        sampler_stopped=sampler_stopped,
        parsed=parsed,
        statistics=statistics,
        diagram_text=diagram_text,
        summary_text=summary_text,
        chart_files=chart_files,
        published_files=published_files,
        summary_path=sink,
    )
