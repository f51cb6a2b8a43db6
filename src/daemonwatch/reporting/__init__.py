"""
Reporting: the Markdown build summary and artifact publishing.
"""

from .artifacts import ArtifactPublisher, artifact_name
from .summary import (
    NO_DATA_TEXT,
    SECTION_TITLE,
    append_to_summary_sink,
    artifact_note,
    compose_summary,
    summary_sink_path,
)

__all__ = [
    "ArtifactPublisher",
    "artifact_name",
    "NO_DATA_TEXT",
    "SECTION_TITLE",
    "append_to_summary_sink",
    "artifact_note",
    "compose_summary",
    "summary_sink_path",
]
