"""
Publishing of run artifacts.

Copies the log and rendered charts into a per-job directory that the CI
platform's artifact step picks up. Publishing is best effort: it runs after
the renders are on disk and its failures never remove them.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from ..validation import ErrorSeverity, handle_file_error

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "build_process_watcher"
JOB_ENV_VAR = "GITHUB_JOB"


def artifact_name(environ: Optional[Mapping[str, str]] = None) -> str:
    job = (environ if environ is not None else os.environ).get(JOB_ENV_VAR) or "default"
    return f"{ARTIFACT_PREFIX}-{job}"


class ArtifactPublisher:
    """
    Copies files into `<destination_root>/<name>/`.

    Attributes:
        destination_root: Directory holding all published artifacts.
        name: Artifact name; defaults to `build_process_watcher-<job>`.
    """

    def __init__(self, destination_root: Path, name: Optional[str] = None):
        self.destination_root = Path(destination_root)
        self.name = name or artifact_name()

    @property
    def destination(self) -> Path:
        return self.destination_root / self.name

    def publish(self, files: Iterable[Path]) -> List[Path]:
        """
        Copy every existing file in `files` to the artifact directory.

        Returns:
            Paths of the published copies. Missing sources and copy failures
            are logged and skipped.
        """
        published: List[Path] = []
        try:
            self.destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            handle_file_error(
                e, f"creating artifact directory {self.destination}",
                severity=ErrorSeverity.WARNING, reraise=False, logger=logger,
            )
            return published

        for source in files:
            source = Path(source)
            if not source.exists():
                logger.warning(f"Artifact source missing, skipping: {source}")
                continue
            target = self.destination / source.name
            try:
                shutil.copy2(source, target)
            except OSError as e:
                handle_file_error(
                    e, f"copying {source} to {target}",
                    severity=ErrorSeverity.WARNING, reraise=False, logger=logger,
                )
                continue
            published.append(target)

        logger.info(f"Published {len(published)} file(s) to artifact '{self.name}' at {self.destination}")
        return published
