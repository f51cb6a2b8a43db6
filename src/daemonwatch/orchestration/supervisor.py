"""
Lifecycle management of the detached sampler process.

The supervisor starts the sampler as its own session so it outlives the
`start` command, confirms it came up by waiting for its PID file, and later
stops it on behalf of the cleanup step. The PID file is the only link between
the two CLI invocations.
"""

import logging
import os
import subprocess
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import psutil

from ..models.config import MonitorConfig
from ..validation import MonitorStartupError

logger = logging.getLogger(__name__)

SAMPLER_MODULE = "daemonwatch"
SAMPLE_COMMAND = "sample"
PID_POLL_INTERVAL = 0.1
KILL_WAIT_TIMEOUT = 2.0


@dataclass
class SamplerHandle:
    """
    A running sampler.

    Attributes:
        pid: OS process id, as written to the PID file.
        process: The Popen object when this process spawned the sampler.
    """

    pid: int
    process: Optional[subprocess.Popen] = None


def read_pid_file(pid_file: Path) -> Optional[int]:
    """Return the PID stored in `pid_file`, or None if absent or unreadable."""
    try:
        return int(pid_file.read_text(encoding="utf-8").strip())
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read PID file {pid_file}: {e}")
        return None


class SamplerSupervisor:
    """
    Spawns, checks and stops the sampler process.

    Attributes:
        config: Monitor configuration (paths and lifecycle timing).
        python_executable: Interpreter used to run the sampler.
    """

    def __init__(self, config: MonitorConfig, python_executable: str = sys.executable):
        self.config = config
        self.python_executable = python_executable

    @property
    def pid_file(self) -> Path:
        return self.config.paths.pid_file

    def build_command(self, interval: Optional[float] = None,
                      config_path: Optional[Path] = None) -> List[str]:
        command = [self.python_executable, "-m", SAMPLER_MODULE]
        if config_path is not None:
            command += ["--config", str(config_path)]
        command.append(SAMPLE_COMMAND)
        if interval is not None:
            command += ["--interval", str(interval)]
        return command

    def read_startup_log(self) -> str:
        try:
            return self.config.paths.startup_log_file.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return ""

    def spawn(self, interval: Optional[float] = None,
              config_path: Optional[Path] = None) -> SamplerHandle:
        """
        Start the sampler in a new session and wait for its PID file.

        Raises:
            MonitorStartupError: If the PID file does not appear within the
                startup grace period or the recorded process is not alive.
        """
        if self.pid_file.exists():
            logger.info(f"Removing stale PID file {self.pid_file}")
            self.pid_file.unlink()

        command = self.build_command(interval, config_path)
        startup_log = self.config.paths.startup_log_file
        startup_log.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Starting sampler: {' '.join(command)}")

        env = dict(os.environ, PYTHONUNBUFFERED="1")
        with open(startup_log, "w", encoding="utf-8") as log_handle:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=log_handle,
                stderr=subprocess.STDOUT,
                start_new_session=True,
                env=env,
            )

        pid = self._wait_for_pid_file(process)
        if pid is None:
            raise MonitorStartupError(
                "Monitor failed to create PID file", startup_log=self.read_startup_log()
            )
        if not self.is_sampler_process(pid):
            raise MonitorStartupError(
                f"Monitor process {pid} is not running", startup_log=self.read_startup_log()
            )
        if pid != process.pid:
            logger.warning(f"PID file holds {pid} but the spawned process is {process.pid}")

        logger.info(f"Monitor started successfully with PID {pid}")
        return SamplerHandle(pid=pid, process=process)

    def _wait_for_pid_file(self, process: subprocess.Popen) -> Optional[int]:
        deadline = time.monotonic() + self.config.lifecycle.startup_grace_seconds
        while time.monotonic() < deadline:
            pid = read_pid_file(self.pid_file)
            if pid is not None:
                return pid
            if process.poll() is not None:
                logger.error(f"Sampler exited during startup with code {process.returncode}")
                return None
            time.sleep(PID_POLL_INTERVAL)
        return read_pid_file(self.pid_file)

    def is_sampler_process(self, pid: int) -> bool:
        """
        True when `pid` is alive and its command line is our sampler.

        Guards against signalling an unrelated process that reused a stale PID.
        """
        try:
            proc = psutil.Process(pid)
            if proc.status() == psutil.STATUS_ZOMBIE:
                return False
            cmdline = proc.cmdline()
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            return False
        launched_as_sampler = any(Path(arg).name == SAMPLER_MODULE for arg in cmdline)
        return launched_as_sampler and SAMPLE_COMMAND in cmdline

    def request_stop(self, pid: int) -> bool:
        """Send SIGTERM to the sampler. Returns False if there was nothing to stop."""
        if not self.is_sampler_process(pid):
            logger.info(f"PID {pid} is not a running sampler; nothing to stop")
            return False
        try:
            psutil.Process(pid).terminate()
        except psutil.NoSuchProcess:
            logger.info(f"Sampler {pid} exited before it could be signalled")
            return False
        logger.info(f"Requested sampler {pid} to stop")
        return True

    def await_exit(self, pid: int, timeout: Optional[float] = None) -> bool:
        """
        Wait for the sampler to exit, killing it after `timeout` seconds.

        Returns:
            True once the process is gone.
        """
        timeout = self.config.lifecycle.stop_timeout_seconds if timeout is None else timeout
        try:
            proc = psutil.Process(pid)
        except psutil.NoSuchProcess:
            return True

        _, alive = psutil.wait_procs([proc], timeout=timeout)
        if not alive:
            return True

        logger.warning(f"Sampler {pid} still alive after {timeout}s; killing it")
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            return True
        _, alive = psutil.wait_procs([proc], timeout=KILL_WAIT_TIMEOUT)
        return not alive

    def stop_from_pid_file(self) -> bool:
        """
        Best-effort stop of the sampler named in the PID file.

        Every failure is logged at info level; the caller carries on either way.
        """
        pid = read_pid_file(self.pid_file)
        if pid is None:
            logger.info("No monitor process found to kill")
            return False

        try:
            if not self.request_stop(pid):
                return False
            stopped = self.await_exit(pid)
            if stopped:
                logger.info(f"Killed monitor process with PID {pid}")
            return stopped
        except (psutil.Error, OSError) as e:
            logger.info(f"Could not stop monitor process {pid}: {e}")
            return False
        finally:
            self._remove_pid_file()

    def _remove_pid_file(self) -> None:
        try:
            self.pid_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.info(f"Could not remove PID file {self.pid_file}: {e}")
