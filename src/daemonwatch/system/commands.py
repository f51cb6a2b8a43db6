"""
Command execution utilities.

Runs the JDK command-line tools (`jps`, `jstat`) and checks whether they are
available on PATH.
"""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 10.0


def run_command(
    command: Union[str, Sequence[str]],
    cwd: Optional[Path] = None,
    timeout: Optional[float] = DEFAULT_COMMAND_TIMEOUT,
) -> Tuple[int, str, str]:
    """Execute a command and capture its output with robust error handling.

    Args:
        command: The command as a string (split with shlex) or an argv list.
        cwd: Working directory path for command execution.
        timeout: Seconds to wait before giving up on the command.

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).
        return_code is -1 for execution errors and timeouts.
    """
    argv: List[str] = shlex.split(command) if isinstance(command, str) else list(command)
    logger.debug(f"Executing command: {argv} in '{cwd}'")
    try:
        process = subprocess.run(
            argv,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
        return process.returncode, process.stdout, process.stderr
    except FileNotFoundError as e:
        logger.error(f"Command not found: {argv[0]}: {type(e).__name__}: {e}")
        return -1, "", f"Error: Command not found '{argv[0]}'"
    except subprocess.TimeoutExpired:
        logger.warning(f"Command {argv} timed out after {timeout}s")
        return -1, "", f"Error: Command timed out after {timeout}s"
    except OSError as e:
        logger.error(f"Failed to run {argv}: {type(e).__name__}: {e}")
        return -1, "", f"An unexpected error occurred: {e}"


def check_jdk_tools_installed() -> bool:
    """Return True when both `jps` and `jstat` are on PATH."""
    missing = [tool for tool in ("jps", "jstat") if shutil.which(tool) is None]
    if missing:
        logger.warning(f"JDK tools not found on PATH: {', '.join(missing)}")
        return False
    return True
