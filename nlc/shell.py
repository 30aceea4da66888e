"""
Runs shell commands on behalf of the user.

This is a "fire and report" gateway: whatever happens to the command is
rendered to the user, and nothing is raised back to the caller. The user
already consented to running the command, so a failure is shown rather
than retried or hidden.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Optional

from . import logger
from .errors import ExecutionError

LOGGER = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one shell command."""

    command: str
    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    launch_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.launch_error is None and self.returncode == 0


def _launch(command: str, cwd: str) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            command,
            shell=True,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise ExecutionError(f"Could not run '{command}': {e}") from e


def run_command(command: str, cwd: Optional[str] = None) -> CommandResult:
    """
    Runs `command` through the shell in `cwd` (the current directory by default)
    and prints its output. Never raises for a failing command.
    """
    cwd = cwd or os.getcwd()
    LOGGER.debug("Running command %r in %s", command, cwd)
    logger.console.print()

    try:
        process = _launch(command, cwd)
    except ExecutionError as e:
        logger.error(str(e))
        return CommandResult(command=command, returncode=None, launch_error=str(e))

    result = CommandResult(
        command=command,
        returncode=process.returncode,
        stdout=process.stdout or "",
        stderr=process.stderr or "",
    )
    LOGGER.debug("Command %r exited with code %s", command, result.returncode)

    if result.returncode != 0:
        logger.error(f"Command exited with code {result.returncode}")
    if result.stdout.strip():
        logger.console.print(result.stdout.strip(), markup=False, highlight=False)
    if result.stderr.strip():
        logger.err_console.print(result.stderr.strip(), markup=False, highlight=False)

    return result
