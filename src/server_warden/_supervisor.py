# Area: Supervisor
"""
server_warden._supervisor — Game server process control
=======================================================

Runs the server management script (``./sdtdserver start`` /
``./sdtdserver stop`` for a LinuxGSM install). The warden does not care
how the script launches the binary; it only needs a success/failure
outcome. Failures are terminal for the attempt: nothing here retries.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import SupervisorError

logger = logging.getLogger("server_warden.supervisor")

Outcome = Tuple[bool, Optional[str]]


class ServerSupervisor:
    """Opaque start/stop control for the game server."""

    def __init__(
        self,
        command: str = "./sdtdserver",
        server_dir: str = ".",
        timeout: float = 180.0,
    ):
        self.command = command
        self.server_dir = Path(server_dir)
        self.timeout = timeout

    def start(self) -> Outcome:
        """Run the start action. Returns (ok, error message)."""
        return self._outcome("start")

    def stop(self) -> Outcome:
        """Run the stop action. Returns (ok, error message)."""
        return self._outcome("stop")

    def _outcome(self, action: str) -> Outcome:
        try:
            self.run(action)
        except SupervisorError as e:
            logger.error("Supervisor %s failed\n%s", action, e.format_error_log())
            return False, str(e)
        return True, None

    def run(self, action: str) -> str:
        """
        Execute ``<command> <action>`` in the server directory.

        Returns:
            Combined stdout/stderr of the command

        Raises:
            SupervisorError: On a non-zero exit, a timeout or a launch failure
        """
        argv: List[str] = shlex.split(self.command) + [action]
        logger.info("Running supervisor command: %s", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                cwd=self.server_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise SupervisorError(
                action, self.command, reason=f"timed out after {self.timeout:.0f}s",
                output=_decode(e.output),
            ) from e
        except OSError as e:
            raise SupervisorError(action, self.command, reason=str(e)) from e

        if completed.returncode != 0:
            raise SupervisorError(
                action, self.command,
                returncode=completed.returncode,
                output=completed.stdout or "",
            )
        return completed.stdout or ""


def _decode(output) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
