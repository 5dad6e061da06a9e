# Area: Probe
"""
server_warden._probe.status_probe — Live server status query
============================================================

Wraps the out-of-process ``gamedig`` query tool. The tool is treated as
an unreliable oracle: every call is bounded by ``timeout`` and every
failure mode is folded into a ServerSnapshot with an error kind, so the
lifecycle controller never sees an exception from here.

    probe = StatusProbe(host="127.0.0.1", port=26900)
    snapshot = probe.query()
    if snapshot.ok:
        print(snapshot.player_count)
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import List, Optional

from pydantic import ValidationError

from .snapshot import GamedigPayload, ServerSnapshot

logger = logging.getLogger("server_warden.probe")


class StatusProbe:
    """Queries a game server through the gamedig CLI."""

    def __init__(
        self,
        host: str,
        port: int,
        query_type: str = "protocol-valve",
        executable: str = "gamedig",
        timeout: float = 15.0,
    ):
        self.host = host
        self.port = port
        self.query_type = query_type
        self.executable = executable
        self.timeout = timeout

    def build_command(self, host: str, port: int) -> List[str]:
        return [
            self.executable,
            "--type", self.query_type,
            "--host", str(host),
            "--port", str(port),
        ]

    def query(self, host: Optional[str] = None, port: Optional[int] = None) -> ServerSnapshot:
        """
        Probe the server once.

        Args:
            host: Override the configured host
            port: Override the configured port

        Returns:
            A snapshot; ``error_kind`` is UNREACHABLE or PARSE_FAILURE
            when the server could not be read.
        """
        command = self.build_command(host or self.host, port or self.port)
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.debug("Status query timed out after %.1fs", self.timeout)
            return ServerSnapshot.unreachable(f"query timed out after {self.timeout:.0f}s")
        except OSError as e:
            logger.warning("Could not run %s: %s", self.executable, e)
            return ServerSnapshot.unreachable(str(e))

        if completed.returncode != 0:
            logger.debug(
                "Status query exited with %d: %s",
                completed.returncode, completed.stderr.strip(),
            )
            return ServerSnapshot.unreachable("Failed all attempts")

        return self.parse_output(completed.stdout)

    @staticmethod
    def parse_output(output: str) -> ServerSnapshot:
        """Turn gamedig's stdout into a snapshot."""
        try:
            payload = GamedigPayload.model_validate_json(output)
        except ValidationError as e:
            # Distinguish non-JSON garbage from JSON with a bad shape only in the log
            try:
                json.loads(output)
                logger.warning("Status payload failed validation: %s", e.errors()[:3])
            except ValueError:
                logger.warning("Status payload is not JSON: %r", output[:200])
            return ServerSnapshot.parse_failure("Parse error")

        if payload.error:
            logger.debug("Oracle reported error: %s", payload.error)
            return ServerSnapshot.unreachable(payload.error)

        return payload.to_snapshot()
