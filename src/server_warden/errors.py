"""
server_warden.errors — Custom exception classes
================================================

Defines the exception hierarchy for the warden's external collaborators.
Each exception stores enough context for structured logging.

None of these are fatal to the process: the lifecycle controller and the
notification sink catch them at their boundaries, log them and carry on.
"""

from __future__ import annotations
from typing import Optional


class WardenError(Exception):
    """Base exception for all server_warden errors."""
    pass


class SupervisorError(WardenError):
    """Raised when the server supervisor command fails."""

    def __init__(
        self,
        action: str,
        command: str,
        returncode: Optional[int] = None,
        output: str = "",
        reason: str = "",
    ):
        self.action = action
        self.command = command
        self.returncode = returncode
        self.output = output
        self.reason = reason
        if reason:
            message = f"'{command} {action}' failed: {reason}"
        else:
            message = f"'{command} {action}' exited with status {returncode}"
        super().__init__(message)

    def format_error_log(self) -> str:
        lines = [
            f"Supervisor action: {self.action}",
            f"Command:           {self.command}",
            f"Return code:       {self.returncode}",
        ]
        if self.reason:
            lines.append(f"Reason:            {self.reason}")
        if self.output:
            lines.append("Output:")
            lines.extend(f"  {line}" for line in self.output.strip().splitlines()[-10:])
        return "\n".join(lines)


class NotificationError(WardenError):
    """Raised when the notification channel rejects or fails a request."""

    def __init__(self, operation: str, detail: str, status_code: Optional[int] = None):
        self.operation = operation
        self.detail = detail
        self.status_code = status_code
        if status_code is not None:
            message = f"{operation} failed with HTTP {status_code}: {detail}"
        else:
            message = f"{operation} failed: {detail}"
        super().__init__(message)


class MessageNotFoundError(NotificationError):
    """Raised when an edited message no longer exists on the channel."""

    def __init__(self, message_id: str, detail: str = "Unknown Message"):
        self.message_id = message_id
        super().__init__("edit_message", f"{message_id}: {detail}", status_code=404)
