# Area: Probe
"""
Server status probing.

This package contains:
- The ServerSnapshot result type and the gamedig payload schema
- StatusProbe, the time-bounded wrapper around the gamedig CLI
"""

from .snapshot import ErrorKind, GamedigPayload, ServerSnapshot
from .status_probe import StatusProbe

__all__ = [
    "ErrorKind",
    "GamedigPayload",
    "ServerSnapshot",
    "StatusProbe",
]
