"""
server_warden — Game Server Lifecycle Warden
============================================

Starts a dedicated game server on request from a Discord channel, mirrors
its status into a pinned-style status message, and stops it again once
it has been empty for long enough.

Quick Start:
    from server_warden import WardenRunner
    runner = WardenRunner(config={"discord_token": "...", "channel_id": "..."})
    runner.run()

Or from the shell:
    server-warden --config config.json

Lifecycle
---------
STOPPED -> STARTING -> AWAITING_FIRST_PLAYER -> MONITORING -> DRAINING -> STOPPED

A server found running while STOPPED is adopted through GRACE_PERIOD
instead of being stopped on the spot.
"""

from .warden_runner import WardenRunner
from ._runner_config import WardenConfig, validate_config
from ._lifecycle import LifecycleController, LifecyclePhase, LifecycleEvent
from ._probe import ErrorKind, ServerSnapshot, StatusProbe
from .errors import (
    WardenError,
    SupervisorError,
    NotificationError,
    MessageNotFoundError,
)

__all__ = [
    # Main classes
    "WardenRunner",
    "WardenConfig",
    "validate_config",
    "LifecycleController",
    "LifecyclePhase",
    "LifecycleEvent",
    # Probe
    "ErrorKind",
    "ServerSnapshot",
    "StatusProbe",
    # Errors
    "WardenError",
    "SupervisorError",
    "NotificationError",
    "MessageNotFoundError",
]
__version__ = "1.0.0"
