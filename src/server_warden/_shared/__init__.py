# Area: Shared
"""
Shared utilities used by the lifecycle controller and the runner.

This package contains:
- Discord channel client and the slot-based notification sink
- Persisted message handles
- Logging configuration
"""

from .discord_client import DiscordChannel
from .handle_store import HandleStore, MessageHandles, STARTUP_SLOT, STATUS_SLOT
from .logging_config import setup_logging
from .notification_sink import NotificationSink

__all__ = [
    "DiscordChannel",
    "HandleStore",
    "MessageHandles",
    "NotificationSink",
    "STARTUP_SLOT",
    "STATUS_SLOT",
    "setup_logging",
]
