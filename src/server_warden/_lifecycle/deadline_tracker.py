# Area: Lifecycle
"""
server_warden._lifecycle.deadline_tracker — Named lifecycle deadlines
=====================================================================

Tracks the time-bounded windows of the lifecycle: the startup poll
timeout, the first-player wait and the post-adoption grace period.
Deadlines are monotonic timestamps; remaining time is always computed
from them, so a late tick still shows the right countdown.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Dict, Optional

logger = logging.getLogger("server_warden.lifecycle.deadlines")

SERVER_START = "server_start"
PLAYER_WAIT = "player_wait"
GRACE_PERIOD = "grace_period"


class DeadlineTracker:
    """
    Tracks lifecycle deadlines keyed by name.

    Each deadline stores its total length and the monotonic timestamp at
    which it expires. Setting a name again overwrites it, so at most one
    deadline of each kind exists.
    """

    def __init__(self) -> None:
        self._deadlines: Dict[str, dict] = {}

    def set_deadline(self, name: str, seconds: float) -> None:
        """Set (or overwrite) a deadline ``seconds`` from now."""
        started_at = time.monotonic()
        self._deadlines[name] = {
            "name": name,
            "seconds": seconds,
            "started_at": started_at,
            "expires_at": started_at + seconds,
        }
        logger.debug("Deadline set: %s (%.1fs)", name, seconds)

    def has(self, name: str) -> bool:
        return name in self._deadlines

    def is_active(self, name: str) -> bool:
        """True if the deadline exists and lies in the future."""
        entry = self._deadlines.get(name)
        return entry is not None and time.monotonic() < entry["expires_at"]

    def is_expired(self, name: str) -> bool:
        """True if the deadline exists and has passed."""
        entry = self._deadlines.get(name)
        return entry is not None and time.monotonic() >= entry["expires_at"]

    def remaining(self, name: str) -> Optional[int]:
        """
        Whole seconds left before the deadline, rounded up, never negative.

        Returns None if the deadline is not set.
        """
        entry = self._deadlines.get(name)
        if entry is None:
            return None
        left = entry["expires_at"] - time.monotonic()
        return max(0, math.ceil(left))

    def cancel(self, name: str) -> None:
        """Cancel a deadline. No-op if not found."""
        if self._deadlines.pop(name, None) is not None:
            logger.debug("Deadline cancelled: %s", name)

    def clear(self) -> None:
        """Remove all tracked deadlines."""
        if self._deadlines:
            self._deadlines.clear()
            logger.debug("All deadlines cleared")

    def active_names(self) -> list:
        return list(self._deadlines)
