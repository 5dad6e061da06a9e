# Area: Lifecycle
"""Consecutive empty-check counter driving the auto-stop."""

import logging

logger = logging.getLogger("server_warden.lifecycle.auto_stop")


class AutoStopCounter:
    """
    Counts consecutive ticks that saw zero players.

    The warning fires on the exact tick the count reaches
    ``warning_check``; the stop fires once it reaches ``max_checks``.
    """

    def __init__(self, max_checks: int, warning_check: int):
        if not 0 < warning_check < max_checks:
            raise ValueError(
                f"warning_check must be in (0, {max_checks}), got {warning_check}"
            )
        self.max_checks = max_checks
        self.warning_check = warning_check
        self.value = 0

    def increment(self) -> int:
        self.value = min(self.value + 1, self.max_checks)
        return self.value

    def reset(self) -> bool:
        """Reset to zero. Returns True if a streak was in progress."""
        was_counting = self.value > 0
        self.value = 0
        return was_counting

    @property
    def should_warn(self) -> bool:
        return self.value == self.warning_check

    @property
    def limit_reached(self) -> bool:
        return self.value >= self.max_checks
