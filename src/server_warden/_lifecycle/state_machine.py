# Area: Lifecycle
"""
server_warden._lifecycle.state_machine — Lifecycle State Machine
================================================================

Tracks the server's lifecycle phase and validates transitions against a
single transition table. The state machine is not thread-safe on its
own; LifecycleController only touches it while holding its lock.
"""

import logging
from typing import Callable, List

from .enums import LifecycleEvent, LifecyclePhase

logger = logging.getLogger("server_warden.lifecycle.state_machine")

PhaseListener = Callable[[LifecyclePhase, LifecyclePhase], None]


# Valid phase transitions: {current_phase: {event: next_phase}}
TRANSITIONS = {
    LifecyclePhase.STOPPED: {
        LifecycleEvent.START_REQUESTED: LifecyclePhase.STARTING,
        LifecycleEvent.SERVER_ADOPTED: LifecyclePhase.GRACE_PERIOD,
    },
    LifecyclePhase.STARTING: {
        LifecycleEvent.SERVER_ONLINE: LifecyclePhase.AWAITING_FIRST_PLAYER,
        LifecycleEvent.START_FAILED: LifecyclePhase.STOPPED,
        LifecycleEvent.START_TIMED_OUT: LifecyclePhase.STOPPED,
    },
    LifecyclePhase.AWAITING_FIRST_PLAYER: {
        LifecycleEvent.PLAYER_JOINED: LifecyclePhase.MONITORING,
        LifecycleEvent.WAIT_EXPIRED: LifecyclePhase.MONITORING,
        LifecycleEvent.SERVER_OFFLINE: LifecyclePhase.STOPPED,
    },
    LifecyclePhase.GRACE_PERIOD: {
        LifecycleEvent.GRACE_ELAPSED: LifecyclePhase.MONITORING,
        LifecycleEvent.PLAYER_JOINED: LifecyclePhase.MONITORING,
        LifecycleEvent.SERVER_OFFLINE: LifecyclePhase.STOPPED,
    },
    LifecyclePhase.MONITORING: {
        LifecycleEvent.SERVER_OFFLINE: LifecyclePhase.STOPPED,
        LifecycleEvent.IDLE_LIMIT_REACHED: LifecyclePhase.DRAINING,
    },
    LifecyclePhase.DRAINING: {
        LifecycleEvent.DRAIN_COMPLETE: LifecyclePhase.STOPPED,
    },
}


class LifecycleStateMachine:
    """
    State machine for the server lifecycle.

    Attributes:
        current_phase: The phase the server is in
    """

    def __init__(self):
        """Initialize state machine in STOPPED."""
        self.current_phase = LifecyclePhase.STOPPED
        self._listeners: List[PhaseListener] = []

    def add_listener(self, listener: PhaseListener) -> None:
        """
        Register a callback invoked as ``listener(old, new)`` on every
        phase change. Listeners run synchronously inside the transition,
        so they must be quick and must not call back into the owner.
        """
        self._listeners.append(listener)

    def can_transition(self, event: LifecycleEvent) -> bool:
        """
        Check if a transition is valid from the current phase.

        Args:
            event: The event to check

        Returns:
            True if the transition is valid, False otherwise
        """
        valid_transitions = TRANSITIONS.get(self.current_phase, {})
        return event in valid_transitions

    def transition(self, event: LifecycleEvent) -> LifecyclePhase:
        """
        Execute a phase transition.

        Args:
            event: The event triggering the transition

        Returns:
            The new phase after transition

        Raises:
            ValueError: If the transition is not valid
        """
        if not self.can_transition(event):
            raise ValueError(
                f"Invalid transition: {event.value} from {self.current_phase.value}"
            )

        previous = self.current_phase
        next_phase = TRANSITIONS[previous][event]
        self.current_phase = next_phase
        logger.info(
            "%s -> %s (%s)", previous.value, next_phase.value, event.value,
            extra={"phase": next_phase.value, "event": event.value},
        )
        for listener in self._listeners:
            try:
                listener(previous, next_phase)
            except Exception:
                logger.exception("Phase listener failed")
        return next_phase
