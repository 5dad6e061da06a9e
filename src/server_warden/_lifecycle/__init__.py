# Area: Lifecycle
"""
Lifecycle layer - decides when the game server starts and stops.

This package handles:
- The phase/event state machine
- Deadlines for startup, the first-player wait and the grace period
- The consecutive empty-check counter
- The controller that applies the rules and the tick drivers that feed it
"""

from .enums import LifecyclePhase, LifecycleEvent
from .state_machine import LifecycleStateMachine, TRANSITIONS
from .deadline_tracker import DeadlineTracker
from .auto_stop import AutoStopCounter
from .messages import MessageBuilder
from .controller import LifecycleController
from .scheduler import SchedulerLoop, set_interval

__all__ = [
    "LifecyclePhase",
    "LifecycleEvent",
    "LifecycleStateMachine",
    "TRANSITIONS",
    "DeadlineTracker",
    "AutoStopCounter",
    "MessageBuilder",
    "LifecycleController",
    "SchedulerLoop",
    "set_interval",
]
