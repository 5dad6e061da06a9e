# Area: Lifecycle
"""
server_warden._lifecycle.enums — Lifecycle State Machine Enums
==============================================================

Defines the phases and events of the server lifecycle state machine.
"""

from enum import Enum


class LifecyclePhase(Enum):
    """
    Phases of the server lifecycle.

    Phase transitions:
    STOPPED -> STARTING (on START_REQUESTED)
    STOPPED -> GRACE_PERIOD (on SERVER_ADOPTED)
    STARTING -> AWAITING_FIRST_PLAYER (on SERVER_ONLINE)
    STARTING -> STOPPED (on START_FAILED or START_TIMED_OUT)
    AWAITING_FIRST_PLAYER -> MONITORING (on PLAYER_JOINED or WAIT_EXPIRED)
    GRACE_PERIOD -> MONITORING (on PLAYER_JOINED or GRACE_ELAPSED)
    AWAITING_FIRST_PLAYER / GRACE_PERIOD / MONITORING -> STOPPED (on SERVER_OFFLINE)
    MONITORING -> DRAINING (on IDLE_LIMIT_REACHED)
    DRAINING -> STOPPED (on DRAIN_COMPLETE)
    """
    STOPPED = "STOPPED"
    STARTING = "STARTING"
    AWAITING_FIRST_PLAYER = "AWAITING_FIRST_PLAYER"
    GRACE_PERIOD = "GRACE_PERIOD"
    MONITORING = "MONITORING"
    DRAINING = "DRAINING"


class LifecycleEvent(Enum):
    """
    Events that trigger phase transitions.

    Events are triggered by:
    - START_REQUESTED: start command received while stopped
    - START_FAILED: supervisor start command failed
    - SERVER_ONLINE: startup poll got a successful probe
    - START_TIMED_OUT: startup poll gave up
    - SERVER_ADOPTED: a tick found the server online while stopped
    - PLAYER_JOINED: first player observed after a start or adoption
    - WAIT_EXPIRED: nobody joined before the player-wait deadline
    - GRACE_ELAPSED: the grace deadline passed with nobody online
    - SERVER_OFFLINE: a tick got an oracle error
    - IDLE_LIMIT_REACHED: too many consecutive empty checks
    - DRAIN_COMPLETE: the stop sequence finished (whatever its outcome)
    """
    START_REQUESTED = "START_REQUESTED"
    START_FAILED = "START_FAILED"
    SERVER_ONLINE = "SERVER_ONLINE"
    START_TIMED_OUT = "START_TIMED_OUT"
    SERVER_ADOPTED = "SERVER_ADOPTED"
    PLAYER_JOINED = "PLAYER_JOINED"
    WAIT_EXPIRED = "WAIT_EXPIRED"
    GRACE_ELAPSED = "GRACE_ELAPSED"
    SERVER_OFFLINE = "SERVER_OFFLINE"
    IDLE_LIMIT_REACHED = "IDLE_LIMIT_REACHED"
    DRAIN_COMPLETE = "DRAIN_COMPLETE"
