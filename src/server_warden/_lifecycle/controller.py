# Area: Lifecycle
"""
server_warden._lifecycle.controller — Lifecycle controller
==========================================================

Owns the lifecycle phase, the empty-check counter and the deadlines,
and turns probe results into supervisor commands and channel writes.

Three contexts feed it: the main tick driver, the player-wait driver and
the one-shot start task. Every mutation happens inside ``self._lock``.
External calls (probe, supervisor, Discord) never run under the lock:
handlers decide under the lock and return a list of effects, which are
executed after the lock is released. Code that needs the outcome of an
external call reacquires the lock and re-checks the phase first, since
another context may have moved it on in the meantime.

Writes to the startup slot are serialized by ``self._slot_lock`` and
carry the phase generation they were decided in. A write whose generation
is no longer current is dropped, so a countdown computed just before a
join can never overwrite the "player joined" text.
"""

from __future__ import annotations

import logging
import threading
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from .._probe.snapshot import ServerSnapshot
from .._probe.status_probe import StatusProbe
from .._runner_config import WardenConfig
from .._shared.handle_store import STARTUP_SLOT, STATUS_SLOT
from .._shared.notification_sink import NotificationSink
from .._supervisor import ServerSupervisor
from .auto_stop import AutoStopCounter
from .deadline_tracker import GRACE_PERIOD, PLAYER_WAIT, SERVER_START, DeadlineTracker
from .enums import LifecycleEvent, LifecyclePhase
from .messages import MessageBuilder
from .state_machine import LifecycleStateMachine, PhaseListener

logger = logging.getLogger("server_warden.lifecycle")

Effect = Callable[[], Any]


def _spawn_thread(target: Callable[[], None]) -> None:
    threading.Thread(target=target, name="ServerStart", daemon=True).start()


class LifecycleController:
    """Serialized lifecycle state plus the rules that drive it."""

    def __init__(
        self,
        config: WardenConfig,
        supervisor: ServerSupervisor,
        probe: StatusProbe,
        sink: NotificationSink,
        messages: Optional[MessageBuilder] = None,
        spawn: Callable[[Callable[[], None]], None] = _spawn_thread,
    ):
        """
        Args:
            config: Validated warden settings
            supervisor: Start/stop control for the game server
            probe: Status oracle wrapper
            sink: Notification slots
            messages: Text builder (defaults to one built from config)
            spawn: Runs the start task in the background; tests pass a
                synchronous runner
        """
        self.config = config
        self._supervisor = supervisor
        self._probe = probe
        self._sink = sink
        self.messages = messages or MessageBuilder(config)
        self._spawn = spawn

        self.state_machine = LifecycleStateMachine()
        self.deadlines = DeadlineTracker()
        self.empty_checks = AutoStopCounter(config.max_empty_checks, config.warning_check)

        self._lock = threading.Lock()
        self._slot_lock = threading.RLock()
        self._stop_event = threading.Event()
        # Bumped on every phase change
        self._generation = 0
        self.state_machine.add_listener(self._bump_generation)

    # ── introspection ───────────────────────────────────────────

    @property
    def phase(self) -> LifecyclePhase:
        with self._lock:
            return self.state_machine.current_phase

    def status(self) -> Dict[str, Any]:
        """Snapshot of the lifecycle state, for logs and diagnostics."""
        with self._lock:
            return {
                "phase": self.state_machine.current_phase.value,
                "empty_checks": self.empty_checks.value,
                "deadlines": {
                    name: self.deadlines.remaining(name)
                    for name in self.deadlines.active_names()
                },
            }

    def add_phase_listener(self, listener: PhaseListener) -> None:
        with self._lock:
            self.state_machine.add_listener(listener)

    def shutdown(self) -> None:
        """Stop the start task's polling at its next wait."""
        self._stop_event.set()

    # ── main tick ───────────────────────────────────────────────

    def tick(self) -> ServerSnapshot:
        """One main-loop iteration: probe, mirror status, apply rules."""
        snapshot = self._probe.query()
        self._sink.upsert(STATUS_SLOT, self.messages.status(snapshot))
        self.on_tick(snapshot)
        return snapshot

    def on_tick(self, snapshot: ServerSnapshot) -> None:
        with self._lock:
            effects = self._handle_tick(snapshot)
        self._run_effects(effects)

    def _handle_tick(self, snapshot: ServerSnapshot) -> List[Effect]:
        if not snapshot.ok:
            return self._handle_offline(snapshot)

        phase = self.state_machine.current_phase
        if phase in (LifecyclePhase.STARTING, LifecyclePhase.DRAINING):
            # The start task and the drain own these phases
            return []
        if phase is LifecyclePhase.STOPPED:
            return self._adopt_running_server(snapshot)
        if phase is LifecyclePhase.AWAITING_FIRST_PLAYER:
            return self._handle_awaiting(snapshot, refresh_countdown=False)
        if phase is LifecyclePhase.GRACE_PERIOD:
            if snapshot.player_count > 0:
                self.deadlines.clear()
                self.state_machine.transition(LifecycleEvent.PLAYER_JOINED)
                return []
            if self.deadlines.is_active(GRACE_PERIOD):
                logger.info(
                    "Startup grace period (%ds left)",
                    self.deadlines.remaining(GRACE_PERIOD),
                )
                return []
            self.deadlines.clear()
            self.state_machine.transition(LifecycleEvent.GRACE_ELAPSED)
        return self._evaluate_players(snapshot)

    def _handle_offline(self, snapshot: ServerSnapshot) -> List[Effect]:
        if self.empty_checks.reset():
            logger.info("Server unreachable, empty check counter reset")
        if self.state_machine.can_transition(LifecycleEvent.SERVER_OFFLINE):
            logger.warning(
                "Server is offline (%s: %s)",
                snapshot.error_kind.value, snapshot.error_message,
            )
            self.deadlines.clear()
            self.state_machine.transition(LifecycleEvent.SERVER_OFFLINE)
            return [self._slot_effect(self._sink.clear)]
        if self.state_machine.current_phase is LifecyclePhase.STOPPED:
            return [self._slot_effect(self._sink.clear)]
        return []

    def _adopt_running_server(self, snapshot: ServerSnapshot) -> List[Effect]:
        logger.info(
            "Found the server running while stopped, grace period of %.0fs",
            self.config.startup_grace_period,
        )
        self.empty_checks.reset()
        self.deadlines.set_deadline(GRACE_PERIOD, self.config.startup_grace_period)
        self.state_machine.transition(LifecycleEvent.SERVER_ADOPTED)
        if snapshot.player_count > 0:
            self.deadlines.clear()
            self.state_machine.transition(LifecycleEvent.PLAYER_JOINED)
        return []

    def _evaluate_players(self, snapshot: ServerSnapshot) -> List[Effect]:
        if snapshot.player_count == 0:
            count = self.empty_checks.increment()
            logger.info(
                "No players online: %d/%d", count, self.empty_checks.max_checks,
                extra={"player_count": 0},
            )
            effects: List[Effect] = []
            if self.empty_checks.should_warn:
                effects.append(partial(self._sink.send, self.messages.empty_warning()))
                effects.append(self._slot_effect(self._sink.update, self.messages.startup_warning()))
            if self.empty_checks.limit_reached:
                self.state_machine.transition(LifecycleEvent.IDLE_LIMIT_REACHED)
                effects.append(self._drain)
            return effects

        if self.empty_checks.reset():
            logger.info("Player joined, empty check counter reset")
            return [self._slot_effect(
                self._sink.update, self.messages.startup_joined(snapshot.player_count),
            )]
        return []

    # ── first-player wait ───────────────────────────────────────

    def wait_tick(self) -> Optional[ServerSnapshot]:
        """One player-wait iteration. No-op outside AWAITING_FIRST_PLAYER."""
        if self.phase is not LifecyclePhase.AWAITING_FIRST_PLAYER:
            return None
        snapshot = self._probe.query()
        self.on_wait_tick(snapshot)
        return snapshot

    def on_wait_tick(self, snapshot: ServerSnapshot) -> None:
        with self._lock:
            if self.state_machine.current_phase is not LifecyclePhase.AWAITING_FIRST_PLAYER:
                effects: List[Effect] = []
            elif not snapshot.ok:
                effects = self._handle_offline(snapshot)
            else:
                effects = self._handle_awaiting(snapshot, refresh_countdown=True)
        self._run_effects(effects)

    def _handle_awaiting(self, snapshot: ServerSnapshot, refresh_countdown: bool) -> List[Effect]:
        if snapshot.player_count > 0:
            return self._first_player_joined(snapshot)

        remaining = self.deadlines.remaining(PLAYER_WAIT)
        if not remaining:
            logger.info(
                "Nobody joined within %ds, auto-stop checks take over",
                self.config.player_wait_seconds,
            )
            self.deadlines.clear()
            self.state_machine.transition(LifecycleEvent.WAIT_EXPIRED)
            return [self._slot_effect(self._sink.update, self.messages.startup(0))]

        if refresh_countdown:
            return [self._slot_effect(
                self._sink.update, self.messages.startup(snapshot.player_count, remaining),
            )]
        return []

    def _first_player_joined(self, snapshot: ServerSnapshot) -> List[Effect]:
        self.deadlines.clear()
        self.empty_checks.reset()
        self.state_machine.transition(LifecycleEvent.PLAYER_JOINED)
        logger.info("First player joined, auto-stop monitoring armed")
        return [
            self._slot_effect(
                self._sink.update, self.messages.startup_joined(snapshot.player_count),
            ),
            partial(self._sink.send, self.messages.auto_stop_notice()),
        ]

    # ── start ───────────────────────────────────────────────────

    def request_start(self) -> bool:
        """
        Handle the external start trigger.

        Returns:
            True if a start was launched, False if the server is not stopped
        """
        with self._lock:
            if not self.state_machine.can_transition(LifecycleEvent.START_REQUESTED):
                logger.info(
                    "Start request ignored in phase %s",
                    self.state_machine.current_phase.value,
                )
                return False
            self.empty_checks.reset()
            self.deadlines.clear()
            self.state_machine.transition(LifecycleEvent.START_REQUESTED)
        # Acknowledge before the start task can report anything
        self._sink.send(self.messages.start_acknowledged())
        self._spawn(self._run_start)
        return True

    def _run_start(self) -> None:
        """Background start task: launch the server, then poll until it answers."""
        ok, error = self._supervisor.start()
        if not ok:
            with self._lock:
                if self.state_machine.can_transition(LifecycleEvent.START_FAILED):
                    self.state_machine.transition(LifecycleEvent.START_FAILED)
            self._sink.send(self.messages.start_failed(error or "unknown error"))
            return

        with self._lock:
            if self.state_machine.current_phase is not LifecyclePhase.STARTING:
                return
            self.deadlines.set_deadline(SERVER_START, self.config.server_start_timeout)

        while True:
            snapshot = self._probe.query()
            with self._lock:
                if self.state_machine.current_phase is not LifecyclePhase.STARTING:
                    logger.info("Startup poll abandoned, phase moved on")
                    return
                if snapshot.ok:
                    effects: Optional[List[Effect]] = self._server_online(snapshot)
                elif self.deadlines.is_expired(SERVER_START):
                    logger.error(
                        "Server did not answer within %.0fs",
                        self.config.server_start_timeout,
                    )
                    self.deadlines.clear()
                    self.state_machine.transition(LifecycleEvent.START_TIMED_OUT)
                    effects = [partial(self._sink.send, self.messages.start_timed_out())]
                else:
                    effects = None
            if effects is not None:
                self._run_effects(effects)
                return
            if self._stop_event.wait(self.config.start_poll_interval):
                return

    def _server_online(self, snapshot: ServerSnapshot) -> List[Effect]:
        wait = self.config.player_wait_seconds
        self.deadlines.clear()
        self.deadlines.set_deadline(PLAYER_WAIT, wait)
        self.state_machine.transition(LifecycleEvent.SERVER_ONLINE)
        logger.info("Server is up, waiting %ds for the first player", wait)
        return [self._slot_effect(
            self._sink.create, self.messages.startup(snapshot.player_count, wait),
        )]

    # ── stop ────────────────────────────────────────────────────

    def _drain(self) -> None:
        """Stop sequence, entered in DRAINING. Always ends in STOPPED."""
        logger.info("No players for too long, stopping the server")
        self._sink.send(self.messages.stopping())
        ok, error = self._supervisor.stop()
        if ok:
            self._sink.send(self.messages.stopped())
        else:
            self._sink.send(self.messages.stop_failed(error or "unknown error"))

        # Cleared while still DRAINING: a start cannot begin before STOPPED
        with self._slot_lock:
            self._sink.clear(STARTUP_SLOT)

        with self._lock:
            self.empty_checks.reset()
            self.deadlines.clear()
            if self.state_machine.can_transition(LifecycleEvent.DRAIN_COMPLETE):
                self.state_machine.transition(LifecycleEvent.DRAIN_COMPLETE)

    # ── helpers ─────────────────────────────────────────────────

    def _bump_generation(self, old: LifecyclePhase, new: LifecyclePhase) -> None:
        self._generation += 1

    def _slot_effect(self, write: Callable[..., Any], *args: Any) -> Effect:
        """
        Wrap a startup-slot write so it only lands if no phase change
        happened since it was decided. Must be called under ``self._lock``.
        """
        generation = self._generation

        def effect() -> None:
            with self._slot_lock:
                with self._lock:
                    current = self._generation
                if current != generation:
                    logger.debug("Dropped stale startup slot write")
                    return
                write(STARTUP_SLOT, *args)

        return effect

    @staticmethod
    def _run_effects(effects: List[Effect]) -> None:
        for effect in effects:
            try:
                effect()
            except Exception:
                logger.exception("Side effect failed")
