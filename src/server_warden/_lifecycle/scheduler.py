# Area: Lifecycle
"""
server_warden._lifecycle.scheduler — Tick drivers
=================================================

Two fixed-interval drivers feed the controller:

- the main driver calls ``controller.tick()`` every ``check_interval``;
- the wait driver calls ``controller.wait_tick()`` every
  ``wait_player_interval``, but only while the server is in
  AWAITING_FIRST_PLAYER. It is started and cancelled by a phase listener,
  so it never outlives the phase it serves.

Each driver is one thread that runs its ticks back to back, so ticks of
the same driver never overlap.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from .controller import LifecycleController
from .enums import LifecyclePhase

logger = logging.getLogger("server_warden.scheduler")


def set_interval(
    f: Callable[[], object],
    interval: float,
    *,
    thread_name: Optional[str] = None,
    stop_event: Optional[threading.Event] = None,
) -> threading.Event:
    """
    Call ``f`` every ``interval`` seconds on a daemon thread.

    Returns:
        An Event (``stop_event`` if given); setting it stops the loop
        before the next call
    """
    if stop_event is None:
        stop_event = threading.Event()

    def thread_fn():
        while not stop_event.wait(interval):
            try:
                f()
            except Exception:
                logger.exception(f"Tick failed in {thread_name or 'interval thread'}")

    threading.Thread(target=thread_fn, name=thread_name, daemon=True).start()
    return stop_event


class SchedulerLoop:
    """Runs the main tick and the player-wait countdown for a controller."""

    def __init__(self, controller: LifecycleController, check_interval: float, wait_interval: float):
        self.controller = controller
        self.check_interval = check_interval
        self.wait_interval = wait_interval
        self._main_stop: Optional[threading.Event] = None
        self._wait_stop: Optional[threading.Event] = None
        self._guard = threading.Lock()
        controller.add_phase_listener(self._on_phase_change)

    @property
    def running(self) -> bool:
        return self._main_stop is not None and not self._main_stop.is_set()

    @property
    def waiting_for_player(self) -> bool:
        return self._wait_stop is not None and not self._wait_stop.is_set()

    def start(self) -> None:
        if self.running:
            return
        logger.info(f"Main tick every {self.check_interval:.0f}s")
        self._main_stop = set_interval(self.controller.tick, self.check_interval, thread_name="MainTick")
        # Pick up a controller that is already waiting (e.g. started before us)
        if self.controller.phase is LifecyclePhase.AWAITING_FIRST_PLAYER:
            self._start_wait_driver()

    def stop(self) -> None:
        if self._main_stop is not None:
            self._main_stop.set()
        self._stop_wait_driver()
        logger.info("Scheduler stopped")

    def _on_phase_change(self, old: LifecyclePhase, new: LifecyclePhase) -> None:
        # Called with the controller lock held: only flip events / spawn threads here
        if new is LifecyclePhase.AWAITING_FIRST_PLAYER:
            self._start_wait_driver()
        elif old is LifecyclePhase.AWAITING_FIRST_PLAYER:
            self._stop_wait_driver()

    def _start_wait_driver(self) -> None:
        with self._guard:
            if self._wait_stop is not None and not self._wait_stop.is_set():
                return
            stop_event = threading.Event()
            self._wait_stop = stop_event

        def wait_tick():
            # Cancellation wins over a tick that was already scheduled
            if stop_event.is_set():
                return
            self.controller.wait_tick()

        logger.debug("Player-wait driver started")
        set_interval(wait_tick, self.wait_interval, thread_name="PlayerWait", stop_event=stop_event)

    def _stop_wait_driver(self) -> None:
        with self._guard:
            if self._wait_stop is not None and not self._wait_stop.is_set():
                self._wait_stop.set()
                logger.debug("Player-wait driver cancelled")
