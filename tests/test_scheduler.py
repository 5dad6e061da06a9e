# Area: Lifecycle Tests
"""Tests for the tick drivers."""

import threading
import time
from unittest.mock import MagicMock

from server_warden._lifecycle.controller import LifecycleController
from server_warden._lifecycle.enums import LifecyclePhase
from server_warden._lifecycle.scheduler import SchedulerLoop, set_interval
from server_warden._probe.snapshot import ServerSnapshot
from server_warden._runner_config import WardenConfig


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


class TestSetInterval:
    """Tests for the set_interval helper."""

    def test_calls_repeatedly_until_stopped(self):
        calls = []
        stop = set_interval(lambda: calls.append(1), 0.01)
        try:
            assert wait_for(lambda: len(calls) >= 3)
        finally:
            stop.set()

    def test_exception_does_not_kill_driver(self):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first tick fails")

        stop = set_interval(flaky, 0.01)
        try:
            assert wait_for(lambda: len(calls) >= 3)
        finally:
            stop.set()

    def test_uses_given_stop_event(self):
        event = threading.Event()
        event.set()
        calls = []

        returned = set_interval(lambda: calls.append(1), 0.01, stop_event=event)
        time.sleep(0.05)

        assert returned is event
        assert calls == []


class TestSchedulerLoop:
    """Tests for SchedulerLoop with a mocked controller."""

    def make_loop(self, phase=LifecyclePhase.STOPPED, interval=0.01):
        controller = MagicMock()
        controller.phase = phase
        return SchedulerLoop(controller, check_interval=interval, wait_interval=interval), controller

    def test_registers_phase_listener(self):
        loop, controller = self.make_loop()
        controller.add_phase_listener.assert_called_once_with(loop._on_phase_change)

    def test_main_driver_ticks_controller(self):
        loop, controller = self.make_loop()
        loop.start()
        try:
            assert loop.running is True
            assert wait_for(lambda: controller.tick.call_count >= 2)
            controller.wait_tick.assert_not_called()
        finally:
            loop.stop()
        assert loop.running is False

    def test_start_picks_up_awaiting_controller(self):
        loop, controller = self.make_loop(phase=LifecyclePhase.AWAITING_FIRST_PLAYER)
        loop.start()
        try:
            assert loop.waiting_for_player is True
            assert wait_for(lambda: controller.wait_tick.call_count >= 2)
        finally:
            loop.stop()

    def test_phase_change_starts_and_stops_wait_driver(self):
        loop, controller = self.make_loop(interval=1000)

        loop._on_phase_change(LifecyclePhase.STARTING, LifecyclePhase.AWAITING_FIRST_PLAYER)
        assert loop.waiting_for_player is True

        loop._on_phase_change(LifecyclePhase.AWAITING_FIRST_PLAYER, LifecyclePhase.MONITORING)
        assert loop.waiting_for_player is False

    def test_second_start_signal_does_not_duplicate_driver(self):
        loop, _ = self.make_loop(interval=1000)

        loop._on_phase_change(LifecyclePhase.STARTING, LifecyclePhase.AWAITING_FIRST_PLAYER)
        first = loop._wait_stop
        loop._on_phase_change(LifecyclePhase.STARTING, LifecyclePhase.AWAITING_FIRST_PLAYER)

        assert loop._wait_stop is first
        loop.stop()

    def test_cancelled_wait_driver_stops_ticking(self):
        loop, controller = self.make_loop()
        loop._on_phase_change(LifecyclePhase.STARTING, LifecyclePhase.AWAITING_FIRST_PLAYER)
        assert wait_for(lambda: controller.wait_tick.call_count >= 1)

        loop._on_phase_change(LifecyclePhase.AWAITING_FIRST_PLAYER, LifecyclePhase.STOPPED)
        time.sleep(0.05)
        count = controller.wait_tick.call_count
        time.sleep(0.05)

        assert controller.wait_tick.call_count == count


class TestSchedulerWithController:
    """The wait driver follows real controller transitions."""

    def test_wait_driver_follows_awaiting_phase(self):
        config = WardenConfig(discord_token="t", channel_id="1")
        probe = MagicMock()
        probe.query.return_value = ServerSnapshot(player_count=0, online=True)
        supervisor = MagicMock()
        supervisor.start.return_value = (True, None)
        controller = LifecycleController(
            config=config,
            supervisor=supervisor,
            probe=probe,
            sink=MagicMock(),
            spawn=lambda fn: fn(),
        )
        loop = SchedulerLoop(controller, check_interval=1000, wait_interval=1000)

        controller.request_start()
        assert controller.phase == LifecyclePhase.AWAITING_FIRST_PLAYER
        assert loop.waiting_for_player is True

        probe.query.return_value = ServerSnapshot(player_count=1, online=True)
        controller.wait_tick()
        assert controller.phase == LifecyclePhase.MONITORING
        assert loop.waiting_for_player is False
        loop.stop()
