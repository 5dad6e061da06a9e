# Area: Lifecycle Tests
"""Tests for lifecycle phase and event enums."""

from server_warden._lifecycle.enums import LifecycleEvent, LifecyclePhase


class TestLifecyclePhase:
    """Tests for LifecyclePhase enum."""

    def test_all_phases_present(self):
        names = {p.name for p in LifecyclePhase}
        assert names == {
            "STOPPED",
            "STARTING",
            "AWAITING_FIRST_PLAYER",
            "GRACE_PERIOD",
            "MONITORING",
            "DRAINING",
        }

    def test_values_match_names(self):
        for phase in LifecyclePhase:
            assert phase.value == phase.name


class TestLifecycleEvent:
    """Tests for LifecycleEvent enum."""

    def test_event_count(self):
        assert len(LifecycleEvent) == 11

    def test_lookup_by_value(self):
        assert LifecycleEvent("IDLE_LIMIT_REACHED") is LifecycleEvent.IDLE_LIMIT_REACHED
