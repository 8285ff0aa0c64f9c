"""
State-machine tests for the rest timer.

Idle -> Running -> Paused -> Running -> Idle, with pause/resume anchor
rebasing and reconciliation against server-supplied state.
"""

from datetime import datetime, timedelta, timezone

import pytest

from rest_recovery.core.models import TimerIdle, TimerPaused, TimerRunning
from rest_recovery.core.rest_timer import RestTimer

T0 = datetime(2026, 3, 10, 18, 0, tzinfo=timezone.utc)


def _at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


@pytest.fixture
def timer() -> RestTimer:
    return RestTimer()


class TestIdle:

    def test_new_timer_is_idle(self, timer):
        assert timer.is_idle
        assert timer.last_set_timestamp is None
        assert timer.elapsed_seconds(_at(1000)) == 0.0

    def test_idle_is_early_never_overdue(self, timer):
        status = timer.status(_at(10_000))
        assert status.zone == "early"

    def test_pause_and_resume_are_noops_when_idle(self, timer):
        timer.pause(_at(5))
        assert timer.is_idle
        timer.resume(_at(10))
        assert timer.is_idle

    def test_snapshot_when_idle(self, timer):
        snap = timer.snapshot(_at(0))
        assert snap.last_set_timestamp is None
        assert snap.last_exercise_category is None
        assert snap.elapsed_seconds == 0.0
        assert snap.is_paused is False
        assert snap.rest_status.zone == "early"


class TestRunning:

    def test_counts_up_from_last_set(self, timer):
        timer.start(T0, "compound")
        assert timer.is_running
        assert timer.elapsed_seconds(_at(95)) == pytest.approx(95.0)
        assert timer.status(_at(95)).zone == "approaching"
        assert timer.status(_at(310)).zone == "overdue"

    def test_clock_skew_clamped(self, timer):
        timer.start(T0, "compound")
        assert timer.elapsed_seconds(_at(-30)) == 0.0

    def test_start_restarts_clock(self, timer):
        timer.start(T0, "compound")
        timer.start(_at(200), "isolation")
        assert timer.elapsed_seconds(_at(230)) == pytest.approx(30.0)
        assert timer.category == "isolation"
        assert timer.status(_at(230)).goal == 90

    def test_start_clears_pause_history(self, timer):
        timer.start(T0, "compound")
        timer.pause(_at(60))
        timer.resume(_at(600))
        timer.start(_at(700), "compound")
        assert timer.elapsed_seconds(_at(760)) == pytest.approx(60.0)
        assert timer._paused_accumulated_seconds == 0.0

    def test_stop_returns_to_idle(self, timer):
        timer.start(T0, "compound")
        timer.stop()
        assert timer.is_idle
        assert timer.elapsed_seconds(_at(100)) == 0.0
        assert timer.last_set_timestamp is None


class TestPauseResume:

    def test_paused_elapsed_never_advances(self, timer):
        timer.start(T0, "compound")
        timer.pause(_at(120))
        assert timer.is_paused
        for later in (120, 121, 500, 86_400):
            assert timer.elapsed_seconds(_at(later)) == pytest.approx(120.0)

    def test_pause_is_idempotent(self, timer):
        timer.start(T0, "compound")
        timer.pause(_at(50))
        timer.pause(_at(400))
        assert timer.elapsed_seconds(_at(1000)) == pytest.approx(50.0)

    def test_resume_continues_from_frozen_value(self, timer):
        timer.start(T0, "compound")
        timer.pause(_at(60))
        timer.resume(_at(300))
        # 60 s before the pause + 10 s after resume
        assert timer.elapsed_seconds(_at(310)) == pytest.approx(70.0)
        assert timer._paused_accumulated_seconds == pytest.approx(240.0)

    def test_elapsed_equals_wall_minus_paused_total(self, timer):
        timer.start(T0, "compound")
        timer.pause(_at(30))
        timer.resume(_at(90))    # paused 60 s
        timer.pause(_at(120))
        timer.resume(_at(220))   # paused 100 s
        now = _at(400)
        wall = (now - T0).total_seconds()
        assert timer.elapsed_seconds(now) == pytest.approx(wall - 160.0)
        assert timer.last_set_timestamp == T0

    def test_pause_then_immediate_resume_is_identity(self, timer):
        timer.start(T0, "isolation")
        now = _at(77)
        before = timer.elapsed_seconds(now)
        timer.pause(now)
        timer.resume(now)
        assert timer.elapsed_seconds(now) == pytest.approx(before)

    def test_resume_when_running_is_noop(self, timer):
        timer.start(T0, "compound")
        timer.resume(_at(50))
        assert timer.elapsed_seconds(_at(100)) == pytest.approx(100.0)

    def test_stop_while_paused(self, timer):
        timer.start(T0, "compound")
        timer.pause(_at(10))
        timer.stop()
        assert isinstance(timer.state, TimerIdle)

    def test_paused_snapshot_flags(self, timer):
        timer.start(T0, "compound")
        timer.pause(_at(200))
        snap = timer.snapshot(_at(900))
        assert snap.is_paused is True
        assert snap.elapsed_seconds == pytest.approx(200.0)
        assert snap.rest_status.zone == "ready"
        assert snap.last_exercise_category == "compound"


class TestLogSet:

    def test_first_set_has_no_rest(self, timer):
        assert timer.log_set(T0, "compound") == 0.0
        assert timer.is_running

    def test_returns_rest_and_restarts(self, timer):
        timer.log_set(T0, "compound")
        rested = timer.log_set(_at(150), "isolation")
        assert rested == pytest.approx(150.0)
        assert timer.last_set_timestamp == _at(150)
        assert timer.elapsed_seconds(_at(160)) == pytest.approx(10.0)

    def test_rest_excludes_pause(self, timer):
        timer.log_set(T0, "compound")
        timer.pause(_at(40))
        timer.resume(_at(100))
        assert timer.log_set(_at(130), "compound") == pytest.approx(70.0)


class TestReconcile:

    def test_running_pair_resets_anchor(self, timer):
        now = _at(500)
        timer.reconcile(T0, 120.0, False, "compound", now)
        assert isinstance(timer.state, TimerRunning)
        assert timer.elapsed_seconds(now) == pytest.approx(120.0)
        assert timer.elapsed_seconds(now + timedelta(seconds=5)) == pytest.approx(125.0)
        assert timer.last_set_timestamp == T0

    def test_paused_pair_freezes(self, timer):
        timer.reconcile(T0, 45.0, True, "isolation", _at(500))
        assert isinstance(timer.state, TimerPaused)
        assert timer.elapsed_seconds(_at(5000)) == pytest.approx(45.0)

    def test_missing_timestamp_goes_idle(self, timer):
        timer.start(T0, "compound")
        timer.reconcile(None, 30.0, False, None, _at(40))
        assert timer.is_idle

    def test_missing_elapsed_recomputed_from_timestamp(self, timer):
        timer.reconcile(T0, None, False, "compound", _at(75))
        assert timer.elapsed_seconds(_at(75)) == pytest.approx(75.0)

    def test_replaces_local_drift(self, timer):
        timer.start(T0, "compound")
        # Local clock says 300 s, server says 290 s
        timer.reconcile(T0, 290.0, False, "compound", _at(300))
        assert timer.elapsed_seconds(_at(300)) == pytest.approx(290.0)

    def test_negative_elapsed_clamped(self, timer):
        timer.reconcile(T0, -12.0, True, "compound", _at(0))
        assert timer.elapsed_seconds(_at(10)) == 0.0

    @pytest.mark.parametrize("elapsed", [1e12, 1e18, 1e300])
    def test_huge_elapsed_running_is_overdue(self, timer, elapsed):
        timer.reconcile(T0, elapsed, False, "compound", _at(0))
        assert timer.is_running
        assert timer.status(_at(0)).zone == "overdue"
        assert timer.elapsed_seconds(_at(10)) > timer.elapsed_seconds(_at(0))

    def test_huge_elapsed_paused_then_resumed(self, timer):
        timer.reconcile(T0, 1e12, True, "compound", _at(0))
        assert timer.elapsed_seconds(_at(0)) == 1e12
        timer.resume(_at(0))
        assert timer.is_running
        assert timer.status(_at(5)).zone == "overdue"
