"""Tests for the lockstep comparative run."""

import math

import pandas as pd
import pytest

from clinicflow.core.scenario import ClinicScenario
from clinicflow.experiment.comparative import ComparativeRun, productivity_lift


def _scenario(name, n_nurses, **overrides):
    params = dict(
        name=name,
        n_nurses=n_nurses,
        session_minutes=180.0,
        minutes_per_tick=0.05,
        ms_per_tick=10.0,
        spawn_every_ticks=60,
    )
    params.update(overrides)
    return ClinicScenario(**params)


def _run_to_end(run, frame_ms=1000.0):
    run.start()
    while run.running:
        run.advance(frame_ms)


class TestProductivityLift:

    def test_ratio(self):
        assert productivity_lift(30, 20) == pytest.approx(1.5)

    def test_no_baseline_arrivals(self):
        assert productivity_lift(5, 0) is None


class TestLifecycle:
    """Start, pause and reset of the shared driver."""

    def test_same_scenario_object_rejected(self):
        scenario = _scenario("A", 1)
        with pytest.raises(ValueError):
            ComparativeRun(scenario, scenario)

    def test_paused_does_not_advance(self):
        run = ComparativeRun(_scenario("X", 3), _scenario("Y", 1))

        assert run.advance(500.0) == (0, 0)
        assert run.engine_x.tick == 0

    def test_lockstep_ticks(self):
        run = ComparativeRun(_scenario("X", 3), _scenario("Y", 1))
        run.start()

        assert run.advance(500.0) == (50, 50)
        assert run.engine_x.minutes == run.engine_y.minutes

    def test_pause_resume(self):
        run = ComparativeRun(_scenario("X", 3), _scenario("Y", 1))
        run.start()
        run.advance(100.0)
        run.pause()
        run.advance(100.0)

        assert run.engine_x.tick == 10

        run.start()
        run.advance(100.0)
        assert run.engine_x.tick == 20

    def test_finishes_and_restarts(self):
        run = ComparativeRun(_scenario("X", 3), _scenario("Y", 1))
        _run_to_end(run)

        assert not run.running
        assert run.is_session_over()
        assert run.engine_x.tick == 3600

        run.start()
        assert run.running
        assert run.engine_x.tick == 0
        assert run.engine_y.stats.total_spawned == 0

    def test_reset_stops(self):
        run = ComparativeRun(_scenario("X", 3), _scenario("Y", 1))
        run.start()
        run.advance(1000.0)

        run.reset()

        assert not run.running
        assert run.engine_x.agents == []
        assert run.productivity_lift() is None

    def test_status(self):
        run = ComparativeRun(_scenario("X", 3), _scenario("Y", 1))
        status = run.status()

        assert status["running"] is False
        assert status["clock"] == "9:00 AM"
        assert status["progress"] == 0.0
        assert status["productivity_lift"] is None


class TestComparison:
    """More nurse rooms never reduce throughput under overload."""

    def test_three_nurses_beat_one(self):
        run = ComparativeRun(_scenario("Three", 3), _scenario("One", 1))
        _run_to_end(run)

        x = run.engine_x.stats.monitoring_arrivals
        y = run.engine_y.stats.monitoring_arrivals
        assert x >= y
        assert y > 0
        assert run.productivity_lift() == pytest.approx(x / y)
        # One nurse cannot keep up with one arrival every 60 ticks
        assert run.engine_y.stats.nurse_retries > run.engine_x.stats.nurse_retries

    def test_summary_frame(self):
        run = ComparativeRun(_scenario("Three", 3), _scenario("One", 1))
        _run_to_end(run)

        summary = run.summary()

        assert isinstance(summary, pd.DataFrame)
        assert list(summary.columns) == ["Three", "One", "difference", "ratio"]
        row = summary.loc["monitoring_arrivals"]
        assert row["difference"] == row["Three"] - row["One"]

    def test_summary_configuration_rows(self):
        """Room counts and nominal arrival rate head the summary."""
        x, y = _scenario("Three", 3), _scenario("One", 1)
        summary = ComparativeRun(x, y).summary()

        assert list(summary.index[:3]) == ["nurse_rooms", "hepatologist_rooms", "spawns_per_hour"]
        assert summary.loc["nurse_rooms", "Three"] == 3
        assert summary.loc["nurse_rooms", "difference"] == 2
        assert summary.loc["hepatologist_rooms", "ratio"] == 1.0
        assert summary.loc["spawns_per_hour", "One"] == pytest.approx(y.spawns_per_hour)

    def test_summary_equal_names(self):
        run = ComparativeRun(_scenario("Clinic", 1), _scenario("Clinic", 1))
        summary = run.summary()

        assert "Clinic (X)" in summary.columns
        assert "Clinic (Y)" in summary.columns
        assert math.isnan(summary.loc["monitoring_arrivals", "ratio"])

    def test_snapshots_independent(self):
        run = ComparativeRun(_scenario("X", 3), _scenario("Y", 1))
        run.start()
        run.advance(1000.0)

        snap_x, snap_y = run.snapshots()
        assert snap_x.name == "X"
        assert snap_y.name == "Y"
        assert snap_x.tick == snap_y.tick == 100
