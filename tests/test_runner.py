"""Tests for SimPy-driven headless runs."""

import pandas as pd
import pytest
import simpy

from clinicflow.core.scenario import ClinicScenario
from clinicflow.experiment.runner import (
    DEFAULT_METRICS,
    frame_driver,
    multiple_replications,
    run_lockstep,
    run_session,
)
from clinicflow.model.engine import ClinicEngine


def _fast_scenario(**overrides):
    """Short session with quick timers so patients finish inside it."""
    params = dict(
        name="Fast",
        session_minutes=150.0,
        minutes_per_tick=0.5,
        ms_per_tick=10.0,
        spawn_every_ticks=20,
        waiting_ticks=1,
        nurse_ticks=5,
        doctor_ticks=5,
        escalation_probability=0.0,
        speed=1.0,
    )
    params.update(overrides)
    return ClinicScenario(**params)


class TestFrameDriver:

    def test_drives_to_session_end(self):
        engine = ClinicEngine(_fast_scenario())
        env = simpy.Environment()
        env.process(frame_driver(env, engine, 50.0))
        env.run()

        assert engine.is_session_over()
        assert engine.tick == 300
        assert env.now == pytest.approx(3000.0)


class TestRunSession:
    """Single headless session."""

    def test_returns_metrics(self):
        results = run_session(_fast_scenario())

        for name in DEFAULT_METRICS:
            assert name in results
        assert results["ticks"] == 300
        assert results["total_spawned"] == 14
        assert results["monitoring_arrivals"] > 0
        assert results["real_ms"] == pytest.approx(3000.0)

    def test_remaining_are_monitoring(self):
        results = run_session(_fast_scenario())
        assert results["remaining_at_monitoring"] == results["total_spawned"] - results["pruned"]

    def test_reproducible(self):
        assert run_session(_fast_scenario(random_seed=5)) == run_session(
            _fast_scenario(random_seed=5)
        )

    def test_uncapped_scenario_rejected(self):
        with pytest.raises(ValueError, match="session"):
            run_session(_fast_scenario(session_minutes=None))


class TestRunLockstep:

    def test_two_configurations(self):
        result = run_lockstep(
            _fast_scenario(name="Three", n_nurses=3),
            _fast_scenario(name="One", n_nurses=1),
        )

        x, y = result["x"], result["y"]
        assert x["ticks"] == y["ticks"] == 300
        assert x["total_spawned"] == y["total_spawned"]
        assert result["productivity_lift"] == pytest.approx(
            x["monitoring_arrivals"] / y["monitoring_arrivals"]
        )
        assert isinstance(result["summary"], pd.DataFrame)

    def test_uncapped_rejected(self):
        with pytest.raises(ValueError):
            run_lockstep(_fast_scenario(), _fast_scenario(session_minutes=None))


class TestMultipleReplications:
    """Test multiple replications function."""

    def test_collects_each_rep(self):
        calls = []
        results = multiple_replications(
            _fast_scenario(),
            n_reps=3,
            metric_names=["monitoring_arrivals", "mean_system_time"],
            progress_callback=lambda i, n: calls.append((i, n)),
        )

        assert len(results["monitoring_arrivals"]) == 3
        assert len(results["mean_system_time"]) == 3
        assert calls == [(1, 3), (2, 3), (3, 3)]

    def test_seeds_differ(self):
        """Replications draw from different seeds."""
        results = multiple_replications(
            _fast_scenario(escalation_probability=0.5, spawn_batch_size=2),
            n_reps=4,
            metric_names=["hepatologist_cases"],
        )
        assert len(set(results["hepatologist_cases"])) > 1

    def test_unknown_metric_ignored(self):
        results = multiple_replications(_fast_scenario(), n_reps=1, metric_names=["nope"])
        assert results == {"nope": []}
