"""Headless session runners driven by a SimPy frame clock.

The engines are stepped by real elapsed time. Here a SimPy environment
stands in for the animation loop: environment time is real milliseconds
and a driver process fires once per frame.
"""

from typing import Any, Callable, Dict, Generator, List, Optional

import simpy

from clinicflow.core.scenario import ClinicScenario
from clinicflow.experiment.comparative import ComparativeRun
from clinicflow.model.engine import ClinicEngine


DEFAULT_METRICS = [
    "total_spawned",
    "nurse_visits",
    "hepatologist_cases",
    "treated",
    "monitoring_arrivals",
    "throughput_per_hour",
    "mean_system_time",
    "peak_waiting",
    "doctor_utilisation",
]


def frame_driver(
    env: simpy.Environment,
    engine: ClinicEngine,
    frame_ms: float,
) -> Generator[simpy.Event, None, None]:
    """Advance one engine once per frame until its session ends.

    Args:
        env: SimPy environment (time unit: real milliseconds).
        engine: Engine to drive.
        frame_ms: Real milliseconds between frames.

    Yields:
        SimPy timeout events, one per frame.
    """
    while not engine.is_session_over():
        yield env.timeout(frame_ms)
        engine.advance(frame_ms)


def comparative_driver(
    env: simpy.Environment,
    run: ComparativeRun,
    frame_ms: float,
) -> Generator[simpy.Event, None, None]:
    """Advance both engines of a comparative run once per frame."""
    run.start()
    while run.running:
        yield env.timeout(frame_ms)
        run.advance(frame_ms)


def _require_session(scenario: ClinicScenario) -> None:
    if scenario.session_minutes is None:
        raise ValueError(
            f"Scenario '{scenario.name}' has no session length; "
            "headless runs need session_minutes"
        )


def run_session(
    scenario: ClinicScenario, frame_ms: Optional[float] = None
) -> Dict[str, Any]:
    """Execute a single session from open to close.

    Args:
        scenario: Scenario configuration with a session length.
        frame_ms: Real milliseconds per frame (defaults to one tick).

    Returns:
        Final metrics of the engine, plus ``real_ms`` (driver time used)
        and ``remaining_at_monitoring``.

    Raises:
        ValueError: If the scenario has no session length.
    """
    _require_session(scenario)
    engine = ClinicEngine(scenario)

    env = simpy.Environment()
    env.process(frame_driver(env, engine, frame_ms or scenario.ms_per_tick))
    env.run()

    results = engine.metrics()
    results["real_ms"] = float(env.now)
    results["remaining_at_monitoring"] = len(engine.agents)
    return results


def run_lockstep(
    scenario_x: ClinicScenario,
    scenario_y: ClinicScenario,
    frame_ms: Optional[float] = None,
) -> Dict[str, Any]:
    """Run two scenarios side by side to the end of both sessions.

    Returns:
        Dictionary with ``x`` and ``y`` metrics dicts, the final
        ``productivity_lift`` and the ``summary`` DataFrame.
    """
    _require_session(scenario_x)
    _require_session(scenario_y)
    run = ComparativeRun(scenario_x, scenario_y)
    frame = frame_ms or min(scenario_x.ms_per_tick, scenario_y.ms_per_tick)

    env = simpy.Environment()
    env.process(comparative_driver(env, run, frame))
    env.run()

    return {
        "x": run.engine_x.metrics(),
        "y": run.engine_y.metrics(),
        "productivity_lift": run.productivity_lift(),
        "summary": run.summary(),
    }


def multiple_replications(
    scenario: ClinicScenario,
    n_reps: int = 30,
    metric_names: Optional[List[str]] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> Dict[str, List[float]]:
    """Run multiple replications and collect specified metrics.

    Each replication uses a different random seed (base_seed + rep_number)
    to ensure independent samples.

    Args:
        scenario: Base scenario configuration.
        n_reps: Number of replications to run.
        metric_names: Metrics to collect. Defaults to DEFAULT_METRICS.
        progress_callback: Optional callback(current_rep, total_reps) for
            progress reporting.

    Returns:
        Dictionary mapping metric names to lists of values across replications.
    """
    if metric_names is None:
        metric_names = DEFAULT_METRICS

    results: Dict[str, List[float]] = {name: [] for name in metric_names}

    for rep in range(n_reps):
        rep_scenario = scenario.clone_with_seed(scenario.random_seed + rep)
        run_results = run_session(rep_scenario)

        for name in metric_names:
            if name in run_results:
                results[name].append(run_results[name])

        if progress_callback is not None:
            progress_callback(rep + 1, n_reps)

    return results
