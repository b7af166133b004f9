"""Experimentation layer: lockstep comparison, headless runs, statistics."""

from clinicflow.experiment.comparative import ComparativeRun, productivity_lift
from clinicflow.experiment.runner import (
    run_session,
    run_lockstep,
    multiple_replications,
)
from clinicflow.experiment.comparison import (
    ComparisonResult,
    compare_configurations,
)

__all__ = [
    "ComparativeRun",
    "productivity_lift",
    "run_session",
    "run_lockstep",
    "multiple_replications",
    "ComparisonResult",
    "compare_configurations",
]
