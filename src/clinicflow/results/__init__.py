"""Results layer: running statistics and read-only snapshots."""

from clinicflow.results.collector import ClinicStatistics, CUMULATIVE_COUNTERS
from clinicflow.results.snapshot import AgentView, EngineSnapshot

__all__ = [
    "ClinicStatistics",
    "CUMULATIVE_COUNTERS",
    "AgentView",
    "EngineSnapshot",
]
