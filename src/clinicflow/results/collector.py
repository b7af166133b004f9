"""Running statistics for one clinic engine."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

import numpy as np

from clinicflow.core.entities import AgentState, OriginCategory, ResourceKind


# Counters that only ever grow within a run
CUMULATIVE_COUNTERS = [
    "total_spawned",
    "nurse_visits",
    "hepatologist_cases",
    "doctor_consults",
    "treated",
    "monitoring_arrivals",
    "nurse_retries",
    "doctor_retries",
    "doctor_busy_ticks",
    "pruned",
    "peak_waiting",
    "ticks",
]


@dataclass
class ClinicStatistics:
    """Collect and compute clinic throughput metrics.

    Counters are updated incrementally by the engine during each tick.
    Cumulative counters are never decremented; only ``reset`` (a new
    instance) zeroes them.

    Attributes:
        waiting: Patients currently in the waiting state.
        in_monitoring: Patients currently at monitoring.
        total_spawned: Patients who entered the clinic.
        origin_counts: Cumulative arrivals per origin category.
        nurse_visits: Arrivals at a nurse room.
        hepatologist_cases: Escalations granted a hepatologist room.
        doctor_consults: Arrivals at a hepatologist room.
        treated: Patients discharged to monitoring straight from a nurse.
        monitoring_arrivals: Patients who reached their monitoring bed.
        nurse_retries: Failed nurse room requests (re-armed waits).
        doctor_retries: Failed hepatologist requests (re-armed waits).
        doctor_busy_ticks: Ticks with at least one patient at a hepatologist.
        pruned: Patients removed at session end.
        peak_waiting: Highest waiting count seen.
        ticks: Ticks recorded.
        system_times: Ticks from spawn to monitoring arrival, per patient.
    """

    waiting: int = 0
    in_monitoring: int = 0

    total_spawned: int = 0
    origin_counts: Dict[OriginCategory, int] = field(
        default_factory=lambda: {c: 0 for c in OriginCategory}
    )
    nurse_visits: int = 0
    hepatologist_cases: int = 0
    doctor_consults: int = 0
    treated: int = 0
    monitoring_arrivals: int = 0
    nurse_retries: int = 0
    doctor_retries: int = 0
    doctor_busy_ticks: int = 0
    pruned: int = 0
    peak_waiting: int = 0
    ticks: int = 0

    system_times: List[int] = field(default_factory=list)

    def record_spawn(self, origin: OriginCategory) -> None:
        """Record a patient entering the clinic."""
        self.total_spawned += 1
        self.origin_counts[origin] += 1

    def record_nurse_visit(self) -> None:
        self.nurse_visits += 1

    def record_hepatologist_case(self) -> None:
        self.hepatologist_cases += 1

    def record_doctor_consult(self) -> None:
        self.doctor_consults += 1

    def record_treated(self) -> None:
        self.treated += 1

    def record_monitoring_arrival(self, system_ticks: int) -> None:
        """Record a patient reaching monitoring.

        Args:
            system_ticks: Ticks since the patient spawned.
        """
        self.monitoring_arrivals += 1
        self.system_times.append(system_ticks)

    def record_retry(self, kind: ResourceKind) -> None:
        """Record a contended room request."""
        if kind == ResourceKind.HEPATOLOGIST:
            self.doctor_retries += 1
        else:
            self.nurse_retries += 1

    def record_pruned(self, count: int) -> None:
        self.pruned += count

    def record_tick(self, states: Iterable[AgentState]) -> None:
        """Update current counters from the agent states after a tick.

        Args:
            states: State of every active agent.
        """
        waiting = 0
        in_monitoring = 0
        doctor_busy = False
        for state in states:
            if state == AgentState.WAITING:
                waiting += 1
            elif state == AgentState.AT_MONITORING:
                in_monitoring += 1
            elif state == AgentState.AT_DOC:
                doctor_busy = True

        self.ticks += 1
        self.waiting = waiting
        self.in_monitoring = in_monitoring
        self.peak_waiting = max(self.peak_waiting, waiting)
        if doctor_busy:
            self.doctor_busy_ticks += 1

    def cumulative(self) -> Dict[str, int]:
        """All cumulative counters, including per-origin arrivals."""
        counters = {name: getattr(self, name) for name in CUMULATIVE_COUNTERS}
        for category, count in self.origin_counts.items():
            counters[f"arrivals_{category.value}"] = count
        return counters

    def compute_metrics(self, minutes: float, minutes_per_tick: float) -> Dict:
        """Compute all KPIs from collected data.

        Args:
            minutes: Simulated minutes elapsed.
            minutes_per_tick: Tick length, to convert system times.

        Returns:
            Dictionary containing the current and cumulative counters plus:
            - arrivals_per_hour, throughput_per_hour
            - mean_system_time, p95_system_time (simulated minutes)
            - doctor_utilisation: fraction of ticks a hepatologist was busy
        """
        hours = minutes / 60.0
        metrics: Dict = {
            "waiting": self.waiting,
            "in_monitoring": self.in_monitoring,
            **self.cumulative(),
        }

        metrics["arrivals_per_hour"] = self.total_spawned / hours if hours > 0 else 0.0
        metrics["throughput_per_hour"] = (
            self.monitoring_arrivals / hours if hours > 0 else 0.0
        )

        if self.system_times:
            system_minutes = np.array(self.system_times) * minutes_per_tick
            metrics["mean_system_time"] = float(np.mean(system_minutes))
            metrics["p95_system_time"] = float(np.percentile(system_minutes, 95))
        else:
            metrics["mean_system_time"] = 0.0
            metrics["p95_system_time"] = 0.0

        metrics["doctor_utilisation"] = (
            self.doctor_busy_ticks / self.ticks if self.ticks > 0 else 0.0
        )
        return metrics
