"""Read-only views of engine state for renderers and comparison layers."""

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Tuple

import pandas as pd

from clinicflow.core.entities import AgentState


@dataclass(frozen=True)
class AgentView:
    """Immutable copy of one agent's visible state."""
    id: int
    x: float
    y: float
    state: AgentState
    facing: str
    assigned_resource_id: Optional[str]
    origin: str


@dataclass(frozen=True)
class EngineSnapshot:
    """State of one engine between ticks.

    Snapshots are only taken between complete ticks, so they never show
    a partially applied tick.

    Attributes:
        name: Scenario display name.
        tick: Ticks elapsed.
        minutes: Simulated minutes elapsed.
        session_over: Whether the session window has closed.
        agents: Active agents, in spawn order.
        statistics: Output of ClinicStatistics.compute_metrics().
    """
    name: str
    tick: int
    minutes: float
    session_over: bool
    agents: Tuple[AgentView, ...]
    statistics: Dict

    def count(self, state: AgentState) -> int:
        """Number of active agents in a state."""
        return sum(1 for a in self.agents if a.state == state)

    def by_state(self) -> Dict[AgentState, List[int]]:
        """Agent ids grouped by state."""
        groups: Dict[AgentState, List[int]] = {}
        for agent in self.agents:
            groups.setdefault(agent.state, []).append(agent.id)
        return groups

    def to_frame(self) -> pd.DataFrame:
        """One row per agent, with state as its string value."""
        columns = [
            "id", "x", "y", "state", "facing", "assigned_resource_id", "origin",
        ]
        rows = []
        for agent in self.agents:
            row = asdict(agent)
            row["state"] = agent.state.value
            rows.append(row)
        return pd.DataFrame(rows, columns=columns)
