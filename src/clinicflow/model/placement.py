"""Monitoring area bed placement and corridor routing."""

from typing import Iterable, List, Tuple

from clinicflow.core.entities import MONITORING_STATES
from clinicflow.core.topology import Point, Topology
from clinicflow.model.agent import Agent


class MonitoringPlacement:
    """Assigns arriving patients a bed on a fixed grid.

    Beds are handed out in arrival order, row-major, ``cols`` per row.
    There is no capacity check: once the room is full the grid keeps
    growing rows beyond the room footprint.

    Attributes:
        topology: Clinic layout (monitoring room, corridors).
        cols: Beds per row.
        pitch: Spacing between beds in grid units.
    """

    def __init__(self, topology: Topology, cols: int = 12, pitch: float = 2.0):
        self.topology = topology
        self.cols = cols
        self.pitch = pitch

    def slot(self, count: int) -> Tuple[int, int]:
        """(row, col) for the ``count``-th monitoring patient (0-based)."""
        return divmod(count, self.cols)

    def target(self, count: int) -> Point:
        """Bed coordinate for the ``count``-th monitoring patient."""
        row, col = self.slot(count)
        origin = self.topology.monitoring_room().anchor
        offset = self.topology.monitoring_offset
        return Point(
            origin.x + offset.x + col * self.pitch,
            origin.y + offset.y + row * self.pitch,
        )

    def uses_north_route(self, agent: Agent) -> bool:
        """Patients leaving the north nurse room take the north corridor."""
        north = self.topology.north_room_id
        return north is not None and agent.assigned_resource_id == north

    def route(self, agent: Agent, agents: Iterable[Agent]) -> List[Point]:
        """Waypoints from the agent's current room to its monitoring bed.

        The moving agent counts itself among the monitoring patients, so
        the first patient is given slot 1. Must be called while
        ``assigned_resource_id`` still names the room being left.
        """
        count = 1 + sum(
            1 for other in agents
            if other is not agent and other.state in MONITORING_STATES
        )
        corridor = (
            self.topology.north_route if self.uses_north_route(agent)
            else self.topology.south_route
        )
        return [*corridor, self.target(count)]
