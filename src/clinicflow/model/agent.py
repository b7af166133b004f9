"""Patient agent entity."""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, Optional

from clinicflow.core.entities import AgentState, OriginCategory
from clinicflow.core.topology import Point


@dataclass
class Agent:
    """A patient walking through the clinic.

    Attributes:
        id: Unique identifier (per engine, increasing in spawn order).
        x, y: Continuous grid position.
        origin: How the patient reached the clinic (statistics only).
        state: Current journey state.
        path: Waypoints still to walk, consumed front to back.
        wait_timer: Tick countdown for waiting/at_nurse/at_doc.
        assigned_resource_id: Room currently held or headed to. A reference
            only; rooms live in the Topology.
        needs_hepatologist: Escalation outcome, drawn once at the end of
            the nurse consultation.
        facing: "left" or "right", for the renderer.
        spawn_tick: Tick at which the agent was created.
        monitoring_tick: Tick at which the agent reached monitoring.
    """

    id: int
    x: float
    y: float
    origin: OriginCategory = OriginCategory.PRE_CONSULT
    state: AgentState = AgentState.ENTERING
    path: Deque[Point] = field(default_factory=deque)
    wait_timer: int = 0
    assigned_resource_id: Optional[str] = None
    needs_hepatologist: Optional[bool] = None
    facing: str = "right"
    spawn_tick: int = 0
    monitoring_tick: Optional[int] = None

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def set_path(self, waypoints: Iterable[Point]) -> None:
        """Replace the remaining path."""
        self.path = deque(waypoints)

    @property
    def has_arrived(self) -> bool:
        """True when there are no waypoints left to walk."""
        return not self.path
