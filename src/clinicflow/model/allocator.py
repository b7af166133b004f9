"""Capacity-1 room allocation derived from live agent state.

There is no occupancy counter. Whether a room is free is answered by
scanning the active agents for one that holds the room in an occupying
state (to_*/at_* for that room's stage), so allocation can never drift
from agent state. Callers perform the state change themselves in the
same tick, which keeps the scan and the mutation atomic.
"""

from typing import Dict, Iterable, List, Optional, Sequence

from clinicflow.core.entities import OCCUPYING_STATES, ResourceKind
from clinicflow.core.topology import Resource, Topology
from clinicflow.model.agent import Agent


class ResourceAllocator:
    """Answers room availability queries over the active agent list.

    Attributes:
        topology: Clinic layout the room ids refer to.
    """

    def __init__(self, topology: Topology):
        self.topology = topology

    def occupant(
        self,
        resource_id: str,
        agents: Iterable[Agent],
        exclude: Optional[Agent] = None,
    ) -> Optional[Agent]:
        """Return the agent holding a room, if any.

        Args:
            resource_id: Room to check.
            agents: Active agents to scan.
            exclude: Agent to ignore (usually the candidate itself).

        Raises:
            KeyError: If resource_id is not in the topology.
        """
        kind = self.topology.get(resource_id).kind
        states = OCCUPYING_STATES.get(kind)
        if states is None:
            # Waiting room and monitoring are not capacity-checked
            return None

        for agent in agents:
            if agent is exclude:
                continue
            if agent.assigned_resource_id == resource_id and agent.state in states:
                return agent
        return None

    def try_acquire(
        self, resource_id: str, candidate: Agent, agents: Iterable[Agent]
    ) -> bool:
        """True if ``candidate`` may take the room now.

        Does not mutate anything; the caller assigns the room as part
        of its own state transition.
        """
        return self.occupant(resource_id, agents, exclude=candidate) is None

    def first_free(
        self, kind: ResourceKind, candidate: Agent, agents: Sequence[Agent]
    ) -> Optional[Resource]:
        """First free room of a kind in ascending id order.

        Args:
            kind: NURSE or HEPATOLOGIST.
            candidate: Agent asking for a room.
            agents: Active agents to scan.

        Returns:
            The chosen room, or None when every room is held.
        """
        for room in self.topology.of_kind(kind):
            if self.try_acquire(room.id, candidate, agents):
                return room
        return None

    def occupancy(self, agents: Iterable[Agent]) -> Dict[str, List[int]]:
        """Map of capacity-1 room id -> ids of agents holding it.

        More than one id in a list means mutual exclusion was violated.
        """
        held: Dict[str, List[int]] = {}
        for kind in OCCUPYING_STATES:
            for room in self.topology.of_kind(kind):
                held[room.id] = []
        for agent in agents:
            rid = agent.assigned_resource_id
            if rid in held and agent.state in OCCUPYING_STATES[self.topology.get(rid).kind]:
                held[rid].append(agent.id)
        return held
