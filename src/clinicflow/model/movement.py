"""Waypoint-following movement for agents."""

import math
from typing import Iterable

from clinicflow.model.agent import Agent


def move_agent(agent: Agent, speed: float) -> None:
    """Advance an agent one tick along its path.

    If the next waypoint is within ``speed`` the agent lands exactly on
    it and the waypoint is popped; leftover distance is not carried into
    the following waypoint. Otherwise the agent steps ``speed`` units
    towards it. Agents with an empty path stay put.

    Args:
        agent: Agent to move (mutated in place).
        speed: Grid units per tick.
    """
    if not agent.path:
        return

    target = agent.path[0]
    dx = target.x - agent.x
    dy = target.y - agent.y
    dist = math.hypot(dx, dy)

    if dist <= speed:
        agent.x = target.x
        agent.y = target.y
        agent.path.popleft()
    else:
        agent.x += dx / dist * speed
        agent.y += dy / dist * speed
        agent.facing = "right" if dx > 0 else "left"


def move_all(agents: Iterable[Agent], speed: float) -> None:
    """Apply one tick of movement to every agent."""
    for agent in agents:
        move_agent(agent, speed)
