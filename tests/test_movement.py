"""Tests for waypoint movement."""

import math

import pytest

from clinicflow.core.topology import Point
from clinicflow.model.agent import Agent
from clinicflow.model.movement import move_agent, move_all


class TestMoveAgent:
    """One tick of movement."""

    def test_step_towards_waypoint(self):
        """Agent moves exactly ``speed`` units along the segment."""
        agent = Agent(id=1, x=0.0, y=0.0)
        agent.set_path([Point(3.0, 4.0)])

        move_agent(agent, 1.0)

        assert agent.x == pytest.approx(0.6)
        assert agent.y == pytest.approx(0.8)
        assert len(agent.path) == 1
        assert agent.facing == "right"

    def test_snap_when_within_speed(self):
        """Waypoint within reach is landed on exactly and popped."""
        agent = Agent(id=1, x=0.0, y=0.0)
        agent.set_path([Point(0.05, 0.0), Point(10.0, 0.0)])

        move_agent(agent, 0.1)

        assert (agent.x, agent.y) == (0.05, 0.0)
        assert agent.path[0] == Point(10.0, 0.0)

    def test_no_overshoot_carry(self):
        """Leftover distance is not spent on the next waypoint."""
        agent = Agent(id=1, x=0.0, y=0.0)
        agent.set_path([Point(0.01, 0.0), Point(1.0, 0.0)])

        move_agent(agent, 0.5)

        assert agent.x == 0.01

    def test_facing_left(self):
        agent = Agent(id=1, x=5.0, y=0.0)
        agent.set_path([Point(0.0, 0.0)])
        move_agent(agent, 1.0)
        assert agent.facing == "left"

    def test_empty_path_stays(self):
        agent = Agent(id=1, x=2.0, y=3.0)
        move_agent(agent, 1.0)
        assert agent.position == Point(2.0, 3.0)
        assert agent.has_arrived

    def test_walk_completes(self):
        """A multi-waypoint path empties in the expected number of ticks."""
        agent = Agent(id=1, x=0.0, y=0.0)
        agent.set_path([Point(1.0, 0.0), Point(1.0, 1.0)])

        ticks = 0
        while agent.path:
            move_agent(agent, 0.25)
            ticks += 1

        assert ticks == 8
        assert agent.position == Point(1.0, 1.0)

    def test_step_length_never_exceeds_speed(self):
        agent = Agent(id=1, x=0.0, y=0.0)
        agent.set_path([Point(7.0, -2.0), Point(-3.0, 5.0)])
        while agent.path:
            before = agent.position
            move_agent(agent, 0.3)
            moved = math.hypot(agent.x - before.x, agent.y - before.y)
            assert moved <= 0.3 + 1e-12


class TestMoveAll:

    def test_moves_every_agent(self):
        agents = [Agent(id=i, x=0.0, y=0.0) for i in range(3)]
        for agent in agents:
            agent.set_path([Point(0.0, 10.0)])

        move_all(agents, 2.0)

        assert all(a.y == pytest.approx(2.0) for a in agents)
