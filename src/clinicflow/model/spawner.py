"""Spawn scheduling for new patients."""

import logging
from typing import List

import numpy as np

from clinicflow.core.entities import AgentState, OriginCategory
from clinicflow.core.scenario import ClinicScenario
from clinicflow.model.agent import Agent

logger = logging.getLogger(__name__)


class SpawnScheduler:
    """Creates patients at the entrance on a fixed tick cadence.

    A batch of ``spawn_batch_size`` patients is due on every tick that is
    a multiple of ``spawn_every_ticks`` (ticks count from 1), so a run of
    N ticks produces ``N // spawn_every_ticks`` batches.
    """

    def __init__(self, scenario: ClinicScenario):
        self.scenario = scenario
        self._categories = list(scenario.origin_weights.keys())
        self._weights = np.array(
            [scenario.origin_weights[c] for c in self._categories], dtype=float
        )
        self._weights = self._weights / self._weights.sum()

    def due(self, tick: int) -> int:
        """Number of patients to create on this tick."""
        if tick > 0 and tick % self.scenario.spawn_every_ticks == 0:
            return self.scenario.spawn_batch_size
        return 0

    def draw_origin(self) -> OriginCategory:
        """Sample an origin category from the configured weights."""
        idx = self.scenario.rng_origin.choice(len(self._categories), p=self._weights)
        return self._categories[int(idx)]

    def create(self, agent_id: int, tick: int) -> Agent:
        """Create one patient at the entrance, heading for the waiting room."""
        topology = self.scenario.topology
        agent = Agent(
            id=agent_id,
            x=topology.spawn_point.x,
            y=topology.spawn_point.y,
            origin=self.draw_origin(),
            state=AgentState.ENTERING,
            spawn_tick=tick,
        )
        agent.set_path([topology.waiting_point])
        logger.debug(f"Spawned patient {agent_id} ({agent.origin.value}) at tick {tick}")
        return agent

    def create_batch(self, first_id: int, count: int, tick: int) -> List[Agent]:
        return [self.create(first_id + i, tick) for i in range(count)]
