"""Tick-driven clinic patient-flow engine.

One tick is a complete synchronous pass over the active agents:

    spawn -> movement -> state transitions -> statistics

Each agent makes at most one state transition per tick. Walking states
(entering, to_*) transition on the tick their path empties; timed states
(waiting, at_nurse, at_doc) count their wait-timer down once per tick and
act on the tick it reaches zero. A busy room never blocks control flow:
the agent re-arms a short retry timer and polls again later.
"""

import logging
from typing import List, Optional

from clinicflow.core.clock import VirtualClock
from clinicflow.core.entities import (
    ARRIVAL_STATES,
    TIMER_STATES,
    AgentState,
    ResourceKind,
)
from clinicflow.core.scenario import ClinicScenario
from clinicflow.core.topology import Point, Resource
from clinicflow.model.agent import Agent
from clinicflow.model.allocator import ResourceAllocator
from clinicflow.model.movement import move_all
from clinicflow.model.placement import MonitoringPlacement
from clinicflow.model.spawner import SpawnScheduler
from clinicflow.results.collector import ClinicStatistics
from clinicflow.results.snapshot import AgentView, EngineSnapshot

logger = logging.getLogger(__name__)


class ClinicEngine:
    """Single in-memory clinic simulation, stepped by an external clock.

    Attributes:
        scenario: Run configuration.
        topology: Clinic layout (from the scenario).
        clock: Virtual clock converting real time into ticks.
        agents: Active agents in spawn order.
        stats: Running statistics.
    """

    def __init__(self, scenario: ClinicScenario):
        self.scenario = scenario
        self.topology = scenario.topology
        self.clock = VirtualClock(
            minutes_per_tick=scenario.minutes_per_tick,
            ms_per_tick=scenario.ms_per_tick,
            session_ticks=scenario.session_ticks,
        )
        self.allocator = ResourceAllocator(self.topology)
        self.placement = MonitoringPlacement(
            self.topology, scenario.monitoring_cols, scenario.monitoring_pitch
        )
        self.spawner = SpawnScheduler(scenario)

        self.agents: List[Agent] = []
        self.stats = ClinicStatistics()
        self._next_id = 1
        self._session_closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def tick(self) -> int:
        return self.clock.ticks

    @property
    def minutes(self) -> float:
        return self.clock.minutes

    def is_session_over(self) -> bool:
        return self.clock.is_session_over()

    def reset(self) -> None:
        """Reinitialise clock, agents and statistics.

        RNG streams are recreated from the scenario seed, so a reset
        engine replays the same run for the same sequence of calls.
        """
        self.clock.reset()
        self.agents = []
        self.stats = ClinicStatistics()
        self._next_id = 1
        self._session_closed = False
        self.scenario.reseed()
        logger.info(f"{self.scenario.name}: engine reset")

    def advance(self, elapsed_ms: float) -> int:
        """Advance by real elapsed time.

        Args:
            elapsed_ms: Real milliseconds since the previous call.

        Returns:
            Number of ticks executed (zero once the session is over).
        """
        due = self.clock.ticks_due(elapsed_ms)
        for _ in range(due):
            self.step()
        if self.clock.is_session_over():
            self._close_session()
        return due

    def run_ticks(self, n_ticks: int) -> None:
        """Execute ``n_ticks`` ticks, stopping early at session end."""
        for _ in range(n_ticks):
            if self.clock.is_session_over():
                break
            self.step()

    def step(self) -> None:
        """Execute exactly one tick (no-op once the session is over)."""
        if self.clock.is_session_over():
            self._close_session()
            return

        self.clock.tick()
        tick = self.clock.ticks

        # No arrivals on the tick that closes the session
        if not self.clock.is_session_over():
            n_new = self.spawner.due(tick)
            if n_new:
                self.spawn(n_new)

        move_all(self.agents, self.scenario.speed)

        # Iterate over a copy so transitions can scan the live list
        for agent in list(self.agents):
            self._evaluate(agent)

        self.stats.record_tick(a.state for a in self.agents)

        if self.clock.is_session_over():
            self._close_session()

    def spawn(self, count: int = 1) -> List[Agent]:
        """Create patients at the entrance immediately.

        Used by the spawn cadence inside ``step`` and by callers that
        want patients present before the first tick.
        """
        new_agents = self.spawner.create_batch(self._next_id, count, self.clock.ticks)
        self._next_id += count
        for agent in new_agents:
            self.agents.append(agent)
            self.stats.record_spawn(agent.origin)
        return new_agents

    def _close_session(self) -> None:
        """Session-end sweep: only patients at monitoring remain."""
        if self._session_closed:
            return
        self._session_closed = True

        kept = []
        pruned = 0
        for agent in self.agents:
            if agent.state == AgentState.AT_MONITORING:
                kept.append(agent)
            else:
                agent.state = AgentState.EXITING
                agent.assigned_resource_id = None
                pruned += 1
        self.agents = kept
        self.stats.record_pruned(pruned)
        # Current counters reflect the pruned population
        self.stats.waiting = 0
        logger.info(
            f"{self.scenario.name}: session ended at {self.clock.minutes:.1f} min, "
            f"pruned {pruned} patients, {len(kept)} remain at monitoring"
        )

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _evaluate(self, agent: Agent) -> None:
        if agent.state in ARRIVAL_STATES:
            if agent.has_arrived:
                self._on_arrival(agent)
        elif agent.state in TIMER_STATES:
            if agent.wait_timer > 0:
                agent.wait_timer -= 1
            if agent.wait_timer == 0:
                self._on_timer(agent)

    def _on_arrival(self, agent: Agent) -> None:
        state = agent.state
        if state == AgentState.ENTERING:
            agent.state = AgentState.WAITING
            agent.wait_timer = self.scenario.waiting_ticks
        elif state == AgentState.TO_NURSE:
            agent.state = AgentState.AT_NURSE
            agent.wait_timer = self.scenario.nurse_ticks
            self.stats.record_nurse_visit()
        elif state == AgentState.TO_DOC:
            agent.state = AgentState.AT_DOC
            agent.wait_timer = self.scenario.doctor_ticks
            self.stats.record_doctor_consult()
        elif state == AgentState.TO_MONITORING:
            agent.state = AgentState.AT_MONITORING
            agent.wait_timer = 0
            agent.monitoring_tick = self.clock.ticks
            self.stats.record_monitoring_arrival(self.clock.ticks - agent.spawn_tick)

    def _on_timer(self, agent: Agent) -> None:
        state = agent.state
        if state == AgentState.WAITING:
            self._call_to_nurse(agent)
        elif state == AgentState.AT_NURSE:
            if agent.needs_hepatologist is None:
                draw = self.scenario.rng_escalation.random()
                agent.needs_hepatologist = bool(draw < self.scenario.escalation_probability)
            if agent.needs_hepatologist:
                self._call_to_hepatologist(agent)
            else:
                self._send_to_monitoring(agent)
                self.stats.record_treated()
        elif state == AgentState.AT_DOC:
            self._send_to_monitoring(agent)

    def _call_to_nurse(self, agent: Agent) -> None:
        room = self.allocator.first_free(ResourceKind.NURSE, agent, self.agents)
        if room is None:
            agent.wait_timer = self.scenario.nurse_retry_ticks
            self.stats.record_retry(ResourceKind.NURSE)
            logger.debug(f"Patient {agent.id}: no nurse room free, retry")
            return
        agent.state = AgentState.TO_NURSE
        agent.assigned_resource_id = room.id
        agent.set_path([self._nurse_target(room)])

    def _call_to_hepatologist(self, agent: Agent) -> None:
        room = self.allocator.first_free(ResourceKind.HEPATOLOGIST, agent, self.agents)
        if room is None:
            agent.wait_timer = self.scenario.doctor_retry_ticks
            self.stats.record_retry(ResourceKind.HEPATOLOGIST)
            logger.debug(f"Patient {agent.id}: hepatologist busy, retry")
            return
        agent.state = AgentState.TO_DOC
        agent.assigned_resource_id = room.id
        agent.set_path([self._doctor_target(room)])
        self.stats.record_hepatologist_case()

    def _send_to_monitoring(self, agent: Agent) -> None:
        # Route depends on the room being left, so compute it first
        agent.set_path(self.placement.route(agent, self.agents))
        agent.state = AgentState.TO_MONITORING
        agent.assigned_resource_id = self.topology.monitoring_room().id

    def _nurse_target(self, room: Resource) -> Point:
        rng = self.scenario.rng_jitter
        jitter = self.scenario.nurse_jitter
        return room.anchor.offset(2 + rng.random() * jitter, 2 + rng.random() * jitter)

    def _doctor_target(self, room: Resource) -> Point:
        rng = self.scenario.rng_jitter
        jitter = self.scenario.doctor_jitter
        station = room.station or room.centre
        return station.offset(rng.random() * jitter, rng.random() * jitter)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def metrics(self) -> dict:
        return self.stats.compute_metrics(self.clock.minutes, self.scenario.minutes_per_tick)

    def snapshot(self) -> EngineSnapshot:
        """Read-only copy of agents and statistics."""
        agents = tuple(
            AgentView(
                id=a.id,
                x=a.x,
                y=a.y,
                state=a.state,
                facing=a.facing,
                assigned_resource_id=a.assigned_resource_id,
                origin=a.origin.value,
            )
            for a in self.agents
        )
        return EngineSnapshot(
            name=self.scenario.name,
            tick=self.clock.ticks,
            minutes=self.clock.minutes,
            session_over=self.clock.is_session_over(),
            agents=agents,
            statistics=self.metrics(),
        )

    def find(self, agent_id: int) -> Optional[Agent]:
        """Active agent by id, or None if it has been removed."""
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None
