"""Pytest fixtures for clinicflow tests."""

import pytest

from clinicflow.core.entities import ResourceKind
from clinicflow.core.scenario import ClinicScenario
from clinicflow.core.topology import Point, Resource, Topology


@pytest.fixture
def default_seed() -> int:
    """Default random seed for reproducible tests."""
    return 42


@pytest.fixture
def tiny_topology() -> Topology:
    """Compact layout with exact, short walks.

    Patients spawn on the waiting point. With nurse_jitter=0 the nurse
    target is anchor + (2, 2) = (0, 0.25), a quarter unit from the
    waiting point, so at speed 0.1 the walk takes three ticks.
    """
    return Topology(
        resources=(
            Resource("waiting", ResourceKind.WAITING, 0, -1.0, -1.0, 2.0, 2.0),
            Resource("nurse1", ResourceKind.NURSE, 1, -2.0, -1.75, 4.0, 4.0),
            Resource(
                "hepatologist", ResourceKind.HEPATOLOGIST, 1, 4.0, 0.0, 2.0, 2.0,
                station=Point(5.0, 1.0),
            ),
            Resource("monitoring", ResourceKind.MONITORING, 0, 10.0, 0.0, 10.0, 10.0),
        ),
        spawn_point=Point(0.0, 0.0),
        waiting_point=Point(0.0, 0.0),
        north_room_id=None,
        north_route=(Point(8.0, -2.0),),
        south_route=(Point(8.0, 4.0),),
        monitoring_offset=Point(1.0, 1.0),
    )


@pytest.fixture
def tiny_scenario(tiny_topology):
    """Factory for uncapped scenarios on the tiny layout.

    Defaults give one-tick timers, no jitter and no automatic spawns, so
    tests control arrivals with ``engine.spawn``.
    """
    def make(**overrides) -> ClinicScenario:
        params = dict(
            name="Tiny",
            topology=tiny_topology,
            session_minutes=None,
            minutes_per_tick=0.1,
            ms_per_tick=10.0,
            spawn_every_ticks=100_000,
            waiting_ticks=1,
            nurse_ticks=1,
            doctor_ticks=1,
            speed=0.1,
            nurse_jitter=0.0,
            doctor_jitter=0.0,
        )
        params.update(overrides)
        return ClinicScenario(**params)
    return make
