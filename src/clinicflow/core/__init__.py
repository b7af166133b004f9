"""Core foundation layer: entities, layout, scenario configuration, clock."""

from clinicflow.core.entities import AgentState, ResourceKind, OriginCategory
from clinicflow.core.topology import Point, Resource, Topology, standard_topology
from clinicflow.core.scenario import (
    ClinicScenario,
    ai_clinic_scenario,
    standard_clinic_scenario,
)
from clinicflow.core.clock import VirtualClock, format_clock
from clinicflow.core.config import load_scenario, save_scenario

__all__ = [
    "AgentState",
    "ResourceKind",
    "OriginCategory",
    "Point",
    "Resource",
    "Topology",
    "standard_topology",
    "ClinicScenario",
    "ai_clinic_scenario",
    "standard_clinic_scenario",
    "VirtualClock",
    "format_clock",
    "load_scenario",
    "save_scenario",
]
