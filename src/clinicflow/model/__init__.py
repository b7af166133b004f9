"""Simulation model layer: agents, movement, allocation, engine."""

from clinicflow.model.agent import Agent
from clinicflow.model.allocator import ResourceAllocator
from clinicflow.model.engine import ClinicEngine
from clinicflow.model.movement import move_agent, move_all
from clinicflow.model.placement import MonitoringPlacement
from clinicflow.model.spawner import SpawnScheduler

__all__ = [
    "Agent",
    "ResourceAllocator",
    "ClinicEngine",
    "move_agent",
    "move_all",
    "MonitoringPlacement",
    "SpawnScheduler",
]
