"""Core entity definitions for the clinic simulation.

This module contains enums and basic types that are used across
the codebase, placed here to avoid circular imports.
"""

from enum import Enum


class AgentState(str, Enum):
    """Patient journey states.

    entering -> waiting -> to_nurse -> at_nurse -> [to_doc -> at_doc]
    -> to_monitoring -> at_monitoring. EXITING is only reached through
    session-end pruning.
    """
    ENTERING = "entering"
    WAITING = "waiting"
    TO_NURSE = "to_nurse"
    AT_NURSE = "at_nurse"
    TO_DOC = "to_doc"
    AT_DOC = "at_doc"
    TO_MONITORING = "to_monitoring"
    AT_MONITORING = "at_monitoring"
    EXITING = "exiting"


class ResourceKind(str, Enum):
    """Clinical resource types in the clinic layout."""
    WAITING = "waiting"
    NURSE = "nurse"
    HEPATOLOGIST = "hepatologist"
    MONITORING = "monitoring"


class OriginCategory(str, Enum):
    """How a patient reached the clinic (statistics only)."""
    REFERRED = "referred"
    PRE_CONSULT = "pre_consult"
    TELE_PRE = "tele_pre"


# States in which an agent is walking and "path empty" means arrival
ARRIVAL_STATES = frozenset({
    AgentState.ENTERING,
    AgentState.TO_NURSE,
    AgentState.TO_DOC,
    AgentState.TO_MONITORING,
})

# States whose exit is driven by the wait-timer
TIMER_STATES = frozenset({
    AgentState.WAITING,
    AgentState.AT_NURSE,
    AgentState.AT_DOC,
})

# Occupying states per capacity-1 resource kind
OCCUPYING_STATES = {
    ResourceKind.NURSE: frozenset({AgentState.TO_NURSE, AgentState.AT_NURSE}),
    ResourceKind.HEPATOLOGIST: frozenset({AgentState.TO_DOC, AgentState.AT_DOC}),
}

MONITORING_STATES = frozenset({AgentState.TO_MONITORING, AgentState.AT_MONITORING})
