"""
clinicflow - Clinic patient-flow simulation.

A tick-driven, multi-agent simulation of patients moving through a
waiting room, nurse rooms, a hepatologist and a monitoring area, used to
compare staffing configurations side by side.
"""

__version__ = "0.1.0"

from clinicflow.core.scenario import ClinicScenario
from clinicflow.model.engine import ClinicEngine
from clinicflow.experiment.comparative import ComparativeRun

__all__ = ["ClinicScenario", "ClinicEngine", "ComparativeRun", "__version__"]
