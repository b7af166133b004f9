"""Load and save clinic scenarios from YAML or JSON files.

Example usage:
    from clinicflow.core.config import load_scenario

    scenario = load_scenario(Path("config/ai_clinic.yaml"))
    engine = ClinicEngine(scenario)

Only plain parameters are persisted. Custom topologies are code-level
configuration; files describe layouts through n_nurses/n_hepatologists.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from clinicflow.core.scenario import ClinicScenario

logger = logging.getLogger(__name__)


_PERSISTED_FIELDS = [
    "name", "n_nurses", "n_hepatologists",
    "session_minutes", "minutes_per_tick", "ms_per_tick",
    "spawn_every_ticks", "spawn_batch_size", "origin_weights",
    "waiting_ticks", "nurse_ticks", "doctor_ticks",
    "nurse_retry_ticks", "doctor_retry_ticks",
    "escalation_probability", "speed",
    "monitoring_cols", "monitoring_pitch", "nurse_jitter", "doctor_jitter",
    "random_seed",
]


def scenario_to_dict(scenario: ClinicScenario) -> Dict[str, Any]:
    """Convert a scenario to plain, serialisable values."""
    data = {name: getattr(scenario, name) for name in _PERSISTED_FIELDS}
    data["origin_weights"] = {
        category.value: weight for category, weight in scenario.origin_weights.items()
    }
    return data


def scenario_from_dict(data: Dict[str, Any]) -> ClinicScenario:
    """Build a scenario from a mapping, rejecting unknown keys.

    Raises:
        ValueError: If the mapping contains unknown or runtime-only keys.
    """
    unknown = set(data) - set(_PERSISTED_FIELDS)
    if unknown:
        raise ValueError(f"Unknown scenario fields: {sorted(unknown)}")
    return ClinicScenario(**data)


def load_scenario(config_path: Path) -> ClinicScenario:
    """Load a scenario from a YAML or JSON file.

    Args:
        config_path: Path to configuration file (.yaml, .yml, or .json)

    Returns:
        ClinicScenario instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        if config_path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif config_path.suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(
                f"Unsupported config format: {config_path.suffix}. "
                "Use .yaml, .yml, or .json"
            )

    logger.info(f"Loaded scenario config from {config_path}")
    return scenario_from_dict(data or {})


def save_scenario(scenario: ClinicScenario, config_path: Path) -> None:
    """Save a scenario to a YAML or JSON file.

    Args:
        scenario: Scenario to save
        config_path: Path to save to (.yaml, .yml, or .json)

    Raises:
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    data = scenario_to_dict(scenario)

    if config_path.suffix not in (".yaml", ".yml", ".json"):
        raise ValueError(
            f"Unsupported config format: {config_path.suffix}. "
            "Use .yaml, .yml, or .json"
        )

    # Ensure parent directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        if config_path.suffix == ".json":
            json.dump(data, f, indent=2)
        else:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
