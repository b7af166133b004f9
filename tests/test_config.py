"""Tests for scenario file loading and saving."""

import json

import pytest
import yaml

from clinicflow.core.config import (
    load_scenario,
    save_scenario,
    scenario_from_dict,
    scenario_to_dict,
)
from clinicflow.core.entities import OriginCategory
from clinicflow.core.scenario import ClinicScenario, ai_clinic_scenario


class TestScenarioDict:
    """Conversion to and from plain mappings."""

    def test_to_dict_is_plain(self):
        """Origin weights are written with string keys."""
        data = scenario_to_dict(ClinicScenario())

        assert data["origin_weights"] == {
            "referred": 0.2, "pre_consult": 0.4, "tele_pre": 0.4,
        }
        assert "rng_origin" not in data
        assert "topology" not in data

    def test_from_dict_partial(self):
        """Missing keys fall back to defaults."""
        scenario = scenario_from_dict({"name": "Small", "n_nurses": 1})

        assert scenario.name == "Small"
        assert scenario.n_nurses == 1
        assert scenario.waiting_ticks == 120

    def test_unknown_key_raises(self):
        with pytest.raises(ValueError, match="nurses_count"):
            scenario_from_dict({"nurses_count": 3})

    def test_runtime_key_rejected(self):
        """RNG streams cannot be injected from a file."""
        with pytest.raises(ValueError):
            scenario_from_dict({"rng_origin": None})

    def test_invalid_value_propagates(self):
        with pytest.raises(ValueError):
            scenario_from_dict({"speed": -1})


class TestScenarioFiles:
    """YAML and JSON persistence."""

    def test_yaml_round_trip(self, tmp_path):
        """A saved preset loads back with the same parameters."""
        path = tmp_path / "ai.yaml"
        original = ai_clinic_scenario(random_seed=7)

        save_scenario(original, path)
        loaded = load_scenario(path)

        assert scenario_to_dict(loaded) == scenario_to_dict(original)
        assert loaded.origin_weights[OriginCategory.TELE_PRE] == 0.4

    def test_json_file(self, tmp_path):
        path = tmp_path / "clinic.json"
        path.write_text(json.dumps({"name": "Json Clinic", "spawn_every_ticks": 60}))

        scenario = load_scenario(path)

        assert scenario.name == "Json Clinic"
        assert scenario.spawn_every_ticks == 60

    def test_yaml_is_readable(self, tmp_path):
        """Saved YAML keeps field order and plain scalars."""
        path = tmp_path / "clinic.yml"
        save_scenario(ClinicScenario(name="Readable"), path)

        data = yaml.safe_load(path.read_text())
        assert list(data)[0] == "name"
        assert data["name"] == "Readable"

    def test_save_creates_parent(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "clinic.json"
        save_scenario(ClinicScenario(), path)
        assert path.exists()

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_scenario(path).name == "Clinic"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_scenario(tmp_path / "missing.yaml")

    def test_unsupported_suffix_load(self, tmp_path):
        path = tmp_path / "clinic.toml"
        path.write_text("name = 'x'")
        with pytest.raises(ValueError, match="Unsupported"):
            load_scenario(path)

    def test_unsupported_suffix_save(self, tmp_path):
        path = tmp_path / "clinic.txt"
        with pytest.raises(ValueError, match="Unsupported"):
            save_scenario(ClinicScenario(), path)
        assert not path.exists()
