"""Tests for the runtime configuration loader."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from ecogrid.config import settings


def _write_tmp_config(tmp_path: Path, content: str) -> Path:
    file_path = tmp_path / "conf.yaml"
    file_path.write_text(content, encoding="utf-8")
    return file_path


def test_defaults_match_tunables(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    conf = settings.load_runtime_settings(args=[], env={})
    assert (conf.GRID_WIDTH, conf.GRID_HEIGHT) == (96, 54)
    assert conf.MAX_PLANTS == 35
    assert conf.MAX_HERBIVORE == conf.MAX_CARNIVORE == 18
    assert conf.ANIMAL_BIRTH_ENERGY == 25.0
    assert conf.PLANT_ALLOW_REPRODUCTION is False
    assert conf.ANIMAL_ALLOW_REPRODUCTION is True
    assert conf.DECISION_POLICY == "weighted"


def test_env_overrides_take_effect(monkeypatch):
    monkeypatch.setenv("ECOGRID_GRID_WIDTH", "64")
    conf = settings.load_runtime_settings(args=[], env=os.environ)
    assert conf.GRID_WIDTH == 64


def test_cli_overrides_take_precedence():
    conf = settings.load_runtime_settings(args=["--grid-width", "40"], env={})
    assert conf.GRID_WIDTH == 40


def test_config_file_used_when_provided(tmp_path):
    config = _write_tmp_config(tmp_path, "grid_width: 30\nfps: 15\n")
    conf = settings.load_runtime_settings(args=["--config", str(config)], env={})
    assert conf.GRID_WIDTH == 30
    assert conf.FPS == 15


def test_config_file_from_env_variable(tmp_path):
    config = _write_tmp_config(tmp_path, "max_steps: 12\n")
    conf = settings.load_runtime_settings(args=[], env={"ECOGRID_CONFIG_FILE": str(config)})
    assert conf.MAX_STEPS == 12


def test_env_overrides_config(monkeypatch, tmp_path):
    config = _write_tmp_config(tmp_path, "grid_width: 40\n")
    monkeypatch.setenv("ECOGRID_GRID_WIDTH", "45")
    conf = settings.load_runtime_settings(args=["--config", str(config)], env=os.environ)
    assert conf.GRID_WIDTH == 45


def test_cli_overrides_config_and_env(monkeypatch, tmp_path):
    config = _write_tmp_config(tmp_path, "grid_width: 40\n")
    monkeypatch.setenv("ECOGRID_GRID_WIDTH", "45")
    conf = settings.load_runtime_settings(args=["--config", str(config), "--grid-width", "47"], env=os.environ)
    assert conf.GRID_WIDTH == 47


def test_headless_flags():
    assert settings.load_runtime_settings(args=["--headless"], env={}).HEADLESS_MODE is True
    assert settings.load_runtime_settings(args=["--windowed"], env={}).HEADLESS_MODE is False


def test_bool_and_float_env_values():
    conf = settings.load_runtime_settings(
        args=[],
        env={"ECOGRID_PLANT_ALLOW_REPRODUCTION": "true", "ECOGRID_ANIMAL_HOMEOSTASIS_COST": "0.25"},
    )
    assert conf.PLANT_ALLOW_REPRODUCTION is True
    assert conf.ANIMAL_HOMEOSTASIS_COST == pytest.approx(0.25)


def test_seed_and_plot_path_accept_none(tmp_path):
    config = _write_tmp_config(tmp_path, "seed: null\nplot_path: none\n")
    conf = settings.load_runtime_settings(args=["--config", str(config)], env={})
    assert conf.SEED is None
    assert conf.PLOT_PATH is None


def test_decision_policy_is_normalised():
    conf = settings.load_runtime_settings(args=["--decision-policy", "WINNER"], env={})
    assert conf.DECISION_POLICY == "winner"


def test_unknown_decision_policy_raises():
    with pytest.raises(ValueError, match="DECISION_POLICY"):
        settings.load_runtime_settings(args=["--decision-policy", "greedy"], env={})


def test_invalid_field_in_config_raises(tmp_path):
    config = _write_tmp_config(tmp_path, "unknown_value: 1\n")
    with pytest.raises(ValueError, match="Unknown config field"):
        settings.load_runtime_settings(args=["--config", str(config)], env={})


def test_malformed_yaml_raises(tmp_path):
    config = _write_tmp_config(tmp_path, "grid_width: [1, 2\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        settings.load_runtime_settings(args=["--config", str(config)], env={})


def test_missing_config_file_errors(tmp_path):
    missing = tmp_path / "missing.yaml"
    with pytest.raises(FileNotFoundError):
        settings.load_runtime_settings(args=["--config", str(missing)], env={})


def test_invalid_numeric_range_raises(tmp_path):
    config = _write_tmp_config(tmp_path, "grid_width: 100000\n")
    with pytest.raises(ValueError, match="GRID_WIDTH"):
        settings.load_runtime_settings(args=["--config", str(config)], env={})


def test_invalid_relationship_raises(tmp_path):
    config = _write_tmp_config(tmp_path, "initial_herbivore: 50\nmax_herbivore: 10\n")
    with pytest.raises(ValueError, match="INITIAL_HERBIVORE cannot exceed MAX_HERBIVORE"):
        settings.load_runtime_settings(args=["--config", str(config)], env={})


def test_birth_energy_cannot_exceed_max_energy():
    with pytest.raises(ValueError, match="ANIMAL_BIRTH_ENERGY"):
        settings.SimulationSettings().with_updates({"ANIMAL_BIRTH_ENERGY": 80.0})


@pytest.mark.parametrize("field", ["ANIMAL_BIRTH_ENERGY", "MAX_ANIMAL_ENERGY"])
def test_zero_animal_energy_is_rejected(field):
    with pytest.raises(ValueError, match=f"{field} must be greater than 0"):
        settings.SimulationSettings().with_updates({field: 0.0, "ANIMAL_BIRTH_ENERGY": 0.0})


def test_initial_animals_must_fit_the_grid():
    with pytest.raises(ValueError, match="number of grid cells"):
        settings.SimulationSettings().with_updates(
            {"GRID_WIDTH": 3, "GRID_HEIGHT": 3, "INITIAL_PLANTS": 0, "INITIAL_HERBIVORE": 9, "INITIAL_CARNIVORE": 9}
        )


def test_with_updates_returns_new_value():
    base = settings.SimulationSettings()
    updated = base.with_updates({"MAX_STEPS": 5})
    assert updated.MAX_STEPS == 5
    assert base.MAX_STEPS == 1000
    assert updated.cell_count == 96 * 54
