"""Runtime configuration for the grid life simulation.

Settings are resolved once at startup from, in increasing precedence, the
dataclass defaults, a YAML file, ``ECOGRID_*`` environment variables and
command line flags. The resulting :class:`SimulationSettings` value is passed
explicitly to the landscape; nothing in the core reads module globals.
"""

from __future__ import annotations

import argparse
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

import yaml

from .constants import DEFAULTS

CONFIG_ENV_VAR = "ECOGRID_CONFIG_FILE"
ENV_PREFIX = "ECOGRID_"
DEFAULT_CONFIG_FILE = Path("configs/default.yaml")

_PATH_FIELDS = {"LOG_DIRECTORY"}
_OPTIONAL_PATH_FIELDS = {"PLOT_PATH"}
_OPTIONAL_INT_FIELDS = {"SEED"}
_STRING_FIELDS = {"DEBUG_LOG_FILE", "DEBUG_LOG_LEVEL", "DECISION_POLICY"}
_BOOL_FIELDS = {
    "HEADLESS_MODE",
    "PLANT_ALLOW_REPRODUCTION",
    "ANIMAL_ALLOW_REPRODUCTION",
    "TELEMETRY_ENABLED",
}
_FLOAT_FIELDS = {
    "PLANT_GROW_ENERGY",
    "MAX_PLANT_ENERGY",
    "PLANT_EATEN_ENERGY",
    "PLANT_REPRODUCE_ENERGY_RATE",
    "MAX_ANIMAL_ENERGY",
    "ANIMAL_BIRTH_ENERGY",
    "ANIMAL_HOMEOSTASIS_COST",
    "ANIMAL_EATEN_ENERGY_SHARE",
    "ANIMAL_REPRODUCE_ENERGY_RATE",
}
_TRUE_STRINGS = {"1", "true", "True", "TRUE", "yes"}


@dataclass(frozen=True)
class SimulationSettings:
    GRID_WIDTH: int = DEFAULTS["GRID_WIDTH"]
    GRID_HEIGHT: int = DEFAULTS["GRID_HEIGHT"]
    MAX_STEPS: int = DEFAULTS["MAX_STEPS"]
    HEADLESS_MODE: bool = False
    MAX_PLANTS: int = DEFAULTS["MAX_PLANTS"]
    MAX_HERBIVORE: int = DEFAULTS["MAX_HERBIVORE"]
    MAX_CARNIVORE: int = DEFAULTS["MAX_CARNIVORE"]
    INITIAL_PLANTS: int = DEFAULTS["INITIAL_PLANTS"]
    INITIAL_HERBIVORE: int = DEFAULTS["INITIAL_HERBIVORE"]
    INITIAL_CARNIVORE: int = DEFAULTS["INITIAL_CARNIVORE"]
    PLANT_GROW_ENERGY: float = DEFAULTS["PLANT_GROW_ENERGY"]
    MAX_PLANT_ENERGY: float = DEFAULTS["MAX_PLANT_ENERGY"]
    PLANT_EATEN_ENERGY: float = DEFAULTS["PLANT_EATEN_ENERGY"]
    PLANT_REPRODUCE_ENERGY_RATE: float = DEFAULTS["PLANT_REPRODUCE_ENERGY_RATE"]
    PLANT_ALLOW_REPRODUCTION: bool = False
    MAX_ANIMAL_ENERGY: float = DEFAULTS["MAX_ANIMAL_ENERGY"]
    ANIMAL_BIRTH_ENERGY: float = DEFAULTS["ANIMAL_BIRTH_ENERGY"]
    ANIMAL_HOMEOSTASIS_COST: float = DEFAULTS["ANIMAL_HOMEOSTASIS_COST"]
    ANIMAL_EATEN_ENERGY_SHARE: float = DEFAULTS["ANIMAL_EATEN_ENERGY_SHARE"]
    ANIMAL_REPRODUCE_ENERGY_RATE: float = DEFAULTS["ANIMAL_REPRODUCE_ENERGY_RATE"]
    ANIMAL_ALLOW_REPRODUCTION: bool = True
    DECISION_POLICY: str = "weighted"
    MUTATION_COUNT: int = 1
    SEED: Optional[int] = None
    FPS: int = 30
    CELL_SIZE: int = 20
    LOG_EVERY: int = 100
    LOG_DIRECTORY: Path = Path("logs")
    DEBUG_LOG_FILE: str = "simulation_debug.log"
    DEBUG_LOG_LEVEL: str = "INFO"
    TELEMETRY_ENABLED: bool = False
    PLOT_PATH: Optional[Path] = None

    def with_updates(self, overrides: Dict[str, Any]) -> "SimulationSettings":
        merged = asdict(self)
        merged.update(overrides)
        _validate_settings_dict(merged)
        return SimulationSettings(**merged)

    @property
    def cell_count(self) -> int:
        return self.GRID_WIDTH * self.GRID_HEIGHT


_FIELD_NAMES = tuple(item.name for item in fields(SimulationSettings))
_ENV_VARS: Dict[str, str] = {name: f"{ENV_PREFIX}{name}" for name in _FIELD_NAMES}


def _normalize_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value in _TRUE_STRINGS
    if isinstance(value, (int, float)):
        return bool(value)
    raise ValueError("Invalid boolean value in config")


def _normalize_numeric(value: Any, caster: type[float | int]) -> float | int:
    if isinstance(value, bool):
        raise ValueError("Invalid numeric value in config")
    if isinstance(value, (int, float)):
        return caster(value)
    if isinstance(value, str):
        return caster(float(value) if caster is float else int(float(value)))
    raise ValueError("Invalid numeric value in config")


def _is_none(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() in {"", "none", "null"})


def _normalize_config_value(field: str, value: Any) -> Any:
    if field in _PATH_FIELDS or field in _OPTIONAL_PATH_FIELDS:
        if field in _OPTIONAL_PATH_FIELDS and _is_none(value):
            return None
        if isinstance(value, Path):
            return value
        if isinstance(value, str):
            return Path(value)
        raise ValueError(f"Field {field} must be a path or string")
    if field in _STRING_FIELDS:
        if isinstance(value, str):
            return value
        raise ValueError(f"Field {field} must be a string")
    if field in _BOOL_FIELDS:
        return _normalize_bool(value)
    if field in _FLOAT_FIELDS:
        return float(_normalize_numeric(value, float))
    if field in _OPTIONAL_INT_FIELDS and _is_none(value):
        return None
    return int(_normalize_numeric(value, int))


def _collect_env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for field, env_name in _ENV_VARS.items():
        raw = env.get(env_name)
        if raw is not None:
            overrides[field] = _normalize_config_value(field, raw)
    return overrides


_NUMERIC_BOUNDS: Dict[str, tuple[float, float]] = {
    "GRID_WIDTH": (1, 2000),
    "GRID_HEIGHT": (1, 2000),
    "MAX_STEPS": (0, 100_000_000),
    "MAX_PLANTS": (0, 4_000_000),
    "MAX_HERBIVORE": (0, 4_000_000),
    "MAX_CARNIVORE": (0, 4_000_000),
    "INITIAL_PLANTS": (0, 4_000_000),
    "INITIAL_HERBIVORE": (0, 4_000_000),
    "INITIAL_CARNIVORE": (0, 4_000_000),
    "PLANT_GROW_ENERGY": (0.0, 1e6),
    "MAX_PLANT_ENERGY": (0.0, 1e6),
    "PLANT_EATEN_ENERGY": (0.0, 1e6),
    "PLANT_REPRODUCE_ENERGY_RATE": (0.0, 1.0),
    "MAX_ANIMAL_ENERGY": (0.0, 1e6),
    "ANIMAL_BIRTH_ENERGY": (0.0, 1e6),
    "ANIMAL_HOMEOSTASIS_COST": (0.0, 1e6),
    "ANIMAL_EATEN_ENERGY_SHARE": (0.0, 1.0),
    "ANIMAL_REPRODUCE_ENERGY_RATE": (0.0, 1.0),
    "MUTATION_COUNT": (1, 52),
    "FPS": (1, 360),
    "CELL_SIZE": (2, 128),
    "LOG_EVERY": (0, 100_000_000),
}

_CHOICE_FIELDS: Dict[str, set[str]] = {
    "DEBUG_LOG_LEVEL": {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
    "DECISION_POLICY": {"WEIGHTED", "WINNER"},
}


def _validate_settings_dict(values: Dict[str, Any]) -> None:
    for field, (lower, upper) in _NUMERIC_BOUNDS.items():
        current = values.get(field)
        if current is None:
            continue
        if not (lower <= current <= upper):
            raise ValueError(f"{field} must be between {lower} and {upper}, got {current}")
    for field, choices in _CHOICE_FIELDS.items():
        current = values.get(field)
        if current is None:
            continue
        if isinstance(current, str) and current.upper() in choices:
            normalised = current.upper()
            values[field] = normalised.lower() if field == "DECISION_POLICY" else normalised
            continue
        raise ValueError(f"{field} must be one of {sorted(choices)} (got {current})")
    _validate_relationships(values)


def _validate_relationships(values: Mapping[str, Any]) -> None:
    for kind in ("PLANTS", "HERBIVORE", "CARNIVORE"):
        initial = values.get(f"INITIAL_{kind}")
        ceiling = values.get(f"MAX_{kind}")
        if initial is not None and ceiling is not None and initial > ceiling:
            raise ValueError(f"INITIAL_{kind} cannot exceed MAX_{kind}")
    birth = values.get("ANIMAL_BIRTH_ENERGY")
    max_energy = values.get("MAX_ANIMAL_ENERGY")
    for field, current in (("MAX_ANIMAL_ENERGY", max_energy), ("ANIMAL_BIRTH_ENERGY", birth)):
        # An animal at zero energy is already dead.
        if current is not None and current <= 0:
            raise ValueError(f"{field} must be greater than 0, got {current}")
    if birth is not None and max_energy is not None and birth > max_energy:
        raise ValueError("ANIMAL_BIRTH_ENERGY cannot exceed MAX_ANIMAL_ENERGY")
    width = values.get("GRID_WIDTH")
    height = values.get("GRID_HEIGHT")
    if width and height:
        cells = width * height
        animals = values.get("INITIAL_HERBIVORE", 0) + values.get("INITIAL_CARNIVORE", 0)
        if animals > cells:
            raise ValueError("INITIAL_HERBIVORE + INITIAL_CARNIVORE cannot exceed the number of grid cells")
        if values.get("INITIAL_PLANTS", 0) > cells:
            raise ValueError("INITIAL_PLANTS cannot exceed the number of grid cells")


def _load_config_overrides(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as error:
            raise ValueError(f"Invalid YAML in config file {path}") from error
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must define a mapping")
    valid_fields = set(_FIELD_NAMES)
    overrides: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).upper()
        if key not in valid_fields:
            raise ValueError(f"Unknown config field: {raw_key}")
        overrides[key] = _normalize_config_value(key, value)
    return overrides


def _resolve_config_path(cli_value: str | None, env: Mapping[str, str]) -> Path | None:
    candidate_strings = [cli_value, env.get(CONFIG_ENV_VAR)]
    for candidate in candidate_strings:
        if not candidate:
            continue
        path = Path(candidate).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        return path
    if DEFAULT_CONFIG_FILE.exists():
        return DEFAULT_CONFIG_FILE
    return None


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the grid life simulation with runtime overrides")
    parser.add_argument("--config", type=str, help="Path to a YAML config file with runtime settings")
    parser.add_argument("--grid-width", type=int, help="Number of grid columns")
    parser.add_argument("--grid-height", type=int, help="Number of grid rows")
    parser.add_argument("--max-steps", type=int, help="Number of ticks to simulate")
    parser.add_argument("--max-plants", type=int, help="Plant population ceiling")
    parser.add_argument("--max-herbivore", type=int, help="Herbivore population ceiling")
    parser.add_argument("--max-carnivore", type=int, help="Carnivore population ceiling")
    parser.add_argument("--initial-plants", type=int, help="Plants seeded at startup")
    parser.add_argument("--initial-herbivore", type=int, help="Herbivores seeded at startup")
    parser.add_argument("--initial-carnivore", type=int, help="Carnivores seeded at startup")
    parser.add_argument("--decision-policy", type=str, help="Action selection policy: weighted or winner")
    parser.add_argument("--seed", type=int, help="Seed for the simulation random source")
    parser.add_argument("--fps", type=int, help="Renderer frames per second")
    parser.add_argument("--cell-size", type=int, help="Renderer pixels per grid cell")
    parser.add_argument("--log-every", type=int, help="Log a statistics line every N ticks (0 disables)")
    parser.add_argument("--log-level", type=str, help="Debug log level")
    parser.add_argument("--telemetry-enabled", type=int, help="Enable telemetry (1 or 0)")
    parser.add_argument("--plot-path", type=str, help="Write a population history plot to this PNG file")
    parser.add_argument(
        "--headless",
        dest="headless",
        action="store_true",
        help="Run without opening a window",
    )
    parser.add_argument(
        "--windowed",
        dest="headless",
        action="store_false",
        help="Open a window and draw every tick",
    )
    parser.set_defaults(headless=None)
    return parser


def load_runtime_settings(args: Sequence[str] | None = None, env: Mapping[str, str] | None = None) -> SimulationSettings:
    env_mapping = env if env is not None else os.environ
    parser = _build_arg_parser()
    parsed = parser.parse_args(args=args)
    overrides: Dict[str, Any] = {}
    config_path = _resolve_config_path(parsed.config, env_mapping)
    if config_path is not None:
        overrides.update(_load_config_overrides(config_path))
    overrides.update(_collect_env_overrides(env_mapping))
    cli_mapping = {
        "GRID_WIDTH": parsed.grid_width,
        "GRID_HEIGHT": parsed.grid_height,
        "MAX_STEPS": parsed.max_steps,
        "MAX_PLANTS": parsed.max_plants,
        "MAX_HERBIVORE": parsed.max_herbivore,
        "MAX_CARNIVORE": parsed.max_carnivore,
        "INITIAL_PLANTS": parsed.initial_plants,
        "INITIAL_HERBIVORE": parsed.initial_herbivore,
        "INITIAL_CARNIVORE": parsed.initial_carnivore,
        "DECISION_POLICY": parsed.decision_policy,
        "SEED": parsed.seed,
        "FPS": parsed.fps,
        "CELL_SIZE": parsed.cell_size,
        "LOG_EVERY": parsed.log_every,
        "DEBUG_LOG_LEVEL": parsed.log_level,
        "TELEMETRY_ENABLED": None if parsed.telemetry_enabled is None else bool(parsed.telemetry_enabled),
        "PLOT_PATH": None if parsed.plot_path is None else Path(parsed.plot_path),
        "HEADLESS_MODE": parsed.headless,
    }
    overrides.update({k: v for k, v in cli_mapping.items() if v is not None})
    return SimulationSettings().with_updates(overrides)
