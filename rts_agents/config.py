"""Unified configuration for rts-agents.

Provides a single YAML-based configuration system with Pydantic validation.
Supports multiple override layers:
  CLI > env vars > constructor overrides > config file > built-in defaults

Usage:
    from rts_agents.config import load_config
    config = load_config()                              # auto-find config.yaml
    config = load_config("path/to/config.yaml")         # explicit path
    config = load_config(search={"axis_cost": 5})       # with overrides
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from rts_agents.game_data import (
    DEFAULT_BUILD_ORDER,
    DEFAULT_PLACEMENT_OFFSETS,
    GATHER_CAPACITY,
    get_producer,
    is_structure,
)
from rts_agents.models import ProductionGoal, ResourceType, UnitType


# ── Pydantic Config Models ────────────────────────────────────────────


class ResourceConfig(BaseModel):
    gold_capacity: int = GATHER_CAPACITY  # credited per peasant gathering gold
    wood_capacity: int = GATHER_CAPACITY
    # Count in-flight resources toward affordability, not only the bank
    spend_forecast: bool = True
    build_order: list[ProductionGoal] = Field(
        default_factory=lambda: [g.model_copy() for g in DEFAULT_BUILD_ORDER]
    )
    placement_offsets: dict[UnitType, tuple[int, int]] = Field(
        default_factory=lambda: dict(DEFAULT_PLACEMENT_OFFSETS)
    )

    def capacities(self) -> dict[ResourceType, int]:
        return {ResourceType.GOLD: self.gold_capacity, ResourceType.WOOD: self.wood_capacity}


class SearchConfig(BaseModel):
    axis_cost: int = 10
    diagonal_cost: int = 14
    mover_type: UnitType = UnitType.FOOTMAN
    destination_type: UnitType = UnitType.TOWN_HALL
    obstacle_resources: list[ResourceType] = Field(default_factory=lambda: [ResourceType.WOOD])


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_file: str = ""  # empty = console only


class RTSAgentsConfig(BaseModel):
    """Root configuration for both controllers."""

    resource: ResourceConfig = Field(default_factory=ResourceConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def check_step_costs(self) -> "RTSAgentsConfig":
        """Diagonal steps may not be cheaper than axis steps."""
        if self.search.axis_cost <= 0:
            raise ValueError("search.axis_cost must be positive")
        if self.search.diagonal_cost < self.search.axis_cost:
            raise ValueError(
                f"search.diagonal_cost ({self.search.diagonal_cost}) must be >= "
                f"search.axis_cost ({self.search.axis_cost})"
            )
        return self

    @model_validator(mode="after")
    def check_build_order(self) -> "RTSAgentsConfig":
        """Every structure goal needs a placement offset."""
        for goal in self.resource.build_order:
            if get_producer(goal.unit_type) is None:
                raise ValueError(f"{goal.unit_type.value} has no producer")
            if is_structure(goal.unit_type) and goal.unit_type not in self.resource.placement_offsets:
                raise ValueError(f"No placement offset for structure {goal.unit_type.value}")
        return self


# ── Env Var Mapping ───────────────────────────────────────────────────

_ENV_VAR_MAP: list[tuple[str, str]] = [
    ("RTS_AGENTS_LOG_LEVEL", "logging.level"),
    ("RTS_AGENTS_LOG_FILE", "logging.log_file"),
    ("RTS_AGENTS_SPEND_FORECAST", "resource.spend_forecast"),
    ("RTS_AGENTS_AXIS_COST", "search.axis_cost"),
    ("RTS_AGENTS_DIAGONAL_COST", "search.diagonal_cost"),
]


# ── Helper Functions ──────────────────────────────────────────────────


def _deep_merge(base: dict, override: dict) -> None:
    """Recursively merge *override* into *base* in place."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _set_nested(d: dict, path: str, value: object) -> None:
    """Set a value in a nested dict via dotted path (e.g. ``'search.axis_cost'``)."""
    keys = path.split(".")
    for key in keys[:-1]:
        d = d.setdefault(key, {})
    d[keys[-1]] = value


def _coerce_value(value: str) -> object:
    """Coerce a string env-var value to bool / int / str."""
    lower = value.lower()
    if lower in ("true", "yes", "on"):
        return True
    if lower in ("false", "no", "off"):
        return False
    try:
        return int(value)
    except ValueError:
        return value


# ── Config Loading ────────────────────────────────────────────────────


def load_config(
    config_path: Optional[str] = None,
    cli_overrides: Optional[dict] = None,
    **overrides: object,
) -> RTSAgentsConfig:
    """Load configuration with precedence: CLI > env vars > overrides > file > defaults.

    Parameters
    ----------
    config_path:
        Explicit path to a YAML config file. When ``None``, searches for
        ``config.yaml`` in the current working directory and the project root.
    cli_overrides:
        Dict of overrides from explicit CLI flags, applied last.
    **overrides:
        Keyword arguments deep-merged on top of the file values.
        Keys are top-level section names (e.g. ``search={...}``).
    """
    config_dict: dict = {}

    resolved_path = _resolve_config_path(config_path)
    if resolved_path is not None:
        with open(resolved_path, encoding="utf-8") as f:
            file_dict = yaml.safe_load(f) or {}
        _deep_merge(config_dict, file_dict)

    if overrides:
        _deep_merge(config_dict, overrides)

    for env_var, dotted_path in _ENV_VAR_MAP:
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(config_dict, dotted_path, _coerce_value(value))

    if cli_overrides:
        _deep_merge(config_dict, cli_overrides)

    return RTSAgentsConfig(**config_dict)


def _resolve_config_path(config_path: Optional[str]) -> Optional[str]:
    """Find the config file to load, or None if none exists."""
    if config_path is not None:
        p = Path(config_path)
        return str(p) if p.exists() else None

    candidates = [
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parent.parent / "config.yaml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return str(candidate)
    return None
