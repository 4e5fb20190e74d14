"""Subcommand implementations for the rts-agents CLI."""

import sys
from pathlib import Path
from typing import Optional

import yaml

from rts_agents.cli.console import error, grid, header, info, render_grid, success
from rts_agents.config import RTSAgentsConfig, load_config
from rts_agents.game_data import get_cost, get_producer, get_template
from rts_agents.logging_setup import configure_logging
from rts_agents.pathing import path_cost, plan


def load_map(map_file: str) -> dict:
    """Load a YAML grid map with ``width``, ``height``, ``start``, ``goal``, ``obstacles``."""
    p = Path(map_file).expanduser()
    if not p.is_file():
        raise FileNotFoundError(f"map file not found: {p}")
    with open(p, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    missing = {"width", "height", "start", "goal"} - set(data)
    if missing:
        raise ValueError(f"map file {p} missing keys: {sorted(missing)}")
    return {
        "bounds": (int(data["width"]), int(data["height"])),
        "start": tuple(data["start"]),
        "goal": tuple(data["goal"]),
        "obstacles": {tuple(cell) for cell in data.get("obstacles") or []},
    }


def _load(config_file: Optional[str], cli_overrides: Optional[dict] = None) -> RTSAgentsConfig:
    config = load_config(config_path=config_file, cli_overrides=cli_overrides)
    configure_logging(config.logging)
    return config


def cmd_plan(
    map_file: str,
    config_file: Optional[str] = None,
    axis_cost: Optional[int] = None,
    diagonal_cost: Optional[int] = None,
) -> None:
    """Plan a path on a map file and print it."""
    # Explicit flags beat env vars and the config file
    cli_overrides: dict = {}
    if axis_cost is not None:
        cli_overrides.setdefault("search", {})["axis_cost"] = axis_cost
    if diagonal_cost is not None:
        cli_overrides.setdefault("search", {})["diagonal_cost"] = diagonal_cost
    config = _load(config_file, cli_overrides)
    grid_map = load_map(map_file)
    start, goal = grid_map["start"], grid_map["goal"]

    header(f"Planning {start} -> {goal} on {grid_map['bounds'][0]}x{grid_map['bounds'][1]}")
    path = plan(
        start,
        goal,
        grid_map["obstacles"],
        grid_map["bounds"],
        config.search.axis_cost,
        config.search.diagonal_cost,
    )
    if path is None:
        grid(render_grid(grid_map["bounds"], grid_map["obstacles"], start, goal))
        error("No valid path")
        sys.exit(1)

    grid(render_grid(grid_map["bounds"], grid_map["obstacles"], start, goal, path))
    cost = path_cost(start, path, config.search.axis_cost, config.search.diagonal_cost)
    success(f"Path found: {len(path)} steps, cost {cost}")


def cmd_build_order(config_file: Optional[str] = None) -> None:
    """Print the configured build order."""
    config = _load(config_file)
    header("Build order")
    for i, goal in enumerate(config.resource.build_order, start=1):
        gold, wood = get_cost(goal.unit_type)
        producer = get_producer(goal.unit_type)
        info(
            f"{i}. {goal.unit_type.value} x{goal.count}  "
            f"(gold {gold}, wood {wood}, from {producer.value})"
        )
        info(f"   {get_template(goal.unit_type)['description']}")


def cmd_config(config_file: Optional[str] = None) -> None:
    """Dump the effective configuration as YAML."""
    config = _load(config_file)
    print(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False), end="")
