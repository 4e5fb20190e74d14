"""ANSI colored console output and grid rendering (no external deps)."""

import sys
from typing import Collection, List, Optional, Tuple

from rts_agents.models import Cell

# ANSI codes (empty when stdout is not a TTY)
_IS_TTY = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()

_RESET = "\033[0m" if _IS_TTY else ""
_BOLD = "\033[1m" if _IS_TTY else ""
_GREEN = "\033[32m" if _IS_TTY else ""
_RED = "\033[31m" if _IS_TTY else ""
_DIM = "\033[2m" if _IS_TTY else ""

# Grid glyphs
START = "S"
GOAL = "G"
WAYPOINT = "*"
OBSTACLE = "#"
FREE = "."


def info(msg: str) -> None:
    print(f"  {msg}")


def success(msg: str) -> None:
    print(f"  {_GREEN}{msg}{_RESET}")


def error(msg: str) -> None:
    print(f"  {_RED}{msg}{_RESET}", file=sys.stderr)


def header(msg: str) -> None:
    print(f"\n  {_BOLD}{msg}{_RESET}")


def render_grid(
    bounds: Tuple[int, int],
    obstacles: Collection[Cell],
    start: Cell,
    goal: Cell,
    path: Optional[List[Cell]] = None,
) -> List[str]:
    """Plain-text rows of the grid, y increasing downward."""
    width, height = bounds
    on_path = set(path or [])
    rows = []
    for y in range(height):
        row = []
        for x in range(width):
            cell = (x, y)
            if cell == start:
                row.append(START)
            elif cell == goal:
                row.append(GOAL)
            elif cell in obstacles:
                row.append(OBSTACLE)
            elif cell in on_path:
                row.append(WAYPOINT)
            else:
                row.append(FREE)
        rows.append("".join(row))
    return rows


def grid(rows: List[str]) -> None:
    for row in rows:
        print(f"  {_DIM}{row}{_RESET}")
