"""A* grid planning and single-step path following.

Plans run once over a static obstacle set on an 8-connected grid. Axis steps
cost ``axis_cost`` and diagonal steps ``diagonal_cost`` (10 and 14 by
default, a fixed-point sqrt(2):1). The heuristic is Chebyshev distance scaled
by ``axis_cost``, which is consistent whenever ``diagonal_cost >= axis_cost``,
so a finalized (closed) cell is never reopened.

The scaling keeps the heuristic in the same units as the step costs. An
unscaled Chebyshev estimate (one per step) is also consistent and finds paths
of the same cost, but it ranks open cells almost purely by distance walked,
so equal-cost paths can be chosen differently and more cells get expanded.
"""

import heapq
import logging
from typing import Collection, Dict, Iterator, List, Optional, Tuple

from rts_agents.models import Cell, Command, Direction

logger = logging.getLogger(__name__)

AXIS_COST = 10
DIAGONAL_COST = 14


def chebyshev(a: Cell, b: Cell) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def step_cost(a: Cell, b: Cell, axis_cost: int = AXIS_COST, diagonal_cost: int = DIAGONAL_COST) -> int:
    if a[0] != b[0] and a[1] != b[1]:
        return diagonal_cost
    return axis_cost


def path_cost(
    start: Cell,
    path: List[Cell],
    axis_cost: int = AXIS_COST,
    diagonal_cost: int = DIAGONAL_COST,
) -> int:
    """Weighted cost of walking ``path`` from ``start``."""
    total = 0
    prev = start
    for cell in path:
        total += step_cost(prev, cell, axis_cost, diagonal_cost)
        prev = cell
    return total


def neighbors(cell: Cell, obstacles: Collection[Cell], bounds: Tuple[int, int]) -> Iterator[Cell]:
    """In-bounds, obstacle-free cells around ``cell``."""
    width, height = bounds
    x, y = cell
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height and (nx, ny) not in obstacles:
                yield (nx, ny)


def plan(
    start: Cell,
    goal: Cell,
    obstacles: Collection[Cell],
    bounds: Tuple[int, int],
    axis_cost: int = AXIS_COST,
    diagonal_cost: int = DIAGONAL_COST,
) -> Optional[List[Cell]]:
    """Shortest path from ``start`` (exclusive) to ``goal`` (inclusive).

    Returns ``None`` when the goal cannot be reached. Among open cells with
    equal f-score the one pushed first is expanded first. An open cell takes
    a new parent when the new route is no more expensive than its current
    one; closed cells are final.
    """
    blocked = frozenset(obstacles)
    g_score: Dict[Cell, int] = {start: 0}
    parents: Dict[Cell, Cell] = {}
    closed = set()
    counter = 0
    open_heap: List[Tuple[int, int, Cell]] = [(axis_cost * chebyshev(start, goal), counter, start)]

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        if current == goal:
            return _reconstruct(parents, start, goal)
        closed.add(current)

        for neighbor in neighbors(current, blocked, bounds):
            if neighbor in closed:
                continue
            tentative = g_score[current] + step_cost(current, neighbor, axis_cost, diagonal_cost)
            if neighbor not in g_score or tentative <= g_score[neighbor]:
                parents[neighbor] = current
                g_score[neighbor] = tentative
                counter += 1
                f_score = tentative + axis_cost * chebyshev(neighbor, goal)
                heapq.heappush(open_heap, (f_score, counter, neighbor))

    return None


def _reconstruct(parents: Dict[Cell, Cell], start: Cell, goal: Cell) -> List[Cell]:
    path = []
    current = goal
    while current != start:
        path.append(current)
        current = parents[current]
    path.reverse()
    return path


class PathFollower:
    """Walks a precomputed path one cell per tick, then attacks a target.

    ``following`` while waypoints remain, ``arrived`` afterwards; arrival is
    permanent even if the unit is pushed off the final cell.
    """

    def __init__(self, unit_id: int, target_id: int, path: List[Cell]):
        self.unit_id = unit_id
        self.target_id = target_id
        self.path = list(path)

    @property
    def arrived(self) -> bool:
        return not self.path

    @property
    def state(self) -> str:
        return "arrived" if self.arrived else "following"

    def step(self, position: Cell) -> Command:
        """Command for this tick given the unit's current cell."""
        if self.arrived:
            return Command.attack(self.unit_id, self.target_id)
        waypoint = self.path[0]
        direction = Direction.from_delta(waypoint[0] - position[0], waypoint[1] - position[1])
        self.path.pop(0)
        if self.arrived:
            logger.info(f"Unit {self.unit_id} stepping onto final waypoint {waypoint}")
        return Command.move(self.unit_id, direction)
