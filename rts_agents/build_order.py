"""Fixed linear build order.

The build order walks a list of :class:`ProductionGoal` one way only. A goal
is complete once enough units of its type exist, however they came to be.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from rts_agents.game_data import get_cost, get_producer, is_structure
from rts_agents.ledger import CommandLedger
from rts_agents.models import Cell, Command, CommandType, ProductionGoal, UnitType, WorldState

logger = logging.getLogger(__name__)


class BuildOrder:
    def __init__(self, goals: Sequence[ProductionGoal]):
        self.goals: List[ProductionGoal] = list(goals)
        self.index = 0

    @property
    def current(self) -> Optional[ProductionGoal]:
        if self.index < len(self.goals):
            return self.goals[self.index]
        return None

    @property
    def done(self) -> bool:
        return self.current is None

    def targets(self) -> Tuple[int, int]:
        """``(gold, wood)`` needed for the current goal; zero when done."""
        if self.current is None:
            return 0, 0
        return get_cost(self.current.unit_type)

    def advance(self, state: WorldState, owner: int) -> None:
        """Skip past every goal whose unit count is already met."""
        while self.current is not None:
            goal = self.current
            have = len(state.own_units(owner, goal.unit_type))
            if have < goal.count:
                return
            self.index += 1
            nxt = self.current.unit_type.value if self.current else "done"
            logger.info(f"Goal {goal.unit_type.value} x{goal.count} met ({have}); next: {nxt}")

    def pending(self, ledger: CommandLedger) -> bool:
        """True while a produce or build order for the current goal's type is in flight."""
        goal = self.current
        if goal is None:
            return False
        return any(
            cmd.action in (CommandType.PRODUCE, CommandType.BUILD) and cmd.unit_type == goal.unit_type
            for cmd in ledger.in_flight()
        )

    def next_command(
        self,
        state: WorldState,
        owner: int,
        ledger: CommandLedger,
        available: Tuple[int, int],
        idle_workers: List[int],
        base: Cell,
        offsets: Dict[UnitType, Cell],
    ) -> Optional[Command]:
        """Return the one command to issue toward the current goal, if any.

        Nothing is issued while an earlier order toward the goal is still in
        flight. Units are produced by the first producer of the right type, and
        only while it has nothing in flight. Structures are built by the first idle
        peasant at a fixed offset from the base.
        """
        goal = self.current
        if goal is None:
            return None
        if self.pending(ledger):
            return None

        gold_cost, wood_cost = get_cost(goal.unit_type)
        gold, wood = available
        if gold < gold_cost or wood < wood_cost:
            return None

        if is_structure(goal.unit_type):
            if not idle_workers:
                return None
            dx, dy = offsets[goal.unit_type]
            return Command.build(idle_workers[0], goal.unit_type, base[0] + dx, base[1] + dy)

        producers = state.own_units(owner, get_producer(goal.unit_type))
        if not producers or not ledger.is_idle(producers[0].unit_id):
            return None
        return Command.produce(producers[0].unit_id, goal.unit_type)
