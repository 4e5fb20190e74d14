"""Resource forecasting and peasant gather/deposit assignment."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from rts_agents.ledger import CommandLedger
from rts_agents.models import (
    Command,
    CommandMap,
    CommandType,
    ResourceBank,
    ResourceType,
    UnitType,
    WorldState,
)

logger = logging.getLogger(__name__)


@dataclass
class Forecast:
    """Resources expected to be banked soon: carried or being mined."""

    gold: int = 0
    wood: int = 0

    def add(self, resource: ResourceType, amount: int) -> None:
        if resource == ResourceType.GOLD:
            self.gold += amount
        else:
            self.wood += amount

    def available(self, bank: ResourceBank) -> Tuple[int, int]:
        """``(gold, wood)`` once everything in flight has been deposited."""
        return bank.gold + self.gold, bank.wood + self.wood


def forecast(
    state: WorldState,
    owner: int,
    ledger: CommandLedger,
    capacities: Dict[ResourceType, int],
) -> Forecast:
    """Sum the gold and wood owner's peasants are bringing home.

    A peasant on a gather order counts for one full load of the *target
    node's* resource, whatever it currently carries; any other peasant counts
    for its cargo.
    """
    result = Forecast()
    for peasant in state.own_units(owner, UnitType.PEASANT):
        command = ledger.get(peasant.unit_id)
        if command is not None and command.action == CommandType.GATHER:
            node = state.resource_node(command.target_id)
            if node is None:
                logger.debug(f"Gather target {command.target_id} of unit {peasant.unit_id} not in snapshot")
                continue
            result.add(node.type, capacities[node.type])
        elif peasant.cargo_type is not None and peasant.cargo_amount > 0:
            result.add(peasant.cargo_type, peasant.cargo_amount)
    return result


def assign_workers(
    state: WorldState,
    owner: int,
    ledger: CommandLedger,
    incoming: Forecast,
    targets: Tuple[int, int],
) -> Tuple[CommandMap, List[int]]:
    """Give every idle peasant a deposit or gather order.

    Wood is topped up before gold, and only while bank plus forecast is below
    the current goal's target. The first node of each type is always used.

    Returns the issued commands and the idle peasants left over for
    construction, in snapshot order.
    """
    issued: CommandMap = {}
    available: List[int] = []

    target_gold, target_wood = targets
    have_gold, have_wood = incoming.available(state.bank(owner))
    town_halls = state.own_units(owner, UnitType.TOWN_HALL)
    gold_nodes = state.nodes_of(ResourceType.GOLD)
    wood_nodes = state.nodes_of(ResourceType.WOOD)

    for peasant in state.own_units(owner, UnitType.PEASANT):
        if not ledger.is_idle(peasant.unit_id):
            continue
        if peasant.cargo_amount > 0:
            command = Command.deposit(peasant.unit_id, town_halls[0].unit_id)
        elif have_wood < target_wood and wood_nodes:
            command = Command.gather(peasant.unit_id, wood_nodes[0].node_id)
        elif have_gold < target_gold and gold_nodes:
            command = Command.gather(peasant.unit_id, gold_nodes[0].node_id)
        else:
            available.append(peasant.unit_id)
            continue
        issued[peasant.unit_id] = ledger.issue(command)
    return issued, available
