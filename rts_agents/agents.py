"""Tick-driven controllers.

Both controllers follow the host contract: ``on_start(state)`` once, then
``on_tick(state, events)`` every tick, each returning a map of unit id to the
command newly issued for it this tick. Omitting a unit leaves whatever it
was doing untouched.
"""

import logging
from typing import BinaryIO, Optional

from rts_agents.build_order import BuildOrder
from rts_agents.combat import dispatch
from rts_agents.config import RTSAgentsConfig
from rts_agents.economy import assign_workers, forecast
from rts_agents.ledger import CommandLedger
from rts_agents.models import CommandMap, EventLog, UnitType, WorldState
from rts_agents.pathing import PathFollower, path_cost, plan

logger = logging.getLogger(__name__)


class Agent:
    """Base controller bound to one player."""

    def __init__(self, player: int, config: Optional[RTSAgentsConfig] = None):
        self.player = player
        self.config = config or RTSAgentsConfig()

    def on_start(self, state: WorldState) -> CommandMap:
        raise NotImplementedError

    def on_tick(self, state: WorldState, events: EventLog) -> CommandMap:
        raise NotImplementedError

    def on_terminal(self, state: WorldState, events: EventLog) -> None:
        pass

    def save_player_data(self, stream: BinaryIO) -> None:
        pass

    def load_player_data(self, stream: BinaryIO) -> None:
        pass


class ResourceCollectionAgent(Agent):
    """Gathers resources, follows the build order, and attacks with footmen.

    Per tick the ledger is reconciled and incoming resources forecast. The
    build order then advances, idle peasants are put to work toward its
    current goal, and at most one produce or build command is issued before
    idle combat units are dispatched.
    """

    def __init__(self, player: int, config: Optional[RTSAgentsConfig] = None):
        super().__init__(player, config)
        self.ledger = CommandLedger()
        self.build_order = BuildOrder(self.config.resource.build_order)

    def on_start(self, state: WorldState) -> CommandMap:
        self.ledger = CommandLedger(start_tick=state.tick)
        for unit in state.own_units(self.player):
            self.ledger.track(unit.unit_id)
        logger.info(
            f"Player {self.player}: tracking {len(self.ledger)} units, "
            f"first goal {self.build_order.current.unit_type.value if self.build_order.current else 'none'}"
        )
        return self._decide(state)

    def on_tick(self, state: WorldState, events: EventLog) -> CommandMap:
        self.ledger.reconcile(events, self.player, up_to_tick=state.tick)
        return self._decide(state)

    def _decide(self, state: WorldState) -> CommandMap:
        resource_cfg = self.config.resource
        incoming = forecast(state, self.player, self.ledger, resource_cfg.capacities())
        self.build_order.advance(state, self.player)

        commands, idle_workers = assign_workers(
            state, self.player, self.ledger, incoming, self.build_order.targets()
        )

        bank = state.bank(self.player)
        available = incoming.available(bank) if resource_cfg.spend_forecast else (bank.gold, bank.wood)
        town_hall = state.own_units(self.player, UnitType.TOWN_HALL)[0]
        command = self.build_order.next_command(
            state,
            self.player,
            self.ledger,
            available,
            idle_workers,
            town_hall.position,
            resource_cfg.placement_offsets,
        )
        if command is not None:
            commands[command.unit_id] = self.ledger.issue(command)
            logger.info(f"Tick {state.tick}: {command.action.value} {command.unit_type.value} via unit {command.unit_id}")

        commands.update(dispatch(state, self.player, self.ledger))
        return commands


class PathSearchAgent(Agent):
    """Walks one unit to an enemy structure along a precomputed A* path."""

    def __init__(self, player: int, config: Optional[RTSAgentsConfig] = None):
        super().__init__(player, config)
        self.follower: Optional[PathFollower] = None
        self.halted = False

    def on_start(self, state: WorldState) -> CommandMap:
        search = self.config.search
        movers = state.own_units(self.player, search.mover_type)
        destinations = [u for u in state.enemy_units(self.player) if u.type == search.destination_type]
        mover = movers[0]
        destination = destinations[0]

        obstacles = {n.position for n in state.resource_nodes if n.type in search.obstacle_resources}
        path = plan(
            mover.position,
            destination.position,
            obstacles,
            (state.x_extent, state.y_extent),
            search.axis_cost,
            search.diagonal_cost,
        )
        if path is None:
            logger.error(f"No valid path from {mover.position} to {destination.position}; halting")
            self.halted = True
            return {}

        cost = path_cost(mover.position, path, search.axis_cost, search.diagonal_cost)
        logger.info(f"Planned {len(path)} steps (cost {cost}) from {mover.position} to {destination.position}")
        self.follower = PathFollower(mover.unit_id, destination.unit_id, path)
        return self.on_tick(state, EventLog())

    def on_tick(self, state: WorldState, events: EventLog) -> CommandMap:
        if self.halted or self.follower is None:
            return {}
        mover = state.unit(self.follower.unit_id)
        if mover is None:
            logger.error(f"Unit {self.follower.unit_id} is gone; halting")
            self.halted = True
            return {}
        command = self.follower.step(mover.position)
        return {command.unit_id: command}
