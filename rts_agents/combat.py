"""Send idle combat units at the enemy."""

from rts_agents.game_data import is_combat
from rts_agents.ledger import CommandLedger
from rts_agents.models import Command, CommandMap, WorldState


def dispatch(state: WorldState, owner: int, ledger: CommandLedger) -> CommandMap:
    """Order every idle combat unit to attack the first visible enemy.

    Targets are not re-picked while an attack is in flight; the ledger frees
    the unit when the attack finishes or the target dies.
    """
    issued: CommandMap = {}
    enemies = state.enemy_units(owner)
    if not enemies:
        return issued
    target = enemies[0]
    for unit in state.own_units(owner):
        if is_combat(unit.type) and ledger.is_idle(unit.unit_id):
            issued[unit.unit_id] = ledger.issue(Command.attack(unit.unit_id, target.unit_id))
    return issued
