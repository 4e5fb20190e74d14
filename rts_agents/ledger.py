"""Per-unit record of the command each controlled unit is still executing.

The ledger is the single source of truth for "is this unit idle". It is
updated from the host's event history: completion feedback, deaths and
resource exhaustion all return units to idle.
"""

import logging
from typing import Dict, Iterator, List, Optional

from rts_agents.models import Command, CommandType, EventLog

logger = logging.getLogger(__name__)


class CommandLedger:
    """Maps own unit id to its in-flight command, or ``None`` when idle."""

    def __init__(self, start_tick: int = 0):
        self._entries: Dict[int, Optional[Command]] = {}
        self._last_seq = 0
        # First tick whose events have not been reconciled yet
        self.next_tick = start_tick

    def __contains__(self, unit_id: int) -> bool:
        return unit_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def get(self, unit_id: int) -> Optional[Command]:
        return self._entries.get(unit_id)

    def is_idle(self, unit_id: int) -> bool:
        return unit_id in self._entries and self._entries[unit_id] is None

    def idle_units(self) -> List[int]:
        return [uid for uid, cmd in self._entries.items() if cmd is None]

    def in_flight(self) -> List[Command]:
        return [cmd for cmd in self._entries.values() if cmd is not None]

    def track(self, unit_id: int) -> None:
        """Start tracking a unit as idle; existing entries are left alone."""
        self._entries.setdefault(unit_id, None)

    def issue(self, command: Command) -> Command:
        """Stamp ``command`` with the next sequence id and record it.

        The unit must be tracked and idle.
        """
        if not self.is_idle(command.unit_id):
            raise ValueError(f"Unit {command.unit_id} is not idle; cannot issue {command.action.value}")
        self._last_seq += 1
        stamped = command.model_copy(update={"seq": self._last_seq})
        self._entries[command.unit_id] = stamped
        logger.debug(f"Issued {stamped.action.value} #{stamped.seq} to unit {stamped.unit_id}")
        return stamped

    def clear(self, unit_id: int) -> None:
        if unit_id in self._entries:
            self._entries[unit_id] = None

    def remove(self, unit_id: int) -> None:
        self._entries.pop(unit_id, None)

    def reconcile(self, events: EventLog, owner: int, up_to_tick: int) -> None:
        """Apply every tick of ``events`` in ``[next_tick, up_to_tick)``.

        Several ticks may have passed since the last call; each is processed
        in order so no completion is missed. Ticks already reconciled are
        skipped, which makes replaying a log a no-op.

        ``events`` must be cumulative: an event stamped at ``up_to_tick`` or
        later is left for a later call, so a host that hands over only the
        events new since the previous tick would lose it.
        """
        for tick in events.ticks():
            if tick < self.next_tick or tick >= up_to_tick:
                continue
            self._reconcile_tick(events, owner, tick)
        self.next_tick = max(self.next_tick, up_to_tick)

    def _reconcile_tick(self, events: EventLog, owner: int, tick: int) -> None:
        for birth in events.births_at(tick):
            if birth.owner == owner:
                self.track(birth.unit_id)

        stop_units: List[int] = []
        remove_units: List[int] = []

        for death in events.deaths_at(tick):
            if death.owner == owner:
                remove_units.append(death.unit_id)
            stop_units.extend(self._units_targeting(CommandType.ATTACK, death.unit_id))

        for exhaustion in events.exhaustions_at(tick):
            stop_units.extend(self._units_targeting(CommandType.GATHER, exhaustion.node_id))

        # Stops first so a death can both orphan its attackers and drop its own entry
        for uid in stop_units:
            logger.debug(f"Tick {tick}: unit {uid} target gone, now idle")
            self.clear(uid)
        for uid in remove_units:
            logger.debug(f"Tick {tick}: unit {uid} died")
            self.remove(uid)

        for feedback in events.feedback_at(tick, owner):
            if not feedback.status.is_terminal:
                continue
            uid = feedback.command.unit_id
            current = self._entries.get(uid)
            if current is not None and current.seq == feedback.command.seq:
                logger.debug(
                    f"Tick {tick}: unit {uid} {current.action.value} #{current.seq} "
                    f"{feedback.status.value}"
                )
                self._entries[uid] = None

    def _units_targeting(self, action: CommandType, target_id: int) -> List[int]:
        return [
            uid for uid, cmd in self._entries.items()
            if cmd is not None and cmd.targets(action, target_id)
        ]
