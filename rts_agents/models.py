"""Pydantic models for the rts-agents controllers.

Defines the world-state snapshot, event log, and command types exchanged
across the per-tick boundary with the simulation host.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

Cell = Tuple[int, int]


# ─── Enumerations ─────────────────────────────────────────────────────────────


class UnitType(str, Enum):
    """Closed set of unit and structure templates."""

    PEASANT = "Peasant"
    TOWN_HALL = "TownHall"
    FARM = "Farm"
    BARRACKS = "Barracks"
    FOOTMAN = "Footman"


class ResourceType(str, Enum):
    GOLD = "GOLD"
    WOOD = "WOOD"


class Direction(str, Enum):
    """The 8 single-step directions. North is negative y."""

    NORTH = "NORTH"
    NORTHEAST = "NORTHEAST"
    EAST = "EAST"
    SOUTHEAST = "SOUTHEAST"
    SOUTH = "SOUTH"
    SOUTHWEST = "SOUTHWEST"
    WEST = "WEST"
    NORTHWEST = "NORTHWEST"

    @property
    def delta(self) -> Cell:
        return _DIRECTION_DELTAS[self]

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> "Direction":
        """Resolve a one-cell offset to a direction.

        Raises ValueError for a zero offset or anything longer than one step.
        """
        for direction, delta in _DIRECTION_DELTAS.items():
            if delta == (dx, dy):
                return direction
        raise ValueError(f"({dx}, {dy}) is not a single-step direction")


_DIRECTION_DELTAS: Dict[Direction, Cell] = {
    Direction.NORTH: (0, -1),
    Direction.NORTHEAST: (1, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTHEAST: (1, 1),
    Direction.SOUTH: (0, 1),
    Direction.SOUTHWEST: (-1, 1),
    Direction.WEST: (-1, 0),
    Direction.NORTHWEST: (-1, -1),
}


class CommandType(str, Enum):
    """Closed command vocabulary accepted by the host."""

    MOVE = "move"
    ATTACK = "attack"
    GATHER = "gather"
    DEPOSIT = "deposit"
    PRODUCE = "produce"
    BUILD = "build"


class FeedbackStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    INCOMPLETE = "incomplete"

    @property
    def is_terminal(self) -> bool:
        return self is not FeedbackStatus.INCOMPLETE


# ─── Commands ─────────────────────────────────────────────────────────────────


class Command(BaseModel):
    """A single command for one unit.

    ``seq`` is stamped by the ledger when the command is issued and is what
    feedback is matched against; two structurally identical commands issued
    back to back still carry different sequence ids.
    """

    model_config = ConfigDict(frozen=True)

    action: CommandType = Field(..., description="Type of command to execute")
    unit_id: int = Field(..., description="Subject unit ID")
    target_id: Optional[int] = Field(default=None, description="Target unit or resource node ID")
    direction: Optional[Direction] = Field(default=None, description="Step direction for move")
    unit_type: Optional[UnitType] = Field(default=None, description="Template for produce/build")
    x: Optional[int] = Field(default=None, description="Build site X")
    y: Optional[int] = Field(default=None, description="Build site Y")
    seq: int = Field(default=0, description="Issue sequence id (0 = not yet issued)")

    @classmethod
    def move(cls, unit_id: int, direction: Direction) -> "Command":
        return cls(action=CommandType.MOVE, unit_id=unit_id, direction=direction)

    @classmethod
    def attack(cls, unit_id: int, target_id: int) -> "Command":
        return cls(action=CommandType.ATTACK, unit_id=unit_id, target_id=target_id)

    @classmethod
    def gather(cls, unit_id: int, node_id: int) -> "Command":
        return cls(action=CommandType.GATHER, unit_id=unit_id, target_id=node_id)

    @classmethod
    def deposit(cls, unit_id: int, base_id: int) -> "Command":
        return cls(action=CommandType.DEPOSIT, unit_id=unit_id, target_id=base_id)

    @classmethod
    def produce(cls, unit_id: int, unit_type: UnitType) -> "Command":
        return cls(action=CommandType.PRODUCE, unit_id=unit_id, unit_type=unit_type)

    @classmethod
    def build(cls, unit_id: int, unit_type: UnitType, x: int, y: int) -> "Command":
        return cls(action=CommandType.BUILD, unit_id=unit_id, unit_type=unit_type, x=x, y=y)

    def targets(self, action: CommandType, target_id: int) -> bool:
        """True if this is an ``action`` command aimed at ``target_id``."""
        return self.action == action and self.target_id == target_id


CommandMap = Dict[int, Command]


# ─── World State ──────────────────────────────────────────────────────────────


class UnitView(BaseModel):
    """Read-only view of a single unit."""

    unit_id: int = Field(..., description="Unique unit ID, stable for its lifetime")
    owner: int = Field(..., description="Controlling player number")
    type: UnitType = Field(..., description="Unit template")
    x: int = Field(default=0, description="Cell position X")
    y: int = Field(default=0, description="Cell position Y")
    cargo_type: Optional[ResourceType] = Field(default=None, description="Carried resource type")
    cargo_amount: int = Field(default=0, description="Carried resource amount")

    @property
    def position(self) -> Cell:
        return (self.x, self.y)


class ResourceNodeView(BaseModel):
    """Read-only view of a gold mine or tree."""

    node_id: int = Field(..., description="Unique resource node ID")
    type: ResourceType = Field(..., description="Resource yielded by this node")
    x: int = Field(default=0, description="Cell position X")
    y: int = Field(default=0, description="Cell position Y")
    remaining: int = Field(default=0, description="Remaining supply")

    @property
    def position(self) -> Cell:
        return (self.x, self.y)


class ResourceBank(BaseModel):
    gold: int = Field(default=0, description="Banked gold")
    wood: int = Field(default=0, description="Banked wood")


class WorldState(BaseModel):
    """Immutable snapshot of the world handed to a controller each tick.

    List order is discovery order: "first" always means the first entry.
    """

    model_config = ConfigDict(frozen=True)

    tick: int = Field(default=0, description="Current simulation tick")
    units: List[UnitView] = Field(default_factory=list, description="All visible units")
    resource_nodes: List[ResourceNodeView] = Field(default_factory=list, description="All resource nodes")
    banks: Dict[int, ResourceBank] = Field(default_factory=dict, description="Resource bank per player")
    x_extent: int = Field(default=0, description="Grid width in cells")
    y_extent: int = Field(default=0, description="Grid height in cells")

    def unit(self, unit_id: int) -> Optional[UnitView]:
        return next((u for u in self.units if u.unit_id == unit_id), None)

    def resource_node(self, node_id: int) -> Optional[ResourceNodeView]:
        return next((n for n in self.resource_nodes if n.node_id == node_id), None)

    def own_units(self, owner: int, unit_type: Optional[UnitType] = None) -> List[UnitView]:
        return [
            u for u in self.units
            if u.owner == owner and (unit_type is None or u.type == unit_type)
        ]

    def enemy_units(self, owner: int) -> List[UnitView]:
        return [u for u in self.units if u.owner != owner]

    def nodes_of(self, resource_type: ResourceType) -> List[ResourceNodeView]:
        return [n for n in self.resource_nodes if n.type == resource_type]

    def bank(self, owner: int) -> ResourceBank:
        return self.banks.get(owner, ResourceBank())

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.x_extent and 0 <= y < self.y_extent


# ─── Events ───────────────────────────────────────────────────────────────────


class BirthEvent(BaseModel):
    tick: int = Field(..., description="Tick the unit appeared")
    unit_id: int = Field(..., description="New unit ID")
    owner: int = Field(..., description="Controlling player")


class DeathEvent(BaseModel):
    tick: int = Field(..., description="Tick the unit died")
    unit_id: int = Field(..., description="Dead unit ID")
    owner: int = Field(..., description="Controlling player at time of death")


class ExhaustionEvent(BaseModel):
    tick: int = Field(..., description="Tick the node ran out")
    node_id: int = Field(..., description="Exhausted resource node ID")


class CommandFeedback(BaseModel):
    tick: int = Field(..., description="Tick the feedback was produced")
    owner: int = Field(..., description="Player that issued the command")
    command: Command = Field(..., description="Originating command, including its seq")
    status: FeedbackStatus = Field(..., description="Outcome of the command")


class EventLog(BaseModel):
    """Ordered history since the controller's last invocation."""

    births: List[BirthEvent] = Field(default_factory=list)
    deaths: List[DeathEvent] = Field(default_factory=list)
    exhaustions: List[ExhaustionEvent] = Field(default_factory=list)
    feedback: List[CommandFeedback] = Field(default_factory=list)

    def ticks(self) -> List[int]:
        """Ticks that carry at least one event, ascending."""
        seen = {e.tick for e in self.births}
        seen.update(e.tick for e in self.deaths)
        seen.update(e.tick for e in self.exhaustions)
        seen.update(e.tick for e in self.feedback)
        return sorted(seen)

    def births_at(self, tick: int) -> List[BirthEvent]:
        return [e for e in self.births if e.tick == tick]

    def deaths_at(self, tick: int) -> List[DeathEvent]:
        return [e for e in self.deaths if e.tick == tick]

    def exhaustions_at(self, tick: int) -> List[ExhaustionEvent]:
        return [e for e in self.exhaustions if e.tick == tick]

    def feedback_at(self, tick: int, owner: int) -> List[CommandFeedback]:
        return [e for e in self.feedback if e.tick == tick and e.owner == owner]


# ─── Build Order ──────────────────────────────────────────────────────────────


class ProductionGoal(BaseModel):
    """One step of the build order: have at least ``count`` of ``unit_type``."""

    unit_type: UnitType = Field(..., description="Unit or structure to produce")
    count: int = Field(default=1, ge=1, description="Units of this type that must exist to advance")
