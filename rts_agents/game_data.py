"""Static unit template data for the default SEPIA-style ruleset.

Costs and producers mirror the stock templates shipped with the simulation,
so the build order can be planned without querying the host.
"""

from typing import Dict, List, Optional, Tuple

from rts_agents.models import ProductionGoal, UnitType


# ─── Unit Templates ───────────────────────────────────────────────────────────

UNIT_TEMPLATES: Dict[UnitType, dict] = {
    UnitType.PEASANT: {
        "gold_cost": 400,
        "wood_cost": 0,
        "produced_by": UnitType.TOWN_HALL,
        "structure": False,
        "combat": False,
        "description": "Worker. Gathers gold and wood and constructs structures.",
    },
    UnitType.TOWN_HALL: {
        "gold_cost": 1200,
        "wood_cost": 800,
        "produced_by": UnitType.PEASANT,
        "structure": True,
        "combat": False,
        "description": "Primary base. Trains peasants and accepts resource deposits.",
    },
    UnitType.FARM: {
        "gold_cost": 500,
        "wood_cost": 250,
        "produced_by": UnitType.PEASANT,
        "structure": True,
        "combat": False,
        "description": "Raises the supply cap.",
    },
    UnitType.BARRACKS: {
        "gold_cost": 700,
        "wood_cost": 400,
        "produced_by": UnitType.PEASANT,
        "structure": True,
        "combat": False,
        "description": "Trains footmen.",
    },
    UnitType.FOOTMAN: {
        "gold_cost": 600,
        "wood_cost": 0,
        "produced_by": UnitType.BARRACKS,
        "structure": False,
        "combat": True,
        "description": "Basic melee infantry.",
    },
}

_missing = set(UnitType) - set(UNIT_TEMPLATES)
if _missing:
    raise RuntimeError(f"Unit templates missing for: {sorted(t.value for t in _missing)}")


# ─── Build Order Defaults ─────────────────────────────────────────────────────

# Two peasants on top of the single starting peasant, then the tech path to
# footmen.
DEFAULT_BUILD_ORDER: List[ProductionGoal] = [
    ProductionGoal(unit_type=UnitType.PEASANT, count=3),
    ProductionGoal(unit_type=UnitType.FARM, count=1),
    ProductionGoal(unit_type=UnitType.BARRACKS, count=1),
    ProductionGoal(unit_type=UnitType.FOOTMAN, count=2),
]

# Build site offsets from the primary town hall.
DEFAULT_PLACEMENT_OFFSETS: Dict[UnitType, Tuple[int, int]] = {
    UnitType.FARM: (3, 0),
    UnitType.BARRACKS: (-3, 0),
}

GATHER_CAPACITY = 100


# ─── Lookup Helpers ───────────────────────────────────────────────────────────


def get_template(unit_type: UnitType) -> dict:
    """Full template record, including its one-line description."""
    return UNIT_TEMPLATES[unit_type]


def get_cost(unit_type: UnitType) -> Tuple[int, int]:
    """Return ``(gold, wood)`` cost of a template."""
    t = UNIT_TEMPLATES[unit_type]
    return t["gold_cost"], t["wood_cost"]


def get_producer(unit_type: UnitType) -> Optional[UnitType]:
    return UNIT_TEMPLATES[unit_type].get("produced_by")


def is_structure(unit_type: UnitType) -> bool:
    return UNIT_TEMPLATES[unit_type]["structure"]


def is_combat(unit_type: UnitType) -> bool:
    return UNIT_TEMPLATES[unit_type]["combat"]
