"""Structures, turrets and mobile units living inside a territory.

Every object carries a stable string id.  Callers keep ids across ticks and
resolve them through :meth:`wardkeep.world.territory.World.get_object`
because a direct handle may outlive the object it points at.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class StructureCategory(str, Enum):
    CONTAINER = "container"
    ROAD = "road"
    EXTENSION = "extension"
    SPAWN = "spawn"
    STORAGE = "storage"
    LINK = "link"
    TURRET = "turret"
    LAB = "lab"
    TERMINAL = "terminal"
    RAMPART = "rampart"
    WALL = "wall"
    CONTROLLER = "controller"


BARRIER_CATEGORIES = frozenset({StructureCategory.RAMPART, StructureCategory.WALL})


def coerce_category(raw: object) -> StructureCategory:
    if isinstance(raw, StructureCategory):
        return raw
    if isinstance(raw, str):
        try:
            return StructureCategory(raw.lower())
        except ValueError:
            pass
        try:
            return StructureCategory[raw.upper()]
        except KeyError:
            pass
    raise ValueError(f"Unknown structure category: {raw!r}")


# Facility level:            0  1       2       3        4          5          6           7           8
BARRIER_CEILING_BY_LEVEL = (0, 0, 10_000, 50_000, 200_000, 1_000_000, 5_000_000, 10_000_000, 20_000_000)


def barrier_ceiling(level: int) -> int:
    """Integrity above which walls and ramparts are left alone."""

    if level < 0:
        raise ValueError(f"Facility level must be non-negative: {level!r}")
    if level >= len(BARRIER_CEILING_BY_LEVEL):
        return 0
    return BARRIER_CEILING_BY_LEVEL[level]


class ActionResult(Enum):
    OK = "ok"
    NOT_IN_RANGE = "not_in_range"
    NOT_ENOUGH_ENERGY = "not_enough_energy"
    INVALID_TARGET = "invalid_target"


class IntentKind(str, Enum):
    ATTACK = "attack"
    HEAL = "heal"
    REPAIR = "repair"


@dataclass(slots=True, frozen=True)
class TurretIntent:
    kind: IntentKind
    target_id: str


@dataclass(slots=True)
class Structure:
    structure_id: str
    category: StructureCategory
    hits: int = 0
    hits_max: int = 0
    owner: Optional[str] = None
    territory: str = ""
    energy: int = 0
    energy_capacity: int = 0
    terrain: str = "plain"
    untargetable: bool = False

    def __post_init__(self) -> None:
        self.category = coerce_category(self.category)

    @property
    def is_barrier(self) -> bool:
        return self.category in BARRIER_CATEGORIES

    @property
    def integrity_ratio(self) -> float:
        if self.hits_max <= 0:
            return 1.0
        return self.hits / self.hits_max


@dataclass(slots=True)
class Unit:
    unit_id: str
    owner: Optional[str] = None
    hits: int = 100
    hits_max: int = 100
    territory: str = ""
    role: Optional[str] = None
    heal_parts: int = 0
    untargetable: bool = False

    @property
    def health_ratio(self) -> float:
        if self.hits_max <= 0:
            return 1.0
        return self.hits / self.hits_max


# Per-action cost charged by the substrate; mirrors AllocationConfig.action_energy_cost.
TURRET_ACTION_COST = 10


def _target_valid(target: object) -> bool:
    if target is None or getattr(target, "untargetable", False):
        return False
    return getattr(target, "hits", 0) > 0


@dataclass(slots=True)
class Turret(Structure):
    """Immobile structure that spends its own energy on one action per tick."""

    category: StructureCategory = StructureCategory.TURRET
    energy_capacity: int = 1_000
    intents: list[TurretIntent] = field(default_factory=list)

    def _issue(self, kind: IntentKind, target: Structure | Unit | None) -> ActionResult:
        if not _target_valid(target):
            return ActionResult.INVALID_TARGET
        if self.energy < TURRET_ACTION_COST:
            return ActionResult.NOT_ENOUGH_ENERGY
        if getattr(target, "territory", "") != self.territory:
            return ActionResult.NOT_IN_RANGE
        target_id = target.unit_id if isinstance(target, Unit) else target.structure_id
        self.intents.append(TurretIntent(kind=kind, target_id=target_id))
        return ActionResult.OK

    def attack(self, target: Structure | Unit | None) -> ActionResult:
        return self._issue(IntentKind.ATTACK, target)

    def heal(self, target: Unit | None) -> ActionResult:
        return self._issue(IntentKind.HEAL, target)

    def repair(self, target: Structure | None) -> ActionResult:
        if target is not None and target.hits >= target.hits_max:
            return ActionResult.INVALID_TARGET
        return self._issue(IntentKind.REPAIR, target)


__all__ = [
    "ActionResult",
    "BARRIER_CATEGORIES",
    "BARRIER_CEILING_BY_LEVEL",
    "IntentKind",
    "Structure",
    "StructureCategory",
    "TURRET_ACTION_COST",
    "Turret",
    "TurretIntent",
    "Unit",
    "barrier_ceiling",
    "coerce_category",
]
