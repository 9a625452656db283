"""Maintenance advisories: is there haulage staff to keep barriers topped up?

The advisory is cheap to call but the allocation engine still polls it on its
own cadence and caches the answer in the persisted repair memory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from wardkeep.world.objects import StructureCategory
from wardkeep.world.zone_cache import ZoneStateCache

FULL_FACILITY_LEVEL = 8
TURRET_LOW_ENERGY = 500
TERMINAL_LOW_ENERGY = 5_000


@dataclass(slots=True)
class StaticAdvisory:
    """Fixed answers per territory, with a default for the rest."""

    default: bool = False
    by_territory: Dict[str, bool] = field(default_factory=dict)
    calls: int = 0

    def haulage_coverage_exists(self, territory: str) -> bool:
        self.calls += 1
        return self.by_territory.get(territory, self.default)


class SupplierAdvisory:
    """Reports coverage whenever the territory would justify dedicated haulers.

    A territory below full facility level always qualifies.  At full level it
    qualifies when a non-hauler friendly unit is present, when every turret is
    low on energy, or when a terminal is running dry.
    """

    def __init__(self, zone_cache: ZoneStateCache, *, hauler_roles: tuple[str, ...] = ("hauler",)) -> None:
        self.zone_cache = zone_cache
        self.hauler_roles = tuple(hauler_roles)

    def haulage_coverage_exists(self, territory: str) -> bool:
        snapshot = self.zone_cache.get_snapshot(territory)
        if snapshot is None or snapshot.owner != self.zone_cache.world.player:
            return False
        if snapshot.controller_level != FULL_FACILITY_LEVEL:
            return True

        if any(unit.role not in self.hauler_roles for unit in snapshot.friendly_units):
            return True

        turrets = snapshot.structures(StructureCategory.TURRET)
        if turrets and all(_energy(t) < TURRET_LOW_ENERGY for t in turrets):
            return True

        for terminal in snapshot.structures(StructureCategory.TERMINAL):
            if _energy(terminal) < TERMINAL_LOW_ENERGY:
                return True
        return False


def _energy(structure: Any) -> int:
    return int(getattr(structure, "energy", 0) or 0)


__all__ = [
    "FULL_FACILITY_LEVEL",
    "StaticAdvisory",
    "SupplierAdvisory",
    "TERMINAL_LOW_ENERGY",
    "TURRET_LOW_ENERGY",
]
