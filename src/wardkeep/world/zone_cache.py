"""Per-tick territory snapshots.

The allocation engine only ever reads territories through a snapshot: one
consistent view per tick of structures grouped by category, friendly units,
hostile units and the controlling facility's level.  Structure grouping is
semi-static and reused for ``structures_ttl`` ticks; unit lists are rebuilt
every tick because threat must never be stale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

from wardkeep.world.objects import Structure, StructureCategory, Unit
from wardkeep.world.territory import World

STRUCTURES_TTL = 25


@dataclass(slots=True, frozen=True)
class ZoneSnapshot:
    name: str
    tick: int
    controller_level: int
    owner: Optional[str]
    claimed: bool
    structures_by_category: Mapping[StructureCategory, Sequence[Structure]] = field(default_factory=dict)
    friendly_units: Sequence[Unit] = ()
    hostile_units: Sequence[Unit] = ()

    def structures(self, category: StructureCategory) -> Sequence[Structure]:
        return self.structures_by_category.get(category, ())


@dataclass(slots=True)
class _GroupedStructures:
    refreshed_tick: int
    by_category: Dict[StructureCategory, list[Structure]]


def group_structures(structures: Sequence[Structure]) -> Dict[StructureCategory, list[Structure]]:
    grouped: Dict[StructureCategory, list[Structure]] = {}
    for structure in structures:
        grouped.setdefault(structure.category, []).append(structure)
    return grouped


class ZoneStateCache:
    """Reference snapshot provider backed by an in-memory :class:`World`."""

    def __init__(self, world: World, *, structures_ttl: int = STRUCTURES_TTL) -> None:
        self.world = world
        self.structures_ttl = max(1, int(structures_ttl))
        self._structures: Dict[str, _GroupedStructures] = {}
        self._snapshots: Dict[str, ZoneSnapshot] = {}
        self._snapshot_tick: Optional[int] = None
        self.builds = 0

    def _ensure_tick(self) -> None:
        if self._snapshot_tick != self.world.tick:
            self._snapshots = {}
            self._snapshot_tick = self.world.tick

    def _grouped(self, name: str) -> Dict[StructureCategory, list[Structure]]:
        tick = self.world.tick
        cached = self._structures.get(name)
        if cached is not None and tick - cached.refreshed_tick < self.structures_ttl:
            return cached.by_category
        grouped = group_structures(self.world.territories[name].structures)
        self._structures[name] = _GroupedStructures(refreshed_tick=tick, by_category=grouped)
        return grouped

    def get_snapshot(self, name: str) -> Optional[ZoneSnapshot]:
        self._ensure_tick()
        cached = self._snapshots.get(name)
        if cached is not None:
            return cached

        territory = self.world.territories.get(name)
        if territory is None:
            self._structures.pop(name, None)
            return None
        player = self.world.player
        friendly = [u for u in territory.units if u.owner == player]
        if territory.owner != player and not friendly:
            return None

        hostile = [u for u in territory.units if u.owner is not None and u.owner != player]
        snapshot = ZoneSnapshot(
            name=name,
            tick=self.world.tick,
            controller_level=territory.controller_level,
            owner=territory.owner,
            claimed=territory.claimed and territory.owner == player,
            structures_by_category=self._grouped(name),
            friendly_units=tuple(friendly),
            hostile_units=tuple(hostile),
        )
        self._snapshots[name] = snapshot
        self.builds += 1
        return snapshot

    def controlled_territories(self) -> list[str]:
        return self.world.controlled_territories()

    def invalidate(self, name: Optional[str] = None) -> None:
        if name is None:
            self._structures.clear()
            self._snapshots.clear()
            return
        self._structures.pop(name, None)
        self._snapshots.pop(name, None)


__all__ = ["STRUCTURES_TTL", "ZoneSnapshot", "ZoneStateCache", "group_structures"]
