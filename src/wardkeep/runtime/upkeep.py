"""Energy-per-tick estimate of what it costs to offset structure decay."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from wardkeep.world.objects import StructureCategory
from wardkeep.world.zone_cache import ZoneSnapshot

DECAY_ENERGY_PER_TICK: Dict[str, float] = {
    "road_plain": 0.001,
    "road_swamp": 0.005,
    "rampart": 0.030,
    "container_claimed": 0.100,
    "container_unclaimed": 0.500,
}


@dataclass(slots=True)
class UpkeepLine:
    ept: float = 0.0
    count: int = 0


@dataclass(slots=True)
class TerritoryUpkeep:
    total_ept: float = 0.0
    count: int = 0
    types: Dict[str, UpkeepLine] = field(default_factory=dict)

    def add(self, key: str, ept: float) -> None:
        line = self.types.setdefault(key, UpkeepLine())
        line.ept += ept
        line.count += 1
        self.total_ept += ept
        self.count += 1


@dataclass(slots=True)
class UpkeepSummary:
    total_ept: float = 0.0
    territories: Dict[str, TerritoryUpkeep] = field(default_factory=dict)


def _decay_key(snapshot: ZoneSnapshot, structure) -> Optional[str]:
    category = structure.category
    if category == StructureCategory.ROAD:
        return "road_swamp" if structure.terrain == "swamp" else "road_plain"
    if category == StructureCategory.RAMPART:
        if snapshot.owner is not None and structure.owner == snapshot.owner:
            return "rampart"
        return None
    if category == StructureCategory.CONTAINER:
        return "container_claimed" if snapshot.claimed else "container_unclaimed"
    return None


def estimate_upkeep(snapshots: Iterable[ZoneSnapshot]) -> UpkeepSummary:
    summary = UpkeepSummary()
    for snapshot in snapshots:
        for category in (StructureCategory.ROAD, StructureCategory.RAMPART, StructureCategory.CONTAINER):
            for structure in snapshot.structures(category):
                key = _decay_key(snapshot, structure)
                if key is None:
                    continue
                territory = summary.territories.setdefault(snapshot.name, TerritoryUpkeep())
                territory.add(key, DECAY_ENERGY_PER_TICK[key])
                summary.total_ept += DECAY_ENERGY_PER_TICK[key]

    summary.total_ept = round(summary.total_ept, 3)
    for territory in summary.territories.values():
        territory.total_ept = round(territory.total_ept, 3)
        for line in territory.types.values():
            line.ept = round(line.ept, 3)
    return summary


def format_upkeep(summary: UpkeepSummary) -> list[str]:
    lines = [f"[upkeep] Total maintenance: {summary.total_ept} en/tick"]
    ordered = sorted(summary.territories.items(), key=lambda item: (-item[1].total_ept, item[0]))
    for name, territory in ordered:
        lines.append(f"  - {name}: {territory.total_ept} en/tick (structures {territory.count})")
        for key, line in sorted(territory.types.items(), key=lambda item: (-item[1].ept, item[0])):
            lines.append(f"      - {key}: {line.ept} en/tick (count {line.count})")
    return lines


__all__ = [
    "DECAY_ENERGY_PER_TICK",
    "TerritoryUpkeep",
    "UpkeepLine",
    "UpkeepSummary",
    "estimate_upkeep",
    "format_upkeep",
]
