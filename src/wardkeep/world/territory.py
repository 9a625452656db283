"""In-memory acting substrate: territories, object lookup and tick advance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from wardkeep.world.objects import IntentKind, Structure, TURRET_ACTION_COST, Turret, Unit

ATTACK_POWER = 600
HEAL_POWER = 400
REPAIR_POWER = 800


@dataclass(slots=True)
class Territory:
    name: str
    controller_level: int = 0
    owner: Optional[str] = None
    claimed: bool = True
    structures: list[Structure] = field(default_factory=list)
    units: list[Unit] = field(default_factory=list)


class World:
    """Holds every territory and resolves object ids for the current tick."""

    def __init__(self, player: str, *, tick: int = 0) -> None:
        self.player = player
        self.tick = tick
        self.territories: Dict[str, Territory] = {}
        self._objects: Dict[str, Structure | Unit] = {}

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------
    def add_territory(self, territory: Territory) -> Territory:
        self.territories[territory.name] = territory
        for structure in territory.structures:
            structure.territory = territory.name
            self._objects[structure.structure_id] = structure
        for unit in territory.units:
            unit.territory = territory.name
            self._objects[unit.unit_id] = unit
        return territory

    def add_structure(self, territory_name: str, structure: Structure) -> Structure:
        territory = self.territories[territory_name]
        structure.territory = territory_name
        territory.structures.append(structure)
        self._objects[structure.structure_id] = structure
        return structure

    def add_unit(self, territory_name: str, unit: Unit) -> Unit:
        territory = self.territories[territory_name]
        unit.territory = territory_name
        territory.units.append(unit)
        self._objects[unit.unit_id] = unit
        return unit

    def remove(self, object_id: str) -> None:
        obj = self._objects.pop(object_id, None)
        if obj is None:
            return
        territory = self.territories.get(obj.territory)
        if territory is None:
            return
        if isinstance(obj, Unit):
            territory.units = [u for u in territory.units if u.unit_id != object_id]
        else:
            territory.structures = [s for s in territory.structures if s.structure_id != object_id]

    def drop_territory(self, name: str) -> None:
        territory = self.territories.pop(name, None)
        if territory is None:
            return
        for structure in territory.structures:
            self._objects.pop(structure.structure_id, None)
        for unit in territory.units:
            self._objects.pop(unit.unit_id, None)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def get_object(self, object_id: Optional[str]) -> Optional[Structure | Unit]:
        if not object_id:
            return None
        return self._objects.get(object_id)

    def controlled_territories(self) -> list[str]:
        return [name for name, t in self.territories.items() if t.owner == self.player]

    def turrets(self) -> Iterator[Turret]:
        for obj in self._objects.values():
            if isinstance(obj, Turret):
                yield obj

    # ------------------------------------------------------------------
    # Tick boundary
    # ------------------------------------------------------------------
    def advance(self, ticks: int = 1) -> None:
        """Apply queued turret intents, then move the clock forward."""

        for _ in range(max(0, int(ticks))):
            self._apply_intents()
            self.tick += 1

    def _apply_intents(self) -> None:
        for turret in sorted(self.turrets(), key=lambda t: t.structure_id):
            if not turret.intents:
                continue
            # The last intent of the tick wins.
            intent = turret.intents[-1]
            turret.intents.clear()
            target = self._objects.get(intent.target_id)
            if target is None or turret.energy < TURRET_ACTION_COST:
                continue
            turret.energy -= TURRET_ACTION_COST
            if intent.kind is IntentKind.ATTACK:
                target.hits = max(0, target.hits - ATTACK_POWER)
                if target.hits == 0:
                    self.remove(intent.target_id)
            elif intent.kind is IntentKind.HEAL:
                target.hits = min(target.hits_max, target.hits + HEAL_POWER)
            elif intent.kind is IntentKind.REPAIR:
                target.hits = min(target.hits_max, target.hits + REPAIR_POWER)


__all__ = ["ATTACK_POWER", "HEAL_POWER", "REPAIR_POWER", "Territory", "World"]
