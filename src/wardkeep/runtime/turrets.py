from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from wardkeep.runtime.caches import AllocationCacheState, CacheEntry, resolve_live
from wardkeep.runtime.config import AllocationConfig
from wardkeep.world.objects import StructureCategory, Turret
from wardkeep.world.zone_cache import ZoneSnapshot

logger = logging.getLogger(__name__)


def _enumerate_turret_ids(snapshot: ZoneSnapshot, player: str) -> tuple[str, ...]:
    ids = []
    for structure in snapshot.structures(StructureCategory.TURRET):
        if structure.owner == player:
            ids.append(structure.structure_id)
    return tuple(ids)


def resolve_turrets(
    snapshot: ZoneSnapshot,
    state: AllocationCacheState,
    resolver: Any,
    *,
    tick: int,
    cfg: AllocationConfig,
    player: str,
) -> list[Turret]:
    """Live turrets of the territory owned by ``player``; empty means nothing can act."""

    entry = state.turret_pool
    if entry is None or not entry.fresh(tick, cfg.turret_pool_interval):
        entry = CacheEntry(value=_enumerate_turret_ids(snapshot, player), refreshed_tick=tick)
        state.turret_pool = entry
        logger.debug("%s: turret pool refreshed (%d)", snapshot.name, len(entry.value), extra={"tick": tick})

    turrets: list[Turret] = []
    for turret_id in entry.value:
        turret = resolve_live(resolver, turret_id)
        if isinstance(turret, Turret) and turret.owner == player:
            turrets.append(turret)
    return turrets


def select_energy_source(
    turrets: Sequence[Turret],
    state: AllocationCacheState,
    resolver: Any,
    *,
    tick: int,
    cfg: AllocationConfig,
) -> Optional[Turret]:
    """Pick a turret holding enough energy to act now.

    A cached choice is kept for ``energy_source_interval`` ticks while it still
    clears the threshold.
    """

    if not turrets:
        return None
    threshold = cfg.min_source_energy(len(turrets))

    entry = state.energy_source
    if entry is not None and entry.value and entry.fresh(tick, cfg.energy_source_interval):
        cached = resolve_live(resolver, entry.value)
        if isinstance(cached, Turret) and cached.energy >= threshold:
            return cached

    best: Optional[Turret] = None
    best_energy = 0
    for turret in turrets:
        if turret.energy > best_energy and turret.energy > threshold:
            best = turret
            best_energy = turret.energy
    state.energy_source = CacheEntry(value=best.structure_id if best else None, refreshed_tick=tick)
    return best


__all__ = ["resolve_turrets", "select_energy_source"]
