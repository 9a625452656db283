"""Per-territory allocation state.

Heap caches (turret pool, energy source, heal target) are cheap to lose and
are rebuilt on demand.  :class:`RepairMemory` is the persisted part and is
serialized by :mod:`wardkeep.runtime.snapshot`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(slots=True)
class CacheEntry:
    value: Any
    refreshed_tick: int

    def fresh(self, tick: int, ttl: int) -> bool:
        return tick - self.refreshed_tick < ttl


@dataclass(slots=True)
class RepairMemory:
    repair_target_id: Optional[str] = None
    integrity_repaired: int = 0
    last_repair_scan_tick: Optional[int] = None
    last_advisory_check_tick: Optional[int] = None
    haulage_coverage_cached: bool = False
    rotated_out_id: Optional[str] = None
    rejected_id: Optional[str] = None
    force_rescan: bool = False

    def clear_target(self) -> None:
        self.repair_target_id = None
        self.integrity_repaired = 0


@dataclass(slots=True)
class AllocationCacheState:
    territory: str
    turret_pool: Optional[CacheEntry] = None
    energy_source: Optional[CacheEntry] = None
    # value is the cached target id, refreshed_tick the last heal scan
    heal_target: Optional[CacheEntry] = None
    heal_force_rescan: bool = False
    heal_rejected_id: Optional[str] = None
    repair: RepairMemory = field(default_factory=RepairMemory)


def ensure_cache_state(states: dict[str, AllocationCacheState], territory: str) -> AllocationCacheState:
    state = states.get(territory)
    if not isinstance(state, AllocationCacheState):
        state = AllocationCacheState(territory=territory)
        states[territory] = state
    return state


def resolve_live(resolver: Any, object_id: Optional[str]) -> Any:
    if not object_id:
        return None
    return resolver.get_object(object_id)


__all__ = [
    "AllocationCacheState",
    "CacheEntry",
    "RepairMemory",
    "ensure_cache_state",
    "resolve_live",
]
