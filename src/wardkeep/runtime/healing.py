"""Heal target cache and selector.

Validation is two-tier.  A cached target is re-checked every tick with a
single lookup; the full scan over friendly units only runs when the cache is
empty and the scan throttle allows it (or the cached target was just
dropped).  A unit is picked below ``heal_select_ratio`` and released at
``heal_release_ratio``, so a unit hovering near one boundary does not flip
in and out of the cache.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from wardkeep.runtime.caches import AllocationCacheState, CacheEntry, resolve_live
from wardkeep.runtime.config import AllocationConfig
from wardkeep.world.objects import Unit

logger = logging.getLogger(__name__)


def scan_heal_candidates(units: Sequence[Unit], *, select_ratio: float, exclude_id: Optional[str] = None) -> Optional[Unit]:
    best: Optional[Unit] = None
    best_ratio = select_ratio
    for unit in units:
        if unit.hits >= unit.hits_max or unit.unit_id == exclude_id:
            continue
        ratio = unit.health_ratio
        if ratio < best_ratio:
            best_ratio = ratio
            best = unit
    return best


def _cached_target(state: AllocationCacheState, resolver: Any, cfg: AllocationConfig) -> tuple[Optional[Unit], bool]:
    """Return the still-valid cached target and whether a cached id was dropped."""

    entry = state.heal_target
    if entry is None or not entry.value:
        return None, False
    unit = resolve_live(resolver, entry.value)
    if isinstance(unit, Unit) and unit.hits < unit.hits_max * cfg.heal_release_ratio:
        return unit, False
    entry.value = None
    return None, True


def select_heal_target(
    friendly_units: Sequence[Unit],
    state: AllocationCacheState,
    resolver: Any,
    *,
    tick: int,
    cfg: AllocationConfig,
) -> Optional[Unit]:
    target, dropped = _cached_target(state, resolver, cfg)
    if target is not None:
        return target

    entry = state.heal_target
    due = entry is None or tick - entry.refreshed_tick >= cfg.heal_scan_interval
    if not (due or dropped or state.heal_force_rescan):
        return None

    target = scan_heal_candidates(friendly_units, select_ratio=cfg.heal_select_ratio, exclude_id=state.heal_rejected_id)
    state.heal_target = CacheEntry(value=target.unit_id if target else None, refreshed_tick=tick)
    state.heal_force_rescan = False
    state.heal_rejected_id = None
    if target is not None:
        logger.debug(
            "%s: heal target %s at %.2f",
            state.territory,
            target.unit_id,
            target.health_ratio,
            extra={"tick": tick},
        )
    return target


def invalidate_heal_target(state: AllocationCacheState, target_id: Optional[str] = None) -> None:
    if state.heal_target is not None:
        state.heal_target.value = None
    state.heal_rejected_id = target_id
    state.heal_force_rescan = True


__all__ = ["invalidate_heal_target", "scan_heal_candidates", "select_heal_target"]
