"""Repair target cache and the category-ordered repair scan.

Categories are scanned tier by tier.  Every named category is its own tier;
ramparts and walls share the last tier and compete on raw integrity.
Within a tier the most damaged eligible candidate wins, ties going to the
one found first.  The first tier holding any eligible candidate ends the
scan.
"""

from __future__ import annotations

import logging
from typing import Any, Collection, Optional, Sequence

from wardkeep.runtime.caches import RepairMemory, resolve_live
from wardkeep.runtime.config import AllocationConfig
from wardkeep.world.objects import Structure, StructureCategory, Unit, barrier_ceiling
from wardkeep.world.zone_cache import ZoneSnapshot

logger = logging.getLogger(__name__)

REPAIR_TIERS: tuple[tuple[StructureCategory, ...], ...] = (
    (StructureCategory.CONTAINER,),
    (StructureCategory.ROAD,),
    (StructureCategory.EXTENSION,),
    (StructureCategory.SPAWN,),
    (StructureCategory.STORAGE,),
    (StructureCategory.LINK,),
    (StructureCategory.TURRET,),
    (StructureCategory.LAB,),
    (StructureCategory.TERMINAL,),
    (StructureCategory.RAMPART, StructureCategory.WALL),
)
BARRIER_TIER = len(REPAIR_TIERS) - 1


def hauler_present(units: Sequence[Unit], cfg: AllocationConfig) -> bool:
    return any(unit.role in cfg.hauler_roles for unit in units)


def _candidate_value(
    structure: Structure,
    *,
    ceiling: int,
    hauler: bool,
    cfg: AllocationConfig,
) -> Optional[float]:
    """Damage score of an eligible candidate (lower is worse), or None."""

    if structure.hits >= structure.hits_max:
        return None
    if structure.is_barrier:
        if structure.hits >= ceiling:
            return None
        return float(structure.hits)
    ratio = structure.integrity_ratio
    if structure.category == StructureCategory.CONTAINER and not hauler:
        if 1.0 - ratio >= cfg.container_damage_skip:
            return None
    return ratio


def scan_repair_candidates(
    snapshot: ZoneSnapshot,
    *,
    allow_barriers: bool,
    hauler: bool,
    cfg: AllocationConfig,
    exclude: Collection[str] = (),
) -> Optional[Structure]:
    ceiling = barrier_ceiling(snapshot.controller_level)
    for tier_index, tier in enumerate(REPAIR_TIERS):
        if tier_index == BARRIER_TIER and not allow_barriers:
            break
        best: Optional[Structure] = None
        best_value = float("inf")
        for category in tier:
            for structure in snapshot.structures(category):
                if structure.structure_id in exclude:
                    continue
                value = _candidate_value(structure, ceiling=ceiling, hauler=hauler, cfg=cfg)
                if value is not None and value < best_value:
                    best = structure
                    best_value = value
        # First tier with a candidate wins.
        if best is not None:
            return best
    return None


def validate_repair_target(
    memory: RepairMemory,
    resolver: Any,
    *,
    controller_level: int,
    cfg: AllocationConfig,
) -> Optional[Structure]:
    target_id = memory.repair_target_id
    if not target_id:
        return None
    target = resolve_live(resolver, target_id)
    if not isinstance(target, Structure):
        memory.clear_target()
        return None
    if memory.integrity_repaired >= cfg.rotation_cap:
        memory.rotated_out_id = target_id
        memory.clear_target()
        return None
    if target.hits >= target.hits_max:
        memory.clear_target()
        return None
    if target.is_barrier and target.hits >= barrier_ceiling(controller_level):
        memory.clear_target()
        return None
    return target


def refresh_advisory(memory: RepairMemory, advisory: Any, territory: str, *, tick: int, cfg: AllocationConfig) -> bool:
    last = memory.last_advisory_check_tick
    if last is None or tick - last >= cfg.advisory_interval:
        memory.haulage_coverage_cached = bool(advisory.haulage_coverage_exists(territory))
        memory.last_advisory_check_tick = tick
    return memory.haulage_coverage_cached


def rescan_due(memory: RepairMemory, *, tick: int, cfg: AllocationConfig) -> bool:
    if memory.force_rescan or memory.last_repair_scan_tick is None:
        return True
    return tick - memory.last_repair_scan_tick >= cfg.repair_scan_interval


def select_repair_target(
    snapshot: ZoneSnapshot,
    memory: RepairMemory,
    resolver: Any,
    advisory: Any,
    *,
    tick: int,
    cfg: AllocationConfig,
) -> Optional[Structure]:
    target = validate_repair_target(memory, resolver, controller_level=snapshot.controller_level, cfg=cfg)
    if target is not None:
        return target
    if not rescan_due(memory, tick=tick, cfg=cfg):
        return None

    allow_barriers = refresh_advisory(memory, advisory, snapshot.name, tick=tick, cfg=cfg)
    target = scan_repair_candidates(
        snapshot,
        allow_barriers=allow_barriers,
        hauler=hauler_present(snapshot.friendly_units, cfg),
        cfg=cfg,
        exclude=[i for i in (memory.rotated_out_id, memory.rejected_id) if i],
    )
    memory.repair_target_id = target.structure_id if target else None
    memory.integrity_repaired = 0
    memory.last_repair_scan_tick = tick
    memory.rotated_out_id = None
    memory.rejected_id = None
    memory.force_rescan = False
    logger.debug(
        "%s: repair scan picked %s",
        snapshot.name,
        target.structure_id if target else "nothing",
        extra={"tick": tick},
    )
    return target


def record_repair(memory: RepairMemory, cfg: AllocationConfig) -> int:
    """Count one repair action toward the rotation cap."""

    memory.integrity_repaired += cfg.repair_nominal_increment
    return memory.integrity_repaired


def invalidate_repair_target(memory: RepairMemory, target_id: Optional[str] = None) -> None:
    """Drop a target the turret refused and rescan without it next tick."""

    memory.clear_target()
    memory.rejected_id = target_id
    memory.force_rescan = True


__all__ = [
    "BARRIER_TIER",
    "REPAIR_TIERS",
    "hauler_present",
    "invalidate_repair_target",
    "record_repair",
    "refresh_advisory",
    "rescan_due",
    "scan_repair_candidates",
    "select_repair_target",
    "validate_repair_target",
]
