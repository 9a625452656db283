"""Allocation tuning constants."""

from __future__ import annotations

from dataclasses import dataclass

TERRITORY_LIST_INTERVAL_TICKS: int = 100
TURRET_POOL_INTERVAL_TICKS: int = 100
ENERGY_SOURCE_INTERVAL_TICKS: int = 3
HEAL_SCAN_INTERVAL_TICKS: int = 5
REPAIR_SCAN_INTERVAL_TICKS: int = 20
ADVISORY_INTERVAL_TICKS: int = 50
GC_INTERVAL_TICKS: int = 50

SINGLE_TURRET_MIN_ENERGY: int = 100
POOL_MIN_ENERGY: int = 300
MIN_ACTION_ENERGY: int = 100
ACTION_ENERGY_COST: int = 10

HEAL_SELECT_RATIO: float = 0.9
HEAL_RELEASE_RATIO: float = 0.95

ROTATION_CAP: int = 1_000_000
REPAIR_NOMINAL_INCREMENT: int = 600
CONTAINER_DAMAGE_SKIP: float = 0.25
HAULER_ROLES: tuple[str, ...] = ("hauler",)


@dataclass(slots=True)
class AllocationConfig:
    territory_list_interval: int = TERRITORY_LIST_INTERVAL_TICKS
    turret_pool_interval: int = TURRET_POOL_INTERVAL_TICKS
    energy_source_interval: int = ENERGY_SOURCE_INTERVAL_TICKS
    single_turret_min_energy: int = SINGLE_TURRET_MIN_ENERGY
    pool_min_energy: int = POOL_MIN_ENERGY
    min_action_energy: int = MIN_ACTION_ENERGY
    action_energy_cost: int = ACTION_ENERGY_COST
    heal_scan_interval: int = HEAL_SCAN_INTERVAL_TICKS
    heal_select_ratio: float = HEAL_SELECT_RATIO
    heal_release_ratio: float = HEAL_RELEASE_RATIO
    repair_scan_interval: int = REPAIR_SCAN_INTERVAL_TICKS
    advisory_interval: int = ADVISORY_INTERVAL_TICKS
    rotation_cap: int = ROTATION_CAP
    repair_nominal_increment: int = REPAIR_NOMINAL_INCREMENT
    container_damage_skip: float = CONTAINER_DAMAGE_SKIP
    hauler_roles: tuple[str, ...] = HAULER_ROLES
    gc_interval: int = GC_INTERVAL_TICKS

    def min_source_energy(self, turret_count: int) -> int:
        # Single-turret pools act on less energy.
        if turret_count == 1:
            return self.single_turret_min_energy
        return self.pool_min_energy


__all__ = [
    "ACTION_ENERGY_COST",
    "ADVISORY_INTERVAL_TICKS",
    "AllocationConfig",
    "CONTAINER_DAMAGE_SKIP",
    "ENERGY_SOURCE_INTERVAL_TICKS",
    "GC_INTERVAL_TICKS",
    "HAULER_ROLES",
    "HEAL_RELEASE_RATIO",
    "HEAL_SCAN_INTERVAL_TICKS",
    "HEAL_SELECT_RATIO",
    "MIN_ACTION_ENERGY",
    "POOL_MIN_ENERGY",
    "REPAIR_NOMINAL_INCREMENT",
    "REPAIR_SCAN_INTERVAL_TICKS",
    "ROTATION_CAP",
    "SINGLE_TURRET_MIN_ENERGY",
    "TERRITORY_LIST_INTERVAL_TICKS",
    "TURRET_POOL_INTERVAL_TICKS",
]
