"""Wardkeep: defense and maintenance allocation for territory turrets."""

from .log import configure_logging
from .runtime import (
    AllocationConfig,
    AllocationEngine,
    AllocationMode,
    RepairMemory,
    StaticAdvisory,
    SupplierAdvisory,
    TerritoryReport,
    WhitelistClassifier,
)
from .world.objects import (
    ActionResult,
    BARRIER_CEILING_BY_LEVEL,
    Structure,
    StructureCategory,
    Turret,
    Unit,
    barrier_ceiling,
)
from .world.territory import Territory, World
from .world.zone_cache import ZoneSnapshot, ZoneStateCache

__all__ = [
    "ActionResult",
    "AllocationConfig",
    "AllocationEngine",
    "AllocationMode",
    "BARRIER_CEILING_BY_LEVEL",
    "RepairMemory",
    "StaticAdvisory",
    "Structure",
    "StructureCategory",
    "SupplierAdvisory",
    "TerritoryReport",
    "Territory",
    "Turret",
    "Unit",
    "WhitelistClassifier",
    "World",
    "ZoneSnapshot",
    "ZoneStateCache",
    "barrier_ceiling",
    "configure_logging",
]
