"""Turret allocation runtime: caches, decision layers and the tick driver."""

from .allocation import ActionRecord, AllocationEngine, AllocationMode, TerritoryReport
from .advisory import StaticAdvisory, SupplierAdvisory
from .caches import AllocationCacheState, CacheEntry, RepairMemory
from .classifier import WhitelistClassifier
from .config import AllocationConfig

__all__ = [
    "ActionRecord",
    "AllocationCacheState",
    "AllocationConfig",
    "AllocationEngine",
    "AllocationMode",
    "CacheEntry",
    "RepairMemory",
    "StaticAdvisory",
    "SupplierAdvisory",
    "TerritoryReport",
    "WhitelistClassifier",
]
