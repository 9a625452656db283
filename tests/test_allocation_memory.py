from __future__ import annotations

import json

import pytest

from wardkeep.runtime.advisory import StaticAdvisory
from wardkeep.runtime.allocation import AllocationEngine, AllocationMode
from wardkeep.runtime.caches import RepairMemory
from wardkeep.runtime.classifier import WhitelistClassifier
from wardkeep.runtime.snapshot import (
    dump_memory,
    load_memory,
    memory_from_dict,
    memory_signature,
    read_memory,
    save_memory,
)
from wardkeep.world.objects import Structure, StructureCategory, Turret
from wardkeep.world.territory import Territory, World
from wardkeep.world.zone_cache import ZoneStateCache

PLAYER = "me"


def _world_with_road(tick: int = 1000) -> World:
    world = World(player=PLAYER, tick=tick)
    world.add_territory(Territory(name="W1", controller_level=5, owner=PLAYER))
    world.add_structure("W1", Turret(structure_id="turret:0", owner=PLAYER, hits=3000, hits_max=3000, energy=900))
    world.add_structure("W1", Structure(structure_id="road:1", category=StructureCategory.ROAD, hits=500, hits_max=5_000))
    world.add_structure("W1", Structure(structure_id="road:2", category=StructureCategory.ROAD, hits=600, hits_max=5_000))
    return world


def _engine(world: World) -> AllocationEngine:
    return AllocationEngine(world, ZoneStateCache(world), WhitelistClassifier(player=PLAYER), StaticAdvisory(default=True))


def test_dump_uses_logical_keys() -> None:
    payload = dump_memory({"W1": RepairMemory(repair_target_id="road:1", integrity_repaired=600, last_repair_scan_tick=10)})

    entry = payload["territories"]["W1"]
    assert entry["repairTargetId"] == "road:1"
    assert entry["integrityRepairedThisCycle"] == 600
    assert entry["lastRepairScanTick"] == 10
    assert entry["lastAdvisoryCheckTick"] is None
    assert entry["haulageCoverageCached"] is False
    assert entry["rejectedTargetId"] is None
    json.dumps(payload)


def test_partial_entries_load_as_defaults() -> None:
    assert memory_from_dict(None) == RepairMemory()
    assert memory_from_dict({"repairTargetId": "wall:1"}) == RepairMemory(repair_target_id="wall:1")


def test_unknown_schema_is_rejected() -> None:
    with pytest.raises(ValueError):
        load_memory({"schema_version": "allocation_memory_v0", "territories": {}})


@pytest.mark.parametrize("filename", ["memory.json", "memory.json.gz"])
def test_file_roundtrip(tmp_path, filename: str) -> None:
    memories = {
        "W1": RepairMemory(repair_target_id="road:1", integrity_repaired=1_800, last_repair_scan_tick=980),
        "W2": RepairMemory(haulage_coverage_cached=True, last_advisory_check_tick=950, force_rescan=True),
    }

    path = save_memory(tmp_path / filename, memories)

    assert read_memory(path) == memories
    assert memory_signature(read_memory(path)) == memory_signature(memories)


def test_missing_file_reads_as_empty(tmp_path) -> None:
    assert read_memory(tmp_path / "absent.json") == {}


def test_restored_engine_continues_without_rescan(tmp_path) -> None:
    world = _world_with_road()
    engine = _engine(world)
    assert engine.run_allocation()["W1"].mode is AllocationMode.REPAIR
    path = save_memory(tmp_path / "memory.json", engine.memory())

    restored_world = _world_with_road(tick=1005)
    restored = _engine(restored_world)
    restored.load_memory(read_memory(path))
    report = restored.run_allocation()["W1"]

    assert report.actions[0].target_id == "road:1"
    assert restored.metrics.get("repair.scans") == 0.0
    assert restored.states["W1"].repair.integrity_repaired == 1_200


def test_identical_runs_share_a_signature() -> None:
    signatures = []
    for _ in range(2):
        world = _world_with_road()
        engine = _engine(world)
        for _ in range(5):
            engine.run_allocation()
            world.advance()
        signatures.append((memory_signature(engine.memory()), engine.metrics.signature()))

    assert signatures[0] == signatures[1]
    assert '"allocation.territories":1' in signatures[0][1]
