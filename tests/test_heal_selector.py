from __future__ import annotations

from wardkeep.runtime.advisory import StaticAdvisory
from wardkeep.runtime.allocation import AllocationEngine, AllocationMode
from wardkeep.runtime.caches import AllocationCacheState
from wardkeep.runtime.classifier import WhitelistClassifier
from wardkeep.runtime.config import AllocationConfig
from wardkeep.runtime.healing import scan_heal_candidates, select_heal_target
from wardkeep.world.objects import ActionResult, Turret, Unit
from wardkeep.world.territory import Territory, World
from wardkeep.world.zone_cache import ZoneStateCache

PLAYER = "me"


def _world_with_units(*hits: int) -> World:
    world = World(player=PLAYER, tick=100)
    world.add_territory(Territory(name="W1", controller_level=4, owner=PLAYER))
    world.add_structure("W1", Turret(structure_id="turret:0", owner=PLAYER, hits=3000, hits_max=3000, energy=700))
    for idx, value in enumerate(hits):
        world.add_unit("W1", Unit(unit_id=f"unit:{idx}", owner=PLAYER, hits=value, hits_max=100))
    return world


def _units(world: World) -> list[Unit]:
    return list(world.territories["W1"].units)


def test_unit_at_92_percent_is_not_newly_selected() -> None:
    world = _world_with_units(92)
    state = AllocationCacheState(territory="W1")

    assert select_heal_target(_units(world), state, world, tick=100, cfg=AllocationConfig()) is None


def test_selected_unit_stays_cached_until_release_ratio() -> None:
    world = _world_with_units(50)
    state = AllocationCacheState(territory="W1")
    cfg = AllocationConfig()
    unit = world.get_object("unit:0")

    assert select_heal_target(_units(world), state, world, tick=100, cfg=cfg) is unit

    unit.hits = 92
    assert select_heal_target(_units(world), state, world, tick=101, cfg=cfg) is unit

    unit.hits = 95
    assert select_heal_target(_units(world), state, world, tick=102, cfg=cfg) is None
    assert state.heal_target.value is None


def test_lowest_ratio_wins_and_ties_go_to_scan_order() -> None:
    units = [
        Unit(unit_id="a", owner=PLAYER, hits=60, hits_max=100),
        Unit(unit_id="b", owner=PLAYER, hits=30, hits_max=100),
        Unit(unit_id="c", owner=PLAYER, hits=300, hits_max=1000),
    ]

    assert scan_heal_candidates(units, select_ratio=0.9).unit_id == "b"


def test_scan_is_throttled() -> None:
    world = _world_with_units(100)
    state = AllocationCacheState(territory="W1")
    cfg = AllocationConfig()
    assert select_heal_target(_units(world), state, world, tick=100, cfg=cfg) is None

    world.get_object("unit:0").hits = 40
    assert select_heal_target(_units(world), state, world, tick=102, cfg=cfg) is None
    assert select_heal_target(_units(world), state, world, tick=105, cfg=cfg).unit_id == "unit:0"


def test_dead_cached_target_triggers_immediate_rescan() -> None:
    world = _world_with_units(20, 50)
    state = AllocationCacheState(territory="W1")
    cfg = AllocationConfig()
    assert select_heal_target(_units(world), state, world, tick=100, cfg=cfg).unit_id == "unit:0"

    world.remove("unit:0")

    assert select_heal_target(_units(world), state, world, tick=101, cfg=cfg).unit_id == "unit:1"


def test_rejected_heal_clears_cache_and_rescans_without_the_refused_unit() -> None:
    world = _world_with_units(100, 50)
    world.get_object("unit:0").hits = 30
    world.get_object("unit:0").untargetable = True
    engine = AllocationEngine(world, ZoneStateCache(world), WhitelistClassifier(player=PLAYER), StaticAdvisory())

    report = engine.run_allocation()["W1"]
    state = engine.states["W1"]

    assert report.actions[0].result is ActionResult.INVALID_TARGET
    assert report.mode is AllocationMode.IDLE
    assert state.heal_target.value is None
    assert state.heal_force_rescan is True
    assert state.heal_rejected_id == "unit:0"
    assert engine.event_ring.of_type("HEAL_TARGET_CLEARED")

    world.tick += 1
    report = engine.run_allocation()["W1"]

    assert report.mode is AllocationMode.HEAL
    assert [a.target_id for a in report.accepted()] == ["unit:1"]
    assert state.heal_force_rescan is False
    assert state.heal_rejected_id is None
