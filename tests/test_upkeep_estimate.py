from __future__ import annotations

import pytest

from wardkeep.runtime.upkeep import estimate_upkeep, format_upkeep
from wardkeep.world.objects import Structure, StructureCategory, Unit
from wardkeep.world.territory import Territory, World
from wardkeep.world.zone_cache import ZoneStateCache

PLAYER = "me"


def _structure(sid: str, category: StructureCategory, **kwargs) -> Structure:
    return Structure(structure_id=sid, category=category, hits=100, hits_max=1000, **kwargs)


def _world() -> World:
    world = World(player=PLAYER)
    world.add_territory(
        Territory(
            name="home",
            controller_level=6,
            owner=PLAYER,
            structures=[
                _structure("road:1", StructureCategory.ROAD),
                _structure("road:2", StructureCategory.ROAD),
                _structure("road:3", StructureCategory.ROAD, terrain="swamp"),
                _structure("rampart:1", StructureCategory.RAMPART, owner=PLAYER),
                _structure("rampart:2", StructureCategory.RAMPART, owner="raider"),
                _structure("container:1", StructureCategory.CONTAINER),
                _structure("lab:1", StructureCategory.LAB, owner=PLAYER),
            ],
        )
    )
    world.add_territory(
        Territory(
            name="outpost",
            owner=None,
            claimed=False,
            structures=[_structure("container:2", StructureCategory.CONTAINER)],
            units=[Unit(unit_id="miner", owner=PLAYER)],
        )
    )
    return world


def test_upkeep_by_territory_and_type() -> None:
    world = _world()
    zone = ZoneStateCache(world)

    summary = estimate_upkeep([zone.get_snapshot("home"), zone.get_snapshot("outpost")])

    home = summary.territories["home"]
    assert home.total_ept == pytest.approx(0.137)
    assert home.count == 5
    assert home.types["road_plain"].count == 2
    assert home.types["road_swamp"].ept == pytest.approx(0.005)
    assert home.types["rampart"].count == 1
    assert summary.territories["outpost"].types["container_unclaimed"].ept == pytest.approx(0.5)
    assert summary.total_ept == pytest.approx(0.637)


def test_report_lists_costliest_territory_first() -> None:
    world = _world()
    zone = ZoneStateCache(world)

    lines = format_upkeep(estimate_upkeep([zone.get_snapshot("home"), zone.get_snapshot("outpost")]))

    assert lines[0] == "[upkeep] Total maintenance: 0.637 en/tick"
    assert lines[1].startswith("  - outpost: 0.5 en/tick")
    assert any(line.startswith("  - home: 0.137 en/tick (structures 5)") for line in lines)
