"""Per-tick turret allocation across every controlled territory.

Each territory is decided from scratch every tick in a fixed layer order:
turret pool, energy source, combat, heal, repair.  A layer that acts
short-circuits the ones below it for the turret that acted.  The only state
carried between ticks is the per-territory :class:`AllocationCacheState`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

from wardkeep.runtime.caches import AllocationCacheState, CacheEntry, RepairMemory, ensure_cache_state
from wardkeep.runtime.combat import respond
from wardkeep.runtime.config import AllocationConfig
from wardkeep.runtime.healing import invalidate_heal_target, select_heal_target
from wardkeep.runtime.repair import invalidate_repair_target, record_repair, select_repair_target
from wardkeep.runtime.telemetry import EventRing, Metrics, record_event
from wardkeep.runtime.turrets import resolve_turrets, select_energy_source
from wardkeep.world.objects import ActionResult, IntentKind, Turret

logger = logging.getLogger(__name__)


class AllocationMode(str, Enum):
    NO_TURRET = "no_turret"
    NO_ENERGY = "no_energy"
    COMBAT = "combat"
    HEAL = "heal"
    REPAIR = "repair"
    IDLE = "idle"


@dataclass(slots=True, frozen=True)
class ActionRecord:
    turret_id: str
    kind: IntentKind
    target_id: str
    result: ActionResult


@dataclass(slots=True)
class TerritoryReport:
    territory: str
    mode: AllocationMode
    energy_estimate: int = 0
    actions: list[ActionRecord] = field(default_factory=list)

    def accepted(self) -> list[ActionRecord]:
        return [a for a in self.actions if a.result is ActionResult.OK]


class AllocationEngine:
    """Owns every per-territory cache and drives the layers once per tick."""

    def __init__(
        self,
        world: Any,
        zone_cache: Any,
        classifier: Any,
        advisory: Any,
        *,
        config: Optional[AllocationConfig] = None,
    ) -> None:
        self.world = world
        self.zone_cache = zone_cache
        self.classifier = classifier
        self.advisory = advisory
        self.config = config or AllocationConfig()
        self.states: Dict[str, AllocationCacheState] = {}
        self.metrics = Metrics()
        self.event_ring = EventRing()
        self._territories: Optional[CacheEntry] = None
        self._last_gc_tick: Optional[int] = None

    @property
    def tick(self) -> int:
        return int(getattr(self.world, "tick", 0))

    # ------------------------------------------------------------------
    # Persisted memory
    # ------------------------------------------------------------------
    def memory(self) -> Dict[str, RepairMemory]:
        return {name: state.repair for name, state in sorted(self.states.items())}

    def load_memory(self, memory: Mapping[str, RepairMemory]) -> None:
        for name, repair in memory.items():
            ensure_cache_state(self.states, name).repair = repair

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def run_allocation(self) -> Dict[str, TerritoryReport]:
        tick = self.tick
        self._maybe_collect_garbage(tick)
        reports: Dict[str, TerritoryReport] = {}
        for name in self._territory_names(tick):
            report = self.allocate_territory(name, tick=tick)
            if report is None:
                continue
            reports[name] = report
            self.metrics.inc(f"allocation.{report.mode.value}")
        self.metrics.set_gauge("allocation.territories", len(reports))
        return reports

    def _territory_names(self, tick: int) -> Sequence[str]:
        entry = self._territories
        if entry is None or not entry.fresh(tick, self.config.territory_list_interval):
            entry = CacheEntry(value=tuple(self.zone_cache.controlled_territories()), refreshed_tick=tick)
            self._territories = entry
        return entry.value

    def _maybe_collect_garbage(self, tick: int) -> None:
        last = self._last_gc_tick
        if last is not None and tick - last < self.config.gc_interval:
            return
        self._last_gc_tick = tick
        controlled = set(self.zone_cache.controlled_territories())
        for name in sorted(self.states):
            if name not in controlled:
                del self.states[name]
                logger.debug("%s: dropped allocation state", name, extra={"tick": tick})

    # ------------------------------------------------------------------
    # Per-territory decision
    # ------------------------------------------------------------------
    def allocate_territory(self, name: str, *, tick: int) -> Optional[TerritoryReport]:
        cfg = self.config
        snapshot = self.zone_cache.get_snapshot(name)
        if snapshot is None:
            record_event(self, {"type": "TERRITORY_SKIPPED", "territory": name, "tick": tick})
            logger.debug("%s: not observable, skipped", name, extra={"tick": tick})
            return None

        state = ensure_cache_state(self.states, name)
        turrets = resolve_turrets(snapshot, state, self.world, tick=tick, cfg=cfg, player=self.world.player)
        if not turrets:
            return TerritoryReport(territory=name, mode=AllocationMode.NO_TURRET)

        source = select_energy_source(turrets, state, self.world, tick=tick, cfg=cfg)
        if source is None:
            return TerritoryReport(territory=name, mode=AllocationMode.NO_ENERGY)

        report = TerritoryReport(territory=name, mode=AllocationMode.IDLE, energy_estimate=source.energy)

        if snapshot.hostile_units:
            outcome = respond(name, snapshot.hostile_units, turrets, self.classifier, tick=tick, cfg=cfg)
            if outcome.acted:
                report.mode = AllocationMode.COMBAT
                for turret_id, result in outcome.results.items():
                    self._log_action(report, turret_id, IntentKind.ATTACK, outcome.target.unit_id, result, tick)
                return report

        acted: set[str] = set()
        if report.energy_estimate >= cfg.min_action_energy:
            self._heal(snapshot, state, source, report, acted, tick)

        if report.energy_estimate >= cfg.min_action_energy:
            repairer = source if source.structure_id not in acted else self._spare_turret(turrets, acted)
            if repairer is not None:
                self._repair(snapshot, state, repairer, report, acted, tick)
        return report

    def _spare_turret(self, turrets: Sequence[Turret], acted: set[str]) -> Optional[Turret]:
        threshold = self.config.min_source_energy(len(turrets))
        for turret in turrets:
            if turret.structure_id not in acted and turret.energy > threshold:
                return turret
        return None

    def _heal(
        self,
        snapshot: Any,
        state: AllocationCacheState,
        source: Turret,
        report: TerritoryReport,
        acted: set[str],
        tick: int,
    ) -> None:
        before = state.heal_target.refreshed_tick if state.heal_target else None
        target = select_heal_target(snapshot.friendly_units, state, self.world, tick=tick, cfg=self.config)
        if state.heal_target is not None and state.heal_target.refreshed_tick != before:
            self.metrics.inc("heal.scans")
        if target is None:
            return

        result = source.heal(target)
        self._log_action(report, source.structure_id, IntentKind.HEAL, target.unit_id, result, tick)
        if result is ActionResult.INVALID_TARGET:
            invalidate_heal_target(state, target.unit_id)
            record_event(self, {"type": "HEAL_TARGET_CLEARED", "territory": report.territory, "target_id": target.unit_id, "tick": tick})
            return
        if result is not ActionResult.OK:
            return
        acted.add(source.structure_id)
        report.mode = AllocationMode.HEAL
        report.energy_estimate -= self.config.action_energy_cost

    def _repair(
        self,
        snapshot: Any,
        state: AllocationCacheState,
        turret: Turret,
        report: TerritoryReport,
        acted: set[str],
        tick: int,
    ) -> None:
        memory = state.repair
        before = memory.last_repair_scan_tick
        target = select_repair_target(snapshot, memory, self.world, self.advisory, tick=tick, cfg=self.config)
        if memory.last_repair_scan_tick != before:
            self.metrics.inc("repair.scans")
            record_event(
                self,
                {
                    "type": "REPAIR_SCAN",
                    "territory": report.territory,
                    "target_id": memory.repair_target_id,
                    "tick": tick,
                },
            )
        if target is None:
            return

        result = turret.repair(target)
        self._log_action(report, turret.structure_id, IntentKind.REPAIR, target.structure_id, result, tick)
        if result is ActionResult.INVALID_TARGET:
            invalidate_repair_target(memory, target.structure_id)
            record_event(self, {"type": "REPAIR_TARGET_CLEARED", "territory": report.territory, "target_id": target.structure_id, "tick": tick})
            return
        if result is not ActionResult.OK:
            return
        record_repair(memory, self.config)
        acted.add(turret.structure_id)
        if report.mode is AllocationMode.IDLE:
            report.mode = AllocationMode.REPAIR
        report.energy_estimate -= self.config.action_energy_cost

    def _log_action(
        self,
        report: TerritoryReport,
        turret_id: str,
        kind: IntentKind,
        target_id: str,
        result: ActionResult,
        tick: int,
    ) -> None:
        report.actions.append(ActionRecord(turret_id=turret_id, kind=kind, target_id=target_id, result=result))
        if result is ActionResult.OK:
            record_event(
                self,
                {
                    "type": f"TURRET_{kind.name}",
                    "territory": report.territory,
                    "turret_id": turret_id,
                    "target_id": target_id,
                    "tick": tick,
                },
            )
            return
        self.metrics.inc("actions.rejected")
        record_event(
            self,
            {
                "type": "ACTION_REJECTED",
                "territory": report.territory,
                "turret_id": turret_id,
                "kind": kind.value,
                "target_id": target_id,
                "result": result.value,
                "tick": tick,
            },
        )
        logger.debug("%s: %s on %s rejected (%s)", report.territory, kind.value, target_id, result.value, extra={"tick": tick})


__all__ = ["ActionRecord", "AllocationEngine", "AllocationMode", "TerritoryReport"]
