from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from wardkeep.runtime.config import AllocationConfig
from wardkeep.world.objects import ActionResult, Turret, Unit

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CombatOutcome:
    target: Optional[Unit] = None
    results: dict[str, ActionResult] = field(default_factory=dict)

    @property
    def acted(self) -> bool:
        return self.target is not None


def select_attack_target(hostiles: Sequence[Unit], classifier: Any) -> Optional[Unit]:
    """First hostile healer in scan order, else the first hostile."""

    first: Optional[Unit] = None
    for unit in hostiles:
        if not classifier.is_hostile(unit):
            continue
        if classifier.has_active_heal_capability(unit):
            return unit
        if first is None:
            first = unit
    return first


def respond(
    territory: str,
    hostiles: Sequence[Unit],
    turrets: Sequence[Turret],
    classifier: Any,
    *,
    tick: int,
    cfg: AllocationConfig,
) -> CombatOutcome:
    target = select_attack_target(hostiles, classifier)
    outcome = CombatOutcome(target=target)
    if target is None:
        return outcome

    for turret in turrets:
        if turret.energy < cfg.action_energy_cost:
            continue
        outcome.results[turret.structure_id] = turret.attack(target)
    logger.debug(
        "%s: %d turret(s) attacking %s",
        territory,
        len(outcome.results),
        target.unit_id,
        extra={"tick": tick},
    )
    return outcome


__all__ = ["CombatOutcome", "respond", "select_attack_target"]
