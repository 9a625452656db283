"""Friend-or-foe classification by owner name."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable


@dataclass(slots=True)
class WhitelistClassifier:
    player: str
    whitelist: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def with_allies(cls, player: str, allies: Iterable[str]) -> "WhitelistClassifier":
        return cls(player=player, whitelist=frozenset(allies))

    def _owner(self, obj: Any) -> str | None:
        return getattr(obj, "owner", None)

    def is_hostile(self, obj: Any) -> bool:
        owner = self._owner(obj)
        if not owner:
            return False
        return owner != self.player and owner not in self.whitelist

    def is_friendly(self, obj: Any) -> bool:
        owner = self._owner(obj)
        if not owner:
            return False
        return owner == self.player or owner in self.whitelist

    def has_active_heal_capability(self, unit: Any) -> bool:
        return int(getattr(unit, "heal_parts", 0) or 0) > 0


__all__ = ["WhitelistClassifier"]
