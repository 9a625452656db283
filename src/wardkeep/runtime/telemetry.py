"""Engine-owned counters, gauges and a bounded ring of decision events."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any, Mapping


@dataclass(slots=True)
class Metrics:
    counters: dict[str, float] = field(default_factory=dict)
    gauges: dict[str, int | float] = field(default_factory=dict)

    def inc(self, name: str, n: float = 1.0) -> float:
        value = self.counters.get(name, 0.0) + n
        self.counters[name] = value
        return value

    def get(self, name: str, default: float = 0.0) -> float:
        return self.counters.get(name, default)

    def set_gauge(self, name: str, value: int | float) -> None:
        self.gauges[name] = value

    def signature(self) -> str:
        """Canonical JSON of every counter and gauge, for run comparisons."""

        return json.dumps({"counters": self.counters, "gauges": self.gauges}, sort_keys=True, separators=(",", ":"))


@dataclass(slots=True)
class EventRing:
    capacity: int = 200
    events: list[Mapping[str, object]] = field(default_factory=list)

    def append(self, event: Mapping[str, object]) -> None:
        if self.capacity <= 0:
            return
        self.events.append(dict(event))
        if len(self.events) > int(self.capacity):
            self.events = self.events[-int(self.capacity) :]

    def of_type(self, event_type: str) -> list[Mapping[str, object]]:
        return [evt for evt in self.events if evt.get("type") == event_type]


def ensure_event_ring(owner: Any) -> EventRing:
    ring = getattr(owner, "event_ring", None)
    if not isinstance(ring, EventRing):
        ring = EventRing()
        owner.event_ring = ring
    return ring


def record_event(owner: Any, event: Mapping[str, object]) -> None:
    ring = ensure_event_ring(owner)
    payload = dict(event)
    if "tick" not in payload:
        payload["tick"] = getattr(owner, "tick", 0)
    ring.append(payload)


__all__ = [
    "EventRing",
    "Metrics",
    "ensure_event_ring",
    "record_event",
]
