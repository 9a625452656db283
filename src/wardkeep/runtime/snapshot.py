"""Persisted allocation memory.

Only :class:`RepairMemory` survives a restart; heap caches are rebuilt on
the next tick.  Absent keys load as defaults, so a partial or missing entry
behaves exactly like a fresh territory.
"""

from __future__ import annotations

import gzip
import json
from hashlib import sha256
from pathlib import Path
from typing import Any, Dict, Mapping

from wardkeep.runtime.caches import RepairMemory

MEMORY_SCHEMA_VERSION = "allocation_memory_v1"

_FIELD_KEYS = (
    ("repair_target_id", "repairTargetId"),
    ("integrity_repaired", "integrityRepairedThisCycle"),
    ("last_repair_scan_tick", "lastRepairScanTick"),
    ("last_advisory_check_tick", "lastAdvisoryCheckTick"),
    ("haulage_coverage_cached", "haulageCoverageCached"),
    ("rotated_out_id", "rotatedOutTargetId"),
    ("rejected_id", "rejectedTargetId"),
    ("force_rescan", "forceRescan"),
)


def memory_to_dict(memory: RepairMemory) -> Dict[str, Any]:
    return {key: getattr(memory, attr) for attr, key in _FIELD_KEYS}


def memory_from_dict(payload: Mapping[str, Any] | None) -> RepairMemory:
    payload = payload or {}
    memory = RepairMemory()
    for attr, key in _FIELD_KEYS:
        if key in payload and payload[key] is not None:
            setattr(memory, attr, payload[key])
    memory.integrity_repaired = int(memory.integrity_repaired)
    memory.haulage_coverage_cached = bool(memory.haulage_coverage_cached)
    memory.force_rescan = bool(memory.force_rescan)
    return memory


def dump_memory(memories: Mapping[str, RepairMemory]) -> Dict[str, Any]:
    return {
        "schema_version": MEMORY_SCHEMA_VERSION,
        "territories": {name: memory_to_dict(mem) for name, mem in sorted(memories.items())},
    }


def load_memory(payload: Mapping[str, Any]) -> Dict[str, RepairMemory]:
    version = payload.get("schema_version", MEMORY_SCHEMA_VERSION)
    if version != MEMORY_SCHEMA_VERSION:
        raise ValueError(f"Unsupported allocation memory schema: {version!r}")
    territories = payload.get("territories") or {}
    return {str(name): memory_from_dict(entry) for name, entry in territories.items()}


def memory_signature(memories: Mapping[str, RepairMemory]) -> str:
    canonical = json.dumps(dump_memory(memories), sort_keys=True, separators=(",", ":"))
    return sha256(canonical.encode("utf-8")).hexdigest()


def save_memory(path: Path | str, memories: Mapping[str, RepairMemory]) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    blob = json.dumps(dump_memory(memories), sort_keys=True, indent=2)
    if target.suffix == ".gz":
        with gzip.open(target, "wt", encoding="utf-8") as fp:
            fp.write(blob)
    else:
        target.write_text(blob, encoding="utf-8")
    return target


def read_memory(path: Path | str) -> Dict[str, RepairMemory]:
    source = Path(path)
    if not source.exists():
        return {}
    if source.suffix == ".gz":
        with gzip.open(source, "rt", encoding="utf-8") as fp:
            payload = json.load(fp)
    else:
        payload = json.loads(source.read_text(encoding="utf-8"))
    return load_memory(payload)


__all__ = [
    "MEMORY_SCHEMA_VERSION",
    "dump_memory",
    "load_memory",
    "memory_from_dict",
    "memory_signature",
    "memory_to_dict",
    "read_memory",
    "save_memory",
]
