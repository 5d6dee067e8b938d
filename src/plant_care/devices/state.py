from __future__ import annotations

import os
import threading
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import orjson


class DeviceStateFile:
    """JSON document standing in for a device subsystem's own database.

    Adapters call ``mutate`` from worker threads, so reads and writes are
    serialized by a lock. A mutation only becomes visible once it is on disk.
    """

    def __init__(self, path: Path, default_state: Dict[str, Any]) -> None:
        self._path = Path(path)
        self._default_state = default_state
        self._state: Optional[Dict[str, Any]] = None
        self._lock = threading.Lock()

    def _ensure_materialized(self) -> Dict[str, Any]:
        if self._state is not None:
            return self._state
        if not self._path.exists():
            self._state = deepcopy(self._default_state)
            return self._state
        raw = self._path.read_bytes()
        if not raw.strip():
            self._state = deepcopy(self._default_state)
            return self._state
        state = orjson.loads(raw)
        # Backfill missing keys when upgrading.
        for key, value in self._default_state.items():
            if key not in state:
                state[key] = deepcopy(value)
        self._state = state
        return self._state

    @property
    def data(self) -> Dict[str, Any]:
        with self._lock:
            return deepcopy(self._ensure_materialized())

    def persist(self, state: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = orjson.dumps(state, option=orjson.OPT_INDENT_2)
        scratch = self._path.with_name(self._path.name + ".tmp")
        scratch.write_bytes(payload + b"\n")
        os.replace(scratch, self._path)

    def mutate(self, callback: Callable[[Dict[str, Any]], Any]) -> Any:
        with self._lock:
            draft = deepcopy(self._ensure_materialized())
            result = callback(draft)
            self.persist(draft)
            self._state = draft
            return result

    @staticmethod
    def consume_id(state: Dict[str, Any], prefix: str) -> str:
        counters = state.setdefault("counters", {})
        current = counters.get(prefix, 0) + 1
        counters[prefix] = current
        return f"{prefix}_{current:04d}"


__all__ = ["DeviceStateFile"]
