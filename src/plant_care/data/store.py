from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional

import orjson


class KeyValueStore:
    """Lightweight key/value persistence backed by a single JSON file.

    Values are stored as opaque serialized strings, the way the device key/value
    storage keeps them. The file is rewritten atomically on every ``set``.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._state: Optional[Dict[str, str]] = None

    def _ensure_materialized(self) -> Dict[str, str]:
        if self._state is not None:
            return self._state
        if not self._path.exists():
            self._state = {}
            return self._state
        raw = self._path.read_bytes()
        loaded = orjson.loads(raw) if raw.strip() else {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{self._path} does not contain a key/value object")
        self._state = {str(key): value for key, value in loaded.items()}
        return self._state

    def get_item(self, key: str) -> Optional[str]:
        return self._ensure_materialized().get(key)

    def set_item(self, key: str, value: str) -> None:
        state = deepcopy(self._ensure_materialized())
        state[key] = value
        self._write(state)
        self._state = state

    def _write(self, state: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = orjson.dumps(state, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)
        scratch = self._path.with_name(self._path.name + ".tmp")
        scratch.write_bytes(payload + b"\n")
        os.replace(scratch, self._path)


__all__ = ["KeyValueStore"]
