from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List

import orjson

from ...domain import PersistenceError, PlantEvent
from ..store import KeyValueStore

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def _records_from_payload(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        # Unversioned blob written by the first release: a bare list of records.
        return payload
    if isinstance(payload, dict):
        version = payload.get("schemaVersion")
        if isinstance(version, int) and version > SCHEMA_VERSION:
            logger.warning("Stored events use schema version %s, newer than %s", version, SCHEMA_VERSION)
        events = payload.get("events")
        if isinstance(events, list):
            return events
    raise ValueError("stored events payload has an unexpected shape")


@dataclass(slots=True)
class EventRepository:
    """Loads and saves the whole event list under one storage key."""

    store: KeyValueStore
    storage_key: str

    def load(self) -> List[PlantEvent]:
        try:
            raw = self.store.get_item(self.storage_key)
            if not raw:
                return []
            records = _records_from_payload(orjson.loads(raw))
        except (OSError, ValueError) as exc:
            logger.warning("Error loading events, starting with an empty list: %s", exc)
            return []

        events: list[PlantEvent] = []
        seen: set[str] = set()
        for index, record in enumerate(records):
            try:
                event = PlantEvent.from_record(record)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping stored event %s: %s", index, exc)
                continue
            if event.id in seen:
                logger.warning("Skipping duplicate stored event id %s", event.id)
                continue
            seen.add(event.id)
            events.append(event)
        return sorted(events, key=lambda item: item.scheduled_at)

    def save(self, events: Iterable[PlantEvent]) -> None:
        payload = {
            "schemaVersion": SCHEMA_VERSION,
            "events": [event.to_record() for event in events],
        }
        try:
            self.store.set_item(self.storage_key, orjson.dumps(payload).decode("utf-8"))
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError() from exc
