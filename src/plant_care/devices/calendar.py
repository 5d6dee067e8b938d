from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config.settings import CalendarSettings
from ..domain import AdapterFailure, CalendarEntry, PermissionDenied, UnknownCalendar, as_aware
from .state import DeviceStateFile

logger = logging.getLogger(__name__)

DEFAULT_CALENDAR_STATE: Dict[str, Any] = {
    "calendars": [],
    "events": [],
    "counters": {"calendar": 0, "entry": 0},
}


class LocalCalendarProvider:
    """File-backed device calendar holding the app's dedicated calendar."""

    def __init__(self, settings: CalendarSettings, path: Optional[Path] = None, *, granted: bool = True) -> None:
        self._settings = settings
        self._state = DeviceStateFile(path or settings.calendar_file, DEFAULT_CALENDAR_STATE)
        self.granted = granted

    async def request_permission(self) -> bool:
        if not self.granted:
            logger.warning("Calendar permission is not granted; entries will not be mirrored")
        return self.granted

    async def ensure_dedicated_calendar(self) -> str:
        if not self.granted:
            raise PermissionDenied("calendar permission not granted")

        def _ensure(state: Dict[str, Any]) -> str:
            calendars = state.setdefault("calendars", [])
            for calendar in calendars:
                if calendar.get("name") == self._settings.name:
                    return calendar["id"]
            identifier = self._state.consume_id(state, "calendar")
            calendars.append(
                {
                    "id": identifier,
                    "title": self._settings.name,
                    "name": self._settings.name,
                    "color": self._settings.color,
                    "entityType": "event",
                    "ownerAccount": self._settings.owner_account,
                    "accessLevel": "owner",
                    "source": {"name": self._settings.owner_account, "isLocal": True},
                }
            )
            logger.info("Created dedicated calendar %s (%s)", self._settings.name, identifier)
            return identifier

        try:
            return await asyncio.to_thread(self._state.mutate, _ensure)
        except (OSError, ValueError) as exc:
            raise AdapterFailure(f"could not resolve calendar {self._settings.name!r}: {exc}") from exc

    async def create_entry(self, calendar_id: str, entry: CalendarEntry) -> str:
        if not self.granted:
            raise PermissionDenied("calendar permission not granted")

        def _append(state: Dict[str, Any]) -> str:
            if not any(item.get("id") == calendar_id for item in state.get("calendars", [])):
                raise UnknownCalendar(f"unknown calendar {calendar_id}")
            identifier = self._state.consume_id(state, "entry")
            state.setdefault("events", []).append(
                {
                    "id": identifier,
                    "calendarId": calendar_id,
                    "title": entry.title,
                    "notes": entry.notes,
                    "startDate": as_aware(entry.start).isoformat(),
                    "endDate": as_aware(entry.end).isoformat(),
                }
            )
            return identifier

        try:
            return await asyncio.to_thread(self._state.mutate, _append)
        except (OSError, ValueError) as exc:
            raise AdapterFailure(f"could not create calendar entry: {exc}") from exc

    async def delete_entry(self, entry_ref: str) -> None:
        def _drop(state: Dict[str, Any]) -> None:
            events = state.setdefault("events", [])
            state["events"] = [item for item in events if item.get("id") != entry_ref]

        try:
            await asyncio.to_thread(self._state.mutate, _drop)
        except (OSError, ValueError) as exc:
            raise AdapterFailure(f"could not delete calendar entry {entry_ref}: {exc}") from exc

    def entries(self, calendar_id: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            events = list(self._state.data.get("events", []))
        except (OSError, ValueError) as exc:
            raise AdapterFailure(f"calendar state is unreadable: {exc}") from exc
        if calendar_id is None:
            return events
        return [item for item in events if item.get("calendarId") == calendar_id]


__all__ = ["LocalCalendarProvider", "DEFAULT_CALENDAR_STATE"]
