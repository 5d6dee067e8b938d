"""Ports for the device subsystems the coordinator drives.

Implementations convert every platform fault into ``PermissionDenied`` or
``AdapterFailure``; nothing else may escape an adapter call.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..domain import CalendarEntry


class NotificationScheduler(Protocol):
    async def request_permission(self) -> bool: ...

    async def schedule(self, at: datetime, body: str) -> str:
        """Schedule a one-shot notification and return its identifier."""

    async def cancel(self, notification_ref: str) -> None:
        """Cancel a pending notification; unknown identifiers are ignored."""


class CalendarProvider(Protocol):
    async def request_permission(self) -> bool: ...

    async def ensure_dedicated_calendar(self) -> str:
        """Return the app calendar id, creating the calendar on first use."""

    async def create_entry(self, calendar_id: str, entry: CalendarEntry) -> str: ...

    async def delete_entry(self, entry_ref: str) -> None:
        """Delete a calendar entry; unknown identifiers are ignored."""
