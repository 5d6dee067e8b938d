from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Optional

import pytest

from plant_care.config import build_settings
from plant_care.data import EventRepository, KeyValueStore
from plant_care.domain import CalendarEntry, PermissionDenied
from plant_care.services import EventLifecycleCoordinator

NOW = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeNotifications:
    """In-memory notification scheduler with fault injection."""

    def __init__(self) -> None:
        self.granted = True
        self.fail: Optional[Exception] = None
        self.cancel_fail: Optional[Exception] = None
        self.delay = 0.0
        self.wait_for: Optional[asyncio.Event] = None
        self.scheduled: dict[str, tuple[datetime, str]] = {}
        self.cancelled: list[str] = []
        self._counter = 0

    async def request_permission(self) -> bool:
        return self.granted

    async def schedule(self, at: datetime, body: str) -> str:
        if self.wait_for is not None:
            await self.wait_for.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail is not None:
            raise self.fail
        if not self.granted:
            raise PermissionDenied("notification permission not granted")
        self._counter += 1
        ref = f"notif-{self._counter}"
        self.scheduled[ref] = (at, body)
        return ref

    async def cancel(self, notification_ref: str) -> None:
        self.cancelled.append(notification_ref)
        if self.cancel_fail is not None:
            raise self.cancel_fail
        self.scheduled.pop(notification_ref, None)


class FakeCalendar:
    """In-memory device calendar with fault injection."""

    def __init__(self) -> None:
        self.granted = True
        self.ensure_fail: Optional[Exception] = None
        self.create_fail: Optional[Exception] = None
        self.delete_fail: Optional[Exception] = None
        self.ensure_delay = 0.0
        self.ensure_calls = 0
        self.started = asyncio.Event()
        self.entries: dict[str, tuple[str, CalendarEntry]] = {}
        self.deleted: list[str] = []
        self._counter = 0

    async def request_permission(self) -> bool:
        return self.granted

    async def ensure_dedicated_calendar(self) -> str:
        self.ensure_calls += 1
        if self.ensure_delay:
            await asyncio.sleep(self.ensure_delay)
        if not self.granted:
            raise PermissionDenied("calendar permission not granted")
        if self.ensure_fail is not None:
            raise self.ensure_fail
        return "cal-1"

    async def create_entry(self, calendar_id: str, entry: CalendarEntry) -> str:
        self.started.set()
        if self.create_fail is not None:
            raise self.create_fail
        self._counter += 1
        ref = f"entry-{self._counter}"
        self.entries[ref] = (calendar_id, entry)
        return ref

    async def delete_entry(self, entry_ref: str) -> None:
        self.deleted.append(entry_ref)
        if self.delete_fail is not None:
            raise self.delete_fail
        self.entries.pop(entry_ref, None)


@pytest.fixture
def settings(tmp_path):
    return build_settings(tmp_path)


@pytest.fixture
def repository(settings):
    return EventRepository(store=KeyValueStore(settings.storage.store_file), storage_key=settings.storage.storage_key)


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def notifications():
    return FakeNotifications()


@pytest.fixture
def calendar():
    return FakeCalendar()


@pytest.fixture
def coordinator(repository, notifications, calendar, settings, clock):
    return EventLifecycleCoordinator(
        repository=repository,
        notifications=notifications,
        calendar=calendar,
        settings=settings.reminders,
        clock=clock,
    )
