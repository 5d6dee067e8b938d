"""Event lifecycle coordination.

The coordinator owns the in-memory event list. Creating an event validates the
draft, fans out to the notification scheduler and the device calendar at the same
time, and stores whichever references came back. Removing an event tears both
side effects down before the record leaves the list. Every mutation is flushed to
storage before it becomes visible through ``list()``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional, Sequence, Tuple, Union
from uuid import uuid4

from ..config.settings import ReminderSettings
from ..data.repositories import EventRepository
from ..devices.base import CalendarProvider, NotificationScheduler
from ..domain import (
    CalendarEntry,
    EventDraft,
    PermissionDenied,
    PersistenceError,
    PlantEvent,
    SideEffectOutcome,
    SkipReason,
    UnknownCalendar,
    ValidationError,
    ValidationReason,
    as_aware,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def validate_draft(draft: EventDraft, *, now: datetime, min_lead_time: timedelta) -> Tuple[str, str, str, datetime]:
    """Return the trimmed title, plant, description and the aware instant of ``draft``."""

    title = _clean(draft.title)
    plant = _clean(draft.plant)
    missing = [name for name, value in (("title", title), ("plant", plant)) if not value]
    if missing:
        verb = "is" if len(missing) == 1 else "are"
        raise ValidationError(
            ValidationReason.MISSING_FIELD,
            f"{' and '.join(missing).capitalize()} {verb} required.",
            fields=missing,
        )
    if not isinstance(draft.scheduled_at, datetime):
        raise ValidationError(
            ValidationReason.MISSING_FIELD,
            "A reminder date is required.",
            fields=["scheduledAt"],
        )
    scheduled_at = as_aware(draft.scheduled_at)
    if scheduled_at < as_aware(now) + min_lead_time:
        raise ValidationError(
            ValidationReason.PAST_OR_TOO_SOON,
            "Choose a future date for the reminder.",
            fields=["scheduledAt"],
        )
    return title, plant, _clean(draft.description), scheduled_at


def compose_body(title: str, plant: str, description: str = "") -> str:
    body = f"{title} • {plant}"
    if description:
        body += f" — {description}"
    return body


def insert_sorted(events: Sequence[PlantEvent], event: PlantEvent) -> list[PlantEvent]:
    # sorted() is stable: equal instants keep their existing relative order.
    return sorted([*events, event], key=lambda item: item.scheduled_at)


class EventLifecycleCoordinator:
    def __init__(
        self,
        *,
        repository: EventRepository,
        notifications: NotificationScheduler,
        calendar: CalendarProvider,
        settings: ReminderSettings,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._repository = repository
        self._notifications = notifications
        self._calendar = calendar
        self._settings = settings
        self._clock = clock or _utc_now
        self._id_factory = id_factory or (lambda: uuid4().hex)
        self._events: list[PlantEvent] = []
        self._loaded = False
        self._calendar_id: Optional[str] = None
        self._init_lock = asyncio.Lock()
        self._calendar_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def calendar_id(self) -> Optional[str]:
        return self._calendar_id

    def now(self) -> datetime:
        return self._clock()

    def default_scheduled_at(self) -> datetime:
        """Suggested instant for a fresh draft form."""

        return self.now() + self._settings.default_draft_offset

    async def initialize(self) -> None:
        if self._loaded:
            return
        async with self._init_lock:
            if self._loaded:
                return
            await self._request_permission("notification", self._notifications.request_permission)
            if await self._request_permission("calendar", self._calendar.request_permission):
                try:
                    await self._resolve_calendar()
                except Exception as exc:  # noqa: BLE001
                    logger.warning("Dedicated calendar unavailable at startup: %s", exc)
            events = await asyncio.to_thread(self._repository.load)
            self._events = sorted(events, key=lambda item: item.scheduled_at)
            self._loaded = True
            logger.info("Loaded %d plant events", len(self._events))

    def list(self) -> Tuple[PlantEvent, ...]:
        return tuple(self._events)

    def get(self, event_id: str) -> Optional[PlantEvent]:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def upcoming(self, now: Optional[datetime] = None) -> Tuple[PlantEvent, ...]:
        moment = as_aware(now or self.now())
        return tuple(event for event in self._events if event.scheduled_at > moment)

    async def create(self, draft: EventDraft) -> PlantEvent:
        await self.initialize()
        title, plant, description, scheduled_at = validate_draft(
            draft,
            now=self.now(),
            min_lead_time=self._settings.min_lead_time,
        )
        body = compose_body(title, plant, description)
        entry = CalendarEntry(
            title=f"{title} ({plant})",
            notes=description,
            start=scheduled_at,
            end=scheduled_at + self._settings.entry_duration,
        )

        notification, calendar_entry = await asyncio.gather(
            self._attempt("notification", lambda: self._notifications.schedule(scheduled_at, body)),
            self._mirror_to_calendar(entry),
        )

        async with self._write_lock:
            event = PlantEvent(
                id=self._fresh_id(),
                title=title,
                plant=plant,
                scheduled_at=scheduled_at,
                description=description,
                notification=notification,
                calendar_entry=calendar_entry,
            )
            updated = insert_sorted(self._events, event)
            try:
                await self._flush(updated)
            except PersistenceError:
                # The record never became visible, so its side effects must not outlive it.
                await self._teardown(event)
                raise
            self._events = updated

        logger.info(
            "Created plant event %s for %s at %s (notification=%s, calendar=%s)",
            event.id,
            event.plant,
            event.scheduled_at.isoformat(),
            notification.status.value,
            calendar_entry.status.value,
        )
        return event

    async def remove(self, event: Union[PlantEvent, str]) -> None:
        await self.initialize()
        event_id = event if isinstance(event, str) else event.id
        async with self._write_lock:
            stored = self.get(event_id)
            if stored is None:
                logger.debug("Plant event %s already removed", event_id)
                return
            await self._teardown(stored)
            remaining = [item for item in self._events if item.id != event_id]
            await self._flush(remaining)
            self._events = remaining
        logger.info("Removed plant event %s", event_id)

    async def _request_permission(self, label: str, request: Callable[[], Awaitable[bool]]) -> bool:
        try:
            granted = await self._bounded(request())
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not acquire %s permission: %s", label, exc)
            return False
        if not granted:
            logger.warning("%s permission denied; continuing without it", label.capitalize())
        return bool(granted)

    async def _resolve_calendar(self) -> str:
        if self._calendar_id:
            return self._calendar_id
        async with self._calendar_lock:
            if not self._calendar_id:
                calendar_id = await self._bounded(self._calendar.ensure_dedicated_calendar())
                if not calendar_id:
                    raise RuntimeError("calendar provider returned no identifier")
                self._calendar_id = calendar_id
            return self._calendar_id

    async def _mirror_to_calendar(self, entry: CalendarEntry) -> SideEffectOutcome:
        try:
            calendar_id = await self._resolve_calendar()
        except PermissionDenied as exc:
            logger.warning("Skipping calendar entry: %s", exc)
            return SideEffectOutcome.skipped(SkipReason.PERMISSION_DENIED, str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Skipping calendar entry, dedicated calendar unavailable: %r", exc)
            return SideEffectOutcome.skipped(SkipReason.NO_CALENDAR, repr(exc))
        return await self._attempt("calendar entry", lambda: self._create_calendar_entry(calendar_id, entry))

    async def _create_calendar_entry(self, calendar_id: str, entry: CalendarEntry) -> str:
        try:
            return await self._calendar.create_entry(calendar_id, entry)
        except UnknownCalendar:
            # Forget the cached id so the next create resolves the calendar again.
            if self._calendar_id == calendar_id:
                self._calendar_id = None
            raise

    async def _attempt(self, label: str, request: Callable[[], Awaitable[Any]]) -> SideEffectOutcome:
        try:
            ref = await self._bounded(request())
        except PermissionDenied as exc:
            logger.warning("Skipping %s: %s", label, exc)
            return SideEffectOutcome.skipped(SkipReason.PERMISSION_DENIED, str(exc))
        except asyncio.TimeoutError:
            logger.warning("Skipping %s: timed out after %s", label, self._settings.adapter_timeout)
            return SideEffectOutcome.skipped(SkipReason.TIMEOUT, "timed out")
        except Exception as exc:  # noqa: BLE001
            logger.warning("Skipping %s: %r", label, exc)
            return SideEffectOutcome.skipped(SkipReason.ADAPTER_FAILURE, repr(exc))
        if not ref:
            logger.warning("Skipping %s: adapter returned no identifier", label)
            return SideEffectOutcome.skipped(SkipReason.ADAPTER_FAILURE, "no identifier returned")
        return SideEffectOutcome.scheduled(str(ref))

    async def _teardown(self, event: PlantEvent) -> None:
        releases = []
        if event.notification_ref:
            ref = event.notification_ref
            releases.append(self._release("notification", ref, lambda: self._notifications.cancel(ref)))
        if event.calendar_entry_ref:
            entry_ref = event.calendar_entry_ref
            releases.append(self._release("calendar entry", entry_ref, lambda: self._calendar.delete_entry(entry_ref)))
        await asyncio.gather(*releases)

    async def _release(self, label: str, ref: str, request: Callable[[], Awaitable[None]]) -> None:
        try:
            await self._bounded(request())
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not release %s %s: %r", label, ref, exc)

    async def _flush(self, events: Sequence[PlantEvent]) -> None:
        try:
            await asyncio.to_thread(self._repository.save, list(events))
        except PersistenceError:
            logger.exception("Could not save %d plant events", len(events))
            raise

    async def _bounded(self, awaitable: Awaitable[Any]) -> Any:
        return await asyncio.wait_for(awaitable, timeout=self._settings.adapter_timeout.total_seconds())

    def _fresh_id(self) -> str:
        taken = {event.id for event in self._events}
        identifier = self._id_factory()
        while identifier in taken:
            identifier = self._id_factory()
        return identifier


__all__ = ["EventLifecycleCoordinator", "compose_body", "insert_sorted", "validate_draft"]
