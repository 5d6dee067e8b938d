from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .enums import SideEffectStatus, SkipReason


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    return as_aware(parsed)


def as_aware(value: datetime) -> datetime:
    """Attach the device local zone to naive timestamps."""

    if value.tzinfo is None:
        return value.astimezone()
    return value


@dataclass(frozen=True, slots=True)
class SideEffectOutcome:
    """Result of one best-effort side effect: a reference, or why there is none."""

    status: SideEffectStatus
    ref: Optional[str] = None
    reason: Optional[SkipReason] = None
    detail: str = ""

    @classmethod
    def scheduled(cls, ref: str) -> "SideEffectOutcome":
        return cls(status=SideEffectStatus.SCHEDULED, ref=ref)

    @classmethod
    def skipped(cls, reason: SkipReason, detail: str = "") -> "SideEffectOutcome":
        return cls(status=SideEffectStatus.SKIPPED, reason=reason, detail=detail)

    @property
    def is_scheduled(self) -> bool:
        return self.status is SideEffectStatus.SCHEDULED

    @classmethod
    def from_fields(cls, ref: Any, skip: Any) -> "SideEffectOutcome":
        if ref:
            return cls.scheduled(str(ref))
        try:
            reason = SkipReason(skip) if skip else SkipReason.ADAPTER_FAILURE
        except ValueError:
            reason = SkipReason.ADAPTER_FAILURE
        return cls.skipped(reason)


@dataclass(frozen=True, slots=True)
class EventDraft:
    """User-authored input for a new event, before validation."""

    title: str
    plant: str
    scheduled_at: datetime
    description: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CalendarEntry:
    title: str
    notes: str
    start: datetime
    end: datetime


@dataclass(frozen=True, slots=True)
class PlantEvent:
    id: str
    title: str
    plant: str
    scheduled_at: datetime
    description: str = ""
    notification: SideEffectOutcome = SideEffectOutcome.skipped(SkipReason.ADAPTER_FAILURE)
    calendar_entry: SideEffectOutcome = SideEffectOutcome.skipped(SkipReason.ADAPTER_FAILURE)

    @property
    def notification_ref(self) -> Optional[str]:
        return self.notification.ref

    @property
    def calendar_entry_ref(self) -> Optional[str]:
        return self.calendar_entry.ref

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PlantEvent":
        # Records written by the first mobile release used dateISO / notificationId / calendarEventId.
        scheduled = record.get("scheduledAt") or record.get("dateISO")
        if not scheduled:
            raise ValueError("record has no scheduled timestamp")
        title = str(record.get("title") or "").strip()
        plant = str(record.get("plant") or "").strip()
        if not record.get("id") or not title or not plant:
            raise ValueError("record is missing id, title or plant")
        return cls(
            id=str(record["id"]),
            title=title,
            plant=plant,
            scheduled_at=_parse_datetime(scheduled),
            description=str(record.get("description") or ""),
            notification=SideEffectOutcome.from_fields(
                record.get("notificationRef", record.get("notificationId")),
                record.get("notificationSkip"),
            ),
            calendar_entry=SideEffectOutcome.from_fields(
                record.get("calendarEntryRef", record.get("calendarEventId")),
                record.get("calendarEntrySkip"),
            ),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "plant": self.plant,
            "description": self.description,
            "scheduledAt": self.scheduled_at.isoformat(),
            "notificationRef": self.notification.ref,
            "calendarEntryRef": self.calendar_entry.ref,
            "notificationSkip": self.notification.reason.value if self.notification.reason else None,
            "calendarEntrySkip": self.calendar_entry.reason.value if self.calendar_entry.reason else None,
        }
