"""Domain models for plant care reminders."""

from __future__ import annotations

from .enums import SideEffectStatus, SkipReason, ValidationReason
from .errors import (
    AdapterFailure,
    PermissionDenied,
    PersistenceError,
    PlantCareError,
    UnknownCalendar,
    ValidationError,
)
from .models import CalendarEntry, EventDraft, PlantEvent, SideEffectOutcome, as_aware

__all__ = [
    "AdapterFailure",
    "CalendarEntry",
    "EventDraft",
    "PermissionDenied",
    "PersistenceError",
    "PlantCareError",
    "PlantEvent",
    "SideEffectOutcome",
    "SideEffectStatus",
    "SkipReason",
    "UnknownCalendar",
    "ValidationError",
    "ValidationReason",
    "as_aware",
]
