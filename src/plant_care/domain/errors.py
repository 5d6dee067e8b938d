from __future__ import annotations

from typing import Sequence

from .enums import ValidationReason


class PlantCareError(Exception):
    """Base class for errors surfaced by the plant care services."""


class ValidationError(PlantCareError):
    """Raised when a draft cannot become an event; the caller must resubmit."""

    def __init__(self, reason: ValidationReason, message: str, *, fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.fields = tuple(fields)


class PersistenceError(PlantCareError):
    """Raised when the event list could not be flushed to storage."""

    def __init__(self, message: str = "could not save") -> None:
        super().__init__(message)
        self.message = message


class AdapterFailure(PlantCareError):
    """Raised by a device adapter when a side effect could not be applied."""


class PermissionDenied(AdapterFailure):
    """Raised by a device adapter when the platform permission is missing."""


class UnknownCalendar(AdapterFailure):
    """Raised when an entry targets a calendar the device no longer has."""
