from __future__ import annotations

from enum import Enum


class ValidationReason(str, Enum):
    MISSING_FIELD = "missingField"
    PAST_OR_TOO_SOON = "pastOrTooSoon"


class SideEffectStatus(str, Enum):
    SCHEDULED = "scheduled"
    SKIPPED = "skipped"


class SkipReason(str, Enum):
    PERMISSION_DENIED = "permissionDenied"
    ADAPTER_FAILURE = "adapterFailure"
    TIMEOUT = "timeout"
    NO_CALENDAR = "noCalendar"
