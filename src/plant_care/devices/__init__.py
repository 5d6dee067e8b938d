"""Device-side adapters: local notifications and the device calendar."""

from __future__ import annotations

from .base import CalendarProvider, NotificationScheduler
from .calendar import LocalCalendarProvider
from .notifications import LocalNotificationScheduler

__all__ = ["CalendarProvider", "LocalCalendarProvider", "LocalNotificationScheduler", "NotificationScheduler"]
