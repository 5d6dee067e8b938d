"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    AppSettings,
    CalendarSettings,
    NotificationSettings,
    ReminderSettings,
    StorageSettings,
    build_settings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "CalendarSettings",
    "NotificationSettings",
    "ReminderSettings",
    "StorageSettings",
    "build_settings",
    "get_settings",
]
