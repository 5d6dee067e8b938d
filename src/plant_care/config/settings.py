from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from ..core.config import DATA_DIR


@dataclass(frozen=True)
class StorageSettings:
    data_dir: Path
    store_file: Path
    storage_key: str


@dataclass(frozen=True)
class ReminderSettings:
    min_lead_time: timedelta
    default_draft_offset: timedelta
    entry_duration: timedelta
    adapter_timeout: timedelta


@dataclass(frozen=True)
class CalendarSettings:
    name: str
    color: str
    owner_account: str
    calendar_file: Path


@dataclass(frozen=True)
class NotificationSettings:
    title: str
    channel_id: str
    channel_name: str
    sound: str
    notifications_file: Path
    granted: bool


@dataclass(frozen=True)
class AppSettings:
    storage: StorageSettings
    reminders: ReminderSettings
    calendar: CalendarSettings
    notifications: NotificationSettings


def _seconds_from_env(name: str, default_seconds: float) -> timedelta:
    raw = os.getenv(name)
    if not raw:
        return timedelta(seconds=default_seconds)
    try:
        seconds = float(raw)
    except ValueError:
        return timedelta(seconds=default_seconds)
    return timedelta(seconds=seconds)


def _minutes_from_env(name: str, default_minutes: float) -> timedelta:
    raw = os.getenv(name)
    if not raw:
        return timedelta(minutes=default_minutes)
    try:
        minutes = float(raw)
    except ValueError:
        return timedelta(minutes=default_minutes)
    return timedelta(minutes=minutes)


def _flag_from_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def build_settings(data_dir: Path | None = None) -> AppSettings:
    """Assemble settings from the environment, rooted at ``data_dir``."""

    root = Path(data_dir) if data_dir else DATA_DIR

    storage = StorageSettings(
        data_dir=root,
        store_file=root / os.getenv("PLANT_CARE_STORE_FILE", "plant_care_store.json"),
        storage_key=os.getenv("PLANT_CARE_STORAGE_KEY", "@plant_events_v1"),
    )

    reminders = ReminderSettings(
        min_lead_time=_seconds_from_env("PLANT_CARE_MIN_LEAD_SECONDS", 5),
        default_draft_offset=_minutes_from_env("PLANT_CARE_DRAFT_OFFSET_MINUTES", 5),
        entry_duration=_minutes_from_env("PLANT_CARE_ENTRY_MINUTES", 30),
        adapter_timeout=_seconds_from_env("PLANT_CARE_ADAPTER_TIMEOUT_SECONDS", 10),
    )

    calendar = CalendarSettings(
        name=os.getenv("PLANT_CARE_CALENDAR_NAME", "Riego de Plantas"),
        color=os.getenv("PLANT_CARE_CALENDAR_COLOR", "#4CAF50"),
        owner_account=os.getenv("PLANT_CARE_CALENDAR_OWNER", "personal"),
        calendar_file=root / "device_calendar.json",
    )

    notifications = NotificationSettings(
        title=os.getenv("PLANT_CARE_NOTIFICATION_TITLE", "Recordatorio de riego 💧"),
        channel_id=os.getenv("PLANT_CARE_CHANNEL_ID", "watering"),
        channel_name=os.getenv("PLANT_CARE_CHANNEL_NAME", "Recordatorios de riego"),
        sound="default",
        notifications_file=root / "device_notifications.json",
        granted=_flag_from_env("PLANT_CARE_NOTIFICATIONS_GRANTED", True),
    )

    return AppSettings(storage=storage, reminders=reminders, calendar=calendar, notifications=notifications)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return build_settings()
