from __future__ import annotations

from datetime import timedelta

from plant_care.config import build_settings


def test_defaults(tmp_path, monkeypatch):
    for name in ("PLANT_CARE_MIN_LEAD_SECONDS", "PLANT_CARE_ENTRY_MINUTES", "PLANT_CARE_STORAGE_KEY"):
        monkeypatch.delenv(name, raising=False)

    settings = build_settings(tmp_path)

    assert settings.storage.storage_key == "@plant_events_v1"
    assert settings.storage.store_file.parent == tmp_path
    assert settings.reminders.min_lead_time == timedelta(seconds=5)
    assert settings.reminders.default_draft_offset == timedelta(minutes=5)
    assert settings.reminders.entry_duration == timedelta(minutes=30)
    assert settings.calendar.name == "Riego de Plantas"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("PLANT_CARE_ENTRY_MINUTES", "45")
    monkeypatch.setenv("PLANT_CARE_NOTIFICATIONS_GRANTED", "no")

    settings = build_settings(tmp_path)

    assert settings.reminders.entry_duration == timedelta(minutes=45)
    assert settings.notifications.granted is False


def test_malformed_numbers_fall_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("PLANT_CARE_MIN_LEAD_SECONDS", "soon")

    assert build_settings(tmp_path).reminders.min_lead_time == timedelta(seconds=5)
