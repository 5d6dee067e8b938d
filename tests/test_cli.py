from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from plant_care import cli
from plant_care.services import ServiceContext


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)


@pytest.fixture
def context(settings):
    return ServiceContext(settings=settings)


def _in(minutes: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(minutes=minutes)).isoformat()


def test_add_list_remove(context, settings, capsys):
    assert cli.main(["add", "--title", "Riego", "--plant", "Ficus", "--at", _in(60)], context=context) == 0
    (event,) = context.coordinator.list()
    assert event.plant == "Ficus"

    reopened = ServiceContext(settings=settings)
    assert cli.main(["list"], context=reopened) == 0
    assert "Riego (Ficus)" in capsys.readouterr().out

    assert cli.main(["remove", event.id], context=reopened) == 0
    assert reopened.coordinator.list() == ()


def test_add_defaults_to_five_minutes_ahead(context):
    assert cli.main(["add", "--title", "Riego", "--plant", "Ficus"], context=context) == 0

    (event,) = context.coordinator.list()
    assert event.scheduled_at > datetime.now(timezone.utc) + timedelta(minutes=4)


def test_validation_error_exits_with_message(context, capsys):
    code = cli.main(["add", "--title", "Riego", "--plant", " ", "--at", _in(60)], context=context)

    assert code == 2
    assert "Plant is required." in capsys.readouterr().err
    assert context.coordinator.list() == ()


def test_invalid_date_is_rejected(context, capsys):
    assert cli.main(["add", "--title", "Riego", "--plant", "Ficus", "--at", "tomorrow"], context=context) == 2
    assert "Invalid date" in capsys.readouterr().err


def test_empty_list_message(context, capsys):
    assert cli.main(["list", "--upcoming"], context=context) == 0
    assert "No events yet" in capsys.readouterr().out
