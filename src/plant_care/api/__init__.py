"""Payload models shared by the HTTP server and the CLI."""

from __future__ import annotations

from .models import DraftPayload, EventPayload, SideEffectPayload, ValidationErrorPayload
from .serializers import serialize_event, serialize_events

__all__ = [
    "DraftPayload",
    "EventPayload",
    "SideEffectPayload",
    "ValidationErrorPayload",
    "serialize_event",
    "serialize_events",
]
