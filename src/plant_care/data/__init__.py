"""Data access layer."""

from __future__ import annotations

from .repositories import EventRepository
from .store import KeyValueStore

__all__ = ["EventRepository", "KeyValueStore"]
