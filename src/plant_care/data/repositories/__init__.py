"""Repositories over the local key/value store."""

from __future__ import annotations

from .events import SCHEMA_VERSION, EventRepository

__all__ = ["EventRepository", "SCHEMA_VERSION"]
