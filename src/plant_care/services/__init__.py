"""Application services orchestrating storage, devices and domain logic."""

from __future__ import annotations

from .context import ServiceContext
from .events import EventLifecycleCoordinator

__all__ = ["EventLifecycleCoordinator", "ServiceContext"]
