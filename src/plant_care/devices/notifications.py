from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config.settings import NotificationSettings
from ..domain import AdapterFailure, PermissionDenied, as_aware
from .state import DeviceStateFile

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_STATE: Dict[str, Any] = {
    "channels": {},
    "scheduled": [],
    "counters": {"notification": 0},
}


class LocalNotificationScheduler:
    """File-backed scheduler of one-shot local notifications."""

    def __init__(self, settings: NotificationSettings, path: Optional[Path] = None) -> None:
        self._settings = settings
        self._state = DeviceStateFile(path or settings.notifications_file, DEFAULT_NOTIFICATION_STATE)
        self.granted = settings.granted

    async def request_permission(self) -> bool:
        if not self.granted:
            logger.warning("Notification permission is not granted; reminders will not alert")
            return False
        await self.configure_channel()
        return True

    async def configure_channel(self) -> None:
        def _register(state: Dict[str, Any]) -> None:
            state.setdefault("channels", {})[self._settings.channel_id] = {
                "name": self._settings.channel_name,
                "importance": "max",
                "sound": self._settings.sound,
                "vibrationPattern": [0, 250, 250, 250],
            }

        try:
            await asyncio.to_thread(self._state.mutate, _register)
        except (OSError, ValueError) as exc:
            raise AdapterFailure(f"could not register notification channel: {exc}") from exc

    async def schedule(self, at: datetime, body: str) -> str:
        if not self.granted:
            raise PermissionDenied("notification permission not granted")

        def _append(state: Dict[str, Any]) -> str:
            identifier = self._state.consume_id(state, "notification")
            state.setdefault("scheduled", []).append(
                {
                    "id": identifier,
                    "title": self._settings.title,
                    "body": body,
                    "sound": self._settings.sound,
                    "channelId": self._settings.channel_id,
                    "trigger": as_aware(at).isoformat(),
                }
            )
            return identifier

        try:
            return await asyncio.to_thread(self._state.mutate, _append)
        except (OSError, ValueError) as exc:
            raise AdapterFailure(f"could not schedule notification: {exc}") from exc

    async def cancel(self, notification_ref: str) -> None:
        def _drop(state: Dict[str, Any]) -> None:
            scheduled = state.setdefault("scheduled", [])
            state["scheduled"] = [item for item in scheduled if item.get("id") != notification_ref]

        try:
            await asyncio.to_thread(self._state.mutate, _drop)
        except (OSError, ValueError) as exc:
            raise AdapterFailure(f"could not cancel notification {notification_ref}: {exc}") from exc

    def pending(self) -> List[Dict[str, Any]]:
        try:
            scheduled = list(self._state.data.get("scheduled", []))
        except (OSError, ValueError) as exc:
            raise AdapterFailure(f"notification state is unreadable: {exc}") from exc
        return sorted(scheduled, key=lambda item: datetime.fromisoformat(item["trigger"]))

    def due(self, now: datetime) -> List[Dict[str, Any]]:
        moment = as_aware(now)
        return [item for item in self.pending() if datetime.fromisoformat(item["trigger"]) <= moment]


__all__ = ["LocalNotificationScheduler", "DEFAULT_NOTIFICATION_STATE"]
