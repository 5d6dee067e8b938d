from __future__ import annotations

from dataclasses import dataclass, field

from ..config import AppSettings, get_settings
from ..core.config import ensure_data_dir
from ..data import EventRepository, KeyValueStore
from ..devices import LocalCalendarProvider, LocalNotificationScheduler
from .events import EventLifecycleCoordinator


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root wiring settings, storage and device adapters to the coordinator."""

    settings: AppSettings = field(default_factory=get_settings)
    store: KeyValueStore = field(init=False)
    events: EventRepository = field(init=False)
    notifications: LocalNotificationScheduler = field(init=False)
    calendar: LocalCalendarProvider = field(init=False)
    coordinator: EventLifecycleCoordinator = field(init=False)

    def __post_init__(self) -> None:
        ensure_data_dir(self.settings.storage.data_dir)
        self.store = KeyValueStore(self.settings.storage.store_file)
        self.events = EventRepository(store=self.store, storage_key=self.settings.storage.storage_key)
        self.notifications = LocalNotificationScheduler(self.settings.notifications)
        self.calendar = LocalCalendarProvider(self.settings.calendar)
        self.coordinator = EventLifecycleCoordinator(
            repository=self.events,
            notifications=self.notifications,
            calendar=self.calendar,
            settings=self.settings.reminders,
        )
