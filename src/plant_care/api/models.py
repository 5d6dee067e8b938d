from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import EventDraft, PlantEvent, SideEffectOutcome, ValidationError


class DraftPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(default="")
    plant: str = Field(default="")
    description: Optional[str] = Field(default=None)
    scheduled_at: datetime = Field(alias="scheduledAt")

    def to_domain(self) -> EventDraft:
        return EventDraft(
            title=self.title,
            plant=self.plant,
            description=self.description,
            scheduled_at=self.scheduled_at,
        )


class SideEffectPayload(BaseModel):
    status: str
    ref: Optional[str] = Field(default=None)
    reason: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, outcome: SideEffectOutcome) -> "SideEffectPayload":
        return cls(
            status=outcome.status.value,
            ref=outcome.ref,
            reason=outcome.reason.value if outcome.reason else None,
        )


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    plant: str
    description: str = Field(default="")
    scheduled_at: str = Field(serialization_alias="scheduledAt")
    notification_ref: Optional[str] = Field(default=None, serialization_alias="notificationRef")
    calendar_entry_ref: Optional[str] = Field(default=None, serialization_alias="calendarEntryRef")
    notification: SideEffectPayload
    calendar_entry: SideEffectPayload = Field(serialization_alias="calendarEntry")

    @classmethod
    def from_domain(cls, event: PlantEvent) -> "EventPayload":
        return cls(
            id=event.id,
            title=event.title,
            plant=event.plant,
            description=event.description,
            scheduled_at=event.scheduled_at.isoformat(),
            notification_ref=event.notification_ref,
            calendar_entry_ref=event.calendar_entry_ref,
            notification=SideEffectPayload.from_domain(event.notification),
            calendar_entry=SideEffectPayload.from_domain(event.calendar_entry),
        )


class ValidationErrorPayload(BaseModel):
    reason: str
    fields: List[str] = Field(default_factory=list)
    message: str

    @classmethod
    def from_error(cls, error: ValidationError) -> "ValidationErrorPayload":
        return cls(reason=error.reason.value, fields=list(error.fields), message=error.message)
