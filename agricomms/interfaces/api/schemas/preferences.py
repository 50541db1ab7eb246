"""Schemas for notification preference endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class QuietHoursSchema(BaseModel):
    enabled: bool
    start: str = Field(..., description="Heure de début au format HH:MM")
    end: str = Field(..., description="Heure de fin au format HH:MM")

    model_config = ConfigDict(from_attributes=True)


class EmailPreferencesSchema(BaseModel):
    enabled: bool
    types: list[str]
    frequency: str

    model_config = ConfigDict(from_attributes=True)


class PushPreferencesSchema(BaseModel):
    enabled: bool
    types: list[str]
    quiet_hours: QuietHoursSchema

    model_config = ConfigDict(from_attributes=True)


class SmsPreferencesSchema(BaseModel):
    enabled: bool
    types: list[str]

    model_config = ConfigDict(from_attributes=True)


class InAppPreferencesSchema(BaseModel):
    enabled: bool
    max_unread: int

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferencesRead(BaseModel):
    email: EmailPreferencesSchema
    push: PushPreferencesSchema
    sms: SmsPreferencesSchema
    in_app: InAppPreferencesSchema

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferencesUpdate(BaseModel):
    """Partial update; each supplied channel replaces the stored one."""

    email: EmailPreferencesSchema | None = None
    push: PushPreferencesSchema | None = None
    sms: SmsPreferencesSchema | None = None
    in_app: InAppPreferencesSchema | None = None

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "EmailPreferencesSchema",
    "InAppPreferencesSchema",
    "NotificationPreferencesRead",
    "NotificationPreferencesUpdate",
    "PushPreferencesSchema",
    "QuietHoursSchema",
    "SmsPreferencesSchema",
]
