"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

NotificationType = Literal[
    "info",
    "success",
    "warning",
    "error",
    "order_update",
    "new_offer",
    "price_drop",
    "review_response",
    "payment_status",
    "delivery_update",
    "system",
]
NotificationPriority = Literal["low", "medium", "high", "urgent"]
NotificationCategory = Literal["auth", "security", "system", "user", "business"]
ActionStyle = Literal["primary", "secondary", "danger"]


class NotificationActionSchema(BaseModel):
    """Follow-up action attached to a notification."""

    label: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1, description="Identifiant de l'action")
    style: ActionStyle | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationCreate(BaseModel):
    """Payload used to add a notification to a user's feed."""

    type: NotificationType
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    priority: NotificationPriority = "medium"
    category: NotificationCategory = "system"
    actions: list[NotificationActionSchema] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    action_url: str | None = None

    model_config = ConfigDict(extra="forbid")


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    type: str
    title: str
    message: str
    timestamp: datetime
    is_read: bool
    priority: str
    category: str
    actions: list[NotificationActionSchema] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    read_at: datetime | None = None
    action_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationEventTrigger(BaseModel):
    """Keyword parameters forwarded to a catalog event."""

    params: dict[str, Any] = Field(default_factory=dict)


class NotificationCountRead(BaseModel):
    count: int


class NotificationMarkReadResult(BaseModel):
    updated: bool


__all__ = [
    "NotificationActionSchema",
    "NotificationCountRead",
    "NotificationCreate",
    "NotificationEventTrigger",
    "NotificationMarkReadResult",
    "NotificationRead",
]
