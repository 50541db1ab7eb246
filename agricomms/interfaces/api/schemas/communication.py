"""Schemas for cooperative message and announcement endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MessageType = Literal["announcement", "alert", "reminder", "information"]
MessagePriority = Literal["low", "medium", "high", "urgent"]
MessageStatus = Literal["draft", "sent", "delivered", "read"]
AnnouncementType = Literal["general", "important", "emergency"]
AnnouncementStatus = Literal["draft", "published", "archived"]
AnnouncementVisibility = Literal["all", "members", "committee", "staff"]


class AttachmentSchema(BaseModel):
    name: str
    type: str
    size: str
    url: str

    model_config = ConfigDict(from_attributes=True)


class ReadReceiptRead(BaseModel):
    member_id: str
    member_name: str
    read_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AnnouncementCommentRead(BaseModel):
    id: str
    author: str
    author_role: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageCreate(BaseModel):
    """Payload required to draft a message."""

    subject: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    type: MessageType
    priority: MessagePriority = "medium"
    sender: str = Field(..., min_length=1)
    sender_role: str = Field(..., min_length=1)
    recipients: list[str] = Field(default_factory=list)
    target_groups: list[str] = Field(default_factory=list)
    scheduled_at: datetime | None = None
    attachments: list[AttachmentSchema] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class MessageUpdate(BaseModel):
    subject: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    type: MessageType | None = None
    priority: MessagePriority | None = None
    status: MessageStatus | None = None
    recipients: list[str] | None = None
    target_groups: list[str] | None = None
    scheduled_at: datetime | None = None
    attachments: list[AttachmentSchema] | None = None

    model_config = ConfigDict(extra="forbid")


class MessageRead(BaseModel):
    id: str
    subject: str
    content: str
    type: str
    priority: str
    sender: str
    sender_role: str
    recipients: list[str]
    target_groups: list[str]
    status: str
    created_at: datetime
    scheduled_at: datetime | None = None
    delivered_at: datetime | None = None
    read_at: datetime | None = None
    attachments: list[AttachmentSchema] = Field(default_factory=list)
    read_by: list[ReadReceiptRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class AnnouncementCreate(BaseModel):
    """Payload required to create an announcement."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    type: AnnouncementType = "general"
    author: str = Field(..., min_length=1)
    author_role: str = Field(..., min_length=1)
    visibility: AnnouncementVisibility = "all"
    status: AnnouncementStatus = "draft"
    expires_at: datetime | None = None
    attachments: list[AttachmentSchema] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class AnnouncementUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    type: AnnouncementType | None = None
    visibility: AnnouncementVisibility | None = None
    expires_at: datetime | None = None
    attachments: list[AttachmentSchema] | None = None

    model_config = ConfigDict(extra="forbid")


class AnnouncementRead(BaseModel):
    id: str
    title: str
    content: str
    type: str
    author: str
    author_role: str
    status: str
    visibility: str
    created_at: datetime
    updated_at: datetime
    read_count: int
    expires_at: datetime | None = None
    attachments: list[AttachmentSchema] = Field(default_factory=list)
    comments: list[AnnouncementCommentRead] = Field(default_factory=list)
    read_by: list[ReadReceiptRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class AnnouncementMarkRead(BaseModel):
    member_id: str = Field(..., min_length=1)
    member_name: str = Field(..., min_length=1)


class AnnouncementMarkReadResult(BaseModel):
    recorded: bool


class AnnouncementCommentCreate(BaseModel):
    author: str = Field(..., min_length=1)
    author_role: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class CommunicationStatsRead(BaseModel):
    total_messages: int
    unread_messages: int
    total_announcements: int
    recent_announcements: int
    delivery_rate: int = Field(..., ge=0, le=100)
    read_rate: int = Field(..., ge=0, le=100)

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "AnnouncementCommentCreate",
    "AnnouncementCommentRead",
    "AnnouncementCreate",
    "AnnouncementMarkRead",
    "AnnouncementMarkReadResult",
    "AnnouncementRead",
    "AnnouncementUpdate",
    "AttachmentSchema",
    "CommunicationStatsRead",
    "MessageCreate",
    "MessageRead",
    "MessageUpdate",
    "ReadReceiptRead",
]
