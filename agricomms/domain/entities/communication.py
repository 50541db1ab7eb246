"""Domain entities for cooperative messages and announcements."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

MESSAGE_TYPES = frozenset({"announcement", "alert", "reminder", "information"})

MESSAGE_STATUS_DRAFT = "draft"
MESSAGE_STATUS_SENT = "sent"
MESSAGE_STATUS_DELIVERED = "delivered"
MESSAGE_STATUS_READ = "read"
MESSAGE_STATUSES = frozenset(
    {MESSAGE_STATUS_DRAFT, MESSAGE_STATUS_SENT, MESSAGE_STATUS_DELIVERED, MESSAGE_STATUS_READ}
)

ANNOUNCEMENT_TYPES = frozenset({"general", "important", "emergency"})

ANNOUNCEMENT_STATUS_DRAFT = "draft"
ANNOUNCEMENT_STATUS_PUBLISHED = "published"
ANNOUNCEMENT_STATUS_ARCHIVED = "archived"
ANNOUNCEMENT_STATUSES = frozenset(
    {ANNOUNCEMENT_STATUS_DRAFT, ANNOUNCEMENT_STATUS_PUBLISHED, ANNOUNCEMENT_STATUS_ARCHIVED}
)

ANNOUNCEMENT_VISIBILITIES = frozenset({"all", "members", "committee", "staff"})

# Filter value meaning "do not filter on this field".
FILTER_ALL = "all"


@dataclass
class Attachment:
    """File attached to a message or an announcement."""

    name: str
    type: str
    size: str
    url: str


@dataclass
class ReadReceipt:
    """Record of a member having read a message or an announcement."""

    member_id: str
    member_name: str
    read_at: datetime


@dataclass
class AnnouncementComment:
    id: str
    author: str
    author_role: str
    content: str
    created_at: datetime


@dataclass
class Message:
    """Communication sent by the cooperative to a set of recipients.

    ``status`` is a single aggregate value for the whole message; it does not
    track delivery per recipient.
    """

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
    attachments: list[Attachment] = field(default_factory=list)
    read_by: list[ReadReceipt] = field(default_factory=list)


@dataclass
class Announcement:
    """Broadcast post published to the cooperative."""

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
    read_count: int = 0
    expires_at: datetime | None = None
    attachments: list[Attachment] = field(default_factory=list)
    comments: list[AnnouncementComment] = field(default_factory=list)
    read_by: list[ReadReceipt] = field(default_factory=list)

    def has_been_read_by(self, member_id: str) -> bool:
        """Return ``True`` when ``member_id`` already appears in ``read_by``."""

        return any(receipt.member_id == member_id for receipt in self.read_by)


@dataclass
class CommunicationStats:
    """Aggregated counters describing the cooperative's communications."""

    total_messages: int
    unread_messages: int
    total_announcements: int
    recent_announcements: int
    delivery_rate: int
    read_rate: int


__all__ = [
    "Announcement",
    "AnnouncementComment",
    "Attachment",
    "CommunicationStats",
    "Message",
    "ReadReceipt",
    "ANNOUNCEMENT_STATUSES",
    "ANNOUNCEMENT_TYPES",
    "ANNOUNCEMENT_VISIBILITIES",
    "FILTER_ALL",
    "MESSAGE_STATUSES",
    "MESSAGE_TYPES",
]
