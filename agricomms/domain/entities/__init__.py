"""Domain entities exposed by the application."""

from .communication import (
    ANNOUNCEMENT_STATUS_ARCHIVED,
    ANNOUNCEMENT_STATUS_DRAFT,
    ANNOUNCEMENT_STATUS_PUBLISHED,
    ANNOUNCEMENT_STATUSES,
    ANNOUNCEMENT_TYPES,
    ANNOUNCEMENT_VISIBILITIES,
    FILTER_ALL,
    MESSAGE_STATUS_DELIVERED,
    MESSAGE_STATUS_DRAFT,
    MESSAGE_STATUS_READ,
    MESSAGE_STATUS_SENT,
    MESSAGE_STATUSES,
    MESSAGE_TYPES,
    Announcement,
    AnnouncementComment,
    Attachment,
    CommunicationStats,
    Message,
    ReadReceipt,
)
from .notification import (
    CATEGORIES,
    KNOWN_ACTIONS,
    NOTIFICATION_TYPES,
    PRIORITIES,
    NotificationAction,
    NotificationDraft,
    NotificationRecord,
)
from .preferences import (
    CHANNELS,
    FREQUENCIES,
    EmailPreferences,
    InAppPreferences,
    NotificationPreferences,
    PushPreferences,
    QuietHours,
    SmsPreferences,
    default_preferences,
)

__all__ = [
    "Announcement",
    "AnnouncementComment",
    "Attachment",
    "CommunicationStats",
    "Message",
    "ReadReceipt",
    "ANNOUNCEMENT_STATUS_ARCHIVED",
    "ANNOUNCEMENT_STATUS_DRAFT",
    "ANNOUNCEMENT_STATUS_PUBLISHED",
    "ANNOUNCEMENT_STATUSES",
    "ANNOUNCEMENT_TYPES",
    "ANNOUNCEMENT_VISIBILITIES",
    "FILTER_ALL",
    "MESSAGE_STATUS_DELIVERED",
    "MESSAGE_STATUS_DRAFT",
    "MESSAGE_STATUS_READ",
    "MESSAGE_STATUS_SENT",
    "MESSAGE_STATUSES",
    "MESSAGE_TYPES",
    "NotificationAction",
    "NotificationDraft",
    "NotificationRecord",
    "CATEGORIES",
    "KNOWN_ACTIONS",
    "NOTIFICATION_TYPES",
    "PRIORITIES",
    "CHANNELS",
    "FREQUENCIES",
    "EmailPreferences",
    "InAppPreferences",
    "NotificationPreferences",
    "PushPreferences",
    "QuietHours",
    "SmsPreferences",
    "default_preferences",
]
