from .communication import (
    AnnouncementCommentCreate,
    AnnouncementCommentRead,
    AnnouncementCreate,
    AnnouncementMarkRead,
    AnnouncementMarkReadResult,
    AnnouncementRead,
    AnnouncementUpdate,
    AttachmentSchema,
    CommunicationStatsRead,
    MessageCreate,
    MessageRead,
    MessageUpdate,
    ReadReceiptRead,
)
from .notification import (
    NotificationActionSchema,
    NotificationCountRead,
    NotificationCreate,
    NotificationEventTrigger,
    NotificationMarkReadResult,
    NotificationRead,
)
from .preferences import (
    EmailPreferencesSchema,
    InAppPreferencesSchema,
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
    PushPreferencesSchema,
    QuietHoursSchema,
    SmsPreferencesSchema,
)

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
    "NotificationActionSchema",
    "NotificationCountRead",
    "NotificationCreate",
    "NotificationEventTrigger",
    "NotificationMarkReadResult",
    "NotificationRead",
    "EmailPreferencesSchema",
    "InAppPreferencesSchema",
    "NotificationPreferencesRead",
    "NotificationPreferencesUpdate",
    "PushPreferencesSchema",
    "QuietHoursSchema",
    "SmsPreferencesSchema",
]
