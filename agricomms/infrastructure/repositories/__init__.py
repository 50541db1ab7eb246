"""Repository implementations for infrastructure layer."""

from .cooperative_repository import AnnouncementRepository, MessageRepository
from .low_stock_repository import NotifiedProductRepository
from .notification_repository import NotificationRepository
from .preference_repository import NotificationPreferenceRepository

__all__ = [
    "AnnouncementRepository",
    "MessageRepository",
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "NotifiedProductRepository",
]
