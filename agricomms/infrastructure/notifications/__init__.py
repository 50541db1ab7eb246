"""Realtime notification helpers for the infrastructure layer."""

from .listeners import NotificationListener, NotificationListenerRegistry
from .publisher import NotificationPublisher, serialize_notification

__all__ = [
    "NotificationListener",
    "NotificationListenerRegistry",
    "NotificationPublisher",
    "serialize_notification",
]
