"""Aggregate application use cases."""

from .notifications import NotificationService, fire_event

__all__ = [
    "NotificationService",
    "fire_event",
]
