"""Public helpers for emitting and managing user notifications."""

from .events import (
    EVENT_CATALOG,
    fire_event,
    notify_account_locked,
    notify_email_verified,
    notify_login_failed,
    notify_login_success,
    notify_low_stock,
    notify_maintenance,
    notify_new_device_login,
    notify_new_order,
    notify_password_changed,
    notify_payment_received,
    notify_session_expiring,
    notify_suspicious_activity,
    notify_system_update,
)
from .preferences import (
    get_notification_preferences,
    is_within_quiet_hours,
    update_notification_preferences,
)
from .service import NotificationService

__all__ = [
    "EVENT_CATALOG",
    "NotificationService",
    "fire_event",
    "get_notification_preferences",
    "is_within_quiet_hours",
    "notify_account_locked",
    "notify_email_verified",
    "notify_login_failed",
    "notify_login_success",
    "notify_low_stock",
    "notify_maintenance",
    "notify_new_device_login",
    "notify_new_order",
    "notify_password_changed",
    "notify_payment_received",
    "notify_session_expiring",
    "notify_suspicious_activity",
    "notify_system_update",
    "update_notification_preferences",
]
