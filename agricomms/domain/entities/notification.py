"""Domain entities describing per-user notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NOTIFICATION_TYPE_INFO = "info"
NOTIFICATION_TYPE_SUCCESS = "success"
NOTIFICATION_TYPE_WARNING = "warning"
NOTIFICATION_TYPE_ERROR = "error"

# Marketplace feed kinds.
NOTIFICATION_TYPE_ORDER_UPDATE = "order_update"
NOTIFICATION_TYPE_NEW_OFFER = "new_offer"
NOTIFICATION_TYPE_PRICE_DROP = "price_drop"
NOTIFICATION_TYPE_REVIEW_RESPONSE = "review_response"
NOTIFICATION_TYPE_PAYMENT_STATUS = "payment_status"
NOTIFICATION_TYPE_DELIVERY_UPDATE = "delivery_update"
NOTIFICATION_TYPE_SYSTEM = "system"

NOTIFICATION_TYPES = frozenset(
    {
        NOTIFICATION_TYPE_INFO,
        NOTIFICATION_TYPE_SUCCESS,
        NOTIFICATION_TYPE_WARNING,
        NOTIFICATION_TYPE_ERROR,
        NOTIFICATION_TYPE_ORDER_UPDATE,
        NOTIFICATION_TYPE_NEW_OFFER,
        NOTIFICATION_TYPE_PRICE_DROP,
        NOTIFICATION_TYPE_REVIEW_RESPONSE,
        NOTIFICATION_TYPE_PAYMENT_STATUS,
        NOTIFICATION_TYPE_DELIVERY_UPDATE,
        NOTIFICATION_TYPE_SYSTEM,
    }
)

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"
PRIORITIES = frozenset({PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH, PRIORITY_URGENT})

CATEGORY_AUTH = "auth"
CATEGORY_SECURITY = "security"
CATEGORY_SYSTEM = "system"
CATEGORY_USER = "user"
CATEGORY_BUSINESS = "business"
CATEGORIES = frozenset(
    {CATEGORY_AUTH, CATEGORY_SECURITY, CATEGORY_SYSTEM, CATEGORY_USER, CATEGORY_BUSINESS}
)

ACTION_STYLE_PRIMARY = "primary"
ACTION_STYLE_SECONDARY = "secondary"
ACTION_STYLE_DANGER = "danger"
ACTION_STYLES = frozenset({ACTION_STYLE_PRIMARY, ACTION_STYLE_SECONDARY, ACTION_STYLE_DANGER})

# Follow-up actions understood by the clients. Any other identifier is kept
# verbatim so newer clients can introduce actions without a server change.
ACTION_SECURE_ACCOUNT = "secure_account"
ACTION_RECOGNIZE_DEVICE = "recognize_device"
ACTION_UNLOCK_ACCOUNT = "unlock_account"
ACTION_EXTEND_SESSION = "extend_session"
ACTION_CHECK_ACTIVITY = "check_activity"
ACTION_VIEW_ORDER = "view_order"
ACTION_VIEW_PRODUCT = "view_product"
KNOWN_ACTIONS = frozenset(
    {
        ACTION_SECURE_ACCOUNT,
        ACTION_RECOGNIZE_DEVICE,
        ACTION_UNLOCK_ACCOUNT,
        ACTION_EXTEND_SESSION,
        ACTION_CHECK_ACTIVITY,
        ACTION_VIEW_ORDER,
        ACTION_VIEW_PRODUCT,
    }
)


@dataclass(frozen=True)
class NotificationAction:
    """Follow-up action offered to the user alongside a notification."""

    label: str
    action: str
    style: str | None = None

    @property
    def is_known(self) -> bool:
        """Return ``True`` when ``action`` is one of the built-in action kinds."""

        return self.action in KNOWN_ACTIONS


@dataclass
class NotificationDraft:
    """Content of a notification before the store stamps it."""

    type: str
    title: str
    message: str
    priority: str
    category: str
    actions: list[NotificationAction] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    action_url: str | None = None


@dataclass
class NotificationRecord:
    """Informational message delivered to a specific user."""

    id: str
    type: str
    title: str
    message: str
    timestamp: datetime
    is_read: bool
    priority: str
    category: str
    actions: list[NotificationAction] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    read_at: datetime | None = None
    action_url: str | None = None


__all__ = [
    "NotificationAction",
    "NotificationDraft",
    "NotificationRecord",
    "NOTIFICATION_TYPES",
    "PRIORITIES",
    "CATEGORIES",
    "ACTION_STYLES",
    "KNOWN_ACTIONS",
]
