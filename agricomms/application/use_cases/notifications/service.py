"""Per-user notification feed: storage, read state, retention and listeners."""

from __future__ import annotations

import json
import logging
import secrets
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import timedelta

from agricomms.domain.entities import NotificationDraft, NotificationRecord
from agricomms.infrastructure.notifications import (
    NotificationListener,
    NotificationListenerRegistry,
    serialize_notification,
)
from agricomms.infrastructure.repositories import NotificationRepository
from agricomms.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MAX_NOTIFICATIONS = 1000
DEFAULT_DAYS_TO_KEEP = 30

# Marks an omitted ``limit``; ``None`` already means "no limit".
_DEFAULT = object()


def generate_notification_id() -> str:
    """Return a new identifier of the form ``notif_<epoch-ms>_<random>``."""

    millis = int(now_in_app_timezone().timestamp() * 1000)
    return f"notif_{millis}_{secrets.token_hex(5)}"


class NotificationService:
    """Manage the notification feed of every user.

    Every mutation writes the complete list back to the repository and then
    hands the fresh list to the user's listeners. Mutations are serialized by
    a re-entrant ``lock`` so a listener may call back into the service.
    """

    def __init__(
        self,
        repository: NotificationRepository,
        listeners: NotificationListenerRegistry,
        *,
        max_notifications: int = MAX_NOTIFICATIONS,
        default_limit: int = DEFAULT_LIMIT,
        retention_days: int = DEFAULT_DAYS_TO_KEEP,
    ) -> None:
        self.repository = repository
        self.listeners = listeners
        self.max_notifications = max_notifications
        self.default_limit = default_limit
        self.retention_days = retention_days
        self.lock = threading.RLock()

    # Read side -------------------------------------------------------------

    def get_user_notifications(
        self, user_id: str, limit: int | None | object = _DEFAULT
    ) -> list[NotificationRecord]:
        """Return up to ``limit`` notifications, newest first (``None`` for all).

        An omitted ``limit`` uses ``default_limit``.
        """

        if limit is _DEFAULT:
            limit = self.default_limit
        notifications = self.repository.list_for_user(user_id)
        if limit is None:
            return notifications
        return notifications[: max(limit, 0)]

    def get_unread_notifications(self, user_id: str) -> list[NotificationRecord]:
        return [n for n in self.repository.list_for_user(user_id) if not n.is_read]

    def get_unread_count(self, user_id: str) -> int:
        return len(self.get_unread_notifications(user_id))

    def get_notifications_by_category(self, user_id: str, category: str) -> list[NotificationRecord]:
        return [n for n in self.repository.list_for_user(user_id) if n.category == category]

    def get_notifications_by_priority(self, user_id: str, priority: str) -> list[NotificationRecord]:
        return [n for n in self.repository.list_for_user(user_id) if n.priority == priority]

    def get_notifications_by_type(self, user_id: str, notification_type: str) -> list[NotificationRecord]:
        return [n for n in self.repository.list_for_user(user_id) if n.type == notification_type]

    def export_notifications(self, user_id: str) -> str:
        """Return the full feed as pretty-printed JSON for a user download."""

        notifications = self.repository.list_for_user(user_id)
        return json.dumps(
            [serialize_notification(notification) for notification in notifications],
            indent=2,
            ensure_ascii=False,
        )

    # Mutations -------------------------------------------------------------

    def add_notification(self, user_id: str, data: NotificationDraft) -> NotificationRecord:
        """Stamp ``data``, store it first in the feed and return the record.

        The feed is truncated to ``max_notifications`` entries, dropping the
        oldest ones.
        """

        notification = NotificationRecord(
            id=generate_notification_id(),
            type=data.type,
            title=data.title,
            message=data.message,
            timestamp=now_in_app_timezone(),
            is_read=False,
            priority=data.priority,
            category=data.category,
            actions=list(data.actions),
            metadata=dict(data.metadata),
            action_url=data.action_url,
        )
        with self.lock:
            notifications = self.repository.list_for_user(user_id)
            notifications.insert(0, notification)
            if len(notifications) > self.max_notifications:
                dropped = len(notifications) - self.max_notifications
                del notifications[self.max_notifications :]
                logger.debug("Dropped %s old notifications for user %s", dropped, user_id)
            self.repository.save_for_user(user_id, notifications)
            self._notify(user_id)
        return notification

    def mark_as_read(self, user_id: str, notification_id: str) -> bool:
        """Mark one notification as read; ``False`` when missing or already read."""

        with self.lock:
            notifications = self.repository.list_for_user(user_id)
            for index, notification in enumerate(notifications):
                if notification.id != notification_id:
                    continue
                if notification.is_read:
                    return False
                notifications[index] = replace(
                    notification, is_read=True, read_at=now_in_app_timezone()
                )
                self.repository.save_for_user(user_id, notifications)
                self._notify(user_id)
                return True
        return False

    def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification as read and return how many changed."""

        with self.lock:
            notifications = self.repository.list_for_user(user_id)
            now = now_in_app_timezone()
            marked = 0
            for index, notification in enumerate(notifications):
                if notification.is_read:
                    continue
                notifications[index] = replace(notification, is_read=True, read_at=now)
                marked += 1
            if marked:
                self.repository.save_for_user(user_id, notifications)
                self._notify(user_id)
        return marked

    def delete_notification(self, user_id: str, notification_id: str) -> bool:
        with self.lock:
            notifications = self.repository.list_for_user(user_id)
            remaining = [n for n in notifications if n.id != notification_id]
            if len(remaining) == len(notifications):
                return False
            self.repository.save_for_user(user_id, remaining)
            self._notify(user_id)
        return True

    def clear_all_notifications(self, user_id: str) -> int:
        """Remove the whole feed and return the number of discarded records."""

        with self.lock:
            count = len(self.repository.list_for_user(user_id))
            if count:
                self.repository.remove_for_user(user_id)
                self._notify(user_id)
        return count

    def cleanup_old_notifications(self, user_id: str, days_to_keep: int | None = None) -> int:
        """Drop notifications older than ``days_to_keep`` days; return the count.

        ``days_to_keep`` defaults to ``retention_days``.
        """

        if days_to_keep is None:
            days_to_keep = self.retention_days
        cutoff = now_in_app_timezone() - timedelta(days=days_to_keep)
        with self.lock:
            notifications = self.repository.list_for_user(user_id)
            kept = [n for n in notifications if n.timestamp > cutoff]
            removed = len(notifications) - len(kept)
            if removed:
                self.repository.save_for_user(user_id, kept)
                self._notify(user_id)
        return removed

    # Listeners -------------------------------------------------------------

    def add_notification_listener(
        self, user_id: str, callback: NotificationListener
    ) -> Callable[[], None]:
        """Subscribe ``callback`` to ``user_id``'s feed; returns ``unsubscribe``."""

        return self.listeners.add_listener(user_id, callback)

    def _notify(self, user_id: str) -> None:
        self.listeners.notify(user_id, lambda: self.repository.list_for_user(user_id))


__all__ = ["NotificationService", "generate_notification_id"]
