"""Persistence helpers for per-user notification lists."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from agricomms.domain.entities import NotificationAction, NotificationRecord
from agricomms.infrastructure.storage import KeyValueStore, StorageReadError
from agricomms.utils import parse_iso, to_iso

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Load and store the notification list of each user as a JSON array."""

    def __init__(self, store: KeyValueStore, *, namespace: str = "user_notifications") -> None:
        self.store = store
        self.namespace = namespace

    def key_for(self, user_id: str) -> str:
        return f"{self.namespace}_{user_id}"

    def list_for_user(self, user_id: str) -> list[NotificationRecord]:
        """Return every stored notification for ``user_id``, newest first.

        Missing or unreadable data yields an empty list; the feed is best
        effort and a corrupt entry must never break the caller.
        """

        key = self.key_for(user_id)
        try:
            raw = self.store.get(key)
        except StorageReadError as exc:
            logger.warning("Could not read notifications for user %s: %s", user_id, exc)
            return []
        if raw is None:
            return []

        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("Stored notifications must be a JSON array")
            notifications = [self._to_entity(item) for item in payload]
        except (ValueError, TypeError, KeyError, AttributeError, OverflowError) as exc:
            logger.warning("Discarding unreadable notifications stored under %s: %s", key, exc)
            return []

        # ``sorted`` is stable, so records sharing a timestamp keep their stored order.
        return sorted(notifications, key=lambda item: item.timestamp, reverse=True)

    def save_for_user(self, user_id: str, notifications: Sequence[NotificationRecord]) -> None:
        """Persist ``notifications`` as the complete list for ``user_id``."""

        payload = [self._to_payload(notification) for notification in notifications]
        self.store.set(self.key_for(user_id), json.dumps(payload, ensure_ascii=False))

    def remove_for_user(self, user_id: str) -> None:
        self.store.remove(self.key_for(user_id))

    @staticmethod
    def _to_payload(notification: NotificationRecord) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": notification.id,
            "type": notification.type,
            "title": notification.title,
            "message": notification.message,
            "timestamp": to_iso(notification.timestamp),
            "isRead": notification.is_read,
            "priority": notification.priority,
            "category": notification.category,
            "actions": [
                {"label": action.label, "action": action.action, "style": action.style}
                for action in notification.actions
            ],
            "metadata": notification.metadata or {},
        }
        if notification.read_at is not None:
            payload["readAt"] = to_iso(notification.read_at)
        if notification.action_url:
            payload["actionUrl"] = notification.action_url
        return payload

    @staticmethod
    def _to_entity(payload: dict[str, Any]) -> NotificationRecord:
        timestamp = parse_iso(payload["timestamp"])
        if timestamp is None:
            raise ValueError("Notification timestamp is required")
        return NotificationRecord(
            id=str(payload["id"]),
            type=payload["type"],
            title=payload["title"],
            message=payload["message"],
            timestamp=timestamp,
            is_read=bool(payload.get("isRead", False)),
            priority=payload["priority"],
            category=payload["category"],
            actions=[
                NotificationAction(
                    label=action["label"],
                    action=action["action"],
                    style=action.get("style"),
                )
                for action in payload.get("actions") or []
            ],
            metadata=dict(payload.get("metadata") or {}),
            read_at=parse_iso(payload.get("readAt")),
            action_url=payload.get("actionUrl"),
        )


__all__ = ["NotificationRepository"]
