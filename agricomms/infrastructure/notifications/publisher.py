"""Utility helpers to push notification snapshots to websocket subscribers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

from anyio import from_thread
from fastapi import WebSocket

from agricomms.domain.entities import NotificationRecord
from agricomms.utils import to_iso

from .listeners import NotificationListenerRegistry


class NotificationPublisher:
    """Bridge the synchronous listener registry to websocket connections."""

    def __init__(self, registry: NotificationListenerRegistry) -> None:
        self._registry = registry

    def subscribe(self, user_id: str, websocket: WebSocket) -> Callable[[], None]:
        """Forward every change of ``user_id``'s feed to ``websocket``.

        Returns the unsubscribe function of the underlying listener.
        """

        def _on_change(notifications: list[NotificationRecord]) -> None:
            self.dispatch(websocket, notifications)

        return self._registry.add_listener(user_id, _on_change)

    def dispatch(self, websocket: WebSocket, notifications: Sequence[NotificationRecord]) -> None:
        """Schedule delivery of the ``notifications`` snapshot to ``websocket``."""

        message = {
            "type": "notifications",
            "data": [serialize_notification(notification) for notification in notifications],
        }
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called from a worker thread started by the event loop.
            from_thread.run(websocket.send_json, message)
        else:
            loop.create_task(websocket.send_json(message))


def serialize_notification(notification: NotificationRecord) -> dict[str, Any]:
    """Return a JSON-serializable representation of ``notification``."""

    return {
        "id": notification.id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "timestamp": to_iso(notification.timestamp),
        "is_read": notification.is_read,
        "priority": notification.priority,
        "category": notification.category,
        "actions": [
            {"label": action.label, "action": action.action, "style": action.style}
            for action in notification.actions
        ],
        "metadata": notification.metadata or {},
        "read_at": to_iso(notification.read_at),
        "action_url": notification.action_url,
    }


__all__ = ["NotificationPublisher", "serialize_notification"]
