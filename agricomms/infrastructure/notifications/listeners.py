"""Registry of in-process callbacks interested in a user's notifications."""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from collections.abc import Callable
from typing import DefaultDict

from agricomms.domain.entities import NotificationRecord

logger = logging.getLogger(__name__)

NotificationListener = Callable[[list[NotificationRecord]], None]


class NotificationListenerRegistry:
    """Keep listener callbacks grouped by user.

    Each subscription gets its own random token so several subscribers for the
    same user never replace one another. Callbacks run synchronously in the
    thread that performed the mutation; their relative order is unspecified.

    A listener that mutates the same user's notifications while being
    notified does not recurse: the registry runs one more round with a fresh
    snapshot after the current one, at most ``max_rounds`` rounds per call.
    """

    def __init__(self, *, max_rounds: int = 5) -> None:
        self._listeners: DefaultDict[str, dict[str, NotificationListener]] = defaultdict(dict)
        self._max_rounds = max_rounds
        self._dispatching: set[str] = set()
        self._pending: set[str] = set()

    def add_listener(self, user_id: str, callback: NotificationListener) -> Callable[[], None]:
        """Register ``callback`` for ``user_id`` and return its unsubscribe function."""

        token = uuid.uuid4().hex
        self._listeners[user_id][token] = callback

        def unsubscribe() -> None:
            listeners = self._listeners.get(user_id)
            if listeners is None:
                return
            listeners.pop(token, None)
            if not listeners:
                self._listeners.pop(user_id, None)

        return unsubscribe

    def listener_count(self, user_id: str) -> int:
        return len(self._listeners.get(user_id, {}))

    def notify(self, user_id: str, load: Callable[[], list[NotificationRecord]]) -> None:
        """Invoke every listener of ``user_id`` with the list returned by ``load``."""

        if user_id in self._dispatching:
            self._pending.add(user_id)
            return
        if not self._listeners.get(user_id):
            return

        self._dispatching.add(user_id)
        try:
            for _round in range(self._max_rounds):
                self._pending.discard(user_id)
                notifications = load()
                for callback in list(self._listeners.get(user_id, {}).values()):
                    try:
                        callback(list(notifications))
                    except Exception:
                        logger.exception("Notification listener failed for user %s", user_id)
                if user_id not in self._pending:
                    return
            logger.warning(
                "Stopped notifying listeners of user %s after %s re-entrant rounds",
                user_id,
                self._max_rounds,
            )
        finally:
            self._pending.discard(user_id)
            self._dispatching.discard(user_id)


__all__ = ["NotificationListener", "NotificationListenerRegistry"]
