"""Track which products already triggered a low-stock notification."""

from __future__ import annotations

import json
import logging
import threading

from agricomms.infrastructure.storage import KeyValueStore, StorageReadError

logger = logging.getLogger(__name__)


class NotifiedProductRepository:
    """Persist the set of product identifiers reported to each user."""

    def __init__(
        self, store: KeyValueStore, *, namespace: str = "merchant_lowstock_notified"
    ) -> None:
        self.store = store
        self.namespace = namespace
        self._lock = threading.RLock()

    def key_for(self, user_id: str) -> str:
        return f"{self.namespace}_{user_id}"

    def list_for_user(self, user_id: str) -> set[str]:
        try:
            raw = self.store.get(self.key_for(user_id))
        except StorageReadError as exc:
            logger.warning("Could not read low-stock markers for user %s: %s", user_id, exc)
            return set()
        if raw is None:
            return set()
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable low-stock markers for user %s", user_id)
            return set()
        if not isinstance(payload, list):
            return set()
        return {str(item) for item in payload}

    def add(self, user_id: str, product_id: str) -> None:
        with self._lock:
            notified = self.list_for_user(user_id)
            notified.add(product_id)
            self.store.set(self.key_for(user_id), json.dumps(sorted(notified)))

    def discard(self, user_id: str, product_id: str) -> None:
        """Forget ``product_id`` so a future shortage is reported again."""

        with self._lock:
            notified = self.list_for_user(user_id)
            if product_id not in notified:
                return
            notified.discard(product_id)
            self.store.set(self.key_for(user_id), json.dumps(sorted(notified)))


__all__ = ["NotifiedProductRepository"]
