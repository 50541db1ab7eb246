"""Persistence helpers for the cooperative message and announcement registries."""

from __future__ import annotations

import copy
import json
import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, Generic, TypeVar

from agricomms.domain.entities import Announcement, Message
from agricomms.infrastructure.storage import KeyValueStore, StorageReadError

from .communication_payloads import (
    announcement_from_payload,
    announcement_to_payload,
    message_from_payload,
    message_to_payload,
)

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", Message, Announcement)


class _CooperativeCollectionRepository(Generic[EntityT]):
    """Store one JSON array of entities per cooperative.

    When a cooperative has never been written to, ``seed`` (if given) provides
    the initial content. Once anything is persisted the stored list wins, even
    when it is empty.
    """

    entity_label = "entity"

    def __init__(
        self,
        store: KeyValueStore,
        *,
        namespace: str,
        to_payload: Callable[[EntityT], dict[str, Any]],
        from_payload: Callable[[dict[str, Any]], EntityT],
        seed: Callable[[], Sequence[EntityT]] | None = None,
    ) -> None:
        self.store = store
        self.namespace = namespace
        self._to_payload = to_payload
        self._from_payload = from_payload
        self._seed = seed
        # Held by callers across a whole read-modify-write of a cooperative list.
        self.lock = threading.RLock()

    def key_for(self, cooperative_id: str) -> str:
        return f"{self.namespace}_{cooperative_id}"

    def list(self, cooperative_id: str) -> list[EntityT]:
        key = self.key_for(cooperative_id)
        try:
            raw = self.store.get(key)
        except StorageReadError as exc:
            logger.warning("Could not read %s list under %s: %s", self.entity_label, key, exc)
            return []
        if raw is None:
            return [copy.deepcopy(item) for item in self._seed()] if self._seed else []

        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("Stored registry must be a JSON array")
            return [self._from_payload(item) for item in payload]
        except (ValueError, TypeError, KeyError, AttributeError, OverflowError) as exc:
            logger.warning("Discarding unreadable %s list under %s: %s", self.entity_label, key, exc)
            return []

    def get(self, cooperative_id: str, entity_id: str) -> EntityT | None:
        for item in self.list(cooperative_id):
            if item.id == entity_id:
                return item
        return None

    def create(self, cooperative_id: str, entity: EntityT) -> EntityT:
        with self.lock:
            items = self.list(cooperative_id)
            if any(item.id == entity.id for item in items):
                msg = f"{self.entity_label} with id {entity.id} already exists"
                raise ValueError(msg)
            items.append(entity)
            self._save(cooperative_id, items)
        return entity

    def update(self, cooperative_id: str, entity: EntityT) -> EntityT:
        with self.lock:
            items = self.list(cooperative_id)
            for index, item in enumerate(items):
                if item.id == entity.id:
                    items[index] = entity
                    self._save(cooperative_id, items)
                    return entity
        msg = f"{self.entity_label} with id {entity.id} not found"
        raise ValueError(msg)

    def delete(self, cooperative_id: str, entity_id: str) -> bool:
        with self.lock:
            items = self.list(cooperative_id)
            remaining = [item for item in items if item.id != entity_id]
            if len(remaining) == len(items):
                return False
            self._save(cooperative_id, remaining)
        return True

    def _save(self, cooperative_id: str, items: Sequence[EntityT]) -> None:
        payload = [self._to_payload(item) for item in items]
        self.store.set(self.key_for(cooperative_id), json.dumps(payload, ensure_ascii=False))


class MessageRepository(_CooperativeCollectionRepository[Message]):
    """Provide CRUD operations for cooperative :class:`Message` objects."""

    entity_label = "Message"

    def __init__(
        self,
        store: KeyValueStore,
        *,
        namespace: str = "cooperative_messages",
        seed: Callable[[], Sequence[Message]] | None = None,
    ) -> None:
        super().__init__(
            store,
            namespace=namespace,
            to_payload=message_to_payload,
            from_payload=message_from_payload,
            seed=seed,
        )


class AnnouncementRepository(_CooperativeCollectionRepository[Announcement]):
    """Provide CRUD operations for cooperative :class:`Announcement` objects."""

    entity_label = "Announcement"

    def __init__(
        self,
        store: KeyValueStore,
        *,
        namespace: str = "cooperative_announcements",
        seed: Callable[[], Sequence[Announcement]] | None = None,
    ) -> None:
        super().__init__(
            store,
            namespace=namespace,
            to_payload=announcement_to_payload,
            from_payload=announcement_from_payload,
            seed=seed,
        )


__all__ = ["AnnouncementRepository", "MessageRepository"]
