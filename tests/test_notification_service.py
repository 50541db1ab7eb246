"""Tests for the per-user notification feed."""

from __future__ import annotations

import json
import re
from datetime import timedelta

import pytest

from agricomms.application.use_cases.notifications import NotificationService
from agricomms.config import Settings
from agricomms.container import build_container
from agricomms.domain.entities import NotificationDraft
from agricomms.infrastructure.notifications import NotificationListenerRegistry
from agricomms.infrastructure.repositories import NotificationRepository
from agricomms.infrastructure.storage import InMemoryKeyValueStore, StorageWriteError


def test_add_notification_stamps_and_prepends(service, draft_factory):
    first = service.add_notification("u1", draft_factory(title="Premier"))
    second = service.add_notification("u1", draft_factory(title="Second"))

    assert re.fullmatch(r"notif_\d+_[0-9a-f]{10}", first.id)
    assert first.id != second.id
    assert first.is_read is False
    assert first.read_at is None
    assert [n.id for n in service.get_user_notifications("u1")] == [second.id, first.id]


def test_get_user_notifications_honours_limit(service, draft_factory):
    for index in range(5):
        service.add_notification("u1", draft_factory(title=f"n{index}"))

    assert len(service.get_user_notifications("u1", limit=3)) == 3
    assert len(service.get_user_notifications("u1", limit=None)) == 5
    assert service.get_user_notifications("unknown") == []


def test_mark_as_read_is_idempotent(service, draft_factory):
    notification = service.add_notification("u1", draft_factory())

    assert service.mark_as_read("u1", notification.id) is True
    assert service.mark_as_read("u1", notification.id) is False
    assert service.mark_as_read("u1", "missing") is False

    [stored] = service.get_user_notifications("u1")
    assert stored.is_read is True
    assert stored.read_at is not None


def test_read_and_unread_partition_the_feed(service, draft_factory):
    created = [service.add_notification("u1", draft_factory(title=str(i))) for i in range(6)]
    for notification in created[::2]:
        service.mark_as_read("u1", notification.id)

    everything = {n.id for n in service.get_user_notifications("u1", limit=None)}
    unread = {n.id for n in service.get_unread_notifications("u1")}
    read = {n.id for n in service.get_user_notifications("u1", limit=None) if n.is_read}

    assert unread | read == everything
    assert unread & read == set()
    assert service.get_unread_count("u1") == 3


def test_retention_ceiling_keeps_most_recent(store):
    service = NotificationService(
        NotificationRepository(store), NotificationListenerRegistry(), max_notifications=5
    )
    created = [
        service.add_notification(
            "u1",
            NotificationDraft(type="info", title=str(i), message="m", priority="low", category="system"),
        )
        for i in range(8)
    ]

    stored = service.get_user_notifications("u1", limit=None)
    assert len(stored) == 5
    assert [n.id for n in stored] == [n.id for n in reversed(created[-5:])]


def test_mark_all_as_read_returns_changed_count(service, draft_factory):
    notifications = [service.add_notification("u1", draft_factory()) for _ in range(4)]
    service.mark_as_read("u1", notifications[0].id)

    assert service.mark_all_as_read("u1") == 3
    assert service.mark_all_as_read("u1") == 0
    assert service.get_unread_count("u1") == 0


def test_notification_lifecycle(service, draft_factory):
    service.add_notification("u1", draft_factory(title="Ancienne"))
    urgent = service.add_notification(
        "u1", draft_factory(title="Alerte", priority="urgent", category="security")
    )

    assert service.get_user_notifications("u1")[0].id == urgent.id

    assert service.mark_as_read("u1", urgent.id) is True
    assert any(n.id == urgent.id and n.is_read for n in service.get_user_notifications("u1"))
    assert all(n.id != urgent.id for n in service.get_unread_notifications("u1"))

    assert service.delete_notification("u1", urgent.id) is True
    assert all(n.id != urgent.id for n in service.get_user_notifications("u1", limit=None))
    assert service.delete_notification("u1", urgent.id) is False


def test_filters_by_category_priority_and_type(service, draft_factory):
    service.add_notification("u1", draft_factory(category="security", priority="urgent", type="error"))
    service.add_notification("u1", draft_factory(category="business", priority="low", type="success"))

    assert [n.category for n in service.get_notifications_by_category("u1", "security")] == ["security"]
    assert [n.priority for n in service.get_notifications_by_priority("u1", "low")] == ["low"]
    assert [n.type for n in service.get_notifications_by_type("u1", "error")] == ["error"]


def test_clear_all_notifications_removes_the_key(service, store, draft_factory):
    service.add_notification("u1", draft_factory())
    service.add_notification("u1", draft_factory())

    assert service.clear_all_notifications("u1") == 2
    assert store.get("user_notifications_u1") is None
    assert service.clear_all_notifications("u1") == 0


def test_cleanup_drops_old_notifications(service, notification_repository, record_factory):
    notification_repository.save_for_user(
        "u1",
        [
            record_factory("recent", age=timedelta(days=1)),
            record_factory("old", age=timedelta(days=45)),
            record_factory("older", age=timedelta(days=90)),
        ],
    )

    assert service.cleanup_old_notifications("u1") == 2
    assert [n.id for n in service.get_user_notifications("u1")] == ["recent"]
    assert service.cleanup_old_notifications("u1", days_to_keep=0) == 1


def test_export_notifications_is_pretty_json(service, draft_factory):
    notification = service.add_notification("u1", draft_factory(metadata={"order_id": "42"}))

    exported = service.export_notifications("u1")

    assert exported.startswith("[\n  {")
    [payload] = json.loads(exported)
    assert payload["id"] == notification.id
    assert payload["metadata"] == {"order_id": "42"}


def test_mutations_notify_only_the_affected_user(service, draft_factory):
    received: dict[str, list[int]] = {"u1": [], "u2": []}
    service.add_notification_listener("u1", lambda items: received["u1"].append(len(items)))
    service.add_notification_listener("u2", lambda items: received["u2"].append(len(items)))

    notification = service.add_notification("u1", draft_factory())
    service.mark_as_read("u1", notification.id)
    service.mark_as_read("u1", notification.id)

    assert received == {"u1": [1, 1], "u2": []}


def test_listeners_are_not_notified_when_nothing_changes(service):
    calls = []
    service.add_notification_listener("u1", calls.append)

    assert service.mark_all_as_read("u1") == 0
    assert service.delete_notification("u1", "missing") is False
    assert service.cleanup_old_notifications("u1") == 0
    assert calls == []


def test_failed_write_does_not_notify(registry, draft_factory):
    class _ReadOnlyStore(InMemoryKeyValueStore):
        def set(self, key, value):
            raise StorageWriteError(f"Unable to persist key '{key}'")

    service = NotificationService(NotificationRepository(_ReadOnlyStore()), registry)
    calls = []
    service.add_notification_listener("u1", calls.append)

    with pytest.raises(StorageWriteError):
        service.add_notification("u1", draft_factory())
    assert calls == []


def test_configured_limit_and_retention_apply_by_default(
    notification_repository, registry, draft_factory, record_factory
):
    service = NotificationService(
        notification_repository, registry, default_limit=2, retention_days=3
    )
    for index in range(4):
        service.add_notification("u1", draft_factory(title=f"n{index}"))

    assert len(service.get_user_notifications("u1")) == 2
    assert len(service.get_user_notifications("u1", limit=None)) == 4

    notification_repository.save_for_user(
        "u2",
        [
            record_factory("recent", age=timedelta(days=1)),
            record_factory("stale", age=timedelta(days=5)),
        ],
    )
    assert service.cleanup_old_notifications("u2") == 1
    assert [n.id for n in service.get_user_notifications("u2")] == ["recent"]


def test_container_passes_notification_settings_to_service():
    settings = Settings(
        storage_backend="memory",
        notification_retention_days=7,
        default_notification_limit=10,
    )

    container = build_container(settings, store=InMemoryKeyValueStore())

    assert container.notifications.retention_days == 7
    assert container.notifications.default_limit == 10
