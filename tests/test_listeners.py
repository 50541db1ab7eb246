"""Tests for the listener registry and the websocket publisher."""

from __future__ import annotations

import logging

from agricomms.infrastructure.notifications import (
    NotificationListenerRegistry,
    NotificationPublisher,
    serialize_notification,
)


def test_listeners_only_receive_their_user(service, draft_factory):
    seen = []
    service.add_notification_listener("u1", lambda items: seen.append(("a", len(items))))
    service.add_notification_listener("u1", lambda items: seen.append(("b", len(items))))
    service.add_notification_listener("u2", lambda items: seen.append(("other", len(items))))

    service.add_notification("u1", draft_factory())

    assert sorted(seen) == [("a", 1), ("b", 1)]


def test_unsubscribe_is_idempotent(registry):
    calls = []
    unsubscribe = registry.add_listener("u1", calls.append)
    keep = registry.add_listener("u1", calls.append)

    unsubscribe()
    unsubscribe()

    assert registry.listener_count("u1") == 1
    registry.notify("u1", lambda: [])
    assert calls == [[]]

    keep()
    assert registry.listener_count("u1") == 0


def test_failing_listener_does_not_stop_the_others(service, draft_factory, caplog):
    received = []

    def broken(_items):
        raise RuntimeError("boom")

    service.add_notification_listener("u1", broken)
    service.add_notification_listener("u1", received.append)

    with caplog.at_level(logging.ERROR):
        service.add_notification("u1", draft_factory())

    assert len(received) == 1
    assert "Notification listener failed for user u1" in caplog.text


def test_reentrant_mutation_schedules_one_more_round(service, draft_factory):
    snapshots = []

    def mark_everything_read(items):
        snapshots.append([n.is_read for n in items])
        if any(not n.is_read for n in items):
            service.mark_all_as_read("u1")

    service.add_notification_listener("u1", mark_everything_read)
    service.add_notification("u1", draft_factory())

    assert snapshots == [[False], [True]]
    assert service.get_unread_count("u1") == 0


def test_reentrant_rounds_are_bounded(service, draft_factory, caplog):
    calls = []

    def keep_adding(items):
        calls.append(len(items))
        service.add_notification("u1", draft_factory(title="écho"))

    service.add_notification_listener("u1", keep_adding)

    with caplog.at_level(logging.WARNING):
        service.add_notification("u1", draft_factory())

    assert len(calls) == 5
    assert "after 5 re-entrant rounds" in caplog.text


def test_publisher_subscribes_through_registry(draft_factory, service):
    publisher = NotificationPublisher(service.listeners)
    dispatched = []

    class _FakeSocket:
        pass

    socket = _FakeSocket()
    publisher.dispatch = lambda websocket, items: dispatched.append((websocket, len(items)))

    unsubscribe = publisher.subscribe("u1", socket)
    service.add_notification("u1", draft_factory())
    unsubscribe()
    service.add_notification("u1", draft_factory())

    assert dispatched == [(socket, 1)]


def test_serialize_notification_uses_snake_case(service, draft_factory):
    notification = service.add_notification("u1", draft_factory(action_url="/orders/1"))

    payload = serialize_notification(notification)

    assert payload["is_read"] is False
    assert payload["action_url"] == "/orders/1"
    assert payload["read_at"] is None
    assert isinstance(payload["timestamp"], str)


def test_registry_without_listeners_never_loads():
    registry = NotificationListenerRegistry()

    def load():
        raise AssertionError("should not load without listeners")

    registry.notify("nobody", load)
