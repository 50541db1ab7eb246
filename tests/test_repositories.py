"""Tests for the JSON repositories built on top of the key-value store."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from agricomms.domain.entities import (
    EmailPreferences,
    NotificationAction,
    PushPreferences,
    QuietHours,
    default_preferences,
)
from agricomms.infrastructure.fixtures import demo_announcements, demo_messages
from agricomms.infrastructure.repositories import (
    MessageRepository,
    NotificationPreferenceRepository,
    NotificationRepository,
)
from agricomms.infrastructure.storage import StorageReadError
from agricomms.utils import parse_iso


class _UnreadableStore:
    def get(self, key):
        raise StorageReadError(f"Unable to read key '{key}'")

    def set(self, key, value):  # pragma: no cover - never reached
        raise AssertionError("unexpected write")

    def remove(self, key):  # pragma: no cover - never reached
        raise AssertionError("unexpected remove")


def test_notifications_are_stored_under_user_key_with_camel_case(
    notification_repository, store, record_factory
):
    record = record_factory(
        "n1",
        actions=[NotificationAction("Voir", "view_order", "primary")],
        action_url="/orders/42",
    )

    notification_repository.save_for_user("u1", [record])

    payload = json.loads(store.get("user_notifications_u1"))
    assert payload[0]["isRead"] is False
    assert payload[0]["actionUrl"] == "/orders/42"
    assert "readAt" not in payload[0]
    assert notification_repository.list_for_user("u1") == [record]


def test_notifications_are_returned_newest_first(notification_repository, record_factory):
    older = record_factory("old", age=timedelta(hours=2))
    newer = record_factory("new", age=timedelta(minutes=1))

    notification_repository.save_for_user("u1", [older, newer])

    assert [n.id for n in notification_repository.list_for_user("u1")] == ["new", "old"]


@pytest.mark.parametrize("raw", ["{not json", '{"id": "x"}', '[{"id": "x"}]'])
def test_corrupt_notifications_degrade_to_empty_list(notification_repository, store, raw, caplog):
    store.set("user_notifications_u1", raw)

    with caplog.at_level("WARNING"):
        assert notification_repository.list_for_user("u1") == []

    assert "Discarding unreadable notifications" in caplog.text


def test_epoch_millisecond_timestamps_are_accepted(notification_repository, store):
    store.set(
        "user_notifications_u1",
        json.dumps(
            [
                {
                    "id": "legacy",
                    "type": "info",
                    "title": "Bienvenue",
                    "message": "Bienvenue sur la plateforme",
                    "timestamp": 1727776800000,
                    "isRead": True,
                    "priority": "low",
                    "category": "system",
                }
            ]
        ),
    )

    [record] = notification_repository.list_for_user("u1")
    assert record.timestamp.year == 2024
    assert record.is_read is True
    assert record.actions == []


def test_unreadable_store_yields_defaults():
    store = _UnreadableStore()

    assert NotificationRepository(store).list_for_user("u1") == []
    assert NotificationPreferenceRepository(store).get("u1") == default_preferences()


def test_preferences_fall_back_to_defaults(preference_repository, store):
    assert preference_repository.get("u1") == default_preferences()

    store.set("notification_preferences_u1", "corrupted")
    assert preference_repository.get("u1") == default_preferences()


def test_preferences_missing_channel_uses_its_default(preference_repository, store):
    store.set(
        "notification_preferences_u1",
        json.dumps({"email": {"enabled": False, "types": ["security"], "frequency": "daily"}}),
    )

    preferences = preference_repository.get("u1")

    assert preferences.email == EmailPreferences(enabled=False, types=["security"], frequency="daily")
    assert preferences.push == default_preferences().push


def test_preference_update_replaces_whole_channel(preference_repository, store):
    push = PushPreferences(enabled=False, types=[], quiet_hours=QuietHours(enabled=False))

    updated = preference_repository.update("u1", {"push": push})

    stored = json.loads(store.get("notification_preferences_u1"))
    assert updated.push.enabled is False
    assert stored["push"]["quietHours"]["enabled"] is False
    assert stored["inApp"] == {"enabled": True, "maxUnread": 50}


def test_notified_products_are_tracked_per_user(notified_products):
    notified_products.add("merchant-1", "p1")
    notified_products.add("merchant-1", "p2")
    notified_products.discard("merchant-1", "p1")

    assert notified_products.list_for_user("merchant-1") == {"p2"}
    assert notified_products.list_for_user("merchant-2") == set()


def test_cooperative_repository_seeds_until_first_write(store):
    repository = MessageRepository(store, seed=demo_messages)

    seeded = repository.list("coop-1")
    assert [m.id for m in seeded] == ["1", "2", "3"]
    assert store.get("cooperative_messages_coop-1") is None

    assert repository.delete("coop-1", "1") is True
    assert [m.id for m in repository.list("coop-1")] == ["2", "3"]
    assert [m.id for m in repository.list("coop-2")] == ["1", "2", "3"]


def test_cooperative_repository_rejects_duplicates(message_repository):
    message = demo_messages()[0]
    message_repository.create("coop-1", message)

    with pytest.raises(ValueError):
        message_repository.create("coop-1", message)
    assert message_repository.delete("coop-1", "missing") is False


def test_cooperative_payload_round_trip_keeps_nested_data(message_repository, store):
    message = demo_messages()[1]
    message_repository.create("coop-1", message)

    payload = json.loads(store.get("cooperative_messages_coop-1"))
    assert payload[0]["senderRole"] == "staff"
    assert payload[0]["attachments"][0]["name"] == "catalogue_engrais.pdf"
    assert message_repository.get("coop-1", message.id) == message


def test_out_of_range_epoch_timestamp_is_rejected():
    with pytest.raises(ValueError, match="out of range"):
        parse_iso(10**30)


def test_out_of_range_timestamp_degrades_to_empty_list(notification_repository, store, caplog):
    store.set(
        "user_notifications_u1",
        json.dumps(
            [
                {
                    "id": "broken",
                    "type": "info",
                    "title": "Bienvenue",
                    "message": "Bienvenue sur la plateforme",
                    "timestamp": 10**30,
                    "isRead": False,
                    "priority": "low",
                    "category": "system",
                }
            ]
        ),
    )

    with caplog.at_level("WARNING"):
        assert notification_repository.list_for_user("u1") == []

    assert "Discarding unreadable notifications" in caplog.text


def test_infinite_preference_value_falls_back_to_defaults(preference_repository, store):
    store.set("notification_preferences_u1", '{"inApp": {"enabled": true, "maxUnread": 1e999}}')

    assert preference_repository.get("u1") == default_preferences()


def test_seeded_announcement_counters_match_receipts():
    for announcement in demo_announcements():
        assert announcement.read_count == len(announcement.read_by)
        assert len({receipt.member_id for receipt in announcement.read_by}) == announcement.read_count
