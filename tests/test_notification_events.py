"""Tests for the business event catalog."""

from __future__ import annotations

import threading
import time

import pytest

from agricomms.application.use_cases.notifications import (
    EVENT_CATALOG,
    NotificationService,
    fire_event,
    notify_account_locked,
    notify_login_success,
    notify_low_stock,
    notify_new_device_login,
    notify_session_expiring,
    notify_suspicious_activity,
)
from agricomms.infrastructure.notifications import NotificationListenerRegistry
from agricomms.infrastructure.repositories import NotificationRepository, NotifiedProductRepository
from agricomms.infrastructure.storage import InMemoryKeyValueStore


@pytest.mark.parametrize(
    ("event", "params", "expected"),
    [
        ("login_success", {}, ("success", "auth", "medium")),
        ("login_failed", {"reason": "mot de passe incorrect"}, ("warning", "security", "high")),
        ("new_device_login", {"device_info": "Android"}, ("warning", "security", "high")),
        ("password_changed", {}, ("info", "security", "medium")),
        ("account_locked", {}, ("error", "security", "urgent")),
        ("email_verified", {}, ("success", "auth", "medium")),
        ("session_expiring", {"minutes_left": 5}, ("warning", "auth", "medium")),
        ("suspicious_activity", {"activity": "connexions multiples"}, ("error", "security", "urgent")),
        ("new_order", {"order_info": "50 kg de cacao"}, ("success", "business", "high")),
        ("payment_received", {"amount": "25 000 FCFA"}, ("success", "business", "medium")),
        ("system_update", {"update_info": "version 2.1"}, ("info", "system", "low")),
        ("maintenance", {"maintenance_info": "dimanche 2h"}, ("warning", "system", "medium")),
    ],
)
def test_catalog_events_classify_notifications(service, event, params, expected):
    notification = fire_event(service, event, "u1", **params)

    assert (notification.type, notification.category, notification.priority) == expected
    assert service.get_user_notifications("u1")[0].id == notification.id


def test_catalog_covers_every_event():
    assert set(EVENT_CATALOG) == {
        "login_success",
        "login_failed",
        "new_device_login",
        "password_changed",
        "account_locked",
        "email_verified",
        "session_expiring",
        "suspicious_activity",
        "new_order",
        "payment_received",
        "system_update",
        "maintenance",
    }


def test_login_success_mentions_device(service):
    assert "Chrome sur Windows" in notify_login_success(service, "u1", "Chrome sur Windows").message
    assert notify_login_success(service, "u1").message == "Vous vous êtes connecté avec succès"


def test_new_device_login_offers_two_actions(service):
    notification = notify_new_device_login(service, "u1", "iPhone", location="Abidjan")

    assert [(a.action, a.style) for a in notification.actions] == [
        ("secure_account", "danger"),
        ("recognize_device", "primary"),
    ]
    assert all(action.is_known for action in notification.actions)
    assert notification.message.endswith("à Abidjan")


def test_security_actions(service):
    assert [a.action for a in notify_account_locked(service, "u1").actions] == ["unlock_account"]
    assert [a.action for a in notify_suspicious_activity(service, "u1", "x").actions] == [
        "check_activity",
        "secure_account",
    ]


@pytest.mark.parametrize(("minutes", "suffix"), [(1, "1 minute"), (10, "10 minutes")])
def test_session_expiring_pluralizes(service, minutes, suffix):
    notification = notify_session_expiring(service, "u1", minutes)

    assert notification.message.endswith(suffix)
    assert notification.actions[0].action == "extend_session"


def test_fire_event_rejects_unknown_event(service):
    with pytest.raises(ValueError, match="Événement de notification inconnu"):
        fire_event(service, "harvest_ready", "u1")


def test_fire_event_rejects_bad_parameters(service):
    with pytest.raises(ValueError, match="Paramètres invalides"):
        fire_event(service, "login_failed", "u1")
    with pytest.raises(ValueError, match="Paramètres invalides"):
        fire_event(service, "password_changed", "u1", unexpected=True)
    assert service.get_user_notifications("u1") == []


def test_low_stock_is_reported_once_per_product(service, notified_products):
    first = notify_low_stock(
        service, notified_products, "m1", product_id="p1", product="Maïs", level="critical"
    )
    again = notify_low_stock(
        service, notified_products, "m1", product_id="p1", product="Maïs", level="critical"
    )
    other = notify_low_stock(
        service, notified_products, "m1", product_id="p2", product="Riz", level="low"
    )

    assert first is not None and again is None and other is not None
    assert (first.title, first.priority, first.type) == ("Stock critique", "urgent", "system")
    assert (other.title, other.priority) == ("Stock faible", "high")
    assert first.metadata == {"product_id": "p1", "severity": "critical"}
    assert first.actions[0].action == "view_product"
    assert len(service.get_user_notifications("m1")) == 2


def test_low_stock_can_be_rearmed(service, notified_products):
    notify_low_stock(service, notified_products, "m1", product_id="p1", product="Maïs", level="low")
    notified_products.discard("m1", "p1")

    assert notify_low_stock(
        service, notified_products, "m1", product_id="p1", product="Maïs", level="low"
    ) is not None


def test_low_stock_rejects_unknown_level(service, notified_products):
    with pytest.raises(ValueError):
        notify_low_stock(service, notified_products, "m1", product_id="p1", product="Maïs", level="empty")


class _SlowStore(InMemoryKeyValueStore):
    def get(self, key):
        value = super().get(key)
        time.sleep(0.05)
        return value


def test_concurrent_low_stock_reports_notify_once():
    store = _SlowStore()
    service = NotificationService(NotificationRepository(store), NotificationListenerRegistry())
    notified_products = NotifiedProductRepository(store)

    def report():
        notify_low_stock(service, notified_products, "m1", product_id="p1", product="Maïs", level="low")

    threads = [threading.Thread(target=report) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(service.get_user_notifications("m1")) == 1
    assert notified_products.list_for_user("m1") == {"p1"}
