"""Integration tests for the notification endpoints and websocket."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from agricomms.config import Settings
from agricomms.container import build_container
from agricomms.infrastructure.storage import InMemoryKeyValueStore, StorageWriteError
from main import create_app

BASE = "/users/u1/notifications"


def _create(client: TestClient, **overrides) -> dict:
    payload = {"type": "info", "title": "Nouvelle offre", "message": "Maïs disponible"}
    payload.update(overrides)
    response = client.post(BASE, json=payload)
    assert response.status_code == 201
    return response.json()


def test_notification_crud_flow(client: TestClient) -> None:
    first = _create(client, title="Premier")
    second = _create(client, title="Second", priority="urgent", category="security")

    assert first["is_read"] is False
    assert first["priority"] == "medium"
    assert first["category"] == "system"

    listing = client.get(BASE)
    assert [item["id"] for item in listing.json()] == [second["id"], first["id"]]
    assert client.get(BASE, params={"limit": 1}).json()[0]["id"] == second["id"]
    assert [item["id"] for item in client.get(BASE, params={"category": "security"}).json()] == [
        second["id"]
    ]
    assert client.get(f"{BASE}/unread-count").json() == {"count": 2}

    assert client.post(f"{BASE}/{first['id']}/read").json() == {"updated": True}
    assert client.post(f"{BASE}/{first['id']}/read").json() == {"updated": False}
    assert [item["id"] for item in client.get(BASE, params={"unread": True}).json()] == [second["id"]]

    assert client.post(f"{BASE}/read-all").json() == {"count": 1}
    assert client.get(f"{BASE}/unread-count").json() == {"count": 0}

    assert client.delete(f"{BASE}/{first['id']}").status_code == 204
    assert client.delete(f"{BASE}/{first['id']}").status_code == 404
    assert client.delete(BASE).json() == {"count": 1}
    assert client.get(BASE).json() == []


def test_create_notification_validates_payload(client: TestClient) -> None:
    response = client.post(BASE, json={"type": "gossip", "title": "x", "message": "y"})
    assert response.status_code == 422

    response = client.post(BASE, json={"type": "info", "title": "x", "message": "y", "extra": 1})
    assert response.status_code == 422


def test_export_is_a_json_attachment(client: TestClient) -> None:
    created = _create(client)

    response = client.get(f"{BASE}/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert "notifications_u1.json" in response.headers["content-disposition"]
    assert [item["id"] for item in response.json()] == [created["id"]]


def test_cleanup_keeps_recent_notifications(client: TestClient) -> None:
    _create(client)

    assert client.post(f"{BASE}/cleanup").json() == {"count": 0}
    assert client.post(f"{BASE}/cleanup", params={"days_to_keep": -1}).status_code == 422


def test_catalog_event_creates_notification(client: TestClient) -> None:
    response = client.post(
        f"{BASE}/events/new_order", json={"params": {"order_info": "50 kg de cacao"}}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["category"] == "business"
    assert body["actions"][0]["action"] == "view_order"


@pytest.mark.parametrize(
    ("event", "params", "expected_status"),
    [
        ("harvest_ready", {}, 404),
        ("login_failed", {}, 400),
        ("password_changed", {"unexpected": True}, 400),
        ("low_stock", {"product_id": "p1"}, 400),
    ],
)
def test_invalid_events_are_rejected(client: TestClient, event, params, expected_status) -> None:
    response = client.post(f"{BASE}/events/{event}", json={"params": params})

    assert response.status_code == expected_status
    assert client.get(BASE).json() == []


def test_low_stock_is_reported_once_until_reset(client: TestClient) -> None:
    params = {"params": {"product_id": "p1", "product": "Maïs", "level": "critical"}}

    first = client.post(f"{BASE}/events/low_stock", json=params)
    duplicate = client.post(f"{BASE}/events/low_stock", json=params)

    assert first.status_code == 201
    assert first.json()["priority"] == "urgent"
    assert duplicate.status_code == 201
    assert duplicate.json() is None

    assert client.delete(f"{BASE}/low-stock/p1").status_code == 204
    assert client.post(f"{BASE}/events/low_stock", json=params).json() is not None
    assert len(client.get(BASE).json()) == 2


def test_websocket_pushes_feed_changes(client: TestClient) -> None:
    created = _create(client)

    with client.websocket_connect(f"{BASE}/ws") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert [item["id"] for item in init["data"]] == [created["id"]]

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        websocket.send_text("not json")
        websocket.send_json({"type": "ack", "ids": [created["id"]]})
        update = websocket.receive_json()
        assert update["type"] == "notifications"
        assert update["data"][0]["is_read"] is True

    assert client.get(f"{BASE}/unread-count").json() == {"count": 0}


def test_storage_failure_maps_to_service_unavailable() -> None:
    class _ReadOnlyStore(InMemoryKeyValueStore):
        def set(self, key, value):
            raise StorageWriteError(f"Unable to persist key '{key}'")

    container = build_container(Settings(seed_cooperative_fixtures=False), store=_ReadOnlyStore())
    with TestClient(create_app(container)) as client:
        response = client.post(BASE, json={"type": "info", "title": "x", "message": "y"})

        assert response.status_code == 503
        assert response.json() == {"detail": "Le stockage est temporairement indisponible"}
        assert client.get(BASE).json() == []


def test_requests_before_startup_are_rejected() -> None:
    client = TestClient(create_app())

    response = client.get(BASE)

    assert response.status_code == 503
