"""Fixtures building an application bound to an in-memory store."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from agricomms.config import Settings
from agricomms.container import build_container
from agricomms.infrastructure.storage import InMemoryKeyValueStore
from main import create_app


@pytest.fixture()
def api_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def container(api_store):
    settings = Settings(storage_backend="memory", seed_cooperative_fixtures=False)
    return build_container(settings, store=api_store)


@pytest.fixture()
def client(container):
    """Return a test client bound to a clean application instance."""

    app = create_app(container)
    with TestClient(app) as test_client:
        yield test_client
