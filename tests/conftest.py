"""Shared fixtures for the agricomms test-suite."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from agricomms.application.use_cases.notifications import NotificationService
from agricomms.domain.entities import NotificationDraft, NotificationRecord
from agricomms.infrastructure.notifications import NotificationListenerRegistry
from agricomms.infrastructure.repositories import (
    AnnouncementRepository,
    MessageRepository,
    NotificationPreferenceRepository,
    NotificationRepository,
    NotifiedProductRepository,
)
from agricomms.infrastructure.storage import InMemoryKeyValueStore
from agricomms.utils import now_in_app_timezone


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def registry() -> NotificationListenerRegistry:
    return NotificationListenerRegistry(max_rounds=5)


@pytest.fixture
def notification_repository(store) -> NotificationRepository:
    return NotificationRepository(store)


@pytest.fixture
def service(notification_repository, registry) -> NotificationService:
    return NotificationService(notification_repository, registry)


@pytest.fixture
def preference_repository(store) -> NotificationPreferenceRepository:
    return NotificationPreferenceRepository(store)


@pytest.fixture
def notified_products(store) -> NotifiedProductRepository:
    return NotifiedProductRepository(store)


@pytest.fixture
def message_repository(store) -> MessageRepository:
    return MessageRepository(store)


@pytest.fixture
def announcement_repository(store) -> AnnouncementRepository:
    return AnnouncementRepository(store)


def make_draft(**overrides) -> NotificationDraft:
    values = {
        "type": "info",
        "title": "Nouvelle offre",
        "message": "Une nouvelle offre de maïs est disponible",
        "priority": "medium",
        "category": "business",
    }
    values.update(overrides)
    return NotificationDraft(**values)


def make_record(notification_id: str, *, age: timedelta = timedelta(0), **overrides) -> NotificationRecord:
    timestamp: datetime = now_in_app_timezone() - age
    values = {
        "id": notification_id,
        "type": "info",
        "title": "Ancienne notification",
        "message": "Message archivé",
        "timestamp": timestamp,
        "is_read": False,
        "priority": "low",
        "category": "system",
        "actions": [],
        "metadata": {},
    }
    values.update(overrides)
    return NotificationRecord(**values)


@pytest.fixture
def draft_factory():
    return make_draft


@pytest.fixture
def record_factory():
    return make_record
