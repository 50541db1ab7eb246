"""Composition root wiring storage, repositories and services together."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.engine import Engine

from agricomms.application.use_cases.notifications import NotificationService
from agricomms.config import Settings, get_settings
from agricomms.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from agricomms.infrastructure.fixtures import demo_announcements, demo_messages
from agricomms.infrastructure.notifications import (
    NotificationListenerRegistry,
    NotificationPublisher,
)
from agricomms.infrastructure.repositories import (
    AnnouncementRepository,
    MessageRepository,
    NotificationPreferenceRepository,
    NotificationRepository,
    NotifiedProductRepository,
)
from agricomms.infrastructure.storage import (
    InMemoryKeyValueStore,
    KeyValueStore,
    SqlAlchemyKeyValueStore,
)

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Every long-lived object the API needs, built once per application."""

    settings: Settings
    store: KeyValueStore
    notifications: NotificationService
    preferences: NotificationPreferenceRepository
    notified_products: NotifiedProductRepository
    messages: MessageRepository
    announcements: AnnouncementRepository
    publisher: NotificationPublisher
    engine: Engine | None = None

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def build_store(settings: Settings) -> tuple[KeyValueStore, Engine | None]:
    """Return the configured key-value backend and its engine, if any."""

    if settings.storage_backend == "database":
        engine = create_database_engine(settings.database_url)
        initialize_database(engine)
        return SqlAlchemyKeyValueStore(create_session_factory(engine)), engine
    return InMemoryKeyValueStore(), None


def build_container(
    settings: Settings | None = None,
    *,
    store: KeyValueStore | None = None,
) -> Container:
    """Create the services for ``settings``.

    ``store`` overrides the configured backend, which tests use to inject an
    in-memory or failing store.
    """

    settings = settings or get_settings()
    engine: Engine | None = None
    if store is None:
        store, engine = build_store(settings)
        logger.info("Using %s storage backend", settings.storage_backend)

    listeners = NotificationListenerRegistry(max_rounds=settings.max_notify_rounds)
    notifications = NotificationService(
        NotificationRepository(store, namespace=settings.notifications_namespace),
        listeners,
        max_notifications=settings.max_notifications,
        default_limit=settings.default_notification_limit,
        retention_days=settings.notification_retention_days,
    )
    seed = settings.seed_cooperative_fixtures
    return Container(
        settings=settings,
        store=store,
        notifications=notifications,
        preferences=NotificationPreferenceRepository(store, namespace=settings.preferences_namespace),
        notified_products=NotifiedProductRepository(store, namespace=settings.low_stock_namespace),
        messages=MessageRepository(
            store,
            namespace=settings.messages_namespace,
            seed=demo_messages if seed else None,
        ),
        announcements=AnnouncementRepository(
            store,
            namespace=settings.announcements_namespace,
            seed=demo_announcements if seed else None,
        ),
        publisher=NotificationPublisher(listeners),
        engine=engine,
    )


__all__ = ["Container", "build_container", "build_store"]
