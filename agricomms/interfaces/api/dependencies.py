"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.requests import HTTPConnection

from agricomms.application.use_cases.notifications import NotificationService
from agricomms.container import Container
from agricomms.infrastructure.repositories import (
    AnnouncementRepository,
    MessageRepository,
    NotificationPreferenceRepository,
    NotifiedProductRepository,
)


def get_container(connection: HTTPConnection) -> Container:
    """Return the services built by the application lifespan.

    Works for both HTTP requests and websocket connections.
    """

    container = getattr(connection.app.state, "container", None)
    if container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service en cours de démarrage",
        )
    return container


def get_notification_service(container: Container = Depends(get_container)) -> NotificationService:
    return container.notifications


def get_preference_repository(
    container: Container = Depends(get_container),
) -> NotificationPreferenceRepository:
    return container.preferences


def get_notified_product_repository(
    container: Container = Depends(get_container),
) -> NotifiedProductRepository:
    return container.notified_products


def get_message_repository(container: Container = Depends(get_container)) -> MessageRepository:
    return container.messages


def get_announcement_repository(
    container: Container = Depends(get_container),
) -> AnnouncementRepository:
    return container.announcements


__all__ = [
    "get_announcement_repository",
    "get_container",
    "get_message_repository",
    "get_notification_service",
    "get_notified_product_repository",
    "get_preference_repository",
]
