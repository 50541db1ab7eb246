"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import logging
from typing import Any

from anyio import to_thread
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from agricomms.application.use_cases.notifications import (
    NotificationService,
    fire_event,
    notify_low_stock,
)
from agricomms.domain.entities import NotificationAction, NotificationDraft, NotificationRecord
from agricomms.infrastructure.notifications import serialize_notification
from agricomms.infrastructure.repositories import NotifiedProductRepository
from agricomms.interfaces.api.dependencies import (
    get_notification_service,
    get_notified_product_repository,
)
from agricomms.interfaces.api.schemas import (
    NotificationCountRead,
    NotificationCreate,
    NotificationEventTrigger,
    NotificationMarkReadResult,
    NotificationRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{user_id}/notifications", tags=["notifications"])

LOW_STOCK_EVENT = "low_stock"
_LOW_STOCK_PARAMS = ("product_id", "product", "level")


def _notification_to_schema(notification: NotificationRecord) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    user_id: str,
    limit: int | None = Query(default=None, ge=1),
    category: str | None = None,
    priority: str | None = None,
    type: str | None = None,
    unread: bool = False,
    service: NotificationService = Depends(get_notification_service),
) -> list[NotificationRead]:
    """Retourne les notifications de l'utilisateur, les plus récentes en premier."""

    notifications = service.get_user_notifications(user_id, limit=None)
    if unread:
        notifications = [n for n in notifications if not n.is_read]
    if category:
        notifications = [n for n in notifications if n.category == category]
    if priority:
        notifications = [n for n in notifications if n.priority == priority]
    if type:
        notifications = [n for n in notifications if n.type == type]
    return [_notification_to_schema(n) for n in notifications[: limit or service.default_limit]]


@router.get("/unread-count", response_model=NotificationCountRead)
def read_unread_count(
    user_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationCountRead:
    """Retourne le nombre de notifications non lues."""

    return NotificationCountRead(count=service.get_unread_count(user_id))


@router.get("/export")
def export_notifications(
    user_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    """Télécharge l'ensemble des notifications au format JSON."""

    return Response(
        content=service.export_notifications(user_id),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="notifications_{user_id}.json"'},
    )


@router.post("", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    user_id: str,
    notification_in: NotificationCreate,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationRead:
    """Ajoute une notification au fil de l'utilisateur."""

    draft = NotificationDraft(
        type=notification_in.type,
        title=notification_in.title,
        message=notification_in.message,
        priority=notification_in.priority,
        category=notification_in.category,
        actions=[
            NotificationAction(action.label, action.action, action.style)
            for action in notification_in.actions
        ],
        metadata=dict(notification_in.metadata),
        action_url=notification_in.action_url,
    )
    return _notification_to_schema(service.add_notification(user_id, draft))


def _low_stock_arguments(params: dict[str, Any]) -> dict[str, str]:
    missing = [name for name in _LOW_STOCK_PARAMS if not params.get(name)]
    unexpected = sorted(set(params) - set(_LOW_STOCK_PARAMS))
    if missing or unexpected:
        detail = "Paramètres invalides pour l'événement low_stock"
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    return {name: str(params[name]) for name in _LOW_STOCK_PARAMS}


@router.post(
    "/events/{event}",
    response_model=NotificationRead | None,
    status_code=status.HTTP_201_CREATED,
)
def trigger_event(
    user_id: str,
    event: str,
    trigger: NotificationEventTrigger,
    service: NotificationService = Depends(get_notification_service),
    notified_products: NotifiedProductRepository = Depends(get_notified_product_repository),
) -> NotificationRead | None:
    """Déclenche un événement du catalogue pour l'utilisateur.

    ``low_stock`` n'est notifié qu'une fois par produit; un doublon renvoie ``null``.
    """

    try:
        if event == LOW_STOCK_EVENT:
            notification = notify_low_stock(
                service, notified_products, user_id, **_low_stock_arguments(trigger.params)
            )
        else:
            notification = fire_event(service, event, user_id, **trigger.params)
    except ValueError as exc:
        status_code = status.HTTP_400_BAD_REQUEST
        if str(exc).startswith("Événement de notification inconnu"):
            status_code = status.HTTP_404_NOT_FOUND
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc
    if notification is None:
        return None
    return _notification_to_schema(notification)


@router.delete("/low-stock/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def reset_low_stock_alert(
    user_id: str,
    product_id: str,
    notified_products: NotifiedProductRepository = Depends(get_notified_product_repository),
) -> Response:
    """Réarme l'alerte de stock d'un produit après réapprovisionnement."""

    notified_products.discard(user_id, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/read-all", response_model=NotificationCountRead)
def mark_all_notifications_as_read(
    user_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationCountRead:
    """Marque toutes les notifications comme lues."""

    return NotificationCountRead(count=service.mark_all_as_read(user_id))


@router.post("/cleanup", response_model=NotificationCountRead)
def cleanup_notifications(
    user_id: str,
    days_to_keep: int | None = Query(default=None, ge=0),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationCountRead:
    """Supprime les notifications plus anciennes que ``days_to_keep`` jours."""

    removed = service.cleanup_old_notifications(user_id, days_to_keep=days_to_keep)
    return NotificationCountRead(count=removed)


@router.post("/{notification_id}/read", response_model=NotificationMarkReadResult)
def mark_notification_as_read(
    user_id: str,
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationMarkReadResult:
    """Marque une notification comme lue; ``updated`` vaut faux si rien n'a changé."""

    return NotificationMarkReadResult(updated=service.mark_as_read(user_id, notification_id))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    user_id: str,
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    """Supprime une notification."""

    if not service.delete_notification(user_id, notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification introuvable"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", response_model=NotificationCountRead)
def clear_notifications(
    user_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationCountRead:
    """Supprime toutes les notifications de l'utilisateur."""

    return NotificationCountRead(count=service.clear_all_notifications(user_id))


def _acknowledge(service: NotificationService, user_id: str, ids: list[Any]) -> None:
    for notification_id in ids:
        if isinstance(notification_id, str):
            service.mark_as_read(user_id, notification_id)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket, user_id: str) -> None:
    """Websocket qui pousse le fil de notifications de l'utilisateur."""

    container = getattr(websocket.app.state, "container", None)
    if container is None:
        await websocket.close(code=1011)
        return
    service = container.notifications

    await websocket.accept()
    unsubscribe = container.publisher.subscribe(user_id, websocket)
    try:
        # Store access is blocking; keep it off the event loop.
        pending = await to_thread.run_sync(service.get_unread_notifications, user_id)
        await websocket.send_json(
            {"type": "init", "data": [serialize_notification(n) for n in pending]}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except (ValueError, KeyError):
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    await to_thread.run_sync(_acknowledge, service, user_id, ids)
                continue
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for user %s", user_id)
    finally:
        unsubscribe()


__all__ = ["router"]
