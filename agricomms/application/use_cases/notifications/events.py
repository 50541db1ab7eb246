"""Catalog of business events that produce user notifications."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from agricomms.domain.entities import NotificationAction, NotificationDraft, NotificationRecord
from agricomms.domain.entities.notification import (
    ACTION_CHECK_ACTIVITY,
    ACTION_EXTEND_SESSION,
    ACTION_RECOGNIZE_DEVICE,
    ACTION_SECURE_ACCOUNT,
    ACTION_STYLE_DANGER,
    ACTION_STYLE_PRIMARY,
    ACTION_UNLOCK_ACCOUNT,
    ACTION_VIEW_ORDER,
    ACTION_VIEW_PRODUCT,
    CATEGORY_AUTH,
    CATEGORY_BUSINESS,
    CATEGORY_SECURITY,
    CATEGORY_SYSTEM,
    NOTIFICATION_TYPE_ERROR,
    NOTIFICATION_TYPE_INFO,
    NOTIFICATION_TYPE_SUCCESS,
    NOTIFICATION_TYPE_SYSTEM,
    NOTIFICATION_TYPE_WARNING,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
)
from agricomms.infrastructure.repositories import NotifiedProductRepository

from .service import NotificationService

logger = logging.getLogger(__name__)

LOW_STOCK_CRITICAL = "critical"
LOW_STOCK_LOW = "low"


def _emit(
    service: NotificationService,
    user_id: str,
    *,
    type: str,
    title: str,
    message: str,
    priority: str,
    category: str,
    actions: list[NotificationAction] | None = None,
    metadata: dict[str, Any] | None = None,
    action_url: str | None = None,
) -> NotificationRecord:
    draft = NotificationDraft(
        type=type,
        title=title,
        message=message,
        priority=priority,
        category=category,
        actions=actions or [],
        metadata=metadata or {},
        action_url=action_url,
    )
    return service.add_notification(user_id, draft)


# Authentication ------------------------------------------------------------


def notify_login_success(
    service: NotificationService, user_id: str, device_info: str | None = None
) -> NotificationRecord:
    message = (
        f"Vous vous êtes connecté depuis {device_info}"
        if device_info
        else "Vous vous êtes connecté avec succès"
    )
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_SUCCESS,
        title="Connexion réussie",
        message=message,
        priority=PRIORITY_MEDIUM,
        category=CATEGORY_AUTH,
    )


def notify_login_failed(service: NotificationService, user_id: str, reason: str) -> NotificationRecord:
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_WARNING,
        title="Échec de connexion",
        message=f"Une tentative de connexion a échoué: {reason}",
        priority=PRIORITY_HIGH,
        category=CATEGORY_SECURITY,
    )


def notify_new_device_login(
    service: NotificationService,
    user_id: str,
    device_info: str,
    location: str | None = None,
) -> NotificationRecord:
    """Warn the user about a sign-in from a device never seen before."""

    suffix = f" à {location}" if location else ""
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_WARNING,
        title="Nouvel appareil détecté",
        message=f"Connexion depuis un nouvel appareil: {device_info}{suffix}",
        priority=PRIORITY_HIGH,
        category=CATEGORY_SECURITY,
        actions=[
            NotificationAction("Ce n'est pas moi", ACTION_SECURE_ACCOUNT, ACTION_STYLE_DANGER),
            NotificationAction("Reconnaître", ACTION_RECOGNIZE_DEVICE, ACTION_STYLE_PRIMARY),
        ],
        metadata={"device_info": device_info, "location": location},
    )


def notify_password_changed(service: NotificationService, user_id: str) -> NotificationRecord:
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_INFO,
        title="Mot de passe modifié",
        message="Votre mot de passe a été changé avec succès",
        priority=PRIORITY_MEDIUM,
        category=CATEGORY_SECURITY,
    )


def notify_account_locked(service: NotificationService, user_id: str) -> NotificationRecord:
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_ERROR,
        title="Compte verrouillé",
        message="Votre compte a été temporairement verrouillé pour des raisons de sécurité",
        priority=PRIORITY_URGENT,
        category=CATEGORY_SECURITY,
        actions=[NotificationAction("Déverrouiller", ACTION_UNLOCK_ACCOUNT, ACTION_STYLE_PRIMARY)],
    )


def notify_email_verified(service: NotificationService, user_id: str) -> NotificationRecord:
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_SUCCESS,
        title="Email vérifié",
        message="Votre adresse email a été vérifiée avec succès",
        priority=PRIORITY_MEDIUM,
        category=CATEGORY_AUTH,
    )


def notify_session_expiring(
    service: NotificationService, user_id: str, minutes_left: int
) -> NotificationRecord:
    plural = "s" if minutes_left > 1 else ""
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_WARNING,
        title="Session expirant bientôt",
        message=f"Votre session expirera dans {minutes_left} minute{plural}",
        priority=PRIORITY_MEDIUM,
        category=CATEGORY_AUTH,
        actions=[NotificationAction("Prolonger", ACTION_EXTEND_SESSION, ACTION_STYLE_PRIMARY)],
        metadata={"minutes_left": minutes_left},
    )


# Security ------------------------------------------------------------------


def notify_suspicious_activity(
    service: NotificationService, user_id: str, activity: str
) -> NotificationRecord:
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_ERROR,
        title="Activité suspecte détectée",
        message=f"Activité suspecte détectée: {activity}",
        priority=PRIORITY_URGENT,
        category=CATEGORY_SECURITY,
        actions=[
            NotificationAction("Vérifier", ACTION_CHECK_ACTIVITY, ACTION_STYLE_PRIMARY),
            NotificationAction("Sécuriser", ACTION_SECURE_ACCOUNT, ACTION_STYLE_DANGER),
        ],
    )


# Business ------------------------------------------------------------------


def notify_new_order(service: NotificationService, user_id: str, order_info: str) -> NotificationRecord:
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_SUCCESS,
        title="Nouvelle commande",
        message=f"Vous avez reçu une nouvelle commande: {order_info}",
        priority=PRIORITY_HIGH,
        category=CATEGORY_BUSINESS,
        actions=[NotificationAction("Voir détails", ACTION_VIEW_ORDER, ACTION_STYLE_PRIMARY)],
    )


def notify_payment_received(service: NotificationService, user_id: str, amount: str) -> NotificationRecord:
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_SUCCESS,
        title="Paiement reçu",
        message=f"Vous avez reçu un paiement de {amount}",
        priority=PRIORITY_MEDIUM,
        category=CATEGORY_BUSINESS,
    )


def notify_low_stock(
    service: NotificationService,
    notified_products: NotifiedProductRepository,
    user_id: str,
    *,
    product_id: str,
    product: str,
    level: str,
) -> NotificationRecord | None:
    """Report a product running out of stock once per user and product.

    Returns ``None`` when the product was already reported.
    """

    if level not in (LOW_STOCK_LOW, LOW_STOCK_CRITICAL):
        raise ValueError(f"Niveau de stock inconnu: {level}")

    critical = level == LOW_STOCK_CRITICAL
    with service.lock:
        if product_id in notified_products.list_for_user(user_id):
            logger.debug("Low stock for product %s already reported to %s", product_id, user_id)
            return None
        notification = _emit(
            service,
            user_id,
            type=NOTIFICATION_TYPE_SYSTEM,
            title="Stock critique" if critical else "Stock faible",
            message=f"{product}: niveau {level}",
            priority=PRIORITY_URGENT if critical else PRIORITY_HIGH,
            category=CATEGORY_BUSINESS,
            actions=[
                NotificationAction("Voir le produit", ACTION_VIEW_PRODUCT, ACTION_STYLE_PRIMARY)
            ],
            metadata={"product_id": product_id, "severity": level},
        )
        notified_products.add(user_id, product_id)
    return notification


# System --------------------------------------------------------------------


def notify_system_update(service: NotificationService, user_id: str, update_info: str) -> NotificationRecord:
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_INFO,
        title="Mise à jour système",
        message=f"Le système sera mis à jour: {update_info}",
        priority=PRIORITY_LOW,
        category=CATEGORY_SYSTEM,
    )


def notify_maintenance(
    service: NotificationService, user_id: str, maintenance_info: str
) -> NotificationRecord:
    return _emit(
        service,
        user_id,
        type=NOTIFICATION_TYPE_WARNING,
        title="Maintenance prévue",
        message=f"Maintenance système prévue: {maintenance_info}",
        priority=PRIORITY_MEDIUM,
        category=CATEGORY_SYSTEM,
    )


# Events that only need the notification service, keyed by their public name.
EVENT_CATALOG: dict[str, Callable[..., NotificationRecord]] = {
    "login_success": notify_login_success,
    "login_failed": notify_login_failed,
    "new_device_login": notify_new_device_login,
    "password_changed": notify_password_changed,
    "account_locked": notify_account_locked,
    "email_verified": notify_email_verified,
    "session_expiring": notify_session_expiring,
    "suspicious_activity": notify_suspicious_activity,
    "new_order": notify_new_order,
    "payment_received": notify_payment_received,
    "system_update": notify_system_update,
    "maintenance": notify_maintenance,
}


def fire_event(
    service: NotificationService, event: str, user_id: str, **params: Any
) -> NotificationRecord:
    """Dispatch ``event`` from :data:`EVENT_CATALOG` with keyword ``params``."""

    handler = EVENT_CATALOG.get(event)
    if handler is None:
        raise ValueError(f"Événement de notification inconnu: {event}")
    try:
        inspect.signature(handler).bind(service, user_id, **params)
    except TypeError as exc:
        raise ValueError(f"Paramètres invalides pour l'événement {event}: {exc}") from exc
    return handler(service, user_id, **params)


__all__ = [
    "EVENT_CATALOG",
    "fire_event",
    "notify_account_locked",
    "notify_email_verified",
    "notify_login_failed",
    "notify_login_success",
    "notify_low_stock",
    "notify_maintenance",
    "notify_new_device_login",
    "notify_new_order",
    "notify_password_changed",
    "notify_payment_received",
    "notify_session_expiring",
    "notify_suspicious_activity",
    "notify_system_update",
]
