"""Routes to read and update notification preferences."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from agricomms.application.use_cases.notifications import (
    get_notification_preferences,
    update_notification_preferences,
)
from agricomms.domain.entities import (
    EmailPreferences,
    InAppPreferences,
    PushPreferences,
    QuietHours,
    SmsPreferences,
)
from agricomms.infrastructure.repositories import NotificationPreferenceRepository
from agricomms.interfaces.api.dependencies import get_preference_repository
from agricomms.interfaces.api.schemas import (
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
)

router = APIRouter(prefix="/users/{user_id}/notification-preferences", tags=["preferences"])


def _to_partial(preferences_in: NotificationPreferencesUpdate) -> dict[str, Any]:
    partial: dict[str, Any] = {}
    if preferences_in.email is not None:
        partial["email"] = EmailPreferences(
            enabled=preferences_in.email.enabled,
            types=list(preferences_in.email.types),
            frequency=preferences_in.email.frequency,
        )
    if preferences_in.push is not None:
        quiet_hours = preferences_in.push.quiet_hours
        partial["push"] = PushPreferences(
            enabled=preferences_in.push.enabled,
            types=list(preferences_in.push.types),
            quiet_hours=QuietHours(
                enabled=quiet_hours.enabled, start=quiet_hours.start, end=quiet_hours.end
            ),
        )
    if preferences_in.sms is not None:
        partial["sms"] = SmsPreferences(
            enabled=preferences_in.sms.enabled, types=list(preferences_in.sms.types)
        )
    if preferences_in.in_app is not None:
        partial["in_app"] = InAppPreferences(
            enabled=preferences_in.in_app.enabled, max_unread=preferences_in.in_app.max_unread
        )
    return partial


@router.get("", response_model=NotificationPreferencesRead)
def read_preferences(
    user_id: str,
    repository: NotificationPreferenceRepository = Depends(get_preference_repository),
) -> NotificationPreferencesRead:
    """Retourne les préférences de l'utilisateur (valeurs par défaut si absentes)."""

    preferences = get_notification_preferences(repository, user_id)
    return NotificationPreferencesRead.model_validate(preferences)


@router.patch("", response_model=NotificationPreferencesRead)
def update_preferences(
    user_id: str,
    preferences_in: NotificationPreferencesUpdate,
    repository: NotificationPreferenceRepository = Depends(get_preference_repository),
) -> NotificationPreferencesRead:
    """Met à jour les canaux fournis; les autres canaux restent inchangés."""

    try:
        preferences = update_notification_preferences(
            repository, user_id, _to_partial(preferences_in)
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return NotificationPreferencesRead.model_validate(preferences)


__all__ = ["router"]
