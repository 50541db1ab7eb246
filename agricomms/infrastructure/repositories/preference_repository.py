"""Persistence helpers for notification preferences."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from agricomms.domain.entities import (
    EmailPreferences,
    InAppPreferences,
    NotificationPreferences,
    PushPreferences,
    QuietHours,
    SmsPreferences,
    default_preferences,
)
from agricomms.infrastructure.storage import KeyValueStore, StorageReadError

logger = logging.getLogger(__name__)


class NotificationPreferenceRepository:
    """Store exactly one preferences document per user."""

    def __init__(
        self, store: KeyValueStore, *, namespace: str = "notification_preferences"
    ) -> None:
        self.store = store
        self.namespace = namespace

    def key_for(self, user_id: str) -> str:
        return f"{self.namespace}_{user_id}"

    def get(self, user_id: str) -> NotificationPreferences:
        """Return the stored preferences or the defaults when none can be read."""

        key = self.key_for(user_id)
        try:
            raw = self.store.get(key)
        except StorageReadError as exc:
            logger.warning("Could not read preferences for user %s: %s", user_id, exc)
            return default_preferences()
        if raw is None:
            return default_preferences()

        try:
            payload = json.loads(raw)
            if not isinstance(payload, dict):
                raise ValueError("Stored preferences must be a JSON object")
            return self._to_entity(payload)
        except (ValueError, TypeError, KeyError, AttributeError, OverflowError) as exc:
            logger.warning("Discarding unreadable preferences stored under %s: %s", key, exc)
            return default_preferences()

    def save(self, user_id: str, preferences: NotificationPreferences) -> NotificationPreferences:
        self.store.set(self.key_for(user_id), json.dumps(self._to_payload(preferences)))
        return preferences

    def update(self, user_id: str, partial: Mapping[str, Any]) -> NotificationPreferences:
        """Replace the channels present in ``partial`` and persist the result.

        The merge is shallow: a supplied channel replaces the stored channel
        as a whole.
        """

        merged = replace(self.get(user_id), **dict(partial))
        return self.save(user_id, merged)

    @staticmethod
    def _to_payload(preferences: NotificationPreferences) -> dict[str, Any]:
        return {
            "email": {
                "enabled": preferences.email.enabled,
                "types": list(preferences.email.types),
                "frequency": preferences.email.frequency,
            },
            "push": {
                "enabled": preferences.push.enabled,
                "types": list(preferences.push.types),
                "quietHours": {
                    "enabled": preferences.push.quiet_hours.enabled,
                    "start": preferences.push.quiet_hours.start,
                    "end": preferences.push.quiet_hours.end,
                },
            },
            "sms": {
                "enabled": preferences.sms.enabled,
                "types": list(preferences.sms.types),
            },
            "inApp": {
                "enabled": preferences.in_app.enabled,
                "maxUnread": preferences.in_app.max_unread,
            },
        }

    @staticmethod
    def _to_entity(payload: dict[str, Any]) -> NotificationPreferences:
        defaults = default_preferences()

        email = payload.get("email")
        push = payload.get("push")
        sms = payload.get("sms")
        in_app = payload.get("inApp")

        email_prefs = defaults.email
        if email is not None:
            email_prefs = EmailPreferences(
                enabled=bool(email["enabled"]),
                types=list(email["types"]),
                frequency=email["frequency"],
            )

        push_prefs = defaults.push
        if push is not None:
            quiet = push.get("quietHours")
            push_prefs = PushPreferences(
                enabled=bool(push["enabled"]),
                types=list(push["types"]),
                quiet_hours=QuietHours(
                    enabled=bool(quiet["enabled"]),
                    start=quiet["start"],
                    end=quiet["end"],
                )
                if quiet is not None
                else QuietHours(),
            )

        sms_prefs = defaults.sms
        if sms is not None:
            sms_prefs = SmsPreferences(enabled=bool(sms["enabled"]), types=list(sms["types"]))

        in_app_prefs = defaults.in_app
        if in_app is not None:
            in_app_prefs = InAppPreferences(
                enabled=bool(in_app["enabled"]), max_unread=int(in_app["maxUnread"])
            )

        return NotificationPreferences(
            email=email_prefs, push=push_prefs, sms=sms_prefs, in_app=in_app_prefs
        )


__all__ = ["NotificationPreferenceRepository"]
