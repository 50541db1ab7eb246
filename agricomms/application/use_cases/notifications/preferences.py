"""Use cases for reading and updating notification preferences."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime, time
from typing import Any

from agricomms.domain.entities import (
    CATEGORIES,
    CHANNELS,
    FREQUENCIES,
    EmailPreferences,
    InAppPreferences,
    NotificationPreferences,
    PushPreferences,
    QuietHours,
    SmsPreferences,
)
from agricomms.infrastructure.repositories import NotificationPreferenceRepository
from agricomms.utils import ensure_app_timezone

_TIME_PATTERN = re.compile(r"^(?P<hour>[01]\d|2[0-3]):(?P<minute>[0-5]\d)$")

_CHANNEL_TYPES: dict[str, type] = {
    "email": EmailPreferences,
    "push": PushPreferences,
    "sms": SmsPreferences,
    "in_app": InAppPreferences,
}


def get_notification_preferences(
    repository: NotificationPreferenceRepository, user_id: str
) -> NotificationPreferences:
    """Return the preferences of ``user_id`` (defaults when none are stored)."""

    return repository.get(user_id)


def update_notification_preferences(
    repository: NotificationPreferenceRepository,
    user_id: str,
    partial: Mapping[str, Any],
) -> NotificationPreferences:
    """Validate ``partial`` and merge it over the stored preferences."""

    for channel, value in partial.items():
        if channel not in CHANNELS:
            raise ValueError(f"Canal de notification inconnu: {channel}")
        expected = _CHANNEL_TYPES[channel]
        if not isinstance(value, expected):
            raise ValueError(f"Configuration invalide pour le canal {channel}")
        _validate_channel(channel, value)

    return repository.update(user_id, partial)


def _validate_channel(channel: str, value: Any) -> None:
    types = getattr(value, "types", None)
    if types is not None:
        _ensure_known_categories(channel, types)
    if isinstance(value, EmailPreferences) and value.frequency not in FREQUENCIES:
        raise ValueError(f"Fréquence inconnue: {value.frequency}")
    if isinstance(value, PushPreferences):
        parse_time_of_day(value.quiet_hours.start)
        parse_time_of_day(value.quiet_hours.end)
    if isinstance(value, InAppPreferences) and value.max_unread <= 0:
        raise ValueError("Le nombre maximal de notifications non lues doit être positif")


def _ensure_known_categories(channel: str, categories: Iterable[str]) -> None:
    unknown = sorted(set(categories) - CATEGORIES)
    if unknown:
        joined = ", ".join(unknown)
        raise ValueError(f"Catégories inconnues pour le canal {channel}: {joined}")


def parse_time_of_day(value: str) -> time:
    """Parse a ``HH:MM`` wall-clock string."""

    match = _TIME_PATTERN.match(value or "")
    if match is None:
        raise ValueError(f"Heure invalide (format attendu HH:MM): {value}")
    return time(int(match.group("hour")), int(match.group("minute")))


def is_within_quiet_hours(quiet_hours: QuietHours, at: datetime) -> bool:
    """Return ``True`` when ``at`` falls inside the quiet-hours window.

    The window is ``[start, end)`` in the application timezone and may wrap
    past midnight (``22:00``-``08:00``). A window whose start equals its end
    is treated as empty.
    """

    if not quiet_hours.enabled:
        return False
    start = parse_time_of_day(quiet_hours.start)
    end = parse_time_of_day(quiet_hours.end)
    localized = ensure_app_timezone(at)
    current = localized.time().replace(second=0, microsecond=0, tzinfo=None)
    if start == end:
        return False
    if start < end:
        return start <= current < end
    return current >= start or current < end


__all__ = [
    "get_notification_preferences",
    "is_within_quiet_hours",
    "parse_time_of_day",
    "update_notification_preferences",
]
