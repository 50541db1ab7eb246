"""Tests for notification preference use cases."""

from __future__ import annotations

from datetime import datetime

import pytest

from agricomms.application.use_cases.notifications import (
    get_notification_preferences,
    is_within_quiet_hours,
    update_notification_preferences,
)
from agricomms.domain.entities import (
    EmailPreferences,
    InAppPreferences,
    PushPreferences,
    QuietHours,
    SmsPreferences,
)
from agricomms.utils import get_app_timezone


def test_default_preferences_are_returned_exactly(preference_repository):
    preferences = get_notification_preferences(preference_repository, "new-user")

    assert preferences.email == EmailPreferences(
        enabled=True, types=["security", "business"], frequency="immediate"
    )
    assert preferences.push == PushPreferences(
        enabled=True,
        types=["security", "business"],
        quiet_hours=QuietHours(enabled=True, start="22:00", end="08:00"),
    )
    assert preferences.sms == SmsPreferences(enabled=False, types=["security"])
    assert preferences.in_app == InAppPreferences(enabled=True, max_unread=50)


def test_update_merges_channels(preference_repository):
    update_notification_preferences(
        preference_repository, "u1", {"sms": SmsPreferences(enabled=True, types=["security", "auth"])}
    )
    updated = update_notification_preferences(
        preference_repository, "u1", {"in_app": InAppPreferences(enabled=False, max_unread=10)}
    )

    assert updated.sms.enabled is True
    assert updated.in_app.max_unread == 10
    assert get_notification_preferences(preference_repository, "u1") == updated


@pytest.mark.parametrize(
    "partial",
    [
        {"fax": SmsPreferences()},
        {"email": SmsPreferences()},
        {"email": EmailPreferences(types=["marketing"])},
        {"email": EmailPreferences(frequency="hourly")},
        {"push": PushPreferences(quiet_hours=QuietHours(start="25:00"))},
        {"push": PushPreferences(quiet_hours=QuietHours(end="8h"))},
        {"in_app": InAppPreferences(max_unread=0)},
    ],
)
def test_invalid_updates_are_rejected_before_saving(preference_repository, store, partial):
    with pytest.raises(ValueError):
        update_notification_preferences(preference_repository, "u1", partial)

    assert store.get("notification_preferences_u1") is None


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 10, 1, hour, minute, tzinfo=get_app_timezone())


@pytest.mark.parametrize(
    ("hour", "minute", "expected"),
    [(21, 59, False), (22, 0, True), (23, 30, True), (3, 0, True), (7, 59, True), (8, 0, False), (12, 0, False)],
)
def test_quiet_hours_wrap_past_midnight(hour, minute, expected):
    assert is_within_quiet_hours(QuietHours(), _at(hour, minute)) is expected


def test_quiet_hours_same_day_window():
    window = QuietHours(enabled=True, start="12:00", end="14:00")

    assert is_within_quiet_hours(window, _at(13)) is True
    assert is_within_quiet_hours(window, _at(14)) is False


def test_disabled_or_empty_quiet_hours_never_match():
    assert is_within_quiet_hours(QuietHours(enabled=False), _at(23)) is False
    assert is_within_quiet_hours(QuietHours(start="10:00", end="10:00"), _at(10)) is False
