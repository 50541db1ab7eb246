"""Domain entities describing notification delivery preferences."""

from __future__ import annotations

from dataclasses import dataclass, field

FREQUENCY_IMMEDIATE = "immediate"
FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCIES = frozenset({FREQUENCY_IMMEDIATE, FREQUENCY_DAILY, FREQUENCY_WEEKLY})

CHANNEL_EMAIL = "email"
CHANNEL_PUSH = "push"
CHANNEL_SMS = "sms"
CHANNEL_IN_APP = "in_app"
CHANNELS = (CHANNEL_EMAIL, CHANNEL_PUSH, CHANNEL_SMS, CHANNEL_IN_APP)


@dataclass
class QuietHours:
    """Wall-clock window (``HH:MM``) during which push delivery is muted."""

    enabled: bool = True
    start: str = "22:00"
    end: str = "08:00"


@dataclass
class EmailPreferences:
    enabled: bool = True
    types: list[str] = field(default_factory=lambda: ["security", "business"])
    frequency: str = FREQUENCY_IMMEDIATE


@dataclass
class PushPreferences:
    enabled: bool = True
    types: list[str] = field(default_factory=lambda: ["security", "business"])
    quiet_hours: QuietHours = field(default_factory=QuietHours)


@dataclass
class SmsPreferences:
    enabled: bool = False
    types: list[str] = field(default_factory=lambda: ["security"])


@dataclass
class InAppPreferences:
    enabled: bool = True
    max_unread: int = 50


@dataclass
class NotificationPreferences:
    """Per-user delivery configuration for every notification channel.

    A freshly constructed instance is the default configuration returned to
    users that never saved their own preferences.
    """

    email: EmailPreferences = field(default_factory=EmailPreferences)
    push: PushPreferences = field(default_factory=PushPreferences)
    sms: SmsPreferences = field(default_factory=SmsPreferences)
    in_app: InAppPreferences = field(default_factory=InAppPreferences)


def default_preferences() -> NotificationPreferences:
    """Return the configuration applied when a user has no stored preferences."""

    return NotificationPreferences()


__all__ = [
    "CHANNELS",
    "FREQUENCIES",
    "EmailPreferences",
    "InAppPreferences",
    "NotificationPreferences",
    "PushPreferences",
    "QuietHours",
    "SmsPreferences",
    "default_preferences",
]
