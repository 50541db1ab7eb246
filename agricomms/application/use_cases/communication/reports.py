"""Statistics and CSV exports for cooperative communications."""

from __future__ import annotations

import csv
import io
import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from agricomms.domain.entities import (
    MESSAGE_STATUS_DELIVERED,
    MESSAGE_STATUS_READ,
    CommunicationStats,
)
from agricomms.infrastructure.repositories import AnnouncementRepository, MessageRepository
from agricomms.utils import ensure_app_timezone, now_in_app_timezone, to_iso

RECENT_ANNOUNCEMENT_WINDOW = timedelta(days=7)

MESSAGE_EXPORT_HEADERS = ("ID", "Sujet", "Type", "Priorité", "Expéditeur", "Statut", "Date création")
ANNOUNCEMENT_EXPORT_HEADERS = (
    "ID",
    "Titre",
    "Type",
    "Auteur",
    "Statut",
    "Visibilité",
    "Date création",
    "Lectures",
)


def _percentage(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    # Half-up rounding; ``round`` would round half to even.
    return math.floor(part * 100 / whole + 0.5)


def get_communication_stats(
    messages: MessageRepository,
    announcements: AnnouncementRepository,
    cooperative_id: str,
    *,
    now: datetime | None = None,
) -> CommunicationStats:
    """Compute the counters shown on the cooperative communication dashboard.

    ``delivery_rate`` is the share of messages delivered or read, and
    ``read_rate`` the share of those delivered messages that were read. Both
    are integer percentages and are ``0`` when their denominator is empty.
    """

    reference = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    message_list = messages.list(cooperative_id)
    announcement_list = announcements.list(cooperative_id)

    unread = sum(1 for message in message_list if message.status != MESSAGE_STATUS_READ)
    delivered = sum(
        1
        for message in message_list
        if message.status in (MESSAGE_STATUS_DELIVERED, MESSAGE_STATUS_READ)
    )
    read = sum(1 for message in message_list if message.status == MESSAGE_STATUS_READ)

    threshold = reference - RECENT_ANNOUNCEMENT_WINDOW
    recent = sum(
        1
        for announcement in announcement_list
        if ensure_app_timezone(announcement.created_at) > threshold
    )

    return CommunicationStats(
        total_messages=len(message_list),
        unread_messages=unread,
        total_announcements=len(announcement_list),
        recent_announcements=recent,
        delivery_rate=_percentage(delivered, len(message_list)),
        read_rate=_percentage(read, delivered),
    )


def _write_csv(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def export_messages(repository: MessageRepository, cooperative_id: str) -> str:
    rows = (
        (
            message.id,
            message.subject,
            message.type,
            message.priority,
            message.sender,
            message.status,
            to_iso(message.created_at),
        )
        for message in repository.list(cooperative_id)
    )
    return _write_csv(MESSAGE_EXPORT_HEADERS, rows)


def export_announcements(repository: AnnouncementRepository, cooperative_id: str) -> str:
    rows = (
        (
            announcement.id,
            announcement.title,
            announcement.type,
            announcement.author,
            announcement.status,
            announcement.visibility,
            to_iso(announcement.created_at),
            announcement.read_count,
        )
        for announcement in repository.list(cooperative_id)
    )
    return _write_csv(ANNOUNCEMENT_EXPORT_HEADERS, rows)


__all__ = [
    "ANNOUNCEMENT_EXPORT_HEADERS",
    "MESSAGE_EXPORT_HEADERS",
    "RECENT_ANNOUNCEMENT_WINDOW",
    "export_announcements",
    "export_messages",
    "get_communication_stats",
]
