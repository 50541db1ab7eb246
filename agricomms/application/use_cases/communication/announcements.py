"""Use cases for cooperative announcements."""

from __future__ import annotations

import logging
import uuid
from dataclasses import fields, replace
from datetime import datetime
from typing import Any

from agricomms.domain.entities import (
    ANNOUNCEMENT_STATUS_ARCHIVED,
    ANNOUNCEMENT_STATUS_DRAFT,
    ANNOUNCEMENT_STATUS_PUBLISHED,
    ANNOUNCEMENT_STATUSES,
    ANNOUNCEMENT_TYPES,
    ANNOUNCEMENT_VISIBILITIES,
    FILTER_ALL,
    Announcement,
    AnnouncementComment,
    Attachment,
    ReadReceipt,
)
from agricomms.infrastructure.repositories import AnnouncementRepository
from agricomms.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

# Fields maintained by the registry itself.
_MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at", "read_count", "read_by"})
_NULLABLE_FIELDS = frozenset({"expires_at"})
_ANNOUNCEMENT_FIELDS = frozenset(field.name for field in fields(Announcement))


def _validate_choices(
    *,
    type: str | None = None,
    status: str | None = None,
    visibility: str | None = None,
) -> None:
    if type is not None and type not in ANNOUNCEMENT_TYPES:
        raise ValueError(f"Type d'annonce inconnu: {type}")
    if status is not None and status not in ANNOUNCEMENT_STATUSES:
        raise ValueError(f"Statut d'annonce inconnu: {status}")
    if visibility is not None and visibility not in ANNOUNCEMENT_VISIBILITIES:
        raise ValueError(f"Visibilité inconnue: {visibility}")


def get_announcement(
    repository: AnnouncementRepository, cooperative_id: str, announcement_id: str
) -> Announcement:
    announcement = repository.get(cooperative_id, announcement_id)
    if announcement is None:
        raise ValueError("Annonce introuvable")
    return announcement


def list_announcements(repository: AnnouncementRepository, cooperative_id: str) -> list[Announcement]:
    return repository.list(cooperative_id)


def create_announcement(
    repository: AnnouncementRepository,
    cooperative_id: str,
    *,
    title: str,
    content: str,
    type: str,
    author: str,
    author_role: str,
    visibility: str,
    status: str = ANNOUNCEMENT_STATUS_DRAFT,
    expires_at: datetime | None = None,
    attachments: list[Attachment] | None = None,
) -> Announcement:
    """Create an announcement with no readers yet."""

    _validate_choices(type=type, status=status, visibility=visibility)
    now = now_in_app_timezone()
    announcement = Announcement(
        id=uuid.uuid4().hex,
        title=title,
        content=content,
        type=type,
        author=author,
        author_role=author_role,
        status=status,
        visibility=visibility,
        created_at=now,
        updated_at=now,
        read_count=0,
        expires_at=expires_at,
        attachments=list(attachments or []),
    )
    return repository.create(cooperative_id, announcement)


def _apply(
    repository: AnnouncementRepository,
    cooperative_id: str,
    current: Announcement,
    **changes: Any,
) -> Announcement:
    updated = replace(current, **changes, updated_at=now_in_app_timezone())
    return repository.update(cooperative_id, updated)


def update_announcement(
    repository: AnnouncementRepository,
    cooperative_id: str,
    announcement_id: str,
    **changes: Any,
) -> Announcement:
    """Apply field ``changes`` and refresh ``updated_at``."""

    with repository.lock:
        current = get_announcement(repository, cooperative_id, announcement_id)
        unknown = set(changes) - _ANNOUNCEMENT_FIELDS
        if unknown:
            raise ValueError(f"Champs inconnus: {', '.join(sorted(unknown))}")
        if set(changes) & _MANAGED_FIELDS:
            raise ValueError("Ces champs sont gérés automatiquement et ne peuvent pas être modifiés")
        missing = sorted(
            name for name, value in changes.items() if value is None and name not in _NULLABLE_FIELDS
        )
        if missing:
            raise ValueError(f"Champs obligatoires: {', '.join(missing)}")
        _validate_choices(
            type=changes.get("type"),
            status=changes.get("status"),
            visibility=changes.get("visibility"),
        )
        return _apply(repository, cooperative_id, current, **changes)


def delete_announcement(
    repository: AnnouncementRepository, cooperative_id: str, announcement_id: str
) -> None:
    if not repository.delete(cooperative_id, announcement_id):
        raise ValueError("Annonce introuvable")


def publish_announcement(
    repository: AnnouncementRepository, cooperative_id: str, announcement_id: str
) -> Announcement:
    announcement = update_announcement(
        repository, cooperative_id, announcement_id, status=ANNOUNCEMENT_STATUS_PUBLISHED
    )
    logger.info("Announcement %s published in cooperative %s", announcement_id, cooperative_id)
    return announcement


def archive_announcement(
    repository: AnnouncementRepository, cooperative_id: str, announcement_id: str
) -> Announcement:
    return update_announcement(
        repository, cooperative_id, announcement_id, status=ANNOUNCEMENT_STATUS_ARCHIVED
    )


def mark_announcement_as_read(
    repository: AnnouncementRepository,
    cooperative_id: str,
    announcement_id: str,
    *,
    member_id: str,
    member_name: str,
) -> bool:
    """Record that ``member_id`` read the announcement.

    Returns ``False`` (and changes nothing) when the member already read it.
    """

    with repository.lock:
        current = get_announcement(repository, cooperative_id, announcement_id)
        if current.has_been_read_by(member_id):
            return False

        receipt = ReadReceipt(
            member_id=member_id, member_name=member_name, read_at=now_in_app_timezone()
        )
        _apply(
            repository,
            cooperative_id,
            current,
            read_by=[*current.read_by, receipt],
            read_count=current.read_count + 1,
        )
    return True


def add_announcement_comment(
    repository: AnnouncementRepository,
    cooperative_id: str,
    announcement_id: str,
    *,
    author: str,
    author_role: str,
    content: str,
) -> AnnouncementComment:
    if not content.strip():
        raise ValueError("Le commentaire ne peut pas être vide")
    comment = AnnouncementComment(
        id=uuid.uuid4().hex,
        author=author,
        author_role=author_role,
        content=content,
        created_at=now_in_app_timezone(),
    )
    with repository.lock:
        current = get_announcement(repository, cooperative_id, announcement_id)
        _apply(repository, cooperative_id, current, comments=[*current.comments, comment])
    return comment


def search_announcements(
    repository: AnnouncementRepository, cooperative_id: str, query: str
) -> list[Announcement]:
    """Case-insensitive search across title, content and author."""

    needle = query.lower()
    return [
        announcement
        for announcement in repository.list(cooperative_id)
        if needle in announcement.title.lower()
        or needle in announcement.content.lower()
        or needle in announcement.author.lower()
    ]


def filter_announcements(
    repository: AnnouncementRepository,
    cooperative_id: str,
    *,
    type: str = FILTER_ALL,
    visibility: str = FILTER_ALL,
    status: str = FILTER_ALL,
) -> list[Announcement]:
    announcements = repository.list(cooperative_id)
    if type != FILTER_ALL:
        announcements = [item for item in announcements if item.type == type]
    if visibility != FILTER_ALL:
        announcements = [item for item in announcements if item.visibility == visibility]
    if status != FILTER_ALL:
        announcements = [item for item in announcements if item.status == status]
    return announcements


__all__ = [
    "add_announcement_comment",
    "archive_announcement",
    "create_announcement",
    "delete_announcement",
    "filter_announcements",
    "get_announcement",
    "list_announcements",
    "mark_announcement_as_read",
    "publish_announcement",
    "search_announcements",
    "update_announcement",
]
