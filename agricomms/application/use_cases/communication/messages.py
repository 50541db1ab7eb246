"""Use cases for cooperative messages."""

from __future__ import annotations

import logging
import uuid
from dataclasses import fields, replace
from datetime import datetime
from typing import Any

from agricomms.domain.entities import (
    FILTER_ALL,
    MESSAGE_STATUS_DRAFT,
    MESSAGE_STATUS_READ,
    MESSAGE_STATUS_SENT,
    MESSAGE_STATUSES,
    MESSAGE_TYPES,
    PRIORITIES,
    Attachment,
    Message,
)
from agricomms.infrastructure.repositories import MessageRepository
from agricomms.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
_NULLABLE_FIELDS = frozenset({"scheduled_at", "delivered_at", "read_at"})
_MESSAGE_FIELDS = frozenset(field.name for field in fields(Message))


def _validate_choices(*, type: str | None = None, priority: str | None = None, status: str | None = None) -> None:
    if type is not None and type not in MESSAGE_TYPES:
        raise ValueError(f"Type de message inconnu: {type}")
    if priority is not None and priority not in PRIORITIES:
        raise ValueError(f"Priorité inconnue: {priority}")
    if status is not None and status not in MESSAGE_STATUSES:
        raise ValueError(f"Statut de message inconnu: {status}")


def get_message(repository: MessageRepository, cooperative_id: str, message_id: str) -> Message:
    message = repository.get(cooperative_id, message_id)
    if message is None:
        raise ValueError("Message introuvable")
    return message


def list_messages(repository: MessageRepository, cooperative_id: str) -> list[Message]:
    return repository.list(cooperative_id)


def create_message(
    repository: MessageRepository,
    cooperative_id: str,
    *,
    subject: str,
    content: str,
    type: str,
    priority: str,
    sender: str,
    sender_role: str,
    recipients: list[str],
    target_groups: list[str],
    scheduled_at: datetime | None = None,
    attachments: list[Attachment] | None = None,
) -> Message:
    """Create a new message in ``draft`` status."""

    _validate_choices(type=type, priority=priority)
    message = Message(
        id=uuid.uuid4().hex,
        subject=subject,
        content=content,
        type=type,
        priority=priority,
        sender=sender,
        sender_role=sender_role,
        recipients=list(recipients),
        target_groups=list(target_groups),
        status=MESSAGE_STATUS_DRAFT,
        created_at=now_in_app_timezone(),
        scheduled_at=scheduled_at,
        attachments=list(attachments or []),
    )
    return repository.create(cooperative_id, message)


def update_message(
    repository: MessageRepository,
    cooperative_id: str,
    message_id: str,
    **changes: Any,
) -> Message:
    """Apply the provided field ``changes`` to an existing message."""

    with repository.lock:
        current = get_message(repository, cooperative_id, message_id)
        unknown = set(changes) - _MESSAGE_FIELDS
        if unknown:
            raise ValueError(f"Champs inconnus: {', '.join(sorted(unknown))}")
        if set(changes) & _IMMUTABLE_FIELDS:
            raise ValueError("L'identifiant et la date de création ne peuvent pas être modifiés")
        missing = sorted(
            name for name, value in changes.items() if value is None and name not in _NULLABLE_FIELDS
        )
        if missing:
            raise ValueError(f"Champs obligatoires: {', '.join(missing)}")
        _validate_choices(
            type=changes.get("type"),
            priority=changes.get("priority"),
            status=changes.get("status"),
        )
        return repository.update(cooperative_id, replace(current, **changes))


def delete_message(repository: MessageRepository, cooperative_id: str, message_id: str) -> None:
    if not repository.delete(cooperative_id, message_id):
        raise ValueError("Message introuvable")


def send_message(repository: MessageRepository, cooperative_id: str, message_id: str) -> Message:
    """Mark the message as sent and stamp its delivery time."""

    message = update_message(
        repository,
        cooperative_id,
        message_id,
        status=MESSAGE_STATUS_SENT,
        delivered_at=now_in_app_timezone(),
    )
    logger.info("Message %s sent to cooperative %s", message_id, cooperative_id)
    return message


def mark_message_as_read(repository: MessageRepository, cooperative_id: str, message_id: str) -> Message:
    # A single aggregate status: the first reader flips the whole message.
    return update_message(
        repository,
        cooperative_id,
        message_id,
        status=MESSAGE_STATUS_READ,
        read_at=now_in_app_timezone(),
    )


def search_messages(repository: MessageRepository, cooperative_id: str, query: str) -> list[Message]:
    """Case-insensitive search across subject, content and sender."""

    needle = query.lower()
    return [
        message
        for message in repository.list(cooperative_id)
        if needle in message.subject.lower()
        or needle in message.content.lower()
        or needle in message.sender.lower()
    ]


def filter_messages(
    repository: MessageRepository,
    cooperative_id: str,
    *,
    type: str = FILTER_ALL,
    priority: str = FILTER_ALL,
    status: str = FILTER_ALL,
) -> list[Message]:
    """Return messages matching every filter; ``"all"`` disables a filter."""

    messages = repository.list(cooperative_id)
    if type != FILTER_ALL:
        messages = [message for message in messages if message.type == type]
    if priority != FILTER_ALL:
        messages = [message for message in messages if message.priority == priority]
    if status != FILTER_ALL:
        messages = [message for message in messages if message.status == status]
    return messages


__all__ = [
    "create_message",
    "delete_message",
    "filter_messages",
    "get_message",
    "list_messages",
    "mark_message_as_read",
    "search_messages",
    "send_message",
    "update_message",
]
