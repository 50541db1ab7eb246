"""JSON conversion helpers shared by the cooperative registries."""

from __future__ import annotations

from typing import Any

from agricomms.domain.entities import (
    Announcement,
    AnnouncementComment,
    Attachment,
    Message,
    ReadReceipt,
)
from agricomms.utils import parse_iso, to_iso


def _required_datetime(value: Any, field_name: str):
    parsed = parse_iso(value)
    if parsed is None:
        raise ValueError(f"{field_name} is required")
    return parsed


def attachment_to_payload(attachment: Attachment) -> dict[str, Any]:
    return {
        "name": attachment.name,
        "type": attachment.type,
        "size": attachment.size,
        "url": attachment.url,
    }


def attachment_from_payload(payload: dict[str, Any]) -> Attachment:
    return Attachment(
        name=payload["name"],
        type=payload["type"],
        size=str(payload["size"]),
        url=payload["url"],
    )


def receipt_to_payload(receipt: ReadReceipt) -> dict[str, Any]:
    return {
        "memberId": receipt.member_id,
        "memberName": receipt.member_name,
        "readAt": to_iso(receipt.read_at),
    }


def receipt_from_payload(payload: dict[str, Any]) -> ReadReceipt:
    return ReadReceipt(
        member_id=str(payload["memberId"]),
        member_name=payload["memberName"],
        read_at=_required_datetime(payload["readAt"], "readAt"),
    )


def message_to_payload(message: Message) -> dict[str, Any]:
    return {
        "id": message.id,
        "subject": message.subject,
        "content": message.content,
        "type": message.type,
        "priority": message.priority,
        "sender": message.sender,
        "senderRole": message.sender_role,
        "recipients": list(message.recipients),
        "targetGroups": list(message.target_groups),
        "status": message.status,
        "createdAt": to_iso(message.created_at),
        "scheduledAt": to_iso(message.scheduled_at),
        "deliveredAt": to_iso(message.delivered_at),
        "readAt": to_iso(message.read_at),
        "attachments": [attachment_to_payload(item) for item in message.attachments],
        "readBy": [receipt_to_payload(item) for item in message.read_by],
    }


def message_from_payload(payload: dict[str, Any]) -> Message:
    return Message(
        id=str(payload["id"]),
        subject=payload["subject"],
        content=payload["content"],
        type=payload["type"],
        priority=payload["priority"],
        sender=payload["sender"],
        sender_role=payload["senderRole"],
        recipients=list(payload.get("recipients") or []),
        target_groups=list(payload.get("targetGroups") or []),
        status=payload["status"],
        created_at=_required_datetime(payload["createdAt"], "createdAt"),
        scheduled_at=parse_iso(payload.get("scheduledAt")),
        delivered_at=parse_iso(payload.get("deliveredAt")),
        read_at=parse_iso(payload.get("readAt")),
        attachments=[attachment_from_payload(item) for item in payload.get("attachments") or []],
        read_by=[receipt_from_payload(item) for item in payload.get("readBy") or []],
    )


def announcement_to_payload(announcement: Announcement) -> dict[str, Any]:
    return {
        "id": announcement.id,
        "title": announcement.title,
        "content": announcement.content,
        "type": announcement.type,
        "author": announcement.author,
        "authorRole": announcement.author_role,
        "status": announcement.status,
        "visibility": announcement.visibility,
        "createdAt": to_iso(announcement.created_at),
        "updatedAt": to_iso(announcement.updated_at),
        "expiresAt": to_iso(announcement.expires_at),
        "readCount": announcement.read_count,
        "attachments": [attachment_to_payload(item) for item in announcement.attachments],
        "comments": [
            {
                "id": comment.id,
                "author": comment.author,
                "authorRole": comment.author_role,
                "content": comment.content,
                "createdAt": to_iso(comment.created_at),
            }
            for comment in announcement.comments
        ],
        "readBy": [receipt_to_payload(item) for item in announcement.read_by],
    }


def announcement_from_payload(payload: dict[str, Any]) -> Announcement:
    return Announcement(
        id=str(payload["id"]),
        title=payload["title"],
        content=payload["content"],
        type=payload["type"],
        author=payload["author"],
        author_role=payload["authorRole"],
        status=payload["status"],
        visibility=payload["visibility"],
        created_at=_required_datetime(payload["createdAt"], "createdAt"),
        updated_at=_required_datetime(payload["updatedAt"], "updatedAt"),
        expires_at=parse_iso(payload.get("expiresAt")),
        read_count=int(payload.get("readCount") or 0),
        attachments=[attachment_from_payload(item) for item in payload.get("attachments") or []],
        comments=[
            AnnouncementComment(
                id=str(item["id"]),
                author=item["author"],
                author_role=item["authorRole"],
                content=item["content"],
                created_at=_required_datetime(item["createdAt"], "createdAt"),
            )
            for item in payload.get("comments") or []
        ],
        read_by=[receipt_from_payload(item) for item in payload.get("readBy") or []],
    )


__all__ = [
    "announcement_from_payload",
    "announcement_to_payload",
    "message_from_payload",
    "message_to_payload",
]
