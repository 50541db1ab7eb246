"""Routes for cooperative messages, announcements and their reports."""

from __future__ import annotations

from typing import Any, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from agricomms.application.use_cases.communication import (
    add_announcement_comment as add_announcement_comment_uc,
    archive_announcement as archive_announcement_uc,
    create_announcement as create_announcement_uc,
    create_message as create_message_uc,
    delete_announcement as delete_announcement_uc,
    delete_message as delete_message_uc,
    export_announcements as export_announcements_uc,
    export_messages as export_messages_uc,
    filter_announcements,
    filter_messages,
    get_announcement as get_announcement_uc,
    get_communication_stats,
    get_message as get_message_uc,
    mark_announcement_as_read as mark_announcement_as_read_uc,
    mark_message_as_read as mark_message_as_read_uc,
    publish_announcement as publish_announcement_uc,
    search_announcements,
    search_messages,
    send_message as send_message_uc,
    update_announcement as update_announcement_uc,
    update_message as update_message_uc,
)
from agricomms.domain.entities import FILTER_ALL, Announcement, Attachment, Message
from agricomms.infrastructure.repositories import AnnouncementRepository, MessageRepository
from agricomms.interfaces.api.dependencies import (
    get_announcement_repository,
    get_message_repository,
)
from agricomms.interfaces.api.schemas import (
    AnnouncementCommentCreate,
    AnnouncementCommentRead,
    AnnouncementCreate,
    AnnouncementMarkRead,
    AnnouncementMarkReadResult,
    AnnouncementRead,
    AnnouncementUpdate,
    AttachmentSchema,
    CommunicationStatsRead,
    MessageCreate,
    MessageRead,
    MessageUpdate,
)

router = APIRouter(prefix="/cooperatives/{cooperative_id}", tags=["cooperatives"])

_NOT_FOUND_MESSAGES = {"Message introuvable", "Annonce introuvable"}


def _raise_http_error(exc: ValueError) -> NoReturn:
    status_code = status.HTTP_400_BAD_REQUEST
    if str(exc) in _NOT_FOUND_MESSAGES:
        status_code = status.HTTP_404_NOT_FOUND
    raise HTTPException(status_code=status_code, detail=str(exc)) from exc


def _to_attachments(attachments: list[AttachmentSchema]) -> list[Attachment]:
    return [
        Attachment(name=item.name, type=item.type, size=item.size, url=item.url)
        for item in attachments
    ]


def _changes_from(update_in: MessageUpdate | AnnouncementUpdate) -> dict[str, Any]:
    changes = update_in.model_dump(exclude_unset=True)
    if "attachments" in changes:
        changes["attachments"] = _to_attachments(update_in.attachments or [])
    return changes


def _message_to_schema(message: Message) -> MessageRead:
    return MessageRead.model_validate(message)


def _announcement_to_schema(announcement: Announcement) -> AnnouncementRead:
    return AnnouncementRead.model_validate(announcement)


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# Messages ------------------------------------------------------------------


@router.get("/messages", response_model=list[MessageRead])
def list_messages(
    cooperative_id: str,
    q: str | None = Query(default=None, description="Texte recherché"),
    type: str = FILTER_ALL,
    priority: str = FILTER_ALL,
    status_filter: str = Query(default=FILTER_ALL, alias="status"),
    repository: MessageRepository = Depends(get_message_repository),
) -> list[MessageRead]:
    """Liste les messages de la coopérative, avec recherche et filtres optionnels."""

    messages = filter_messages(
        repository, cooperative_id, type=type, priority=priority, status=status_filter
    )
    if q:
        matching = {message.id for message in search_messages(repository, cooperative_id, q)}
        messages = [message for message in messages if message.id in matching]
    return [_message_to_schema(message) for message in messages]


@router.post("/messages", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def create_message(
    cooperative_id: str,
    message_in: MessageCreate,
    repository: MessageRepository = Depends(get_message_repository),
) -> MessageRead:
    """Crée un message en brouillon."""

    try:
        message = create_message_uc(
            repository,
            cooperative_id,
            subject=message_in.subject,
            content=message_in.content,
            type=message_in.type,
            priority=message_in.priority,
            sender=message_in.sender,
            sender_role=message_in.sender_role,
            recipients=message_in.recipients,
            target_groups=message_in.target_groups,
            scheduled_at=message_in.scheduled_at,
            attachments=_to_attachments(message_in.attachments),
        )
    except ValueError as exc:
        _raise_http_error(exc)
    return _message_to_schema(message)


@router.get("/messages/export")
def export_messages(
    cooperative_id: str,
    repository: MessageRepository = Depends(get_message_repository),
) -> Response:
    """Exporte les messages au format CSV."""

    return _csv_response(export_messages_uc(repository, cooperative_id), "messages.csv")


@router.get("/messages/{message_id}", response_model=MessageRead)
def read_message(
    cooperative_id: str,
    message_id: str,
    repository: MessageRepository = Depends(get_message_repository),
) -> MessageRead:
    try:
        message = get_message_uc(repository, cooperative_id, message_id)
    except ValueError as exc:
        _raise_http_error(exc)
    return _message_to_schema(message)


@router.patch("/messages/{message_id}", response_model=MessageRead)
def update_message(
    cooperative_id: str,
    message_id: str,
    message_in: MessageUpdate,
    repository: MessageRepository = Depends(get_message_repository),
) -> MessageRead:
    """Met à jour les champs fournis d'un message."""

    try:
        message = update_message_uc(
            repository, cooperative_id, message_id, **_changes_from(message_in)
        )
    except ValueError as exc:
        _raise_http_error(exc)
    return _message_to_schema(message)


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_message(
    cooperative_id: str,
    message_id: str,
    repository: MessageRepository = Depends(get_message_repository),
) -> Response:
    try:
        delete_message_uc(repository, cooperative_id, message_id)
    except ValueError as exc:
        _raise_http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/messages/{message_id}/send", response_model=MessageRead)
def send_message(
    cooperative_id: str,
    message_id: str,
    repository: MessageRepository = Depends(get_message_repository),
) -> MessageRead:
    """Envoie le message et enregistre la date de remise."""

    try:
        message = send_message_uc(repository, cooperative_id, message_id)
    except ValueError as exc:
        _raise_http_error(exc)
    return _message_to_schema(message)


@router.post("/messages/{message_id}/read", response_model=MessageRead)
def mark_message_as_read(
    cooperative_id: str,
    message_id: str,
    repository: MessageRepository = Depends(get_message_repository),
) -> MessageRead:
    try:
        message = mark_message_as_read_uc(repository, cooperative_id, message_id)
    except ValueError as exc:
        _raise_http_error(exc)
    return _message_to_schema(message)


# Announcements -------------------------------------------------------------


@router.get("/announcements", response_model=list[AnnouncementRead])
def list_announcements(
    cooperative_id: str,
    q: str | None = Query(default=None, description="Texte recherché"),
    type: str = FILTER_ALL,
    visibility: str = FILTER_ALL,
    status_filter: str = Query(default=FILTER_ALL, alias="status"),
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> list[AnnouncementRead]:
    """Liste les annonces de la coopérative, avec recherche et filtres optionnels."""

    announcements = filter_announcements(
        repository, cooperative_id, type=type, visibility=visibility, status=status_filter
    )
    if q:
        matching = {item.id for item in search_announcements(repository, cooperative_id, q)}
        announcements = [item for item in announcements if item.id in matching]
    return [_announcement_to_schema(item) for item in announcements]


@router.post(
    "/announcements", response_model=AnnouncementRead, status_code=status.HTTP_201_CREATED
)
def create_announcement(
    cooperative_id: str,
    announcement_in: AnnouncementCreate,
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> AnnouncementRead:
    """Crée une annonce."""

    try:
        announcement = create_announcement_uc(
            repository,
            cooperative_id,
            title=announcement_in.title,
            content=announcement_in.content,
            type=announcement_in.type,
            author=announcement_in.author,
            author_role=announcement_in.author_role,
            visibility=announcement_in.visibility,
            status=announcement_in.status,
            expires_at=announcement_in.expires_at,
            attachments=_to_attachments(announcement_in.attachments),
        )
    except ValueError as exc:
        _raise_http_error(exc)
    return _announcement_to_schema(announcement)


@router.get("/announcements/export")
def export_announcements(
    cooperative_id: str,
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> Response:
    """Exporte les annonces au format CSV."""

    return _csv_response(export_announcements_uc(repository, cooperative_id), "annonces.csv")


@router.get("/announcements/{announcement_id}", response_model=AnnouncementRead)
def read_announcement(
    cooperative_id: str,
    announcement_id: str,
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> AnnouncementRead:
    try:
        announcement = get_announcement_uc(repository, cooperative_id, announcement_id)
    except ValueError as exc:
        _raise_http_error(exc)
    return _announcement_to_schema(announcement)


@router.patch("/announcements/{announcement_id}", response_model=AnnouncementRead)
def update_announcement(
    cooperative_id: str,
    announcement_id: str,
    announcement_in: AnnouncementUpdate,
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> AnnouncementRead:
    """Met à jour les champs fournis d'une annonce."""

    try:
        announcement = update_announcement_uc(
            repository, cooperative_id, announcement_id, **_changes_from(announcement_in)
        )
    except ValueError as exc:
        _raise_http_error(exc)
    return _announcement_to_schema(announcement)


@router.delete("/announcements/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_announcement(
    cooperative_id: str,
    announcement_id: str,
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> Response:
    try:
        delete_announcement_uc(repository, cooperative_id, announcement_id)
    except ValueError as exc:
        _raise_http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/announcements/{announcement_id}/publish", response_model=AnnouncementRead)
def publish_announcement(
    cooperative_id: str,
    announcement_id: str,
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> AnnouncementRead:
    """Publie l'annonce auprès des membres."""

    try:
        announcement = publish_announcement_uc(repository, cooperative_id, announcement_id)
    except ValueError as exc:
        _raise_http_error(exc)
    return _announcement_to_schema(announcement)


@router.post("/announcements/{announcement_id}/archive", response_model=AnnouncementRead)
def archive_announcement(
    cooperative_id: str,
    announcement_id: str,
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> AnnouncementRead:
    try:
        announcement = archive_announcement_uc(repository, cooperative_id, announcement_id)
    except ValueError as exc:
        _raise_http_error(exc)
    return _announcement_to_schema(announcement)


@router.post(
    "/announcements/{announcement_id}/read", response_model=AnnouncementMarkReadResult
)
def mark_announcement_as_read(
    cooperative_id: str,
    announcement_id: str,
    reader: AnnouncementMarkRead,
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> AnnouncementMarkReadResult:
    """Enregistre la lecture d'un membre; ``recorded`` vaut faux s'il l'avait déjà lue."""

    try:
        recorded = mark_announcement_as_read_uc(
            repository,
            cooperative_id,
            announcement_id,
            member_id=reader.member_id,
            member_name=reader.member_name,
        )
    except ValueError as exc:
        _raise_http_error(exc)
    return AnnouncementMarkReadResult(recorded=recorded)


@router.post(
    "/announcements/{announcement_id}/comments",
    response_model=AnnouncementCommentRead,
    status_code=status.HTTP_201_CREATED,
)
def add_announcement_comment(
    cooperative_id: str,
    announcement_id: str,
    comment_in: AnnouncementCommentCreate,
    repository: AnnouncementRepository = Depends(get_announcement_repository),
) -> AnnouncementCommentRead:
    try:
        comment = add_announcement_comment_uc(
            repository,
            cooperative_id,
            announcement_id,
            author=comment_in.author,
            author_role=comment_in.author_role,
            content=comment_in.content,
        )
    except ValueError as exc:
        _raise_http_error(exc)
    return AnnouncementCommentRead.model_validate(comment)


# Reports -------------------------------------------------------------------


@router.get("/stats", response_model=CommunicationStatsRead)
def read_communication_stats(
    cooperative_id: str,
    messages: MessageRepository = Depends(get_message_repository),
    announcements: AnnouncementRepository = Depends(get_announcement_repository),
) -> CommunicationStatsRead:
    """Retourne les indicateurs de communication de la coopérative."""

    stats = get_communication_stats(messages, announcements, cooperative_id)
    return CommunicationStatsRead.model_validate(stats)


__all__ = ["router"]
