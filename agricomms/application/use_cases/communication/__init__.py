"""Use cases for cooperative messages and announcements."""

from .announcements import (
    add_announcement_comment,
    archive_announcement,
    create_announcement,
    delete_announcement,
    filter_announcements,
    get_announcement,
    list_announcements,
    mark_announcement_as_read,
    publish_announcement,
    search_announcements,
    update_announcement,
)
from .messages import (
    create_message,
    delete_message,
    filter_messages,
    get_message,
    list_messages,
    mark_message_as_read,
    search_messages,
    send_message,
    update_message,
)
from .reports import export_announcements, export_messages, get_communication_stats

__all__ = [
    "add_announcement_comment",
    "archive_announcement",
    "create_announcement",
    "create_message",
    "delete_announcement",
    "delete_message",
    "export_announcements",
    "export_messages",
    "filter_announcements",
    "filter_messages",
    "get_announcement",
    "get_communication_stats",
    "get_message",
    "list_announcements",
    "list_messages",
    "mark_announcement_as_read",
    "mark_message_as_read",
    "publish_announcement",
    "search_announcements",
    "search_messages",
    "send_message",
    "update_announcement",
    "update_message",
]
