"""Inbox reading: commands and handler for marking notifications read."""

from datetime import UTC, datetime

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from teffmarket.domain import teffmarket
from teffmarket.notification.notification import Notification


@teffmarket.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    reader_id = Identifier(required=True)


@teffmarket.command(part_of="Notification")
class MarkAllNotificationsRead:
    reader_id = Identifier(required=True)


@teffmarket.command_handler(part_of=Notification)
class NotificationReadingHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.get_notification(command.notification_id)
        if notification.mark_read(command.reader_id):
            repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command):
        repo = current_domain.repository_for(Notification)
        read_at = datetime.now(UTC)
        unread = repo.unread_for(command.reader_id)
        for notification in unread:
            notification.mark_read(command.reader_id, read_at=read_at)
            repo.add(notification)
        return len(unread)
