"""Repository for the Notification aggregate."""

from teffmarket.domain import teffmarket
from teffmarket.notification.notification import Notification, NotificationStatus
from teffmarket.shared.errors import NotFoundError
from teffmarket.shared.queries import fetch_all

INBOX_LIMIT = 50


@teffmarket.repository(part_of=Notification)
class NotificationRepository:
    def get_notification(self, notification_id: str) -> Notification:
        """Load a notification or raise ``NotFoundError``."""
        matches = self._dao.query.filter(id=notification_id).all().items
        if not matches:
            raise NotFoundError("Notification not found")
        return matches[0]

    def inbox(self, recipient_id: str, status: str | None = None, limit: int = INBOX_LIMIT) -> list[Notification]:
        """Newest-first notifications for a recipient, capped at ``limit``."""
        criteria = {"recipient_id": recipient_id}
        if status:
            criteria["status"] = status

        return self._dao.query.filter(**criteria).order_by("-created_at").limit(limit).all().items

    def unread_for(self, recipient_id: str) -> list[Notification]:
        return fetch_all(
            self._dao.query.filter(recipient_id=recipient_id, status=NotificationStatus.UNREAD.value).order_by(
                "created_at"
            )
        )
