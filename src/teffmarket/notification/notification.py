"""Notification aggregate: a merchant's dashboard inbox entry.

Notifications are append-only: the marketplace creates them as orders move
and the recipient can only flip them from unread to read.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String

from teffmarket.domain import teffmarket
from teffmarket.notification.events import NotificationCreated, NotificationRead
from teffmarket.shared.errors import ForbiddenError


class NotificationType(Enum):
    ORDER_ASSIGNED = "order_assigned"
    ORDER_CONFIRMED = "order_confirmed"
    ORDER_READY = "order_ready"
    ORDER_COMPLETED = "order_completed"
    PAYMENT_RECEIVED = "payment_received"


class NotificationStatus(Enum):
    UNREAD = "unread"
    READ = "read"


@teffmarket.aggregate
class Notification:
    recipient_id = Identifier(required=True)
    type = String(required=True, choices=NotificationType)
    title = String(required=True, max_length=200)
    message = String(required=True, max_length=1000)
    order_id = Identifier()
    status = String(choices=NotificationStatus, default=NotificationStatus.UNREAD.value)
    read_at = DateTime()
    created_at = DateTime()

    @classmethod
    def create(cls, recipient_id, notification_type, title, message, order_id=None):
        now = datetime.now(UTC)
        notification = cls(
            recipient_id=recipient_id,
            type=notification_type,
            title=title,
            message=message,
            order_id=order_id,
            status=NotificationStatus.UNREAD.value,
            created_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                notification_type=notification_type,
                order_id=str(order_id) if order_id else None,
                created_at=now,
            )
        )
        return notification

    @property
    def is_read(self) -> bool:
        return self.status == NotificationStatus.READ.value

    def mark_read(self, reader_id, read_at=None) -> bool:
        """Mark as read on behalf of ``reader_id``.

        Returns False when the notification was already read.
        """
        if str(self.recipient_id) != str(reader_id):
            raise ForbiddenError("Not authorized to access this notification")
        if self.is_read:
            return False

        self.status = NotificationStatus.READ.value
        self.read_at = read_at or datetime.now(UTC)
        self.raise_(NotificationRead(notification_id=str(self.id), read_at=self.read_at))
        return True
