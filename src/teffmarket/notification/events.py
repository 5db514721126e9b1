"""Notification domain events."""

from protean.fields import DateTime, Identifier, String

from teffmarket.domain import teffmarket


@teffmarket.event(part_of="Notification")
class NotificationCreated:
    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    notification_type = String(required=True)
    order_id = Identifier()
    created_at = DateTime(required=True)


@teffmarket.event(part_of="Notification")
class NotificationRead:
    __version__ = 1

    notification_id = Identifier(required=True)
    read_at = DateTime(required=True)
