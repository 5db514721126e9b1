"""Helpers for writing notifications from order command handlers.

Notifications are stored in the same unit of work as the order change that
caused them, so a rejected transition never leaves a stray inbox entry.
"""

import structlog
from protean.utils.globals import current_domain

from teffmarket.notification.notification import Notification

logger = structlog.get_logger(__name__)


def notify(recipient_id, notification_type, title, message, order_id=None) -> str:
    """Append an unread notification to ``recipient_id``'s inbox."""
    notification = Notification.create(
        recipient_id=recipient_id,
        notification_type=notification_type,
        title=title,
        message=message,
        order_id=order_id,
    )
    current_domain.repository_for(Notification).add(notification)

    logger.info(
        "Notification created",
        notification_id=str(notification.id),
        recipient_id=str(recipient_id),
        notification_type=notification_type,
        order_id=str(order_id) if order_id else None,
    )
    return str(notification.id)
