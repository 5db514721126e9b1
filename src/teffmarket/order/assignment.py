"""Order assignment: command and handler.

An admin routes an order's merchant shares to merchants. Every merchant id
must be an active merchant account or the whole call is rejected. Dashboard
notifications are written in the same unit of work as the order, and the
shared stock routine runs because an assigned order is treated as confirmed
demand.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from teffmarket.account.access import active_account, require_admin
from teffmarket.domain import teffmarket
from teffmarket.notification.helpers import notify
from teffmarket.notification.notification import NotificationType
from teffmarket.order.order import NotificationMethod, Order
from teffmarket.order.stock import apply_stock_decrement
from teffmarket.shared.errors import InvalidMerchantError

logger = structlog.get_logger(__name__)


@teffmarket.command(part_of="Order")
class AssignOrder:
    order_id = Identifier(required=True)
    merchant_ids = Text(required=True)  # JSON: list of merchant account ids
    notification_method = String(required=True, choices=NotificationMethod)
    assigned_by = Identifier(required=True)


def _merchant_ids_from(raw) -> list[str]:
    merchant_ids = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(merchant_ids, list) or not merchant_ids:
        raise ValidationError({"merchant_ids": ["Please provide a list of merchant ids"]})
    return [str(m) for m in merchant_ids]


def assignment_message(merchant_count: int, method: str) -> str:
    message = f"Order assigned to {merchant_count} merchant(s)."
    if method in (NotificationMethod.PHONE.value, NotificationMethod.BOTH.value):
        message += " Please call them to notify."
    return message


@teffmarket.command_handler(part_of=Order)
class AssignOrderHandler:
    @handle(AssignOrder)
    def assign_order(self, command):
        require_admin(command.assigned_by)
        merchant_ids = _merchant_ids_from(command.merchant_ids)

        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.ensure_open()

        merchants = [active_account(merchant_id) for merchant_id in merchant_ids]
        if any(merchant is None or not merchant.is_merchant for merchant in merchants):
            raise InvalidMerchantError("Some merchants not found or invalid")

        assignments = order.assign(merchant_ids, command.notification_method, command.assigned_by)

        for assignment in assignments:
            if not assignment.message_sent:
                continue
            amount = order.share_for(assignment.merchant_id).amount
            notify(
                recipient_id=assignment.merchant_id,
                notification_type=NotificationType.ORDER_ASSIGNED.value,
                title="New Order Assigned",
                message=(
                    f"You have a new order #{order.id} assigned to you. Total amount: {amount:.2f} ETB"
                ),
                order_id=order.id,
            )

        applied = apply_stock_decrement(order)
        repo.add(order)

        logger.info(
            "Order assigned",
            order_id=str(order.id),
            assigned_by=str(command.assigned_by),
            merchant_count=len(assignments),
            notification_method=command.notification_method,
            stock_lines_applied=applied,
        )
        return assignment_message(len(assignments), command.notification_method)
