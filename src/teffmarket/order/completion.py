"""Order completion: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from teffmarket.account.access import require_admin
from teffmarket.domain import teffmarket
from teffmarket.notification.helpers import notify
from teffmarket.notification.notification import NotificationType
from teffmarket.order.order import Order
from teffmarket.order.stock import apply_stock_decrement

logger = structlog.get_logger(__name__)


@teffmarket.command(part_of="Order")
class CompleteOrder:
    order_id = Identifier(required=True)
    completed_by = Identifier(required=True)


@teffmarket.command_handler(part_of=Order)
class CompleteOrderHandler:
    @handle(CompleteOrder)
    def complete_order(self, command):
        require_admin(command.completed_by)

        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)

        newly_completed = order.complete()
        applied = apply_stock_decrement(order)

        if newly_completed:
            for assignment in order.assignments:
                notify(
                    recipient_id=assignment.merchant_id,
                    notification_type=NotificationType.ORDER_COMPLETED.value,
                    title="Order Completed",
                    message=f"Order #{order.id} has been completed. Your payment will be processed.",
                    order_id=order.id,
                )

        repo.add(order)
        logger.info(
            "Order completed",
            order_id=str(order.id),
            completed_by=str(command.completed_by),
            stock_lines_applied=applied,
            already_completed=not newly_completed,
        )
