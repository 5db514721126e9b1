"""Order cancellation: command and handler.

Only pending or assigned orders can be cancelled. Stock already taken at
assignment time is not returned; merchants restock by editing their listing.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from teffmarket.account.access import require_admin
from teffmarket.domain import teffmarket
from teffmarket.order.order import Order

logger = structlog.get_logger(__name__)


@teffmarket.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    cancelled_by = Identifier(required=True)
    reason = String(max_length=500)


@teffmarket.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        require_admin(command.cancelled_by)

        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.cancel(command.reason)
        repo.add(order)

        logger.info("Order cancelled", order_id=str(order.id), cancelled_by=str(command.cancelled_by))
