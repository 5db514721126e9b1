"""Payment recording: command and handler.

Payment is an opaque proof string and a status flag; there is no gateway.
Merchants already assigned to the order hear about it on their dashboard.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from teffmarket.account.access import require_admin
from teffmarket.domain import teffmarket
from teffmarket.notification.helpers import notify
from teffmarket.notification.notification import NotificationType
from teffmarket.order.order import Order

logger = structlog.get_logger(__name__)


@teffmarket.command(part_of="Order")
class RecordPayment:
    order_id = Identifier(required=True)
    recorded_by = Identifier(required=True)
    payment_proof = String(max_length=500)


@teffmarket.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(RecordPayment)
    def record_payment(self, command):
        require_admin(command.recorded_by)

        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.record_payment(command.payment_proof)

        for assignment in order.assignments:
            share = order.share_for(assignment.merchant_id)
            notify(
                recipient_id=assignment.merchant_id,
                notification_type=NotificationType.PAYMENT_RECEIVED.value,
                title="Payment Received",
                message=f"Payment for order #{order.id} has been received. Your share: {share.amount:.2f} ETB",
                order_id=order.id,
            )

        repo.add(order)
        logger.info("Payment recorded", order_id=str(order.id), recorded_by=str(command.recorded_by))
