"""Merchant fulfillment progress: commands and handler.

A merchant may only move its own assignment; the current assignment state
is not checked, so a merchant can mark ready without confirming first.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from teffmarket.domain import teffmarket
from teffmarket.order.order import Order


@teffmarket.command(part_of="Order")
class ConfirmAssignment:
    order_id = Identifier(required=True)
    merchant_id = Identifier(required=True)


@teffmarket.command(part_of="Order")
class MarkAssignmentReady:
    order_id = Identifier(required=True)
    merchant_id = Identifier(required=True)


@teffmarket.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(ConfirmAssignment)
    def confirm_assignment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.confirm_assignment(command.merchant_id)
        repo.add(order)

    @handle(MarkAssignmentReady)
    def mark_assignment_ready(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.mark_assignment_ready(command.merchant_id)
        repo.add(order)
