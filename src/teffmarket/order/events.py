"""Order domain events: immutable facts about order state changes.

All events are past tense and versioned. List-valued facts (merchant ids,
line ids) are carried as comma-separated strings.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from teffmarket.domain import teffmarket


@teffmarket.event(part_of="Order")
class OrderPlaced:
    """A customer or guest checked out and the order was split by merchant."""

    __version__ = 1

    order_id = Identifier(required=True)
    created_by = Identifier()
    total_amount = Float(required=True)
    line_count = Integer(required=True)
    merchant_count = Integer(required=True)
    payment_status = String(required=True)
    placed_at = DateTime(required=True)


@teffmarket.event(part_of="Order")
class OrderAssigned:
    """An admin routed the order to merchants, replacing any earlier routing."""

    __version__ = 1

    order_id = Identifier(required=True)
    merchant_ids = String()
    notification_method = String(required=True)
    assigned_by = Identifier(required=True)
    assigned_at = DateTime(required=True)


@teffmarket.event(part_of="Order")
class AssignmentConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@teffmarket.event(part_of="Order")
class AssignmentMarkedReady:
    __version__ = 1

    order_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    ready_at = DateTime(required=True)


@teffmarket.event(part_of="Order")
class OrderStockApplied:
    """Product stock was taken for order lines that had not yet been decremented."""

    __version__ = 1

    order_id = Identifier(required=True)
    line_ids = String(required=True)
    total_quantity = Float(required=True)


@teffmarket.event(part_of="Order")
class OrderCompleted:
    __version__ = 1

    order_id = Identifier(required=True)
    total_amount = Float(required=True)
    assignment_count = Integer(required=True)
    completed_at = DateTime(required=True)


@teffmarket.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)


@teffmarket.event(part_of="Order")
class PaymentRecorded:
    __version__ = 1

    order_id = Identifier(required=True)
    amount = Float(required=True)
    payment_proof = String()
    recorded_at = DateTime(required=True)
