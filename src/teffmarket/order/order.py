"""Order aggregate: one customer purchase split across merchants.

An order is priced once, at placement, from the live product records. Its
lines are stored a single time; each merchant's share of the order (the
breakdown) holds the amount owed and a display-name snapshot, and reads its
lines back from the order by merchant. That keeps the per-line
``stock_decremented`` flag in exactly one place, whichever transition
(assignment or completion) reaches the stock first.

Order status:
    PENDING → ASSIGNED → COMPLETED
    {PENDING, ASSIGNED} → CANCELLED
    ASSIGNED → ASSIGNED (re-assignment replaces the assignment list)

Assignment status (one per merchant the order was routed to):
    PENDING → CONFIRMED → READY → COMPLETED

Merchants move their own assignment forward; the current assignment state is
not checked. Completion is an admin action on the whole order and flips
every assignment to COMPLETED whatever state it had reached. The order status
is never derived from assignment states.
"""

from collections import defaultdict
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, String, ValueObject

from teffmarket.domain import teffmarket
from teffmarket.order.events import (
    AssignmentConfirmed,
    AssignmentMarkedReady,
    OrderAssigned,
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    OrderStockApplied,
    PaymentRecorded,
)
from teffmarket.shared.errors import ForbiddenError, InvalidStateError

MIN_QUANTITY_KG = 0.1
AMOUNT_TOLERANCE = 0.01


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class AssignmentStatus(Enum):
    PENDING = "pending"
    NOTIFIED = "notified"
    CONFIRMED = "confirmed"
    READY = "ready"
    COMPLETED = "completed"


class NotificationMethod(Enum):
    PHONE = "phone"
    DASHBOARD = "dashboard"
    BOTH = "both"


_CLOSED_STATUSES = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

_CANCELLABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.ASSIGNED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@teffmarket.value_object(part_of="Order")
class CustomerContact:
    """Where and to whom the teff is delivered."""

    name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    address = String(required=True, max_length=300)
    kebele = String(required=True, max_length=100)
    email = String(max_length=254)
    map_link = String(max_length=500)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@teffmarket.entity(part_of="Order")
class OrderLine:
    product_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    variety = String(max_length=20)
    quantity = Float(required=True, min_value=MIN_QUANTITY_KG)
    price_per_kilo = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)
    stock_decremented = Boolean(default=False)


@teffmarket.entity(part_of="Order")
class MerchantShare:
    """What one merchant is owed for its lines of the order."""

    merchant_id = Identifier(required=True)
    merchant_name = String(max_length=100, default="Unknown")
    amount = Float(required=True, min_value=0.0)


@teffmarket.entity(part_of="Order")
class Assignment:
    merchant_id = Identifier(required=True)
    status = String(choices=AssignmentStatus, default=AssignmentStatus.PENDING.value)
    # Only ``phone`` or ``dashboard`` is stored; ``both`` is recorded as dashboard
    # with ``phone_called`` set.
    notification_method = String(choices=NotificationMethod, default=NotificationMethod.DASHBOARD.value)
    phone_called = Boolean(default=False)
    message_sent = Boolean(default=False)
    notified_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@teffmarket.aggregate
class Order:
    customer = ValueObject(CustomerContact, required=True)
    items = HasMany(OrderLine)
    breakdown = HasMany(MerchantShare)
    total_amount = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_proof = String(max_length=500)
    assignments = HasMany(Assignment)
    created_by = Identifier()
    assigned_by = Identifier()
    completed_at = DateTime()
    cancellation_reason = String(max_length=500)
    notes = String(max_length=1000)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def breakdown_must_cover_every_line_once(self):
        if not self.breakdown:
            return

        share_merchants = [str(share.merchant_id) for share in self.breakdown]
        if len(share_merchants) != len(set(share_merchants)):
            raise ValidationError({"breakdown": ["Each merchant may appear only once in the breakdown"]})

        line_merchants = {str(line.merchant_id) for line in self.items}
        if line_merchants != set(share_merchants):
            raise ValidationError({"breakdown": ["Every line's merchant must have exactly one breakdown entry"]})

    @invariant.post
    def breakdown_must_sum_to_total(self):
        if not self.breakdown:
            return

        shares_total = sum(share.amount for share in self.breakdown)
        if abs(shares_total - (self.total_amount or 0.0)) > AMOUNT_TOLERANCE:
            raise ValidationError({"breakdown": ["Merchant amounts must add up to the order total"]})

    # -------------------------------------------------------------------
    # Factory (the order splitter)
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer: CustomerContact,
        lines_data: list[dict],
        merchant_names: dict[str, str],
        created_by: str | None = None,
        payment_proof: str | None = None,
        notes: str | None = None,
    ):
        """Price the lines, split them by merchant and open a pending order.

        ``lines_data`` carries product_id, merchant_id, variety, quantity and
        the price_per_kilo read from the product at placement time.
        """
        lines = []
        amounts = defaultdict(float)
        for data in lines_data:
            subtotal = data["quantity"] * data["price_per_kilo"]
            lines.append(
                OrderLine(
                    product_id=data["product_id"],
                    merchant_id=data["merchant_id"],
                    variety=data.get("variety"),
                    quantity=data["quantity"],
                    price_per_kilo=data["price_per_kilo"],
                    subtotal=subtotal,
                    stock_decremented=False,
                )
            )
            amounts[str(data["merchant_id"])] += subtotal

        shares = [
            MerchantShare(
                merchant_id=merchant_id,
                merchant_name=merchant_names.get(merchant_id) or "Unknown",
                amount=amount,
            )
            for merchant_id, amount in amounts.items()
        ]

        now = datetime.now(UTC)
        payment_status = PaymentStatus.PAID if payment_proof else PaymentStatus.PENDING
        order = cls(
            customer=customer,
            items=lines,
            breakdown=shares,
            total_amount=sum(line.subtotal for line in lines),
            status=OrderStatus.PENDING.value,
            payment_status=payment_status.value,
            payment_proof=payment_proof,
            created_by=created_by,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                created_by=str(created_by) if created_by else None,
                total_amount=order.total_amount,
                line_count=len(lines),
                merchant_count=len(shares),
                payment_status=payment_status.value,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def lines_for(self, merchant_id) -> list[OrderLine]:
        return [line for line in self.items if str(line.merchant_id) == str(merchant_id)]

    def share_for(self, merchant_id) -> MerchantShare | None:
        return next((s for s in self.breakdown if str(s.merchant_id) == str(merchant_id)), None)

    def assignment_for(self, merchant_id) -> Assignment | None:
        return next((a for a in self.assignments if str(a.merchant_id) == str(merchant_id)), None)

    def lines_awaiting_stock(self) -> list[OrderLine]:
        return [line for line in self.items if not line.stock_decremented]

    def is_visible_to(self, account) -> bool:
        """Creator, any admin and assigned merchants may read the order."""
        if account.is_admin:
            return True
        if self.created_by and str(self.created_by) == str(account.id):
            return True
        return self.assignment_for(account.id) is not None

    def slice_for(self, merchant_id) -> dict:
        """The part of the order a single assigned merchant works from."""
        assignment = self.assignment_for(merchant_id)
        if assignment is None:
            raise ForbiddenError("This order is not assigned to you")

        share = self.share_for(merchant_id)
        return {
            "my_items": self.lines_for(merchant_id),
            "my_amount": share.amount if share else 0.0,
            "my_status": assignment.status,
            "notification_method": assignment.notification_method,
            "phone_called": assignment.phone_called,
            "message_sent": assignment.message_sent,
        }

    # -------------------------------------------------------------------
    # Assignment
    # -------------------------------------------------------------------
    def ensure_open(self) -> None:
        if OrderStatus(self.status) in _CLOSED_STATUSES:
            raise InvalidStateError("Cannot assign completed or cancelled order")

    def assign(self, merchant_ids: list[str], method: str, assigned_by: str) -> list[Assignment]:
        """Replace the assignment list with one entry per merchant that has a share.

        Merchants without lines in this order are skipped. Returns the new
        assignments.
        """
        self.ensure_open()

        requested = NotificationMethod(method)
        phone_leg = requested in (NotificationMethod.PHONE, NotificationMethod.BOTH)
        dashboard_leg = requested in (NotificationMethod.DASHBOARD, NotificationMethod.BOTH)
        stored_method = NotificationMethod.DASHBOARD if dashboard_leg else NotificationMethod.PHONE

        now = datetime.now(UTC)
        created = []
        with atomic_change(self):
            for previous in list(self.assignments):
                self.remove_assignments(previous)

            for merchant_id in dict.fromkeys(str(m) for m in merchant_ids):
                if self.share_for(merchant_id) is None:
                    continue
                assignment = Assignment(
                    merchant_id=merchant_id,
                    status=AssignmentStatus.PENDING.value,
                    notification_method=stored_method.value,
                    phone_called=phone_leg,
                    message_sent=dashboard_leg,
                    notified_at=now,
                )
                self.add_assignments(assignment)
                created.append(assignment)

            self.status = OrderStatus.ASSIGNED.value
            self.assigned_by = assigned_by
            self.updated_at = now

        self.raise_(
            OrderAssigned(
                order_id=str(self.id),
                merchant_ids=",".join(str(a.merchant_id) for a in created),
                notification_method=requested.value,
                assigned_by=str(assigned_by),
                assigned_at=now,
            )
        )
        return created

    # -------------------------------------------------------------------
    # Merchant progress
    # -------------------------------------------------------------------
    def _assignment_of_caller(self, merchant_id) -> Assignment:
        assignment = self.assignment_for(merchant_id)
        if assignment is None:
            raise ForbiddenError("This order is not assigned to you")
        return assignment

    def confirm_assignment(self, merchant_id) -> None:
        assignment = self._assignment_of_caller(merchant_id)
        now = datetime.now(UTC)
        assignment.status = AssignmentStatus.CONFIRMED.value
        self.updated_at = now
        self.raise_(AssignmentConfirmed(order_id=str(self.id), merchant_id=str(merchant_id), confirmed_at=now))

    def mark_assignment_ready(self, merchant_id) -> None:
        assignment = self._assignment_of_caller(merchant_id)
        now = datetime.now(UTC)
        assignment.status = AssignmentStatus.READY.value
        self.updated_at = now
        self.raise_(AssignmentMarkedReady(order_id=str(self.id), merchant_id=str(merchant_id), ready_at=now))

    # -------------------------------------------------------------------
    # Stock bookkeeping
    # -------------------------------------------------------------------
    def mark_stock_decremented(self, lines: list[OrderLine]) -> None:
        if not lines:
            return

        for line in lines:
            line.stock_decremented = True
        self.updated_at = datetime.now(UTC)
        self.raise_(
            OrderStockApplied(
                order_id=str(self.id),
                line_ids=",".join(str(line.id) for line in lines),
                total_quantity=sum(line.quantity for line in lines),
            )
        )

    # -------------------------------------------------------------------
    # Completion and cancellation
    # -------------------------------------------------------------------
    def complete(self) -> bool:
        """Close the order and every assignment on it.

        Returns False when the order was already completed, in which case
        nothing changes.
        """
        current = OrderStatus(self.status)
        if current == OrderStatus.CANCELLED:
            raise InvalidStateError("Cannot complete a cancelled order")
        if current == OrderStatus.COMPLETED:
            return False

        now = datetime.now(UTC)
        for assignment in self.assignments:
            assignment.status = AssignmentStatus.COMPLETED.value
        self.status = OrderStatus.COMPLETED.value
        self.completed_at = now
        self.updated_at = now
        self.raise_(
            OrderCompleted(
                order_id=str(self.id),
                total_amount=self.total_amount,
                assignment_count=len(self.assignments),
                completed_at=now,
            )
        )
        return True

    def cancel(self, reason: str | None = None) -> None:
        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATUSES:
            raise InvalidStateError(f"Cannot cancel order in {current.value} state")

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now
        self.raise_(OrderCancelled(order_id=str(self.id), reason=reason or "", cancelled_at=now))

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_payment(self, payment_proof: str | None = None) -> None:
        if OrderStatus(self.status) == OrderStatus.CANCELLED:
            raise InvalidStateError("Cannot record payment for a cancelled order")
        if self.payment_status == PaymentStatus.PAID.value:
            raise InvalidStateError("Payment has already been recorded for this order")

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        if payment_proof:
            self.payment_proof = payment_proof
        self.updated_at = now
        self.raise_(
            PaymentRecorded(
                order_id=str(self.id),
                amount=self.total_amount,
                payment_proof=self.payment_proof or "",
                recorded_at=now,
            )
        )
