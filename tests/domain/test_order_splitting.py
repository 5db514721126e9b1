"""Tests for splitting a placed order into per-merchant shares."""

import pytest
from factories import make_order
from protean.exceptions import ValidationError
from teffmarket.order.events import OrderPlaced
from teffmarket.order.order import CustomerContact, MerchantShare, Order, OrderLine, OrderStatus, PaymentStatus


def _line(merchant_id, subtotal):
    return OrderLine(
        product_id=f"prod-{merchant_id}",
        merchant_id=merchant_id,
        quantity=1.0,
        price_per_kilo=subtotal,
        subtotal=subtotal,
    )


def _order_with(lines, shares, total):
    return Order(
        customer=CustomerContact(name="Almaz", phone="+251911000000", address="Bole Road", kebele="03"),
        items=lines,
        breakdown=shares,
        total_amount=total,
    )


class TestOrderPricing:
    def test_line_subtotal_is_quantity_times_price(self):
        order = make_order()
        subtotals = {line.product_id: line.subtotal for line in order.items}
        assert subtotals == {"prod-white": 240.0, "prod-red": 100.0}

    def test_total_is_sum_of_subtotals(self):
        order = make_order()
        assert order.total_amount == 340.0

    def test_fractional_quantities_are_priced_per_kilo(self):
        order = make_order(
            lines=[
                {
                    "product_id": "prod-white",
                    "merchant_id": "merchant-x",
                    "variety": "White",
                    "quantity": 0.5,
                    "price_per_kilo": 130.0,
                }
            ]
        )
        assert order.total_amount == pytest.approx(65.0)

    def test_new_order_is_pending(self):
        assert make_order().status == OrderStatus.PENDING.value

    def test_lines_start_without_stock_taken(self):
        assert all(line.stock_decremented is False for line in make_order().items)


class TestMerchantBreakdown:
    def test_one_share_per_merchant(self):
        order = make_order()
        amounts = {share.merchant_id: share.amount for share in order.breakdown}
        assert amounts == {"merchant-x": 240.0, "merchant-y": 100.0}

    def test_lines_of_same_merchant_share_one_entry(self):
        order = make_order(
            lines=[
                {
                    "product_id": "prod-white",
                    "merchant_id": "merchant-x",
                    "variety": "White",
                    "quantity": 2.0,
                    "price_per_kilo": 120.0,
                },
                {
                    "product_id": "prod-mixed",
                    "merchant_id": "merchant-x",
                    "variety": "Mixed",
                    "quantity": 1.5,
                    "price_per_kilo": 90.0,
                },
            ]
        )
        assert len(order.breakdown) == 1
        assert order.breakdown[0].amount == pytest.approx(375.0)
        assert len(order.lines_for("merchant-x")) == 2

    def test_breakdown_sums_to_total(self):
        order = make_order()
        assert sum(share.amount for share in order.breakdown) == pytest.approx(order.total_amount)

    def test_merchant_names_are_snapshotted(self):
        order = make_order()
        names = {share.merchant_id: share.merchant_name for share in order.breakdown}
        assert names == {"merchant-x": "Abebe Grains", "merchant-y": "Selam Teff"}

    def test_missing_merchant_name_falls_back_to_unknown(self):
        order = make_order(merchant_names={"merchant-x": "Abebe Grains"})
        assert order.share_for("merchant-y").merchant_name == "Unknown"

    def test_share_lines_match_order_lines(self):
        order = make_order()
        line = order.lines_for("merchant-y")[0]
        assert (line.quantity, line.price_per_kilo, line.subtotal) == (1.0, 100.0, 100.0)


class TestPayment:
    def test_payment_proof_marks_order_paid(self):
        order = make_order(payment_proof="TXN-123")
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.payment_proof == "TXN-123"

    def test_no_proof_leaves_payment_pending(self):
        assert make_order().payment_status == PaymentStatus.PENDING.value


class TestBreakdownInvariants:
    def test_breakdown_not_matching_total_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _order_with(
                lines=[_line("merchant-x", 240.0)],
                shares=[MerchantShare(merchant_id="merchant-x", amount=200.0)],
                total=240.0,
            )
        assert "add up to the order total" in str(exc.value)

    def test_line_for_merchant_without_share_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _order_with(
                lines=[_line("merchant-x", 240.0), _line("merchant-z", 0.0)],
                shares=[MerchantShare(merchant_id="merchant-x", amount=240.0)],
                total=240.0,
            )
        assert "exactly one breakdown entry" in str(exc.value)

    def test_duplicate_share_for_merchant_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _order_with(
                lines=[_line("merchant-x", 240.0)],
                shares=[
                    MerchantShare(merchant_id="merchant-x", amount=120.0),
                    MerchantShare(merchant_id="merchant-x", amount=120.0),
                ],
                total=240.0,
            )
        assert "only once" in str(exc.value)

    def test_quantity_below_floor_is_rejected(self):
        with pytest.raises(ValidationError):
            make_order(
                lines=[
                    {
                        "product_id": "prod-white",
                        "merchant_id": "merchant-x",
                        "variety": "White",
                        "quantity": 0.05,
                        "price_per_kilo": 120.0,
                    }
                ]
            )


class TestOrderPlacedEvent:
    def test_placing_raises_order_placed(self):
        order = make_order()
        placed = [e for e in order._events if isinstance(e, OrderPlaced)]
        assert len(placed) == 1
        assert placed[0].total_amount == 340.0
        assert placed[0].merchant_count == 2
        assert placed[0].line_count == 2
