"""Order placement: command and handler.

Checkout turns either the submitted line items (guests) or the caller's
stored cart into a priced, merchant-split order. Prices are always read from
the product records, never from the request.
"""

import json
from collections import defaultdict

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from teffmarket.account.access import merchant_display_name
from teffmarket.cart.cart import Cart
from teffmarket.domain import teffmarket
from teffmarket.order.order import MIN_QUANTITY_KG, CustomerContact, Order
from teffmarket.product.product import Product
from teffmarket.shared.errors import OutOfStockError

logger = structlog.get_logger(__name__)

_REQUIRED_CONTACT_FIELDS = ("name", "phone", "address", "kebele")


@teffmarket.command(part_of="Order")
class PlaceOrder:
    customer = Text(required=True)  # JSON: contact dict
    items = Text()  # JSON: list of {product_id, quantity}; empty means "use my cart"
    created_by = Identifier()
    payment_proof = String(max_length=500)
    notes = String(max_length=1000)


def _contact_from(raw) -> CustomerContact:
    data = json.loads(raw) if isinstance(raw, str) else (raw or {})
    if any(not str(data.get(field) or "").strip() for field in _REQUIRED_CONTACT_FIELDS):
        raise ValidationError({"customer": ["Please provide customer name, phone, address, and kebele"]})

    return CustomerContact(
        name=data["name"],
        phone=data["phone"],
        address=data["address"],
        kebele=data["kebele"],
        email=data.get("email") or None,
        map_link=data.get("map_link") or None,
    )


def _requested_lines(command, cart) -> list[dict]:
    items = json.loads(command.items) if isinstance(command.items, str) else command.items
    if items:
        return [{"product_id": str(i["product_id"]), "quantity": float(i["quantity"])} for i in items]
    if cart is not None and cart.items:
        return [{"product_id": str(i.product_id), "quantity": i.quantity} for i in cart.items]
    raise ValidationError({"items": ["Cart is empty"]})


@teffmarket.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        contact = _contact_from(command.customer)

        cart = None
        if command.created_by:
            cart = current_domain.repository_for(Cart).for_owner(str(command.created_by))
        requested = _requested_lines(command, cart)

        product_repo = current_domain.repository_for(Product)
        products = {}
        wanted = defaultdict(float)
        for line in requested:
            if line["quantity"] < MIN_QUANTITY_KG:
                raise ValidationError({"quantity": [f"Quantity must be at least {MIN_QUANTITY_KG} kg"]})
            if line["product_id"] not in products:
                products[line["product_id"]] = product_repo.get_active(line["product_id"])
            wanted[line["product_id"]] += line["quantity"]

        for product_id, quantity in wanted.items():
            product = products[product_id]
            if quantity > product.stock_available:
                raise OutOfStockError(
                    f"Insufficient stock for {product.variety} Teff. Available: {product.stock_available:g} kg"
                )

        lines_data = []
        for line in requested:
            product = products[line["product_id"]]
            lines_data.append(
                {
                    "product_id": str(product.id),
                    "merchant_id": str(product.merchant_id),
                    "variety": product.variety,
                    "quantity": line["quantity"],
                    "price_per_kilo": product.price_per_kilo,
                }
            )

        merchant_names = {
            merchant_id: merchant_display_name(merchant_id)
            for merchant_id in {data["merchant_id"] for data in lines_data}
        }

        order = Order.place(
            customer=contact,
            lines_data=lines_data,
            merchant_names=merchant_names,
            created_by=command.created_by,
            payment_proof=command.payment_proof,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)

        if cart is not None and cart.items:
            cart.clear()
            current_domain.repository_for(Cart).add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            created_by=str(command.created_by) if command.created_by else None,
            total_amount=order.total_amount,
            merchant_count=len(order.breakdown),
        )
        return str(order.id)
