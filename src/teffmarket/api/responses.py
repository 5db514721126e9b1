"""Aggregate → response schema conversion shared by the routers."""

from teffmarket.api.schemas import (
    AccountResponse,
    AssignmentResponse,
    CartItemResponse,
    CartResponse,
    CustomerContactSchema,
    MerchantOrderResponse,
    MerchantShareResponse,
    NotificationResponse,
    OrderLineResponse,
    OrderResponse,
    ProductResponse,
)


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def account_response(account) -> AccountResponse:
    return AccountResponse(
        account_id=str(account.id),
        name=account.name,
        email=account.email,
        phone=account.phone,
        role=account.role,
        active=account.active,
    )


def product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        merchant_id=str(product.merchant_id),
        variety=product.variety,
        price_per_kilo=product.price_per_kilo,
        stock_available=product.stock_available,
        description=product.description,
        active=product.active,
    )


def cart_response(owner_id, cart) -> CartResponse:
    items = list(cart.items) if cart else []
    return CartResponse(
        owner_id=str(owner_id),
        items=[
            CartItemResponse(
                item_id=str(item.id),
                product_id=str(item.product_id),
                merchant_id=str(item.merchant_id),
                variety=item.variety,
                quantity=item.quantity,
                price_per_kilo=item.price_per_kilo,
                subtotal=item.subtotal,
            )
            for item in items
        ],
        total=cart.total if cart else 0.0,
    )


def line_response(line) -> OrderLineResponse:
    return OrderLineResponse(
        line_id=str(line.id),
        product_id=str(line.product_id),
        merchant_id=str(line.merchant_id),
        variety=line.variety,
        quantity=line.quantity,
        price_per_kilo=line.price_per_kilo,
        subtotal=line.subtotal,
        stock_decremented=bool(line.stock_decremented),
    )


def breakdown_response(order) -> list[MerchantShareResponse]:
    return [
        MerchantShareResponse(
            merchant_id=str(share.merchant_id),
            merchant_name=share.merchant_name or "Unknown",
            amount=share.amount,
            items=[line_response(line) for line in order.lines_for(share.merchant_id)],
        )
        for share in order.breakdown
    ]


def _order_fields(order) -> dict:
    contact = order.customer
    return {
        "order_id": str(order.id),
        "customer": CustomerContactSchema(
            name=contact.name,
            phone=contact.phone,
            address=contact.address,
            kebele=contact.kebele,
            email=contact.email,
            map_link=contact.map_link,
        ),
        "items": [line_response(line) for line in order.items],
        "breakdown": breakdown_response(order),
        "total_amount": order.total_amount,
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_proof": order.payment_proof,
        "assignments": [
            AssignmentResponse(
                merchant_id=str(a.merchant_id),
                status=a.status,
                notification_method=a.notification_method,
                phone_called=bool(a.phone_called),
                message_sent=bool(a.message_sent),
                notified_at=_iso(a.notified_at),
            )
            for a in order.assignments
        ],
        "created_by": str(order.created_by) if order.created_by else None,
        "assigned_by": str(order.assigned_by) if order.assigned_by else None,
        "completed_at": _iso(order.completed_at),
        "notes": order.notes,
        "created_at": _iso(order.created_at),
    }


def order_response(order) -> OrderResponse:
    return OrderResponse(**_order_fields(order))


def merchant_order_response(order, merchant_id) -> MerchantOrderResponse:
    my_slice = order.slice_for(merchant_id)
    return MerchantOrderResponse(
        **_order_fields(order),
        my_items=[line_response(line) for line in my_slice["my_items"]],
        my_amount=my_slice["my_amount"],
        my_status=my_slice["my_status"],
        notification_method=my_slice["notification_method"],
        phone_called=bool(my_slice["phone_called"]),
        message_sent=bool(my_slice["message_sent"]),
    )


def notification_response(notification) -> NotificationResponse:
    return NotificationResponse(
        notification_id=str(notification.id),
        type=notification.type,
        title=notification.title,
        message=notification.message,
        order_id=str(notification.order_id) if notification.order_id else None,
        status=notification.status,
        read_at=_iso(notification.read_at),
        created_at=_iso(notification.created_at),
    )
