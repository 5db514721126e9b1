"""FastAPI routes for the back office: admin order routing and the merchant dashboard."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from teffmarket.account.account import Account
from teffmarket.api.dependencies import admin_caller, merchant_caller
from teffmarket.api.responses import (
    account_response,
    breakdown_response,
    merchant_order_response,
    notification_response,
    order_response,
)
from teffmarket.api.schemas import (
    AssignOrderRequest,
    AssignOrderResponse,
    BreakdownResponse,
    CancelOrderRequest,
    MarkAllReadResponse,
    MerchantListResponse,
    MerchantOrderListResponse,
    MerchantOrderResponse,
    NotificationListResponse,
    OrderListResponse,
    OrderResponse,
    RecordPaymentRequest,
    StatusResponse,
)
from teffmarket.notification.notification import Notification
from teffmarket.notification.reading import MarkAllNotificationsRead, MarkNotificationRead
from teffmarket.order.assignment import AssignOrder
from teffmarket.order.cancellation import CancelOrder
from teffmarket.order.completion import CompleteOrder
from teffmarket.order.fulfillment import ConfirmAssignment, MarkAssignmentReady
from teffmarket.order.order import Order
from teffmarket.order.payment import RecordPayment

# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


def _load(order_id: str) -> Order:
    return current_domain.repository_for(Order).get_order(order_id)


@admin_router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    status: str | None = None,
    payment_status: str | None = None,
    admin: Account = Depends(admin_caller),
) -> OrderListResponse:
    orders = current_domain.repository_for(Order).search(status=status, payment_status=payment_status)
    return OrderListResponse(orders=[order_response(o) for o in orders])


@admin_router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, admin: Account = Depends(admin_caller)) -> OrderResponse:
    return order_response(_load(order_id))


@admin_router.get("/orders/{order_id}/breakdown", response_model=BreakdownResponse)
async def get_breakdown(order_id: str, admin: Account = Depends(admin_caller)) -> BreakdownResponse:
    order = _load(order_id)
    return BreakdownResponse(
        order_id=str(order.id),
        total_amount=order.total_amount,
        breakdown=breakdown_response(order),
    )


@admin_router.get("/merchants", response_model=MerchantListResponse)
async def list_merchants(admin: Account = Depends(admin_caller)) -> MerchantListResponse:
    merchants = current_domain.repository_for(Account).active_merchants()
    return MerchantListResponse(merchants=[account_response(m) for m in merchants])


@admin_router.post("/orders/{order_id}/assign", response_model=AssignOrderResponse)
async def assign_order(
    order_id: str,
    body: AssignOrderRequest,
    admin: Account = Depends(admin_caller),
) -> AssignOrderResponse:
    command = AssignOrder(
        order_id=order_id,
        merchant_ids=json.dumps(body.merchant_ids),
        notification_method=body.notification_method,
        assigned_by=str(admin.id),
    )
    message = current_domain.process(command, asynchronous=False)
    return AssignOrderResponse(message=message, order=order_response(_load(order_id)))


@admin_router.put("/orders/{order_id}/complete", response_model=OrderResponse)
async def complete_order(order_id: str, admin: Account = Depends(admin_caller)) -> OrderResponse:
    current_domain.process(CompleteOrder(order_id=order_id, completed_by=str(admin.id)), asynchronous=False)
    return order_response(_load(order_id))


@admin_router.put("/orders/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest,
    admin: Account = Depends(admin_caller),
) -> OrderResponse:
    command = CancelOrder(order_id=order_id, cancelled_by=str(admin.id), reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return order_response(_load(order_id))


@admin_router.put("/orders/{order_id}/payment", response_model=OrderResponse)
async def record_payment(
    order_id: str,
    body: RecordPaymentRequest,
    admin: Account = Depends(admin_caller),
) -> OrderResponse:
    command = RecordPayment(order_id=order_id, recorded_by=str(admin.id), payment_proof=body.payment_proof)
    current_domain.process(command, asynchronous=False)
    return order_response(_load(order_id))


# ---------------------------------------------------------------------------
# Merchant Router
# ---------------------------------------------------------------------------
merchant_router = APIRouter(prefix="/merchant", tags=["merchant"])


@merchant_router.get("/orders", response_model=MerchantOrderListResponse)
async def my_assigned_orders(
    status: str | None = None,
    merchant: Account = Depends(merchant_caller),
) -> MerchantOrderListResponse:
    orders = current_domain.repository_for(Order).assigned_to(str(merchant.id), status=status)
    return MerchantOrderListResponse(orders=[merchant_order_response(o, merchant.id) for o in orders])


@merchant_router.get("/orders/{order_id}", response_model=MerchantOrderResponse)
async def my_assigned_order(order_id: str, merchant: Account = Depends(merchant_caller)) -> MerchantOrderResponse:
    return merchant_order_response(_load(order_id), merchant.id)


@merchant_router.put("/orders/{order_id}/confirm", response_model=MerchantOrderResponse)
async def confirm_order(order_id: str, merchant: Account = Depends(merchant_caller)) -> MerchantOrderResponse:
    current_domain.process(ConfirmAssignment(order_id=order_id, merchant_id=str(merchant.id)), asynchronous=False)
    return merchant_order_response(_load(order_id), merchant.id)


@merchant_router.put("/orders/{order_id}/ready", response_model=MerchantOrderResponse)
async def mark_ready(order_id: str, merchant: Account = Depends(merchant_caller)) -> MerchantOrderResponse:
    current_domain.process(MarkAssignmentReady(order_id=order_id, merchant_id=str(merchant.id)), asynchronous=False)
    return merchant_order_response(_load(order_id), merchant.id)


@merchant_router.get("/notifications", response_model=NotificationListResponse)
async def my_notifications(
    status: str | None = None,
    merchant: Account = Depends(merchant_caller),
) -> NotificationListResponse:
    notifications = current_domain.repository_for(Notification).inbox(str(merchant.id), status=status)
    return NotificationListResponse(notifications=[notification_response(n) for n in notifications])


@merchant_router.put("/notifications/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(merchant: Account = Depends(merchant_caller)) -> MarkAllReadResponse:
    updated = current_domain.process(MarkAllNotificationsRead(reader_id=str(merchant.id)), asynchronous=False)
    return MarkAllReadResponse(updated=updated)


@merchant_router.put("/notifications/{notification_id}/read", response_model=StatusResponse)
async def mark_read(notification_id: str, merchant: Account = Depends(merchant_caller)) -> StatusResponse:
    command = MarkNotificationRead(notification_id=notification_id, reader_id=str(merchant.id))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
