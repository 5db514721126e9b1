"""Pydantic request/response schemas for the marketplace API.

These are external contracts, kept separate from the protean commands they
are translated into.
"""

from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
class RegisterAccountRequest(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    email: str
    phone: str | None = None
    role: Literal["user", "merchant", "admin"] = "user"


class AccountResponse(BaseModel):
    account_id: str
    name: str
    email: str
    phone: str | None = None
    role: str
    active: bool


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class ListProductRequest(BaseModel):
    variety: Literal["White", "Red", "Mixed"]
    price_per_kilo: float = Field(ge=0)
    stock_available: float = Field(ge=0)
    description: str | None = Field(default=None, max_length=500)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "variety": "White",
                    "price_per_kilo": 120.0,
                    "stock_available": 50.0,
                    "description": "Magna white teff from Gojjam",
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    variety: Literal["White", "Red", "Mixed"] | None = None
    price_per_kilo: float | None = Field(default=None, ge=0)
    stock_available: float | None = Field(default=None, ge=0)
    description: str | None = Field(default=None, max_length=500)


class ProductResponse(BaseModel):
    product_id: str
    merchant_id: str
    variety: str
    price_per_kilo: float
    stock_available: float
    description: str | None = None
    active: bool


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: float = Field(ge=0.1)


class UpdateCartItemRequest(BaseModel):
    quantity: float = Field(ge=0.1)


class CartItemResponse(BaseModel):
    item_id: str
    product_id: str
    merchant_id: str
    variety: str | None = None
    quantity: float
    price_per_kilo: float
    subtotal: float


class CartResponse(BaseModel):
    owner_id: str
    items: list[CartItemResponse]
    total: float


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CustomerContactSchema(BaseModel):
    name: str
    phone: str
    address: str
    kebele: str
    email: str | None = None
    map_link: str | None = None


class OrderLineRequest(BaseModel):
    product_id: str
    quantity: float = Field(ge=0.1)


class PlaceOrderRequest(BaseModel):
    customer: CustomerContactSchema
    items: list[OrderLineRequest] = []
    payment_proof: str | None = Field(default=None, max_length=500)
    notes: str | None = Field(default=None, max_length=1000)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer": {
                        "name": "Almaz Tesfaye",
                        "phone": "+251911000000",
                        "address": "Bole Road, House 12",
                        "kebele": "Kebele 03",
                    },
                    "items": [{"product_id": "prod-001", "quantity": 2.5}],
                    "payment_proof": "TXN-123456",
                }
            ]
        }
    }


class AssignOrderRequest(BaseModel):
    merchant_ids: list[str] = Field(min_length=1)
    notification_method: Literal["phone", "dashboard", "both"]


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class RecordPaymentRequest(BaseModel):
    payment_proof: str | None = Field(default=None, max_length=500)


class OrderLineResponse(BaseModel):
    line_id: str
    product_id: str
    merchant_id: str
    variety: str | None = None
    quantity: float
    price_per_kilo: float
    subtotal: float
    stock_decremented: bool


class MerchantShareResponse(BaseModel):
    merchant_id: str
    merchant_name: str
    amount: float
    items: list[OrderLineResponse]


class AssignmentResponse(BaseModel):
    merchant_id: str
    status: str
    notification_method: str
    phone_called: bool
    message_sent: bool
    notified_at: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    customer: CustomerContactSchema
    items: list[OrderLineResponse]
    breakdown: list[MerchantShareResponse]
    total_amount: float
    status: str
    payment_status: str
    payment_proof: str | None = None
    assignments: list[AssignmentResponse]
    created_by: str | None = None
    assigned_by: str | None = None
    completed_at: str | None = None
    notes: str | None = None
    created_at: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class AssignOrderResponse(BaseModel):
    message: str
    order: OrderResponse


class BreakdownResponse(BaseModel):
    order_id: str
    total_amount: float
    breakdown: list[MerchantShareResponse]


class MerchantOrderResponse(OrderResponse):
    my_items: list[OrderLineResponse]
    my_amount: float
    my_status: str
    notification_method: str
    phone_called: bool
    message_sent: bool


class MerchantOrderListResponse(BaseModel):
    orders: list[MerchantOrderResponse]


class MerchantListResponse(BaseModel):
    merchants: list[AccountResponse]


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
class NotificationResponse(BaseModel):
    notification_id: str
    type: str
    title: str
    message: str
    order_id: str | None = None
    status: str
    read_at: str | None = None
    created_at: str | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]


class MarkAllReadResponse(BaseModel):
    updated: int
