"""FastAPI routes for the storefront: accounts, catalog, cart and checkout.

Each route translates a Pydantic request into a protean command and reads
the result back through the aggregate's repository.
"""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from teffmarket.account.account import Account
from teffmarket.account.registration import DeactivateAccount, RegisterAccount
from teffmarket.api.dependencies import admin_caller, current_caller, merchant_caller, optional_caller
from teffmarket.api.responses import (
    account_response,
    cart_response,
    order_response,
    product_response,
)
from teffmarket.api.schemas import (
    AccountResponse,
    AddToCartRequest,
    CartResponse,
    ListProductRequest,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    ProductListResponse,
    ProductResponse,
    RegisterAccountRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateProductRequest,
)
from teffmarket.cart.cart import Cart
from teffmarket.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from teffmarket.order.order import Order
from teffmarket.order.placement import PlaceOrder
from teffmarket.product.listing import ListProduct, RemoveProduct, UpdateProduct
from teffmarket.product.product import Product
from teffmarket.shared.errors import ForbiddenError

# ---------------------------------------------------------------------------
# Account Router
# ---------------------------------------------------------------------------
account_router = APIRouter(prefix="/accounts", tags=["accounts"])


@account_router.post("", status_code=201, response_model=AccountResponse)
async def register_account(body: RegisterAccountRequest) -> AccountResponse:
    command = RegisterAccount(name=body.name, email=body.email, phone=body.phone, role=body.role)
    account_id = current_domain.process(command, asynchronous=False)
    return account_response(current_domain.repository_for(Account).get(account_id))


@account_router.delete("/{account_id}", response_model=StatusResponse)
async def deactivate_account(account_id: str, admin: Account = Depends(admin_caller)) -> StatusResponse:
    current_domain.process(DeactivateAccount(account_id=account_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    merchant: str | None = None,
    variety: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
) -> ProductListResponse:
    products = current_domain.repository_for(Product).search(
        merchant_id=merchant,
        variety=variety,
        min_price=min_price,
        max_price=max_price,
    )
    return ProductListResponse(products=[product_response(p) for p in products])


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return product_response(current_domain.repository_for(Product).get_active(product_id))


@product_router.post("", status_code=201, response_model=ProductResponse)
async def list_product(body: ListProductRequest, merchant: Account = Depends(merchant_caller)) -> ProductResponse:
    command = ListProduct(
        merchant_id=str(merchant.id),
        variety=body.variety,
        price_per_kilo=body.price_per_kilo,
        stock_available=body.stock_available,
        description=body.description,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return product_response(current_domain.repository_for(Product).get(product_id))


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    caller: Account = Depends(current_caller),
) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        caller_id=str(caller.id),
        variety=body.variety,
        price_per_kilo=body.price_per_kilo,
        stock_available=body.stock_available,
        description=body.description,
    )
    current_domain.process(command, asynchronous=False)
    return product_response(current_domain.repository_for(Product).get(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_product(product_id: str, caller: Account = Depends(current_caller)) -> StatusResponse:
    current_domain.process(RemoveProduct(product_id=product_id, caller_id=str(caller.id)), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_of(owner: Account) -> CartResponse:
    return cart_response(owner.id, current_domain.repository_for(Cart).for_owner(str(owner.id)))


@cart_router.get("", response_model=CartResponse)
async def get_cart(caller: Account = Depends(current_caller)) -> CartResponse:
    return _cart_of(caller)


@cart_router.post("/items", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, caller: Account = Depends(current_caller)) -> CartResponse:
    command = AddToCart(owner_id=str(caller.id), product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_of(caller)


@cart_router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    caller: Account = Depends(current_caller),
) -> CartResponse:
    command = UpdateCartItem(owner_id=str(caller.id), item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_of(caller)


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(item_id: str, caller: Account = Depends(current_caller)) -> CartResponse:
    current_domain.process(RemoveFromCart(owner_id=str(caller.id), item_id=item_id), asynchronous=False)
    return _cart_of(caller)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(caller: Account = Depends(current_caller)) -> CartResponse:
    current_domain.process(ClearCart(owner_id=str(caller.id)), asynchronous=False)
    return _cart_of(caller)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest, caller: Account | None = Depends(optional_caller)) -> OrderResponse:
    """Check out submitted lines, or the caller's stored cart when none are given."""
    command = PlaceOrder(
        customer=json.dumps(body.customer.model_dump()),
        items=json.dumps([line.model_dump() for line in body.items]),
        created_by=str(caller.id) if caller else None,
        payment_proof=body.payment_proof,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return order_response(current_domain.repository_for(Order).get_order(order_id))


@order_router.get("", response_model=OrderListResponse)
async def my_orders(caller: Account = Depends(current_caller)) -> OrderListResponse:
    orders = current_domain.repository_for(Order).created_by(str(caller.id))
    return OrderListResponse(orders=[order_response(o) for o in orders])


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, caller: Account = Depends(current_caller)) -> OrderResponse:
    order = current_domain.repository_for(Order).get_order(order_id)
    if not order.is_visible_to(caller):
        raise ForbiddenError("Not authorized to access this order")
    return order_response(order)
