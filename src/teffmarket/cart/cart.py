"""Cart aggregate: a signed-in customer's basket of teff, one per owner.

Guests keep their basket on the client and submit the lines at checkout, so
only authenticated owners have a stored cart. Quantities are kilos with a
0.1 kg floor; adding a product that is already in the cart merges the lines
and checks the merged quantity against the product's stock.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, String

from teffmarket.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartItemUpdated
from teffmarket.domain import teffmarket
from teffmarket.shared.errors import NotFoundError, OutOfStockError

MIN_QUANTITY_KG = 0.1


@teffmarket.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    variety = String(max_length=20)
    quantity = Float(required=True, min_value=MIN_QUANTITY_KG)
    price_per_kilo = Float(required=True, min_value=0.0)

    @property
    def subtotal(self) -> float:
        return self.quantity * self.price_per_kilo


@teffmarket.aggregate
class Cart:
    owner_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open_for(cls, owner_id):
        now = datetime.now(UTC)
        return cls(owner_id=owner_id, created_at=now, updated_at=now)

    @property
    def total(self) -> float:
        return sum(item.subtotal for item in self.items)

    def _find_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise NotFoundError("Item not found in cart")
        return item

    @staticmethod
    def _check_stock(product, quantity):
        if quantity > product.stock_available:
            raise OutOfStockError(f"Insufficient stock. Available: {product.stock_available:g} kg")

    def add_item(self, product, quantity: float) -> str:
        """Add ``quantity`` kilos of ``product``, merging with an existing line."""
        existing = next((i for i in self.items if str(i.product_id) == str(product.id)), None)
        new_quantity = quantity + (existing.quantity if existing else 0.0)
        self._check_stock(product, new_quantity)

        if existing:
            existing.quantity = new_quantity
            existing.price_per_kilo = product.price_per_kilo
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=str(product.id),
                merchant_id=str(product.merchant_id),
                variety=product.variety,
                quantity=quantity,
                price_per_kilo=product.price_per_kilo,
            )
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                product_id=str(product.id),
                quantity=new_quantity,
            )
        )
        return item_id

    def update_item(self, item_id, quantity: float, product) -> None:
        if quantity < MIN_QUANTITY_KG:
            raise ValidationError({"quantity": [f"Quantity must be at least {MIN_QUANTITY_KG} kg"]})

        item = self._find_item(item_id)
        self._check_stock(product, quantity)

        previous = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def remove_item(self, item_id) -> None:
        item = self._find_item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))

    def clear(self) -> None:
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), owner_id=str(self.owner_id)))
