"""Product aggregate: one merchant's listing of a teff variety.

Price is per kilo in ETB. Stock is tracked in kilos and only ever moves
down through ``decrement_stock``, which the order stock routine calls; a
merchant can restock by editing the listing.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Float, Identifier, String

from teffmarket.domain import teffmarket
from teffmarket.product.events import ProductListed, ProductRemoved, ProductUpdated, StockDecremented
from teffmarket.shared.errors import ForbiddenError


class TeffVariety(Enum):
    WHITE = "White"
    RED = "Red"
    MIXED = "Mixed"


_EDITABLE_FIELDS = ("variety", "price_per_kilo", "stock_available", "description")


@teffmarket.aggregate
class Product:
    merchant_id = Identifier(required=True)
    variety = String(required=True, choices=TeffVariety)
    price_per_kilo = Float(required=True, min_value=0.0)
    stock_available = Float(required=True, min_value=0.0)
    description = String(max_length=500)
    active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def list_for_sale(cls, merchant_id, variety, price_per_kilo, stock_available, description=None):
        now = datetime.now(UTC)
        product = cls(
            merchant_id=merchant_id,
            variety=variety,
            price_per_kilo=price_per_kilo,
            stock_available=stock_available,
            description=description,
            active=True,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                merchant_id=str(merchant_id),
                variety=variety,
                price_per_kilo=price_per_kilo,
                stock_available=stock_available,
            )
        )
        return product

    def ensure_owned_by(self, account_id: str) -> None:
        if str(self.merchant_id) != str(account_id):
            raise ForbiddenError("Not authorized to modify this product")

    def update_details(self, **changes) -> None:
        """Apply a partial edit; keys left as ``None`` are untouched."""
        applied = {k: v for k, v in changes.items() if k in _EDITABLE_FIELDS and v is not None}
        for field_name, value in applied.items():
            setattr(self, field_name, value)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                changed_fields=",".join(sorted(applied)),
                price_per_kilo=self.price_per_kilo,
                stock_available=self.stock_available,
            )
        )

    def remove(self) -> None:
        self.active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductRemoved(product_id=str(self.id), merchant_id=str(self.merchant_id)))

    def decrement_stock(self, quantity: float, order_id: str) -> float:
        """Take ``quantity`` kilos out of stock, never going below zero.

        Returns the stock left afterwards.
        """
        previous = self.stock_available
        self.stock_available = max(0.0, previous - quantity)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockDecremented(
                product_id=str(self.id),
                order_id=str(order_id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock_available,
            )
        )
        return self.stock_available
