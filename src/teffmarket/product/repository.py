"""Repository for the Product aggregate."""

from teffmarket.domain import teffmarket
from teffmarket.product.product import Product
from teffmarket.shared.errors import NotFoundError
from teffmarket.shared.queries import fetch_all


@teffmarket.repository(part_of=Product)
class ProductRepository:
    def get_active(self, product_id: str) -> Product:
        """Load a product that is still on sale, or raise ``NotFoundError``."""
        matches = self._dao.query.filter(id=product_id).all().items
        if not matches or not matches[0].active:
            raise NotFoundError(f"Product {product_id} not found")
        return matches[0]

    def search(
        self,
        merchant_id: str | None = None,
        variety: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[Product]:
        """Active products matching every filter given, newest first."""
        criteria = {"active": True}
        if merchant_id:
            criteria["merchant_id"] = merchant_id
        if variety:
            criteria["variety"] = variety

        products = fetch_all(self._dao.query.filter(**criteria).order_by("-created_at"))
        if min_price is not None:
            products = [p for p in products if p.price_per_kilo >= min_price]
        if max_price is not None:
            products = [p for p in products if p.price_per_kilo <= max_price]

        return products
