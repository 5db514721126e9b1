"""Repository for the Cart aggregate."""

from teffmarket.cart.cart import Cart
from teffmarket.domain import teffmarket


@teffmarket.repository(part_of=Cart)
class CartRepository:
    def for_owner(self, owner_id: str) -> Cart | None:
        matches = self._dao.query.filter(owner_id=owner_id).all().items
        return matches[0] if matches else None
