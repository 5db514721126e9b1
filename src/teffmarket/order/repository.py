"""Repository for the Order aggregate, with the read queries the API serves."""

from teffmarket.domain import teffmarket
from teffmarket.order.order import Order
from teffmarket.shared.errors import NotFoundError
from teffmarket.shared.queries import fetch_all


@teffmarket.repository(part_of=Order)
class OrderRepository:
    def get_order(self, order_id: str) -> Order:
        """Load an order or raise ``NotFoundError``."""
        matches = self._dao.query.filter(id=order_id).all().items
        if not matches:
            raise NotFoundError("Order not found")
        return matches[0]

    def search(self, status: str | None = None, payment_status: str | None = None) -> list[Order]:
        """All orders matching the filters given, newest first."""
        criteria = {}
        if status:
            criteria["status"] = status
        if payment_status:
            criteria["payment_status"] = payment_status

        query = self._dao.query.filter(**criteria) if criteria else self._dao.query
        return fetch_all(query.order_by("-created_at"))

    def created_by(self, account_id: str) -> list[Order]:
        return fetch_all(self._dao.query.filter(created_by=account_id).order_by("-created_at"))

    def assigned_to(self, merchant_id: str, status: str | None = None) -> list[Order]:
        """Orders holding an assignment for ``merchant_id``, newest first."""
        return [order for order in self.search(status=status) if order.assignment_for(merchant_id) is not None]
