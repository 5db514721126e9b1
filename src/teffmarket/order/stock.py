"""Order stock routine shared by assignment and completion.

Each order line carries a ``stock_decremented`` flag. The routine only
touches lines whose flag is still down, so running it from assignment, then
from re-assignment, then from completion takes each line's kilos out of
stock exactly once. Product writes join the caller's unit of work and commit
together with the order.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from teffmarket.product.product import Product
from teffmarket.shared.errors import NotFoundError

logger = structlog.get_logger(__name__)


def apply_stock_decrement(order) -> int:
    """Decrement product stock for every line of ``order`` not yet applied.

    Returns the number of lines applied by this call.
    """
    pending = order.lines_awaiting_stock()
    if not pending:
        return 0

    repo = current_domain.repository_for(Product)
    products = {}
    for line in pending:
        product_id = str(line.product_id)
        if product_id not in products:
            try:
                products[product_id] = repo.get(product_id)
            except ObjectNotFoundError as exc:
                raise NotFoundError(f"Product {product_id} not found") from exc
        remaining = products[product_id].decrement_stock(line.quantity, order_id=order.id)
        logger.info(
            "Stock decremented",
            order_id=str(order.id),
            product_id=product_id,
            quantity=line.quantity,
            remaining=remaining,
        )

    for product in products.values():
        repo.add(product)
    order.mark_stock_decremented(pending)
    return len(pending)
