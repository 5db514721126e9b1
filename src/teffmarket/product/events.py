"""Catalog domain events."""

from protean.fields import Float, Identifier, String

from teffmarket.domain import teffmarket


@teffmarket.event(part_of="Product")
class ProductListed:
    """A merchant put a teff variety up for sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    variety = String(required=True)
    price_per_kilo = Float(required=True)
    stock_available = Float(required=True)


@teffmarket.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id = Identifier(required=True)
    changed_fields = String()
    price_per_kilo = Float()
    stock_available = Float()


@teffmarket.event(part_of="Product")
class ProductRemoved:
    __version__ = 1

    product_id = Identifier(required=True)
    merchant_id = Identifier(required=True)


@teffmarket.event(part_of="Product")
class StockDecremented:
    """Stock left the shelf because an order was assigned or completed."""

    __version__ = 1

    product_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Float(required=True)
    previous_stock = Float(required=True)
    new_stock = Float(required=True)
