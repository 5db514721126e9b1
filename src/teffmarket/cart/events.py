"""Cart domain events."""

from protean.fields import Float, Identifier

from teffmarket.domain import teffmarket


@teffmarket.event(part_of="Cart")
class CartItemAdded:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Float(required=True)


@teffmarket.event(part_of="Cart")
class CartItemUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Float(required=True)
    new_quantity = Float(required=True)


@teffmarket.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@teffmarket.event(part_of="Cart")
class CartCleared:
    """The cart was emptied, by the owner or by checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier(required=True)
