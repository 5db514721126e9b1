"""Cart item management: commands and handler."""

from protean import handle
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from teffmarket.cart.cart import MIN_QUANTITY_KG, Cart
from teffmarket.domain import teffmarket
from teffmarket.product.product import Product
from teffmarket.shared.errors import NotFoundError


@teffmarket.command(part_of="Cart")
class AddToCart:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Float(required=True, min_value=MIN_QUANTITY_KG)


@teffmarket.command(part_of="Cart")
class UpdateCartItem:
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Float(required=True, min_value=MIN_QUANTITY_KG)


@teffmarket.command(part_of="Cart")
class RemoveFromCart:
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)


@teffmarket.command(part_of="Cart")
class ClearCart:
    owner_id = Identifier(required=True)


def _cart_of(owner_id, create=False):
    cart = current_domain.repository_for(Cart).for_owner(owner_id)
    if cart is None:
        if not create:
            raise NotFoundError("Cart not found")
        cart = Cart.open_for(owner_id)
    return cart


@teffmarket.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).get_active(command.product_id)
        cart = _cart_of(command.owner_id, create=True)
        item_id = cart.add_item(product, command.quantity)
        current_domain.repository_for(Cart).add(cart)
        return item_id

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = _cart_of(command.owner_id)
        item = next((i for i in cart.items if str(i.id) == str(command.item_id)), None)
        if item is None:
            raise NotFoundError("Item not found in cart")
        product = current_domain.repository_for(Product).get_active(item.product_id)
        cart.update_item(command.item_id, command.quantity, product)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = _cart_of(command.owner_id)
        cart.remove_item(command.item_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = _cart_of(command.owner_id, create=True)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
