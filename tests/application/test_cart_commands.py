"""Application tests for cart commands."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from teffmarket.cart.cart import Cart
from teffmarket.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from teffmarket.shared.errors import NotFoundError, OutOfStockError


def _add(owner_id, product_id, quantity):
    command = AddToCart(owner_id=owner_id, product_id=product_id, quantity=quantity)
    return current_domain.process(command, asynchronous=False)


def _cart(owner_id):
    return current_domain.repository_for(Cart).for_owner(owner_id)


class TestAddToCart:
    def test_first_add_opens_cart(self, customer_id, white_teff):
        _add(customer_id, white_teff, 1.5)

        cart = _cart(customer_id)
        assert len(cart.items) == 1
        assert cart.items[0].price_per_kilo == 120.0
        assert cart.total == 180.0

    def test_same_product_merges_into_one_line(self, customer_id, white_teff):
        first = _add(customer_id, white_teff, 1.0)
        second = _add(customer_id, white_teff, 2.0)

        cart = _cart(customer_id)
        assert first == second
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3.0

    def test_merged_quantity_is_checked_against_stock(self, customer_id, white_teff):
        _add(customer_id, white_teff, 6.0)
        with pytest.raises(OutOfStockError) as exc:
            _add(customer_id, white_teff, 5.0)
        assert exc.value.message == "Insufficient stock. Available: 10 kg"

    def test_unknown_product(self, customer_id):
        with pytest.raises(NotFoundError):
            _add(customer_id, "no-such-product", 1.0)

    def test_below_floor_is_rejected(self, customer_id, white_teff):
        with pytest.raises(ValidationError):
            _add(customer_id, white_teff, 0.05)


class TestChangeCart:
    def test_update_quantity(self, customer_id, white_teff):
        item_id = _add(customer_id, white_teff, 1.0)
        current_domain.process(
            UpdateCartItem(owner_id=customer_id, item_id=item_id, quantity=4.0), asynchronous=False
        )
        assert _cart(customer_id).items[0].quantity == 4.0

    def test_update_beyond_stock(self, customer_id, red_teff):
        item_id = _add(customer_id, red_teff, 1.0)
        with pytest.raises(OutOfStockError):
            current_domain.process(
                UpdateCartItem(owner_id=customer_id, item_id=item_id, quantity=6.0), asynchronous=False
            )

    def test_update_unknown_item(self, customer_id, white_teff):
        _add(customer_id, white_teff, 1.0)
        with pytest.raises(NotFoundError):
            current_domain.process(
                UpdateCartItem(owner_id=customer_id, item_id="no-such-item", quantity=2.0), asynchronous=False
            )

    def test_remove_item(self, customer_id, white_teff, red_teff):
        item_id = _add(customer_id, white_teff, 1.0)
        _add(customer_id, red_teff, 1.0)
        current_domain.process(RemoveFromCart(owner_id=customer_id, item_id=item_id), asynchronous=False)

        cart = _cart(customer_id)
        assert [item.product_id for item in cart.items] == [red_teff]

    def test_clear(self, customer_id, white_teff, red_teff):
        _add(customer_id, white_teff, 1.0)
        _add(customer_id, red_teff, 1.0)
        current_domain.process(ClearCart(owner_id=customer_id), asynchronous=False)
        assert len(_cart(customer_id).items) == 0

    def test_carts_are_per_owner(self, customer_id, admin_id, white_teff):
        _add(customer_id, white_teff, 1.0)
        assert _cart(admin_id) is None
