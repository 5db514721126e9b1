"""Shared BDD fixtures and step definitions for the marketplace flow."""

import pytest
from factories import assign_order, inbox, list_product, load_order, load_product, place_order, register_account
from pytest_bdd import given, parsers, then
from teffmarket.shared.errors import MarketplaceError


@pytest.fixture()
def market():
    """Names to ids for the accounts and products a scenario creates."""
    return {"merchants": {}, "products": {}}


@pytest.fixture()
def admin():
    return register_account("Marketplace Admin", "admin@teffmarket.example", role="admin")


@pytest.fixture()
def error():
    """Container for the error a When step raised."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse(
        'merchant "{name}" sells {variety} teff at {price:g} ETB per kilo with {stock:g} kg in stock'
    )
)
def _(market, name, variety, price, stock):
    email = name.lower().replace(" ", ".") + "@teffmarket.example"
    merchant_id = register_account(name, email, role="merchant")
    market["merchants"][name] = merchant_id
    market["products"][variety] = list_product(merchant_id, variety, price, stock)


@given(
    parsers.cfparse("a customer has ordered {white_kg:g} kg of White teff and {red_kg:g} kg of Red teff"),
    target_fixture="order_id",
)
def _(market, white_kg, red_kg):
    return place_order([(market["products"]["White"], white_kg), (market["products"]["Red"], red_kg)])


@given(parsers.cfparse('the admin has assigned the order to both merchants by "{method}"'))
def _(market, admin, order_id, method):
    assign_order(order_id, list(market["merchants"].values()), method, admin)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert load_order(order_id).status == status


@then(parsers.cfparse("{variety} teff stock is {kilos:g} kg"))
def _(market, variety, kilos):
    assert load_product(market["products"][variety]).stock_available == kilos


@then(parsers.cfparse('"{name}" has {count:d} notifications'))
def _(market, name, count):
    assert len(inbox(market["merchants"][name])) == count


@then(parsers.cfparse('the request fails with "{message}"'))
def _(error, message):
    assert isinstance(error["exc"], MarketplaceError)
    assert error["exc"].message == message
