import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config environment before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def teffmarket_bed():
    from teffmarket.domain import teffmarket

    bed = DomainFixture(teffmarket)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(teffmarket_bed):
    """Run each test in the domain context and wipe the stores afterwards."""
    with teffmarket_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Marketplace fixtures shared by the application, integration and bdd tiers
# ---------------------------------------------------------------------------
@pytest.fixture()
def admin_id():
    from factories import register_account

    return register_account("Marketplace Admin", "admin@teffmarket.example", role="admin")


@pytest.fixture()
def customer_id():
    from factories import register_account

    return register_account("Almaz Tesfaye", "almaz@teffmarket.example")


@pytest.fixture()
def merchant_x():
    from factories import register_account

    return register_account("Abebe Grains", "abebe@teffmarket.example", role="merchant", phone="+251911111111")


@pytest.fixture()
def merchant_y():
    from factories import register_account

    return register_account("Selam Teff", "selam@teffmarket.example", role="merchant", phone="+251922222222")


@pytest.fixture()
def white_teff(merchant_x):
    """Merchant X's white teff: 120 ETB/kg, 10 kg on hand."""
    from factories import list_product

    return list_product(merchant_x, "White", 120.0, 10.0)


@pytest.fixture()
def red_teff(merchant_y):
    """Merchant Y's red teff: 100 ETB/kg, 5 kg on hand."""
    from factories import list_product

    return list_product(merchant_y, "Red", 100.0, 5.0)


@pytest.fixture()
def two_merchant_order(customer_id, white_teff, red_teff):
    """2 kg white teff from X and 1 kg red teff from Y: 240 + 100 ETB."""
    from factories import place_order

    return place_order([(white_teff, 2.0), (red_teff, 1.0)], created_by=customer_id)
