"""Fixtures for the HTTP API tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from teffmarket.api.backoffice import admin_router, merchant_router
from teffmarket.api.errors import register_error_handlers
from teffmarket.api.routes import account_router, cart_router, order_router, product_router


@pytest.fixture()
def client():
    app = FastAPI()
    for router in (account_router, product_router, cart_router, order_router, admin_router, merchant_router):
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)
