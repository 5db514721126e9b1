"""Integration tests for the account, catalog, cart and checkout endpoints."""

from factories import as_account, load_product
from protean import current_domain
from teffmarket.account.account import Account

CONTACT = {
    "name": "Almaz Tesfaye",
    "phone": "+251911000000",
    "address": "Bole Road, House 12",
    "kebele": "Kebele 03",
}


class TestAccountEndpoints:
    def test_register(self, client):
        response = client.post("/accounts", json={"name": "Hana Bekele", "email": "hana@example.com"})

        assert response.status_code == 201
        data = response.json()
        assert data["role"] == "user"
        assert current_domain.repository_for(Account).get(data["account_id"]).name == "Hana Bekele"

    def test_duplicate_email_is_bad_request(self, client):
        client.post("/accounts", json={"name": "Hana Bekele", "email": "hana@example.com"})
        response = client.post("/accounts", json={"name": "Hana Two", "email": "hana@example.com"})
        assert response.status_code == 400

    def test_admin_deactivates_account(self, client, admin_id, merchant_x):
        response = client.delete(f"/accounts/{merchant_x}", headers=as_account(admin_id))

        assert response.status_code == 200
        assert current_domain.repository_for(Account).get(merchant_x).active is False


class TestProductEndpoints:
    def test_browse_without_account(self, client, white_teff, red_teff):
        response = client.get("/products", params={"variety": "White"})

        assert response.status_code == 200
        assert [p["product_id"] for p in response.json()["products"]] == [white_teff]

    def test_merchant_lists_product(self, client, merchant_x):
        response = client.post(
            "/products",
            json={"variety": "Red", "price_per_kilo": 110.0, "stock_available": 20.0},
            headers=as_account(merchant_x),
        )

        assert response.status_code == 201
        assert response.json()["merchant_id"] == merchant_x

    def test_customer_cannot_list_product(self, client, customer_id):
        response = client.post(
            "/products",
            json={"variety": "Red", "price_per_kilo": 110.0, "stock_available": 20.0},
            headers=as_account(customer_id),
        )
        assert response.status_code == 403

    def test_other_merchant_cannot_edit(self, client, white_teff, merchant_y):
        response = client.put(f"/products/{white_teff}", json={"price_per_kilo": 1.0}, headers=as_account(merchant_y))

        assert response.status_code == 403
        assert response.json()["detail"] == "Not authorized to modify this product"
        assert load_product(white_teff).price_per_kilo == 120.0

    def test_unknown_product(self, client):
        assert client.get("/products/no-such-product").status_code == 404


class TestCartEndpoints:
    def test_cart_requires_account(self, client):
        assert client.get("/cart").status_code == 401

    def test_unknown_account_header(self, client):
        assert client.get("/cart", headers=as_account("no-such-account")).status_code == 401

    def test_empty_cart_view(self, client, customer_id):
        response = client.get("/cart", headers=as_account(customer_id))

        assert response.status_code == 200
        assert response.json() == {"owner_id": customer_id, "items": [], "total": 0.0}

    def test_add_update_remove(self, client, customer_id, white_teff):
        headers = as_account(customer_id)
        added = client.post("/cart/items", json={"product_id": white_teff, "quantity": 1.0}, headers=headers)
        item_id = added.json()["items"][0]["item_id"]

        updated = client.put(f"/cart/items/{item_id}", json={"quantity": 2.5}, headers=headers)
        assert updated.json()["total"] == 300.0

        removed = client.delete(f"/cart/items/{item_id}", headers=headers)
        assert removed.json()["items"] == []

    def test_over_stock_is_bad_request(self, client, customer_id, red_teff):
        response = client.post(
            "/cart/items", json={"product_id": red_teff, "quantity": 6.0}, headers=as_account(customer_id)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "OutOfStock"

    def test_below_floor_is_bad_request(self, client, customer_id, red_teff):
        response = client.post(
            "/cart/items", json={"product_id": red_teff, "quantity": 0.05}, headers=as_account(customer_id)
        )
        assert response.status_code == 400


class TestCheckoutEndpoints:
    def test_guest_checkout(self, client, white_teff, red_teff):
        response = client.post(
            "/orders",
            json={
                "customer": CONTACT,
                "items": [{"product_id": white_teff, "quantity": 2.0}, {"product_id": red_teff, "quantity": 1.0}],
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["total_amount"] == 340.0
        assert {s["merchant_name"]: s["amount"] for s in data["breakdown"]} == {
            "Abebe Grains": 240.0,
            "Selam Teff": 100.0,
        }
        assert data["status"] == "pending"
        assert data["created_by"] is None

    def test_checkout_from_cart(self, client, customer_id, white_teff):
        headers = as_account(customer_id)
        client.post("/cart/items", json={"product_id": white_teff, "quantity": 3.0}, headers=headers)

        response = client.post("/orders", json={"customer": CONTACT}, headers=headers)

        assert response.status_code == 201
        assert response.json()["total_amount"] == 360.0
        assert client.get("/cart", headers=headers).json()["items"] == []

    def test_empty_checkout_is_bad_request(self, client, customer_id):
        response = client.post("/orders", json={"customer": CONTACT}, headers=as_account(customer_id))
        assert response.status_code == 400

    def test_out_of_stock_checkout(self, client, red_teff):
        response = client.post(
            "/orders", json={"customer": CONTACT, "items": [{"product_id": red_teff, "quantity": 5.5}]}
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "OutOfStock",
            "detail": "Insufficient stock for Red Teff. Available: 5 kg",
        }

    def test_my_orders(self, client, customer_id, two_merchant_order):
        response = client.get("/orders", headers=as_account(customer_id))
        assert [o["order_id"] for o in response.json()["orders"]] == [two_merchant_order]

    def test_owner_and_admin_can_read_order(self, client, customer_id, admin_id, two_merchant_order):
        assert client.get(f"/orders/{two_merchant_order}", headers=as_account(customer_id)).status_code == 200
        assert client.get(f"/orders/{two_merchant_order}", headers=as_account(admin_id)).status_code == 200

    def test_stranger_cannot_read_order(self, client, two_merchant_order, merchant_x):
        response = client.get(f"/orders/{two_merchant_order}", headers=as_account(merchant_x))
        assert response.status_code == 403
