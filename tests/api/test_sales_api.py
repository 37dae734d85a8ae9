"""HTTP tests for /v1/sales and /v1/sale-items."""

from decimal import Decimal

from app.domain.models.product import Product


def _checkout_body(product_id: int, quantity: int = 2) -> dict:
    return {
        "customer_name": "Maria Lopez",
        "customer_email": "maria@example.com",
        "items": [{"product_id": product_id, "quantity": quantity}],
    }


class TestCreateSale:

    def test_admin_creates_sale(self, api, admin_headers, db, make_client, make_product):
        client = make_client()
        product = make_product(unit_price=Decimal("10.00"), stock=5)

        response = api.post(
            "/v1/sales",
            json={"client_id": client.id, "items": [{"product_id": product.id, "quantity": 2}], "tax_rate": "0.16"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert Decimal(body["subtotal"]) == Decimal("20.00")
        assert Decimal(body["total"]) == Decimal("23.20")
        assert body["is_paid"] is False
        assert len(body["items"]) == 1

        db.expire_all()
        assert db.get(Product, product.id).stock == 3

    def test_insufficient_stock(self, api, admin_headers, make_client, make_product):
        product = make_product(stock=1)
        response = api.post(
            "/v1/sales",
            json={"client_id": make_client().id, "items": [{"product_id": product.id, "quantity": 5}]},
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "InsufficientStockException"
        assert response.json()["error"]["details"]["available"] == 1

    def test_empty_cart_is_invalid(self, api, admin_headers, make_client):
        response = api.post("/v1/sales", json={"client_id": make_client().id, "items": []}, headers=admin_headers)
        assert response.status_code == 422

    def test_non_admin_forbidden(self, api, user_headers, make_client, make_product):
        response = api.post(
            "/v1/sales",
            json={"client_id": make_client().id, "items": [{"product_id": make_product().id, "quantity": 1}]},
            headers=user_headers,
        )
        assert response.status_code == 403


class TestRegisterSale:

    def test_register_and_download(self, api, user_headers, make_product):
        product = make_product(stock=5)

        response = api.post("/v1/sales/register-sale", json=_checkout_body(product.id), headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Sale registered successfully"
        assert body["invoice_number"].startswith("INV-")
        assert body["pdf"].startswith("/v1/sales/download?file=receipt_")

        download = api.get(body["pdf"], headers=user_headers)
        assert download.status_code == 200
        assert download.headers["content-type"] == "application/pdf"
        assert download.content.startswith(b"%PDF")

    def test_register_requires_login(self, api, make_product):
        response = api.post("/v1/sales/register-sale", json=_checkout_body(make_product().id))
        assert response.status_code == 401

    def test_download_missing_file(self, api, user_headers):
        response = api.get("/v1/sales/download", params={"file": "nope.pdf"}, headers=user_headers)
        assert response.status_code == 404

    def test_bad_email(self, api, user_headers, make_product):
        body = {**_checkout_body(make_product().id), "customer_email": "not-an-email"}
        assert api.post("/v1/sales/register-sale", json=body, headers=user_headers).status_code == 422


class TestReadAndDelete:

    def test_list_get_delete(self, api, admin_headers, make_product):
        product = make_product(stock=5)
        sale_id = api.post(
            "/v1/sales/register-sale", json=_checkout_body(product.id, 1), headers=admin_headers
        ).json()["sale_id"]

        assert [s["id"] for s in api.get("/v1/sales", headers=admin_headers).json()] == [sale_id]
        sale = api.get(f"/v1/sales/{sale_id}", headers=admin_headers).json()

        items = api.get("/v1/sale-items", headers=admin_headers).json()
        assert [i["id"] for i in items] == [sale["items"][0]["id"]]
        assert api.get(f"/v1/sale-items/{items[0]['id']}", headers=admin_headers).status_code == 200

        assert api.delete(f"/v1/sales/{sale_id}", headers=admin_headers).status_code == 204
        assert api.get(f"/v1/sales/{sale_id}", headers=admin_headers).status_code == 404


class TestCorrections:

    def _sale(self, api, admin_headers, make_client, product, quantity=2):
        return api.post(
            "/v1/sales",
            json={"client_id": make_client().id, "items": [{"product_id": product.id, "quantity": quantity}], "tax_rate": "0.16"},
            headers=admin_headers,
        ).json()

    def test_edit_header(self, api, admin_headers, make_client, make_product):
        sale = self._sale(api, admin_headers, make_client, make_product(unit_price=Decimal("10.00")))

        response = api.put(
            f"/v1/sales/{sale['id']}", json={"tax_rate": "0", "is_paid": True}, headers=admin_headers
        )

        assert response.status_code == 200
        assert Decimal(response.json()["total"]) == Decimal("20.00")
        assert response.json()["is_paid"] is True

    def test_line_changes_move_stock_and_totals(self, api, admin_headers, db, make_client, make_product):
        hammer = make_product(unit_price=Decimal("10.00"), stock=10)
        nails = make_product(unit_price=Decimal("5.00"), stock=10)
        sale = self._sale(api, admin_headers, make_client, hammer)

        added = api.post(
            "/v1/sale-items", json={"sale_id": sale["id"], "product_id": nails.id, "quantity": 4}, headers=admin_headers
        )
        assert added.status_code == 201
        item_id = added.json()["id"]

        edited = api.put(f"/v1/sale-items/{item_id}", json={"quantity": 1}, headers=admin_headers)
        assert edited.status_code == 200
        assert Decimal(edited.json()["subtotal"]) == Decimal("5.00")
        assert Decimal(api.get(f"/v1/sales/{sale['id']}", headers=admin_headers).json()["total"]) == Decimal("29.00")

        assert api.delete(f"/v1/sale-items/{item_id}", headers=admin_headers).status_code == 204
        body = api.get(f"/v1/sales/{sale['id']}", headers=admin_headers).json()
        assert Decimal(body["total"]) == Decimal("23.20")
        assert len(body["items"]) == 1

        db.expire_all()
        assert db.get(Product, nails.id).stock == 10
        assert db.get(Product, hammer.id).stock == 8

    def test_line_beyond_stock(self, api, admin_headers, make_client, make_product):
        product = make_product(stock=2)
        sale = self._sale(api, admin_headers, make_client, product, quantity=1)
        response = api.put(f"/v1/sale-items/{sale['items'][0]['id']}", json={"quantity": 5}, headers=admin_headers)
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "InsufficientStockException"

    def test_last_line_stays(self, api, admin_headers, make_client, make_product):
        sale = self._sale(api, admin_headers, make_client, make_product())
        response = api.delete(f"/v1/sale-items/{sale['items'][0]['id']}", headers=admin_headers)
        assert response.status_code == 422

    def test_non_admin_cannot_correct(self, api, admin_headers, user_headers, make_client, make_product):
        sale = self._sale(api, admin_headers, make_client, make_product())
        item_id = sale["items"][0]["id"]
        assert api.put(f"/v1/sales/{sale['id']}", json={"notes": "x"}, headers=user_headers).status_code == 403
        assert api.put(f"/v1/sale-items/{item_id}", json={"quantity": 1}, headers=user_headers).status_code == 403
        assert api.delete(f"/v1/sale-items/{item_id}", headers=user_headers).status_code == 403
