# Overview: Route-level tests for sales orders, products, notifications and health.

from backoffice.models import Notification, StockMovement
from conftest import current_quantity


class TestCreateOrderRoute:
    def test_created_with_notifications(self, client, db_session, auth_headers, product, variant, order_payload):
        response = client.post(
            "/api/order",
            json=order_payload([(product.id, variant.id, 6)]),
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.get_json()
        assert body["success"] is True
        assert body["message"] == "Order created successfully"
        order = body["data"]
        assert order["products"][0]["quantity"] == 6
        assert order["customer_name"] == "Asha Traders"

        assert current_quantity(variant.id) == 4
        names = sorted(n.name for n in db_session.query(Notification).all())
        assert names == ["Low Stock Alert", "New Sales Order Created"]

    def test_insufficient_stock_details(self, client, db_session, auth_headers, product, variant, order_payload):
        response = client.post(
            "/api/order",
            json=order_payload([(product.id, variant.id, 11)]),
            headers=auth_headers,
        )

        assert response.status_code == 400
        body = response.get_json()
        assert body["success"] is False
        assert "has only 10 in stock" in body["message"]
        assert body["details"] == {
            "product_id": product.id,
            "variant_id": variant.id,
            "requested": 11,
            "available": 10,
        }
        assert db_session.query(StockMovement).count() == 0
        assert db_session.query(Notification).count() == 0

    def test_invalid_json(self, client, db_session, auth_headers):
        response = client.post("/api/order", data="not json", headers=auth_headers)
        assert response.status_code == 400

    def test_unknown_customer(self, client, db_session, auth_headers, product, variant, order_payload):
        response = client.post(
            "/api/order",
            json=order_payload([(product.id, variant.id, 1)], customer_id=99999),
            headers=auth_headers,
        )
        assert response.status_code == 404

    def test_notification_failure_does_not_fail_request(self, client, db_session, auth_headers,
                                                        product, variant, order_payload, monkeypatch):
        from backoffice.services import notification_service

        def broken(event):
            raise RuntimeError("notification store down")

        monkeypatch.setattr(notification_service, "create_notification", broken)

        response = client.post(
            "/api/order",
            json=order_payload([(product.id, variant.id, 2)]),
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert current_quantity(variant.id) == 8


class TestOrderLifecycleRoutes:
    def _create(self, client, headers, payload):
        response = client.post("/api/order", json=payload, headers=headers)
        assert response.status_code == 201
        return response.get_json()["data"]

    def test_get_update_delete(self, client, db_session, auth_headers, product, variant, order_payload):
        order = self._create(client, auth_headers, order_payload([(product.id, variant.id, 5)]))

        response = client.get(f"/api/order/{order['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json()["data"]["invoice_number"] == order["invoice_number"]

        response = client.put(
            f"/api/order/{order['id']}",
            json=order_payload([(product.id, variant.id, 8)]),
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert current_quantity(variant.id) == 2

        response = client.delete(f"/api/order/{order['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert current_quantity(variant.id) == 10

        assert client.get(f"/api/order/{order['id']}", headers=auth_headers).status_code == 404
        assert client.delete(f"/api/order/{order['id']}", headers=auth_headers).status_code == 404

    def test_update_removing_line(self, client, db_session, auth_headers, make_product, order_payload):
        product = make_product(variants=(("1kg", 10, 0), ("5kg", 10, 0)))
        small, large = product.variants
        order = self._create(client, auth_headers, order_payload([(product.id, small.id, 1), (product.id, large.id, 1)]))

        response = client.put(
            f"/api/order/{order['id']}",
            json=order_payload([(product.id, small.id, 1)]),
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_list_by_customer(self, client, db_session, auth_headers, customer, product, variant, order_payload):
        order = self._create(client, auth_headers, order_payload([(product.id, variant.id, 1)]))

        response = client.get(f"/api/order/customer/{customer.id}", headers=auth_headers)
        assert [o["id"] for o in response.get_json()["data"]] == [order["id"]]
        assert client.get("/api/order/customer/99999", headers=auth_headers).status_code == 404


class TestOwnerIsolation:
    def test_other_owner_sees_nothing(self, client, db_session, auth_headers, other_user,
                                      product, variant, order_payload):
        from backoffice.services.session_service import create_session

        response = client.post("/api/order", json=order_payload([(product.id, variant.id, 1)]), headers=auth_headers)
        order_id = response.get_json()["data"]["id"]

        _, token = create_session(other_user.id)
        other_headers = {"Authorization": f"Bearer {token}"}

        assert client.get("/api/order", headers=other_headers).get_json()["data"] == []
        assert client.get(f"/api/order/{order_id}", headers=other_headers).status_code == 404
        assert client.delete(f"/api/order/{order_id}", headers=other_headers).status_code == 404
        assert client.get("/api/notifications", headers=other_headers).get_json()["data"] == []
        assert current_quantity(variant.id) == 9


class TestProductRoutes:
    def test_list_includes_stock_status(self, client, db_session, auth_headers, make_product):
        make_product(variants=(("1kg", 0, 5), ("5kg", 3, 5), ("10kg", 30, 5)))

        response = client.get("/api/products", headers=auth_headers)

        assert response.status_code == 200
        [product] = response.get_json()["data"]
        assert [v["stock_status"] for v in product["variants"]] == ["Out of Stock", "Low Stock", "In Stock"]

    def test_create_product(self, client, db_session, auth_headers):
        response = client.post("/api/products", headers=auth_headers, json={
            "name": "Toor Dal",
            "unit": "bag",
            "variants": [{
                "packing_size": "500g",
                "sku": "TD-500",
                "retail_price_cents": 9000,
                "wholesale_price_cents": 8500,
                "purchase_price_cents": 7000,
                "tax_rate_bps": 500,
                "min_stock_level": 4,
            }],
        })

        assert response.status_code == 201
        variant = response.get_json()["data"]["variants"][0]
        assert variant["quantity"] == 0
        assert variant["stock_status"] == "Out of Stock"

    def test_movements_endpoint(self, client, db_session, auth_headers, product, variant, order_payload):
        client.post("/api/order", json=order_payload([(product.id, variant.id, 3)]), headers=auth_headers)
        client.post("/api/order", json=order_payload([(product.id, variant.id, 2)]), headers=auth_headers)

        response = client.get(
            f"/api/products/{product.id}/variants/{variant.id}/movements?limit=1",
            headers=auth_headers,
        )

        assert response.status_code == 200
        [movement] = response.get_json()["data"]
        assert (movement["type"], movement["quantity"], movement["balance_after"]) == ("sale", 2, 5)

    def test_movements_unknown_variant(self, client, db_session, auth_headers, product):
        response = client.get(f"/api/products/{product.id}/variants/99999/movements", headers=auth_headers)
        assert response.status_code == 404

    def test_price_update_keeps_order_lines(self, client, db_session, auth_headers, product, variant, order_payload):
        response = client.post("/api/order", json=order_payload([(product.id, variant.id, 3)]), headers=auth_headers)
        order_id = response.get_json()["data"]["id"]

        response = client.put(f"/api/products/{product.id}", headers=auth_headers, json={
            "variants": [{
                "id": variant.id,
                "packing_size": "1kg",
                "sku": "BAS-1kg",
                "retail_price_cents": 15000,
                "wholesale_price_cents": 14000,
                "purchase_price_cents": 9500,
                "tax_rate_bps": 1200,
                "min_stock_level": 5,
                "quantity": 999,
            }],
        })

        assert response.status_code == 200
        [updated] = response.get_json()["data"]["variants"]
        assert updated["retail_price_cents"] == 15000
        assert updated["quantity"] == 7

        [order_line] = client.get(f"/api/order/{order_id}", headers=auth_headers).get_json()["data"]["products"]
        assert order_line["unit_price_cents"] == 12000
        assert order_line["gst_rate_bps"] == 500

    def test_update_validation(self, client, db_session, auth_headers, product):
        response = client.put(f"/api/products/{product.id}", headers=auth_headers, json={"name": ""})
        assert response.status_code == 400

        response = client.put("/api/products/99999", headers=auth_headers, json={"name": "Ghost"})
        assert response.status_code == 404

    def test_delete_product(self, client, db_session, auth_headers, product, variant, order_payload):
        assert client.get(f"/api/products/{product.id}", headers=auth_headers).status_code == 200

        response = client.delete(f"/api/products/{product.id}", headers=auth_headers)

        assert response.status_code == 200
        assert client.get("/api/products", headers=auth_headers).get_json()["data"] == []
        assert client.get(f"/api/products/{product.id}", headers=auth_headers).status_code == 404
        response = client.post("/api/order", json=order_payload([(product.id, variant.id, 1)]), headers=auth_headers)
        assert response.status_code == 404
        assert current_quantity(variant.id) == 10


class TestNotificationRoutes:
    def test_mark_read_and_delete(self, client, db_session, auth_headers, product, variant, order_payload):
        client.post("/api/order", json=order_payload([(product.id, variant.id, 1)]), headers=auth_headers)
        [notification] = client.get("/api/notifications", headers=auth_headers).get_json()["data"]

        response = client.put(f"/api/notifications/{notification['id']}", headers=auth_headers)
        assert response.get_json()["data"]["is_read"] is True
        assert client.get("/api/notifications?unread=true", headers=auth_headers).get_json()["data"] == []

        assert client.delete(f"/api/notifications/{notification['id']}", headers=auth_headers).status_code == 200
        assert client.delete(f"/api/notifications/{notification['id']}", headers=auth_headers).status_code == 404


def test_health(client, db_session):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["data"]["checks"]["database"]["status"] == "healthy"
