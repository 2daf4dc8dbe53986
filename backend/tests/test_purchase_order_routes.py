# Overview: Route-level tests for purchase orders, parties and payments.

from backoffice.models import Notification, PurchaseOrder, StockMovement
from conftest import current_quantity


def test_purchase_order_lifecycle(client, db_session, auth_headers, make_product, purchase_payload):
    product = make_product(name="Sunflower Oil", variants=(("1L", 0, 0),))
    variant = product.variants[0]

    response = client.post(
        "/api/purchase-order",
        json=purchase_payload([(product.id, variant.id, 20)]),
        headers=auth_headers,
    )
    assert response.status_code == 201
    purchase_order = response.get_json()["data"]
    assert current_quantity(variant.id) == 20
    assert db_session.query(Notification).count() == 0

    response = client.put(
        f"/api/purchase-order/{purchase_order['id']}",
        json=purchase_payload([(product.id, variant.id, 12)]),
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert current_quantity(variant.id) == 12

    response = client.delete(f"/api/purchase-order/{purchase_order['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert current_quantity(variant.id) == 0
    assert client.get(f"/api/purchase-order/{purchase_order['id']}", headers=auth_headers).status_code == 404


def test_delete_rejected_after_sale(client, db_session, auth_headers, make_product,
                                    purchase_payload, order_payload):
    product = make_product(name="Sunflower Oil", variants=(("1L", 0, 0),))
    variant = product.variants[0]

    response = client.post(
        "/api/purchase-order", json=purchase_payload([(product.id, variant.id, 20)]), headers=auth_headers
    )
    purchase_order_id = response.get_json()["data"]["id"]
    client.post("/api/order", json=order_payload([(product.id, variant.id, 15)]), headers=auth_headers)

    response = client.delete(f"/api/purchase-order/{purchase_order_id}", headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["details"]["available"] == 5
    assert current_quantity(variant.id) == 5


def test_list_by_supplier(client, db_session, auth_headers, supplier, product, variant, purchase_payload):
    client.post("/api/purchase-order", json=purchase_payload([(product.id, variant.id, 1)]), headers=auth_headers)

    response = client.get(f"/api/purchase-order/supplier/{supplier.id}", headers=auth_headers)
    assert response.status_code == 200
    assert len(response.get_json()["data"]) == 1
    assert client.get("/api/purchase-order/supplier/99999", headers=auth_headers).status_code == 404


def test_missing_lines(client, db_session, auth_headers, product, variant, purchase_payload):
    payload = purchase_payload([(product.id, variant.id, 1)])
    payload["products"] = []
    response = client.post("/api/purchase-order", json=payload, headers=auth_headers)
    assert response.status_code == 400


def test_oversized_quantity(client, db_session, auth_headers, make_product, purchase_payload):
    product = make_product(name="Sunflower Oil", variants=(("1L", 0, 0),))
    variant = product.variants[0]
    payload = purchase_payload([(product.id, variant.id, 1)])
    payload["products"][0]["quantity"] = 2**63

    response = client.post("/api/purchase-order", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert "products[0].quantity" in response.get_json()["message"]
    assert db_session.query(PurchaseOrder).count() == 0
    assert db_session.query(StockMovement).count() == 0
    assert current_quantity(variant.id) == 0


def test_no_alerts_outside_sales_creation(client, db_session, auth_headers, make_product,
                                          purchase_payload, order_payload):
    """Stock stays under the minimum of 50 throughout; only the sale itself notifies."""
    product = make_product(name="Mustard Oil", variants=(("1L", 10, 50),))
    variant = product.variants[0]

    response = client.post(
        "/api/purchase-order", json=purchase_payload([(product.id, variant.id, 5)]), headers=auth_headers
    )
    purchase_order_id = response.get_json()["data"]["id"]
    client.put(
        f"/api/purchase-order/{purchase_order_id}",
        json=purchase_payload([(product.id, variant.id, 3)]),
        headers=auth_headers,
    )
    assert current_quantity(variant.id) == 13
    assert db_session.query(Notification).count() == 0

    response = client.post("/api/order", json=order_payload([(product.id, variant.id, 2)]), headers=auth_headers)
    order_id = response.get_json()["data"]["id"]
    assert db_session.query(Notification).count() == 2

    client.put(f"/api/order/{order_id}", json=order_payload([(product.id, variant.id, 3)]), headers=auth_headers)
    client.delete(f"/api/order/{order_id}", headers=auth_headers)
    client.delete(f"/api/purchase-order/{purchase_order_id}", headers=auth_headers)

    assert current_quantity(variant.id) == 10
    assert db_session.query(Notification).count() == 2


class TestPartyRoutes:
    def test_customer_crud(self, client, db_session, auth_headers):
        response = client.post("/api/customers", headers=auth_headers, json={
            "name": "Mehta Stores",
            "number": "9811111111",
            "customer_type": "wholesale",
        })
        assert response.status_code == 201
        customer = response.get_json()["data"]
        assert customer["customer_type"] == "wholesale"

        duplicate = client.post("/api/customers", headers=auth_headers, json={
            "name": "Another Mehta",
            "number": "9811111111",
        })
        assert duplicate.status_code == 400

        assert client.get(f"/api/customers/{customer['id']}", headers=auth_headers).status_code == 200
        assert client.delete(f"/api/customers/{customer['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/customers/{customer['id']}", headers=auth_headers).status_code == 404

    def test_supplier_create(self, client, db_session, auth_headers):
        response = client.post("/api/suppliers", headers=auth_headers, json={
            "name": "Delhi Mills",
            "number": "9822222222",
            "gst_number": "07BBBBB1111B1Z2",
        })
        assert response.status_code == 201
        assert response.get_json()["data"]["gst_number"] == "07BBBBB1111B1Z2"

    def test_supplier_requires_name(self, client, db_session, auth_headers):
        response = client.post("/api/suppliers", headers=auth_headers, json={"number": "9822222222"})
        assert response.status_code == 400

    def test_customer_update(self, client, db_session, auth_headers, customer):
        client.post("/api/customers", headers=auth_headers, json={"name": "Mehta Stores", "number": "9811111111"})

        response = client.put(f"/api/customers/{customer.id}", headers=auth_headers, json={
            "name": "Asha Traders Pvt",
            "number": customer.number,
            "customer_type": "wholesale",
        })
        assert response.status_code == 200
        data = response.get_json()["data"]
        assert (data["name"], data["customer_type"]) == ("Asha Traders Pvt", "wholesale")

        duplicate = client.put(f"/api/customers/{customer.id}", headers=auth_headers, json={
            "name": "Asha Traders Pvt",
            "number": "9811111111",
        })
        assert duplicate.status_code == 400
        assert client.put("/api/customers/99999", headers=auth_headers, json={
            "name": "Nobody",
            "number": "9899999999",
        }).status_code == 404

    def test_supplier_update(self, client, db_session, auth_headers, supplier):
        response = client.put(f"/api/suppliers/{supplier.id}", headers=auth_headers, json={
            "name": "Northern Distributors",
            "number": supplier.number,
            "gst_number": "27CCCCC2222C1Z9",
        })

        assert response.status_code == 200
        assert response.get_json()["data"]["gst_number"] == "27CCCCC2222C1Z9"
        assert client.put(f"/api/suppliers/{supplier.id}", headers=auth_headers, json={
            "number": supplier.number,
        }).status_code == 400


class TestPaymentRoutes:
    def test_customer_payment_notifies(self, client, db_session, auth_headers, customer):
        response = client.post("/api/customer-payments", headers=auth_headers, json={
            "customer_id": customer.id,
            "amount_cents": 125000,
            "payment_type": "received",
            "payment_mode": "cash",
        })

        assert response.status_code == 201
        [notification] = db_session.query(Notification).all()
        assert notification.description == "Payment of 1,250.00 has been made by Asha Traders."

        listed = client.get(f"/api/customer-payments?customer_id={customer.id}", headers=auth_headers)
        assert len(listed.get_json()["data"]) == 1

    def test_supplier_payment_unknown_supplier(self, client, db_session, auth_headers):
        response = client.post("/api/supplier-payments", headers=auth_headers, json={
            "supplier_id": 99999,
            "amount_cents": 100,
            "payment_type": "paid",
            "payment_mode": "cash",
        })
        assert response.status_code == 404

    def test_delete_supplier_payment(self, client, db_session, auth_headers, supplier):
        response = client.post("/api/supplier-payments", headers=auth_headers, json={
            "supplier_id": supplier.id,
            "amount_cents": 100,
            "payment_type": "paid",
            "payment_mode": "cash",
        })
        payment_id = response.get_json()["data"]["id"]

        assert client.delete(f"/api/supplier-payments/{payment_id}", headers=auth_headers).status_code == 200
        assert client.delete(f"/api/supplier-payments/{payment_id}", headers=auth_headers).status_code == 404

    def test_update_customer_payment(self, client, db_session, auth_headers, customer):
        payload = {
            "customer_id": customer.id,
            "amount_cents": 125000,
            "payment_type": "received",
            "payment_mode": "cash",
        }
        response = client.post("/api/customer-payments", headers=auth_headers, json=payload)
        payment_id = response.get_json()["data"]["id"]

        response = client.put(
            f"/api/customer-payments/{payment_id}",
            headers=auth_headers,
            json=dict(payload, amount_cents=120000, payment_mode="upi"),
        )

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert (data["amount_cents"], data["payment_mode"]) == (120000, "upi")
        assert db_session.query(Notification).count() == 1
        assert client.put(
            f"/api/customer-payments/{payment_id}", headers=auth_headers, json=dict(payload, amount_cents=0)
        ).status_code == 400
        assert client.put("/api/customer-payments/99999", headers=auth_headers, json=payload).status_code == 404

    def test_update_supplier_payment(self, client, db_session, auth_headers, supplier):
        payload = {
            "supplier_id": supplier.id,
            "amount_cents": 100,
            "payment_type": "paid",
            "payment_mode": "cash",
        }
        response = client.post("/api/supplier-payments", headers=auth_headers, json=payload)
        payment_id = response.get_json()["data"]["id"]

        response = client.put(
            f"/api/supplier-payments/{payment_id}", headers=auth_headers, json=dict(payload, amount_cents=250)
        )

        assert response.status_code == 200
        assert response.get_json()["data"]["amount_cents"] == 250
