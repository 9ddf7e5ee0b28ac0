import pytest
from fastapi.testclient import TestClient

from pos_checkout.main import create_app


@pytest.fixture
def client(settings, catalog, memory_orders):
    app = create_app(settings, catalog=catalog, orders=memory_orders)
    with TestClient(app) as client:
        yield client


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_empty_cart(client):
    r = client.get("/api/cart")
    assert r.status_code == 200
    data = r.json()
    assert data["lines"] == []
    assert data["totals"]["total"] == 0
    assert data["payment_method"] == "CASH"


def test_list_and_get_products(client, laptop):
    r = client.get("/api/products", params={"search": "lap"})
    assert r.status_code == 200
    assert [p["id"] for p in r.json()["products"]] == [laptop.id]

    r = client.get(f"/api/products/{laptop.id}")
    assert r.json()["price"] == 50000

    r = client.get("/api/products/missing")
    assert r.status_code == 404
    assert r.json()["error"] == "NOT_FOUND"


def test_add_update_remove(client, laptop, mouse):
    r = client.post("/api/cart/items", json={"product_id": laptop.id, "quantity": 2})
    assert r.status_code == 200
    assert r.json()["cart"]["totals"]["subtotal"] == 100000

    client.post("/api/cart/items", json={"product_id": mouse.id})
    r = client.put(f"/api/cart/items/{mouse.id}", json={"quantity": 4})
    assert r.json()["cart"]["item_count"] == 6

    r = client.put(f"/api/cart/items/{mouse.id}", json={"quantity": 0})
    assert r.json()["message"] == "Item removed"

    r = client.delete(f"/api/cart/items/{laptop.id}")
    assert r.status_code == 200
    assert r.json()["cart"]["lines"] == []

    r = client.delete("/api/cart/items/not-there")
    assert r.status_code == 200


def test_stock_exceeded_is_409(client, laptop):
    r = client.post("/api/cart/items", json={"product_id": laptop.id, "quantity": 6})

    assert r.status_code == 409
    body = r.json()
    assert body["success"] is False
    assert body["error_code"] == "STOCK_EXCEEDED"
    assert body["details"]["available"] == 5
    assert body["cart"]["lines"] == []


def test_discount_validation(client, laptop):
    client.post("/api/cart/items", json={"product_id": laptop.id, "quantity": 2})

    r = client.put("/api/cart/discount", json={"kind": "percentage", "value": 150})
    assert r.status_code == 400
    assert r.json()["error_code"] == "INVALID_DISCOUNT"

    r = client.put("/api/cart/discount", json={"kind": "percentage", "value": 10})
    assert r.status_code == 200
    assert r.json()["cart"]["totals"]["total"] == 99000


def test_checkout_flow(client, laptop, catalog):
    client.post("/api/cart/items", json={"product_id": laptop.id, "quantity": 2})
    client.put("/api/cart/discount", json={"kind": "percentage", "value": 10})
    client.put("/api/checkout/payment-method", json={"method": "BANK_TRANSFER"})
    r = client.put("/api/checkout/customer", json={"name": "Pham D", "phone": "0351234567"})
    assert r.status_code == 200

    r = client.post("/api/checkout")
    assert r.status_code == 201
    order = r.json()["order"]
    assert order["total"] == 99000
    assert order["status"] == "PENDING"
    assert order["payment_method"] == "BANK_TRANSFER"
    assert r.json()["cart"]["lines"] == []
    assert catalog.products[laptop.id].stock == 3

    r = client.get("/api/checkout/order")
    assert r.json()["order_number"] == order["order_number"]

    r = client.post("/api/checkout/order/confirm-payment", json={"amount_paid": 90000})
    assert r.status_code == 400
    assert r.json()["error_code"] == "INSUFFICIENT_PAYMENT"

    r = client.post("/api/checkout/order/confirm-payment", json={"amount_paid": 100000})
    assert r.status_code == 200
    assert r.json()["details"]["change"] == 1000
    assert r.json()["order"]["status"] == "COMPLETED"

    r = client.post("/api/checkout/order/cancel")
    assert r.status_code == 409
    assert r.json()["error_code"] == "INVALID_TRANSITION"

    r = client.post("/api/checkout/new-order")
    assert r.json()["cart"]["payment_method"] == "CASH"
    r = client.get("/api/checkout/order")
    assert r.status_code == 404
    assert r.json()["error"] == "NOT_FOUND"


def test_checkout_empty_cart_is_400(client, memory_orders):
    r = client.post("/api/checkout")

    assert r.status_code == 400
    assert r.json()["error_code"] == "EMPTY_CART"
    assert memory_orders.create_calls == 0


def test_invalid_customer_phone(client):
    r = client.put("/api/checkout/customer", json={"phone": "12345"})
    assert r.status_code == 400
    assert r.json()["error_code"] == "INVALID_CUSTOMER"


def test_custom_item(client):
    r = client.post("/api/cart/custom-items", json={"name": "Gift wrap", "price": 15000})
    assert r.status_code == 200
    assert r.json()["cart"]["totals"]["total"] == 16500


def test_refresh_stock(client, laptop, catalog):
    client.post("/api/cart/items", json={"product_id": laptop.id, "quantity": 3})
    catalog.update_stock(laptop.id, -4)

    r = client.post("/api/cart/refresh-stock")

    assert r.status_code == 200
    assert r.json()["details"]["adjustments"][0]["available"] == 1
    assert r.json()["cart"]["lines"][0]["quantity"] == 1


def test_confirm_payment_without_body(client, laptop):
    client.post("/api/cart/items", json={"product_id": laptop.id})
    client.post("/api/checkout")

    r = client.post("/api/checkout/order/confirm-payment")

    assert r.status_code == 200
    assert r.json()["order"]["status"] == "COMPLETED"
    assert r.json()["details"] == {}
