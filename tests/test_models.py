import pydantic
import pytest

from pos_checkout.models.checkout import CustomerInfo, Order, OrderStatus, PaymentMethod
from pos_checkout.models.product import Product


def test_product_accepts_backend_record():
    product = Product.model_validate(
        {
            "id": "p1",
            "name": "Ca phe",
            "sku": "CF-1",
            "price": "25000.00",
            "stockQuantity": 12,
            "unit": "ly",
            "categoryId": "bev",
            "isActive": True,
            "description": "ignored",
        }
    )
    assert product.price == 25000
    assert product.stock == 12
    assert product.category_id == "bev"
    assert product.in_stock


@pytest.mark.parametrize(
    "record",
    [
        {"id": "p1", "name": "x", "price": -1, "stock": 1},
        {"id": "p1", "name": "x", "price": 10, "stock": -3},
        {"id": "p1", "name": "x", "price": "abc", "stock": 1},
        {"id": "", "name": "x", "price": 10, "stock": 1},
        {"name": "x", "price": 10, "stock": 1},
    ],
)
def test_product_rejects_malformed_record(record):
    with pytest.raises(pydantic.ValidationError):
        Product.model_validate(record)


@pytest.mark.parametrize("phone", ["0912345678", "+84 912 345 678", "84387654321"])
def test_customer_phone_accepted(phone):
    assert CustomerInfo(phone=phone).phone == phone.replace(" ", "")


@pytest.mark.parametrize("phone", ["12345", "0212345678", "09123456789"])
def test_customer_phone_rejected(phone):
    with pytest.raises(pydantic.ValidationError):
        CustomerInfo(phone=phone)


def test_customer_blank_fields_become_none():
    customer = CustomerInfo(name="  ", phone="")
    assert customer.name is None
    assert customer.phone is None


def test_order_parses_backend_payload():
    order = Order.model_validate(
        {
            "id": "ord-1",
            "orderNumber": "ORD-12345678-ABCD",
            "status": "PENDING",
            "subtotal": "100000.00",
            "discount": "10000",
            "tax": 9000,
            "total": "99000.00",
            "paymentMethod": "CARD",
            "customerName": None,
            "createdAt": "2026-10-18T08:30:00.000Z",
            "orderItems": [
                {
                    "productId": "p1",
                    "quantity": 2,
                    "price": "50000.00",
                    "subtotal": "100000.00",
                    "product": {"name": "Laptop", "sku": "LAP-1"},
                }
            ],
        }
    )

    assert order.order_number == "ORD-12345678-ABCD"
    assert order.status == OrderStatus.PENDING
    assert order.discount_amount == 10000
    assert order.total == 99000
    assert order.payment_method == PaymentMethod.CARD
    assert order.items[0].name == "Laptop"
    assert order.items[0].unit_price == 50000
    assert order.created_at.year == 2026


def test_terminal_statuses():
    assert OrderStatus.COMPLETED.is_terminal
    assert OrderStatus.CANCELLED.is_terminal
    assert not OrderStatus.PENDING.is_terminal
    assert not OrderStatus.PROCESSING.is_terminal
