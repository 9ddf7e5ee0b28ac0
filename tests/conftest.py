import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pos_checkout.core.config import Settings
from pos_checkout.models.checkout import Order, OrderItem, OrderStatus
from pos_checkout.models.product import Product
from pos_checkout.services.cart import Cart
from pos_checkout.services.memory import InMemoryCatalog, InMemoryOrderService
from pos_checkout.services.session import PosSession


class FakeOrderService:
    """Order service double that records calls and can fail or block"""

    def __init__(self, error=None, status=OrderStatus.PENDING):
        self.error = error
        self.status = status
        self.requests = []
        self.status_updates = []
        self.gate = None
        self.orders = {}

    async def create_order(self, request):
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        now = datetime.now(timezone.utc)
        order = Order(
            id=str(uuid.uuid4()),
            order_number=f"ORD-{len(self.requests):08d}-TEST",
            status=self.status,
            items=[
                OrderItem(
                    product_id=line.product_id,
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_subtotal=line.line_subtotal,
                )
                for line in request.lines
            ],
            subtotal=request.totals.subtotal,
            discount_amount=request.totals.discount_amount,
            tax_amount=request.totals.tax_amount,
            total=request.totals.total,
            payment_method=request.payment_method,
            created_at=now,
            updated_at=now,
        )
        self.orders[order.id] = order
        return order

    async def get_order(self, order_id):
        return self.orders[order_id]

    async def update_status(self, order_id, status):
        self.status_updates.append((order_id, status))
        order = self.orders[order_id].model_copy(update={"status": OrderStatus(status)})
        self.orders[order_id] = order
        return order


class CountingOrderService(InMemoryOrderService):
    """In-memory order service that counts create_order calls"""

    def __init__(self, catalog):
        super().__init__(catalog)
        self.create_calls = 0

    async def create_order(self, request):
        self.create_calls += 1
        return await super().create_order(request)


@pytest.fixture
def settings():
    return Settings(_env_file=None, backend="memory", tax_rate=Decimal("0.10"))


@pytest.fixture
def laptop():
    return Product(id="p-laptop", name="Laptop", sku="LAP-1", price=50000, stock=5, unit="cai")


@pytest.fixture
def mouse():
    return Product(id="p-mouse", name="Mouse", sku="MOU-1", price=1250, stock=10)


@pytest.fixture
def cart():
    return Cart(tax_rate=Decimal("0.10"))


@pytest.fixture
def fake_orders():
    return FakeOrderService()


@pytest.fixture
def catalog(laptop, mouse):
    return InMemoryCatalog({laptop.id: laptop, mouse.id: mouse})


@pytest.fixture
def memory_orders(catalog):
    return CountingOrderService(catalog)


@pytest.fixture
def session(catalog, memory_orders, settings):
    return PosSession(catalog, memory_orders, settings)
