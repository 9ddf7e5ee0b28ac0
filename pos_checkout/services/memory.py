"""
In-memory catalog and order service.

Stand-ins for the backend used by local runs and tests. State lives for the
process only.
"""

import logging
import random
import string
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from ..core.errors import InvalidTransition, NotFoundError, ServerRejection
from ..models.checkout import Order, OrderItem, OrderRequest, OrderStatus
from ..models.product import Product, ProductPage

logger = logging.getLogger(__name__)

# Sample catalog
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Ca phe sua da",
        sku="BEV-CFSD-001",
        price=25000,
        stock=120,
        unit="ly",
        barcode="8934567000011",
        category_id="beverages",
    ),
    "prod-002": Product(
        id="prod-002",
        name="Tra dao cam sa",
        sku="BEV-TDCS-002",
        price=35000,
        stock=80,
        unit="ly",
        barcode="8934567000028",
        category_id="beverages",
    ),
    "prod-003": Product(
        id="prod-003",
        name="Banh mi thit nuong",
        sku="FOOD-BMTN-003",
        price=30000,
        stock=40,
        unit="cai",
        barcode="8934567000035",
        category_id="food",
    ),
    "prod-004": Product(
        id="prod-004",
        name="Tai nghe Bluetooth",
        sku="ELEC-TNBT-004",
        price=450000,
        stock=15,
        unit="cai",
        barcode="8934567000042",
        category_id="electronics",
    ),
    "prod-005": Product(
        id="prod-005",
        name="Ao thun cotton",
        sku="CLO-ATC-005",
        price=150000,
        stock=60,
        unit="cai",
        barcode="8934567000059",
        category_id="clothing",
    ),
    "prod-006": Product(
        id="prod-006",
        name="Sac du phong 10000mAh",
        sku="ELEC-SDP-006",
        price=320000,
        stock=0,
        unit="cai",
        barcode="8934567000066",
        category_id="electronics",
    ),
}

# Backend status rules; stricter client-side rules live in the projection
ORDER_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.PROCESSING, OrderStatus.COMPLETED, OrderStatus.CANCELLED),
    OrderStatus.PROCESSING: (OrderStatus.COMPLETED, OrderStatus.CANCELLED),
    OrderStatus.COMPLETED: (),
    OrderStatus.CANCELLED: (),
}


def generate_order_number() -> str:
    """ORD-<last 8 digits of epoch millis>-<4 random chars>"""
    timestamp = str(int(time.time() * 1000))[-8:]
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"ORD-{timestamp}-{suffix}"


class InMemoryCatalog:
    """In-memory product catalog"""

    def __init__(self, products: Optional[dict[str, Product]] = None):
        self.products = dict(PRODUCTS if products is None else products)

    def add_product(self, product: Product) -> None:
        self.products[product.id] = product

    async def get_product(self, product_id: str) -> Product:
        """Get a product by ID"""
        product = self.products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    async def list_products(
        self,
        search: Optional[str] = None,
        category_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> ProductPage:
        """List active products with optional filters"""
        results = [p for p in self.products.values() if p.is_active]

        if search:
            needle = search.lower()
            results = [
                p for p in results
                if needle in p.name.lower() or needle in p.sku.lower() or p.barcode == search
            ]
        if category_id:
            results = [p for p in results if p.category_id == category_id]

        total = len(results)
        offset = (max(page, 1) - 1) * limit
        return ProductPage(
            products=results[offset : offset + limit],
            total=total,
            page=page,
            limit=limit,
        )

    def update_stock(self, product_id: str, quantity_change: int) -> bool:
        """
        Update product stock.

        Args:
            product_id: Product to update
            quantity_change: Positive to add, negative to remove

        Returns:
            True if successful
        """
        product = self.products.get(product_id)
        if not product:
            return False

        new_stock = product.stock + quantity_change
        if new_stock < 0:
            return False

        self.products[product_id] = product.model_copy(update={"stock": new_stock})
        return True


class InMemoryOrderService:
    """In-memory order service with an authoritative stock check"""

    def __init__(self, catalog: InMemoryCatalog):
        self.catalog = catalog
        self.orders: dict[str, Order] = {}

    async def create_order(self, request: OrderRequest) -> Order:
        """Create an order from a request, reserving stock"""
        for line in request.lines:
            product = self.catalog.products.get(line.product_id)
            if product is None:
                raise ServerRejection(f"Product {line.name} no longer exists", status_code=404)
            if not product.is_active:
                raise ServerRejection(f"Product {product.name} is not available for sale")
            if product.stock < line.quantity:
                raise ServerRejection(
                    f"Insufficient stock for {product.name}. Available: {product.stock}"
                )

        for line in request.lines:
            self.catalog.update_stock(line.product_id, -line.quantity)

        now = datetime.now(timezone.utc)
        customer = request.customer
        order = Order(
            id=str(uuid.uuid4()),
            order_number=generate_order_number(),
            status=OrderStatus.PENDING,
            items=[
                OrderItem(
                    product_id=line.product_id,
                    name=line.name,
                    sku=line.sku,
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
            customer_name=customer.name if customer else None,
            customer_phone=customer.phone if customer else None,
            created_at=now,
            updated_at=now,
        )
        self.orders[order.id] = order
        logger.info(f"Order {order.order_number} stored: {order.total}")
        return order

    async def get_order(self, order_id: str) -> Order:
        """Get an order by ID"""
        order = self.orders.get(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Update order status, returning stock on cancellation"""
        order = await self.get_order(order_id)
        status = OrderStatus(status)

        if status not in ORDER_TRANSITIONS[order.status]:
            raise InvalidTransition(order.status.value, status.value)

        if status == OrderStatus.CANCELLED:
            for item in order.items:
                self.catalog.update_stock(item.product_id, item.quantity)

        order = order.model_copy(
            update={"status": status, "updated_at": datetime.now(timezone.utc)}
        )
        self.orders[order_id] = order
        return order
