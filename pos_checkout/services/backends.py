"""Contracts for the external catalog and order service"""

from typing import Optional, Protocol

from ..models.checkout import Order, OrderRequest, OrderStatus
from ..models.product import Product, ProductPage


class CatalogService(Protocol):
    """Read-only product catalog; freshness is "last fetched", not live"""

    async def get_product(self, product_id: str) -> Product: ...

    async def list_products(
        self,
        search: Optional[str] = None,
        category_id: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> ProductPage: ...


class OrderService(Protocol):
    """Authoritative owner of orders"""

    async def create_order(self, request: OrderRequest) -> Order: ...

    async def get_order(self, order_id: str) -> Order: ...

    async def update_status(self, order_id: str, status: OrderStatus) -> Order: ...
