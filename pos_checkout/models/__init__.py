# POS Checkout Models

from .product import Product, ProductPage
from .cart import CartLine, CartSnapshot, CartTotals, CartView, Discount, DiscountKind
from .checkout import (
    CustomerInfo,
    Order,
    OrderItem,
    OrderLine,
    OrderRequest,
    OrderStatus,
    PaymentMethod,
)

__all__ = [
    "Product",
    "ProductPage",
    "CartLine",
    "CartSnapshot",
    "CartTotals",
    "CartView",
    "Discount",
    "DiscountKind",
    "CustomerInfo",
    "Order",
    "OrderItem",
    "OrderLine",
    "OrderRequest",
    "OrderStatus",
    "PaymentMethod",
]
