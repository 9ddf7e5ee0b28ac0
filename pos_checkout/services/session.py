"""Register session: one cart, one checkout, one tracked order"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import InvalidOperation
from typing import Callable, Optional, Union

import pydantic

from ..core.config import Settings
from ..core.errors import (
    InsufficientPayment,
    InvalidCustomer,
    NotFoundError,
    StockExceeded,
    ValidationError,
)
from ..models.cart import CartLine, CartView, Discount, DiscountKind
from ..models.checkout import CustomerInfo, Order, OrderStatus, PaymentMethod
from ..models.money import Number, round_currency
from ..models.product import Product
from .backends import CatalogService, OrderService
from .cart import Cart
from .checkout import CheckoutCoordinator
from .order_state import OrderStateProjection

logger = logging.getLogger(__name__)

CartListener = Callable[[CartView], None]

CUSTOM_ITEM_PREFIX = "custom-"


class PosSession:
    """
    Explicitly owned state of one register.

    Holds the cart, the checkout coordinator, the checkout selections and
    the projection of the last created order. Everything that mutates the
    cart goes through this object so listeners always see fresh totals.
    """

    def __init__(
        self,
        catalog: CatalogService,
        orders: OrderService,
        settings: Settings,
    ):
        self.session_id = str(uuid.uuid4())
        self.created_at = datetime.now(timezone.utc)
        self.catalog = catalog
        self.orders = orders
        self.settings = settings

        self.cart = Cart(tax_rate=settings.tax_rate)
        self.checkout_coordinator = CheckoutCoordinator(orders)
        self.payment_method = PaymentMethod(settings.default_payment_method)
        self.customer: Optional[CustomerInfo] = None
        self.current_order: Optional[OrderStateProjection] = None
        self._listeners: list[CartListener] = []

    # ==================== Listeners ====================

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener for cart changes; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def view(self) -> CartView:
        return CartView(
            lines=self.cart.lines(),
            totals=self.cart.totals,
            item_count=self.cart.get_item_count(),
            discount=self.cart.discount,
            payment_method=self.payment_method.value,
            currency=self.settings.currency,
        )

    def _notify(self) -> None:
        view = self.view()
        for listener in list(self._listeners):
            listener(view)

    # ==================== Cart ====================

    async def add_product(self, product_id: str, quantity: int = 1) -> CartLine:
        """Fetch the latest catalog record, then add it to the cart"""
        product = await self.catalog.get_product(product_id)
        line = self.cart.add_item(product, quantity)
        self._notify()
        return line

    def add_custom_item(self, name: str, price: int, quantity: int = 1) -> CartLine:
        """Add an ad-hoc item that is not in the catalog"""
        try:
            product = Product(
                id=f"{CUSTOM_ITEM_PREFIX}{uuid.uuid4().hex[:12]}",
                name=name.strip(),
                sku="CUSTOM",
                price=price,
                stock=self.settings.custom_item_stock,
            )
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid custom item: {e.error_count()} invalid field(s)") from e
        if product.price <= 0:
            raise ValidationError("Custom item price must be positive")

        line = self.cart.add_item(product, quantity)
        self._notify()
        return line

    def update_quantity(self, product_id: str, quantity: int) -> Optional[CartLine]:
        line = self.cart.update_quantity(product_id, quantity)
        self._notify()
        return line

    def remove_item(self, product_id: str) -> None:
        self.cart.remove_item(product_id)
        self._notify()

    def apply_discount(self, kind: Union[DiscountKind, str], value: Number) -> Discount:
        discount = self.cart.apply_discount(kind, value)
        self._notify()
        return discount

    def clear_cart(self) -> None:
        self.cart.clear()
        self._notify()

    async def refresh_stock(self) -> list[StockExceeded]:
        """
        Re-read every cart product from the catalog and apply the new stock.

        Lines refreshed before a catalog failure keep their new state and
        listeners still receive it before the error propagates.
        """
        adjustments = []
        try:
            for line in self.cart.lines():
                if line.product_id.startswith(CUSTOM_ITEM_PREFIX):
                    continue
                try:
                    product = await self.catalog.get_product(line.product_id)
                except NotFoundError:
                    logger.warning(f"Product {line.product_id} disappeared from the catalog")
                    product = Product(
                        id=line.product_id,
                        name=line.name,
                        sku=line.sku,
                        price=line.unit_price,
                        stock=0,
                    )
                shortage = self.cart.refresh_stock(product)
                if shortage is not None:
                    adjustments.append(shortage)
        finally:
            self._notify()
        return adjustments

    # ==================== Checkout ====================

    def select_payment_method(self, method: Union[PaymentMethod, str]) -> PaymentMethod:
        try:
            self.payment_method = PaymentMethod(method)
        except ValueError:
            raise ValidationError(f"Unsupported payment method: {method}")
        self._notify()
        return self.payment_method

    def set_customer(self, name: Optional[str] = None, phone: Optional[str] = None) -> Optional[CustomerInfo]:
        try:
            customer = CustomerInfo(name=name, phone=phone)
        except pydantic.ValidationError as e:
            raise InvalidCustomer(f"Invalid customer information: {phone or name}") from e
        self.customer = customer if (customer.name or customer.phone) else None
        return self.customer

    @property
    def submitting(self) -> bool:
        return self.checkout_coordinator.submitting

    async def checkout(self) -> Order:
        """Submit the cart and start tracking the resulting order"""
        order = await self.checkout_coordinator.checkout(
            self.cart, self.payment_method, self.customer
        )
        self.current_order = OrderStateProjection(order)
        self._notify()
        return order

    def start_new_order(self) -> None:
        """Reset the register for the next customer"""
        self.cart.clear()
        self.customer = None
        self.payment_method = PaymentMethod(self.settings.default_payment_method)
        self.current_order = None
        self._notify()

    # ==================== Order status ====================

    def _tracked(self) -> OrderStateProjection:
        if self.current_order is None:
            raise NotFoundError("No order is being tracked")
        return self.current_order

    async def _request_status(self, target: OrderStatus) -> Order:
        projection = self._tracked()
        projection.ensure_can_transition(target)
        order = await self.orders.update_status(projection.order.id, target)
        projection.sync(order)
        return projection.order

    async def confirm_payment(self, amount_paid: Optional[Number] = None) -> Order:
        """
        Payment received: mark the tracked order completed.

        ``amount_paid`` is the cash handed over; when given it must cover the
        order total, otherwise the order stays as it is.
        """
        projection = self._tracked()
        if amount_paid is not None:
            try:
                paid = round_currency(amount_paid)
            except (InvalidOperation, ValueError):
                raise ValidationError(f"Invalid amount paid: {amount_paid}")
            if paid < projection.order.total:
                raise InsufficientPayment(paid, projection.order.total)
        return await self._request_status(OrderStatus.COMPLETED)

    async def cancel_order(self) -> Order:
        return await self._request_status(OrderStatus.CANCELLED)

    async def refresh_order(self) -> Order:
        """Pull the tracked order's current state from the order service"""
        projection = self._tracked()
        order = await self.orders.get_order(projection.order.id)
        projection.sync(order)
        return projection.order
