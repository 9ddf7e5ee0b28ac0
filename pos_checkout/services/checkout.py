"""
Checkout Coordinator

Turns a cart into an order with at most one submission in flight. The
coordinator runs on a single cooperative event loop: the ``submitting`` flag
is checked and set with no suspension point in between, so a second checkout
issued while the first is awaiting the order service fails fast instead of
reaching the network.
"""

import logging
from typing import Optional, Union

from ..core.errors import (
    AlreadySubmitting,
    EmptyCart,
    NonPositiveTotal,
    PosError,
    ValidationError,
)
from ..models.checkout import CustomerInfo, Order, OrderLine, OrderRequest, PaymentMethod
from .backends import OrderService
from .cart import Cart

logger = logging.getLogger(__name__)


def build_order_request(
    cart: Cart,
    payment_method: Union[PaymentMethod, str],
    customer: Optional[CustomerInfo] = None,
) -> OrderRequest:
    """Snapshot a cart into an immutable order request"""
    snapshot = cart.snapshot()
    lines = tuple(
        OrderLine(
            product_id=line.product_id,
            name=line.name,
            sku=line.sku,
            unit_price=line.unit_price,
            quantity=line.quantity,
            line_subtotal=line.line_subtotal,
        )
        for line in snapshot.lines
    )
    return OrderRequest(
        lines=lines,
        discount=snapshot.discount,
        totals=snapshot.totals,
        payment_method=PaymentMethod(payment_method),
        customer=customer,
    )


def _payment_method(value: Union[PaymentMethod, str]) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        raise ValidationError(f"Unsupported payment method: {value}")


class CheckoutCoordinator:
    """Serializes submission of a cart to the order service"""

    def __init__(self, order_service: OrderService):
        self._orders = order_service
        self.submitting = False

    async def checkout(
        self,
        cart: Cart,
        payment_method: Union[PaymentMethod, str],
        customer: Optional[CustomerInfo] = None,
    ) -> Order:
        """
        Submit the cart as an order.

        All-or-nothing: on success the cart is cleared and the created order
        returned; on any failure the cart is left untouched and the error is
        raised to the caller so the checkout can be retried.

        Raises:
            EmptyCart: cart has no lines
            NonPositiveTotal: cart total is zero or less
            AlreadySubmitting: another checkout is awaiting the order service
            NetworkError: order service unreachable
            ServerRejection: order service refused the order
        """
        if cart.is_empty():
            raise EmptyCart()
        if cart.total <= 0:
            raise NonPositiveTotal(cart.total)
        method = _payment_method(payment_method)
        if self.submitting:
            logger.warning("Checkout rejected: a submission is already in flight")
            raise AlreadySubmitting()
        self.submitting = True

        try:
            request = build_order_request(cart, method, customer)
            logger.info(
                f"Submitting order request {request.request_id}: "
                f"{len(request.lines)} lines, total={request.totals.total}, "
                f"payment={request.payment_method.value}"
            )
            order = await self._orders.create_order(request)
        except PosError as e:
            logger.error(f"Checkout failed ({e.code}): {e.message}")
            raise
        finally:
            self.submitting = False

        cart.clear()
        logger.info(f"Order {order.order_number} created: {order.total} ({order.status.value})")
        return order
