"""
Command interface for UI adapters.

Adapters build one of the command objects below and hand it to
``dispatch``. Failures come back as a ``CommandResult`` with
``success=False`` instead of an exception.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import BaseModel

from ..core.errors import PosError
from ..models.cart import CartView, DiscountKind
from ..models.checkout import Order, PaymentMethod
from .pricing import calculate_change
from .session import PosSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddItem:
    product_id: str
    quantity: int = 1


@dataclass(frozen=True)
class AddCustomItem:
    name: str
    price: int
    quantity: int = 1


@dataclass(frozen=True)
class RemoveItem:
    product_id: str


@dataclass(frozen=True)
class UpdateQuantity:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class ApplyDiscount:
    kind: Union[DiscountKind, str]
    value: Union[int, float, Decimal, str]


@dataclass(frozen=True)
class ClearCart:
    pass


@dataclass(frozen=True)
class RefreshStock:
    pass


@dataclass(frozen=True)
class SelectPaymentMethod:
    method: Union[PaymentMethod, str]


@dataclass(frozen=True)
class SetCustomer:
    name: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class Checkout:
    pass


@dataclass(frozen=True)
class ConfirmPayment:
    amount_paid: Optional[int] = None


@dataclass(frozen=True)
class CancelOrder:
    pass


@dataclass(frozen=True)
class RefreshOrder:
    pass


@dataclass(frozen=True)
class StartNewOrder:
    pass


class CommandResult(BaseModel):
    """Outcome of a dispatched command"""
    success: bool
    message: Optional[str] = None
    error_code: Optional[str] = None
    status_code: int = 200
    cart: Optional[CartView] = None
    order: Optional[Order] = None
    details: dict[str, Any] = {}


Handler = Callable[[PosSession, Any], Awaitable[CommandResult]]


def _ok(session: PosSession, message: str, **kwargs: Any) -> CommandResult:
    return CommandResult(success=True, message=message, cart=session.view(), **kwargs)


async def _add_item(session: PosSession, cmd: AddItem) -> CommandResult:
    line = await session.add_product(cmd.product_id, cmd.quantity)
    return _ok(session, f"Added {cmd.quantity}x {line.name} to cart")


async def _add_custom_item(session: PosSession, cmd: AddCustomItem) -> CommandResult:
    line = session.add_custom_item(cmd.name, cmd.price, cmd.quantity)
    return _ok(session, f"Added {cmd.quantity}x {line.name} to cart")


async def _remove_item(session: PosSession, cmd: RemoveItem) -> CommandResult:
    session.remove_item(cmd.product_id)
    return _ok(session, "Item removed")


async def _update_quantity(session: PosSession, cmd: UpdateQuantity) -> CommandResult:
    line = session.update_quantity(cmd.product_id, cmd.quantity)
    return _ok(session, "Cart updated" if line else "Item removed")


async def _apply_discount(session: PosSession, cmd: ApplyDiscount) -> CommandResult:
    session.apply_discount(cmd.kind, cmd.value)
    return _ok(session, "Discount applied")


async def _clear_cart(session: PosSession, cmd: ClearCart) -> CommandResult:
    session.clear_cart()
    return _ok(session, "Cart cleared")


async def _refresh_stock(session: PosSession, cmd: RefreshStock) -> CommandResult:
    adjustments = await session.refresh_stock()
    message = "Stock refreshed"
    if adjustments:
        message = f"Stock refreshed; {len(adjustments)} line(s) reduced to available stock"
    return _ok(
        session,
        message,
        details={"adjustments": [a.to_dict() for a in adjustments]},
    )


async def _select_payment_method(session: PosSession, cmd: SelectPaymentMethod) -> CommandResult:
    method = session.select_payment_method(cmd.method)
    return _ok(session, f"Payment method set to {method.value}")


async def _set_customer(session: PosSession, cmd: SetCustomer) -> CommandResult:
    customer = session.set_customer(cmd.name, cmd.phone)
    return _ok(
        session,
        "Customer updated",
        details={"customer": customer.model_dump() if customer else None},
    )


async def _checkout(session: PosSession, cmd: Checkout) -> CommandResult:
    order = await session.checkout()
    return _ok(session, f"Order {order.order_number} created", order=order, status_code=201)


async def _confirm_payment(session: PosSession, cmd: ConfirmPayment) -> CommandResult:
    order = await session.confirm_payment(cmd.amount_paid)
    details = {}
    if cmd.amount_paid is not None:
        details = {
            "amount_paid": cmd.amount_paid,
            "change": calculate_change(cmd.amount_paid, order.total),
        }
    return _ok(session, "Payment confirmed", order=order, details=details)


async def _cancel_order(session: PosSession, cmd: CancelOrder) -> CommandResult:
    order = await session.cancel_order()
    return _ok(session, "Order cancelled", order=order)


async def _refresh_order(session: PosSession, cmd: RefreshOrder) -> CommandResult:
    order = await session.refresh_order()
    return _ok(session, f"Order status: {order.status.value}", order=order)


async def _start_new_order(session: PosSession, cmd: StartNewOrder) -> CommandResult:
    session.start_new_order()
    return _ok(session, "New order started")


HANDLERS: dict[type, Handler] = {
    AddItem: _add_item,
    AddCustomItem: _add_custom_item,
    RemoveItem: _remove_item,
    UpdateQuantity: _update_quantity,
    ApplyDiscount: _apply_discount,
    ClearCart: _clear_cart,
    RefreshStock: _refresh_stock,
    SelectPaymentMethod: _select_payment_method,
    SetCustomer: _set_customer,
    Checkout: _checkout,
    ConfirmPayment: _confirm_payment,
    CancelOrder: _cancel_order,
    RefreshOrder: _refresh_order,
    StartNewOrder: _start_new_order,
}


async def dispatch(session: PosSession, command: Any) -> CommandResult:
    """Run a command against a session and report the outcome"""
    handler = HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unknown command: {type(command).__name__}")

    try:
        return await handler(session, command)
    except PosError as e:
        logger.debug(f"{type(command).__name__} failed: {e.code}")
        return CommandResult(
            success=False,
            message=e.message,
            error_code=e.code,
            status_code=e.status_code,
            cart=session.view(),
            details=e.details,
        )
