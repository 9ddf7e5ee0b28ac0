# Cart, pricing and checkout services

from .cart import Cart
from .checkout import CheckoutCoordinator, build_order_request
from .order_state import OrderStateProjection
from .pricing import calculate_change, calculate_totals
from .session import PosSession
from .commands import CommandResult, dispatch

__all__ = [
    "Cart",
    "CheckoutCoordinator",
    "build_order_request",
    "OrderStateProjection",
    "calculate_change",
    "calculate_totals",
    "PosSession",
    "CommandResult",
    "dispatch",
]
