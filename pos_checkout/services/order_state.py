"""
Order State Projection

Client-side view of an order's status. Transitions come from outside (a
payment confirmation, a refresh from the order service); the projection
only decides whether they are allowed.
"""

import logging
from typing import Optional, Union

from ..core.errors import InvalidTransition, ServerRejection
from ..models.checkout import Order, OrderStatus

logger = logging.getLogger(__name__)


class OrderStateProjection:
    """Tracks the status of one order"""

    def __init__(self, order: Order):
        self.order = order
        self.history: list[OrderStatus] = [order.status]

    @property
    def status(self) -> OrderStatus:
        return self.order.status

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def can_transition(self, target: Union[OrderStatus, str]) -> bool:
        return OrderStatus(target) != self.status and not self.is_terminal

    def ensure_can_transition(self, target: Union[OrderStatus, str]) -> OrderStatus:
        target = OrderStatus(target)
        if not self.can_transition(target):
            raise InvalidTransition(self.status.value, target.value)
        return target

    def transition(self, target: Union[OrderStatus, str]) -> OrderStatus:
        """Move to ``target``; state is unchanged when the move is rejected"""
        target = self.ensure_can_transition(target)
        previous = self.status
        self.order = self.order.model_copy(update={"status": target})
        self.history.append(target)
        logger.info(f"Order {self.order.order_number}: {previous.value} -> {target.value}")
        return target

    def sync(self, order: Order) -> Optional[OrderStatus]:
        """
        Apply an order record reported by the order service.

        Returns the new status when it changed, None otherwise.
        """
        if order.id != self.order.id:
            logger.error(f"Order service returned order {order.id} for tracked order {self.order.id}")
            raise ServerRejection(
                f"Order {order.id} does not match tracked order {self.order.id}",
                status_code=502,
            )

        if order.status == self.status:
            self.order = order
            return None

        self.ensure_can_transition(order.status)
        previous = self.status
        self.order = order
        self.history.append(order.status)
        logger.info(f"Order {order.order_number}: {previous.value} -> {order.status.value} (reported)")
        return order.status
