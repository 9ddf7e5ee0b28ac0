"""Cart aggregate for a single POS session"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from ..core.errors import (
    InvalidDiscount,
    InvalidQuantity,
    NotFoundError,
    StockExceeded,
    ValidationError,
)
from ..models.cart import CartLine, CartSnapshot, CartTotals, Discount, DiscountKind
from ..models.money import Number, to_decimal
from ..models.product import Product
from .pricing import calculate_totals
from .stock_guard import check_stock

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal("0.10")


class Cart:
    """
    Ordered collection of line items plus a single discount rule.

    The cart owns its lines exclusively. Every mutation validates first and
    only then swaps in new line objects, so a rejected mutation leaves the
    cart exactly as it was. Totals are recomputed before each mutation
    returns.
    """

    def __init__(self, tax_rate: Number = DEFAULT_TAX_RATE):
        self.tax_rate = to_decimal(tax_rate)
        self._lines: dict[str, CartLine] = {}
        self._discount: Optional[Discount] = None
        self._totals = CartTotals()

    # ==================== Mutations ====================

    def add_item(self, product: Product, quantity: int = 1) -> CartLine:
        """Add a product, merging with an existing line for the same id"""
        _require_positive(quantity)
        if not product.is_active:
            raise ValidationError(f"Product {product.name} is not available for sale")

        existing = self._lines.get(product.id)
        new_quantity = existing.quantity + quantity if existing else quantity
        check_stock(product.id, new_quantity, product.stock)

        line = CartLine(
            product_id=product.id,
            name=product.name,
            sku=product.sku,
            unit=product.unit,
            unit_price=existing.unit_price if existing else product.price,
            quantity=new_quantity,
            stock_snapshot=product.stock,
        )
        self._lines[product.id] = line
        self._recalculate_totals()
        return line

    def remove_item(self, product_id: str) -> None:
        """Remove a line; absent ids are ignored"""
        if self._lines.pop(product_id, None) is not None:
            self._recalculate_totals()

    def update_quantity(self, product_id: str, quantity: int) -> Optional[CartLine]:
        """
        Set a line's quantity.

        A quantity of zero or less removes the line. Returns the updated line,
        or None when the line was removed.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantity()
        if quantity <= 0:
            self.remove_item(product_id)
            return None

        line = self._lines.get(product_id)
        if line is None:
            raise NotFoundError(f"Product {product_id} is not in the cart")

        check_stock(product_id, quantity, line.stock_snapshot)
        updated = line.model_copy(update={"quantity": quantity})
        self._lines[product_id] = updated
        self._recalculate_totals()
        return updated

    def apply_discount(self, kind: Union[DiscountKind, str], value: Number) -> Discount:
        """Replace the current discount wholesale"""
        try:
            kind = DiscountKind(kind)
            amount = to_decimal(value)
        except (ValueError, InvalidOperation):
            logger.warning(f"Rejected discount kind={kind!r} value={value!r}")
            raise InvalidDiscount(f"Invalid discount: {kind} {value}")

        if not amount.is_finite() or amount < 0:
            logger.warning(f"Rejected discount value={value}")
            raise InvalidDiscount("Discount value must be a non-negative number")
        if kind == DiscountKind.PERCENTAGE and amount > 100:
            logger.warning(f"Rejected percentage discount value={value}")
            raise InvalidDiscount("Percentage discount cannot exceed 100")

        self._discount = Discount(kind=kind, value=amount)
        self._recalculate_totals()
        return self._discount

    def clear(self) -> None:
        """Empty all lines and drop the discount"""
        self._lines = {}
        self._discount = None
        self._recalculate_totals()

    def refresh_stock(self, product: Product) -> Optional[StockExceeded]:
        """
        Apply a fresher catalog record to an existing line.

        When the new stock no longer covers the line's quantity the line is
        clamped to it (removed if nothing is left) and the adjustment is
        returned.
        """
        line = self._lines.get(product.id)
        if line is None:
            return None

        shortage = None
        quantity = line.quantity
        if quantity > product.stock:
            shortage = StockExceeded(product.id, requested=quantity, available=product.stock)
            logger.warning(
                f"Stock for {product.id} dropped to {product.stock}, "
                f"clamping cart quantity from {quantity}"
            )
            quantity = product.stock

        if quantity <= 0:
            del self._lines[product.id]
        else:
            self._lines[product.id] = line.model_copy(
                update={
                    "name": product.name,
                    "sku": product.sku,
                    "quantity": quantity,
                    "stock_snapshot": product.stock,
                }
            )
        self._recalculate_totals()
        return shortage

    # ==================== Queries ====================

    @property
    def discount(self) -> Optional[Discount]:
        return self._discount

    @property
    def totals(self) -> CartTotals:
        return self._totals

    @property
    def subtotal(self) -> int:
        return self._totals.subtotal

    @property
    def total(self) -> int:
        return self._totals.total

    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def snapshot(self) -> CartSnapshot:
        """Freeze the current lines, discount and totals"""
        return CartSnapshot(
            lines=tuple(self._lines.values()),
            discount=self._discount,
            totals=self._totals,
            item_count=self.get_item_count(),
        )

    def get_line(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def get_item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def is_empty(self) -> bool:
        return len(self._lines) == 0

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines

    def _recalculate_totals(self) -> None:
        self._totals = calculate_totals(self._lines.values(), self._discount, self.tax_rate)


def _require_positive(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity()
