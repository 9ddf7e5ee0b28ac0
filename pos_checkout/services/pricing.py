"""
Pricing Engine

Pure computation from a cart's lines, discount and tax rate to its totals.
No I/O, no state: identical input always yields identical output.
"""

from decimal import Decimal
from typing import Iterable, Optional

from ..models.cart import CartLine, CartTotals, Discount, DiscountKind
from ..models.money import Number, round_currency, to_decimal

_HUNDRED = Decimal(100)


def calculate_subtotal(lines: Iterable[CartLine]) -> int:
    return sum(line.unit_price * line.quantity for line in lines)


def calculate_discount(subtotal: int, discount: Optional[Discount]) -> int:
    """Discount amount, clamped to [0, subtotal]"""
    if discount is None or subtotal <= 0:
        return 0

    if discount.kind == DiscountKind.PERCENTAGE:
        raw = Decimal(subtotal) * discount.value / _HUNDRED
    else:
        raw = discount.value

    amount = round_currency(min(raw, Decimal(subtotal)))
    return max(0, min(amount, subtotal))


def calculate_tax(taxable_amount: int, tax_rate: Number) -> int:
    return round_currency(Decimal(taxable_amount) * to_decimal(tax_rate))


def calculate_totals(
    lines: Iterable[CartLine],
    discount: Optional[Discount],
    tax_rate: Number,
) -> CartTotals:
    """
    Compute all derived cart values.

    Each derived value is rounded half-up to a whole unit as soon as it is
    computed, so totals never accumulate fractional drift.
    """
    subtotal = calculate_subtotal(lines)
    discount_amount = calculate_discount(subtotal, discount)
    taxable_amount = subtotal - discount_amount
    tax_amount = calculate_tax(taxable_amount, tax_rate)
    total = round_currency(taxable_amount + tax_amount)

    return CartTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        total=total,
    )


def calculate_change(amount_paid: Number, total: int) -> int:
    """Change due for a cash payment; never negative"""
    change = round_currency(amount_paid) - total
    return change if change > 0 else 0
