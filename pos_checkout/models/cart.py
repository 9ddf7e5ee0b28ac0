"""Cart models"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class DiscountKind(str, Enum):
    AMOUNT = "amount"
    PERCENTAGE = "percentage"


class Discount(BaseModel):
    """Single discount rule held by a cart; replaced wholesale"""

    model_config = ConfigDict(frozen=True)

    kind: DiscountKind = DiscountKind.AMOUNT
    value: Decimal = Field(default=Decimal("0"), ge=0)


class CartLine(BaseModel):
    """One product entry in a cart"""

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    sku: str = ""
    unit: str = ""
    unit_price: int = Field(ge=0)
    quantity: int = Field(gt=0)
    stock_snapshot: int = Field(ge=0)

    @computed_field
    @property
    def line_subtotal(self) -> int:
        return self.unit_price * self.quantity


class CartTotals(BaseModel):
    """Derived monetary values of a cart, all in whole currency units"""

    model_config = ConfigDict(frozen=True)

    subtotal: int = 0
    discount_amount: int = 0
    taxable_amount: int = 0
    tax_amount: int = 0
    total: int = 0


class CartView(BaseModel):
    """What rendering code needs to draw the cart"""
    lines: list[CartLine]
    totals: CartTotals
    item_count: int
    discount: Optional[Discount] = None
    payment_method: str
    currency: str


class CartSnapshot(BaseModel):
    """Frozen copy of a cart's contents at one point in time"""

    model_config = ConfigDict(frozen=True)

    lines: tuple[CartLine, ...] = ()
    discount: Optional[Discount] = None
    totals: CartTotals = CartTotals()
    item_count: int = 0
