"""Checkout and order models"""

import re
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from .cart import CartTotals, Discount
from .money import Amount

PHONE_PATTERN = re.compile(r"^(\+84|84|0)(3|5|7|8|9)\d{8}$")


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    E_WALLET = "E_WALLET"


class CustomerInfo(BaseModel):
    """Optional customer identity attached to an order"""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("name", "phone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        compact = re.sub(r"\s", "", value)
        if not PHONE_PATTERN.match(compact):
            raise ValueError(f"invalid phone number: {value}")
        return compact


class OrderLine(BaseModel):
    """Line of an order request, copied from the cart"""

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    sku: str
    unit_price: int
    quantity: int
    line_subtotal: int


class OrderRequest(BaseModel):
    """
    Immutable snapshot of a cart taken when checkout begins.

    Later cart mutations cannot affect a submission already in flight.
    """

    model_config = ConfigDict(frozen=True)

    request_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    lines: tuple[OrderLine, ...]
    discount: Optional[Discount] = None
    totals: CartTotals
    payment_method: PaymentMethod
    customer: Optional[CustomerInfo] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> dict[str, Any]:
        """Request body for the order service"""
        customer = self.customer or CustomerInfo()
        discount = self.discount or Discount()
        return {
            "customerName": customer.name,
            "customerPhone": customer.phone,
            "items": [
                {
                    "productId": line.product_id,
                    "quantity": line.quantity,
                    "price": line.unit_price,
                }
                for line in self.lines
            ],
            "subtotal": self.totals.subtotal,
            "discount": self.totals.discount_amount,
            "tax": self.totals.tax_amount,
            "total": self.totals.total,
            "paymentMethod": self.payment_method.value,
            "discountType": discount.kind.value,
            "discountValue": _plain_number(discount.value),
        }


def _plain_number(value: Decimal) -> Any:
    return int(value) if value == value.to_integral_value() else float(value)


class OrderItem(BaseModel):
    """Order line as reported by the order service"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    product_id: str = Field(validation_alias=AliasChoices("product_id", "productId"))
    name: Optional[str] = None
    sku: Optional[str] = None
    quantity: int
    unit_price: Amount = Field(validation_alias=AliasChoices("unit_price", "price"))
    line_subtotal: Optional[Amount] = Field(
        default=None, validation_alias=AliasChoices("line_subtotal", "subtotal")
    )

    @model_validator(mode="before")
    @classmethod
    def _flatten_product(cls, data: Any) -> Any:
        # Backends nest the product record inside each order item
        if isinstance(data, dict) and isinstance(data.get("product"), dict):
            product = data["product"]
            data = {**data}
            data.setdefault("name", product.get("name"))
            data.setdefault("sku", product.get("sku"))
        return data


class Order(BaseModel):
    """Client-side, read-only view of an order owned by the order service"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    order_number: str = Field(validation_alias=AliasChoices("order_number", "orderNumber"))
    status: OrderStatus = OrderStatus.PENDING
    items: list[OrderItem] = Field(
        default_factory=list, validation_alias=AliasChoices("items", "orderItems")
    )
    subtotal: Amount
    discount_amount: Amount = Field(
        default=0, validation_alias=AliasChoices("discount_amount", "discount")
    )
    tax_amount: Amount = Field(default=0, validation_alias=AliasChoices("tax_amount", "tax"))
    total: Amount
    payment_method: PaymentMethod = Field(
        validation_alias=AliasChoices("payment_method", "paymentMethod")
    )
    customer_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("customer_name", "customerName")
    )
    customer_phone: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("customer_phone", "customerPhone")
    )
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    updated_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("updated_at", "updatedAt")
    )
