"""Product models for the catalog boundary"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .money import Amount


class Product(BaseModel):
    """Read-only catalog record as last fetched"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    sku: str = ""
    price: Amount = Field(ge=0)
    stock: int = Field(ge=0, validation_alias=AliasChoices("stock", "stockQuantity"))
    unit: str = ""
    barcode: Optional[str] = None
    category_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("category_id", "categoryId")
    )
    is_active: bool = Field(
        default=True, validation_alias=AliasChoices("is_active", "isActive")
    )

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


class ProductPage(BaseModel):
    """One page of catalog results"""
    products: list[Product]
    total: int
    page: int = 1
    limit: int = 20
