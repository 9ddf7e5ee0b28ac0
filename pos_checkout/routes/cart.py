"""Cart API routes"""

from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..models.cart import CartView, DiscountKind
from ..services.commands import (
    AddCustomItem,
    AddItem,
    ApplyDiscount,
    ClearCart,
    RefreshStock,
    RemoveItem,
    UpdateQuantity,
    dispatch,
)
from ..services.session import PosSession
from .deps import get_session, respond

router = APIRouter(prefix="/api/cart", tags=["Cart"])


class AddToCartRequest(BaseModel):
    """Request to add a catalog product to the cart"""
    product_id: str
    quantity: int = Field(default=1, gt=0)


class AddCustomItemRequest(BaseModel):
    """Request to add an ad-hoc item"""
    name: str = Field(min_length=1)
    price: int = Field(gt=0)
    quantity: int = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity; zero or less removes the item"""
    quantity: int


class DiscountRequest(BaseModel):
    kind: DiscountKind
    value: Decimal


@router.get("", response_model=CartView)
async def get_cart(session: PosSession = Depends(get_session)):
    """Current cart with recomputed totals"""
    return session.view()


@router.post("/items")
async def add_to_cart(
    request: AddToCartRequest,
    session: PosSession = Depends(get_session),
):
    """Add a product to the cart"""
    result = await dispatch(session, AddItem(request.product_id, request.quantity))
    return respond(result)


@router.post("/custom-items")
async def add_custom_item(
    request: AddCustomItemRequest,
    session: PosSession = Depends(get_session),
):
    """Add an item that is not in the catalog"""
    result = await dispatch(
        session, AddCustomItem(request.name, request.price, request.quantity)
    )
    return respond(result)


@router.put("/items/{product_id}")
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    session: PosSession = Depends(get_session),
):
    """Update item quantity in cart"""
    result = await dispatch(session, UpdateQuantity(product_id, request.quantity))
    return respond(result)


@router.delete("/items/{product_id}")
async def remove_from_cart(
    product_id: str,
    session: PosSession = Depends(get_session),
):
    """Remove an item from the cart"""
    result = await dispatch(session, RemoveItem(product_id))
    return respond(result)


@router.put("/discount")
async def apply_discount(
    request: DiscountRequest,
    session: PosSession = Depends(get_session),
):
    """Replace the cart discount"""
    result = await dispatch(session, ApplyDiscount(request.kind, request.value))
    return respond(result)


@router.delete("")
async def clear_cart(session: PosSession = Depends(get_session)):
    """Clear all items and the discount"""
    result = await dispatch(session, ClearCart())
    return respond(result)


@router.post("/refresh-stock")
async def refresh_stock(session: PosSession = Depends(get_session)):
    """Re-read stock for every cart line from the catalog"""
    result = await dispatch(session, RefreshStock())
    return respond(result)
