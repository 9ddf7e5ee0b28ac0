"""Checkout and order status API routes"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..core.errors import NotFoundError
from ..models.checkout import Order, PaymentMethod
from ..services.commands import (
    CancelOrder,
    Checkout,
    ConfirmPayment,
    RefreshOrder,
    SelectPaymentMethod,
    SetCustomer,
    StartNewOrder,
    dispatch,
)
from ..services.session import PosSession
from .deps import get_session, respond

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


class PaymentMethodRequest(BaseModel):
    method: PaymentMethod


class CustomerRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None


class ConfirmPaymentRequest(BaseModel):
    amount_paid: Optional[int] = Field(default=None, ge=0)


@router.put("/payment-method")
async def select_payment_method(
    request: PaymentMethodRequest,
    session: PosSession = Depends(get_session),
):
    result = await dispatch(session, SelectPaymentMethod(request.method))
    return respond(result)


@router.put("/customer")
async def set_customer(
    request: CustomerRequest,
    session: PosSession = Depends(get_session),
):
    result = await dispatch(session, SetCustomer(request.name, request.phone))
    return respond(result)


@router.post("")
async def checkout(session: PosSession = Depends(get_session)):
    """
    Submit the cart as an order.

    Only one submission can be in flight; a second request while the first
    is awaiting the order service is rejected with 409.
    """
    result = await dispatch(session, Checkout())
    return respond(result)


@router.get("/order", response_model=Order)
async def get_current_order(session: PosSession = Depends(get_session)):
    """The order created by the last checkout"""
    if session.current_order is None:
        raise NotFoundError("No order is being tracked")
    return session.current_order.order


@router.post("/order/confirm-payment")
async def confirm_payment(
    request: Optional[ConfirmPaymentRequest] = None,
    session: PosSession = Depends(get_session),
):
    """Mark the tracked order as paid; cash payments report the change due"""
    amount_paid = request.amount_paid if request else None
    result = await dispatch(session, ConfirmPayment(amount_paid))
    return respond(result)


@router.post("/order/cancel")
async def cancel_order(session: PosSession = Depends(get_session)):
    result = await dispatch(session, CancelOrder())
    return respond(result)


@router.post("/order/refresh")
async def refresh_order(session: PosSession = Depends(get_session)):
    """Pull the tracked order's status from the order service"""
    result = await dispatch(session, RefreshOrder())
    return respond(result)


@router.post("/new-order")
async def start_new_order(session: PosSession = Depends(get_session)):
    result = await dispatch(session, StartNewOrder())
    return respond(result)
