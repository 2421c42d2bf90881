# wordmate/api/v1/routers/payment.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from wordmate.api.v1.deps import get_order_service
from wordmate.core.timeutil import isoformat_or_none
from wordmate.schemas.payment import (
    CancelOrderOut,
    ConfirmPaymentIn,
    ConfirmPaymentOut,
    CreateOrderIn,
    CreateOrderOut,
    OrderListOut,
    OrderStatusOut,
)
from wordmate.services.catalog import ORDER_STATUS_TEXT, format_amount
from wordmate.services.code_store import OrderRecord
from wordmate.services.orders import OrderService

router = APIRouter(prefix="/payment", tags=["payment"])


def _order_to_dict(o: OrderRecord) -> dict:
    """
    Convert an order record to the admin listing format.
    """
    return {
        "id": o.id,
        "email": o.email,
        "planId": o.plan_id,
        "planName": o.plan_name,
        "planPeriod": o.plan_period,
        "amount": f"{o.amount:.2f}",
        "amountText": format_amount(o.amount),
        "currency": o.currency,
        "paymentMethod": o.payment_method,
        "status": o.status,
        "statusText": ORDER_STATUS_TEXT.get(o.status, o.status),
        "createdAt": o.created_at.isoformat(),
        "paidAt": isoformat_or_none(o.paid_at),
        "redemptionCode": o.redemption_code,
    }


# ==============================================================================
# I. Purchaser side
# ==============================================================================
@router.post("/create", response_model=CreateOrderOut)
async def create_order(body: CreateOrderIn, orders: OrderService = Depends(get_order_service)):
    """
    Create a pending order for a catalog plan.

    Raises (as {"detail": {"code", "message"}}):
        400 INVALID_EMAIL / INVALID_PLAN / INVALID_AMOUNT
    """
    order = await orders.create_order(body.email, body.planId, body.amount)
    return {"success": True, "orderId": order.id, "status": order.status, "planName": order.plan_name}


@router.get("/check/{order_id}", response_model=OrderStatusOut)
async def check_order(order_id: str, orders: OrderService = Depends(get_order_service)):
    """
    Poll an order's status; the /pay page calls this until it turns "paid".

    Raises:
        404 ORDER_NOT_FOUND
    """
    order = await orders.get_status(order_id)
    return {"success": True, "status": order.status, "paidAt": isoformat_or_none(order.paid_at)}


@router.delete("/orders/{order_id}", response_model=CancelOrderOut)
async def cancel_order(order_id: str, orders: OrderService = Depends(get_order_service)):
    """
    Cancel an order that is still pending.

    Raises:
        404 ORDER_NOT_FOUND
        400 ORDER_NOT_PENDING
    """
    await orders.cancel_order(order_id)
    return {"success": True, "message": "订单已取消"}


# ==============================================================================
# II. Payment desk (ADMIN_SECRET_KEY)
# ==============================================================================
@router.post("/confirm", response_model=ConfirmPaymentOut)
async def confirm_payment(body: ConfirmPaymentIn, orders: OrderService = Depends(get_order_service)):
    """
    Confirm a manual payment: mark the order paid, issue a redemption code and
    mail it to the purchaser.

    The code is always returned in the body; emailSent/emailError describe the
    mail separately and a mail failure does not fail the request.

    Raises:
        403 ADMIN_FORBIDDEN
        400 ORDER_ID_REQUIRED / ORDER_ALREADY_PAID
        404 ORDER_NOT_FOUND
        500 ORDER_UPDATE_FAILED
    """
    result = await orders.confirm_payment(body.orderId, body.adminKey)
    return {
        "success": True,
        "code": result.code,
        "email": result.order.email,
        "emailSent": result.email_sent,
        "emailError": result.email_error,
    }


@router.get("/orders", response_model=OrderListOut)
async def list_orders(
    adminKey: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None, description="pending / paid / cancelled / expired"),
    orders: OrderService = Depends(get_order_service),
):
    """
    All orders, newest first, optionally filtered by status.

    Raises:
        403 ADMIN_FORBIDDEN
    """
    rows = await orders.list_orders(adminKey, status)
    return {"success": True, "orders": [_order_to_dict(o) for o in rows]}
