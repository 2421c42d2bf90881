"""
Order lifecycle for the manual payment flow.

    create (pending) --admin confirm--> paid  (code generated + mailed)
                     --cancel---------> cancelled
                     --stale----------> expired   (only with ORDER_EXPIRE_MINUTES)
"""
import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from wordmate.config import settings
from wordmate.core.security import verify_admin_key
from wordmate.core.timeutil import utc_now
from wordmate.models.order import ORDER_STATUSES
from wordmate.services import notifier
from wordmate.services.catalog import PERIOD_MONTHLY, get_purchase_plan, is_valid_email
from wordmate.services.code_generator import generate_redemption_code
from wordmate.services.code_store import CodeStore, OrderRecord
from wordmate.services.errors import (
    AdminForbidden,
    OrderAlreadyPaid,
    OrderNotFound,
    OrderNotPending,
    StoreWriteFailed,
    ValidationFailed,
)

logger = logging.getLogger("uvicorn.error")


def _parse_amount(amount) -> Optional[Decimal]:
    """Submitted amount as a finite Decimal; numbers or numeric strings only."""
    if isinstance(amount, bool) or not isinstance(amount, (int, float, str)):
        return None
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


@dataclass
class ConfirmResult:
    order: OrderRecord
    code: str
    email_sent: bool
    email_error: str


class OrderService:
    def __init__(self, store: CodeStore):
        self.store = store

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    async def create_order(self, email, plan_id, amount) -> OrderRecord:
        """
        Validate a purchase and persist it as a pending order.

        The stored amount is the catalog price, not what the client sent;
        the submitted amount only has to cover it.
        """
        if not is_valid_email(email):
            raise ValidationFailed("请输入有效的邮箱地址", code="INVALID_EMAIL")

        plan = get_purchase_plan(plan_id)
        if plan is None:
            raise ValidationFailed("请选择有效的套餐", code="INVALID_PLAN")

        submitted = _parse_amount(amount)
        if submitted is None or submitted <= 0 or submitted < plan.price:
            raise ValidationFailed("支付金额不正确", code="INVALID_AMOUNT")

        order = await self.store.create_order({
            "email": email.strip(),
            "plan_id": plan_id,
            "plan_name": plan.name,
            "plan_period": plan.period,
            "amount": plan.price,
            "currency": settings.currency,
            "payment_method": "wechat",
            "notes": f"{plan.name} - {plan.period}",
        })
        logger.info("[order] created id=%s plan=%s email=%s", order.id, plan_id, order.email)
        return order

    # ------------------------------------------------------------------
    # Confirm (admin)
    # ------------------------------------------------------------------
    async def confirm_payment(self, order_id, admin_key) -> ConfirmResult:
        """
        Mark an order paid, issue its redemption code and mail it.

        Mail failure is reported in the result, the paid/code state stays.
        """
        if not verify_admin_key(admin_key):
            raise AdminForbidden()
        if not isinstance(order_id, str) or not order_id:
            raise ValidationFailed("缺少订单ID", code="ORDER_ID_REQUIRED")

        order = await self.store.get_order(order_id)
        if order is None:
            raise OrderNotFound()
        if order.status == "paid":
            raise OrderAlreadyPaid()

        code = generate_redemption_code()
        now = utc_now()
        updated = await self.store.update_order(order_id, {
            "status": "paid",
            "paid_at": now,
            "redemption_code": code,
        })
        if updated is None:
            logger.error("[order] failed to mark order paid id=%s", order_id)
            raise StoreWriteFailed()

        await self.store.create_code({
            "code": code,
            "order_id": order_id,
            "email": order.email,
            "plan_name": order.plan_name or order.notes,
            "period": order.plan_period or PERIOD_MONTHLY,
            "status": "unused",
        })
        logger.info("[order] confirmed id=%s code issued", order_id)

        result = await notifier.send_redemption_email(
            to=order.email,
            code=code,
            order_id=order_id,
            plan_name=order.plan_name,
            amount=order.amount,
        )
        return ConfirmResult(
            order=updated,
            code=code,
            email_sent=result.sent,
            email_error=result.error or "",
        )

    # ------------------------------------------------------------------
    # Cancel / query
    # ------------------------------------------------------------------
    async def cancel_order(self, order_id: str) -> OrderRecord:
        order = await self._get_fresh(order_id)
        if order.status != "pending":
            raise OrderNotPending()
        updated = await self.store.update_order(order_id, {"status": "cancelled"})
        if updated is None:
            raise StoreWriteFailed()
        logger.info("[order] cancelled id=%s", order_id)
        return updated

    async def get_status(self, order_id: str | None) -> OrderRecord:
        if not order_id:
            raise ValidationFailed("无效的订单ID", code="ORDER_ID_REQUIRED")
        return await self._get_fresh(order_id)

    async def list_orders(self, admin_key: str | None, status: Optional[str] = None) -> list[OrderRecord]:
        if not verify_admin_key(admin_key):
            raise AdminForbidden()
        if status and status not in ORDER_STATUSES:
            raise ValidationFailed("无效的订单状态", code="INVALID_STATUS")
        return await self.store.list_orders(status=status)

    async def _get_fresh(self, order_id: str) -> OrderRecord:
        """Load an order, lazily moving a stale pending order to expired."""
        order = await self.store.get_order(order_id)
        if order is None:
            raise OrderNotFound()

        window = settings.order_expire_minutes
        if window > 0 and order.status == "pending":
            if order.created_at + dt.timedelta(minutes=window) < utc_now():
                expired = await self.store.update_order(order_id, {"status": "expired"})
                if expired is not None:
                    logger.info("[order] expired id=%s", order_id)
                    return expired
        return order
