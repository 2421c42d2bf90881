"""
Redemption engine: exchanges a single-use code for an active subscription.

Flow for one submitted code:
  1. normalize input to the stored XXXX-XXXX-XXXX form
  2. look it up                      -> CODE_INVALID (404)
  3. status used / expired           -> CODE_USED / CODE_EXPIRED (400)
  4. expiry in the past              -> persist status=expired, CODE_EXPIRED
  5. plan name -> tier (unknown names fall back to premium, logged)
  6. active plan row for the tier    -> SERVER_CONFIG_ERROR (500) if missing
  7. billing period -> end date
  8-11. in one transaction: cancel the user's active subscriptions, insert the
     new one, append history, mark the code used (only if still unused)
  12. report tier, plan name and end date

If the final compare-and-swap on the code finds it no longer unused (a
concurrent redemption won), the transaction is rolled back and the caller
gets CODE_USED, so one code never activates two subscriptions.
"""
import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from tortoise.exceptions import BaseORMException
from tortoise.transactions import in_transaction

from wordmate.config import settings
from wordmate.core.timeutil import utc_now
from wordmate.models.subscription import SubscriptionHistory, SubscriptionPlan, UserSubscription
from wordmate.services.catalog import compute_end_date, resolve_tier
from wordmate.services.code_generator import normalize_code_input
from wordmate.services.code_store import CodeStore
from wordmate.services.errors import (
    CodeExpired,
    CodeInvalid,
    CodeUsed,
    ServerConfigError,
    SubscriptionCreateFailed,
    ValidationFailed,
)

logger = logging.getLogger("uvicorn.error")

PAYMENT_METHOD = "redemption_code"


@dataclass
class RedemptionResult:
    code: str
    tier: str
    plan_name: str
    end_date: Optional[dt.datetime]
    subscription_id: str


class RedemptionService:
    def __init__(self, store: CodeStore):
        self.store = store

    async def redeem(self, raw_code: str | None, user_id: str, now: dt.datetime | None = None) -> RedemptionResult:
        """
        Redeem `raw_code` for `user_id`.

        Args:
            raw_code: code as typed by the user (any case, hyphens optional)
            user_id: authenticated user's id
            now: clock override, defaults to the current UTC time

        Raises:
            ValidationFailed, CodeInvalid, CodeUsed, CodeExpired,
            ServerConfigError, SubscriptionCreateFailed
        """
        if not isinstance(raw_code, str) or not raw_code.strip():
            raise ValidationFailed("请输入兑换码", code="CODE_REQUIRED")
        now = now or utc_now()
        user_id = str(user_id)

        key = normalize_code_input(raw_code)
        record = await self.store.find_code(key)
        if record is None:
            raise CodeInvalid()

        if record.status == "used":
            raise CodeUsed()
        if record.status == "expired":
            raise CodeExpired()

        if record.expires_at and record.expires_at < now:
            marked = await self.store.update_code(key, {"status": "expired"}, expected_status="unused")
            if marked is None:
                logger.error("[redeem] could not persist expiry for code=%s", key)
            raise CodeExpired()

        tier, recognized = resolve_tier(record.plan_name)
        if not recognized:
            # TODO: reject unknown plan names once old codes are cleaned up
            logger.warning("[redeem] unknown plan name %r on code=%s, using tier=%s", record.plan_name, key, tier)

        plan = await SubscriptionPlan.filter(tier=tier, is_active=True).order_by("display_order").first()
        if plan is None:
            logger.error("[redeem] no active subscription_plans row for tier=%s (code=%s)", tier, key)
            raise ServerConfigError()

        end_date = compute_end_date(record.period, now)

        try:
            async with in_transaction() as conn:
                await UserSubscription.filter(user_id=user_id, status="active").using_db(conn).update(
                    status="cancelled", cancel_at=now
                )
                subscription = await UserSubscription.create(
                    user_id=user_id,
                    plan=plan,
                    status="active",
                    start_date=now,
                    end_date=end_date,
                    auto_renew=False,
                    payment_method=PAYMENT_METHOD,
                    amount=Decimal("0"),
                    currency=settings.currency,
                    using_db=conn,
                )
                await SubscriptionHistory.create(
                    user_id=user_id,
                    plan=plan,
                    status="active",
                    start_date=now,
                    end_date=end_date,
                    amount=Decimal("0"),
                    currency=settings.currency,
                    payment_method=PAYMENT_METHOD,
                    using_db=conn,
                )
                claimed = await self.store.update_code(
                    key,
                    {"status": "used", "used_at": now, "used_by": user_id},
                    expected_status="unused",
                )
                if claimed is None:
                    raise CodeUsed()
        except CodeUsed:
            logger.warning("[redeem] code=%s consumed concurrently, activation rolled back", key)
            raise
        except (BaseORMException, OSError):
            logger.exception("[redeem] activation failed for user=%s code=%s", user_id, key)
            raise SubscriptionCreateFailed()

        logger.info("[redeem] user=%s code=%s tier=%s end=%s", user_id, key, tier, end_date)
        return RedemptionResult(
            code=key,
            tier=tier,
            plan_name=plan.name,
            end_date=end_date,
            subscription_id=str(subscription.id),
        )
