# wordmate/api/v1/routers/subscription.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from wordmate.api.v1.deps import get_current_user
from wordmate.config import settings
from wordmate.core.timeutil import isoformat_or_none
from wordmate.models.subscription import SubscriptionHistory, SubscriptionPlan, UserSubscription
from wordmate.models.user import User
from wordmate.schemas.subscription import CancelSubscriptionOut, SubscriptionCheckOut, SubscriptionOverviewOut
from wordmate.services.limits import check_feature, get_subscription_status
from wordmate.services.subscriptions import cancel_subscription

router = APIRouter(prefix="/subscription", tags=["subscription"])

HISTORY_LIMIT = 10


def _plan_to_dict(p: Optional[SubscriptionPlan]) -> dict:
    if p is None:
        return {}
    return {
        "id": str(p.id),
        "name": p.name,
        "tier": p.tier,
        "priceMonthly": f"{p.price_monthly:.2f}",
        "priceYearly": f"{p.price_yearly:.2f}",
        "description": p.description,
        "features": p.features or [],
        "displayOrder": p.display_order,
    }


def _subscription_to_dict(s: UserSubscription) -> dict:
    return {
        "id": str(s.id),
        "planId": str(s.plan_id),
        "status": s.status,
        "startDate": isoformat_or_none(s.start_date),
        "endDate": isoformat_or_none(s.end_date),
        "cancelAt": isoformat_or_none(s.cancel_at),
        "autoRenew": s.auto_renew,
        "paymentMethod": s.payment_method,
        "amount": f"{s.amount:.2f}",
        "currency": s.currency,
    }


def _history_to_dict(h: SubscriptionHistory) -> dict:
    return {
        "id": str(h.id),
        "planId": str(h.plan_id),
        "status": h.status,
        "startDate": h.start_date.isoformat(),
        "endDate": isoformat_or_none(h.end_date),
        "amount": f"{h.amount:.2f}",
        "currency": h.currency,
        "paymentMethod": h.payment_method,
        "createdAt": h.created_at.isoformat(),
    }


@router.get("", response_model=SubscriptionOverviewOut)
async def get_subscription(user: User = Depends(get_current_user)):
    """
    Current subscription, plan catalog and recent history for the logged-in user.

    Users without an active subscription get a virtual free subscription
    (id=None) on the free plan. An active row whose end date has passed is
    reported with status "expired" and the free plan, matching /check.
    """
    plans = await SubscriptionPlan.filter(is_active=True).order_by("display_order")
    free_plan = next((p for p in plans if p.tier == "free"), None)

    status = await get_subscription_status(str(user.id))
    sub = status.subscription
    if sub and status.is_active:
        current = _subscription_to_dict(sub)
        current_plan = sub.plan
    elif sub:
        # Active row past its end date: shown, but the user is on free
        current = {**_subscription_to_dict(sub), "status": "expired"}
        current_plan = free_plan
    else:
        current = {
            "id": None,
            "planId": str(free_plan.id) if free_plan else None,
            "status": "active",
            "startDate": None,
            "endDate": None,
            "autoRenew": False,
            "currency": settings.currency,
        }
        current_plan = free_plan

    history = await SubscriptionHistory.filter(user=user).order_by("-created_at").limit(HISTORY_LIMIT)

    return {
        "currentSubscription": current,
        "currentPlan": _plan_to_dict(current_plan),
        "availablePlans": [_plan_to_dict(p) for p in plans],
        "subscriptionHistory": [_history_to_dict(h) for h in history],
    }


@router.get("/check")
async def check_subscription(
    feature: Optional[str] = Query(default=None, description="Limits key, e.g. canExport"),
    user: User = Depends(get_current_user),
):
    """
    Effective tier and limits; with ?feature=... only that feature's access.

    Expired subscriptions are reported as free / isActive=False.
    """
    status = await get_subscription_status(str(user.id))
    if feature:
        return {"feature": feature, **check_feature(status, feature)}

    return SubscriptionCheckOut(
        tier=status.tier,
        isActive=status.is_active,
        endDate=isoformat_or_none(status.end_date),
        limits=status.limits,
        canUpgrade=status.tier not in ("flagship", "flagship_lifetime"),
    )


@router.delete("", response_model=CancelSubscriptionOut)
async def cancel_own_subscription(
    subscription_id: Optional[str] = Query(default=None, alias="id", description="Subscription id"),
    user: User = Depends(get_current_user),
):
    """
    Cancel one of the caller's subscriptions; access runs until validUntil.

    Raises:
        400 SUBSCRIPTION_ID_REQUIRED
        404 SUBSCRIPTION_NOT_FOUND (also for another user's subscription)
    """
    sub = await cancel_subscription(str(user.id), subscription_id)
    return {"success": True, "message": "订阅已取消", "validUntil": isoformat_or_none(sub.end_date)}
