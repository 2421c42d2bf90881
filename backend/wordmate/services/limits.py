"""
Per-tier feature limits and the user's effective subscription status.
"""
import datetime as dt
from dataclasses import dataclass, field
from typing import Optional

from wordmate.core.timeutil import ensure_aware, utc_now
from wordmate.models.subscription import UserSubscription

UNLIMITED = -1

PLAN_LIMITS: dict[str, dict] = {
    "free": {
        "maxWords": 50,
        "dailyChatLimit": 10,
        "canUseNotebook": False,
        "canUseWhitelist": False,
        "canUseVoiceVerify": False,
        "canUseHandwriting": False,
        "canUseStats": True,
        "canExport": False,
        "canUseConsultant": False,
    },
    "premium": {
        "maxWords": 500,
        "dailyChatLimit": 100,
        "canUseNotebook": True,
        "canUseWhitelist": True,
        "canUseVoiceVerify": True,
        "canUseHandwriting": True,
        "canUseStats": True,
        "canExport": True,
        "canUseConsultant": False,
    },
    "flagship": {
        "maxWords": UNLIMITED,
        "dailyChatLimit": UNLIMITED,
        "canUseNotebook": True,
        "canUseWhitelist": True,
        "canUseVoiceVerify": True,
        "canUseHandwriting": True,
        "canUseStats": True,
        "canExport": True,
        "canUseConsultant": True,
    },
}
PLAN_LIMITS["flagship_lifetime"] = PLAN_LIMITS["flagship"]

FEATURE_NAMES = {
    "canUseNotebook": "艾宾浩斯单词本",
    "canUseWhitelist": "白名单训练",
    "canUseVoiceVerify": "声纹验证",
    "canUseHandwriting": "手写练习",
    "canUseStats": "学习统计",
    "canExport": "数据导出",
    "canUseConsultant": "人工顾问",
    "maxWords": "添加更多单词",
    "dailyChatLimit": "更多对话次数",
}


@dataclass
class SubscriptionStatus:
    tier: str
    is_active: bool
    end_date: Optional[dt.datetime]
    limits: dict = field(default_factory=dict)
    subscription: Optional[UserSubscription] = None


async def get_active_subscription(user_id: str) -> Optional[UserSubscription]:
    return await (
        UserSubscription.filter(user_id=user_id, status="active")
        .order_by("-created_at")
        .prefetch_related("plan")
        .first()
    )


async def get_subscription_status(user_id: str, now: dt.datetime | None = None) -> SubscriptionStatus:
    """
    Effective tier for a user. No active row, or one whose end date has
    passed, means free.
    """
    now = now or utc_now()
    sub = await get_active_subscription(user_id)
    if sub is None:
        return SubscriptionStatus(tier="free", is_active=True, end_date=None, limits=PLAN_LIMITS["free"])

    end_date = ensure_aware(sub.end_date)
    if end_date and end_date < now:
        return SubscriptionStatus(tier="free", is_active=False, end_date=None, limits=PLAN_LIMITS["free"], subscription=sub)

    tier = sub.plan.tier if sub.plan.tier in PLAN_LIMITS else "free"
    return SubscriptionStatus(tier=tier, is_active=True, end_date=end_date, limits=PLAN_LIMITS[tier], subscription=sub)


def check_feature(status: SubscriptionStatus, feature: str) -> dict:
    """
    {allowed, tier[, reason]} for one limits key. Numeric limits count as
    allowed when non-zero.
    """
    if feature not in FEATURE_NAMES:
        return {"allowed": False, "reason": f"未知功能: {feature}", "tier": status.tier}
    if status.limits.get(feature):
        return {"allowed": True, "tier": status.tier}
    return {
        "allowed": False,
        "reason": f"{FEATURE_NAMES[feature]}功能需要高级版或更高订阅",
        "tier": status.tier,
    }
