"""
Static plan catalog: what can be bought, how display names map to tiers, and
how a billing period turns into a subscription end date.
"""
import datetime as dt
import re
from decimal import Decimal
from typing import NamedTuple, Optional

from dateutil.relativedelta import relativedelta

# Billing periods as stored on orders and codes
PERIOD_MONTHLY = "月付"
PERIOD_YEARLY = "年付"
PERIOD_LIFETIME = "终身"

# Lifetime is a far-away end date rather than null, so "end_date < now" checks keep working
LIFETIME_YEARS = 100

DEFAULT_PLAN_NAME = "高级版"
DEFAULT_TIER = "premium"


class PurchasePlan(NamedTuple):
    name: str
    period: str
    price: Decimal


# Purchasable plan/period combinations (kept in sync with the /pay page)
PURCHASE_PLANS: dict[str, PurchasePlan] = {
    "premium-month": PurchasePlan("高级版", PERIOD_MONTHLY, Decimal("3")),
    "premium-year": PurchasePlan("高级版", PERIOD_YEARLY, Decimal("5")),
    "flagship-month": PurchasePlan("旗舰版", PERIOD_MONTHLY, Decimal("10")),
    "flagship-year": PurchasePlan("旗舰版", PERIOD_YEARLY, Decimal("15")),
    "flagship-lifetime": PurchasePlan("旗舰版", PERIOD_LIFETIME, Decimal("20")),
}

PLAN_NAME_TO_TIER: dict[str, str] = {
    "高级版": "premium",
    "旗舰版": "flagship",
    "终身版": "flagship_lifetime",
    "免费版": "free",
}

# Seed rows for subscription_plans (tier -> name, monthly, yearly, order)
DEFAULT_PLAN_ROWS = (
    {"tier": "free", "name": "免费版", "price_monthly": Decimal("0"), "price_yearly": Decimal("0"), "display_order": 0},
    {"tier": "premium", "name": "高级版", "price_monthly": Decimal("3"), "price_yearly": Decimal("5"), "display_order": 1},
    {"tier": "flagship", "name": "旗舰版", "price_monthly": Decimal("10"), "price_yearly": Decimal("15"), "display_order": 2},
    {"tier": "flagship_lifetime", "name": "终身版", "price_monthly": Decimal("20"), "price_yearly": Decimal("20"), "display_order": 3},
)

ORDER_STATUS_TEXT = {
    "pending": "待支付",
    "paid": "已支付",
    "expired": "已过期",
    "cancelled": "已取消",
}

CODE_STATUS_TEXT = {
    "unused": "未使用",
    "used": "已使用",
    "expired": "已过期",
}

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def get_purchase_plan(plan_id) -> Optional[PurchasePlan]:
    if not isinstance(plan_id, str) or not plan_id:
        return None
    return PURCHASE_PLANS.get(plan_id)


def is_valid_email(email) -> bool:
    return isinstance(email, str) and bool(_EMAIL_RE.match(email))


def format_amount(amount) -> str:
    return f"¥{Decimal(str(amount)):.2f}"


def resolve_tier(plan_name: str | None) -> tuple[str, bool]:
    """
    Map a code's plan display name to an internal tier.

    Returns (tier, recognized). Missing names count as the default premium
    plan; unknown names also fall back to premium but report recognized=False
    so the caller can log it.
    """
    name = plan_name or DEFAULT_PLAN_NAME
    tier = PLAN_NAME_TO_TIER.get(name)
    if tier is None:
        return DEFAULT_TIER, False
    return tier, True


def compute_end_date(period: str | None, start: dt.datetime) -> Optional[dt.datetime]:
    """
    End date for a billing period starting at `start`.

    Month/year arithmetic clamps to the last valid day (Jan 31 + 1 month ->
    Feb 28/29, Feb 29 + 1 year -> Feb 28). Unknown or missing periods return
    None, meaning unbounded.
    """
    if period == PERIOD_YEARLY:
        return start + relativedelta(years=1)
    if period == PERIOD_MONTHLY:
        return start + relativedelta(months=1)
    if period == PERIOD_LIFETIME:
        return start + relativedelta(years=LIFETIME_YEARS)
    return None
