# wordmate/core/bootstrap.py
"""
Bootstrap module for application initialization.
Seeds the subscription plan catalog on first startup.
"""
import logging
from wordmate.models.subscription import SubscriptionPlan
from wordmate.services.catalog import DEFAULT_PLAN_ROWS

logger = logging.getLogger("uvicorn.error")

async def ensure_default_plans() -> int:
    """
    Create a subscription_plans row for every tier that has none.

    Existing rows (including deactivated ones) are left untouched, so prices
    edited by an operator survive restarts. Redemption refuses to run for a
    tier without an active row, so this is what makes a fresh database usable.

    Returns:
        Number of rows created
    """
    created = 0
    for row in DEFAULT_PLAN_ROWS:
        if await SubscriptionPlan.filter(tier=row["tier"]).exists():
            continue
        await SubscriptionPlan.create(**row, is_active=True)
        created += 1
        logger.warning("[bootstrap] Created subscription plan -> tier=%s name=%s", row["tier"], row["name"])
    return created
