"""
User-initiated subscription changes.
"""
import datetime as dt
import logging
import uuid

from wordmate.core.timeutil import utc_now
from wordmate.models.subscription import UserSubscription
from wordmate.services.errors import SubscriptionNotFound, ValidationFailed

logger = logging.getLogger("uvicorn.error")


async def cancel_subscription(user_id: str, subscription_id: str | None, now: dt.datetime | None = None) -> UserSubscription:
    """
    Cancel one of the user's own subscriptions.

    The row becomes cancelled with cancel_at stamped and auto-renew off; its
    end_date is kept so the caller can show how long access lasts.

    Raises:
        ValidationFailed (SUBSCRIPTION_ID_REQUIRED), SubscriptionNotFound
    """
    if not subscription_id:
        raise ValidationFailed("缺少订阅ID", code="SUBSCRIPTION_ID_REQUIRED")
    try:
        uuid.UUID(str(subscription_id))
    except ValueError:
        raise SubscriptionNotFound()

    sub = await UserSubscription.get_or_none(id=subscription_id, user_id=user_id)
    if sub is None:
        raise SubscriptionNotFound()

    sub.status = "cancelled"
    sub.cancel_at = now or utc_now()
    sub.auto_renew = False
    await sub.save(update_fields=["status", "cancel_at", "auto_renew"])
    logger.info("[subscription] user=%s cancelled subscription=%s", user_id, subscription_id)
    return sub
