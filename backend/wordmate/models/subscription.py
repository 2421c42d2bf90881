# wordmate/models/subscription.py
"""
Subscription tables: the plan catalog, the per-user subscription rows and the
append-only subscription history used for audit and export.
"""
import uuid
from tortoise import fields, models

PLAN_TIERS = ("free", "premium", "flagship", "flagship_lifetime")

class SubscriptionPlan(models.Model):
    """
    Plan catalog row. Redemption looks up the active row for a tier.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=32)  # Display name, e.g. "高级版"
    tier = fields.CharField(max_length=32, index=True)  # free / premium / flagship / flagship_lifetime
    price_monthly = fields.DecimalField(max_digits=10, decimal_places=2, default=0)
    price_yearly = fields.DecimalField(max_digits=10, decimal_places=2, default=0)
    description = fields.CharField(max_length=255, null=True)
    features = fields.JSONField(default=list)
    is_active = fields.BooleanField(default=True)
    display_order = fields.IntField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "subscription_plans"


class UserSubscription(models.Model):
    """
    A user's subscription. At most one row per user is "active"; activating a
    new one cancels the others first (application rule, not a DB constraint).
    end_date = null means unbounded.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="subscriptions", on_delete=fields.CASCADE)
    plan = fields.ForeignKeyField("models.SubscriptionPlan", related_name="subscriptions")
    status = fields.CharField(max_length=16, default="active", index=True)  # active / cancelled
    start_date = fields.DatetimeField()
    end_date = fields.DatetimeField(null=True)
    cancel_at = fields.DatetimeField(null=True)
    auto_renew = fields.BooleanField(default=False)
    payment_method = fields.CharField(max_length=32, null=True)
    amount = fields.DecimalField(max_digits=10, decimal_places=2, default=0)
    currency = fields.CharField(max_length=8, default="CNY")
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "user_subscriptions"


class SubscriptionHistory(models.Model):
    """Audit trail row, written once per activation and never updated."""
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="subscription_history", on_delete=fields.CASCADE)
    plan = fields.ForeignKeyField("models.SubscriptionPlan", related_name="history")
    status = fields.CharField(max_length=16)
    start_date = fields.DatetimeField()
    end_date = fields.DatetimeField(null=True)
    amount = fields.DecimalField(max_digits=10, decimal_places=2, default=0)
    currency = fields.CharField(max_length=8, default="CNY")
    payment_method = fields.CharField(max_length=32, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "subscription_history"
