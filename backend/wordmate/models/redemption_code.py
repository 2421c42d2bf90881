# wordmate/models/redemption_code.py
from typing import Optional
from tortoise import fields, models

CODE_STATUSES = ("unused", "used", "expired")

class RedemptionCode(models.Model):
    """
    Single-use redemption code issued when an order is confirmed.
    - code: canonical XXXX-XXXX-XXXX form, unique
    - plan_name / period: copied from the order, resolved to a tier at redemption time
    - status: unused -> used | expired (both terminal)
    - expires_at: optional; a past value makes the code unredeemable
    - used_by / used_at: set by the redemption that consumed the code
    """
    id = fields.IntField(pk=True)
    code = fields.CharField(max_length=14, unique=True, index=True)

    order: Optional[fields.ForeignKeyNullableRelation["PaymentOrder"]] = fields.ForeignKeyField(
        "models.PaymentOrder", related_name="codes", null=True
    )
    email = fields.CharField(max_length=256, null=True)
    plan_name = fields.CharField(max_length=32, null=True)
    period = fields.CharField(max_length=16, null=True)

    status = fields.CharField(max_length=16, default="unused")
    expires_at = fields.DatetimeField(null=True)

    used_by: Optional[fields.ForeignKeyNullableRelation["User"]] = fields.ForeignKeyField(
        "models.User", related_name="redeemed_codes", null=True
    )
    used_at = fields.DatetimeField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "redemption_codes"
