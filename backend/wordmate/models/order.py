# wordmate/models/order.py
import uuid
from tortoise import fields, models

ORDER_STATUSES = ("pending", "paid", "cancelled", "expired")

class PaymentOrder(models.Model):
    """
    Manual-payment purchase order.
    - plan_id: catalog key (e.g. premium-month), plan_name / plan_period copied from the catalog
    - status: pending -> paid (admin confirmation) | cancelled | expired
    - redemption_code: set together with status=paid, never otherwise
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    email = fields.CharField(max_length=256)
    plan_id = fields.CharField(max_length=32)
    plan_name = fields.CharField(max_length=32)
    plan_period = fields.CharField(max_length=16)
    amount = fields.DecimalField(max_digits=10, decimal_places=2)
    currency = fields.CharField(max_length=8, default="CNY")
    payment_method = fields.CharField(max_length=32, default="wechat")
    notes = fields.CharField(max_length=128, null=True)

    status = fields.CharField(max_length=16, default="pending", index=True)
    paid_at = fields.DatetimeField(null=True)
    redemption_code = fields.CharField(max_length=14, null=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "payment_orders"
