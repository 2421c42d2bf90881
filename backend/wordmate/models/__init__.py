# wordmate/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: Learner account and authentication model
- PaymentOrder: Manual-payment purchase order
- RedemptionCode: Single-use code issued for a paid order
- SubscriptionPlan / UserSubscription / SubscriptionHistory: subscription tables
"""
from .user import User
from .order import PaymentOrder
from .redemption_code import RedemptionCode
from .subscription import SubscriptionPlan, UserSubscription, SubscriptionHistory
