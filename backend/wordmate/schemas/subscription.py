# wordmate/schemas/subscription.py
"""
Pydantic schemas for subscription status endpoints.
"""
from pydantic import BaseModel
from typing import Optional, List

class PlanOut(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    tier: Optional[str] = None
    priceMonthly: Optional[str] = None
    priceYearly: Optional[str] = None
    description: Optional[str] = None
    features: list = []
    displayOrder: Optional[int] = None

class SubscriptionOut(BaseModel):
    id: Optional[str] = None  # None for the implicit free subscription
    planId: Optional[str] = None
    status: str
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    cancelAt: Optional[str] = None
    autoRenew: bool = False
    paymentMethod: Optional[str] = None
    amount: str = "0.00"
    currency: str = "CNY"

class HistoryItem(BaseModel):
    id: str
    planId: str
    status: str
    startDate: str
    endDate: Optional[str] = None
    amount: str
    currency: str
    paymentMethod: Optional[str] = None
    createdAt: str

class SubscriptionOverviewOut(BaseModel):
    currentSubscription: SubscriptionOut
    currentPlan: PlanOut
    availablePlans: List[PlanOut]
    subscriptionHistory: List[HistoryItem]

class SubscriptionCheckOut(BaseModel):
    tier: str
    isActive: bool
    endDate: Optional[str] = None
    limits: dict
    canUpgrade: bool

class CancelSubscriptionOut(BaseModel):
    success: bool = True
    message: str
    validUntil: Optional[str] = None  # End date of the cancelled subscription; None means unbounded
