# wordmate/schemas/payment.py
"""
Pydantic schemas for the manual payment endpoints.
Request fields accept any JSON value so missing or malformed input reaches the
service layer and gets the localized 400 messages instead of a generic 422.
"""
from pydantic import BaseModel
from typing import Any, Optional, List

class CreateOrderIn(BaseModel):
    """
    Request model for creating a purchase order.
    """
    email: Any = None  # Purchaser email; the code is mailed here
    planId: Any = None  # Catalog key, e.g. "premium-month"
    amount: Any = None  # Amount paid; must cover the catalog price

class CreateOrderOut(BaseModel):
    success: bool = True
    orderId: str
    status: str
    planName: str

class ConfirmPaymentIn(BaseModel):
    """
    Request model for the admin payment confirmation.
    """
    orderId: Any = None
    adminKey: Any = None  # Must equal ADMIN_SECRET_KEY

class ConfirmPaymentOut(BaseModel):
    """
    emailSent/emailError report mail delivery separately: the payment is
    confirmed and the code issued even when the mail failed.
    """
    success: bool = True
    code: str
    email: str
    emailSent: bool
    emailError: str = ""

class OrderStatusOut(BaseModel):
    success: bool = True
    status: str
    paidAt: Optional[str] = None

class OrderItem(BaseModel):
    """
    Order as shown on the admin payment desk.
    """
    id: str
    email: str
    planId: str
    planName: str
    planPeriod: str
    amount: str  # Decimal rendered as string, e.g. "3.00"
    amountText: str  # e.g. "¥3.00"
    currency: str
    paymentMethod: str
    status: str
    statusText: str  # Localized label, e.g. "待支付"
    createdAt: str
    paidAt: Optional[str] = None
    redemptionCode: Optional[str] = None

class OrderListOut(BaseModel):
    success: bool = True
    orders: List[OrderItem]

class CancelOrderOut(BaseModel):
    success: bool = True
    message: str
