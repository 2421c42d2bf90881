# wordmate/schemas/redemption.py
"""
Pydantic schemas for redemption code submission.
"""
from pydantic import BaseModel
from typing import Any, Optional

class RedeemIn(BaseModel):
    """
    Request model for code redemption.
    Any case, with or without hyphens: "abcd1234efgh" and "ABCD-1234-EFGH" are the same code.
    """
    code: Any = None  # Validated by the redemption service (CODE_REQUIRED)

class RedeemOut(BaseModel):
    """
    Response model for a successful redemption.
    """
    success: bool = True
    message: str  # User-facing confirmation
    tier: str  # Internal tier, e.g. "premium"
    planName: str  # Display name of the activated plan
    endDate: Optional[str] = None  # ISO timestamp; None means unbounded
