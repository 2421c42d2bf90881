# wordmate/api/v1/routers/codes.py
from fastapi import APIRouter, Depends

from wordmate.api.v1.deps import get_current_user, get_redemption_service
from wordmate.core.timeutil import isoformat_or_none
from wordmate.models.user import User
from wordmate.schemas.redemption import RedeemIn, RedeemOut
from wordmate.services.redemption import RedemptionService

router = APIRouter(prefix="/codes", tags=["codes"])


@router.post("/verify", response_model=RedeemOut)
async def redeem_code(
    body: RedeemIn,
    user: User = Depends(get_current_user),
    redemption: RedemptionService = Depends(get_redemption_service),
):
    """
    Redeem a code for the logged-in user and activate the matching plan.

    Any previously active subscription of the user is cancelled.

    Raises (as {"detail": {"code", "message"}}):
        400 CODE_REQUIRED / CODE_USED / CODE_EXPIRED
        401 AUTH_REQUIRED (plain detail string)
        404 CODE_INVALID
        500 SERVER_CONFIG_ERROR / SUBSCRIPTION_CREATE_FAILED
    """
    result = await redemption.redeem(body.code, str(user.id))
    return {
        "success": True,
        "message": "兑换成功！会员已激活",
        "tier": result.tier,
        "planName": result.plan_name,
        "endDate": isoformat_or_none(result.end_date),
    }
