"""
Redemption code mail delivery through Resend.

Without RESEND_API_KEY the dispatcher runs in development mode: the mail is
only logged and the send counts as successful. Provider errors are captured
into EmailResult and never raised, so a failed mail cannot undo a confirmed
payment.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import resend

from wordmate.config import settings
from wordmate.services.catalog import format_amount

logger = logging.getLogger("uvicorn.error")

SUBJECT = "您的兑换码已发送"


@dataclass
class EmailResult:
    sent: bool
    error: Optional[str] = None


def build_redemption_email(code: str, order_id: str, plan_name: str | None, amount) -> str:
    """HTML body for the code mail."""
    plan_line = f'<p style="margin: 5px 0; color: #666;"><strong>套餐：</strong>{plan_name}</p>' if plan_name else ""
    amount_line = (
        f'<p style="margin: 5px 0; color: #666;"><strong>金额：</strong>{format_amount(amount)}</p>'
        if amount is not None else ""
    )
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; background: #f5f5f5;">
      <div style="background: white; border-radius: 12px; padding: 40px; text-align: center;">
        <h2 style="color: #333; margin: 0 0 10px;">支付成功！</h2>
        <p style="color: #666; margin: 0 0 30px;">感谢您的购买，这是您的兑换码：</p>
        <div style="background: #667eea; padding: 20px; border-radius: 8px; margin: 20px 0;">
          <code style="font-size: 28px; letter-spacing: 4px; color: white; font-weight: bold;">{code}</code>
        </div>
        <div style="background: #f9f9f9; padding: 20px; border-radius: 8px; margin: 20px 0; text-align: left;">
          {plan_line}
          {amount_line}
          <p style="margin: 5px 0; color: #666;"><strong>订单号：</strong>{order_id[:8]}...</p>
        </div>
        <p style="color: #999; font-size: 14px; margin: 30px 0 0;">请妥善保管您的兑换码。如有问题请联系客服。</p>
        <p style="color: #999; font-size: 12px; margin-top: 30px;">此邮件由系统自动发送，请勿回复</p>
      </div>
    </div>
    """


async def send_redemption_email(
    to: str,
    code: str,
    order_id: str,
    plan_name: str | None = None,
    amount=None,
) -> EmailResult:
    """
    Send the redemption code to the purchaser.

    Returns:
        EmailResult(sent=True) on delivery or in development mode,
        EmailResult(sent=False, error=...) when the provider rejects or fails.
    """
    if not settings.resend_api_key:
        logger.warning("[mail] RESEND_API_KEY not configured, skipping send (mock) to=%s code=%s", to, code)
        return EmailResult(sent=True)

    params = {
        "from": settings.resend_from_email,
        "to": [to],
        "subject": SUBJECT,
        "html": build_redemption_email(code, order_id, plan_name, amount),
    }

    resend.api_key = settings.resend_api_key
    try:
        # The SDK is blocking; keep the event loop free
        response = await asyncio.to_thread(resend.Emails.send, params)
    except Exception as e:
        logger.exception("[mail] send failed to=%s order=%s", to, order_id)
        return EmailResult(sent=False, error=str(e) or "邮件发送失败")

    logger.info("[mail] code sent to=%s order=%s id=%s", to, order_id, (response or {}).get("id"))
    return EmailResult(sent=True)
