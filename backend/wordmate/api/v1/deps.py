# wordmate/api/v1/deps.py
from fastapi import Depends, Header, HTTPException, Request, status
from wordmate.core.security import decode_access_token
from wordmate.models.user import User
from wordmate.services.code_store import CodeStore, get_code_store
from wordmate.services.orders import OrderService
from wordmate.services.redemption import RedemptionService

async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
):
    """
    FastAPI dependency to get the current authenticated user.

    This dependency extracts and validates the JWT token from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (accessToken) - fallback method

    Raises:
        HTTPException (401): If no token is provided (AUTH_REQUIRED)
        HTTPException (401): If token is invalid or expired (AUTH_INVALID_TOKEN)
        HTTPException (401): If user not found in database (AUTH_USER_NOT_FOUND)
    """
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie: accessToken
    if not token:
        token = request.cookies.get("accessToken")

    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")

    try:
        payload = decode_access_token(token)
        user_id: str = payload.get("sub")
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_USER_NOT_FOUND")
    return user

def code_store_dependency() -> CodeStore:
    """Code store for the configured backend (CODE_STORE_BACKEND)."""
    return get_code_store()

def get_order_service(store: CodeStore = Depends(code_store_dependency)) -> OrderService:
    return OrderService(store)

def get_redemption_service(store: CodeStore = Depends(code_store_dependency)) -> RedemptionService:
    return RedemptionService(store)
