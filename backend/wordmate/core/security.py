# wordmate/core/security.py
"""
Credentials: learner passwords (Argon2), access tokens (HS256 JWT) and the
shared secret of the manual payment desk.
"""
import hmac
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext

from wordmate.config import settings

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

JWT_SECRET = settings.jwt_secret
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes
JWT_ALG = "HS256"

def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

def create_access_token(user_id: str, role: str) -> str:
    """
    Token for the login response and the accessToken cookie.

    Claims: sub (user id), role, iat, exp.
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "role": role,
        "iat": now,
        "exp": now + dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)

def decode_access_token(token: str) -> dict:
    """
    Raises:
        jwt.ExpiredSignatureError: token has expired
        jwt.InvalidTokenError: token is invalid or malformed
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])

def verify_admin_key(candidate) -> bool:
    """
    Compare a caller-supplied admin key with ADMIN_SECRET_KEY in constant time.

    An unset secret never matches, so a missing key on both sides is not a pass.
    """
    secret = settings.admin_secret_key
    if not secret or not isinstance(candidate, str) or not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), secret.encode("utf-8"))
