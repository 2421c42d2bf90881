# wordmate/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for registration, login and user information.
"""
from pydantic import BaseModel

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    Contains credentials for authentication.
    """
    username: str  # User login name
    password: str  # User password (plain text, will be hashed server-side)

class RegisterIn(BaseModel):
    """
    Request model for account registration.
    """
    username: str
    email: str | None = None
    password: str

class UserOut(BaseModel):
    """
    User information model returned in authentication responses.
    Contains basic user details without sensitive information.
    """
    id: str  # User unique identifier
    username: str  # User login name
    email: str | None = None
    role: str = "user"  # User role (default: "user", can be "admin")
