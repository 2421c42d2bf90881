# wordmate/models/user.py
"""
Database model for users.
Represents a learner account: credentials, profile and role.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many UserSubscriptions (via related_name="subscriptions")
    - Has many SubscriptionHistory rows (via related_name="subscription_history")
    - Has many RedemptionCodes it consumed (via related_name="redeemed_codes")

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Username must be unique across all users
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    username = fields.CharField(
        max_length=256,
        unique=True,
        index=True
    )  # User login name (must be unique, indexed for fast lookups)
    email = fields.CharField(max_length=256, null=True)  # User email address (optional)
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never plain text
    role = fields.CharField(max_length=16, default="user")  # "user" (default) or "admin"
    created_at = fields.DatetimeField(auto_now_add=True)  # Timestamp when account was created

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name
