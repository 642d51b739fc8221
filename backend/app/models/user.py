# app/models/user.py
"""
Database model for users.
Represents a chat account: login email, display name, hashed password and
avatar URL.
"""
import uuid
from tortoise import fields, models

EMAIL_MAX_LENGTH = 256
FULL_NAME_MAX_LENGTH = 128


class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many sent Messages (via related_name="sent_messages")
    - Has many received Messages (via related_name="received_messages")

    Security:
    - Password is stored as an argon2 hash (never plain text) and is never
      serialized to any response
    - Email must be unique across all users (enforced by the unique index)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    email = fields.CharField(
        max_length=EMAIL_MAX_LENGTH,
        unique=True,
        index=True
    )  # Login email (must be unique, indexed for fast lookups)
    full_name = fields.CharField(max_length=FULL_NAME_MAX_LENGTH)  # Display name shown in the roster
    password_hash = fields.CharField(max_length=255)  # Hashed password (argon2)
    profile_pic = fields.CharField(max_length=1024, default="")  # Avatar URL; empty means client default avatar
    created_at = fields.DatetimeField(auto_now_add=True)  # Set on creation
    updated_at = fields.DatetimeField(auto_now=True)  # Refreshed on every save

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
        ordering = ["created_at"]
