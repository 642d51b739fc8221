# app/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request models for signup/login/profile and the public user shape.
"""
import datetime as dt

from pydantic import BaseModel

class SignupRequest(BaseModel):
    """
    Request model for signup.
    Fields are optional here so missing values reach the credential store's
    own validation and come back as VALIDATION_ERROR.
    """
    fullName: str | None = None  # Display name
    email: str | None = None  # Login email (unique)
    password: str | None = None  # Plain text, hashed server-side

class LoginRequest(BaseModel):
    """Request model for login."""
    email: str | None = None
    password: str | None = None

class ProfileUpdateRequest(BaseModel):
    """Request model for avatar updates."""
    profilePic: str | None = None  # base64 image data URI

class ChangePasswordRequest(BaseModel):
    currentPassword: str | None = None
    newPassword: str | None = None

class UserOut(BaseModel):
    """
    Public user representation.
    Never carries the password hash.
    """
    id: str  # User unique identifier
    email: str  # Login email
    fullName: str  # Display name
    profilePic: str = ""  # Avatar URL ("" = client default avatar)
    createdAt: str | None = None  # ISO timestamp
    updatedAt: str | None = None  # ISO timestamp

def iso(value: dt.datetime | None) -> str | None:
    """UTC ISO-8601 with a trailing Z."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")

def user_to_dict(u) -> dict:
    """
    Convert a User model instance to its API representation.
    """
    return UserOut(
        id=str(u.id),
        email=u.email,
        fullName=u.full_name,
        profilePic=u.profile_pic or "",
        createdAt=iso(u.created_at),
        updatedAt=iso(u.updated_at),
    ).model_dump()
