"""
Credential Store

Owns the User lifecycle: signup, credential checks, lookups, roster listing,
avatar and password updates. Password hashes never leave this layer; callers
serialize users with app.schemas.auth.user_to_dict.
"""
import logging
import re
import uuid

from tortoise.exceptions import IntegrityError

from app.config import settings
from app.core.errors import (
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from app.core.security import burn_password_check, hash_password, verify_password
from app.models.user import EMAIL_MAX_LENGTH, FULL_NAME_MAX_LENGTH, User
from .blob_base import BlobStore, parse_data_uri, upload_attachment

logger = logging.getLogger("uvicorn.error")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def _parse_id(user_id) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(user_id))
    except (ValueError, TypeError, AttributeError):
        return None


def _check_password(password: str | None, field: str = "Password") -> str:
    if not password:
        raise ValidationError(f"{field} is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"{field} must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


class CredentialStore:
    """User records backed by the Tortoise ``users`` table."""

    def __init__(self, blob_store: BlobStore):
        self.blob_store = blob_store

    async def create_user(self, email: str, full_name: str, password: str) -> User:
        """
        Register a new user.

        Raises:
            ValidationError: missing field, malformed or over-long email,
                over-long full name, short password
            DuplicateEmail: email already registered (also when a concurrent
                signup wins the unique index race)
        """
        email = (email or "").strip()
        full_name = (full_name or "").strip()
        if not full_name:
            raise ValidationError("Full name is required")
        if len(full_name) > FULL_NAME_MAX_LENGTH:
            raise ValidationError(f"Full name must be at most {FULL_NAME_MAX_LENGTH} characters")
        if not email:
            raise ValidationError("Email is required")
        if len(email) > EMAIL_MAX_LENGTH:
            raise ValidationError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
        if not EMAIL_RE.match(email):
            raise ValidationError("Invalid email format")
        _check_password(password)

        if await User.filter(email=email).exists():
            raise DuplicateEmail()
        try:
            user = await User.create(
                email=email,
                full_name=full_name,
                password_hash=hash_password(password),
            )
        except IntegrityError:
            raise DuplicateEmail()
        logger.info("[auth] signup id=%s", user.id)
        return user

    async def verify_credentials(self, email: str, password: str) -> User:
        """
        Return the user owning these credentials.

        Unknown email and wrong password raise the same InvalidCredentials.
        """
        email = (email or "").strip()
        # Over-long emails cannot exist in the table
        user = None
        if email and len(email) <= EMAIL_MAX_LENGTH:
            user = await User.get_or_none(email=email)
        if user is None:
            burn_password_check(password or "")
            raise InvalidCredentials()
        if not verify_password(password or "", user.password_hash):
            raise InvalidCredentials()
        return user

    async def find_by_id(self, user_id) -> User | None:
        parsed = _parse_id(user_id)
        if parsed is None:
            return None
        return await User.get_or_none(id=parsed)

    async def list_excluding(self, user_id) -> list[User]:
        """All users except ``user_id``, oldest account first."""
        return await User.exclude(id=user_id).order_by("created_at")

    async def update_profile_picture(self, user_id, image: str) -> User:
        """
        Upload a new avatar and store its URL on the user.

        Raises:
            ValidationError: image is not a base64 image data URI
            NotFound: user does not exist
            AttachmentUploadFailed: the blob store failed or timed out
        """
        if not image:
            raise ValidationError("Profile pic is required")
        blob = parse_data_uri(image)
        user = await self.find_by_id(user_id)
        if user is None:
            raise NotFound()

        user.profile_pic = await upload_attachment(self.blob_store, blob, settings.blob_upload_timeout)
        await user.save()
        return user

    async def change_password(self, user_id, current_password: str, new_password: str) -> User:
        """
        Replace a user's password after re-checking the current one.

        Raises:
            ValidationError: new password missing or too short
            InvalidCredentials: current password does not match
            NotFound: user does not exist
        """
        _check_password(new_password, "New password")
        user = await self.find_by_id(user_id)
        if user is None:
            raise NotFound()
        if not verify_password(current_password or "", user.password_hash):
            raise InvalidCredentials()
        user.password_hash = hash_password(new_password)
        await user.save()
        logger.info("[auth] password changed id=%s", user.id)
        return user
