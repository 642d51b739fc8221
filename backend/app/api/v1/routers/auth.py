# app/api/v1/routers/auth.py
import logging

from fastapi import APIRouter, Depends, Response, status

from app.api.v1.deps import get_credential_store, get_current_user
from app.config import settings
from app.core.errors import InvalidCredentials
from app.core.security import create_session_token, session_cookie_params
from app.models.user import User
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    SignupRequest,
    user_to_dict,
)
from app.services.credential_store import CredentialStore

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("uvicorn.error")

def _start_session(response: Response, user: User) -> None:
    """Issue a session token and hand it to the browser as an HttpOnly cookie."""
    token = create_session_token(str(user.id))
    response.set_cookie(value=token, **session_cookie_params())

@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    response: Response,
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Register a new account and log it in.

    Returns:
        dict: success envelope with the new user (no password hash);
        the session cookie is set on the response.

    Error codes:
        - VALIDATION_ERROR (400): missing field, bad email, password < 6 chars
        - EMAIL_EXISTS (409): email already registered
    """
    user = await credentials.create_user(body.email, body.fullName, body.password)
    _start_session(response, user)
    return {"success": True, "data": user_to_dict(user)}

@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Authenticate with email and password and start a session.

    Error codes:
        - AUTH_INVALID_CREDENTIALS (401): unknown email or wrong password
          (same response for both)
    """
    try:
        user = await credentials.verify_credentials(body.email, body.password)
    except InvalidCredentials:
        logger.warning("[auth] rejected login attempt")
        raise
    _start_session(response, user)
    logger.info("[auth] login id=%s", user.id)
    return {"success": True, "data": user_to_dict(user)}

@router.post("/logout")
async def logout(response: Response):
    """
    Log out by clearing the session cookie.

    Note:
        Only the cookie is removed. The token itself stays valid until it
        expires; there is no server-side revocation list.
    """
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        samesite="strict",
        secure=settings.cookie_secure,
    )
    return {"success": True, "data": {"message": "Logged out successfully"}}

@router.get("/check")
async def check(user: User = Depends(get_current_user)):
    """Return the user behind the current session cookie."""
    return {"success": True, "data": user_to_dict(user)}

@router.put("/profile")
async def update_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Replace the current user's avatar.

    Error codes:
        - VALIDATION_ERROR (400): profilePic missing or not an image data URI
        - ATTACHMENT_UPLOAD_FAILED (502): image host failed
    """
    updated = await credentials.update_profile_picture(user.id, body.profilePic)
    return {"success": True, "data": user_to_dict(updated)}

@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Change the current user's password.

    Requires the current password. Existing sessions stay valid.
    """
    await credentials.change_password(user.id, body.currentPassword, body.newPassword)
    return {"success": True, "data": {"ok": True}}
