# app/api/v1/deps.py
from fastapi import Depends, Request

from app.config import settings
from app.core.security import authenticate
from app.models.user import User
from app.services.blob_base import BlobStore
from app.services.blob_factory import get_blob_store
from app.services.conversation import ConversationService
from app.services.credential_store import CredentialStore
from app.services.message_store import MessageStore

def blob_store_dependency() -> BlobStore:
    """
    FastAPI dependency providing the configured blob store.
    Tests replace it through ``app.dependency_overrides``.
    """
    return get_blob_store()

def get_credential_store(blob_store: BlobStore = Depends(blob_store_dependency)) -> CredentialStore:
    return CredentialStore(blob_store)

def get_message_store() -> MessageStore:
    return MessageStore()

async def get_current_user(
    request: Request,
    credentials: CredentialStore = Depends(get_credential_store),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Reads the HttpOnly session cookie and hands it to the auth gate.

    Raises:
        Unauthenticated (401): no cookie, bad signature, expired token,
            or the user behind the token no longer exists

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": str(user.id)}
    """
    token = request.cookies.get(settings.session_cookie_name)
    return await authenticate(token, credentials)

def get_conversation_service(
    user: User = Depends(get_current_user),
    credentials: CredentialStore = Depends(get_credential_store),
    messages: MessageStore = Depends(get_message_store),
    blob_store: BlobStore = Depends(blob_store_dependency),
) -> ConversationService:
    """Conversation service bound to the authenticated caller."""
    return ConversationService(user, credentials, messages, blob_store)
