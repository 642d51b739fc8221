"""
Conversation Service

Roster, history and send on behalf of one authenticated user. Works on plain
identifiers and payloads; the HTTP routers are thin adapters around it.
"""
import logging

from app.config import settings
from app.core.errors import NotFound, ValidationError
from app.models.message import Message
from app.models.user import User
from .blob_base import BlobStore, parse_data_uri, upload_attachment
from .credential_store import CredentialStore
from .message_store import MessageStore

logger = logging.getLogger("uvicorn.error")


class ConversationService:
    def __init__(self, me: User, credentials: CredentialStore, messages: MessageStore, blob_store: BlobStore):
        self.me = me
        self.credentials = credentials
        self.messages = messages
        self.blob_store = blob_store

    async def get_roster(self) -> list[User]:
        """Every other registered user."""
        return await self.credentials.list_excluding(self.me.id)

    async def _require_user(self, user_id) -> User:
        other = await self.credentials.find_by_id(user_id)
        if other is None:
            raise NotFound()
        return other

    async def get_history(self, other_user_id) -> list[Message]:
        other = await self._require_user(other_user_id)
        return await self.messages.list_conversation(self.me.id, other.id)

    async def send(self, other_user_id, text: str | None, image: str | None = None) -> Message:
        """
        Send a message, uploading the attached image first.

        Nothing is persisted when the upload fails.

        Raises:
            ValidationError: no receiver, no text and no image, or a malformed image
            NotFound: receiver does not exist
            AttachmentUploadFailed: blob store failed or timed out
        """
        if not str(other_user_id or "").strip():
            raise ValidationError("receiverId is required")
        if not (text or "").strip() and not image:
            raise ValidationError("Message must contain text or an image")
        blob = parse_data_uri(image) if image else None
        receiver = await self._require_user(other_user_id)

        image_url = None
        if blob is not None:
            image_url = await upload_attachment(self.blob_store, blob, settings.blob_upload_timeout)

        message = await self.messages.create(self.me.id, receiver.id, text, image_url)
        logger.info("[message] %s -> %s id=%s image=%s", self.me.id, receiver.id, message.id, bool(image_url))
        return message
