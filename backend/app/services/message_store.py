"""
Message Store

Owns the Message lifecycle: append-only creation and conversation retrieval.
Messages are never updated or deleted.
"""
import datetime as dt

from tortoise import timezone

from app.core.errors import ValidationError
from app.models.message import Message, pair_key

_TICK = dt.timedelta(microseconds=1)


def as_utc(value: dt.datetime) -> dt.datetime:
    """Stored datetimes may come back naive depending on the driver; treat those as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


class MessageStore:
    """Message records backed by the Tortoise ``messages`` table."""

    async def _next_created_at(self) -> dt.datetime:
        # Strictly after the newest stored message, even within one clock tick
        now = as_utc(timezone.now())
        latest = await Message.all().order_by("-created_at").first()
        if latest is not None and as_utc(latest.created_at) >= now:
            return as_utc(latest.created_at) + _TICK
        return now

    async def create(self, sender_id, receiver_id, text: str | None, image_url: str | None = None) -> Message:
        """
        Persist one message.

        Raises:
            ValidationError: neither text nor image present
        """
        text = text or ""
        if not text.strip() and not image_url:
            raise ValidationError("Message must contain text or an image")
        return await Message.create(
            sender_id=sender_id,
            receiver_id=receiver_id,
            pair_key=pair_key(sender_id, receiver_id),
            text=text,
            image=image_url or None,
            created_at=await self._next_created_at(),
        )

    async def list_conversation(self, user_a, user_b) -> list[Message]:
        """
        Full history between two users in either direction, oldest first,
        ties broken by id. Symmetric in its arguments.
        """
        return await Message.filter(pair_key=pair_key(user_a, user_b)).order_by("created_at", "id")
