# app/models/message.py
import uuid
from tortoise import fields, models


def pair_key(user_a, user_b) -> str:
    """Order-independent key for the conversation between two users."""
    return ":".join(sorted((str(user_a), str(user_b))))


class Message(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    sender = fields.ForeignKeyField("models.User", related_name="sent_messages")
    receiver = fields.ForeignKeyField("models.User", related_name="received_messages")
    pair_key = fields.CharField(max_length=80)  # pair_key(sender_id, receiver_id)

    text = fields.TextField()  # "" only when an image is attached
    image = fields.CharField(max_length=1024, null=True)

    # Assigned by MessageStore, strictly increasing; indexed for the newest-message lookup
    created_at = fields.DatetimeField(index=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "messages"
        indexes = (("pair_key", "created_at"),)
