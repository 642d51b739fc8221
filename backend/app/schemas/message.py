# app/schemas/message.py
"""
Pydantic schemas for messaging endpoints.
"""
from pydantic import BaseModel

from .auth import iso

class SendMessageRequest(BaseModel):
    """
    Request model for sending a message.
    At least one of text / image must be present.
    """
    receiverId: str | None = None  # Recipient user id
    text: str | None = None  # Message text
    image: str | None = None  # base64 image data URI

class RosterEntry(BaseModel):
    """One row of the sidebar roster."""
    id: str
    fullName: str
    profilePic: str = ""

class MessageOut(BaseModel):
    id: str
    senderId: str
    receiverId: str
    text: str
    image: str | None = None  # Hosted image URL
    createdAt: str
    updatedAt: str | None = None

def roster_entry(u) -> dict:
    return RosterEntry(id=str(u.id), fullName=u.full_name, profilePic=u.profile_pic or "").model_dump()

def message_to_dict(m) -> dict:
    return MessageOut(
        id=str(m.id),
        senderId=str(m.sender_id),
        receiverId=str(m.receiver_id),
        text=m.text,
        image=m.image,
        createdAt=iso(m.created_at),
        updatedAt=iso(m.updated_at),
    ).model_dump()
