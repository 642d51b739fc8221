# app/api/v1/routers/message.py
from fastapi import APIRouter, Depends, status

from app.api.v1.deps import get_conversation_service
from app.schemas.message import SendMessageRequest, message_to_dict, roster_entry
from app.services.conversation import ConversationService

router = APIRouter(prefix="/message", tags=["message"])

@router.get("/users")
async def list_users(service: ConversationService = Depends(get_conversation_service)):
    """
    Roster for the chat sidebar: every user except the caller.

    Returns:
        dict: success envelope with a list of {id, fullName, profilePic}
    """
    users = await service.get_roster()
    return {"success": True, "data": [roster_entry(u) for u in users]}

@router.post("/send", status_code=status.HTTP_201_CREATED)
async def send_message(
    body: SendMessageRequest,
    service: ConversationService = Depends(get_conversation_service),
):
    """
    Send a text and/or image message to another user.

    The image (base64 data URI) is uploaded to the blob store before the
    message is saved; if the upload fails nothing is saved.

    Error codes:
        - VALIDATION_ERROR (400): no text and no image, or malformed image
        - NOT_FOUND (404): receiverId does not exist
        - ATTACHMENT_UPLOAD_FAILED (502): image host failed
    """
    message = await service.send(body.receiverId, body.text, body.image)
    return {"success": True, "data": message_to_dict(message)}

@router.get("/{user_id}")
async def get_messages(user_id: str, service: ConversationService = Depends(get_conversation_service)):
    """
    Full conversation with ``user_id``, oldest message first.

    Raises:
        NOT_FOUND (404): user_id is not a registered user
    """
    messages = await service.get_history(user_id)
    return {"success": True, "data": [message_to_dict(m) for m in messages]}
