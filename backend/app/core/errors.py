# app/core/errors.py
"""
Domain error taxonomy.

Services raise these exceptions; the HTTP layer (see app.main) renders them as
the failure envelope ``{"success": false, "error": {"code", "message"}}`` with
the matching status code. Messages are safe to show to clients.
"""
from fastapi import status


class ChatError(Exception):
    """Base class for every error that is allowed to reach the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(ChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class DuplicateEmail(ChatError):
    status_code = status.HTTP_409_CONFLICT
    code = "EMAIL_EXISTS"
    default_message = "Email already registered"


class InvalidCredentials(ChatError):
    # Same wording for unknown email and wrong password
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class Unauthenticated(ChatError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_REQUIRED"
    default_message = "Unauthorized - authentication required"


class NotFound(ChatError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "User not found"


class AttachmentUploadFailed(ChatError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "ATTACHMENT_UPLOAD_FAILED"
    default_message = "Image upload failed"


class InternalError(ChatError):
    pass
