"""
Services Module

Domain services behind the HTTP routers:
- Credential store: user accounts and passwords
- Message store: append-only direct messages
- Conversation service: roster, history, send
- Blob store: image hosting (Cloudinary or local disk)
"""

from .blob_base import (
    BlobStore,
    BlobStoreError,
    ImageBlob,
    parse_data_uri,
    upload_attachment,
)
from .blob_cloudinary import CloudinaryBlobStore
from .blob_local import LocalBlobStore
from .blob_factory import get_blob_store
from .credential_store import CredentialStore
from .message_store import MessageStore
from .conversation import ConversationService

__all__ = [
    # Blob store
    "BlobStore",
    "BlobStoreError",
    "ImageBlob",
    "parse_data_uri",
    "upload_attachment",
    "CloudinaryBlobStore",
    "LocalBlobStore",
    "get_blob_store",
    # Stores
    "CredentialStore",
    "MessageStore",
    # Orchestration
    "ConversationService",
]
