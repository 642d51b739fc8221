"""
Blob Store Abstract Interface

Provides a unified interface for image hosting providers (Cloudinary / local disk).
A blob store accepts image bytes and returns a durable URL.
"""
import asyncio
import base64
import binascii
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.core.errors import AttachmentUploadFailed, ValidationError

logger = logging.getLogger("uvicorn.error")

# Raster formats only, no SVG
_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>image/(?:png|jpe?g|gif|webp|bmp));base64,(?P<payload>.*)$",
    re.DOTALL | re.IGNORECASE,
)

# mime type -> file extension
EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/bmp": "bmp",
}


class BlobStoreError(Exception):
    """Raised by adapters when the provider rejects or cannot complete an upload."""


@dataclass
class ImageBlob:
    """Decoded image payload ready for upload"""
    mime_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return EXTENSIONS.get(self.mime_type.lower(), "bin")

    def __repr__(self):
        return f"ImageBlob(mime_type='{self.mime_type}', size={len(self.data)})"


def parse_data_uri(value: str) -> ImageBlob:
    """
    Decode a base64 image data URI (``data:image/png;base64,....``).

    Raises:
    - ValidationError: not a data URI, not a raster image, bad base64, or empty payload
    """
    match = _DATA_URI_RE.match((value or "").strip())
    if not match:
        raise ValidationError("Image must be a base64 image data URI")
    try:
        data = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image data is not valid base64")
    if not data:
        raise ValidationError("Image data is empty")
    return ImageBlob(mime_type=match.group("mime").lower(), data=data)


class BlobStore(ABC):
    """Blob Store Abstract Base Class"""

    @abstractmethod
    async def upload(self, blob: ImageBlob) -> str:
        """
        Store an image

        Returns:
        - str: Public URL of the stored image

        Raises:
        - BlobStoreError: The provider failed
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the store is configured"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Store name (e.g., "Cloudinary")"""
        pass


async def upload_attachment(store: BlobStore, blob: ImageBlob, timeout: float) -> str:
    """
    Upload through ``store`` with a hard deadline.

    Provider errors and timeouts become AttachmentUploadFailed so the caller
    persists nothing.
    """
    try:
        return await asyncio.wait_for(store.upload(blob), timeout=timeout)
    except BlobStoreError as e:
        logger.warning("[blob] %s upload failed: %s", store.name, e)
        raise AttachmentUploadFailed()
    except asyncio.TimeoutError:
        logger.warning("[blob] %s upload timed out after %ss", store.name, timeout)
        raise AttachmentUploadFailed("Image upload timed out")
