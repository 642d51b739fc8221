"""
Blob Store Factory

Uses Cloudinary when its credentials are configured, local disk otherwise.
"""
import logging

from .blob_base import BlobStore
from .blob_cloudinary import CloudinaryBlobStore
from .blob_local import LocalBlobStore

logger = logging.getLogger("uvicorn.error")

_blob_store: BlobStore | None = None


def get_blob_store() -> BlobStore:
    """
    Get the configured blob store (created once per process)

    Note:
    - Set CLOUDINARY_CLOUD_NAME / CLOUDINARY_API_KEY / CLOUDINARY_API_SECRET in .env
      to host images on Cloudinary
    """
    global _blob_store
    if _blob_store is None:
        cloudinary = CloudinaryBlobStore()
        _blob_store = cloudinary if cloudinary.is_available() else LocalBlobStore()
        logger.info("[blob] Using %s", _blob_store.name)
    return _blob_store
