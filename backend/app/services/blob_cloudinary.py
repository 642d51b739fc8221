"""
Cloudinary Blob Store Adapter

Signed upload through the Cloudinary REST API.
"""
import hashlib
import logging
import time

import httpx

from .blob_base import BlobStore, BlobStoreError, ImageBlob
from ..config import settings

logger = logging.getLogger("uvicorn.error")


def sign_params(params: dict, api_secret: str) -> str:
    """
    Cloudinary request signature: sha1 of the alphabetically sorted
    ``key=value`` pairs joined by ``&`` with the API secret appended.
    """
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


class CloudinaryBlobStore(BlobStore):
    """Cloudinary image hosting"""

    def __init__(self):
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret
        self.folder = settings.cloudinary_folder
        self.api_base = settings.cloudinary_api_base
        self.timeout = settings.blob_upload_timeout

    @property
    def name(self) -> str:
        return "Cloudinary"

    def is_available(self) -> bool:
        """Check if all credentials are configured"""
        return bool(self.cloud_name and self.api_key and self.api_secret)

    @property
    def upload_url(self) -> str:
        return f"{self.api_base}/{self.cloud_name}/image/upload"

    async def upload(self, blob: ImageBlob) -> str:
        if not self.is_available():
            raise BlobStoreError(f"{self.name}: credentials not configured")

        params = {"folder": self.folder, "timestamp": str(int(time.time()))}
        data = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }
        files = {"file": (f"upload.{blob.extension}", blob.data, blob.mime_type)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.upload_url, data=data, files=files)
                resp.raise_for_status()
                result = resp.json()
        except httpx.HTTPError as e:
            raise BlobStoreError(f"{self.name}: upload failed ({e.__class__.__name__})") from e
        except ValueError as e:
            raise BlobStoreError(f"{self.name}: unreadable response") from e

        url = result.get("secure_url") or result.get("url")
        if not url:
            raise BlobStoreError(f"{self.name}: response has no URL")
        logger.info("[blob] uploaded %s to %s", blob, self.name)
        return url
