"""
Local Disk Blob Store

Writes images under UPLOAD_DIR; app.main serves that directory at /uploads.
"""
import asyncio
import logging
import uuid
from pathlib import Path

from .blob_base import BlobStore, BlobStoreError, ImageBlob
from ..config import settings

logger = logging.getLogger("uvicorn.error")


class LocalBlobStore(BlobStore):
    """Filesystem image storage for development"""

    def __init__(self, upload_dir: str | None = None, public_base_url: str | None = None):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.public_base_url = (public_base_url or settings.public_base_url).rstrip("/")

    @property
    def name(self) -> str:
        return "Local disk"

    def is_available(self) -> bool:
        return True

    def _write(self, filename: str, data: bytes) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / filename).write_bytes(data)

    async def upload(self, blob: ImageBlob) -> str:
        filename = f"{uuid.uuid4().hex}.{blob.extension}"
        try:
            # Disk I/O off the event loop
            await asyncio.to_thread(self._write, filename, blob.data)
        except OSError as e:
            raise BlobStoreError(f"{self.name}: cannot write {filename}") from e
        logger.info("[blob] stored %s as %s", blob, filename)
        return f"{self.public_base_url}/uploads/{filename}"
