"""
Object storage for post images.

Objects live in a single public-read bucket; the bucket is a directory on disk
that the app serves as static files, so the public URL of an object is known
as soon as the upload succeeds.
"""
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import aiofiles
import aiofiles.os
import logging

from socialfeed.config import settings
from socialfeed.utils.exceptions import InvalidImageError, StorageError

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    filename: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()


class StorageService:
    def __init__(
        self,
        root: Optional[str] = None,
        bucket: Optional[str] = None,
        public_url: Optional[str] = None
    ):
        self.bucket = bucket or settings.STORAGE_BUCKET
        self.bucket_dir = Path(root or settings.STORAGE_DIR) / self.bucket
        self.base_url = (public_url or settings.STORAGE_PUBLIC_URL).rstrip("/")

    def validate(self, upload: ImageUpload) -> None:
        """Check the upload is an allowed, non-empty image within the size limit"""
        if upload.extension not in settings.ALLOWED_IMAGE_EXTENSIONS:
            raise InvalidImageError(f"File type {upload.extension or '(none)'} is not allowed")

        if upload.content_type and not upload.content_type.startswith("image/"):
            raise InvalidImageError(f"Content type {upload.content_type} is not an image")

        if not upload.data:
            raise InvalidImageError("Image file is empty")

        if len(upload.data) > settings.MAX_UPLOAD_SIZE:
            raise InvalidImageError("Image exceeds the maximum upload size")

    def object_name(self, user_id: str, upload: ImageUpload, now: Optional[float] = None) -> str:
        """Name derived from the uploader and the current time in milliseconds"""
        millis = int((time.time() if now is None else now) * 1000)
        return f"{user_id}-{millis}{upload.extension}"

    async def upload(self, name: str, data: bytes) -> str:
        """Store a new object; existing objects are never overwritten"""
        try:
            await aiofiles.os.makedirs(self.bucket_dir, exist_ok=True)
            async with aiofiles.open(self.bucket_dir / name, "xb") as out_file:
                await out_file.write(data)
        except FileExistsError as e:
            raise StorageError(f"Object {name} already exists in {self.bucket}") from e
        except OSError as e:
            logger.error(f"Error uploading {name} to {self.bucket}: {e}")
            raise StorageError(f"Upload of {name} failed") from e

        logger.info(f"Uploaded {name} to bucket {self.bucket} ({len(data)} bytes)")
        return name

    def public_url(self, name: str) -> str:
        return f"{self.base_url}/{self.bucket}/{name}"

    async def remove(self, name: str) -> bool:
        """Delete an object; returns False when it did not exist"""
        try:
            await aiofiles.os.remove(self.bucket_dir / name)
            return True
        except FileNotFoundError:
            return False


def get_storage() -> StorageService:
    """Dependency to get the image bucket"""
    return StorageService()
