"""
Local photo blob store - saves complaint photos under UPLOAD_DIR and serves
them back as /uploads/<name> URLs.
"""
import os
import time
import uuid
from typing import Optional

from fastapi import UploadFile

from civicresolve.config import get_settings
from civicresolve.errors import InvalidInputError
from civicresolve.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

URL_PREFIX = "/uploads/"

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic"}


class LocalBlobStore:
    def __init__(self, upload_dir: Optional[str] = None, max_size: Optional[int] = None):
        self.upload_dir = upload_dir or settings.UPLOAD_DIR
        self.max_size = max_size or settings.MAX_UPLOAD_SIZE

    def _path_for(self, url: str) -> Optional[str]:
        """Resolve a /uploads/ URL to a file inside upload_dir, else None"""
        if not url or not url.startswith(URL_PREFIX):
            return None
        name = url[len(URL_PREFIX):]
        path = os.path.realpath(os.path.join(self.upload_dir, name))
        base = os.path.realpath(self.upload_dir)
        if not path.startswith(base + os.sep):
            return None
        return path

    async def save(self, file: UploadFile) -> str:
        """Store an uploaded image and return its URL"""
        ext = os.path.splitext(file.filename or "")[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise InvalidInputError(f"File type '{ext or 'unknown'}' not allowed for photos")

        content = await file.read()
        if len(content) > self.max_size:
            raise InvalidInputError(
                f"Photo too large. Maximum size: {self.max_size // (1024 * 1024)}MB"
            )

        os.makedirs(self.upload_dir, exist_ok=True)
        name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"
        with open(os.path.join(self.upload_dir, name), "wb") as f:
            f.write(content)

        logger.info(f"Stored photo '{file.filename}' as {name} ({len(content)} bytes)")
        return f"{URL_PREFIX}{name}"

    def delete(self, url: Optional[str]) -> None:
        """Fire-and-forget removal; remote URLs and missing files are ignored"""
        path = self._path_for(url) if url else None
        if not path:
            return
        try:
            os.remove(path)
            logger.info(f"Removed photo {url}")
        except FileNotFoundError:
            logger.warning(f"Photo already removed: {url}")
        except OSError as e:
            logger.warning(f"Failed to remove photo {url}: {e}")
