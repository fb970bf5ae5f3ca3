"""
Local-disk blob storage for application attachments.

Files are written under the configured upload directory with a timestamped,
sanitized filename and served back by the static mount in main.py.
"""
import logging
import os
import re
import time
from dataclasses import dataclass

from ..config.settings import get_settings
from ..exceptions import UploadError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


@dataclass(frozen=True)
class StoredBlob:
    filename: str
    url: str


def sanitize_filename(original_filename: str) -> str:
    """Replace anything outside [a-zA-Z0-9._-] so the name is safe on disk and in URLs."""
    name = os.path.basename((original_filename or "").replace("\\", "/"))
    safe = _UNSAFE_CHARS.sub("_", name)
    return safe or "upload"


class LocalBlobStore:
    def __init__(self, directory: str, url_prefix: str = "/uploads", max_size: int = 10 * 1024 * 1024):
        self.directory = directory
        self.url_prefix = url_prefix.rstrip("/")
        self.max_size = max_size

    def store(self, data: bytes, original_filename: str) -> StoredBlob:
        if len(data) > self.max_size:
            raise UploadError(
                f"File exceeds the maximum upload size of {self.max_size // (1024 * 1024)} MB"
            )

        filename = f"{int(time.time() * 1000)}-{sanitize_filename(original_filename)}"
        path = os.path.join(self.directory, filename)
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(path, "wb") as fh:
                fh.write(data)
        except OSError as e:
            logger.error("Failed to write upload %s: %s", path, e)
            raise UploadError("Failed to store uploaded file", status_code=500) from e

        logger.info("Stored upload %s (%d bytes)", filename, len(data))
        return StoredBlob(filename=filename, url=f"{self.url_prefix}/{filename}")


def get_blob_store() -> LocalBlobStore:
    settings = get_settings()
    return LocalBlobStore(
        directory=settings.upload_directory,
        url_prefix=settings.upload_url_prefix,
        max_size=settings.max_file_size,
    )
