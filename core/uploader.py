"""
Attachment uploads with a fixed retry policy.

Each attempt runs the transfer and then the download URL resolution; if
either step fails the whole upload is re-run after a fixed delay, up to
max_attempts. The object path is generated once so every attempt writes the
same object.
"""
import logging
import mimetypes
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from core.storage import FirebaseStorage, StorageError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 1.0

DEFAULT_ALLOWED_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/pdf",
    "text/plain",
)


class UploadError(Exception):
    """An upload could not be completed."""

    def __init__(self, message: str, attempts: int = 0, code: Optional[str] = None):
        self.attempts = attempts
        self.code = code
        super().__init__(message)


@dataclass
class UploadResult:
    url: str
    path: str
    file_name: str
    content_type: str


def build_object_path(folder: str, file_name: str) -> str:
    """'{folder}/{uuid}.{ext}', ext being whatever follows the last dot."""
    extension = file_name.rsplit(".", 1)[-1] if file_name else ""
    unique_name = f"{uuid.uuid4()}.{extension}"
    folder = folder.strip("/")
    return f"{folder}/{unique_name}" if folder else unique_name


def upload_file(
    data: bytes,
    file_name: str,
    folder: str,
    on_progress: Callable[[float], None] = None,
    content_type: str = None,
    storage: FirebaseStorage = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> UploadResult:
    """
    Upload data to object storage and return its download URL.

    Args:
        data: File contents
        file_name: Original file name (used for the extension and content type)
        folder: Destination folder, e.g. "screenshots"
        on_progress: Called with a 0-100 percentage while bytes are sent
        content_type: MIME type; guessed from file_name when omitted
        storage: Storage client (built from settings when omitted)
        max_attempts: Total attempts before giving up
        retry_delay: Fixed delay between attempts, in seconds
        sleep: Delay function, replaceable in tests

    Returns:
        UploadResult with the download URL and object path

    Raises:
        UploadError: no data, or every attempt failed
        StorageConfigError: storage is not configured correctly
    """
    if not data:
        logger.error("No file provided")
        raise UploadError("No file provided")
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    if storage is None:
        from config.settings import load_settings
        storage = FirebaseStorage.from_settings(load_settings())
    storage.validate()

    content_type = content_type or mimetypes.guess_type(file_name)[0] or "application/octet-stream"
    path = build_object_path(folder, file_name)
    unique_name = path.rsplit("/", 1)[-1]
    logger.info("Starting upload of %s (%d bytes) to %s", file_name, len(data), path)

    last_error: Optional[StorageError] = None
    for attempt in range(1, max_attempts + 1):
        logger.debug("Upload attempt %d of %d", attempt, max_attempts)
        try:
            storage.put_object(path, data, content_type, on_progress)
            url = storage.get_download_url(path)
            if not url:
                raise StorageError("storage/no-download-url", "Download URL is empty")
        except StorageError as e:
            last_error = e
            logger.error("Upload attempt %d of %d failed, error code: %s, message: %s",
                         attempt, max_attempts, e.code, e)
            if attempt < max_attempts:
                logger.info("Will retry in %s seconds (attempt %d of %d)",
                            retry_delay, attempt + 1, max_attempts)
                sleep(retry_delay)
            continue

        logger.info("Upload completed successfully: %s", path)
        return UploadResult(url=url, path=path, file_name=unique_name, content_type=content_type)

    code = last_error.code if last_error else "storage/unknown"
    raise UploadError(
        f"Upload failed after {max_attempts} attempts (last error: {code})",
        attempts=max_attempts,
        code=code,
    ) from last_error


def validate_file(file_name: str, content_type: str, size: int,
                  allowed_types: Sequence[str] = DEFAULT_ALLOWED_TYPES,
                  max_size_mb: float = 5) -> Optional[str]:
    """Return an error message if the file may not be uploaded, else None."""
    if not file_name or size <= 0:
        return "No file provided"
    if allowed_types and content_type not in allowed_types:
        return f"Invalid file type. Allowed types: {', '.join(allowed_types)}"
    if size / (1024 * 1024) > max_size_mb:
        return f"File size exceeds the maximum limit of {max_size_mb:g}MB"
    return None


def format_file_size(size: int) -> str:
    """Human readable size, e.g. 1536 -> '1.5 KB'."""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    i = 0
    while size >= 1024 ** (i + 1) and i < len(units) - 1:
        i += 1
    value = round(size / 1024 ** i, 2)
    return f"{value:g} {units[i]}"
