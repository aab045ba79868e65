"""
Firebase Storage client (REST API over requests).

An upload is two steps: the transfer (POST the bytes under an object name)
and the URL resolution (read the object metadata back and build the
token-bearing download URL). Failures carry a provider error code in the
'storage/<reason>' form.
"""
import logging
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

import requests

from core.security import mask_credentials

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

STORAGE_BASE_URL = "https://firebasestorage.googleapis.com/v0/b"


class StorageError(Exception):
    """A storage operation failed; code follows the 'storage/<reason>' form."""

    def __init__(self, code: str, message: str = ""):
        self.code = code
        super().__init__(message or code)

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class StorageConfigError(StorageError):
    """Storage is not configured or the configuration is malformed."""

    def __init__(self, message: str):
        super().__init__("storage/invalid-configuration", message)


_STATUS_CODES = {
    400: "storage/invalid-argument",
    401: "storage/unauthenticated",
    403: "storage/unauthorized",
    404: "storage/object-not-found",
    409: "storage/conflict",
    412: "storage/invalid-checksum",
    429: "storage/quota-exceeded",
}


def error_code_for_status(status: int) -> str:
    if status in _STATUS_CODES:
        return _STATUS_CODES[status]
    if status >= 500:
        return "storage/server-error"
    return "storage/unknown"


class _ProgressReader:
    """
    File-like wrapper that reports how much of the body has been read.

    requests streams objects with read() and uses __len__ for Content-Length.
    """

    def __init__(self, data: bytes, on_progress: Optional[ProgressCallback] = None):
        self._data = data
        self._offset = 0
        self._on_progress = on_progress

    def __len__(self) -> int:
        return len(self._data)

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            size = len(self._data) - self._offset
        chunk = self._data[self._offset:self._offset + size]
        self._offset += len(chunk)
        if chunk and self._on_progress:
            self._on_progress(self._offset / len(self._data) * 100)
        return chunk


class FirebaseStorage:
    """Minimal Firebase Storage REST client."""

    def __init__(self, bucket: str, api_key: str = "", project_id: str = "",
                 timeout: float = 60.0, session: requests.Session = None):
        self.bucket = (bucket or "").strip()
        self.api_key = api_key
        self.project_id = project_id
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings) -> "FirebaseStorage":
        return cls(
            bucket=settings.firebase_storage_bucket,
            api_key=settings.firebase_api_key,
            project_id=settings.firebase_project_id,
        )

    def is_configured(self) -> bool:
        """API key, project id and bucket are all present."""
        return all([self.api_key, self.project_id, self.bucket])

    def check_bucket(self) -> bool:
        """Reject bucket names with commas or spaces."""
        if not self.bucket:
            logger.error("Missing storage bucket configuration")
            return False
        if "," in self.bucket:
            logger.error("Storage bucket contains commas which will cause errors: %s", self.bucket)
            return False
        if " " in self.bucket:
            logger.error("Storage bucket contains spaces which can cause errors: %s", self.bucket)
            return False
        return True

    def validate(self):
        """
        Raises:
            StorageConfigError: if storage cannot be used as configured
        """
        if not self.is_configured():
            logger.error("Firebase not configured (api key: %s, project id: %s, bucket: %s)",
                         bool(self.api_key), bool(self.project_id), bool(self.bucket))
            raise StorageConfigError(
                "Firebase is not properly configured. Please check your environment variables.")
        if not self.check_bucket():
            raise StorageConfigError("Firebase storage bucket is malformed.")

    @property
    def objects_url(self) -> str:
        return f"{STORAGE_BASE_URL}/{self.bucket}/o"

    def object_url(self, path: str) -> str:
        return f"{self.objects_url}/{quote(path, safe='')}"

    def _params(self, **extra) -> Dict[str, Any]:
        params = dict(extra)
        if self.api_key:
            params["key"] = self.api_key
        return params

    def _send(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StorageError("storage/network-error", mask_credentials(str(e))) from e

        if not response.ok:
            code = error_code_for_status(response.status_code)
            message = response.text[:300] if response.text else response.reason
            raise StorageError(code, mask_credentials(message))

        try:
            return response.json()
        except ValueError as e:
            raise StorageError("storage/unknown", "Invalid metadata response") from e

    def put_object(self, path: str, data: bytes, content_type: str = "application/octet-stream",
                   on_progress: ProgressCallback = None) -> Dict[str, Any]:
        """Transfer bytes to path; returns the object metadata."""
        logger.debug("Uploading %d bytes to %s", len(data), path)
        return self._send(
            "POST",
            self.objects_url,
            params=self._params(name=path),
            data=_ProgressReader(data, on_progress),
            headers={"Content-Type": content_type or "application/octet-stream"},
        )

    def get_download_url(self, path: str) -> str:
        """Resolve the public download URL of an uploaded object."""
        metadata = self._send("GET", self.object_url(path), params=self._params())
        tokens = str(metadata.get("downloadTokens") or "").strip()
        if not tokens:
            raise StorageError("storage/no-download-token", f"No download token for {path}")
        token = tokens.split(",")[0]
        return f"{self.object_url(path)}?alt=media&token={token}"
