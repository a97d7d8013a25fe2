"""
Media Storage Service

Persists user uploads so background workers can read them later, and
normalises request inputs by replacing every upload with its durable URL.

Responsibility:
    - Validate upload size (MAX_UPLOAD_SIZE_MB)
    - Store bytes under MEDIA_ROOT/{user_id}/{uuid}_{name}
    - Return the public URL MEDIA_BASE_URL/{user_id}/{uuid}_{name}
    - Walk nested input mappings and swap UploadFile objects for URLs
    - Implements MediaStorageProtocol from Application Layer

Architecture Notes:
    - Infrastructure Layer (file system operations)
    - Local file system only; object storage backends are out of scope
    - Request-scoped upload handles never reach the queue: workers only see
      URLs
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4

from starlette.datastructures import UploadFile

from src.domain.shared.exceptions import UploadTooLargeError

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class MediaStorageService:
    """
    Local media storage for generation inputs.

    Examples:
        >>> storage = MediaStorageService(media_root="/tmp/media",
        ...                               base_url="http://localhost:8000/media")
        >>> storage.save_upload(5, "face.png", b"...")
        'http://localhost:8000/media/5/3fa85f64..._face.png'
    """

    def __init__(
        self,
        media_root: Optional[str] = None,
        base_url: Optional[str] = None,
        max_size_mb: Optional[int] = None,
    ) -> None:
        self.media_root = Path(media_root or os.getenv("MEDIA_ROOT", "/tmp/genrelay/media"))
        self.base_url = (
            base_url or os.getenv("MEDIA_BASE_URL", "http://localhost:8000/media")
        ).rstrip("/")
        self.max_size_bytes = (
            (max_size_mb or int(os.getenv("MAX_UPLOAD_SIZE_MB", "20"))) * 1024 * 1024
        )

    def _validate_size(self, data: bytes) -> bool:
        return len(data) <= self.max_size_bytes

    @staticmethod
    def _safe_filename(filename: str) -> str:
        name = Path(filename or "upload").name
        name = _UNSAFE_FILENAME_CHARS.sub("_", name).strip("._")
        return name or "upload"

    def save_upload(self, user_id: int, filename: str, data: bytes) -> str:
        """
        Persist upload bytes and return a durable URL.

        Raises:
            UploadTooLargeError: If data exceeds MAX_UPLOAD_SIZE_MB
            OSError: If the file cannot be written
        """
        if not self._validate_size(data):
            raise UploadTooLargeError(
                "Uploaded file is too large",
                file_size_bytes=len(data),
                max_size_bytes=self.max_size_bytes,
            )

        stored_name = f"{uuid4().hex}_{self._safe_filename(filename)}"
        user_dir = self.media_root / str(int(user_id))
        user_dir.mkdir(parents=True, exist_ok=True)
        (user_dir / stored_name).write_bytes(data)

        logger.info(f"Saved upload {filename!r} ({len(data)} bytes) for user {user_id}")
        return f"{self.base_url}/{int(user_id)}/{stored_name}"

    async def normalize_inputs(self, user_id: int, inputs: Any) -> Any:
        """
        Replace every UploadFile inside a nested input structure by its URL.

        Mappings and lists are walked recursively; other values are returned
        unchanged.
        """
        if isinstance(inputs, UploadFile):
            data = await inputs.read()
            return self.save_upload(user_id, inputs.filename or "upload", data)
        if isinstance(inputs, dict):
            return {
                key: await self.normalize_inputs(user_id, value)
                for key, value in inputs.items()
            }
        if isinstance(inputs, (list, tuple)):
            return [await self.normalize_inputs(user_id, item) for item in inputs]
        return inputs
