"""
MediaStorage Port

Contract for persisting uploaded media so that background workers can read
it later through a durable URL.
"""

from typing import Protocol


class MediaStorageProtocol(Protocol):
    def save_upload(self, user_id: int, filename: str, data: bytes) -> str:
        """
        Persist upload bytes and return a durable URL.

        Raises:
            UploadTooLargeError: If data exceeds the configured size limit
        """
        ...
