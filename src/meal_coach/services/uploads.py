"""File upload service backed by object storage."""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Protocol
from uuid import uuid4

_logger = logging.getLogger(__name__)


class FileStorage(Protocol):
    """Interface for public object storage."""

    def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        """Store bytes at a path and return the public URL."""


@dataclass
class UploadService:
    """Stores user uploads under random names."""

    storage: FileStorage
    bucket: str

    def upload(
        self,
        folder: str,
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        """Upload a file into a folder and return its public URL."""
        path = f"{folder.strip('/')}/{_random_name(filename)}"
        _logger.info(
            "Uploading file: bucket=%s path=%s size=%s", self.bucket, path, len(content)
        )
        return self.storage.upload(self.bucket, path, content, content_type)


def _random_name(filename: str) -> str:
    """Return a UUID file name that keeps the original extension."""
    suffix = PurePosixPath(filename).suffix.lower()
    return f"{uuid4()}{suffix}"
