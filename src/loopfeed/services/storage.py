# src/loopfeed/services/storage.py
"""Media storage collaborator.

Posts only reference media by URL; the bytes are written here first.
"""

from __future__ import annotations

import logging
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from loopfeed.core.settings import settings

from .errors import InternalError, InvalidInputError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_SAFE_FOLDER = re.compile(r"^[a-z0-9_-]+$")


@dataclass(frozen=True)
class StoredMedia:
    url: str
    filename: str
    size: int


class MediaStorage(Protocol):
    def save(self, data: bytes, filename: str, folder: str = "uploads") -> StoredMedia:
        ...


def safe_filename(filename: str) -> str:
    """Strip directories and unusual characters from a client-supplied name."""
    name = _UNSAFE_CHARS.sub("_", Path(filename or "").name).strip("._")
    return name or "upload"


class LocalMediaStorage:
    """Write uploads below a directory served as static files."""

    def __init__(self, root: str | Path, base_url: str, max_bytes: int | None = None) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes

    def save(self, data: bytes, filename: str, folder: str = "uploads") -> StoredMedia:
        if not data:
            raise InvalidInputError("Uploaded file is empty")
        if self.max_bytes is not None and len(data) > self.max_bytes:
            raise InvalidInputError(f"File exceeds the {self.max_bytes} byte limit")
        if not _SAFE_FOLDER.match(folder):
            raise InvalidInputError(f"Invalid media folder: {folder}")

        stored_name = f"{int(time.time())}_{secrets.token_hex(4)}_{safe_filename(filename)}"
        target_dir = self.root / folder
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            (target_dir / stored_name).write_bytes(data)
        except OSError as err:
            logger.exception("Failed to store media %s", stored_name)
            raise InternalError("Could not store uploaded file") from err

        logger.info("Stored %d bytes as %s/%s", len(data), folder, stored_name)
        return StoredMedia(
            url=f"{self.base_url}/{folder}/{stored_name}",
            filename=stored_name,
            size=len(data),
        )


def get_media_storage() -> MediaStorage:
    """FastAPI dependency returning the configured storage backend."""
    return LocalMediaStorage(
        settings.media_root,
        settings.media_base_url,
        max_bytes=settings.max_upload_bytes,
    )
