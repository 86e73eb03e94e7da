"""Port for publishing uploaded media files (avatar, cover image)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Protocol

from vidshare.services._shared.errors import StorageUnavailable


@dataclass(frozen=True, slots=True)
class MediaRef:
    """Public reference to a stored media file."""

    url: str


class MediaStore(Protocol):
    """Move a locally staged file to durable storage and return its public URL."""

    def upload(self, local_path: str) -> MediaRef:
        """
        Publish ``local_path``.

        :raises StorageUnavailable: If the file cannot be stored.
        """

    def remove(self, ref: MediaRef) -> None:
        """
        Delete a previously published file. Missing files are ignored.

        :raises StorageUnavailable: If the file exists but cannot be deleted.
        """


class InMemoryMediaStore(MediaStore):
    """Record uploads without touching the filesystem (unit tests)."""

    def __init__(self, *, available: bool = True) -> None:
        self.uploaded: list[str] = []
        self.removed: list[str] = []
        self.available = available

    def upload(self, local_path: str) -> MediaRef:
        if not self.available:
            raise StorageUnavailable("In-memory media store is offline")
        self.uploaded.append(local_path)
        return MediaRef(url=f"memory://{os.path.basename(local_path)}")

    def remove(self, ref: MediaRef) -> None:
        if not self.available:
            raise StorageUnavailable("In-memory media store is offline")
        self.removed.append(ref.url)
