"""Filesystem adapter for :class:`~vidshare.services._shared.ports.MediaStore`."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from uuid import uuid4

from vidshare.services._shared.errors import StorageUnavailable
from vidshare.services._shared.ports import MediaRef, MediaStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class LocalMediaStore(MediaStore):
    """
    Move staged uploads into ``root`` and serve them under ``url_prefix``.

    The staged file is removed whether or not the move succeeds.

    :param root: Destination directory (``MEDIA_ROOT``).
    :param url_prefix: Public URL prefix (``MEDIA_URL_PREFIX``).
    """

    root: str
    url_prefix: str = "/media"

    def upload(self, local_path: str) -> MediaRef:
        _, ext = os.path.splitext(local_path)
        name = f"{uuid4().hex}{ext.lower()}"
        target = os.path.join(self.root, name)
        try:
            os.makedirs(self.root, exist_ok=True)
            shutil.move(local_path, target)
        except OSError as exc:
            raise StorageUnavailable(f"Media upload failed: {exc}") from exc
        finally:
            if os.path.exists(local_path):
                try:
                    os.remove(local_path)
                except OSError:
                    log.warning("media.cleanup_failed", extra={"reason": local_path})
        return MediaRef(url=f"{self.url_prefix.rstrip('/')}/{name}")

    def remove(self, ref: MediaRef) -> None:
        """Delete the file behind ``ref``; only names under ``root`` are touched."""
        name = os.path.basename(ref.url)
        if not name:
            return
        target = os.path.join(self.root, name)
        try:
            os.remove(target)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageUnavailable(f"Media removal failed: {exc}") from exc
