"""Filesystem-backed object store."""

import mimetypes
import uuid
from pathlib import Path, PurePosixPath
from typing import Optional

from tallybook.domain.errors import AttachmentError
from tallybook.logging_setup import get_logger
from tallybook.storage.base import ObjectStore

logger = get_logger("tallybook.storage.local")


class LocalObjectStore(ObjectStore):
    """Keeps objects as files below a root directory.

    Handles look like ``<owner_id>/<uuid>.<ext>``, one directory per owner.
    """

    def __init__(self, root: str | Path, base_url: Optional[str] = None):
        """Initialize the store.

        Args:
            root: Directory holding the objects (created on first upload)
            base_url: Optional public URL prefix; file:// URLs are used otherwise
        """
        self.root = Path(root)
        self.base_url = base_url.rstrip("/") if base_url else None

    def _path_for(self, handle: str) -> Path:
        relative = PurePosixPath(handle)
        if relative.is_absolute() or ".." in relative.parts or len(relative.parts) != 2:
            raise AttachmentError(f"Invalid receipt handle '{handle}'")
        return self.root.joinpath(*relative.parts)

    @staticmethod
    def _extension(content_type: str, filename: Optional[str]) -> str:
        if filename and "." in filename:
            suffix = filename.rsplit(".", 1)[1].lower()
            if suffix.isascii() and suffix.isalnum():
                return "." + suffix
        return mimetypes.guess_extension(content_type or "") or ".bin"

    def put(
        self,
        owner_id: str,
        data: bytes,
        content_type: str,
        filename: Optional[str] = None,
    ) -> str:
        """Write bytes to a fresh file. Returns the handle."""
        owner_dir = "".join(ch for ch in owner_id if ch.isalnum() or ch in "-_.@") or "_"
        handle = f"{owner_dir}/{uuid.uuid4().hex}{self._extension(content_type, filename)}"
        path = self._path_for(handle)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.warning("Upload of %s failed: %s", handle, e)
            raise AttachmentError(f"Could not store receipt: {e}") from e
        logger.info("Stored receipt %s (%d bytes)", handle, len(data))
        return handle

    def get_url(self, handle: str) -> str:
        """Return the public URL, or a file:// URL without a base URL."""
        if self.base_url:
            return f"{self.base_url}/{handle}"
        return self._path_for(handle).resolve().as_uri()

    def delete(self, handle: str) -> None:
        """Remove the file behind a handle."""
        path = self._path_for(handle)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Deletion of %s failed: %s", handle, e)
            raise AttachmentError(f"Could not delete receipt '{handle}': {e}") from e
        logger.info("Deleted receipt %s", handle)
