"""BlobStore adapter that writes uploaded files to a local directory."""

from __future__ import annotations

import mimetypes
import uuid
from pathlib import Path

import structlog

from storefront.domain.exceptions import UnexpectedError
from storefront.domain.ports import BlobStore

logger = structlog.get_logger(__name__)


class LocalBlobStore(BlobStore):
    """Stores blobs as files under ``root`` and hands out references of the
    form ``<url_prefix>/<filename>``."""

    def __init__(self, root: Path, url_prefix: str = "/uploads/products") -> None:
        self._root = Path(root)
        self._url_prefix = url_prefix.rstrip("/")

    def store(self, data: bytes, content_type: str, name_hint: str = "") -> str:
        extension = mimetypes.guess_extension(content_type) or ".bin"
        filename = f"{name_hint or 'blob'}_{uuid.uuid4().hex}{extension}"
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            (self._root / filename).write_bytes(data)
        except OSError as exc:
            raise UnexpectedError(f"Could not store upload: {exc}") from exc
        return f"{self._url_prefix}/{filename}"

    def delete(self, reference: str) -> None:
        if not reference.startswith(self._url_prefix + "/"):
            return
        # Only the basename is trusted, so a reference can never escape root.
        path = self._root / Path(reference).name
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not delete blob", reference=reference, error=str(exc))

    def path_for(self, reference: str) -> Path:
        return self._root / Path(reference).name
