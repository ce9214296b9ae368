"""FileStorage that writes under a local directory.

Returned references are ``<public_url>/<key>``; with the default
``file://`` prefix they resolve straight to the written file.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from stitchline.domain.exceptions import ExternalServiceError, ValidationError
from stitchline.domain.gateway.file_storage import FileStorage
from stitchline.domain.model.value_objects import ImagePayload

logger = logging.getLogger(__name__)


class LocalFileStorage(FileStorage):

    def __init__(self, root: Path, public_url: str | None = None) -> None:
        self._root = root.resolve()
        self._public_url = (public_url or self._root.as_uri()).rstrip("/")

    async def store(self, payload: ImagePayload, key: str) -> str:
        relative = PurePosixPath(key)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValidationError(f"Invalid storage key: {key!r}")

        target = self._root.joinpath(*relative.parts)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload.data)
        except OSError as exc:
            raise ExternalServiceError("File upload failed", exc) from exc

        url = f"{self._public_url}/{relative.as_posix()}"
        logger.info("Stored %d bytes at %s", len(payload.data), url)
        return url
