"""File storage: bytes in, public reference out."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stitchline.domain.model.value_objects import ImagePayload


class FileStorage(ABC):

    @abstractmethod
    async def store(self, payload: ImagePayload, key: str) -> str:
        """Write *payload* under *key* and return its public URL.

        The returned reference must be resolvable when this returns.
        Raise ``ExternalServiceError`` on failure.
        """
