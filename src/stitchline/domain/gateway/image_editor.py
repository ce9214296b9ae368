"""Instruction-driven image editing."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stitchline.domain.model.value_objects import ImagePayload

QUICK_EDITS = (
    "Remove background",
    "Improve lighting",
    "Retro style",
    "Cartoon style",
)


class ImageEditor(ABC):

    @abstractmethod
    async def edit(self, image: ImagePayload, instruction: str) -> ImagePayload:
        """Return the edited image or raise ``ImageEditError``."""
