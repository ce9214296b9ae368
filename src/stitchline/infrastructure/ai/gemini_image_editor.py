"""ImageEditor backed by a Gemini image model."""

from __future__ import annotations

import base64
import binascii

from stitchline.domain.exceptions import ImageEditError
from stitchline.domain.gateway.image_editor import ImageEditor
from stitchline.domain.model.value_objects import ImagePayload
from stitchline.infrastructure.ai.gemini_client import GeminiClient, image_part, inline_data


class GeminiImageEditor(ImageEditor):

    def __init__(self, client: GeminiClient, model: str) -> None:
        self._client = client
        self._model = model

    async def edit(self, image: ImagePayload, instruction: str) -> ImagePayload:
        parts = await self._client.generate(
            self._model,
            [image_part(image), {"text": f"Instruction: {instruction}"}],
        )
        for part in parts:
            data = inline_data(part)
            if not data:
                continue
            try:
                raw = base64.b64decode(data["data"])
            except (KeyError, binascii.Error, ValueError) as exc:
                raise ImageEditError("Edited image could not be decoded", exc) from exc
            if not raw:
                continue
            media_type = data.get("mimeType") or data.get("mime_type") or "image/png"
            return ImagePayload(data=raw, media_type=media_type)
        raise ImageEditError("No edited image produced")
