"""QualityAssessor backed by a Gemini vision model."""

from __future__ import annotations

import json
import logging

from stitchline.domain.exceptions import ExternalServiceError
from stitchline.domain.gateway.quality_assessor import QualityAssessment, QualityAssessor
from stitchline.domain.model.value_objects import ImagePayload
from stitchline.infrastructure.ai.gemini_client import GeminiClient, image_part

logger = logging.getLogger(__name__)

PROMPT = """You are an expert in digitizing embroidery. Decide whether this photo of a pet
can be embroidered.

Acceptance criteria (strict):
1. SHARPNESS: the pet's face must be in focus. Blurry -> reject.
2. LIGHTING: good contrast, no hard shadows hiding features.
3. OBSTRUCTIONS: nothing covering the face.
4. RESOLUTION: not pixelated.

Reply ONLY with this JSON:
{{"approved": boolean, "reason": string}}
"approved" is true only if ALL criteria are met. "reason" is a short, friendly
explanation in {language} for the customer; when rejecting, suggest how to take
a better photo."""


class GeminiQualityAssessor(QualityAssessor):

    def __init__(self, client: GeminiClient, model: str, language: str = "Spanish") -> None:
        self._client = client
        self._model = model
        self._language = language

    async def assess(self, image: ImagePayload) -> QualityAssessment:
        parts = await self._client.generate(
            self._model,
            [image_part(image), {"text": PROMPT.format(language=self._language)}],
            {"response_mime_type": "application/json"},
        )
        text = "".join(part.get("text", "") for part in parts)
        return parse_assessment(text)


def parse_assessment(text: str) -> QualityAssessment:
    """Parse the model's JSON verdict, tolerating markdown code fences."""
    cleaned = text.replace("```json", "").replace("```", "").strip()
    if not cleaned:
        raise ExternalServiceError("Quality check returned no text")
    try:
        data = json.loads(cleaned)
    except ValueError as exc:
        raise ExternalServiceError("Quality check returned invalid JSON", exc) from exc
    if not isinstance(data, dict) or not isinstance(data.get("approved"), bool):
        raise ExternalServiceError(f"Quality check returned an unexpected shape: {cleaned[:120]}")
    return QualityAssessment(approved=data["approved"], reason=str(data.get("reason") or ""))
