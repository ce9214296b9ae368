"""Thin async client for the Gemini ``generateContent`` REST endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from stitchline.domain.exceptions import ExternalServiceError
from stitchline.domain.model.value_objects import ImagePayload

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class GeminiClient:

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http = http

    async def generate(
        self,
        model: str,
        parts: list[dict[str, Any]],
        generation_config: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Call the model and return the parts of the first candidate."""
        if not self._api_key:
            raise ExternalServiceError("AI is not configured: GEMINI_API_KEY is missing")

        body: dict[str, Any] = {"contents": [{"parts": parts}]}
        if generation_config:
            body["generationConfig"] = generation_config

        url = f"{self._base_url}/v1beta/models/{model}:generateContent"
        try:
            if self._http is not None:
                response = await self._post(self._http, url, body)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as http:
                    response = await self._post(http, url, body)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                f"Gemini API error {exc.response.status_code}", exc
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ExternalServiceError("Gemini API unreachable", exc) from exc

        try:
            return list(data["candidates"][0]["content"]["parts"])
        except (KeyError, IndexError, TypeError) as exc:
            raise ExternalServiceError("Gemini returned no content", exc) from exc

    async def _post(self, http: httpx.AsyncClient, url: str, body: dict) -> httpx.Response:
        logger.debug("POST %s", url)
        return await http.post(
            url,
            json=body,
            headers={"x-goog-api-key": self._api_key or ""},
            timeout=self._timeout,
        )


def image_part(image: ImagePayload) -> dict[str, Any]:
    """Inline image part; the data is bare base64 with no data-URI header."""
    return {"inline_data": {"mime_type": image.media_type, "data": image.to_base64()}}


def inline_data(part: dict[str, Any]) -> dict[str, Any] | None:
    """Responses use camelCase, requests snake_case; accept either."""
    return part.get("inlineData") or part.get("inline_data")
