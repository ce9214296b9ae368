"""Settings read from the environment (and a local ``.env`` if present)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from stitchline.infrastructure.ai.gemini_client import DEFAULT_BASE_URL


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    storage_dir: Path
    public_url: str | None
    gemini_api_key: str | None
    gemini_base_url: str
    assessment_model: str
    edit_model: str
    http_timeout: float
    reason_language: str
    log_level: str


def load_settings() -> Settings:
    load_dotenv()
    data_dir = Path(os.environ.get("STITCHLINE_DATA_DIR", "data")).resolve()
    return Settings(
        data_dir=data_dir,
        storage_dir=Path(os.environ.get("STITCHLINE_STORAGE_DIR", data_dir / "uploads")).resolve(),
        public_url=os.environ.get("STITCHLINE_PUBLIC_URL") or None,
        gemini_api_key=os.environ.get("GEMINI_API_KEY") or None,
        gemini_base_url=os.environ.get("GEMINI_BASE_URL", DEFAULT_BASE_URL),
        assessment_model=os.environ.get("STITCHLINE_ASSESSMENT_MODEL", "gemini-2.5-flash"),
        edit_model=os.environ.get("STITCHLINE_EDIT_MODEL", "gemini-2.5-flash-image"),
        http_timeout=float(os.environ.get("STITCHLINE_HTTP_TIMEOUT", "30")),
        reason_language=os.environ.get("STITCHLINE_REASON_LANGUAGE", "Spanish"),
        log_level=os.environ.get("STITCHLINE_LOG_LEVEL", "WARNING").upper(),
    )
