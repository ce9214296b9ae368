"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from stitchline.application.mutation_coordinator import MutationCoordinator
from stitchline.application.session import SessionResolver
from stitchline.domain.model.session import Session
from stitchline.infrastructure.ai.gemini_client import GeminiClient
from stitchline.infrastructure.ai.gemini_image_editor import GeminiImageEditor
from stitchline.infrastructure.ai.gemini_quality_assessor import GeminiQualityAssessor
from stitchline.infrastructure.config import Settings, load_settings
from stitchline.infrastructure.identity import EmailIdentityProvider, StaffRoleDirectory
from stitchline.infrastructure.persistence.json_order_repository import JsonOrderRepository
from stitchline.infrastructure.persistence.json_staff_repository import JsonStaffRepository
from stitchline.infrastructure.storage.local_file_storage import LocalFileStorage


@lru_cache(maxsize=1)
def settings() -> Settings:
    return load_settings()


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().data_dir / "orders.json")


def staff_repository() -> JsonStaffRepository:
    return JsonStaffRepository(settings().data_dir / "staff.json")


def file_storage() -> LocalFileStorage:
    return LocalFileStorage(settings().storage_dir, settings().public_url)


def gemini_client() -> GeminiClient:
    cfg = settings()
    return GeminiClient(cfg.gemini_api_key, cfg.gemini_base_url, cfg.http_timeout)


def session_resolver() -> SessionResolver:
    staff = staff_repository()
    return SessionResolver(
        EmailIdentityProvider(staff, order_repository()),
        StaffRoleDirectory(staff),
    )


def coordinator(session: Session) -> MutationCoordinator:
    cfg = settings()
    client = gemini_client()
    return MutationCoordinator(
        session=session,
        order_repo=order_repository(),
        staff_repo=staff_repository(),
        storage=file_storage(),
        assessor=GeminiQualityAssessor(client, cfg.assessment_model, cfg.reason_language),
        editor=GeminiImageEditor(client, cfg.edit_model),
    )
