"""Two-phase photo intake shared by upload and AI edit.

  Phase 1: store the file, point the slot at it and mark it ANALYZING
           (pack siblings follow, status recomputed).
  Phase 2: ask the quality assessor and record APPROVED / REJECTED.

The assessor fails closed: if it errors, the slot is REJECTED with a
generic retry message instead of being left in ANALYZING.  A pack-sync
failure in phase 1 does not skip phase 2; it is raised after the verdict
is recorded.
"""

from __future__ import annotations

import logging
import uuid

from stitchline.application.slot_writer import SlotWriter
from stitchline.domain.exceptions import ExternalServiceError, PackSyncError, ValidationError
from stitchline.domain.gateway.file_storage import FileStorage
from stitchline.domain.gateway.quality_assessor import QualityAssessment, QualityAssessor
from stitchline.domain.model.order import Order
from stitchline.domain.model.slot import EmbroiderySlot
from stitchline.domain.model.value_objects import ImagePayload

logger = logging.getLogger(__name__)

RETRY_REASON = "We could not check this photo right now. Please upload it again."


class PhotoIntake:

    def __init__(
        self,
        slot_writer: SlotWriter,
        storage: FileStorage,
        assessor: QualityAssessor,
    ) -> None:
        self._slot_writer = slot_writer
        self._storage = storage
        self._assessor = assessor

    async def run(
        self, order: Order, item_id: str, slot_id: str, image: ImagePayload
    ) -> QualityAssessment:
        item = order.item(item_id)
        if item.is_sleeve_addon:
            raise ValidationError(f"{item.product_name} does not take a photo")
        slot = item.slot(slot_id)

        key = f"orders/{order.id}/{item.id}/{slot.id}-{uuid.uuid4().hex[:12]}.{image.extension}"
        url = await self._storage.store(image, key)

        sync_error: PackSyncError | None = None
        try:
            await self._slot_writer.write(
                order, item_id, slot_id, EmbroiderySlot.analysis_started(url)
            )
        except PackSyncError as exc:
            # The source slot is ANALYZING; it still needs a verdict.
            sync_error = exc

        assessment = await self._assess(order.id, slot_id, image)
        if not assessment.approved and not assessment.reason.strip():
            assessment = QualityAssessment(approved=False, reason=RETRY_REASON)

        await self._slot_writer.write(
            order, item_id, slot_id, slot.verdict(assessment.approved, assessment.reason)
        )
        logger.info(
            "Order %s slot %s: photo %s",
            order.id, slot_id, "approved" if assessment.approved else "rejected",
        )
        if sync_error is not None:
            raise sync_error
        return assessment

    async def _assess(self, order_id: str, slot_id: str, image: ImagePayload) -> QualityAssessment:
        try:
            return await self._assessor.assess(image)
        except Exception as exc:
            logger.warning(
                "Order %s slot %s: quality check failed, rejecting for retry: %s",
                order_id, slot_id, exc,
                exc_info=not isinstance(exc, ExternalServiceError),
            )
            return QualityAssessment(approved=False, reason=RETRY_REASON)
