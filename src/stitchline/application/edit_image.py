"""Application service: Edit Image use case.

The AI-edited picture replaces the slot photo and is re-checked exactly
like a fresh upload.
"""

from __future__ import annotations

import logging

from stitchline.application.access import load_order
from stitchline.application.commands import EditImage
from stitchline.application.photo_intake import PhotoIntake
from stitchline.domain.gateway.image_editor import ImageEditor
from stitchline.domain.gateway.quality_assessor import QualityAssessment
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class EditImageHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        editor: ImageEditor,
        intake: PhotoIntake,
    ) -> None:
        self._order_repo = order_repo
        self._editor = editor
        self._intake = intake

    async def handle(self, command: EditImage, session: Session) -> QualityAssessment:
        order = await load_order(self._order_repo, session, command.order_id)
        order.assert_editable()
        order.item(command.item_id).slot(command.slot_id)

        # Editor failures propagate: nothing has been written yet.
        edited = await self._editor.edit(command.image, command.instruction.strip())
        logger.info("Order %s slot %s: photo edited (%r)", order.id, command.slot_id, command.instruction)
        return await self._intake.run(order, command.item_id, command.slot_id, edited)
