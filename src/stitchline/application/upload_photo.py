"""Application service: Initiate Upload use case (customer photo)."""

from __future__ import annotations

from stitchline.application.access import load_order
from stitchline.application.commands import InitiateUpload
from stitchline.application.photo_intake import PhotoIntake
from stitchline.domain.gateway.quality_assessor import QualityAssessment
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository


class InitiateUploadHandler:

    def __init__(self, order_repo: OrderRepository, intake: PhotoIntake) -> None:
        self._order_repo = order_repo
        self._intake = intake

    async def handle(self, command: InitiateUpload, session: Session) -> QualityAssessment:
        order = await load_order(self._order_repo, session, command.order_id)
        order.assert_editable()
        return await self._intake.run(order, command.item_id, command.slot_id, command.image)
