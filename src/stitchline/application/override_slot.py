"""Application service: Override Slot Review use case (staff only)."""

from __future__ import annotations

import logging

from stitchline.application.access import load_order
from stitchline.application.commands import OverrideSlotReview
from stitchline.application.slot_writer import SlotWriter
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class OverrideSlotReviewHandler:

    def __init__(self, order_repo: OrderRepository, slot_writer: SlotWriter) -> None:
        self._order_repo = order_repo
        self._slot_writer = slot_writer

    async def handle(self, command: OverrideSlotReview, session: Session) -> None:
        order = await load_order(self._order_repo, session, command.order_id)
        order.assert_in_intake()
        slot = order.item(command.item_id).slot(command.slot_id)
        change = slot.verdict(command.approved, command.reason)
        await self._slot_writer.write(order, command.item_id, command.slot_id, change)
        logger.info(
            "Order %s slot %s: review overridden to %s by %s",
            order.id, slot.id, change["status"].value, session.subject_id,
        )
