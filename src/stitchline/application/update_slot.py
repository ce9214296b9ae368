"""Application service: Update Slot use case.

Edits the customer-facing fields of one pet slot (name, position, halo
and friends).  Pack siblings receive the same change.
"""

from __future__ import annotations

from stitchline.application.access import load_order
from stitchline.application.commands import UpdateSlot
from stitchline.application.slot_writer import SlotWriter
from stitchline.domain.exceptions import ValidationError
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository


class UpdateSlotHandler:

    def __init__(self, order_repo: OrderRepository, slot_writer: SlotWriter) -> None:
        self._order_repo = order_repo
        self._slot_writer = slot_writer

    async def handle(self, command: UpdateSlot, session: Session) -> None:
        order = await load_order(self._order_repo, session, command.order_id)
        if not session.role.is_staff:
            order.assert_editable()

        item = order.item(command.item_id)
        if item.is_sleeve_addon:
            raise ValidationError(f"{item.product_name} has no pet slots")
        item.slot(command.slot_id)

        await self._slot_writer.write(
            order, command.item_id, command.slot_id, command.change.as_fields()
        )
