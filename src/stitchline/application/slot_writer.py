"""Slot writes with their side effects.

Every slot mutation goes through ``SlotWriter.write``: the source slot
row is written, the change is mirrored onto pack siblings, and the
order status is recomputed if the order is still in photo intake.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from stitchline.application.assignment import StaffAssigner
from stitchline.domain.model.order import Order, OrderStatus
from stitchline.domain.model.staff import UserRole
from stitchline.domain.repository.order_repository import OrderRepository
from stitchline.domain.service.pack_sync import PackSynchronizationEngine, SlotTarget
from stitchline.domain.service.status_reducer import OrderStatusReducer

logger = logging.getLogger(__name__)


class SlotWriter:

    def __init__(
        self,
        order_repo: OrderRepository,
        assigner: StaffAssigner,
        pack_sync: PackSynchronizationEngine | None = None,
        reducer: OrderStatusReducer | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._assigner = assigner
        self._pack_sync = pack_sync or PackSynchronizationEngine()
        self._reducer = reducer or OrderStatusReducer()

    async def write(
        self, order: Order, item_id: str, slot_id: str, change: Mapping[str, Any]
    ) -> None:
        item = order.item(item_id)
        slot = item.slot(slot_id)
        slot_index = item.slot_index(slot_id)

        slot.apply(change)
        await self._order_repo.update_slot(order.id, item_id, slot_id, change)

        # Recompute even when a sibling write fails.
        try:
            await self._pack_sync.synchronize(
                order, item_id, slot_index, change, self._write_sibling(order.id)
            )
        finally:
            await self.recompute(order)

    async def recompute(self, order: Order) -> OrderStatus:
        """Re-derive the status from slots while in the intake phase.

        Status and designer assignment are written in a single order-row
        write, and only applied in memory once that write succeeds.
        """
        if not self._reducer.applies_to(order):
            return order.status

        new_status = self._reducer.recompute(order)
        designer_id = None
        if new_status == OrderStatus.WAITING_FOR_DESIGN and order.assigned_designer_id is None:
            designer_id = await self._assigner.pick(UserRole.DESIGNER, order.id)

        previous = (order.status, order.assigned_designer_id)
        changes = order.apply_intake_status(new_status, designer_id)
        if not changes:
            return order.status
        try:
            await self._order_repo.update_order(order.id, changes)
        except Exception:
            order.status, order.assigned_designer_id = previous
            raise
        logger.info("Order %s: status -> %s %s", order.id, order.status.value, _describe(changes))
        return order.status

    def _write_sibling(self, order_id: str):
        async def write(target: SlotTarget, change: Mapping[str, Any]) -> None:
            await self._order_repo.update_slot(order_id, target.item_id, target.slot_id, change)

        return write


def _describe(changes: Mapping[str, Any]) -> str:
    designer = changes.get("assigned_designer_id")
    return f"(designer {designer})" if designer else ""
