"""Application service: Finalize Order use case.

The customer declares the photos complete and hands the order to
design.  A designer is assigned in the same write if none is set.
"""

from __future__ import annotations

import logging

from stitchline.application.access import load_order
from stitchline.application.assignment import StaffAssigner
from stitchline.application.commands import FinalizeOrder
from stitchline.domain.model.session import Session
from stitchline.domain.model.staff import UserRole
from stitchline.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class FinalizeOrderHandler:

    def __init__(self, order_repo: OrderRepository, assigner: StaffAssigner) -> None:
        self._order_repo = order_repo
        self._assigner = assigner

    async def handle(self, command: FinalizeOrder, session: Session) -> None:
        order = await load_order(self._order_repo, session, command.order_id)
        # Validate before picking staff so a refused finalize costs no reads.
        order.assert_ready_for_design()

        designer_id = None
        if order.assigned_designer_id is None:
            designer_id = await self._assigner.pick(UserRole.DESIGNER, order.id)

        changes = order.finalize(designer_id)
        await self._order_repo.update_order(order.id, changes)
        logger.info("Order %s: finalized by customer, waiting for design", order.id)
