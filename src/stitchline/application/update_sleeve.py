"""Application service: Update Sleeve use case.

Attaching a sleeve to an item that had none consumes one of the order's
sleeve credits; removing it gives the credit back.
"""

from __future__ import annotations

import logging

from stitchline.application.access import load_order
from stitchline.application.commands import UpdateSleeve
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateSleeveHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, command: UpdateSleeve, session: Session) -> int:
        """Returns the credits left after the change."""
        order = await load_order(self._order_repo, session, command.order_id)
        changes = order.set_sleeve(command.item_id, command.config)
        await self._order_repo.update_item(order.id, command.item_id, changes)
        logger.info(
            "Order %s item %s: sleeve %s (%d credit(s) left)",
            order.id, command.item_id,
            "removed" if command.config is None else "set",
            order.remaining_sleeve_credits,
        )
        return order.remaining_sleeve_credits
