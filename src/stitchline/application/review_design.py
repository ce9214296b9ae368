"""Application service: Review Design use case.

Approval sends the order to production (assigning an embroiderer if
none is set); rejection sends it back to the designer with feedback.
"""

from __future__ import annotations

import logging

from stitchline.application.access import load_order
from stitchline.application.assignment import StaffAssigner
from stitchline.application.commands import ReviewDesign
from stitchline.domain.exceptions import ValidationError
from stitchline.domain.model.item import DesignStatus
from stitchline.domain.model.order import OrderStatus
from stitchline.domain.model.session import Session
from stitchline.domain.model.staff import UserRole
from stitchline.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class ReviewDesignHandler:

    def __init__(self, order_repo: OrderRepository, assigner: StaffAssigner) -> None:
        self._order_repo = order_repo
        self._assigner = assigner

    async def handle(self, command: ReviewDesign, session: Session) -> None:
        order = await load_order(self._order_repo, session, command.order_id)
        if order.status != OrderStatus.DESIGN_REVIEW:
            raise ValidationError(
                f"Order #{order.id} has no design awaiting review (status {order.status.value})"
            )

        embroiderer_id = None
        if command.approved and order.assigned_embroiderer_id is None:
            embroiderer_id = await self._assigner.pick(UserRole.EMBROIDERER, order.id)

        pending = [item.id for item in order.items if item.design_status == DesignStatus.PENDING]
        changes = order.review_design(command.approved, command.feedback, embroiderer_id)

        for item_id in pending:
            item = order.item(item_id)
            await self._order_repo.update_item(
                order.id,
                item_id,
                {"design_status": item.design_status, "design_feedback": item.design_feedback},
            )
        await self._order_repo.update_order(order.id, changes)
        logger.info(
            "Order %s: design %s", order.id, "approved" if command.approved else "rejected"
        )
