"""Application service: Update Status use case (production floor).

Only the production moves go through here:
  READY_TO_EMBROIDER -> IN_PROGRESS        (assigns an embroiderer if missing)
  IN_PROGRESS        -> READY_FOR_DISPATCH
  READY_FOR_DISPATCH -> DISPATCHED         (both evidence photos required)
Every other status change has its own command.
"""

from __future__ import annotations

import logging

from stitchline.application.access import load_order
from stitchline.application.assignment import StaffAssigner
from stitchline.application.commands import UpdateStatus
from stitchline.domain.exceptions import ValidationError
from stitchline.domain.model.order import OrderStatus
from stitchline.domain.model.session import Session
from stitchline.domain.model.staff import UserRole
from stitchline.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateStatusHandler:

    def __init__(self, order_repo: OrderRepository, assigner: StaffAssigner) -> None:
        self._order_repo = order_repo
        self._assigner = assigner

    async def handle(self, command: UpdateStatus, session: Session) -> None:
        order = await load_order(self._order_repo, session, command.order_id)
        target = command.status

        if target == OrderStatus.IN_PROGRESS:
            embroiderer_id = None
            if (
                order.status == OrderStatus.READY_TO_EMBROIDER
                and order.assigned_embroiderer_id is None
            ):
                embroiderer_id = self._self_or_none(session) or await self._assigner.pick(
                    UserRole.EMBROIDERER, order.id
                )
            changes = order.start_production(embroiderer_id)
        elif target == OrderStatus.READY_FOR_DISPATCH:
            changes = order.complete_production()
        elif target == OrderStatus.DISPATCHED:
            changes = order.dispatch()
        else:
            raise ValidationError(
                f"Status {target.value} cannot be set directly; use the matching action"
            )

        await self._order_repo.update_order(order.id, changes)
        logger.info("Order %s: status -> %s by %s", order.id, order.status.value, session.subject_id)

    @staticmethod
    def _self_or_none(session: Session) -> str | None:
        """An embroiderer starting an unassigned order takes it."""
        if session.role == UserRole.EMBROIDERER:
            return session.staff_id
        return None
