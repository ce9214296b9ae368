"""Application service: pick a designer or embroiderer for an order."""

from __future__ import annotations

import logging

from stitchline.domain.model.staff import UserRole
from stitchline.domain.repository.order_repository import OrderRepository
from stitchline.domain.repository.staff_repository import StaffRepository
from stitchline.domain.service.staff_balancer import StaffAssignmentBalancer

logger = logging.getLogger(__name__)


class StaffAssigner:

    def __init__(
        self,
        order_repo: OrderRepository,
        staff_repo: StaffRepository,
        balancer: StaffAssignmentBalancer | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._staff_repo = staff_repo
        self._balancer = balancer or StaffAssignmentBalancer()

    async def pick(self, role: UserRole, order_id: str) -> str | None:
        """Least-loaded member of *role*, or None (retried on the next transition)."""
        candidates = await self._staff_repo.list_by_role(role)
        orders = await self._order_repo.list_all()
        staff_id = self._balancer.assign(role, candidates, orders)
        if staff_id is None:
            logger.warning("Order %s: no %s available, leaving unassigned", order_id, role.value)
        return staff_id
