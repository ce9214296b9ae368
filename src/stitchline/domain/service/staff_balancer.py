"""Domain service: Staff Assignment Balancer.

Picks the least-loaded staff member of a role.  Load is the number of
open orders (not DISPATCHED, not DESIGN_REJECTED) currently assigned to
that person as designer or embroiderer.  Ties go to the first candidate
in input order.
"""

from __future__ import annotations

from typing import Iterable

from stitchline.domain.model.order import Order
from stitchline.domain.model.staff import StaffMember, UserRole


class StaffAssignmentBalancer:

    @staticmethod
    def open_load(staff_id: str, orders: Iterable[Order]) -> int:
        return sum(
            1
            for order in orders
            if order.is_open
            and staff_id in (order.assigned_designer_id, order.assigned_embroiderer_id)
        )

    def assign(
        self,
        role: UserRole,
        candidates: Iterable[StaffMember],
        orders: Iterable[Order],
    ) -> str | None:
        """Return the chosen staff id, or None when nobody is eligible."""
        orders = list(orders)
        best_id: str | None = None
        best_load = 0
        for member in candidates:
            if member.role != role:
                continue
            load = self.open_load(member.id, orders)
            if best_id is None or load < best_load:
                best_id, best_load = member.id, load
        return best_id
