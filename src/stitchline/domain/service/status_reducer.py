"""Domain service: Order Status Reducer.

Recomputes an order's status from the slots of its photo items while
the order is still in the photo-intake phase.  Past that phase the
status only moves through explicit transitions on ``Order``.

Order-level precedence:
  1. any slot ANALYZING   -> ANALYZING_IMAGE
  2. any slot REJECTED    -> ACTION_REQUIRED
  3. every slot APPROVED  -> WAITING_FOR_DESIGN (designer gets assigned)
  4. otherwise            -> PENDING_UPLOAD
"""

from __future__ import annotations

from stitchline.domain.model.order import RECOMPUTE_STATUSES, Order, OrderStatus
from stitchline.domain.model.slot import SlotStatus


class OrderStatusReducer:

    @staticmethod
    def applies_to(order: Order) -> bool:
        return order.status in RECOMPUTE_STATUSES

    @staticmethod
    def recompute(order: Order) -> OrderStatus:
        statuses = [slot.status for item in order.photo_items for slot in item.slots]

        if SlotStatus.ANALYZING in statuses:
            return OrderStatus.ANALYZING_IMAGE
        if SlotStatus.REJECTED in statuses:
            return OrderStatus.ACTION_REQUIRED
        if statuses and all(status == SlotStatus.APPROVED for status in statuses):
            return OrderStatus.WAITING_FOR_DESIGN
        return OrderStatus.PENDING_UPLOAD
