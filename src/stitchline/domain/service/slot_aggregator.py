"""Domain service: Slot Aggregator.

Classifies one item's photo readiness from its slots.  Item-level
precedence is rejected > analyzing > incomplete > all-approved; the
order-level rule in ``status_reducer`` checks analyzing first instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from stitchline.domain.model.item import OrderItem
from stitchline.domain.model.slot import EmbroiderySlot, SlotStatus


class ItemReadiness(Enum):
    ALL_APPROVED = "all-approved"
    ANY_REJECTED = "any-rejected"
    ANY_ANALYZING = "any-analyzing"
    INCOMPLETE = "incomplete"


def classify_slots(slots: Iterable[EmbroiderySlot]) -> ItemReadiness:
    statuses = {slot.status for slot in slots}
    if SlotStatus.REJECTED in statuses:
        return ItemReadiness.ANY_REJECTED
    if SlotStatus.ANALYZING in statuses:
        return ItemReadiness.ANY_ANALYZING
    if SlotStatus.EMPTY in statuses:
        return ItemReadiness.INCOMPLETE
    return ItemReadiness.ALL_APPROVED


def classify_item(item: OrderItem) -> ItemReadiness | None:
    """Readiness of a photo item; ``None`` for sleeve add-ons."""
    if item.is_sleeve_addon:
        return None
    return classify_slots(item.slots)
