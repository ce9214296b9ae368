"""Domain service: Pack Synchronization.

Items sharing a ``group_id`` (a pack) must carry identical photo-derived
slot data.  A change to slot *k* of one item is copied to slot *k* of
every sibling.  The sibling lookup is the same whether the change goes
to the order store or into a local edit buffer; only the writer differs.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Mapping

from stitchline.domain.exceptions import PackSyncError, ValidationError
from stitchline.domain.model.order import Order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotTarget:
    item_id: str
    slot_id: str


SlotWriter = Callable[[SlotTarget, Mapping[str, Any]], Awaitable[None]]


class PackSynchronizationEngine:

    def plan(self, order: Order, source_item_id: str, slot_index: int) -> list[SlotTarget]:
        """Sibling slots that must receive a change made at *slot_index*.

        Siblings without a slot at that index are skipped, not fatal.
        """
        source = order.item(source_item_id)
        targets: list[SlotTarget] = []
        for sibling in order.siblings_of(source):
            slot = sibling.slot_at(slot_index)
            if slot is None:
                logger.warning(
                    "Order %s: pack sibling %s has no slot #%d, skipping",
                    order.id, sibling.id, slot_index,
                )
                continue
            targets.append(SlotTarget(item_id=sibling.id, slot_id=slot.id))
        return targets

    def accepting(
        self, order: Order, targets: list[SlotTarget], change: Mapping[str, Any]
    ) -> list[SlotTarget]:
        """Targets whose slot can take *change*; the rest are skipped."""
        accepted: list[SlotTarget] = []
        for target in targets:
            try:
                replace(order.item(target.item_id).slot(target.slot_id)).apply(change)
            except ValidationError as exc:
                logger.warning(
                    "Order %s: pack sibling %s cannot take the change, skipping: %s",
                    order.id, target.item_id, exc,
                )
                continue
            accepted.append(target)
        return accepted

    def synchronize_local(
        self,
        order: Order,
        source_item_id: str,
        slot_index: int,
        change: Mapping[str, Any],
        stage: Callable[[SlotTarget, Mapping[str, Any]], None],
    ) -> list[SlotTarget]:
        """Synchronous variant for in-process targets (edit buffer)."""
        targets = self.accepting(order, self.plan(order, source_item_id, slot_index), change)
        for target in targets:
            stage(target, change)
        return targets

    async def synchronize(
        self,
        order: Order,
        source_item_id: str,
        slot_index: int,
        change: Mapping[str, Any],
        write: SlotWriter,
    ) -> list[SlotTarget]:
        """Write *change* to every sibling concurrently.

        The batch completes when every write has settled.  Successful
        sibling writes are kept even when others fail, and siblings whose
        slot cannot take the change are skipped.  Failures are
        raised together as ``PackSyncError`` and the in-memory order is
        only updated for siblings whose write succeeded.
        """
        targets = self.accepting(order, self.plan(order, source_item_id, slot_index), change)
        if not targets:
            return []

        results = await asyncio.gather(
            *(write(target, change) for target in targets), return_exceptions=True
        )

        failed: list[str] = []
        first_error: BaseException | None = None
        for target, result in zip(targets, results):
            if isinstance(result, BaseException):
                failed.append(target.item_id)
                first_error = first_error or result
                logger.error(
                    "Order %s: pack sync to item %s failed: %s", order.id, target.item_id, result
                )
                continue
            order.item(target.item_id).slot(target.slot_id).apply(change)

        if failed:
            raise PackSyncError(failed, first_error)
        return targets
