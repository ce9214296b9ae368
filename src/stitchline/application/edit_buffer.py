"""Local Edit Buffer: optimistic staging of customer edits.

Edits are kept locally, keyed by slot id (partial slot fields) and by
item id (sleeve config, where an explicit removal is a pending value of
its own), and merged over the persisted order at read time.  Nothing
reaches the store until ``commit()``.

Staging is synchronous and never waits on I/O, so a slow upload on one
slot does not hold up typing a pet name on another.  Pack siblings get
the same staged change immediately, using the same sibling lookup the
server-side sync uses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from stitchline.application.commands import FinalizeOrder, SlotChange
from stitchline.application.dto import MutationResult
from stitchline.application.mutation_coordinator import MutationCoordinator
from stitchline.domain.exceptions import ValidationError
from stitchline.domain.model.item import OrderItem, SleeveConfig
from stitchline.domain.model.order import Order
from stitchline.domain.model.slot import EmbroiderySlot
from stitchline.domain.service.pack_sync import PackSynchronizationEngine

logger = logging.getLogger(__name__)


class _Removed:
    """Pending value meaning "remove this", distinct from "untouched"."""

    def __repr__(self) -> str:
        return "REMOVED"


REMOVED = _Removed()
_UNTOUCHED = object()


def display(persisted: Any, pending: Any = _UNTOUCHED) -> Any:
    """The value to show: the pending one if staged, else the persisted one.

    A staged removal shows as ``None`` even when a value is persisted.
    """
    if pending is _UNTOUCHED:
        return persisted
    if pending is REMOVED:
        return None
    return pending


@dataclass(frozen=True)
class CommitReport:
    ok: bool
    committed: int
    failures: dict[str, str] = field(default_factory=dict)


class LocalEditBuffer:

    def __init__(
        self,
        order: Order,
        coordinator: MutationCoordinator | None = None,
        pack_sync: PackSynchronizationEngine | None = None,
    ) -> None:
        self._order = order
        self._coordinator = coordinator
        self._pack_sync = pack_sync or PackSynchronizationEngine()
        self._slots: dict[str, dict[str, Any]] = {}
        self._sleeves: dict[str, SleeveConfig | _Removed] = {}

    @property
    def order(self) -> Order:
        """The persisted snapshot the buffer merges over."""
        return self._order

    def rebase(self, order: Order) -> None:
        """Swap in a freshly read persisted order; pending edits stay."""
        if order.id != self._order.id:
            raise ValidationError(f"Buffer belongs to order #{self._order.id}, not #{order.id}")
        self._order = order

    # --- Staging --------------------------------------------------------------

    def stage_slot(self, item_id: str, slot_id: str, change: SlotChange) -> list[str]:
        """Stage slot edits; returns every slot id that received them."""
        self._order.assert_editable()
        item = self._order.item(item_id)
        if item.is_sleeve_addon:
            raise ValidationError(f"{item.product_name} has no pet slots")
        slot = item.slot(slot_id)
        fields = change.as_fields()
        if not fields:
            raise ValidationError("Nothing to update")

        self._stage(slot.id, fields)
        targets = self._pack_sync.synchronize_local(
            self._order,
            item_id,
            item.slot_index(slot_id),
            fields,
            lambda target, staged: self._stage(target.slot_id, staged),
        )
        return [slot.id] + [target.slot_id for target in targets]

    def stage_sleeve(self, item_id: str, config: SleeveConfig | None) -> None:
        """Stage a sleeve config, or its removal when *config* is None."""
        self._order.assert_editable()
        item = self._order.item(item_id)
        if config is not None:
            if not item.accepts_sleeve:
                raise ValidationError(f"Item {item.product_name} cannot carry a sleeve design")
            if self.sleeve_view(item_id) is None and self.remaining_sleeve_credits <= 0:
                raise ValidationError("No sleeve credits remaining for this order")
        self._sleeves[item_id] = REMOVED if config is None else config

    def _stage(self, slot_id: str, fields: dict[str, Any]) -> None:
        self._slots.setdefault(slot_id, {}).update(fields)

    # --- Merged reads ---------------------------------------------------------

    def slot_value(self, item_id: str, slot_id: str, name: str) -> Any:
        persisted = getattr(self._order.item(item_id).slot(slot_id), name)
        return display(persisted, self._slots.get(slot_id, {}).get(name, _UNTOUCHED))

    def slot_view(self, item_id: str, slot_id: str) -> EmbroiderySlot:
        """A merged copy of the slot; the persisted slot is not touched."""
        slot = self._order.item(item_id).slot(slot_id)
        return replace(slot, **self._slots.get(slot_id, {}))

    def sleeve_view(self, item_id: str) -> SleeveConfig | None:
        item = self._order.item(item_id)
        return display(item.sleeve, self._sleeves.get(item_id, _UNTOUCHED))

    @property
    def remaining_sleeve_credits(self) -> int:
        used = sum(
            1
            for item in self._order.items
            if not item.is_sleeve_addon and self.sleeve_view(item.id) is not None
        )
        return self._order.total_sleeve_credits - used

    def has_pending_changes(self) -> bool:
        return bool(self._slots) or bool(self._sleeves)

    def pending_slot(self, slot_id: str) -> dict[str, Any]:
        return dict(self._slots.get(slot_id, {}))

    def pending_sleeve(self, item_id: str) -> SleeveConfig | _Removed | None:
        return self._sleeves.get(item_id)

    # --- Commit / discard -----------------------------------------------------

    async def commit(self) -> CommitReport:
        """Persist every pending entry.

        Successful entries are cleared; failed ones stay pending for a
        retry.  Sleeve removals go first so their credits are free for
        additions in the same commit.
        """
        coordinator = self._require_coordinator()
        failures: dict[str, str] = {}
        committed = 0

        for slot_id, fields in list(self._slots.items()):
            item = self._item_of_slot(slot_id)
            if item is None:
                failures[f"slot:{slot_id}"] = f"Slot '{slot_id}' is no longer part of this order"
                continue
            result = await coordinator.update_slot(
                self._order.id, item.id, slot_id, _as_change(fields)
            )
            if result.ok:
                del self._slots[slot_id]
                committed += 1
            else:
                failures[f"slot:{slot_id}"] = result.message

        sleeves = sorted(self._sleeves.items(), key=lambda entry: entry[1] is not REMOVED)
        for item_id, pending in sleeves:
            config = None if pending is REMOVED else pending
            result = await coordinator.update_sleeve(self._order.id, item_id, config)
            if result.ok:
                del self._sleeves[item_id]
                committed += 1
            else:
                failures[f"sleeve:{item_id}"] = result.message

        if committed:
            fresh = await coordinator.order(self._order.id)
            if fresh is not None:
                self._order = fresh
        if failures:
            logger.warning(
                "Order %s: %d edit(s) not saved, kept pending", self._order.id, len(failures)
            )
        return CommitReport(ok=not failures, committed=committed, failures=failures)

    def discard(self, confirm: bool = False) -> None:
        """Drop every pending edit.  Irreversible, so it must be confirmed."""
        if not confirm:
            raise ValidationError("Discarding unsaved changes must be confirmed")
        self._slots.clear()
        self._sleeves.clear()

    async def finalize(self) -> MutationResult:
        """Hand the order to design; refused while edits are unsaved."""
        if self.has_pending_changes():
            action = FinalizeOrder.action
            return MutationResult(
                False,
                action,
                f"Could not {action}: save or discard your changes first",
                self._order.id,
            )
        return await self._require_coordinator().finalize_order(self._order.id)

    # --- Internal helpers -----------------------------------------------------

    def _require_coordinator(self) -> MutationCoordinator:
        if self._coordinator is None:
            raise ValidationError("This edit buffer is read-only")
        return self._coordinator

    def _item_of_slot(self, slot_id: str) -> OrderItem | None:
        for item in self._order.items:
            if any(slot.id == slot_id for slot in item.slots):
                return item
        return None


def _as_change(fields: dict[str, Any]) -> SlotChange:
    values = dict(fields)
    if "pet_name" in values and values["pet_name"] is None:
        values["pet_name"] = ""
    return SlotChange(**values)
