"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its items (and through them,
slots and sleeve configs).  Explicit role actions are state transitions
on this class; each one validates, mutates in memory and returns the
order-row fields that must be written together.  Slot-driven status
changes come from ``OrderStatusReducer`` and land via ``apply_intake_status``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from stitchline.domain.exceptions import EntityNotFoundError, ValidationError
from stitchline.domain.model.item import DesignAssets, DesignVersion, OrderItem, SleeveConfig
from stitchline.domain.model.slot import SlotStatus
from stitchline.domain.model.value_objects import Money


class OrderStatus(Enum):
    PENDING_UPLOAD = "PENDING_UPLOAD"
    ANALYZING_IMAGE = "ANALYZING_IMAGE"
    ACTION_REQUIRED = "ACTION_REQUIRED"
    WAITING_FOR_DESIGN = "WAITING_FOR_DESIGN"
    DESIGN_REVIEW = "DESIGN_REVIEW"
    DESIGN_REJECTED = "DESIGN_REJECTED"
    READY_TO_EMBROIDER = "READY_TO_EMBROIDER"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    READY_FOR_DISPATCH = "READY_FOR_DISPATCH"
    DISPATCHED = "DISPATCHED"


class EvidenceKind(Enum):
    FINISHED_PRODUCT = "finished_product_photo"
    PACKED_PRODUCT = "packed_product_photo"


# Customer may still change photos / names / positions / sleeves.
EDITABLE_STATUSES = frozenset(
    {
        OrderStatus.PENDING_UPLOAD,
        OrderStatus.ACTION_REQUIRED,
        OrderStatus.ANALYZING_IMAGE,
        OrderStatus.DESIGN_REJECTED,
    }
)

# Slot mutations recompute the status only during photo intake.
RECOMPUTE_STATUSES = frozenset(
    {
        OrderStatus.PENDING_UPLOAD,
        OrderStatus.ACTION_REQUIRED,
        OrderStatus.ANALYZING_IMAGE,
        OrderStatus.WAITING_FOR_DESIGN,
    }
)

# Orders in these states do not count toward a staff member's load.
CLOSED_STATUSES = frozenset({OrderStatus.DISPATCHED, OrderStatus.DESIGN_REJECTED})

DESIGN_SUBMITTABLE_STATUSES = frozenset(
    {
        OrderStatus.WAITING_FOR_DESIGN,
        OrderStatus.DESIGN_REVIEW,
        OrderStatus.DESIGN_REJECTED,
    }
)


@dataclass
class Order:
    """Aggregate root for an embroidery order.

    Invariant: ``status`` is always one of the eleven OrderStatus values.
    Orders are never deleted; DISPATCHED is terminal.
    """

    id: str
    customer_name: str
    email: str
    items: list[OrderItem]
    status: OrderStatus = OrderStatus.PENDING_UPLOAD
    phone: str = ""
    shipping_address: str = ""
    customer_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    total_amount: Money | None = None
    assigned_designer_id: str | None = None
    assigned_embroiderer_id: str | None = None
    design: DesignAssets | None = None
    design_history: list[DesignVersion] = field(default_factory=list)
    client_feedback: str | None = None
    production_issue: str | None = None
    finished_product_photo: str | None = None
    packed_product_photo: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.status, OrderStatus):
            raise ValidationError(f"Invalid order status: {self.status!r}")

    # --- Lookups --------------------------------------------------------------

    def item(self, item_id: str) -> OrderItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise EntityNotFoundError(f"Item '{item_id}' not found in order #{self.id}")

    @property
    def photo_items(self) -> list[OrderItem]:
        """Items whose slots matter for readiness (sleeve add-ons excluded)."""
        return [item for item in self.items if not item.is_sleeve_addon]

    def siblings_of(self, item: OrderItem) -> list[OrderItem]:
        """Other items of the same pack, in order."""
        if not item.group_id or item.is_sleeve_addon:
            return []
        return [
            other
            for other in self.items
            if other.group_id == item.group_id and other.id != item.id and not other.is_sleeve_addon
        ]

    @property
    def is_locked(self) -> bool:
        return self.status not in EDITABLE_STATUSES

    @property
    def is_open(self) -> bool:
        return self.status not in CLOSED_STATUSES

    @property
    def computed_total(self) -> Money:
        result = Money.zero(self.total_amount.currency if self.total_amount else "CLP")
        for item in self.items:
            if item.line_total is not None:
                result = result + item.line_total
        return result

    # --- Sleeve credits -------------------------------------------------------

    @property
    def total_sleeve_credits(self) -> int:
        return sum(item.quantity for item in self.items if item.is_sleeve_addon)

    @property
    def used_sleeve_credits(self) -> int:
        return sum(1 for item in self.items if not item.is_sleeve_addon and item.sleeve is not None)

    @property
    def remaining_sleeve_credits(self) -> int:
        return self.total_sleeve_credits - self.used_sleeve_credits

    def set_sleeve(self, item_id: str, config: SleeveConfig | None) -> dict[str, Any]:
        """Attach, replace or remove (``config=None``) an item's sleeve.

        Attaching to an item that had no sleeve consumes one credit.
        """
        self.assert_editable()
        item = self.item(item_id)
        if config is not None:
            if not item.accepts_sleeve:
                raise ValidationError(f"Item {item.product_name} cannot carry a sleeve design")
            if item.sleeve is None and self.remaining_sleeve_credits <= 0:
                raise ValidationError("No sleeve credits remaining for this order")
        item.sleeve = config
        return {"sleeve": config}

    # --- Intake phase ---------------------------------------------------------

    def assert_editable(self) -> None:
        if self.is_locked:
            raise ValidationError(
                f"Order #{self.id} is locked for editing (status {self.status.value})"
            )

    def assert_in_intake(self) -> None:
        if self.status not in RECOMPUTE_STATUSES:
            raise ValidationError(
                f"Photos of order #{self.id} can no longer be reviewed "
                f"(status {self.status.value})"
            )

    def apply_intake_status(
        self, new_status: OrderStatus, designer_id: str | None = None
    ) -> dict[str, Any]:
        """Land a reducer-computed status, assigning a designer if given."""
        if self.status not in RECOMPUTE_STATUSES:
            raise ValidationError(
                f"Status of order #{self.id} is no longer driven by photos "
                f"(current status {self.status.value})"
            )
        changes: dict[str, Any] = {}
        if new_status != self.status:
            changes["status"] = new_status
        if (
            new_status == OrderStatus.WAITING_FOR_DESIGN
            and self.assigned_designer_id is None
            and designer_id is not None
        ):
            changes["assigned_designer_id"] = designer_id
        return self._apply(changes)

    def finalize(self, designer_id: str | None = None) -> dict[str, Any]:
        """Client hands the photos over for design (manual trigger)."""
        self.assert_ready_for_design()
        changes: dict[str, Any] = {"status": OrderStatus.WAITING_FOR_DESIGN}
        if self.assigned_designer_id is None and designer_id is not None:
            changes["assigned_designer_id"] = designer_id
        return self._apply(changes)

    def assert_ready_for_design(self) -> None:
        """Every photo slot needs a photo and must be APPROVED or still
        ANALYZING; a REJECTED slot has to be replaced first.
        """
        self.assert_editable()
        for item in self.photo_items:
            for slot in item.slots:
                if not slot.has_photo:
                    raise ValidationError(
                        f"{item.product_name}: every pet needs a photo before finalizing"
                    )
                if slot.status == SlotStatus.REJECTED:
                    raise ValidationError(
                        f"{item.product_name}: replace the rejected photo before finalizing"
                    )

    # --- Design phase ---------------------------------------------------------

    def submit_design(
        self, assets: DesignAssets, item_id: str | None = None, now: str | None = None
    ) -> dict[str, Any]:
        """Designer delivers image + machine file + technical sheet."""
        if self.status not in DESIGN_SUBMITTABLE_STATUSES:
            raise ValidationError(
                f"Cannot submit a design for order #{self.id} in {self.status.value} status"
            )
        stamp = now or datetime.now(timezone.utc).isoformat()
        changes: dict[str, Any] = {"status": OrderStatus.DESIGN_REVIEW, "client_feedback": None}
        if item_id is not None:
            self.item(item_id).attach_design(assets, stamp)
        else:
            if self.design is not None:
                self.design_history.append(
                    DesignVersion(assets=self.design, created_at=stamp, feedback=self.client_feedback)
                )
                changes["design_history"] = list(self.design_history)
            changes["design"] = assets
        return self._apply(changes)

    def review_design(
        self,
        approved: bool,
        feedback: str | None = None,
        embroiderer_id: str | None = None,
    ) -> dict[str, Any]:
        """Client approves or rejects the design under review."""
        if self.status != OrderStatus.DESIGN_REVIEW:
            raise ValidationError(
                f"Order #{self.id} has no design awaiting review (status {self.status.value})"
            )
        if approved:
            changes: dict[str, Any] = {"status": OrderStatus.READY_TO_EMBROIDER}
            if self.assigned_embroiderer_id is None and embroiderer_id is not None:
                changes["assigned_embroiderer_id"] = embroiderer_id
        else:
            if not feedback or not feedback.strip():
                raise ValidationError("Tell the designer what to change when rejecting")
            feedback = feedback.strip()
            changes = {"status": OrderStatus.DESIGN_REJECTED, "client_feedback": feedback}
        for item in self.items:
            item.review_design(approved, feedback)
        return self._apply(changes)

    # --- Production phase -----------------------------------------------------

    def start_production(self, embroiderer_id: str | None = None) -> dict[str, Any]:
        self._expect(OrderStatus.READY_TO_EMBROIDER, "start embroidery on")
        changes: dict[str, Any] = {"status": OrderStatus.IN_PROGRESS}
        if self.assigned_embroiderer_id is None and embroiderer_id is not None:
            changes["assigned_embroiderer_id"] = embroiderer_id
        return self._apply(changes)

    def complete_production(self) -> dict[str, Any]:
        self._expect(OrderStatus.IN_PROGRESS, "complete")
        return self._apply({"status": OrderStatus.READY_FOR_DISPATCH})

    def report_issue(self, reason: str) -> dict[str, Any]:
        if not reason or not reason.strip():
            raise ValidationError("Describe the issue before putting the order on hold")
        self._expect(OrderStatus.IN_PROGRESS, "put on hold")
        return self._apply({"status": OrderStatus.ON_HOLD, "production_issue": reason.strip()})

    def resolve_issue(self) -> dict[str, Any]:
        self._expect(OrderStatus.ON_HOLD, "resume")
        return self._apply({"status": OrderStatus.IN_PROGRESS, "production_issue": None})

    def attach_evidence(self, kind: EvidenceKind, url: str) -> dict[str, Any]:
        self._expect(OrderStatus.READY_FOR_DISPATCH, "attach evidence to")
        return self._apply({kind.value: url})

    def dispatch(self) -> dict[str, Any]:
        self._expect(OrderStatus.READY_FOR_DISPATCH, "dispatch")
        missing = [
            label
            for label, value in (
                ("finished product photo", self.finished_product_photo),
                ("packed product photo", self.packed_product_photo),
            )
            if not value
        ]
        if missing:
            raise ValidationError(f"Cannot dispatch without the {' and '.join(missing)}")
        return self._apply({"status": OrderStatus.DISPATCHED})

    # --- Internal helpers -----------------------------------------------------

    def _expect(self, status: OrderStatus, verb: str) -> None:
        if self.status != status:
            raise ValidationError(
                f"Cannot {verb} order #{self.id} in {self.status.value} status "
                f"(expected {status.value})"
            )

    def _apply(self, changes: dict[str, Any]) -> dict[str, Any]:
        for name, value in changes.items():
            setattr(self, name, value)
        return changes
