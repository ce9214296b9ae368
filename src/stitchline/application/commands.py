"""Commands: one tagged request struct per role-facing operation.

Each command lists exactly the fields it may touch, so a handler never
has to guess what a bag of optional values was meant to change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from stitchline.domain.exceptions import ValidationError
from stitchline.domain.model.item import SleeveConfig
from stitchline.domain.model.order import EvidenceKind, OrderStatus
from stitchline.domain.model.slot import EmbroideryPosition
from stitchline.domain.model.value_objects import ImagePayload


@dataclass(frozen=True)
class SlotChange:
    """Customer-editable slot fields; ``None`` means "leave as is".

    A blank ``pet_name`` clears the name.
    """

    pet_name: str | None = None
    position: EmbroideryPosition | None = None
    include_halo: bool | None = None
    include_name: bool | None = None
    font_id: str | None = None
    sleeve_icon_id: str | None = None

    def as_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        if self.pet_name is not None:
            fields["pet_name"] = self.pet_name.strip() or None
        for name in ("position", "include_halo", "include_name", "font_id", "sleeve_icon_id"):
            value = getattr(self, name)
            if value is not None:
                fields[name] = value
        return fields


@dataclass(frozen=True)
class UpdateSlot:
    action: ClassVar[str] = "update the pet details"

    order_id: str
    item_id: str
    slot_id: str
    change: SlotChange

    def __post_init__(self) -> None:
        if not self.change.as_fields():
            raise ValidationError("Nothing to update")


@dataclass(frozen=True)
class UpdateSleeve:
    """``config=None`` removes the sleeve and frees its credit."""

    action: ClassVar[str] = "update the sleeve"

    order_id: str
    item_id: str
    config: SleeveConfig | None


@dataclass(frozen=True)
class InitiateUpload:
    action: ClassVar[str] = "upload the photo"

    order_id: str
    item_id: str
    slot_id: str
    image: ImagePayload


@dataclass(frozen=True)
class EditImage:
    action: ClassVar[str] = "edit the photo"

    order_id: str
    item_id: str
    slot_id: str
    image: ImagePayload
    instruction: str

    def __post_init__(self) -> None:
        if not self.instruction or not self.instruction.strip():
            raise ValidationError("Describe the edit to apply")


@dataclass(frozen=True)
class OverrideSlotReview:
    """Staff replaces the automatic verdict on a photo."""

    action: ClassVar[str] = "override the photo review"

    order_id: str
    item_id: str
    slot_id: str
    approved: bool
    reason: str | None = None


@dataclass(frozen=True)
class FinalizeOrder:
    action: ClassVar[str] = "send the order to design"

    order_id: str


@dataclass(frozen=True)
class SubmitDesign:
    """All three files are required; ``item_id=None`` targets the order."""

    action: ClassVar[str] = "submit the design"

    order_id: str
    image: ImagePayload | None
    machine_file: ImagePayload | None
    technical_sheet: ImagePayload | None
    item_id: str | None = None

    def __post_init__(self) -> None:
        missing = [
            label
            for label, value in (
                ("design image", self.image),
                ("machine file", self.machine_file),
                ("technical sheet", self.technical_sheet),
            )
            if value is None
        ]
        if missing:
            raise ValidationError(f"Design submission is missing: {', '.join(missing)}")


@dataclass(frozen=True)
class ReviewDesign:
    action: ClassVar[str] = "review the design"

    order_id: str
    approved: bool
    feedback: str | None = None


@dataclass(frozen=True)
class UpdateStatus:
    """Production moves: start, complete or dispatch."""

    action: ClassVar[str] = "update the order status"

    order_id: str
    status: OrderStatus


@dataclass(frozen=True)
class ReportIssue:
    action: ClassVar[str] = "report the issue"

    order_id: str
    reason: str


@dataclass(frozen=True)
class ResolveIssue:
    action: ClassVar[str] = "resolve the issue"

    order_id: str


@dataclass(frozen=True)
class UploadEvidence:
    action: ClassVar[str] = "upload the evidence photo"

    order_id: str
    kind: EvidenceKind
    image: ImagePayload


Command = Union[
    UpdateSlot,
    UpdateSleeve,
    InitiateUpload,
    EditImage,
    OverrideSlotReview,
    FinalizeOrder,
    SubmitDesign,
    ReviewDesign,
    UpdateStatus,
    ReportIssue,
    ResolveIssue,
    UploadEvidence,
]
