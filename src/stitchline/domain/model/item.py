"""OrderItem: one purchased product line, plus its sleeve and design data."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from stitchline.domain.exceptions import EntityNotFoundError, ValidationError
from stitchline.domain.model.slot import EmbroiderySlot, SlotStatus
from stitchline.domain.model.value_objects import Money

# Reserved SKU of the "name on the sleeve" add-on.  Each unit bought is one
# sleeve credit for the whole order.
SLEEVE_SKU = "extra-manga"
SLEEVE_TEXT_MAX = 20

# Garments with no sleeve to embroider.
_SLEEVELESS_SKU_MARKERS = ("tshirt", "cap")


class CustomizationType(Enum):
    PORTRAIT = "PORTRAIT"
    TEXT_ONLY = "TEXT_ONLY"


class DesignStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class SleeveFont(Enum):
    TIMES = "TIMES"
    ARIAL_ROUNDED = "ARIAL_ROUNDED"
    COMIC = "COMIC"
    COLLEGE = "COLLEGE"
    CAIRO = "CAIRO"
    ALTHE = "ALTHE"


class SleeveIcon(Enum):
    PAW = "PAW"
    STAR = "STAR"
    BONE = "BONE"
    HEART = "HEART"
    CROWN = "CROWN"
    NONE = "NONE"


@dataclass(frozen=True)
class SleeveConfig:
    """Text + font + icon embroidered on the right sleeve."""

    text: str = ""
    font: SleeveFont = SleeveFont.ARIAL_ROUNDED
    icon: SleeveIcon = SleeveIcon.NONE

    def __post_init__(self) -> None:
        if len(self.text) > SLEEVE_TEXT_MAX:
            raise ValidationError(
                f"Sleeve text is limited to {SLEEVE_TEXT_MAX} characters"
            )


@dataclass(frozen=True)
class DesignAssets:
    """The three files a designer must deliver together."""

    image: str
    machine_file: str
    technical_sheet: str

    def __post_init__(self) -> None:
        missing = [
            label
            for label, value in (
                ("design image", self.image),
                ("machine file", self.machine_file),
                ("technical sheet", self.technical_sheet),
            )
            if not value
        ]
        if missing:
            raise ValidationError(f"Design submission is missing: {', '.join(missing)}")


@dataclass(frozen=True)
class DesignVersion:
    """A superseded design, kept for history."""

    assets: DesignAssets
    created_at: str
    feedback: str | None = None


@dataclass
class OrderItem:
    id: str
    sku: str
    product_name: str
    quantity: int = 1
    unit_price: Money | None = None
    group_id: str | None = None
    customization_type: CustomizationType = CustomizationType.PORTRAIT
    garment_type: str | None = None
    color: str | None = None
    size: str | None = None
    slots: list[EmbroiderySlot] = field(default_factory=list)
    sleeve: SleeveConfig | None = None
    design: DesignAssets | None = None
    design_status: DesignStatus | None = None
    design_feedback: str | None = None
    design_history: list[DesignVersion] = field(default_factory=list)

    @property
    def is_sleeve_addon(self) -> bool:
        """Credit-carrying add-on line: never photo-bearing."""
        return self.sku == SLEEVE_SKU or self.customization_type == CustomizationType.TEXT_ONLY

    @property
    def accepts_sleeve(self) -> bool:
        sku = self.sku.lower()
        return not self.is_sleeve_addon and not any(m in sku for m in _SLEEVELESS_SKU_MARKERS)

    @property
    def line_total(self) -> Money | None:
        if self.unit_price is None:
            return None
        return self.unit_price * self.quantity

    def slot(self, slot_id: str) -> EmbroiderySlot:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        raise EntityNotFoundError(f"Slot '{slot_id}' not found in item {self.id}")

    def slot_index(self, slot_id: str) -> int:
        return self.slots.index(self.slot(slot_id))

    def slot_at(self, index: int) -> EmbroiderySlot | None:
        if 0 <= index < len(self.slots):
            return self.slots[index]
        return None

    def slot_statuses(self) -> list[SlotStatus]:
        return [slot.status for slot in self.slots]

    # --- Design ---------------------------------------------------------------

    def attach_design(self, assets: DesignAssets, now: str) -> None:
        if self.is_sleeve_addon:
            raise ValidationError(f"Item {self.id} is a sleeve add-on and takes no design")
        if self.design is not None:
            self.design_history.append(
                DesignVersion(assets=self.design, created_at=now, feedback=self.design_feedback)
            )
        self.design = assets
        self.design_status = DesignStatus.PENDING
        self.design_feedback = None

    def review_design(self, approved: bool, feedback: str | None) -> None:
        if self.design_status != DesignStatus.PENDING:
            return
        if approved:
            self.design_status = DesignStatus.APPROVED
        else:
            self.design_status = DesignStatus.REJECTED
            self.design_feedback = feedback
