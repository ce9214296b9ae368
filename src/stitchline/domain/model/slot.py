"""EmbroiderySlot: one pet-photo customization unit inside an item.

Slot status is driven only by photo upload and the quality assessment
(or a staff override).  Once a photo exists the slot never goes back to
EMPTY; it only moves between ANALYZING, APPROVED and REJECTED.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping

from stitchline.domain.exceptions import ValidationError


class SlotStatus(Enum):
    EMPTY = "EMPTY"
    ANALYZING = "ANALYZING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class EmbroideryPosition(Enum):
    CENTER = "CENTER"
    LEFT_CHEST = "LEFT_CHEST"
    RIGHT_CHEST = "RIGHT_CHEST"
    SLEEVE_LEFT = "SLEEVE_LEFT"
    SLEEVE_RIGHT = "SLEEVE_RIGHT"
    BACK_NECK = "BACK_NECK"
    CENTER_LEFT = "CENTER_LEFT"
    CENTER_RIGHT = "CENTER_RIGHT"
    FAR_LEFT = "FAR_LEFT"
    FAR_RIGHT = "FAR_RIGHT"


# Fields a customer may edit directly.  Everything else on the slot is
# photo-derived and only changes through upload / assessment.
EDITABLE_FIELDS = frozenset(
    {"pet_name", "position", "include_halo", "include_name", "font_id", "sleeve_icon_id"}
)
PHOTO_FIELDS = frozenset({"photo_url", "status", "ai_reason"})


@dataclass
class EmbroiderySlot:
    """A single pet photo plus its embroidery options.

    Invariants:
    - ``status == APPROVED`` implies ``photo_url`` is set
    - ``status == REJECTED`` implies ``ai_reason`` is set
    """

    id: str
    status: SlotStatus = SlotStatus.EMPTY
    pet_name: str | None = None
    photo_url: str | None = None
    position: EmbroideryPosition | None = None
    include_halo: bool = False
    include_name: bool = False
    ai_reason: str | None = None
    font_id: str | None = None
    sleeve_icon_id: str | None = None
    created_at: str | None = None

    @property
    def has_photo(self) -> bool:
        return bool(self.photo_url)

    # --- State transitions ----------------------------------------------------
    # These build the change to write; ``apply`` performs it.

    @staticmethod
    def analysis_started(photo_url: str) -> dict[str, Any]:
        """New photo stored: ANALYZING, and the old verdict is dropped."""
        if not photo_url:
            raise ValidationError("A photo reference is required to start analysis")
        return {"photo_url": photo_url, "status": SlotStatus.ANALYZING, "ai_reason": None}

    def verdict(self, approved: bool, reason: str | None) -> dict[str, Any]:
        """Quality verdict for the current photo."""
        if not self.has_photo:
            raise ValidationError(f"Slot {self.id} has no photo to review")
        if approved:
            return {"status": SlotStatus.APPROVED, "ai_reason": (reason or "").strip() or None}
        if not reason or not reason.strip():
            raise ValidationError("A rejection needs a reason")
        return {"status": SlotStatus.REJECTED, "ai_reason": reason.strip()}

    def apply(self, change: Mapping[str, Any]) -> dict[str, Any]:
        """Apply a field-level change in place and return it.

        Validates the slot invariants against the merged result first,
        so an invalid change leaves the slot untouched.
        """
        known = {f.name for f in fields(self)} - {"id", "created_at"}
        unknown = set(change) - known
        if unknown:
            raise ValidationError(f"Unknown slot field(s): {', '.join(sorted(unknown))}")

        merged = {name: getattr(self, name) for name in known}
        merged.update(change)
        _check_invariants(self.id, merged, had_photo=self.has_photo)

        for name, value in change.items():
            setattr(self, name, value)
        return dict(change)


def _check_invariants(slot_id: str, values: Mapping[str, Any], had_photo: bool) -> None:
    status = values["status"]
    if had_photo and (status == SlotStatus.EMPTY or not values["photo_url"]):
        raise ValidationError(f"Slot {slot_id} already has a photo and cannot be emptied")
    if status == SlotStatus.APPROVED and not values["photo_url"]:
        raise ValidationError(f"Slot {slot_id} cannot be APPROVED without a photo")
    if status == SlotStatus.REJECTED and not values["ai_reason"]:
        raise ValidationError(f"Slot {slot_id} cannot be REJECTED without a reason")
