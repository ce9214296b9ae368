"""Unit tests for EmbroiderySlot and its invariants."""

import pytest

from stitchline.domain.exceptions import ValidationError
from stitchline.domain.model.slot import EmbroideryPosition, EmbroiderySlot, SlotStatus


class TestSlotApply:

    def test_customer_fields_are_set(self):
        slot = EmbroiderySlot("S1")
        change = slot.apply({"pet_name": "Rocky", "position": EmbroideryPosition.LEFT_CHEST})
        assert change == {"pet_name": "Rocky", "position": EmbroideryPosition.LEFT_CHEST}
        assert slot.pet_name == "Rocky"
        assert slot.position == EmbroideryPosition.LEFT_CHEST

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError, match="Unknown slot field"):
            EmbroiderySlot("S1").apply({"colour": "red"})

    def test_id_cannot_be_changed(self):
        with pytest.raises(ValidationError, match="Unknown slot field"):
            EmbroiderySlot("S1").apply({"id": "S9"})

    def test_approved_needs_photo(self):
        slot = EmbroiderySlot("S1")
        with pytest.raises(ValidationError, match="without a photo"):
            slot.apply({"status": SlotStatus.APPROVED})
        assert slot.status == SlotStatus.EMPTY

    def test_rejected_needs_reason(self):
        slot = EmbroiderySlot("S1", status=SlotStatus.ANALYZING, photo_url="mem://a.jpg")
        with pytest.raises(ValidationError, match="without a reason"):
            slot.apply({"status": SlotStatus.REJECTED})

    def test_slot_with_photo_cannot_be_emptied(self):
        slot = EmbroiderySlot("S1", status=SlotStatus.APPROVED, photo_url="mem://a.jpg")
        with pytest.raises(ValidationError, match="cannot be emptied"):
            slot.apply({"status": SlotStatus.EMPTY})
        with pytest.raises(ValidationError, match="cannot be emptied"):
            slot.apply({"photo_url": None})
        assert slot.photo_url == "mem://a.jpg"


class TestSlotPhotoLifecycle:

    def test_analysis_started_drops_old_verdict(self):
        slot = EmbroiderySlot(
            "S1", status=SlotStatus.REJECTED, photo_url="mem://old.jpg", ai_reason="Blurry"
        )
        slot.apply(EmbroiderySlot.analysis_started("mem://new.jpg"))
        assert slot.status == SlotStatus.ANALYZING
        assert slot.photo_url == "mem://new.jpg"
        assert slot.ai_reason is None

    def test_analysis_needs_a_reference(self):
        with pytest.raises(ValidationError, match="photo reference"):
            EmbroiderySlot.analysis_started("")

    def test_approval_verdict(self):
        slot = EmbroiderySlot("S1", status=SlotStatus.ANALYZING, photo_url="mem://a.jpg")
        assert slot.verdict(True, None) == {"status": SlotStatus.APPROVED, "ai_reason": None}

    def test_rejection_verdict_keeps_reason(self):
        slot = EmbroiderySlot("S1", status=SlotStatus.ANALYZING, photo_url="mem://a.jpg")
        change = slot.verdict(False, "  Too dark  ")
        assert change == {"status": SlotStatus.REJECTED, "ai_reason": "Too dark"}

    def test_rejection_without_reason_refused(self):
        slot = EmbroiderySlot("S1", status=SlotStatus.ANALYZING, photo_url="mem://a.jpg")
        with pytest.raises(ValidationError, match="needs a reason"):
            slot.verdict(False, "   ")

    def test_verdict_needs_photo(self):
        with pytest.raises(ValidationError, match="no photo to review"):
            EmbroiderySlot("S1").verdict(True, None)
