"""Integration tests for photo upload, AI edit and the status they drive."""

import pytest

from stitchline.application.photo_intake import RETRY_REASON
from stitchline.domain.exceptions import ExternalServiceError
from stitchline.domain.gateway.quality_assessor import QualityAssessment
from stitchline.domain.model.order import OrderStatus
from stitchline.domain.model.slot import SlotStatus
from stitchline.domain.model.staff import UserRole
from tests.factories import (
    harness,
    make_slot,
    pack_order,
    photo,
    single_order,
    sleeve_order,
    staff_session,
)
from tests.fakes import FakeFileStorage, FakeImageEditor, FakeQualityAssessor


@pytest.mark.asyncio
class TestUploadHappyPath:

    async def test_approved_pack_photo_reaches_sibling_and_assigns_designer(self):
        h = harness(pack_order())

        result = await h.coordinator.initiate_upload("4001-PACK", "4001-H", "S1", photo())

        assert result.ok, result.message
        assert result.message == "Done: upload the photo."
        assert result.payload.approved is True
        stored = h.repo.stored("4001-PACK")
        s1 = stored.item("4001-H").slot("S1")
        s2 = stored.item("4001-J").slot("S2")
        assert s1.status == s2.status == SlotStatus.APPROVED
        assert s1.photo_url == s2.photo_url
        assert s1.photo_url.startswith("mem://orders/4001-PACK/4001-H/S1-")
        assert stored.status == OrderStatus.WAITING_FOR_DESIGN
        assert stored.assigned_designer_id == "DES-1"

    async def test_rejection_requires_action(self):
        assessor = FakeQualityAssessor(QualityAssessment(False, "La foto está borrosa"))
        h = harness(single_order(), assessor=assessor)

        result = await h.coordinator.initiate_upload("1001", "1001-1", "S1", photo())

        assert result.ok
        slot = h.repo.stored("1001").item("1001-1").slot("S1")
        assert slot.status == SlotStatus.REJECTED
        assert slot.ai_reason == "La foto está borrosa"
        assert h.repo.stored("1001").status == OrderStatus.ACTION_REQUIRED

    async def test_other_slot_still_empty_keeps_order_pending(self):
        h = harness(single_order(make_slot("S1"), make_slot("S2")))
        await h.coordinator.initiate_upload("1001", "1001-1", "S1", photo())
        assert h.repo.stored("1001").status == OrderStatus.PENDING_UPLOAD
        assert h.repo.stored("1001").assigned_designer_id is None

    async def test_replacing_a_rejected_photo(self):
        order = single_order(make_slot("S1", SlotStatus.REJECTED, reason="Blurry"),
                             status=OrderStatus.ACTION_REQUIRED)
        h = harness(order)

        await h.coordinator.initiate_upload("1001", "1001-1", "S1", photo())

        slot = h.repo.stored("1001").item("1001-1").slot("S1")
        assert slot.status == SlotStatus.APPROVED
        assert slot.ai_reason == "Looks great"
        assert h.repo.stored("1001").status == OrderStatus.WAITING_FOR_DESIGN


@pytest.mark.asyncio
class TestUploadFailClosed:

    async def test_assessor_error_rejects_with_retry_message(self):
        assessor = FakeQualityAssessor(ExternalServiceError("Gemini API unreachable"))
        h = harness(single_order(), assessor=assessor)

        result = await h.coordinator.initiate_upload("1001", "1001-1", "S1", photo())

        assert result.ok
        assert result.payload.approved is False
        slot = h.repo.stored("1001").item("1001-1").slot("S1")
        assert slot.status == SlotStatus.REJECTED
        assert slot.ai_reason == RETRY_REASON
        assert h.repo.stored("1001").status == OrderStatus.ACTION_REQUIRED

    async def test_unexpected_assessor_crash_is_also_a_rejection(self):
        h = harness(single_order(), assessor=FakeQualityAssessor(RuntimeError("boom")))
        await h.coordinator.initiate_upload("1001", "1001-1", "S1", photo())
        slot = h.repo.stored("1001").item("1001-1").slot("S1")
        assert slot.status == SlotStatus.REJECTED

    async def test_rejection_without_reason_gets_retry_message(self):
        h = harness(single_order(), assessor=FakeQualityAssessor(QualityAssessment(False, "  ")))
        await h.coordinator.initiate_upload("1001", "1001-1", "S1", photo())
        assert h.repo.stored("1001").item("1001-1").slot("S1").ai_reason == RETRY_REASON

    async def test_storage_failure_touches_nothing(self):
        h = harness(single_order(), storage=FakeFileStorage(fail=True))

        result = await h.coordinator.initiate_upload("1001", "1001-1", "S1", photo())

        assert not result.ok
        assert result.message == "Could not upload the photo: File upload failed"
        assert h.repo.writes == []
        assert h.assessor.calls == 0
        assert h.repo.stored("1001").item("1001-1").slot("S1").status == SlotStatus.EMPTY


@pytest.mark.asyncio
class TestUploadRefused:

    async def test_locked_order(self):
        h = harness(single_order(status=OrderStatus.IN_PROGRESS))
        result = await h.coordinator.initiate_upload("1001", "1001-1", "S1", photo())
        assert not result.ok
        assert "locked for editing" in result.message
        assert h.storage.files == {}

    async def test_sleeve_addon_takes_no_photo(self):
        h = harness(sleeve_order())
        result = await h.coordinator.initiate_upload("3872", "3872-EXTRA", "C1", photo())
        assert not result.ok
        assert "does not take a photo" in result.message

    async def test_unknown_slot(self):
        h = harness(single_order())
        result = await h.coordinator.initiate_upload("1001", "1001-1", "S9", photo())
        assert not result.ok
        assert "Slot 'S9' not found" in result.message


@pytest.mark.asyncio
class TestPartialWrites:

    async def test_sibling_failure_still_gets_a_verdict(self):
        h = harness(pack_order())
        h.repo.failing_slots.add(("4001-J", "S2"))

        result = await h.coordinator.initiate_upload("4001-PACK", "4001-H", "S1", photo())

        assert not result.ok
        assert "Pack sync failed for item(s) 4001-J" in result.message
        assert h.assessor.calls == 1
        stored = h.repo.stored("4001-PACK")
        assert stored.item("4001-H").slot("S1").status == SlotStatus.APPROVED
        assert stored.item("4001-J").slot("S2").status == SlotStatus.EMPTY
        # No slot is left ANALYZING, and the status follows what was written.
        assert stored.status == OrderStatus.PENDING_UPLOAD

    async def test_override_skips_a_sibling_without_photo(self):
        order = pack_order()
        source = order.item("4001-H").slot("S1")
        source.status, source.photo_url = SlotStatus.ANALYZING, "mem://rocky.jpg"
        order.status = OrderStatus.ANALYZING_IMAGE
        h = harness(order, session=staff_session(UserRole.DESIGNER, "DES-1"))

        result = await h.coordinator.override_slot_review("4001-PACK", "4001-H", "S1", True)

        assert result.ok, result.message
        stored = h.repo.stored("4001-PACK")
        assert stored.item("4001-H").slot("S1").status == SlotStatus.APPROVED
        assert stored.item("4001-J").slot("S2").status == SlotStatus.EMPTY
        assert stored.status == OrderStatus.PENDING_UPLOAD

    async def test_status_and_designer_land_together_or_not_at_all(self):
        order = single_order(
            make_slot("S1", SlotStatus.ANALYZING), status=OrderStatus.ANALYZING_IMAGE
        )
        h = harness(order, session=staff_session(UserRole.DESIGNER, "DES-1"))
        h.repo.failing_orders.add("1001")

        result = await h.coordinator.override_slot_review("1001", "1001-1", "S1", True)

        assert not result.ok
        stored = h.repo.stored("1001")
        assert stored.item("1001-1").slot("S1").status == SlotStatus.APPROVED
        assert stored.status == OrderStatus.ANALYZING_IMAGE
        assert stored.assigned_designer_id is None


@pytest.mark.asyncio
class TestEditImage:

    async def test_edited_photo_is_rechecked(self):
        h = harness(single_order())

        result = await h.coordinator.edit_image(
            "1001", "1001-1", "S1", photo(), "  Remove background "
        )

        assert result.ok, result.message
        assert h.editor.instructions == ["Remove background"]
        assert h.assessor.calls == 1
        assert h.repo.stored("1001").item("1001-1").slot("S1").status == SlotStatus.APPROVED

    async def test_no_edited_image_writes_nothing(self):
        h = harness(single_order(), editor=FakeImageEditor(result=None))

        result = await h.coordinator.edit_image("1001", "1001-1", "S1", photo(), "Retro style")

        assert not result.ok
        assert result.message == "Could not edit the photo: No edited image produced"
        assert h.repo.writes == []
        assert h.storage.files == {}

    async def test_instruction_required(self):
        h = harness(single_order())
        result = await h.coordinator.edit_image("1001", "1001-1", "S1", photo(), " ")
        assert not result.ok
        assert result.message == "Could not edit the photo: Describe the edit to apply"


@pytest.mark.asyncio
class TestOverrideSlotReview:

    async def test_designer_approves_a_rejected_photo(self):
        order = single_order(
            make_slot("S1", SlotStatus.REJECTED, reason="Blurry"),
            status=OrderStatus.ACTION_REQUIRED,
        )
        h = harness(order, session=staff_session(UserRole.DESIGNER, "DES-2"))

        result = await h.coordinator.override_slot_review("1001", "1001-1", "S1", True)

        assert result.ok, result.message
        stored = h.repo.stored("1001")
        assert stored.item("1001-1").slot("S1").status == SlotStatus.APPROVED
        assert stored.status == OrderStatus.WAITING_FOR_DESIGN

    async def test_override_rejection_needs_reason(self):
        order = single_order(make_slot("S1", SlotStatus.APPROVED))
        h = harness(order, session=staff_session(UserRole.ADMIN))
        result = await h.coordinator.override_slot_review("1001", "1001-1", "S1", False)
        assert not result.ok
        assert "needs a reason" in result.message

    async def test_override_follows_the_pack(self):
        order = pack_order()
        for item_id, slot_id in (("4001-H", "S1"), ("4001-J", "S2")):
            slot = order.item(item_id).slot(slot_id)
            slot.status, slot.photo_url, slot.ai_reason = SlotStatus.REJECTED, "mem://p.jpg", "Dark"
        h = harness(order, session=staff_session(UserRole.DESIGNER, "DES-1"))

        await h.coordinator.override_slot_review("4001-PACK", "4001-J", "S2", True)

        stored = h.repo.stored("4001-PACK")
        assert stored.item("4001-H").slot("S1").status == SlotStatus.APPROVED
        assert stored.status == OrderStatus.WAITING_FOR_DESIGN

    async def test_override_refused_once_production_started(self):
        order = single_order(make_slot("S1", SlotStatus.APPROVED), status=OrderStatus.IN_PROGRESS)
        h = harness(order, session=staff_session(UserRole.ADMIN))

        result = await h.coordinator.override_slot_review(
            "1001", "1001-1", "S1", False, "Too dark"
        )

        assert not result.ok
        assert "can no longer be reviewed" in result.message
        assert h.repo.writes == []
