"""Tests for the Local Edit Buffer: staging, merged reads, commit, discard."""

import pytest

from stitchline.application.commands import SlotChange
from stitchline.application.edit_buffer import REMOVED, LocalEditBuffer, display
from stitchline.domain.exceptions import ValidationError
from stitchline.domain.model.item import SleeveConfig
from stitchline.domain.model.order import OrderStatus
from stitchline.domain.model.slot import EmbroideryPosition, SlotStatus
from tests.factories import harness, make_slot, pack_order, single_order, sleeve_order


def _analyzing_order():
    return single_order(
        make_slot("S1", SlotStatus.ANALYZING), status=OrderStatus.ANALYZING_IMAGE
    )


class TestDisplay:

    def test_untouched_shows_persisted(self):
        assert display("Rocky") == "Rocky"

    def test_pending_wins(self):
        assert display("Rocky", "Luna") == "Luna"

    def test_pending_none_is_a_value(self):
        assert display("Rocky", None) is None

    def test_removal_hides_persisted(self):
        assert display(SleeveConfig("Rocky"), REMOVED) is None


class TestStaging:

    def test_staged_edit_is_merged_but_not_persisted(self):
        order = single_order()
        buffer = LocalEditBuffer(order)

        buffer.stage_slot("1001-1", "S1", SlotChange(pet_name="Rocky", include_halo=True))

        assert buffer.slot_value("1001-1", "S1", "pet_name") == "Rocky"
        view = buffer.slot_view("1001-1", "S1")
        assert view.pet_name == "Rocky" and view.include_halo is True
        assert order.item("1001-1").slot("S1").pet_name is None
        assert buffer.has_pending_changes()

    def test_later_edits_merge_field_by_field(self):
        buffer = LocalEditBuffer(single_order())
        buffer.stage_slot("1001-1", "S1", SlotChange(pet_name="Rocky"))
        buffer.stage_slot("1001-1", "S1", SlotChange(position=EmbroideryPosition.LEFT_CHEST))
        assert buffer.pending_slot("S1") == {
            "pet_name": "Rocky",
            "position": EmbroideryPosition.LEFT_CHEST,
        }

    def test_pack_siblings_are_staged_together(self):
        buffer = LocalEditBuffer(pack_order())
        staged = buffer.stage_slot("4001-H", "S1", SlotChange(pet_name="Rocky"))
        assert staged == ["S1", "S2"]
        assert buffer.slot_value("4001-J", "S2", "pet_name") == "Rocky"
        assert buffer.pending_slot("S3") == {}

    def test_locked_order_refuses_staging(self):
        buffer = LocalEditBuffer(single_order(status=OrderStatus.DESIGN_REVIEW))
        with pytest.raises(ValidationError, match="locked"):
            buffer.stage_slot("1001-1", "S1", SlotChange(pet_name="Rocky"))

    def test_empty_change_refused(self):
        with pytest.raises(ValidationError, match="Nothing to update"):
            LocalEditBuffer(single_order()).stage_slot("1001-1", "S1", SlotChange())


class TestSleeveStaging:

    def test_credits_follow_the_merged_view(self):
        buffer = LocalEditBuffer(sleeve_order(credits=1))
        buffer.stage_sleeve("3872-1", SleeveConfig("Rocky"))
        assert buffer.remaining_sleeve_credits == 0
        with pytest.raises(ValidationError, match="No sleeve credits remaining"):
            buffer.stage_sleeve("3872-2", SleeveConfig("Luna"))

    def test_staged_removal_frees_a_persisted_credit(self):
        order = sleeve_order(credits=1)
        order.item("3872-1").sleeve = SleeveConfig("Rocky")
        buffer = LocalEditBuffer(order)

        buffer.stage_sleeve("3872-1", None)
        assert buffer.sleeve_view("3872-1") is None
        assert buffer.pending_sleeve("3872-1") is REMOVED
        assert buffer.remaining_sleeve_credits == 1

        buffer.stage_sleeve("3872-2", SleeveConfig("Luna"))
        assert buffer.sleeve_view("3872-2") == SleeveConfig("Luna")

    def test_sleeveless_garment(self):
        with pytest.raises(ValidationError, match="cannot carry a sleeve"):
            LocalEditBuffer(sleeve_order()).stage_sleeve("3872-T", SleeveConfig("Rocky"))


class TestDiscard:

    def test_needs_confirmation(self):
        buffer = LocalEditBuffer(single_order())
        buffer.stage_slot("1001-1", "S1", SlotChange(pet_name="Rocky"))
        with pytest.raises(ValidationError, match="must be confirmed"):
            buffer.discard()
        assert buffer.has_pending_changes()

        buffer.discard(confirm=True)
        assert not buffer.has_pending_changes()
        assert buffer.slot_value("1001-1", "S1", "pet_name") is None

    def test_rebase_keeps_pending_edits(self):
        buffer = LocalEditBuffer(single_order())
        buffer.stage_slot("1001-1", "S1", SlotChange(pet_name="Rocky"))
        fresh = single_order(make_slot("S1", SlotStatus.APPROVED))
        buffer.rebase(fresh)
        assert buffer.slot_view("1001-1", "S1").status == SlotStatus.APPROVED
        assert buffer.slot_value("1001-1", "S1", "pet_name") == "Rocky"

    def test_rebase_onto_another_order_refused(self):
        with pytest.raises(ValidationError, match="belongs to order"):
            LocalEditBuffer(single_order()).rebase(single_order(order_id="2002"))


@pytest.mark.asyncio
class TestCommit:

    async def test_commit_persists_everything(self):
        h = harness(sleeve_order(credits=1))
        buffer = LocalEditBuffer(await h.coordinator.order("3872"), h.coordinator)
        buffer.stage_slot("3872-1", "C1", SlotChange(pet_name="Rocky"))
        buffer.stage_sleeve("3872-1", SleeveConfig("Rocky"))

        report = await buffer.commit()

        assert report.ok
        assert report.committed == 2
        assert not buffer.has_pending_changes()
        stored = h.repo.stored("3872")
        assert stored.item("3872-1").slot("C1").pet_name == "Rocky"
        assert stored.item("3872-1").sleeve == SleeveConfig("Rocky")
        assert buffer.order.item("3872-1").slot("C1").pet_name == "Rocky"

    async def test_failed_entries_stay_pending(self):
        h = harness(sleeve_order())
        h.repo.failing_slots.add(("3872-2", "C2"))
        buffer = LocalEditBuffer(await h.coordinator.order("3872"), h.coordinator)
        buffer.stage_slot("3872-1", "C1", SlotChange(pet_name="Rocky"))
        buffer.stage_slot("3872-2", "C2", SlotChange(pet_name="Luna"))

        report = await buffer.commit()

        assert not report.ok
        assert report.committed == 1
        assert list(report.failures) == ["slot:C2"]
        assert report.failures["slot:C2"].startswith("Could not update the pet details:")
        assert buffer.pending_slot("C1") == {}
        assert buffer.pending_slot("C2") == {"pet_name": "Luna"}
        assert h.repo.stored("3872").item("3872-1").slot("C1").pet_name == "Rocky"

    async def test_sleeve_swap_in_one_commit(self):
        order = sleeve_order(credits=1)
        order.item("3872-1").sleeve = SleeveConfig("Rocky")
        h = harness(order)
        buffer = LocalEditBuffer(await h.coordinator.order("3872"), h.coordinator)
        buffer.stage_sleeve("3872-1", None)
        buffer.stage_sleeve("3872-2", SleeveConfig("Luna"))

        report = await buffer.commit()

        assert report.ok, report.failures
        stored = h.repo.stored("3872")
        assert stored.item("3872-1").sleeve is None
        assert stored.item("3872-2").sleeve == SleeveConfig("Luna")

    async def test_read_only_buffer_cannot_commit(self):
        buffer = LocalEditBuffer(single_order())
        with pytest.raises(ValidationError, match="read-only"):
            await buffer.commit()


@pytest.mark.asyncio
class TestFinalizeFromBuffer:

    async def test_refused_while_edits_are_pending(self):
        h = harness(_analyzing_order())
        buffer = LocalEditBuffer(await h.coordinator.order("1001"), h.coordinator)
        buffer.stage_slot("1001-1", "S1", SlotChange(pet_name="Rocky"))

        result = await buffer.finalize()

        assert not result.ok
        assert "save or discard your changes first" in result.message
        assert h.repo.writes == []

    async def test_finalize_after_commit(self):
        h = harness(_analyzing_order())
        buffer = LocalEditBuffer(await h.coordinator.order("1001"), h.coordinator)
        buffer.stage_slot("1001-1", "S1", SlotChange(pet_name="Rocky"))
        await buffer.commit()

        result = await buffer.finalize()

        assert result.ok, result.message
        assert h.repo.stored("1001").status == OrderStatus.WAITING_FOR_DESIGN
