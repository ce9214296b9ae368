"""Mutation Coordinator: the role-facing command surface.

One method per external event.  Each call checks that the session's role
may issue the command, runs the matching handler (which validates, writes
and triggers status recompute / pack sync / staff assignment as needed)
and reports a ``MutationResult`` whose message names the attempted action.
After every success the order cache is invalidated so observers refetch.

Domain errors become failed results; anything else propagates.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from stitchline.application.assignment import StaffAssigner
from stitchline.application.commands import (
    Command,
    EditImage,
    FinalizeOrder,
    InitiateUpload,
    OverrideSlotReview,
    ReportIssue,
    ResolveIssue,
    ReviewDesign,
    SlotChange,
    SubmitDesign,
    UpdateSleeve,
    UpdateSlot,
    UpdateStatus,
    UploadEvidence,
)
from stitchline.application.dto import MutationResult
from stitchline.application.edit_image import EditImageHandler
from stitchline.application.finalize_order import FinalizeOrderHandler
from stitchline.application.order_cache import OrderQueryCache
from stitchline.application.override_slot import OverrideSlotReviewHandler
from stitchline.application.photo_intake import PhotoIntake
from stitchline.application.report_issue import ReportIssueHandler, ResolveIssueHandler
from stitchline.application.review_design import ReviewDesignHandler
from stitchline.application.show_order import ListOrdersHandler
from stitchline.application.slot_writer import SlotWriter
from stitchline.application.submit_design import SubmitDesignHandler
from stitchline.application.update_sleeve import UpdateSleeveHandler
from stitchline.application.update_slot import UpdateSlotHandler
from stitchline.application.update_status import UpdateStatusHandler
from stitchline.application.upload_evidence import UploadEvidenceHandler
from stitchline.application.upload_photo import InitiateUploadHandler
from stitchline.domain.exceptions import (
    DomainException,
    ExternalServiceError,
    PermissionDeniedError,
)
from stitchline.domain.gateway.file_storage import FileStorage
from stitchline.domain.gateway.image_editor import ImageEditor
from stitchline.domain.gateway.quality_assessor import QualityAssessor
from stitchline.domain.model.item import SleeveConfig
from stitchline.domain.model.order import EvidenceKind, Order, OrderStatus
from stitchline.domain.model.session import Session
from stitchline.domain.model.staff import UserRole
from stitchline.domain.model.value_objects import ImagePayload
from stitchline.domain.repository.order_repository import OrderRepository
from stitchline.domain.repository.staff_repository import StaffRepository

logger = logging.getLogger(__name__)

_CUSTOMER = frozenset({UserRole.CLIENT, UserRole.ADMIN})
_DESIGN = frozenset({UserRole.DESIGNER, UserRole.ADMIN})
_PRODUCTION = frozenset({UserRole.EMBROIDERER, UserRole.PACKER, UserRole.ADMIN})
_STAFF = frozenset({UserRole.DESIGNER, UserRole.EMBROIDERER, UserRole.PACKER, UserRole.ADMIN})

PERMISSIONS: dict[type, frozenset[UserRole]] = {
    UpdateSlot: _CUSTOMER,
    UpdateSleeve: _CUSTOMER,
    InitiateUpload: _CUSTOMER,
    EditImage: _CUSTOMER,
    FinalizeOrder: _CUSTOMER,
    ReviewDesign: _CUSTOMER,
    OverrideSlotReview: _DESIGN,
    SubmitDesign: _DESIGN,
    UpdateStatus: _PRODUCTION,
    UploadEvidence: _PRODUCTION,
    ReportIssue: _STAFF,
    ResolveIssue: _STAFF,
}


class MutationCoordinator:

    def __init__(
        self,
        session: Session,
        order_repo: OrderRepository,
        staff_repo: StaffRepository,
        storage: FileStorage,
        assessor: QualityAssessor,
        editor: ImageEditor,
        cache: OrderQueryCache | None = None,
    ) -> None:
        self._session = session
        self._list_orders = ListOrdersHandler(order_repo)
        self._cache = cache or OrderQueryCache(self._list_orders.load)

        assigner = StaffAssigner(order_repo, staff_repo)
        slot_writer = SlotWriter(order_repo, assigner)
        intake = PhotoIntake(slot_writer, storage, assessor)

        self._handlers: dict[type, Any] = {
            UpdateSlot: UpdateSlotHandler(order_repo, slot_writer),
            UpdateSleeve: UpdateSleeveHandler(order_repo),
            InitiateUpload: InitiateUploadHandler(order_repo, intake),
            EditImage: EditImageHandler(order_repo, editor, intake),
            OverrideSlotReview: OverrideSlotReviewHandler(order_repo, slot_writer),
            FinalizeOrder: FinalizeOrderHandler(order_repo, assigner),
            SubmitDesign: SubmitDesignHandler(order_repo, storage),
            ReviewDesign: ReviewDesignHandler(order_repo, assigner),
            UpdateStatus: UpdateStatusHandler(order_repo, assigner),
            ReportIssue: ReportIssueHandler(order_repo),
            ResolveIssue: ResolveIssueHandler(order_repo),
            UploadEvidence: UploadEvidenceHandler(order_repo, storage),
        }

    @property
    def session(self) -> Session:
        return self._session

    # --- Reads ----------------------------------------------------------------

    async def orders(self) -> list[Order]:
        return await self._cache.orders_for(self._session)

    async def order(self, order_id: str) -> Order | None:
        return await self._cache.order_for(self._session, order_id)

    # --- Commands -------------------------------------------------------------

    async def execute(self, command: Command) -> MutationResult:
        action = command.action
        order_id = getattr(command, "order_id", None)
        try:
            self._authorize(type(command))
            payload = await self._handlers[type(command)].handle(command, self._session)
        except ExternalServiceError as exc:
            logger.error("Could not %s (order %s): %s", action, order_id, exc)
            # Some rows may already be written (e.g. a partial pack sync).
            self._cache.invalidate()
            return MutationResult(False, action, f"Could not {action}: {exc}", order_id)
        except DomainException as exc:
            logger.info("Refused to %s (order %s): %s", action, order_id, exc)
            return MutationResult(False, action, f"Could not {action}: {exc}", order_id)

        self._cache.invalidate()
        return MutationResult(True, action, _done(action), order_id, payload)

    async def update_slot(
        self, order_id: str, item_id: str, slot_id: str, change: SlotChange
    ) -> MutationResult:
        return await self._build_and_execute(
            UpdateSlot, lambda: UpdateSlot(order_id, item_id, slot_id, change)
        )

    async def update_sleeve(
        self, order_id: str, item_id: str, config: SleeveConfig | None
    ) -> MutationResult:
        return await self._build_and_execute(
            UpdateSleeve, lambda: UpdateSleeve(order_id, item_id, config)
        )

    async def initiate_upload(
        self, order_id: str, item_id: str, slot_id: str, image: ImagePayload
    ) -> MutationResult:
        return await self._build_and_execute(
            InitiateUpload, lambda: InitiateUpload(order_id, item_id, slot_id, image)
        )

    async def edit_image(
        self, order_id: str, item_id: str, slot_id: str, image: ImagePayload, instruction: str
    ) -> MutationResult:
        return await self._build_and_execute(
            EditImage, lambda: EditImage(order_id, item_id, slot_id, image, instruction)
        )

    async def override_slot_review(
        self, order_id: str, item_id: str, slot_id: str, approved: bool, reason: str | None = None
    ) -> MutationResult:
        return await self._build_and_execute(
            OverrideSlotReview,
            lambda: OverrideSlotReview(order_id, item_id, slot_id, approved, reason),
        )

    async def finalize_order(self, order_id: str) -> MutationResult:
        return await self._build_and_execute(FinalizeOrder, lambda: FinalizeOrder(order_id))

    async def submit_design(
        self,
        order_id: str,
        image: ImagePayload | None,
        machine_file: ImagePayload | None,
        technical_sheet: ImagePayload | None,
        item_id: str | None = None,
    ) -> MutationResult:
        return await self._build_and_execute(
            SubmitDesign,
            lambda: SubmitDesign(order_id, image, machine_file, technical_sheet, item_id),
        )

    async def review_design(
        self, order_id: str, approved: bool, feedback: str | None = None
    ) -> MutationResult:
        return await self._build_and_execute(
            ReviewDesign, lambda: ReviewDesign(order_id, approved, feedback)
        )

    async def update_status(self, order_id: str, status: OrderStatus) -> MutationResult:
        return await self._build_and_execute(UpdateStatus, lambda: UpdateStatus(order_id, status))

    async def report_issue(self, order_id: str, reason: str) -> MutationResult:
        return await self._build_and_execute(ReportIssue, lambda: ReportIssue(order_id, reason))

    async def resolve_issue(self, order_id: str) -> MutationResult:
        return await self._build_and_execute(ResolveIssue, lambda: ResolveIssue(order_id))

    async def upload_evidence(
        self, order_id: str, kind: EvidenceKind, image: ImagePayload
    ) -> MutationResult:
        return await self._build_and_execute(
            UploadEvidence, lambda: UploadEvidence(order_id, kind, image)
        )

    # --- Internal helpers -----------------------------------------------------

    async def _build_and_execute(
        self, command_type: type, build: Callable[[], Command]
    ) -> MutationResult:
        try:
            command = build()
        except DomainException as exc:
            action = command_type.action
            return MutationResult(False, action, f"Could not {action}: {exc}")
        return await self.execute(command)

    def _authorize(self, command_type: type) -> None:
        allowed = PERMISSIONS[command_type]
        if self._session.role not in allowed:
            raise PermissionDeniedError(
                f"role {self._session.role.value} is not allowed to do this"
            )


def _done(action: str) -> str:
    return f"Done: {action}."
