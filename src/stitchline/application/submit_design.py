"""Application service: Submit Design use case.

Stores the three design files, attaches them to the item (or the order)
and moves the order to DESIGN_REVIEW, clearing old client feedback.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from stitchline.application.access import load_order
from stitchline.application.commands import SubmitDesign
from stitchline.domain.exceptions import ValidationError
from stitchline.domain.gateway.file_storage import FileStorage
from stitchline.domain.model.item import DesignAssets
from stitchline.domain.model.order import DESIGN_SUBMITTABLE_STATUSES
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class SubmitDesignHandler:

    def __init__(self, order_repo: OrderRepository, storage: FileStorage) -> None:
        self._order_repo = order_repo
        self._storage = storage

    async def handle(self, command: SubmitDesign, session: Session) -> DesignAssets:
        order = await load_order(self._order_repo, session, command.order_id)
        if order.status not in DESIGN_SUBMITTABLE_STATUSES:
            raise ValidationError(
                f"Cannot submit a design for order #{order.id} in {order.status.value} status"
            )
        if command.item_id is not None:
            order.item(command.item_id)

        # Every file must be stored before any reference is persisted.
        stamp = datetime.now(timezone.utc)
        prefix = f"designs/{order.id}/{command.item_id or 'order'}-{stamp:%Y%m%d%H%M%S}"
        image_url, machine_url, sheet_url = await asyncio.gather(
            self._storage.store(command.image, f"{prefix}-image.{command.image.extension}"),
            self._storage.store(command.machine_file, f"{prefix}-machine.{command.machine_file.extension}"),
            self._storage.store(command.technical_sheet, f"{prefix}-sheet.{command.technical_sheet.extension}"),
        )
        assets = DesignAssets(image=image_url, machine_file=machine_url, technical_sheet=sheet_url)

        changes = order.submit_design(assets, command.item_id, stamp.isoformat())
        if command.item_id is not None:
            item = order.item(command.item_id)
            await self._order_repo.update_item(
                order.id,
                item.id,
                {
                    "design": item.design,
                    "design_status": item.design_status,
                    "design_feedback": item.design_feedback,
                    "design_history": list(item.design_history),
                },
            )
        await self._order_repo.update_order(order.id, changes)
        logger.info("Order %s: design submitted by %s", order.id, session.subject_id)
        return assets
