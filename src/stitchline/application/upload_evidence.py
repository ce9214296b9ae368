"""Application service: Upload Evidence use case.

Finished-product and packed-product photos are attached while the order
waits for dispatch; dispatch itself requires both.
"""

from __future__ import annotations

import logging

from stitchline.application.access import load_order
from stitchline.application.commands import UploadEvidence
from stitchline.domain.exceptions import ValidationError
from stitchline.domain.gateway.file_storage import FileStorage
from stitchline.domain.model.order import OrderStatus
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UploadEvidenceHandler:

    def __init__(self, order_repo: OrderRepository, storage: FileStorage) -> None:
        self._order_repo = order_repo
        self._storage = storage

    async def handle(self, command: UploadEvidence, session: Session) -> str:
        order = await load_order(self._order_repo, session, command.order_id)
        # Checked up front so a refused upload never reaches storage.
        if order.status != OrderStatus.READY_FOR_DISPATCH:
            raise ValidationError(
                f"Evidence can only be added while order #{order.id} is "
                f"{OrderStatus.READY_FOR_DISPATCH.value} (current status {order.status.value})"
            )

        key = f"evidence/{order.id}/{command.kind.value}.{command.image.extension}"
        url = await self._storage.store(command.image, key)

        changes = order.attach_evidence(command.kind, url)
        await self._order_repo.update_order(order.id, changes)
        logger.info("Order %s: %s uploaded", order.id, command.kind.value)
        return url
