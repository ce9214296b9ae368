"""JSON-file-backed implementation of OrderRepository.

Each row-level write reads the file, changes only the named fields of
one order / item / slot and writes the file back.  File errors surface
as ExternalServiceError.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from stitchline.domain.exceptions import EntityNotFoundError, ExternalServiceError
from stitchline.domain.model.order import Order
from stitchline.domain.repository.order_repository import OrderRepository
from stitchline.infrastructure.persistence.serialization import (
    apply_fields,
    order_from_raw,
    order_to_raw,
)

logger = logging.getLogger(__name__)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------
    # File I/O here is blocking and never yields, so writes gathered by pack
    # sync run one after another.

    async def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return order_from_raw(raw)
        return None

    async def list_all(self) -> list[Order]:
        return [order_from_raw(raw) for raw in self._load_raw()]

    async def list_by_customer(self, email: str) -> list[Order]:
        wanted = email.strip().lower()
        return [
            order_from_raw(raw)
            for raw in self._load_raw()
            if raw["email"].strip().lower() == wanted
        ]

    async def add(self, order: Order) -> None:
        orders = self._load_raw()
        if any(raw["id"] == order.id for raw in orders):
            raise ExternalServiceError(f"Order #{order.id} already exists")
        orders.append(order_to_raw(order))
        self._persist_raw(orders)

    async def update_order(self, order_id: str, changes: Mapping[str, Any]) -> None:
        self._update(order_id, lambda order: apply_fields(order, dict(changes)))

    async def update_item(self, order_id: str, item_id: str, changes: Mapping[str, Any]) -> None:
        self._update(order_id, lambda order: apply_fields(order.item(item_id), dict(changes)))

    async def update_slot(
        self, order_id: str, item_id: str, slot_id: str, changes: Mapping[str, Any]
    ) -> None:
        self._update(
            order_id,
            lambda order: apply_fields(order.item(item_id).slot(slot_id), dict(changes)),
        )

    # --- Row update -----------------------------------------------------------

    def _update(self, order_id: str, mutate: Callable[[Order], None]) -> None:
        orders = self._load_raw()
        for i, raw in enumerate(orders):
            if raw["id"] == order_id:
                order = order_from_raw(raw)
                mutate(order)
                orders[i] = order_to_raw(order)
                self._persist_raw(orders)
                return
        raise EntityNotFoundError(f"Order #{order_id} not found")

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ExternalServiceError("Order store unreadable", exc) from exc

    def _persist_raw(self, orders: list[dict]) -> None:
        try:
            self._file_path.write_text(
                json.dumps(orders, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise ExternalServiceError("Order store write failed", exc) from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
            logger.info("Created empty order store at %s", self._file_path)
