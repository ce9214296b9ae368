"""Abstract repository for the Order aggregate.

Writes are row-level (order, item, slot).  There is no transaction
API: fields that must change together (status + assignment) are sent
in one ``update_order`` call.  Field names are the domain attribute
names; values are domain values.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from stitchline.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    async def list_all(self) -> list[Order]:
        """Return every order (staff view and load computation)."""

    @abstractmethod
    async def list_by_customer(self, email: str) -> list[Order]:
        """Return the orders placed under *email*."""

    @abstractmethod
    async def add(self, order: Order) -> None:
        """Persist a newly placed order."""

    @abstractmethod
    async def update_order(self, order_id: str, changes: Mapping[str, Any]) -> None:
        """Write order-row fields in one call."""

    @abstractmethod
    async def update_item(self, order_id: str, item_id: str, changes: Mapping[str, Any]) -> None:
        """Write item-row fields in one call."""

    @abstractmethod
    async def update_slot(
        self, order_id: str, item_id: str, slot_id: str, changes: Mapping[str, Any]
    ) -> None:
        """Write slot-row fields in one call."""
