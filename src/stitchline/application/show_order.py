"""Application services: Show Order / List Orders use cases (queries)."""

from __future__ import annotations

from stitchline.application.access import load_order, visible_orders
from stitchline.application.dto import OrderDTO
from stitchline.domain.model.order import Order, OrderStatus
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, order_id: str, session: Session) -> OrderDTO:
        order = await load_order(self._order_repo, session, order_id)
        return OrderDTO.from_order(order)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def load(self, session: Session) -> list[Order]:
        return await visible_orders(self._order_repo, session)

    @staticmethod
    def filter(
        orders: list[Order],
        statuses: set[OrderStatus] | None = None,
        search: str | None = None,
    ) -> list[Order]:
        """Status filter plus free-text search on id, customer and products."""
        result = []
        needle = (search or "").strip().lower()
        for order in orders:
            if statuses and order.status not in statuses:
                continue
            if needle and not (
                needle in order.id.lower()
                or needle in order.customer_name.lower()
                or any(needle in item.product_name.lower() for item in order.items)
            ):
                continue
            result.append(order)
        return result
