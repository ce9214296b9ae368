"""Read-through cache of the orders each subject can see.

Entries are keyed by subject id and only dropped explicitly; the
mutation coordinator invalidates after every successful command so
every observer refetches the current state.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from stitchline.domain.model.order import Order
from stitchline.domain.model.session import Session

logger = logging.getLogger(__name__)

OrderLoader = Callable[[Session], Awaitable[list[Order]]]


class OrderQueryCache:

    def __init__(self, loader: OrderLoader) -> None:
        self._loader = loader
        self._entries: dict[str, list[Order]] = {}

    async def orders_for(self, session: Session) -> list[Order]:
        key = session.subject_id
        if key not in self._entries:
            logger.debug("Order cache miss for %s", key)
            self._entries[key] = await self._loader(session)
        return self._entries[key]

    async def order_for(self, session: Session, order_id: str) -> Order | None:
        for order in await self.orders_for(session):
            if order.id == order_id:
                return order
        return None

    def invalidate(self, subject_id: str | None = None) -> None:
        """Drop one subject's entry, or every entry when *subject_id* is None."""
        if subject_id is None:
            self._entries.clear()
        else:
            self._entries.pop(subject_id, None)

    def __contains__(self, subject_id: str) -> bool:
        return subject_id in self._entries
