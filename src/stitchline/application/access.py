"""Loading an order on behalf of a session.

Clients only ever see orders placed under their own email; staff see
every order.  The role-per-command table lives in the coordinator.
"""

from __future__ import annotations

from stitchline.domain.exceptions import EntityNotFoundError
from stitchline.domain.model.order import Order
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository


async def load_order(order_repo: OrderRepository, session: Session, order_id: str) -> Order:
    order = await order_repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    if not session.role.is_staff and not session.owns(order.email):
        # Same message as a missing order: do not leak other customers' ids.
        raise EntityNotFoundError(f"Order #{order_id} not found")
    return order


async def visible_orders(order_repo: OrderRepository, session: Session) -> list[Order]:
    if session.role.is_staff:
        return await order_repo.list_all()
    return await order_repo.list_by_customer(session.identity.email)
