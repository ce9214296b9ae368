"""Application services: Report Issue / Resolve Issue use cases.

A blocking production problem puts an IN_PROGRESS order ON_HOLD with
the reason attached; resolving it clears the reason and resumes work.
"""

from __future__ import annotations

import logging

from stitchline.application.access import load_order
from stitchline.application.commands import ReportIssue, ResolveIssue
from stitchline.domain.model.session import Session
from stitchline.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class ReportIssueHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, command: ReportIssue, session: Session) -> None:
        order = await load_order(self._order_repo, session, command.order_id)
        changes = order.report_issue(command.reason)
        await self._order_repo.update_order(order.id, changes)
        logger.warning("Order %s: on hold (%s)", order.id, order.production_issue)


class ResolveIssueHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    async def handle(self, command: ResolveIssue, session: Session) -> None:
        order = await load_order(self._order_repo, session, command.order_id)
        changes = order.resolve_issue()
        await self._order_repo.update_order(order.id, changes)
        logger.info("Order %s: issue resolved, back in progress", order.id)
