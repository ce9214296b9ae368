"""CLI commands for browsing orders and the customer's order-level actions."""

from __future__ import annotations

import click

from stitchline.application.dto import OrderDTO
from stitchline.application.show_order import ListOrdersHandler, ShowOrderHandler
from stitchline.domain.model.order import OrderStatus
from stitchline.infrastructure.bootstrap import order_repository
from stitchline.infrastructure.cli.support import (
    acting_as,
    coordinator_for,
    display_order,
    order_option,
    report,
    resolve_session,
    run,
)


@click.command("list")
@acting_as
@click.option(
    "--status",
    "statuses",
    multiple=True,
    type=click.Choice([s.value for s in OrderStatus]),
    help="Only orders in this status (repeatable).",
)
@click.option("--search", default=None, help="Match order id, customer or product.")
def order_list(actor: str, statuses: tuple[str, ...], search: str | None) -> None:
    """List the orders visible to the acting user."""

    async def _list():
        orders = await (await coordinator_for(actor)).orders()
        wanted = {OrderStatus(s) for s in statuses} or None
        return ListOrdersHandler.filter(orders, wanted, search)

    orders = run(_list())
    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<12} {'Status':<20} {'Customer':<24} {'Total':>14}")
    click.echo("-" * 73)
    for order in orders:
        dto = OrderDTO.from_order(order)
        click.echo(f"{dto.id:<12} {dto.status:<20} {dto.customer_name:<24} {dto.total:>14}")


@click.command("show")
@acting_as
@order_option
def order_show(actor: str, order_id: str) -> None:
    """Show details of an order."""

    async def _show():
        session = await resolve_session(actor)
        return await ShowOrderHandler(order_repository()).handle(order_id, session)

    display_order(run(_show()))


@click.command("finalize")
@acting_as
@order_option
def order_finalize(actor: str, order_id: str) -> None:
    """Hand the photos over for design."""

    async def _finalize():
        return await (await coordinator_for(actor)).finalize_order(order_id)

    report(run(_finalize()))


@click.command("review")
@acting_as
@order_option
@click.option("--approve/--reject", "approved", required=True, help="Verdict on the design.")
@click.option("--feedback", default=None, help="What to change (required when rejecting).")
def order_review(actor: str, order_id: str, approved: bool, feedback: str | None) -> None:
    """Approve or reject the design under review."""

    async def _review():
        return await (await coordinator_for(actor)).review_design(order_id, approved, feedback)

    report(run(_review()))
