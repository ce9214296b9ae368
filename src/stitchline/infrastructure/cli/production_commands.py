"""CLI commands for design delivery and the production floor."""

from __future__ import annotations

from pathlib import Path

import click

from stitchline.domain.model.order import EvidenceKind, OrderStatus
from stitchline.infrastructure.cli.support import (
    acting_as,
    coordinator_for,
    image_file,
    order_option,
    read_image,
    report,
    run,
)

_EVIDENCE = {"finished": EvidenceKind.FINISHED_PRODUCT, "packed": EvidenceKind.PACKED_PRODUCT}


@click.command("submit")
@acting_as
@order_option
@click.option("--item", "item_id", default=None, help="Attach to one item instead of the order.")
@click.option("--image", "image_path", required=True, type=image_file, help="Design image.")
@click.option("--machine-file", "machine_path", required=True, type=image_file, help="Machine file.")
@click.option("--sheet", "sheet_path", required=True, type=image_file, help="Technical sheet.")
def design_submit(
    actor: str,
    order_id: str,
    item_id: str | None,
    image_path: Path,
    machine_path: Path,
    sheet_path: Path,
) -> None:
    """Deliver the design files for client review."""

    async def _submit():
        return await (await coordinator_for(actor)).submit_design(
            order_id,
            read_image(image_path),
            read_image(machine_path),
            read_image(sheet_path),
            item_id,
        )

    report(run(_submit()))


def _status_command(name: str, status: OrderStatus, help_text: str) -> click.Command:
    @click.command(name, help=help_text)
    @acting_as
    @order_option
    def command(actor: str, order_id: str) -> None:
        async def _update():
            return await (await coordinator_for(actor)).update_status(order_id, status)

        report(run(_update()))

    return command


production_start = _status_command(
    "start", OrderStatus.IN_PROGRESS, "Start embroidering an approved order."
)
production_complete = _status_command(
    "complete", OrderStatus.READY_FOR_DISPATCH, "Mark embroidery as finished."
)
production_dispatch = _status_command(
    "dispatch", OrderStatus.DISPATCHED, "Ship the order (needs both evidence photos)."
)


@click.command("evidence")
@acting_as
@order_option
@click.option("--kind", type=click.Choice(sorted(_EVIDENCE)), required=True)
@click.option("--file", "path", required=True, type=image_file, help="Evidence photo.")
def production_evidence(actor: str, order_id: str, kind: str, path: Path) -> None:
    """Attach a finished-product or packed-product photo."""

    async def _upload():
        return await (await coordinator_for(actor)).upload_evidence(
            order_id, _EVIDENCE[kind], read_image(path)
        )

    report(run(_upload()))


@click.command("report")
@acting_as
@order_option
@click.option("--reason", required=True, help="What is blocking production.")
def issue_report(actor: str, order_id: str, reason: str) -> None:
    """Put an in-progress order on hold."""

    async def _report():
        return await (await coordinator_for(actor)).report_issue(order_id, reason)

    report(run(_report()))


@click.command("resolve")
@acting_as
@order_option
def issue_resolve(actor: str, order_id: str) -> None:
    """Clear the issue and resume production."""

    async def _resolve():
        return await (await coordinator_for(actor)).resolve_issue(order_id)

    report(run(_resolve()))
