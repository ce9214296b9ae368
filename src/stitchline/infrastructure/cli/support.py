"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import asyncio
import mimetypes
from pathlib import Path
from typing import Any, Coroutine, TypeVar

import click

from stitchline.application.dto import MutationResult, OrderDTO
from stitchline.application.mutation_coordinator import MutationCoordinator
from stitchline.domain.exceptions import DomainException
from stitchline.domain.model.session import Session
from stitchline.domain.model.value_objects import ImagePayload
from stitchline.infrastructure.bootstrap import coordinator, session_resolver

T = TypeVar("T")

acting_as = click.option(
    "--as", "actor", required=True, metavar="EMAIL", help="Email of the acting user."
)
order_option = click.option("--order", "order_id", required=True, help="Order ID.")
image_file = click.Path(exists=True, dir_okay=False, path_type=Path)


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Drive a coroutine, turning domain errors into CLI errors."""
    try:
        return asyncio.run(coro)
    except DomainException as exc:
        raise click.ClickException(str(exc))


async def resolve_session(actor: str) -> Session:
    return await session_resolver().resolve(actor)


async def coordinator_for(actor: str) -> MutationCoordinator:
    return coordinator(await resolve_session(actor))


def read_image(path: Path) -> ImagePayload:
    media_type, _ = mimetypes.guess_type(path.name)
    return ImagePayload(data=path.read_bytes(), media_type=media_type or "application/octet-stream")


def report(result: MutationResult) -> None:
    if not result.ok:
        raise click.ClickException(result.message)
    click.echo(result.message)


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name} <{dto.email}>")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Total:    {dto.total}")
    click.echo(f"Designer: {dto.designer}   Embroiderer: {dto.embroiderer}")
    if dto.sleeve_credits != "-":
        click.echo(f"Sleeve credits left: {dto.sleeve_credits}")
    if dto.client_feedback:
        click.echo(f"Client feedback: {dto.client_feedback}")
    if dto.production_issue:
        click.echo(f"On hold: {dto.production_issue}")
    click.echo()

    for item in dto.items:
        pack = f"  [pack {item.group_id}]" if item.group_id else ""
        click.echo(f"  {item.id:<12} {item.product_name} x{item.quantity}{pack}")
        if item.is_sleeve_addon:
            continue
        if item.sleeve:
            click.echo(f"    sleeve: {item.sleeve}")
        if item.design_status:
            click.echo(f"    design: {item.design_status}")
        for slot in item.slots:
            click.echo(
                f"    {slot.id:<8} {slot.status:<10} {slot.pet_name or '-':<12} "
                f"{slot.position or '-':<12} {slot.ai_reason}"
            )
