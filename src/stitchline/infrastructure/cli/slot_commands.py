"""CLI commands for pet slots and sleeve personalization."""

from __future__ import annotations

from pathlib import Path

import click

from stitchline.application.commands import SlotChange
from stitchline.domain.gateway.image_editor import QUICK_EDITS
from stitchline.domain.model.item import SleeveConfig, SleeveFont, SleeveIcon
from stitchline.domain.model.slot import EmbroideryPosition
from stitchline.infrastructure.cli.support import (
    acting_as,
    coordinator_for,
    image_file,
    order_option,
    read_image,
    report,
    run,
)

item_option = click.option("--item", "item_id", required=True, help="Item ID.")
slot_option = click.option("--slot", "slot_id", required=True, help="Slot ID.")


def _echo_assessment(payload) -> None:
    if payload is None:
        return
    verdict = "approved" if payload.approved else "rejected"
    click.echo(f"Photo {verdict}: {payload.reason}" if payload.reason else f"Photo {verdict}.")


@click.command("update")
@acting_as
@order_option
@item_option
@slot_option
@click.option("--name", "pet_name", default=None, help="Pet name (empty string clears it).")
@click.option(
    "--position",
    type=click.Choice([p.value for p in EmbroideryPosition]),
    default=None,
    help="Embroidery position.",
)
@click.option("--halo/--no-halo", default=None, help="Draw a halo around the portrait.")
@click.option("--show-name/--hide-name", "include_name", default=None, help="Embroider the name.")
@click.option("--font", "font_id", default=None, help="Font for the embroidered name.")
@click.option("--icon", "sleeve_icon_id", default=None, help="Icon next to the name.")
def slot_update(
    actor: str,
    order_id: str,
    item_id: str,
    slot_id: str,
    pet_name: str | None,
    position: str | None,
    halo: bool | None,
    include_name: bool | None,
    font_id: str | None,
    sleeve_icon_id: str | None,
) -> None:
    """Edit a pet's name, position and embroidery options."""
    change = SlotChange(
        pet_name=pet_name,
        position=EmbroideryPosition(position) if position else None,
        include_halo=halo,
        include_name=include_name,
        font_id=font_id,
        sleeve_icon_id=sleeve_icon_id,
    )

    async def _update():
        return await (await coordinator_for(actor)).update_slot(order_id, item_id, slot_id, change)

    report(run(_update()))


@click.command("upload")
@acting_as
@order_option
@item_option
@slot_option
@click.option("--file", "path", required=True, type=image_file, help="Pet photo.")
def slot_upload(actor: str, order_id: str, item_id: str, slot_id: str, path: Path) -> None:
    """Upload a pet photo and run the quality check."""

    async def _upload():
        return await (await coordinator_for(actor)).initiate_upload(
            order_id, item_id, slot_id, read_image(path)
        )

    result = run(_upload())
    report(result)
    _echo_assessment(result.payload)


@click.command("edit")
@acting_as
@order_option
@item_option
@slot_option
@click.option("--file", "path", required=True, type=image_file, help="Photo to edit.")
@click.option("--instruction", default=None, help="Free-text edit instruction.")
@click.option("--preset", type=click.Choice(QUICK_EDITS), default=None, help="Quick edit.")
def slot_edit(
    actor: str,
    order_id: str,
    item_id: str,
    slot_id: str,
    path: Path,
    instruction: str | None,
    preset: str | None,
) -> None:
    """Edit a photo with AI, then re-check it like a new upload."""
    if not (instruction or preset):
        raise click.ClickException("Give --instruction or --preset")

    async def _edit():
        return await (await coordinator_for(actor)).edit_image(
            order_id, item_id, slot_id, read_image(path), instruction or preset
        )

    result = run(_edit())
    report(result)
    _echo_assessment(result.payload)


@click.command("override")
@acting_as
@order_option
@item_option
@slot_option
@click.option("--approve/--reject", "approved", required=True, help="New verdict.")
@click.option("--reason", default=None, help="Reason shown to the customer.")
def slot_override(
    actor: str, order_id: str, item_id: str, slot_id: str, approved: bool, reason: str | None
) -> None:
    """Replace the automatic verdict on a photo (staff)."""

    async def _override():
        return await (await coordinator_for(actor)).override_slot_review(
            order_id, item_id, slot_id, approved, reason
        )

    report(run(_override()))


@click.command("set")
@acting_as
@order_option
@item_option
@click.option("--text", required=True, help="Sleeve text (max 20 characters).")
@click.option(
    "--font",
    type=click.Choice([f.value for f in SleeveFont]),
    default=SleeveFont.ARIAL_ROUNDED.value,
    show_default=True,
)
@click.option(
    "--icon",
    type=click.Choice([i.value for i in SleeveIcon]),
    default=SleeveIcon.NONE.value,
    show_default=True,
)
def sleeve_set(actor: str, order_id: str, item_id: str, text: str, font: str, icon: str) -> None:
    """Put a name on an item's sleeve (uses one sleeve credit)."""

    async def _set():
        config = SleeveConfig(text=text, font=SleeveFont(font), icon=SleeveIcon(icon))
        return await (await coordinator_for(actor)).update_sleeve(order_id, item_id, config)

    result = run(_set())
    report(result)
    click.echo(f"Sleeve credits left: {result.payload}")


@click.command("remove")
@acting_as
@order_option
@item_option
def sleeve_remove(actor: str, order_id: str, item_id: str) -> None:
    """Remove an item's sleeve and free its credit."""

    async def _remove():
        return await (await coordinator_for(actor)).update_sleeve(order_id, item_id, None)

    result = run(_remove())
    report(result)
    click.echo(f"Sleeve credits left: {result.payload}")
