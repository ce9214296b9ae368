import logging

import click

from stitchline.infrastructure.bootstrap import settings
from stitchline.infrastructure.cli.demo_commands import demo_seed
from stitchline.infrastructure.cli.order_commands import (
    order_finalize,
    order_list,
    order_review,
    order_show,
)
from stitchline.infrastructure.cli.production_commands import (
    design_submit,
    issue_report,
    issue_resolve,
    production_complete,
    production_dispatch,
    production_evidence,
    production_start,
)
from stitchline.infrastructure.cli.slot_commands import (
    sleeve_remove,
    sleeve_set,
    slot_edit,
    slot_override,
    slot_update,
    slot_upload,
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """Stitchline — custom pet embroidery orders"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings().log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def order() -> None:
    """Browse orders, finalize photos and review designs."""


@cli.group()
def slot() -> None:
    """Manage pet photos and embroidery options."""


@cli.group()
def sleeve() -> None:
    """Manage sleeve personalization."""


@cli.group()
def design() -> None:
    """Deliver designs."""


@cli.group()
def production() -> None:
    """Move orders through embroidery and dispatch."""


@cli.group()
def issue() -> None:
    """Report and resolve production issues."""


@cli.group()
def demo() -> None:
    """Demo data."""


# Register subcommands
order.add_command(order_finalize)
order.add_command(order_list)
order.add_command(order_review)
order.add_command(order_show)
slot.add_command(slot_edit)
slot.add_command(slot_override)
slot.add_command(slot_update)
slot.add_command(slot_upload)
sleeve.add_command(sleeve_remove)
sleeve.add_command(sleeve_set)
design.add_command(design_submit)
production.add_command(production_complete)
production.add_command(production_dispatch)
production.add_command(production_evidence)
production.add_command(production_start)
issue.add_command(issue_report)
issue.add_command(issue_resolve)
demo.add_command(demo_seed)
