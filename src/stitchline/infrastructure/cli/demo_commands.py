"""CLI command that loads the demo data."""

from __future__ import annotations

import click

from stitchline.infrastructure.bootstrap import order_repository, staff_repository
from stitchline.infrastructure.cli.support import run
from stitchline.infrastructure.seed import seed


@click.command("seed")
def demo_seed() -> None:
    """Write the sample orders and staff roster to the data directory."""
    added, staff = run(seed(order_repository(), staff_repository()))
    click.echo(f"Seeded {added} order(s) and {staff} staff member(s).")
