"""CLI: rtc-call identity allocate"""

import click
from rich.console import Console
from rich.table import Table

from rtc_call.identity import DEFAULT_UID_LENGTH, IdentityAllocator

console = Console()


@click.group()
def identity():
    """Local uid allocation."""


@identity.command("allocate")
@click.option("--length", default=DEFAULT_UID_LENGTH, type=int, show_default=True)
@click.option("--count", default=1, type=int, show_default=True)
def identity_allocate(length: int, count: int):
    """Allocate COUNT distinct uids."""
    try:
        allocator = IdentityAllocator(length)
        uids = [allocator.allocate() for _ in range(count)]
    except (ValueError, RuntimeError) as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if count == 1:
        click.echo(uids[0])
        return
    table = Table(title=f"Allocated uids (length {length})")
    table.add_column("#", style="dim")
    table.add_column("uid", style="bold")
    for i, uid in enumerate(uids, 1):
        table.add_row(str(i), str(uid))
    console.print(table)
