"""export command — write rating snapshots into note frontmatter."""

from __future__ import annotations

import logging

import click
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)


@click.command("export")
@click.option("--type", "comparison_type", default=None, help="Comparison type to export. Defaults to the configured default.")
@click.pass_context
def export_cmd(ctx, comparison_type: str | None):
    """Write each note's rating into its frontmatter under an `elo` key.

    The snapshot is for reading in your notes app; elocompare itself always
    works from its own store and never reads the snapshot back.
    """
    from elocompare_cli.sessions import open_session
    from elocompare_core.items import write_rating_snapshot

    session = open_session(ctx.obj, comparison_type)
    ctx.call_on_close(session.close)

    if session.error:
        console.print(f"[red]{session.error}[/red]")
        return

    vault = ctx.obj["config"].get("vault") or "."
    written = 0
    failed = []
    for item in session.items:
        try:
            write_rating_snapshot(vault, item)
            written += 1
        except Exception as e:
            logger.warning("Failed to write snapshot for %s (%s): %s", item.id, type(e).__name__, e)
            failed.append(item.id)

    console.print(f"[green]Updated {written} note(s).[/green]")
    if failed:
        console.print("[yellow]Could not update:[/yellow]")
        for item_id in failed:
            console.print(f"  - {item_id}")
