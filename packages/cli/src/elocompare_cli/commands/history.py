"""history command — replay the event log into a readable win/loss list."""

from __future__ import annotations

from datetime import datetime, timezone

import click
from rich.console import Console
from rich.table import Table

console = Console()


def _format_timestamp(timestamp: int | None) -> str:
    if timestamp is None:
        return ""
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


@click.command("history")
@click.option("--type", "comparison_type", default=None, help="Comparison type to show. Defaults to the configured default.")
@click.option("--limit", default=20, show_default=True, help="Maximum number of entries to show.")
@click.pass_context
def history_cmd(ctx, comparison_type: str | None, limit: int):
    """Show recent comparisons, most recent first.

    History is rebuilt from the event log, which keeps the last 200
    comparisons from the past 30 days. Draws and comparisons involving notes
    that are no longer in the pool are not listed.
    """
    from elocompare_cli.sessions import open_session

    session = open_session(ctx.obj, comparison_type)
    ctx.call_on_close(session.close)

    if session.error:
        console.print(f"[red]{session.error}[/red]")
        return

    entries = session.history[:limit]
    if not entries:
        console.print("[yellow]No comparisons yet.[/yellow]")
        return

    table = Table(title=f"Comparison History — {session.comparison_type}", show_header=True, header_style="bold cyan")
    table.add_column("Winner", style="bold green", max_width=30)
    table.add_column("Rating", justify="right", width=13)
    table.add_column("Loser", style="red", max_width=30)
    table.add_column("Rating", justify="right", width=13)
    table.add_column("When (UTC)", width=16)

    for e in entries:
        table.add_row(
            e.winner.name,
            f"{e.winner_old_rating} → {e.winner_new_rating}",
            e.loser.name,
            f"{e.loser_old_rating} → {e.loser_new_rating}",
            _format_timestamp(e.timestamp),
        )

    console.print(table)
