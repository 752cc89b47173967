"""rankings command — current leaderboard for a comparison type."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

console = Console()


@click.command("rankings")
@click.option("--type", "comparison_type", default=None, help="Comparison type to rank. Defaults to the configured default.")
@click.option("--top", default=None, type=int, help="Only show the top N notes.")
@click.pass_context
def rankings_cmd(ctx, comparison_type: str | None, top: int | None):
    """Show notes ordered by rating.

    Notes that have never been compared sit at the default rating with zero
    games — compare them a few times before trusting their position.
    """
    from elocompare_cli.sessions import open_session

    session = open_session(ctx.obj, comparison_type)
    ctx.call_on_close(session.close)

    if session.error:
        console.print(f"[red]{session.error}[/red]")
        return

    ranked = session.rankings()
    if not ranked:
        console.print("[yellow]No comparable notes found.[/yellow]")
        return
    if top is not None:
        ranked = ranked[:top]

    total_games = sum(item.games for item in session.items) // 2
    console.print(f"\n[bold]Rankings for [cyan]{session.comparison_type}[/cyan][/bold]")
    console.print(f"  Notes:       {len(session.items)}")
    console.print(f"  Comparisons: {total_games}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", width=4)
    table.add_column("Note")
    table.add_column("Rating", justify="right")
    table.add_column("Games", justify="right")
    table.add_column("Last compared", width=13)

    for position, item in enumerate(ranked, 1):
        style = "dim" if item.games == 0 else ""
        table.add_row(str(position), item.name, str(item.rating), str(item.games), item.last or "—", style=style)

    console.print(table)
