"""compare command — interactive pairwise comparison session."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()

_CHOICES = ["1", "2", "d", "s", "w", "r1", "r2", "q"]

_HELP = "[dim]1/2 choose · d draw · s skip · w swap sides · r1/r2 remove from session · q quit[/dim]"


def _print_pair(left, right) -> None:
    console.print()
    for key, item in (("1", left), ("2", right)):
        console.print(f"  [bold cyan]{key}[/bold cyan]  {item.name}  [dim]rating {item.rating} · {item.games} game(s)[/dim]")


@click.command("compare")
@click.option("--type", "comparison_type", default=None, help="Comparison type to use. Defaults to the configured default.")
@click.pass_context
def compare_cmd(ctx, comparison_type: str | None):
    """Compare notes two at a time and update their ratings.

    Every decision is saved immediately, so you can quit at any point and
    pick up where you left off.
    """
    from elocompare_cli.sessions import open_session
    from elocompare_core.config import get_type_config

    session = open_session(ctx.obj, comparison_type)
    ctx.call_on_close(session.close)

    if session.error:
        console.print(f"[red]{session.error}[/red]")
        return

    type_config = get_type_config(ctx.obj["config"], session.comparison_type)
    folder = type_config["folder"] or "all folders"
    console.print(f"[dim]{len(session.items)} note(s) loaded from \"{folder}\"[/dim]")
    console.print(_HELP)

    decisions = 0
    while True:
        pair = session.current_pair()
        if pair is None:
            prop = type_config["property"]
            console.print(
                "[yellow]Need at least two comparable notes. "
                f"Make sure the '{prop}' frontmatter property is set in your notes.[/yellow]"
            )
            break

        left, right = pair
        _print_pair(left, right)
        choice = click.prompt("Choice", type=click.Choice(_CHOICES), show_choices=False)

        if choice == "q":
            break
        if choice in ("1", "2"):
            winner_index = session.pair[0] if choice == "1" else session.pair[1]
            entry = session.record_outcome(winner_index)
            if entry is not None:
                decisions += 1
                console.print(f"[green]{entry.describe()}[/green]")
        elif choice == "d":
            if session.record_draw():
                decisions += 1
                console.print(f"[green]Draw: {left.name} and {right.name}[/green]")
        elif choice == "s":
            session.skip()
        elif choice == "w":
            session.swap()
        else:
            removed = session.remove_item(session.pair[0] if choice == "r1" else session.pair[1])
            console.print(f"[yellow]Removed {removed.name} from this session.[/yellow]")

    console.print(f"\nRecorded {decisions} comparison(s).")
