"""reset command — wipe ratings and history for a comparison type."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.command("reset")
@click.option("--type", "comparison_type", default=None, help="Comparison type to reset. Defaults to the configured default.")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def reset_cmd(ctx, comparison_type: str | None, yes: bool):
    """Reset every note in a comparison type to the default rating.

    The event log and ratings table are replaced with empty ones. Rating
    snapshots already exported into note frontmatter are left alone.
    """
    from elocompare_cli.sessions import open_session

    session = open_session(ctx.obj, comparison_type)
    ctx.call_on_close(session.close)

    def _confirm() -> bool:
        return yes or click.confirm(
            f"Reset all ratings and history for '{session.comparison_type}'? This cannot be undone.",
            default=False,
        )

    if session.reset(_confirm):
        console.print(f"[green]Reset comparison type '{session.comparison_type}'.[/green]")
    else:
        console.print("[yellow]Reset cancelled.[/yellow]")
