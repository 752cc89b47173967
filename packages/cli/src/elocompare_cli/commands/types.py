"""types command group — manage comparison types."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

console = Console()


@click.group("types")
def types_cmd():
    """List, add or delete comparison types (e.g. books, movies)."""


@types_cmd.command("list")
@click.pass_context
def list_types_cmd(ctx):
    """Show configured comparison types."""
    from elocompare_core.comparison_types import list_types
    from elocompare_core.config import get_type_config

    config = ctx.obj["config"]
    default_type = config.get("default_type") or "default"

    table = Table(title="Comparison Types", show_header=True, header_style="bold cyan")
    table.add_column("Type", style="bold")
    table.add_column("Name")
    table.add_column("Folder")
    table.add_column("Property")
    table.add_column("Subfolders", justify="center")

    for type_id in list_types(config):
        tc = get_type_config(config, type_id)
        marker = " [green](default)[/green]" if type_id == default_type else ""
        table.add_row(
            f"{type_id}{marker}",
            tc["display_name"],
            tc["folder"] or "(all folders)",
            tc["property"],
            "yes" if tc["include_subfolders"] else "no",
        )

    console.print(table)


@types_cmd.command("add")
@click.argument("name")
@click.option("--from", "base_type", default=None, help="Copy folder and property settings from this type.")
@click.option("--folder", default=None, help="Vault folder for the new type.")
@click.option("--property", "prop", default=None, help="Frontmatter property a note must carry.")
@click.option("--subfolders/--no-subfolders", default=None, help="Include notes in subfolders.")
@click.pass_context
def add_type_cmd(ctx, name: str, base_type: str | None, folder: str | None, prop: str | None, subfolders: bool | None):
    """Create a comparison type and make it the default."""
    from elocompare_core.comparison_types import create_type
    from elocompare_core.config import save_config

    config = ctx.obj["config"]
    try:
        type_id = create_type(config, name, base_type=base_type)
    except ValueError as e:
        raise click.UsageError(str(e))

    overrides = {"folder": folder, "property": prop, "include_subfolders": subfolders}
    config["types"][type_id].update({k: v for k, v in overrides.items() if v is not None})

    save_config(config, ctx.obj["config_path"])
    console.print(f"[green]Created comparison type '{type_id}' (now the default).[/green]")


@types_cmd.command("delete")
@click.argument("type_id")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def delete_type_cmd(ctx, type_id: str, yes: bool):
    """Delete a comparison type along with all its ratings and history."""
    from elocompare_core.comparison_types import delete_type
    from elocompare_core.config import save_config

    config = ctx.obj["config"]
    if type_id not in (config.get("types") or {}):
        raise click.UsageError(f"Unknown comparison type {type_id!r}.")

    if not yes and not click.confirm(
        f"Delete comparison type '{type_id}'? All ratings and history for this type will be lost.",
        default=False,
    ):
        console.print("[yellow]Delete cancelled.[/yellow]")
        return

    try:
        new_default = delete_type(config, type_id, ctx.obj["rating_store"])
    except ValueError as e:
        raise click.UsageError(str(e))

    save_config(config, ctx.obj["config_path"])
    console.print(f"[green]Deleted '{type_id}'. Default type is now '{new_default}'.[/green]")
