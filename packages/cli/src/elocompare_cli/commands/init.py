"""init command — interactive setup wizard.

Writes .elocompare.yml with the vault location, the default comparison type
and the store backend. For the gist backend it can create the private Gist
through the GitHub CLI so the ratings follow you between machines.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path

import click
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)


@click.command("init")
@click.pass_context
def init_cmd(ctx):
    """Set up elocompare for a vault.

    Creates the config file (see --config), optionally creating a private
    GitHub Gist to hold ratings and history.
    """
    from elocompare_core.config import save_config

    config_path = ctx.obj["config_path"]
    config = ctx.obj["config"]

    console.print("\n[bold cyan]elocompare init[/bold cyan] — setup wizard\n")

    vault = click.prompt("Vault directory", default=config.get("vault") or ".")
    if not Path(vault).is_dir():
        console.print(f"[yellow]Vault directory {vault!r} does not exist yet.[/yellow]")

    folder = click.prompt("Folder to compare (blank = whole vault)", default="", show_default=False)
    prop = click.prompt("Frontmatter property a note must carry", default="rating")
    subfolders = click.confirm("Include notes in subfolders?", default=False)

    console.print("\nRatings store:")
    console.print("  [bold]local[/bold]   — JSON files in <vault>/.elocompare (default)")
    console.print("  [bold]memory[/bold]  — nothing is saved between runs")
    console.print("  [bold]gist[/bold]    — private GitHub Gist, shared across machines")
    store_type = click.prompt(
        "Store backend",
        type=click.Choice(["local", "memory", "gist"]),
        default="local",
    )

    new_config: dict = {
        "vault": vault,
        "store": store_type,
        "default_type": config.get("default_type") or "default",
        "types": dict(config.get("types") or {}),
    }
    type_id = new_config["default_type"]
    new_config["types"][type_id] = {
        **(new_config["types"].get(type_id) or {}),
        "folder": folder.strip().strip("/"),
        "property": prop,
        "include_subfolders": subfolders,
    }

    if store_type == "gist":
        console.print(
            "\n[yellow]Note:[/yellow] the Gist store needs a token with [bold]gist[/bold] scope, "
            "from ELOCOMPARE_GITHUB_TOKEN, GITHUB_TOKEN or `gh auth login`."
        )
        gist_id = _create_gist(vault)
        if gist_id:
            console.print(f"[green]Created Gist: {gist_id}[/green]")
            new_config["gist_id"] = gist_id
        else:
            console.print(f"[yellow]Gist creation failed — add gist_id manually to {config_path}[/yellow]")

    config.update(new_config)
    save_config(config, config_path)
    console.print(f"[green]Wrote {config_path}[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Start comparing with: [bold]elocompare compare[/bold]")


def _create_gist(vault: str) -> str | None:
    """Create a private Gist for ratings and history and return its ID."""
    # gh names gist files after the local path, and a gist cannot be empty.
    tmp_dir = tempfile.mkdtemp(prefix="elocompare_")
    named_path = os.path.join(tmp_dir, "README.md")
    with open(named_path, "w", encoding="utf-8") as f:
        f.write(f"elocompare ratings for {Path(vault).resolve().name}\n")

    try:
        result = subprocess.run(
            [
                "gh",
                "gist",
                "create",
                "--public=false",
                "--desc",
                "elocompare ratings",
                named_path,
            ],
            capture_output=True,
            text=True,
            timeout=15,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.warning("Could not run gh gist create: %s", e)
        return None
    finally:
        os.unlink(named_path)
        os.rmdir(tmp_dir)

    if result.returncode == 0:
        gist_url = result.stdout.strip()
        return gist_url.rstrip("/").split("/")[-1]
    logger.warning("gh gist create failed: %s", result.stderr.strip())
    return None
