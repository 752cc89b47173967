"""CLI entry point for elocompare.

Commands:
  compare   — interactive pairwise comparison session
  history   — replayed win/loss history for a comparison type
  rankings  — current leaderboard for a comparison type
  reset     — wipe ratings and history for a comparison type
  export    — write rating snapshots into note frontmatter
  types     — list, add or delete comparison types
  init      — interactive setup wizard
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from elocompare_cli.commands.compare import compare_cmd
from elocompare_cli.commands.export import export_cmd
from elocompare_cli.commands.history import history_cmd
from elocompare_cli.commands.init import init_cmd
from elocompare_cli.commands.rankings import rankings_cmd
from elocompare_cli.commands.reset import reset_cmd
from elocompare_cli.commands.types import types_cmd
from elocompare_core.constants import CONFIG_FILENAME

console = Console()


def _build_store(config: dict):
    """Instantiate the configured document store from .elocompare.yml settings.

    Store selection hierarchy:
      store: gist   → GistDocumentStore   (requires gist_id and a GitHub token)
      store: memory → MemoryDocumentStore (nothing persisted)
      (default)     → LocalDocumentStore  (data_dir, or <vault>/.elocompare)

    This factory lives in cli.py so neither elocompare_core nor
    elocompare_store know about the config file format.
    """
    from elocompare_core.config import resolve_data_dir
    from elocompare_store.local import LocalDocumentStore

    store_type = config.get("store", "local")

    if store_type == "gist":
        from elocompare_store.gist import GistDocumentStore

        gist_id = config.get("gist_id")
        token = config.get("github_token")
        if not gist_id or not token:
            console.print(
                "[yellow]Gist store requires gist_id and a GitHub token. Falling back to the local store.[/yellow]"
            )
            return LocalDocumentStore(resolve_data_dir(config))
        return GistDocumentStore(gist_id=gist_id, token=token)

    if store_type == "memory":
        from elocompare_store.memory import MemoryDocumentStore

        return MemoryDocumentStore()

    return LocalDocumentStore(resolve_data_dir(config))


@click.group()
@click.version_option(
    version=importlib.metadata.version("elocompare"),
    prog_name="elocompare",
)
@click.option(
    "--config",
    "config_path",
    default=CONFIG_FILENAME,
    show_default=True,
    help="Path to the configuration file.",
    envvar="ELOCOMPARE_CONFIG",
)
@click.option("--vault", default=None, help="Vault directory containing the notes. Overrides config file.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, vault: str | None, verbose: bool):
    """Rank your notes by comparing them two at a time."""
    from elocompare_cli.auth import resolve_github_token
    from elocompare_core.config import load_config
    from elocompare_store.rating_store import RatingStore

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=verbose)],
    )

    ctx.ensure_object(dict)

    config = load_config(config_path, cli_overrides={"vault": vault})

    # Only the gist backend needs a token; skip the gh subprocess otherwise.
    if config.get("store") == "gist":
        config["github_token"] = resolve_github_token()

    documents = _build_store(config)
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.obj["documents"] = documents
    ctx.obj["rating_store"] = RatingStore(documents)
    ctx.call_on_close(documents.close)


main.add_command(compare_cmd)
main.add_command(history_cmd)
main.add_command(rankings_cmd)
main.add_command(reset_cmd)
main.add_command(export_cmd)
main.add_command(types_cmd)
main.add_command(init_cmd)
