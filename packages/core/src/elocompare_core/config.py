import copy
import os
from pathlib import Path
from typing import Optional

import yaml

from elocompare_core.constants import CONFIG_FILENAME

DEFAULT_TYPE_CONFIG: dict = {
    "display_name": "Default",
    "folder": "",  # vault-relative; empty = every note in the vault
    "property": "rating",  # frontmatter key a note must carry to be comparable
    "include_subfolders": False,
}

DEFAULT_CONFIG: dict = {
    "vault": ".",
    "data_dir": None,  # None = <vault>/.elocompare
    "store": "local",  # local | memory | gist
    "default_type": "default",
    "types": {"default": dict(DEFAULT_TYPE_CONFIG)},
}

# Keys resolved at load time that must never be written back to disk.
_RUNTIME_KEYS = ("github_token",)


def load_config(config_path: str = CONFIG_FILENAME, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .elocompare.yml in the current directory
      3. ELOCOMPARE_VAULT environment variable
      4. CLI argument overrides
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if not config.get("types"):
        config["types"] = {"default": dict(DEFAULT_TYPE_CONFIG)}

    vault_env = os.environ.get("ELOCOMPARE_VAULT")
    if vault_env:
        config["vault"] = vault_env

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Only needed by the gist backend.
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def save_config(config: dict, config_path: str = CONFIG_FILENAME) -> None:
    """Write config to disk, preserving keys already present in the file."""
    path = Path(config_path)
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update({k: v for k, v in config.items() if k not in _RUNTIME_KEYS})
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def get_type_config(config: dict, type_id: Optional[str] = None) -> dict:
    """Return the settings for a comparison type, with missing keys filled from defaults.

    ``type_id`` defaults to the configured default type. Raises KeyError for
    an unknown type.
    """
    type_id = type_id or config.get("default_type") or "default"
    types = config.get("types") or {}
    if type_id not in types:
        if type_id == "default" and not types:
            return {**DEFAULT_TYPE_CONFIG}
        raise KeyError(type_id)
    return {**DEFAULT_TYPE_CONFIG, "display_name": type_id, **(types[type_id] or {})}


def resolve_data_dir(config: dict) -> Path:
    """Directory the local document store writes into."""
    data_dir = config.get("data_dir")
    if data_dir:
        return Path(data_dir)
    return Path(config.get("vault") or ".") / ".elocompare"
