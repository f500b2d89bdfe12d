"""Configuration file handling for gitcomp."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from gitcomp.constants import (
    CONFIG_DIRNAME,
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    DEFAULT_FLAG_PREFIXES,
    DEFAULT_MAX_LOG_ENTRIES,
    DEFAULT_TIMEOUT,
)

logger = logging.getLogger(__name__)

# All keys settable from the CLI: type, description and default
KNOWN_KEYS: dict[str, dict[str, Any]] = {
    "git_executable": {
        "type": "str",
        "description": "git binary used for repository queries",
        "default": "git",
    },
    "timeout": {
        "type": "float",
        "description": "Seconds to wait for one git query before giving up",
        "default": DEFAULT_TIMEOUT,
    },
    "flag_prefixes": {
        "type": "list[str]",
        "description": "Prefixes that mark a word as a flag name",
        "default": list(DEFAULT_FLAG_PREFIXES),
        "values": "comma-separated list, e.g. -,+",
    },
    "max_log_entries": {
        "type": "int",
        "description": "Commits offered when completing diff/rebase revisions",
        "default": DEFAULT_MAX_LOG_ENTRIES,
    },
    "commands_file": {
        "type": "str",
        "description": "TOML file replacing the bundled subcommand/flag table",
        "default": "(bundled)",
    },
}


def coerce_value(key: str, value: str) -> Any:
    """Coerce a CLI string to the type of a known config key.

    Raises:
        KeyError: If key is not a known config key
        ValueError: If value cannot be converted
    """
    key_type = KNOWN_KEYS[key]["type"]
    if key_type == "float":
        result = float(value)
        if result <= 0:
            msg = f"'{key}' must be positive, got {value}"
            raise ValueError(msg)
        return result
    if key_type == "int":
        result = int(value)
        if result <= 0:
            msg = f"'{key}' must be positive, got {value}"
            raise ValueError(msg)
        return result
    if key_type == "list[str]":
        items = [item.strip() for item in value.split(",") if item.strip()]
        if not items:
            msg = f"'{key}' needs at least one entry"
            raise ValueError(msg)
        return items
    return value


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings (config file + environment)."""

    git_executable: str = "git"
    timeout: float = DEFAULT_TIMEOUT
    flag_prefixes: tuple[str, ...] = DEFAULT_FLAG_PREFIXES
    max_log_entries: int = DEFAULT_MAX_LOG_ENTRIES
    commands_file: str | None = None
    extra_options: dict[str, list[dict[str, Any]]] = field(default_factory=dict)


def get_config_path() -> Path:
    """Get the path to the config file.

    Precedence:
    1. $GITCOMP_CONFIG
    2. $XDG_CONFIG_HOME/gitcomp/config.toml
    3. ~/.config/gitcomp/config.toml

    Returns:
        Path to config.toml (which may not exist)
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / CONFIG_DIRNAME / CONFIG_FILENAME


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from config.toml.

    Args:
        config_path: Explicit path, defaults to get_config_path()

    Returns:
        Configuration dictionary, or empty dict if no readable config exists
    """
    path = config_path or get_config_path()
    if not path.exists():
        return {}

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to config.toml.

    Args:
        config: Configuration dictionary to save
        config_path: Explicit path, defaults to get_config_path()
    """
    path = config_path or get_config_path()

    # Ensure directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(config, f)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default
    if not value > 0:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Build Settings from a raw config dict, applying environment overrides.

    Values of the wrong type, non-positive numbers and an empty
    ``flag_prefixes`` list fall back to their defaults with a warning.
    """
    defaults = Settings()

    git_executable = config.get("git_executable", defaults.git_executable)
    if not isinstance(git_executable, str) or not git_executable:
        git_executable = defaults.git_executable
    git_executable = os.environ.get("GITCOMP_GIT") or git_executable

    timeout = config.get("timeout", defaults.timeout)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or not timeout > 0:
        logger.warning("Ignoring invalid timeout %r, using %s", timeout, defaults.timeout)
        timeout = defaults.timeout
    timeout = _env_float("GITCOMP_TIMEOUT", float(timeout))

    prefixes = config.get("flag_prefixes", list(defaults.flag_prefixes))
    if (
        not isinstance(prefixes, list)
        or not prefixes
        or not all(isinstance(p, str) and p for p in prefixes)
    ):
        logger.warning("Ignoring invalid flag_prefixes %r", prefixes)
        prefixes = list(defaults.flag_prefixes)

    max_log = config.get("max_log_entries", defaults.max_log_entries)
    if isinstance(max_log, bool) or not isinstance(max_log, int) or max_log <= 0:
        logger.warning(
            "Ignoring invalid max_log_entries %r, using %d",
            max_log,
            defaults.max_log_entries,
        )
        max_log = defaults.max_log_entries
    max_log = _env_int("GITCOMP_MAX_LOG_ENTRIES", max_log)

    commands_file = config.get("commands_file")
    if not isinstance(commands_file, str) or not commands_file:
        commands_file = None

    extra = config.get("options", {})
    if not isinstance(extra, dict):
        extra = {}

    return Settings(
        git_executable=git_executable,
        timeout=timeout,
        flag_prefixes=tuple(prefixes),
        max_log_entries=max_log,
        commands_file=commands_file,
        extra_options=extra,
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load the config file and resolve it into Settings."""
    return settings_from_config(load_config(config_path))
