"""Static table of git subcommands and their flags.

The table is TOML data: the bundled ``data/commands.toml`` by default, or a
user file named by the ``commands_file`` setting. Each subcommand is a
``[commands.<name>]`` table with a ``description`` and an ``options`` list
of ``{name, completion, value, description}`` entries. Extra options from
the user config's ``[options]`` table are appended per subcommand.
"""

from __future__ import annotations

import logging
import sys
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from gitcomp.constants import COMMANDS_RESOURCE
from gitcomp.models import FlagDefinition, GitCommand, ValueKind

if TYPE_CHECKING:
    from gitcomp.config import Settings

logger = logging.getLogger(__name__)


def parse_option(entry: dict[str, Any]) -> FlagDefinition | None:
    """Convert one TOML option entry into a FlagDefinition.

    Returns None (and logs) for entries without a usable name or with an
    unknown value kind.
    """
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        logger.warning("Skipping option without a name: %r", entry)
        return None
    try:
        value_kind = ValueKind(entry.get("value", ValueKind.NONE.value))
    except ValueError:
        logger.warning("Skipping option %s with unknown value kind %r", name, entry.get("value"))
        return None
    completion = entry.get("completion") or name
    return FlagDefinition(
        name=name,
        completion_text=str(completion),
        value_kind=value_kind,
        description=str(entry.get("description", "")),
    )


class FlagTable:
    """Known subcommands and flags, keyed case-insensitively by subcommand."""

    def __init__(
        self,
        commands: list[GitCommand],
        options: dict[str, tuple[FlagDefinition, ...]],
    ) -> None:
        self._commands = list(commands)
        self._options = {name.lower(): opts for name, opts in options.items()}

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        extra_options: dict[str, list[dict[str, Any]]] | None = None,
    ) -> FlagTable:
        """Build a table from parsed TOML data."""
        commands: list[GitCommand] = []
        options: dict[str, list[FlagDefinition]] = {}

        raw_commands = data.get("commands", {})
        if not isinstance(raw_commands, dict):
            raw_commands = {}

        for name, info in raw_commands.items():
            if not isinstance(info, dict):
                info = {}
            commands.append(GitCommand(name=name, description=str(info.get("description", ""))))
            entries = info.get("options", [])
            if not isinstance(entries, list):
                logger.warning("Ignoring non-list options for %s: %r", name, entries)
                entries = []
            parsed = [parse_option(e) for e in entries if isinstance(e, dict)]
            options[name] = [o for o in parsed if o is not None]

        for name, entries in (extra_options or {}).items():
            if not isinstance(entries, list):
                continue
            parsed = [parse_option(e) for e in entries if isinstance(e, dict)]
            options.setdefault(name, []).extend(o for o in parsed if o is not None)

        return cls(commands, {name: tuple(opts) for name, opts in options.items()})

    @classmethod
    def load(cls, settings: Settings | None = None) -> FlagTable:
        """Load the bundled table (or settings.commands_file) plus config extras.

        An unreadable user table falls back to the bundled one.
        """
        data: dict[str, Any] | None = None
        if settings is not None and settings.commands_file:
            path = Path(settings.commands_file).expanduser()
            try:
                with path.open("rb") as f:
                    data = tomllib.load(f)
            except (tomllib.TOMLDecodeError, OSError) as e:
                logger.warning("Falling back to bundled commands: %s: %s", path, e)

        if data is None:
            resource = resources.files("gitcomp").joinpath(COMMANDS_RESOURCE)
            data = tomllib.loads(resource.read_text(encoding="utf-8"))

        extras = settings.extra_options if settings is not None else None
        return cls.from_dict(data, extras)

    def commands(self) -> list[GitCommand]:
        """Return all known subcommands in table order."""
        return list(self._commands)

    def options_for(self, command_name: str) -> tuple[FlagDefinition, ...]:
        """Return flags for *command_name*, or an empty tuple if unknown."""
        return self._options.get(command_name.lower(), ())
