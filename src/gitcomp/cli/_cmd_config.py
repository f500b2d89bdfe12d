"""Configuration management commands for gitcomp CLI."""

from __future__ import annotations

import orjson
import typer

from gitcomp.config import KNOWN_KEYS, coerce_value, get_config_path, load_config, save_config

from ._completions import complete_config_keys
from ._helpers import SortedGroup

# Sub-app for 'gitcomp config' subcommands
config_app = typer.Typer(
    help="Manage gitcomp configuration.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def _display(value: object) -> str:
    if isinstance(value, list):
        return ", ".join(str(i) for i in value)
    return str(value)


def register(app: typer.Typer) -> None:
    """Register config commands."""
    app.add_typer(config_app, name="config")

    @config_app.command("set")
    def config_set(
        key: str = typer.Argument(
            ...,
            help="Configuration key to set",
            autocompletion=complete_config_keys,
        ),
        value: str = typer.Argument(..., help="Value to set"),
    ) -> None:
        """Set a configuration value."""
        if key not in KNOWN_KEYS:
            msg = f"Unknown key '{key}'. Run 'gitcomp config keys' to list keys."
            raise typer.BadParameter(msg, param_hint="KEY")
        try:
            coerced = coerce_value(key, value)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="VALUE") from e

        config = load_config()
        config[key] = coerced
        save_config(config)
        typer.echo(f"Set {key} = {_display(coerced)}")

    @config_app.command("get")
    def config_get(
        key: str = typer.Argument(
            ...,
            help="Configuration key to read",
            autocompletion=complete_config_keys,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Get a configuration value."""
        config = load_config()
        if key not in config:
            typer.echo(f"Error: Key '{key}' not found in config", err=True)
            raise typer.Exit(1)
        val = config[key]
        if json_output:
            typer.echo(orjson.dumps({key: val}).decode())
        else:
            typer.echo(_display(val))

    @config_app.command("unset")
    def config_unset(
        key: str = typer.Argument(
            ...,
            help="Configuration key to remove",
            autocompletion=complete_config_keys,
        ),
    ) -> None:
        """Remove a configuration value, restoring its default."""
        config = load_config()
        if key not in config:
            typer.echo(f"Error: Key '{key}' not found in config", err=True)
            raise typer.Exit(1)
        del config[key]
        save_config(config)
        typer.echo(f"Unset {key}")

    @config_app.command("list")
    def config_list(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all configuration values."""
        config = load_config()
        if json_output:
            typer.echo(orjson.dumps(config, option=orjson.OPT_INDENT_2).decode())
        elif not config:
            typer.echo(f"No configuration values set ({get_config_path()}).")
        else:
            for k, v in sorted(config.items()):
                if isinstance(v, dict):
                    typer.echo(f"{k} = [{len(v)} table entries]")
                else:
                    typer.echo(f"{k} = {_display(v)}")

    @config_app.command("keys")
    def config_keys(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all available configuration keys and their descriptions."""
        if json_output:
            typer.echo(orjson.dumps(KNOWN_KEYS, option=orjson.OPT_INDENT_2).decode())
            return

        from rich import box
        from rich.console import Console
        from rich.table import Table

        table = Table(
            show_header=True,
            header_style="bold",
            box=box.ROUNDED,
            pad_edge=False,
            show_edge=False,
        )
        table.add_column("Key", no_wrap=True)
        table.add_column("Type", no_wrap=True)
        table.add_column("Default", no_wrap=True)
        table.add_column("Description", overflow="fold")
        table.add_column("Values", overflow="fold")

        for key, info in KNOWN_KEYS.items():
            table.add_row(
                key,
                info["type"],
                _display(info["default"]),
                info["description"],
                info.get("values", ""),
            )

        Console().print(table)
