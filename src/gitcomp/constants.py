"""Constants for gitcomp."""

from __future__ import annotations

# Program whose command lines we complete
PROGRAM_NAME = "git"

# Literal separator after which every argument is a path
DOUBLE_DASH = "--"

# Tokens that start with one of these are treated as flag names
DEFAULT_FLAG_PREFIXES: tuple[str, ...] = ("-",)

# Default seconds to wait for a single git query
DEFAULT_TIMEOUT = 2.0

# Commits offered by diff/rebase completion
DEFAULT_MAX_LOG_ENTRIES = 200

# Bundled subcommand/flag table, relative to the package
COMMANDS_RESOURCE = "data/commands.toml"

# Config file handling
CONFIG_DIRNAME = "gitcomp"
CONFIG_FILENAME = "config.toml"
CONFIG_ENV_VAR = "GITCOMP_CONFIG"
DEBUG_ENV_VAR = "GITCOMP_DEBUG"

# Flags that make diff compare against the index
CACHED_FLAGS = frozenset({"--cached", "--staged"})

# Output formats understood by `gitcomp complete`
OUTPUT_FORMATS = ("plain", "tsv", "zsh", "json")

# Shells `gitcomp register` can emit a script for
SUPPORTED_SHELLS = ("bash", "zsh", "fish", "powershell")
