"""gitcomp - tab completion for git command lines."""

from __future__ import annotations

__version__ = "0.1.0"
