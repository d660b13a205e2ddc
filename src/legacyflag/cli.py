"""Shared CLI utilities for the legacyflag command.

Common Typer options and standardised output / error helpers, so every
subcommand reports problems the same way.
"""

from __future__ import annotations

import ipaddress
import json
from datetime import timedelta
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from legacyflag.config import FlagDecl, load_declarations
from legacyflag.paramtypes import format_duration

# Re-usable Typer option for --decls
DeclsOption: Path | None = typer.Option(
    None,
    "--decls",
    "-d",
    help="Flag declarations file (default: nearest legacyflag.toml).",
)


def get_declarations(path: Path | None = None, *, json_mode: bool = False) -> list[FlagDecl]:
    """Load declarations, exiting with a readable error if they are unusable."""
    try:
        return load_declarations(path)
    except (FileNotFoundError, ValueError) as exc:
        error_exit(str(exc), json_mode=json_mode)


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}")
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))


def to_plain(value: Any) -> Any:
    """Convert a flag value into something ``json.dumps`` accepts."""
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address, ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return str(value)
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value
