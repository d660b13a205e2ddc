"""parse.py – Parse an argument list against declared flags.

Shows which flags the arguments actually touched and what each would
materialize into.  With ``--state`` (a JSON object of current application
values keyed by flag name) it also prints the result of ``set`` for every
flag and ``merge`` for map flags, so the overwrite/overlay difference is
visible side by side.
"""

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from legacyflag.cli import DeclsOption, error_exit, get_declarations, json_print, to_plain
from legacyflag.config import build_flagset
from legacyflag.errors import FlagParseError
from legacyflag.flagset import FlagSet
from legacyflag.mapvalue import MapValue
from legacyflag.values import ScalarValue

app = typer.Typer(
    help="Parse arguments against declared flags and show what they change.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]
  legacyflag parse -- --feature-gates=A=true,B=false
  legacyflag parse --state cfg.json -- --labels=tier=web --port=8080
  legacyflag parse --json -- --feature-gates=A=true --feature-gates=C=true

[dim]Arguments after '--' are parsed exactly as the program would see them.[/dim]""",
)


def _load_state(path: Path, *, json_mode: bool) -> dict[str, Any]:
    try:
        state = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        error_exit(f"cannot read state {path}: {exc}", json_mode=json_mode)
    if not isinstance(state, dict):
        error_exit(f"state {path} must be a JSON object", json_mode=json_mode)
    return state


def describe_flags(
    fs: FlagSet,
    refs: dict[str, ScalarValue | MapValue],
    state: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """One row per flag: changed, current value, and materialized results."""
    rows = []
    for name, ref in refs.items():
        info = fs.lookup(name)
        row: dict[str, Any] = {
            "flag": name,
            "type": info.type_name,
            "changed": ref.changed,
            "value": to_plain(ref.value),
            "default": info.default_text,
        }
        if state is not None:
            current = state.get(name)
            if isinstance(ref, MapValue):
                if current is not None and not isinstance(current, dict):
                    raise ValueError(f"state for {name!r} must be an object, got {type(current).__name__}")
                row["set"] = to_plain(ref.set(current))
                row["merge"] = to_plain(ref.merge(current))
            else:
                row["set"] = to_plain(ref.set(current))
        rows.append(row)
    return rows


def _render(console: Console, rows: list[dict[str, Any]], leftover: list[str], with_state: bool) -> None:
    tbl = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    tbl.add_column("Flag", style="cyan")
    tbl.add_column("Type", style="dim")
    tbl.add_column("Changed")
    tbl.add_column("Value")
    if with_state:
        tbl.add_column("Set")
        tbl.add_column("Merge")

    for row in rows:
        changed = "[green]yes[/]" if row["changed"] else "[dim]no[/]"
        cells = [escape(row["flag"]), escape(row["type"]), changed, escape(json.dumps(row["value"]))]
        if with_state:
            cells.append(escape(json.dumps(row["set"])))
            cells.append(escape(json.dumps(row["merge"])) if "merge" in row else "")
        tbl.add_row(*cells)

    console.print(tbl)
    if leftover:
        console.print(f"[dim]positional:[/dim] {escape(' '.join(leftover))}")


def _build(decls: Path | None, *, json_mode: bool) -> tuple[FlagSet, dict[str, ScalarValue | MapValue]]:
    declarations = get_declarations(decls, json_mode=json_mode)
    try:
        return build_flagset(declarations)
    except ValueError as exc:
        error_exit(str(exc), json_mode=json_mode)


@app.command()
def main(
    args: list[str] | None = typer.Argument(None, help="Arguments to parse (after --)."),
    decls: Path | None = DeclsOption,
    state: Path | None = typer.Option(
        None, "--state", help="JSON object of current values to materialize into."
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """Parse ARGS against the declared flags."""
    fs, refs = _build(decls, json_mode=json_output)
    current = _load_state(state, json_mode=json_output) if state is not None else None

    try:
        fs.parse(args or [])
    except FlagParseError as exc:
        error_exit(str(exc), json_mode=json_output, code=2)

    try:
        rows = describe_flags(fs, refs, current)
    except ValueError as exc:
        error_exit(str(exc), json_mode=json_output)

    if json_output:
        json_print({"flags": rows, "args": fs.args})
        return
    _render(Console(), rows, fs.args, current is not None)


def main_entry() -> None:
    """Run the CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
