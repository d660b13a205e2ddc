"""check.py – Validate a flag declarations file.

Loads every ``[flags.<name>]`` table and registers it on a throwaway
FlagSet, so type names, defaults and duplicate names are all checked
without parsing any arguments.
"""

from pathlib import Path

import typer

from legacyflag.cli import DeclsOption, error_exit, get_declarations, json_print
from legacyflag.config import build_flagset

app = typer.Typer(help="Validate a flag declarations file.", rich_markup_mode="rich")


@app.command()
def main(
    decls: Path | None = DeclsOption,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """Check that every declared flag can be registered."""
    declarations = get_declarations(decls, json_mode=json_output)
    try:
        fs, _ = build_flagset(declarations)
    except ValueError as exc:
        error_exit(str(exc), json_mode=json_output)

    if json_output:
        json_print(
            {
                "ok": True,
                "flags": [{"flag": f.name, "type": f.type_name, "default": f.default_text} for f in fs.flags()],
            }
        )
        return
    for info in fs.flags():
        typer.echo(f"  {info.name:<24} {info.type_name:<20} {info.default_text}")
    typer.secho(f"{len(declarations)} flag(s) OK", fg=typer.colors.GREEN)


def main_entry() -> None:
    """Run the CLI app."""
    app()


if __name__ == "__main__":
    main_entry()
