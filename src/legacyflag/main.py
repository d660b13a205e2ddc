"""main.py – Umbrella CLI entry point for legacyflag.

Each subcommand module exposes a Typer ``app`` and a ``main`` function;
they are registered here as flat commands.
"""

import importlib

import typer

app = typer.Typer(
    help="Inspect how command-line flags would overlay application state.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Typical workflow:[/bold]
  legacyflag check                      Validate legacyflag.toml
  legacyflag parse -- --flag=k=v        See which flags an argv changes

[dim]Both subcommands read flag declarations from legacyflag.toml,
found by walking up from the current directory, or from --decls.[/dim]""",
)

# ---------------------------------------------------------------------------
# Subcommand registry
# ---------------------------------------------------------------------------

_SINGLE_COMMANDS: list[tuple[str, str, str]] = [
    ("parse", "legacyflag.parse", "Parse arguments against declared flags."),
    ("check", "legacyflag.check", "Validate a flag declarations file."),
]

for _name, _module, _help in _SINGLE_COMMANDS:
    _mod = importlib.import_module(_module)
    _epilog = getattr(_mod.app.info, "epilog", None)
    if not isinstance(_epilog, str):
        _epilog = None
    app.command(name=_name, help=_help, epilog=_epilog)(_mod.main)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
