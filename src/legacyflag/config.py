"""Flag declarations loaded from ``legacyflag.toml``.

The file says which flags exist, their types, defaults and separator
options.  It never supplies flag *values*; those only come from the
command line.

Example::

    [flags."feature-gates"]
    type = "map[string]bool"
    default = { AllAlpha = false }
    usage = "Feature gates to toggle."

    [flags.labels]
    type = "map[string]string"
    disable_comma_separated_pairs = true

    [flags.port]
    type = "uint16"
    default = 10250

Usage::

    from legacyflag.config import build_flagset, load_declarations

    decls = load_declarations()
    fs, refs = build_flagset(decls)
    fs.parse(argv)
"""

from __future__ import annotations

import sys
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import click

from legacyflag import codec, paramtypes
from legacyflag.errors import FlagError
from legacyflag.flagset import FlagSet
from legacyflag.mapvalue import MapValue
from legacyflag.options import MapOptions
from legacyflag.values import ScalarValue

DECLS_FILENAME = "legacyflag.toml"

# TOML type name -> FlagSet registration method
_MAP_TYPES: dict[str, str] = {
    "map[string]bool": "map_string_bool",
    "map[string]string": "map_string_string",
    "map[string]int": "map_string_int",
}

_SCALAR_TYPES: dict[str, str] = {
    "bool": "bool_",
    "string": "string",
    "int": "int_",
    "int8": "int8",
    "int16": "int16",
    "int32": "int32",
    "int64": "int64",
    "uint": "uint",
    "uint8": "uint8",
    "uint16": "uint16",
    "uint32": "uint32",
    "uint64": "uint64",
    "float32": "float32",
    "float64": "float64",
    "duration": "duration",
    "ip": "ip",
    "ipNet": "ip_net",
    "stringSlice": "string_slice",
}

_MAP_KINDS: dict[str, codec.ValueKind] = {
    "map[string]bool": codec.BOOL,
    "map[string]string": codec.STRING,
    "map[string]int": codec.INT,
}

# Scalar defaults are converted the same way the command line would be
_PARAM_TYPES: dict[str, click.ParamType] = {
    "bool": click.BOOL,
    "string": click.STRING,
    "int": click.INT,
    "int8": paramtypes.INT8,
    "int16": paramtypes.INT16,
    "int32": paramtypes.INT32,
    "int64": paramtypes.INT64,
    "uint": paramtypes.UINT64,
    "uint8": paramtypes.UINT8,
    "uint16": paramtypes.UINT16,
    "uint32": paramtypes.UINT32,
    "uint64": paramtypes.UINT64,
    "float32": click.FLOAT,
    "float64": click.FLOAT,
    "duration": paramtypes.DURATION,
    "ip": paramtypes.IP,
    "ipNet": paramtypes.IP_NET,
}

_KNOWN_KEYS = {"type", "default", "usage", "pair_sep", "key_value_sep", "disable_comma_separated_pairs"}
_MAP_OPTION_KEYS = {"pair_sep", "key_value_sep", "disable_comma_separated_pairs"}


@dataclass
class FlagDecl:
    """One ``[flags.<name>]`` table."""

    name: str
    type: str
    default: Any = None
    usage: str = ""
    options: MapOptions | None = None

    @property
    def is_map(self) -> bool:
        return self.type in _MAP_TYPES


def known_types() -> list[str]:
    return sorted([*_MAP_TYPES, *_SCALAR_TYPES])


def _find_decls(start: Path | None = None) -> Path:
    """Walk up from *start* (or cwd) to find legacyflag.toml."""
    candidate = (start or Path.cwd()).resolve()
    while True:
        if (candidate / DECLS_FILENAME).exists():
            return candidate / DECLS_FILENAME
        if candidate == candidate.parent:
            break
        candidate = candidate.parent
    raise FileNotFoundError(
        f"Could not find {DECLS_FILENAME} in any parent of the current directory. "
        "Pass --decls to point at a declarations file."
    )


def _coerce_default(name: str, type_name: str, raw: Any) -> Any:
    """Convert *raw* to the declared type, raising ValueError if it does not fit."""
    if raw is None:
        return None
    try:
        if type_name in _MAP_TYPES:
            if not isinstance(raw, dict):
                raise ValueError(f"flag {name!r}: default for {type_name} must be a table")
            kind = _MAP_KINDS[type_name]
            return {key: kind.convert(key, value) for key, value in raw.items()}
        if type_name == "stringSlice":
            if not isinstance(raw, list):
                raise ValueError(f"flag {name!r}: default for {type_name} must be an array")
            return [click.STRING.convert(item, None, None) for item in raw]
        return _PARAM_TYPES[type_name].convert(raw, None, None)
    except FlagError as exc:
        raise ValueError(f"flag {name!r}: bad default: {exc}") from exc
    except click.BadParameter as exc:
        raise ValueError(f"flag {name!r}: bad default: {exc.message}") from exc


def _parse_decl(name: str, table: Any) -> FlagDecl:
    if not isinstance(table, dict):
        raise ValueError(f"flag {name!r}: expected a table, got {type(table).__name__}")
    type_name = table.get("type")
    if type_name is None:
        raise ValueError(f"flag {name!r}: missing 'type'")
    if type_name not in _MAP_TYPES and type_name not in _SCALAR_TYPES:
        raise ValueError(f"flag {name!r}: unknown type {type_name!r}.  Known types: {known_types()}")

    unknown = sorted(set(table) - _KNOWN_KEYS)
    if unknown:
        warnings.warn(f"flag {name!r}: ignoring unknown keys {unknown}", stacklevel=3)

    options = None
    if type_name in _MAP_TYPES:
        options = MapOptions(
            pair_sep=table.get("pair_sep", ""),
            key_value_sep=table.get("key_value_sep", ""),
            disable_comma_separated_pairs=bool(table.get("disable_comma_separated_pairs", False)),
        )
    elif _MAP_OPTION_KEYS & set(table):
        warnings.warn(f"flag {name!r}: separator options only apply to map types", stacklevel=3)

    return FlagDecl(
        name=name,
        type=type_name,
        default=_coerce_default(name, type_name, table.get("default")),
        usage=table.get("usage", ""),
        options=options,
    )


def load_declarations(path: Path | None = None) -> list[FlagDecl]:
    """Load flag declarations from *path* (auto-detected if ``None``)."""
    if path is None:
        path = _find_decls()
    if not path.exists():
        raise FileNotFoundError(f"Declarations not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    flags = raw.get("flags", {})
    if not isinstance(flags, dict):
        raise ValueError(f"{path.name}: [flags] must be a table")
    return [_parse_decl(name, table) for name, table in flags.items()]


def build_flagset(decls: list[FlagDecl], name: str = "") -> tuple[FlagSet, dict[str, ScalarValue | MapValue]]:
    """Register every declaration on a new FlagSet.

    Returns the set and the flag references keyed by flag name.
    """
    fs = FlagSet(name)
    refs: dict[str, ScalarValue | MapValue] = {}
    for decl in decls:
        if decl.type not in _MAP_TYPES and decl.type not in _SCALAR_TYPES:
            raise ValueError(f"flag {decl.name!r}: unknown type {decl.type!r}")
        default = _coerce_default(decl.name, decl.type, decl.default)
        if decl.is_map:
            register = getattr(fs, _MAP_TYPES[decl.type])
            refs[decl.name] = register(decl.name, default, decl.usage, decl.options)
            continue
        register = getattr(fs, _SCALAR_TYPES[decl.type])
        if default is None:
            refs[decl.name] = register(decl.name, usage=decl.usage)
        else:
            refs[decl.name] = register(decl.name, default, decl.usage)
    return fs, refs
