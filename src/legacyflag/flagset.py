"""FlagSet: typed flags that remember whether the user actually gave them.

Parsing is delegated to click.  Each registered flag becomes a
``click.Option`` on a private ``click.Command``; after
``Command.make_context`` has run, the context's parameter sources tell us
which flags came from the command line.  Defaults never go through click:
an unchanged flag reports the default it was registered with.

Usage::

    from legacyflag import FlagSet

    fs = FlagSet("kubelet")
    gates = fs.map_string_bool("feature-gates", {}, "Feature gates to toggle.")
    port = fs.uint16("port", 10250, "Port to serve on.")
    fs.parse(sys.argv[1:])

    cfg.port = port.set(cfg.port)
    cfg.feature_gates = gates.merge(cfg.feature_gates)
"""

from __future__ import annotations

import csv
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import click
from click.core import ParameterSource

from legacyflag import codec, paramtypes
from legacyflag.codec import ValueKind
from legacyflag.errors import FlagError, FlagParseError
from legacyflag.mapvalue import MapAccumulator, MapValue
from legacyflag.options import MapOptions
from legacyflag.values import ScalarValue


@dataclass
class FlagInfo:
    """What a FlagSet knows about one registered flag."""

    name: str
    dest: str
    usage: str
    default: Any
    default_text: str
    type_name: str
    collect: Callable[[Any], Any] | None = None


def default_text(value: Any) -> str:
    """Render a default the way it would be typed on the command line."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, timedelta):
        return paramtypes.format_duration(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(str(v) for v in value) + "]"
    return str(value)


def _collect_slice(occurrences: Sequence[str]) -> list[str]:
    items: list[str] = []
    for raw in occurrences:
        if raw:
            items.extend(next(csv.reader([raw])))
    return items


class FlagSet:
    """A named set of flags parsed from one argument list."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._command = click.Command(
            name or "flags",
            add_help_option=False,
            context_settings={"allow_extra_args": True},
        )
        self._flags: dict[str, FlagInfo] = {}
        self._maps: dict[str, MapAccumulator] = {}
        self._ctx: click.Context | None = None

    # -----------------------------------------------------------------------
    # Registration
    # -----------------------------------------------------------------------

    def _add(
        self,
        name: str,
        usage: str,
        default: Any,
        text: str,
        param_type: click.ParamType | None,
        *,
        multiple: bool = False,
        collect: Callable[[Any], Any] | None = None,
        type_name: str | None = None,
    ) -> FlagInfo:
        if name in self._flags:
            raise ValueError(f"flag redefined: {name}")
        if not name or name.startswith("-"):
            raise ValueError(f"invalid flag name: {name!r}")
        if self._ctx is not None:
            raise RuntimeError(f"{self._command.name}: cannot register {name!r} after parse")

        dest = f"flag_{len(self._flags)}"
        if param_type is None:
            option = click.Option([f"--{name}/--no-{name}", dest], default=None, show_default=text, help=usage)
        else:
            option = click.Option(
                [f"--{name}", dest],
                type=param_type,
                multiple=multiple,
                default=None,
                show_default=text,
                help=usage,
            )
        self._command.params.append(option)

        if type_name is None:
            type_name = "bool" if param_type is None else param_type.name
        info = FlagInfo(name, dest, usage, default, text, type_name, collect)
        self._flags[name] = info
        return info

    def register_string_like(self, name: str, default_text: str, usage: str, *, multiple: bool = False) -> FlagInfo:
        """Register a flag whose occurrences are kept as raw strings."""
        return self._add(name, usage, None, default_text, click.STRING, multiple=multiple, type_name="string")

    def var(
        self,
        name: str,
        default: Any,
        usage: str,
        param_type: click.ParamType | None,
        type_name: str | None = None,
    ) -> ScalarValue:
        """Register a scalar flag parsed by *param_type* (``None`` for a boolean switch)."""
        self._add(name, usage, default, default_text(default), param_type, type_name=type_name)
        return ScalarValue(name, self)

    def map_var(
        self,
        name: str,
        default: Mapping[str, Any] | None,
        usage: str,
        kind: ValueKind,
        options: MapOptions | None = None,
    ) -> MapValue:
        """Register a map flag whose element type is *kind*.

        *default* is copied; the caller's mapping is never written to.
        """
        acc = MapAccumulator(kind, default, options)
        info = self.register_string_like(name, str(acc), usage, multiple=True)
        info.default = acc.values
        info.type_name = f"map[string]{kind.name}"
        self._maps[name] = acc
        return MapValue(name, acc, self)

    # -- map flags --

    def map_string_bool(self, name, default, usage, options=None) -> MapValue:
        return self.map_var(name, default, usage, codec.BOOL, options)

    def map_string_string(self, name, default, usage, options=None) -> MapValue:
        return self.map_var(name, default, usage, codec.STRING, options)

    def map_string_int(self, name, default, usage, options=None) -> MapValue:
        return self.map_var(name, default, usage, codec.INT, options)

    # -- scalar flags --

    def bool_(self, name: str, default: bool = False, usage: str = "") -> ScalarValue[bool]:
        return self.var(name, default, usage, None, "bool")

    def string(self, name: str, default: str = "", usage: str = "") -> ScalarValue[str]:
        return self.var(name, default, usage, click.STRING, "string")

    def int_(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, click.INT, "int")

    def int8(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, paramtypes.INT8, "int8")

    def int16(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, paramtypes.INT16, "int16")

    def int32(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, paramtypes.INT32, "int32")

    def int64(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, paramtypes.INT64, "int64")

    def uint(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, paramtypes.UINT64, "uint")

    def uint8(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, paramtypes.UINT8, "uint8")

    def uint16(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, paramtypes.UINT16, "uint16")

    def uint32(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, paramtypes.UINT32, "uint32")

    def uint64(self, name: str, default: int = 0, usage: str = "") -> ScalarValue[int]:
        return self.var(name, default, usage, paramtypes.UINT64, "uint64")

    def float32(self, name: str, default: float = 0.0, usage: str = "") -> ScalarValue[float]:
        return self.var(name, default, usage, click.FLOAT, "float32")

    def float64(self, name: str, default: float = 0.0, usage: str = "") -> ScalarValue[float]:
        return self.var(name, default, usage, click.FLOAT, "float64")

    def duration(self, name: str, default: timedelta | None = None, usage: str = "") -> ScalarValue[timedelta]:
        if default is None:
            default = timedelta(0)
        return self.var(name, default, usage, paramtypes.DURATION, "duration")

    def ip(self, name, default=None, usage: str = "") -> ScalarValue:
        return self.var(name, default, usage, paramtypes.IP, "ip")

    def ip_net(self, name, default=None, usage: str = "") -> ScalarValue:
        return self.var(name, default, usage, paramtypes.IP_NET, "ipNet")

    def string_slice(self, name: str, default: Sequence[str] | None = None, usage: str = "") -> ScalarValue[list[str]]:
        """Comma-separated strings; repeated occurrences append."""
        default = list(default) if default is not None else []
        self._add(
            name, usage, default, default_text(default), click.STRING,
            multiple=True, collect=_collect_slice, type_name="stringSlice",
        )
        return ScalarValue(name, self)

    # -----------------------------------------------------------------------
    # Parsing and lookup
    # -----------------------------------------------------------------------

    @property
    def parsed(self) -> bool:
        return self._ctx is not None

    @property
    def args(self) -> list[str]:
        """Positional arguments left over after parsing."""
        if self._ctx is None:
            return []
        return list(self._ctx.args)

    def parse(self, arguments: Sequence[str]) -> None:
        """Parse *arguments*, feeding every map-flag occurrence to its accumulator.

        Raises :class:`FlagParseError` on the first failure.  Map pairs folded
        in before the failure are kept.
        """
        if self._ctx is not None:
            raise RuntimeError(f"{self._command.name}: flags already parsed")
        try:
            ctx = self._command.make_context(self._command.name, list(arguments))
        except click.ClickException as exc:
            raise FlagParseError(exc.format_message()) from exc
        self._ctx = ctx

        for name, acc in self._maps.items():
            info = self._flags[name]
            for raw in ctx.params.get(info.dest) or ():
                try:
                    acc.parse(raw)
                except FlagError as exc:
                    raise FlagParseError(
                        f'invalid argument "{raw}" for "--{name}" flag: {exc}', flag=name
                    ) from exc

    def lookup(self, name: str) -> FlagInfo | None:
        return self._flags.get(name)

    def flags(self) -> list[FlagInfo]:
        """All registered flags in registration order."""
        return list(self._flags.values())

    def changed(self, name: str) -> bool:
        """True if *name* was given on the command line.  Unknown names are never changed."""
        info = self._flags.get(name)
        if info is None or self._ctx is None:
            return False
        return self._ctx.get_parameter_source(info.dest) is ParameterSource.COMMANDLINE

    def value(self, name: str) -> Any:
        """Current value of *name*: parsed if changed, the registered default otherwise."""
        info = self._flags.get(name)
        if info is None:
            raise KeyError(f"unknown flag: {name}")
        if name in self._maps:
            values = self._maps[name].values
            return dict(values) if values is not None else None
        if not self.changed(name):
            return info.default
        raw = self._ctx.params[info.dest]
        return info.collect(raw) if info.collect is not None else raw

    def __contains__(self, name: str) -> bool:
        return name in self._flags

    def __repr__(self) -> str:
        return f"FlagSet({self.name!r}, flags={list(self._flags)!r})"
