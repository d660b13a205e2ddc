"""Pair codec for map-typed flag values.

Turns ``"k1=v1,k2=v2"`` into ordered ``(key, value)`` pairs and back.
Value conversion is delegated to a click ``ParamType``, so any type click
can parse can back a map flag.

Usage::

    from legacyflag.codec import BOOL, iter_pairs
    from legacyflag.options import MapOptions

    opts = MapOptions().resolved()
    dict(iter_pairs("a=true, b=false", opts, BOOL))   # {"a": True, "b": False}
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import click

from legacyflag.errors import InvalidValueError, MalformedPairError
from legacyflag.options import MapOptions


@dataclass(frozen=True)
class ValueKind:
    """Element type of a map flag: its display name, parser and renderer."""

    name: str
    param_type: click.ParamType
    render: Callable[[Any], str] = str

    def convert(self, key: str, raw: str) -> Any:
        try:
            return self.param_type.convert(raw, None, None)
        except click.BadParameter as exc:
            raise InvalidValueError(key, raw, exc.message) from exc


def _render_bool(value: bool) -> str:
    return "true" if value else "false"


BOOL = ValueKind("bool", click.BOOL, _render_bool)
STRING = ValueKind("string", click.STRING)
INT = ValueKind("int", click.INT)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def iter_raw_pairs(raw: str, options: MapOptions, kind_name: str = "string") -> Iterator[tuple[str, str]]:
    """Yield ``(key, raw_value)`` pairs from *raw* without converting values.

    Only the first key/value separator in a segment splits it, so the value
    half may contain the separator.  Keys and values are whitespace-trimmed;
    empty segments are skipped.  With comma splitting disabled the whole of
    *raw* is a single pair, so an empty string is malformed.
    """
    options = options if options.is_resolved else options.resolved()
    if options.disable_comma_separated_pairs:
        yield _split_pair(raw.strip(), options, kind_name)
        return

    for segment in raw.split(options.pair_sep):
        segment = segment.strip()
        if not segment:
            continue
        yield _split_pair(segment, options, kind_name)


def _split_pair(segment: str, options: MapOptions, kind_name: str) -> tuple[str, str]:
    key, sep, value = segment.partition(options.key_value_sep)
    if not sep:
        raise MalformedPairError(kind_name, segment)
    return key.strip(), value.strip()


def split_pairs(raw: str, options: MapOptions, kind_name: str = "string") -> list[tuple[str, str]]:
    return list(iter_raw_pairs(raw, options, kind_name))


def iter_pairs(raw: str, options: MapOptions, kind: ValueKind) -> Iterator[tuple[str, Any]]:
    """Yield converted ``(key, value)`` pairs from *raw* in input order.

    Splitting and conversion happen lazily: a bad segment raises only after
    every earlier pair has been yielded, so callers can apply pairs one at a
    time.
    """
    for key, value in iter_raw_pairs(raw, options, kind.name):
        yield key, kind.convert(key, value)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def format_pairs(values: Mapping[str, Any] | None, options: MapOptions, kind: ValueKind) -> str:
    """Render *values* as ``k1=v1,k2=v2`` with keys sorted."""
    if not values:
        return ""
    options = options if options.is_resolved else options.resolved()
    return options.pair_sep.join(
        f"{key}{options.key_value_sep}{kind.render(values[key])}" for key in sorted(values)
    )
