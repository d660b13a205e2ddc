"""Deferred-apply values for map-typed flags.

``MapAccumulator`` collects pairs while the command line is parsed.  The
first occurrence of the flag discards the seeded default; later occurrences
add to what earlier ones built, with later keys winning.  ``MapValue`` is
the reference returned by registration and turns the accumulated mapping
into application state on request.

Materialization never mutates its input::

    gates = fs.map_string_bool("feature-gates", {"Alpha": False}, "...")
    fs.parse(["--feature-gates=Beta=true"])
    cfg.gates = gates.merge(cfg.gates)   # overlay, keeps other keys
    cfg.gates = gates.set(cfg.gates)     # replace wholesale
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from legacyflag.codec import ValueKind, format_pairs, iter_pairs
from legacyflag.errors import NoTargetError
from legacyflag.options import MapOptions
from legacyflag.values import UNSET, Outcome, SetTo

if TYPE_CHECKING:
    from legacyflag.flagset import FlagSet


def apply_overwrite(accumulated: Mapping[str, Any] | None, target: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Return the state that replaces *target* with *accumulated*."""
    if accumulated is None:
        return None
    return dict(accumulated)


def apply_merge(accumulated: Mapping[str, Any] | None, target: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return *target* with every accumulated key overlaid on top of it."""
    merged = dict(target or {})
    merged.update(accumulated or {})
    return merged


class MapAccumulator:
    """Mapping built up from repeated occurrences of one map flag.

    ``values`` is ``None`` until something allocates it.  An unbound
    accumulator (see :meth:`unbound`) has nowhere to write and rejects
    every :meth:`parse`.
    """

    def __init__(
        self,
        kind: ValueKind,
        values: Mapping[str, Any] | None = None,
        options: MapOptions | None = None,
    ) -> None:
        self.kind = kind
        self.values: dict[str, Any] | None = dict(values) if values is not None else None
        self.options = (options or MapOptions()).resolved()
        self.initialized = False
        self._bound = True

    @classmethod
    def unbound(cls, kind: ValueKind, options: MapOptions | None = None) -> MapAccumulator:
        acc = cls(kind, None, options)
        acc._bound = False
        return acc

    @property
    def bound(self) -> bool:
        return self._bound

    def parse(self, raw: str) -> None:
        """Fold one occurrence of the flag into the mapping.

        Pairs before a bad one stay applied when an error is raised.
        """
        if not self._bound:
            raise NoTargetError(self.kind.name)
        if not self.initialized or self.values is None:
            # first occurrence drops the default
            self.values = {}
            self.initialized = True
        for key, value in iter_pairs(raw, self.options, self.kind):
            self.values[key] = value

    def empty(self) -> bool:
        return not self.values

    def __str__(self) -> str:
        return format_pairs(self.values, self.options, self.kind)

    def __repr__(self) -> str:
        return (
            f"MapAccumulator(kind={self.kind.name!r}, values={self.values!r}, "
            f"initialized={self.initialized!r})"
        )


class MapValue:
    """Reference to a registered map flag."""

    def __init__(self, name: str, accumulator: MapAccumulator, fs: FlagSet) -> None:
        self.name = name
        self.accumulator = accumulator
        self._fs = fs

    @property
    def changed(self) -> bool:
        return self._fs.changed(self.name)

    @property
    def value(self) -> dict[str, Any] | None:
        values = self.accumulator.values
        return dict(values) if values is not None else None

    def outcome(self) -> Outcome[dict[str, Any] | None]:
        if self.changed:
            return SetTo(self.value)
        return UNSET

    def set(self, target: Mapping[str, Any] | None) -> dict[str, Any] | None:
        """Return the accumulated mapping as the new state for *target*.

        Unconditional: when the flag was not given this is a copy of the
        registered default.
        """
        return apply_overwrite(self.accumulator.values, target)

    def merge(self, target: Mapping[str, Any] | None) -> dict[str, Any]:
        """Return *target* with the accumulated keys overlaid."""
        return apply_merge(self.accumulator.values, target)

    def apply(self, fn: Callable[[dict[str, Any] | None], Any]) -> None:
        """Call *fn* with the accumulated mapping only if the flag was set."""
        result = self.outcome()
        if isinstance(result, SetTo):
            fn(result.value)

    def empty(self) -> bool:
        return self.accumulator.empty()

    def __str__(self) -> str:
        return str(self.accumulator)

    def __repr__(self) -> str:
        return f"MapValue({self.name!r}, {self.outcome()!r})"
