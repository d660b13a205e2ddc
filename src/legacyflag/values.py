"""Flag references handed back by FlagSet registration.

A reference never touches application state on its own.  After parsing,
callers ask it for an explicit outcome (``UNSET`` or ``SetTo(value)``) or
use the ``set`` / ``apply`` helpers built on top of it::

    port = fs.int8("port", 0, "listen port")
    fs.parse(argv)
    cfg.port = port.set(cfg.port)        # unchanged unless --port was given
    port.apply(lambda v: print("port", v))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, Generic, TypeVar, Union

if TYPE_CHECKING:
    from legacyflag.flagset import FlagSet

T = TypeVar("T")


class Unset:
    """Outcome of a flag that was not given on the command line."""

    _instance: Unset | None = None

    def __new__(cls) -> Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = Unset()


@dataclass(frozen=True)
class SetTo(Generic[T]):
    """Outcome of a flag that was explicitly given, carrying its value."""

    value: T


Outcome = Union[Unset, SetTo[T]]


class ScalarValue(Generic[T]):
    """Reference to a registered scalar flag."""

    def __init__(self, name: str, fs: FlagSet) -> None:
        self.name = name
        self._fs = fs

    @property
    def changed(self) -> bool:
        return self._fs.changed(self.name)

    @property
    def value(self) -> T:
        """Parsed value if the flag was given, otherwise its default."""
        return self._fs.value(self.name)

    def outcome(self) -> Outcome[T]:
        if self.changed:
            return SetTo(self.value)
        return UNSET

    def set(self, current: T) -> T:
        """Return the flag value if it was set, else *current* unchanged."""
        result = self.outcome()
        if isinstance(result, SetTo):
            return result.value
        return current

    def apply(self, fn: Callable[[T], Any]) -> None:
        """Call *fn* with the flag value only if the flag was set."""
        result = self.outcome()
        if isinstance(result, SetTo):
            fn(result.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.outcome()!r})"
