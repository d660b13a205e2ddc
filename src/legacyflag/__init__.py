"""legacyflag: command-line flags that only touch state when given.

Register typed flags on a :class:`FlagSet`, parse ``argv``, then
materialize each flag into application configuration only if the user
actually supplied it.  Map flags (``--gates=a=true,b=false``) accumulate
across repeated occurrences and can replace or overlay existing state.
"""

from legacyflag.codec import BOOL, INT, STRING, ValueKind
from legacyflag.errors import (
    FlagError,
    FlagParseError,
    InvalidValueError,
    MalformedPairError,
    NoTargetError,
)
from legacyflag.flagset import FlagInfo, FlagSet
from legacyflag.mapvalue import MapAccumulator, MapValue, apply_merge, apply_overwrite
from legacyflag.options import MapOptions
from legacyflag.values import UNSET, Outcome, ScalarValue, SetTo, Unset

__version__ = "0.1.0"

__all__ = [
    "BOOL",
    "INT",
    "STRING",
    "UNSET",
    "FlagError",
    "FlagInfo",
    "FlagParseError",
    "FlagSet",
    "InvalidValueError",
    "MalformedPairError",
    "MapAccumulator",
    "MapOptions",
    "MapValue",
    "NoTargetError",
    "Outcome",
    "ScalarValue",
    "SetTo",
    "Unset",
    "ValueKind",
    "apply_merge",
    "apply_overwrite",
]
