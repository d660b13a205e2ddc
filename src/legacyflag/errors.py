"""Exception types raised while parsing flag values.

Everything derives from ``ValueError`` so callers that only care about
"the user typed something wrong" can catch the builtin.
"""


class FlagError(ValueError):
    """Base class for all legacyflag errors."""


class NoTargetError(FlagError):
    """A map value has no mapping bound to it."""

    def __init__(self, kind_name: str) -> None:
        super().__init__(f"no target (unbound map[string]{kind_name})")
        self.kind_name = kind_name


class MalformedPairError(FlagError):
    """A segment has no key/value separator."""

    def __init__(self, kind_name: str, segment: str = "") -> None:
        super().__init__(f"malformed pair, expect string={kind_name}")
        self.kind_name = kind_name
        self.segment = segment


class InvalidValueError(FlagError):
    """The value half of a pair failed type-specific parsing."""

    def __init__(self, key: str, raw: str, cause: str) -> None:
        super().__init__(f"invalid value of {key}: {raw}, err: {cause}")
        self.key = key
        self.raw = raw
        self.cause = cause


class FlagParseError(FlagError):
    """A command line could not be parsed against a FlagSet."""

    def __init__(self, message: str, flag: str | None = None) -> None:
        super().__init__(message)
        self.flag = flag
