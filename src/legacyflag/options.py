"""Separator options for map-typed flags."""

from dataclasses import dataclass, replace

DEFAULT_PAIR_SEP = ","
DEFAULT_KEY_VALUE_SEP = "="


@dataclass(frozen=True)
class MapOptions:
    """How a map flag splits its raw text into pairs.

    Empty separators mean "use the default".  ``disable_comma_separated_pairs``
    treats each flag occurrence as exactly one pair, so values may contain
    the pair separator.
    """

    pair_sep: str = ""
    key_value_sep: str = ""
    disable_comma_separated_pairs: bool = False

    def resolved(self) -> "MapOptions":
        """Return a copy with unset separators filled in."""
        return replace(
            self,
            pair_sep=self.pair_sep or DEFAULT_PAIR_SEP,
            key_value_sep=self.key_value_sep or DEFAULT_KEY_VALUE_SEP,
        )

    @property
    def is_resolved(self) -> bool:
        return bool(self.pair_sep) and bool(self.key_value_sep)
