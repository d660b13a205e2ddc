"""click parameter types for scalar flags click has no builtin for."""

import ipaddress
import re
from datetime import timedelta

import click

# Microseconds per unit; timedelta cannot hold finer than 1µs.
_DURATION_UNITS = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}

_DURATION_TERM = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """Parse Go-style duration text such as ``1h30m`` or ``-1.5s``."""
    s = text.strip()
    sign = 1
    if s[:1] in ("-", "+"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = 0.0
    pos = 0
    while pos < len(s):
        m = _DURATION_TERM.match(s, pos)
        if m is None:
            raise ValueError(f"invalid duration {text!r}")
        total += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()
    try:
        return timedelta(microseconds=sign * total)
    except OverflowError as exc:
        raise ValueError(f"invalid duration {text!r}: out of range") from exc


def format_duration(value: timedelta) -> str:
    """Render *value* the way ``parse_duration`` reads it back (``1h30m0s``)."""
    micros = round(value / timedelta(microseconds=1))
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    hours, micros = divmod(micros, 3_600_000_000)
    minutes, micros = divmod(micros, 60_000_000)
    seconds = f"{micros / 1_000_000:.6f}".rstrip("0").rstrip(".")
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return f"{out}{seconds}s"


class DurationParamType(click.ParamType):
    name = "duration"

    def convert(self, value, param, ctx):
        if isinstance(value, timedelta):
            return value
        try:
            return parse_duration(str(value))
        except ValueError:
            self.fail(f"{value!r} is not a valid duration", param, ctx)


class IPParamType(click.ParamType):
    name = "ip"

    def convert(self, value, param, ctx):
        if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            return value
        try:
            return ipaddress.ip_address(str(value).strip())
        except ValueError:
            self.fail(f"{value!r} is not a valid IP address", param, ctx)


class IPNetParamType(click.ParamType):
    """CIDR notation; host bits are masked off."""

    name = "ipNet"

    def convert(self, value, param, ctx):
        if isinstance(value, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
            return value
        try:
            return ipaddress.ip_network(str(value).strip(), strict=False)
        except ValueError:
            self.fail(f"{value!r} is not a valid CIDR network", param, ctx)


DURATION = DurationParamType()
IP = IPParamType()
IP_NET = IPNetParamType()

INT8 = click.IntRange(-(2**7), 2**7 - 1)
INT16 = click.IntRange(-(2**15), 2**15 - 1)
INT32 = click.IntRange(-(2**31), 2**31 - 1)
INT64 = click.IntRange(-(2**63), 2**63 - 1)
UINT8 = click.IntRange(0, 2**8 - 1)
UINT16 = click.IntRange(0, 2**16 - 1)
UINT32 = click.IntRange(0, 2**32 - 1)
UINT64 = click.IntRange(0, 2**64 - 1)
