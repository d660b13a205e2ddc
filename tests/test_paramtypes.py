"""Tests for the click parameter types in legacyflag.paramtypes."""

import ipaddress
from datetime import timedelta

import click
import pytest

from legacyflag import FlagSet
from legacyflag.errors import FlagParseError
from legacyflag.paramtypes import DURATION, IP, IP_NET, format_duration, parse_duration

# ---------------------------------------------------------------------------
# parse_duration() / format_duration()
# ---------------------------------------------------------------------------


class TestParseDuration:
    @pytest.mark.parametrize(
        "text, expect",
        [
            ("0", timedelta(0)),
            ("300ms", timedelta(milliseconds=300)),
            ("1.5s", timedelta(seconds=1.5)),
            ("-1.5s", timedelta(seconds=-1.5)),
            ("+2m", timedelta(minutes=2)),
            ("1h30m", timedelta(hours=1, minutes=30)),
            ("2h45m30.5s", timedelta(hours=2, minutes=45, seconds=30.5)),
            ("10us", timedelta(microseconds=10)),
            ("1000ns", timedelta(microseconds=1)),
            (".5h", timedelta(minutes=30)),
        ],
    )
    def test_valid(self, text: str, expect: timedelta) -> None:
        assert parse_duration(text) == expect

    @pytest.mark.parametrize("text", ["", "5", "1x", "h", "1h 30m", "-"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_duration(text)

    def test_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="out of range"):
            parse_duration("9999999999999h")


class TestFormatDuration:
    @pytest.mark.parametrize(
        "value, expect",
        [
            (timedelta(0), "0s"),
            (timedelta(seconds=1.5), "1.5s"),
            (timedelta(seconds=-1.5), "-1.5s"),
            (timedelta(hours=1, minutes=30), "1h30m0s"),
            (timedelta(minutes=2, seconds=5), "2m5s"),
            (timedelta(milliseconds=300), "0.3s"),
        ],
    )
    def test_format(self, value: timedelta, expect: str) -> None:
        assert format_duration(value) == expect

    def test_reads_back(self) -> None:
        value = timedelta(hours=26, seconds=0.25)
        assert parse_duration(format_duration(value)) == value


# ---------------------------------------------------------------------------
# ParamType conversion
# ---------------------------------------------------------------------------


class TestParamTypes:
    def test_duration_passthrough(self) -> None:
        td = timedelta(seconds=3)
        assert DURATION.convert(td, None, None) is td

    def test_duration_fail(self) -> None:
        with pytest.raises(click.BadParameter):
            DURATION.convert("later", None, None)

    def test_duration_out_of_range_fails(self) -> None:
        with pytest.raises(click.BadParameter):
            DURATION.convert("9999999999999h", None, None)

    def test_duration_out_of_range_on_command_line(self) -> None:
        fs = FlagSet()
        fs.duration("timeout")
        with pytest.raises(FlagParseError, match="not a valid duration"):
            fs.parse(["--timeout=9999999999999h"])

    def test_ip_v6(self) -> None:
        assert IP.convert("::1", None, None) == ipaddress.ip_address("::1")

    def test_ip_fail(self) -> None:
        with pytest.raises(click.BadParameter):
            IP.convert("nope", None, None)

    def test_ip_net(self) -> None:
        assert IP_NET.convert("192.168.1.7/24", None, None) == ipaddress.ip_network("192.168.1.0/24")

    def test_ip_net_fail(self) -> None:
        with pytest.raises(click.BadParameter):
            IP_NET.convert("192.168.1.0/99", None, None)
