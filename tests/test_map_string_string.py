"""Tests for map[string]string flags."""

import pytest

from legacyflag import STRING, FlagSet, MapAccumulator, MapOptions
from legacyflag.errors import FlagParseError, MalformedPairError, NoTargetError

RESOLVED = MapOptions(pair_sep=",", key_value_sep="=")

# ---------------------------------------------------------------------------
# FlagSet.map_string_string(): set / merge / apply
# ---------------------------------------------------------------------------


class TestMapStringStringVar:
    @pytest.mark.parametrize(
        "args, target, expect_set, expect_merge, expect_apply",
        [
            pytest.param(
                ["--foo=one=,bar=baz"],
                {"foo": "foo", "bar": ""},
                {"one": "", "bar": "baz"},
                {"one": "", "foo": "foo", "bar": "baz"},
                True,
                id="flag is set",
            ),
            pytest.param(
                [""],
                {"foo": "foo", "bar": ""},
                {"foo": "foo", "bar": ""},
                {"foo": "foo", "bar": ""},
                False,
                id="flag is not set",
            ),
        ],
    )
    def test_materialize(self, args, target, expect_set, expect_merge, expect_apply) -> None:
        fs = FlagSet("")
        val = fs.map_string_string("foo", target, "", MapOptions())
        fs.parse(args)

        assert val.set(dict(target)) == expect_set
        assert val.merge(dict(target)) == expect_merge

        applied = []
        val.apply(applied.append)
        assert applied == ([expect_set] if expect_apply else [])

    def test_commas_in_values_when_splitting_disabled(self) -> None:
        fs = FlagSet("")
        val = fs.map_string_string(
            "labels", None, "", MapOptions(disable_comma_separated_pairs=True)
        )
        fs.parse(["--labels=zones=a,b,c", "--labels=tier=web"])
        assert val.set(None) == {"zones": "a,b,c", "tier": "web"}

    def test_custom_separators(self) -> None:
        fs = FlagSet("")
        val = fs.map_string_string("env", None, "", MapOptions(pair_sep=";", key_value_sep=":"))
        fs.parse(["--env=HOME:/root;URL:http://x=y"])
        assert val.set(None) == {"HOME": "/root", "URL": "http://x=y"}
        assert str(val) == "HOME:/root;URL:http://x=y"

    def test_default_text_uses_separators(self) -> None:
        fs = FlagSet("")
        fs.map_string_string("env", {"b": "2", "a": "1"}, "", MapOptions(pair_sep=";", key_value_sep=":"))
        assert fs.lookup("env").default_text == "a:1;b:2"

    def test_malformed_pair_stops_parse(self) -> None:
        fs = FlagSet("")
        fs.map_string_string("foo", None, "")
        with pytest.raises(FlagParseError) as exc_info:
            fs.parse(["--foo=one"])
        assert "malformed pair, expect string=string" in str(exc_info.value)
        assert exc_info.value.flag == "foo"


# ---------------------------------------------------------------------------
# str(MapAccumulator)
# ---------------------------------------------------------------------------


class TestStringMapStringString:
    @pytest.mark.parametrize(
        "values, expect",
        [
            (None, ""),
            ({}, ""),
            ({"one": "foo"}, "one=foo"),
            ({"one": "foo", "two": "bar"}, "one=foo,two=bar"),
        ],
        ids=["nil", "empty", "one key", "two keys"],
    )
    def test_string(self, values, expect) -> None:
        assert str(MapAccumulator(STRING, values, MapOptions())) == expect


# ---------------------------------------------------------------------------
# MapAccumulator.parse()
# ---------------------------------------------------------------------------


class TestSetMapStringString:
    def test_clears_defaults(self) -> None:
        acc = MapAccumulator(STRING, {"default": ""}, MapOptions())
        acc.parse("")
        assert acc.values == {}
        assert acc.options == RESOLVED

    def test_one_key(self) -> None:
        acc = MapAccumulator(STRING, None)
        acc.parse("one=foo")
        assert acc.values == {"one": "foo"}

    def test_two_keys(self) -> None:
        acc = MapAccumulator(STRING, None)
        acc.parse("one=foo,two=bar")
        assert acc.values == {"one": "foo", "two": "bar"}

    def test_two_keys_comma_splitting_disabled(self) -> None:
        acc = MapAccumulator(STRING, None, MapOptions(disable_comma_separated_pairs=True))
        acc.parse("one=foo,two=bar")
        assert acc.values == {"one": "foo,two=bar"}

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_empty_value_malformed_when_comma_splitting_disabled(self, raw: str) -> None:
        acc = MapAccumulator(STRING, None, MapOptions(disable_comma_separated_pairs=True))
        with pytest.raises(MalformedPairError) as exc_info:
            acc.parse(raw)
        assert str(exc_info.value) == "malformed pair, expect string=string"

    def test_empty_value_rejected_by_flagset_when_comma_splitting_disabled(self) -> None:
        fs = FlagSet()
        labels = fs.map_string_string("labels", {"seed": "x"}, "", MapOptions(disable_comma_separated_pairs=True))
        with pytest.raises(FlagParseError, match=r"malformed pair") as exc_info:
            fs.parse(["--labels="])
        assert exc_info.value.flag == "labels"
        assert labels.changed

    def test_two_keys_multiple_invocations(self) -> None:
        acc = MapAccumulator(STRING, None)
        acc.parse("one=foo")
        acc.parse("two=bar")
        assert acc.values == {"one": "foo", "two": "bar"}

    def test_two_keys_with_space(self) -> None:
        acc = MapAccumulator(STRING, None)
        acc.parse("one=foo, two=bar")
        assert acc.values == {"one": "foo", "two": "bar"}

    def test_empty_key(self) -> None:
        acc = MapAccumulator(STRING, None)
        acc.parse("=foo")
        assert acc.values == {"": "foo"}

    def test_missing_value(self) -> None:
        acc = MapAccumulator(STRING, None)
        with pytest.raises(MalformedPairError) as exc_info:
            acc.parse("one")
        assert str(exc_info.value) == "malformed pair, expect string=string"

    def test_no_target(self) -> None:
        acc = MapAccumulator.unbound(STRING)
        with pytest.raises(NoTargetError, match=r"map\[string\]string"):
            acc.parse("one=foo")


# ---------------------------------------------------------------------------
# MapAccumulator.empty()
# ---------------------------------------------------------------------------


class TestEmptyMapStringString:
    @pytest.mark.parametrize(
        "values, expect",
        [(None, True), ({}, True), ({"foo": "bar"}, False)],
        ids=["nil", "empty", "populated"],
    )
    def test_empty(self, values, expect) -> None:
        assert MapAccumulator(STRING, values, MapOptions()).empty() is expect
