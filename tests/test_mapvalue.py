"""Tests for the pure materialization helpers in legacyflag.mapvalue."""

from legacyflag import FlagSet, SetTo, UNSET, apply_merge, apply_overwrite


class TestApplyOverwrite:
    def test_replaces(self) -> None:
        assert apply_overwrite({"a": 1}, {"b": 2}) == {"a": 1}

    def test_none_accumulated(self) -> None:
        assert apply_overwrite(None, {"b": 2}) is None

    def test_returns_copy(self) -> None:
        acc = {"a": 1}
        out = apply_overwrite(acc, None)
        out["z"] = 0
        assert acc == {"a": 1}


class TestApplyMerge:
    def test_overlay(self) -> None:
        target = {"foo": True, "bar": False}
        assert apply_merge({"one": False, "bar": True}, target) == {"one": False, "foo": True, "bar": True}
        assert target == {"foo": True, "bar": False}

    def test_never_removes_keys(self) -> None:
        assert apply_merge({}, {"keep": 1}) == {"keep": 1}

    def test_none_inputs(self) -> None:
        assert apply_merge(None, None) == {}
        assert apply_merge({"a": 1}, None) == {"a": 1}
        assert apply_merge(None, {"a": 1}) == {"a": 1}


class TestMapValueOutcome:
    def test_set_to(self) -> None:
        fs = FlagSet("")
        val = fs.map_string_string("m", {"d": "x"}, "")
        fs.parse(["--m=a=b"])
        assert val.outcome() == SetTo({"a": "b"})

    def test_unset(self) -> None:
        fs = FlagSet("")
        val = fs.map_string_string("m", {"d": "x"}, "")
        fs.parse([])
        assert val.outcome() is UNSET
        assert val.value == {"d": "x"}
        assert not val.empty()
        assert str(val) == "d=x"

    def test_apply_receives_copy(self) -> None:
        fs = FlagSet("")
        val = fs.map_string_string("m", None, "")
        fs.parse(["--m=a=b"])
        val.apply(lambda m: m.clear())
        assert val.value == {"a": "b"}
