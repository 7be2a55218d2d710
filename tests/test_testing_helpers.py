"""Tests for perch.testing: route round-trip and parse-failure assertions."""

import tomllib
from pathlib import Path

import pytest

from perch import param
from perch.codecs.hash import fragment
from perch.routing.route import route
from perch.testing import assert_parse_failures, assert_round_trip

PROFILE = route(
    "/people/:id/:tab?",
    {"id": param.number, "tab": param.one_of("posts", "likes").optional("posts")},
    query={"page": param.number.optional(1), "tags": param.array_of(param.string)},
    fragment=fragment("bio"),
    state=param.custom(dict, dict),
)


class TestAssertRoundTrip:
    """assert_round_trip succeeds when build and parse agree."""

    def test_passes(self) -> None:
        parsed = assert_round_trip(PROFILE, {"id": 7, "tab": "likes"}, {"page": 2}, "bio")
        assert parsed.query["tags"] is None

    def test_absent_optional_placeholder_expects_fallback(self) -> None:
        parsed = assert_round_trip(PROFILE, {"id": 7})
        assert parsed.path == {"id": 7, "tab": "posts"}

    def test_with_state(self) -> None:
        parsed = assert_round_trip(PROFILE, {"id": 1}, state={"from": "/"})
        assert parsed.state == {"from": "/"}

    def test_fails_on_lossy_transformer(self) -> None:
        lossy = route("/n/:value", {"value": param.custom(str, lambda raw: raw.upper())})
        with pytest.raises(AssertionError, match="Path round-trip mismatch"):
            assert_round_trip(lossy, {"value": "abc"})

    def test_fails_on_lossy_query(self) -> None:
        lossy = route("/", query={"q": param.custom(str, lambda raw: raw.strip())})
        with pytest.raises(AssertionError, match="Query field 'q'"):
            assert_round_trip(lossy, {}, {"q": " padded "})


class TestAssertParseFailures:
    def test_expected_failures(self) -> None:
        assert_parse_failures(
            PROFILE,
            {"id": "x"},
            {"search": "?page=2&tags=a"},
            path=("id",),
        )

    def test_query_failures(self) -> None:
        strict = route("/", query={"a": param.number, "b": param.number})
        assert_parse_failures(strict, {}, {"search": "?a=x&b=y"}, query=("a", "b"))

    def test_unexpected_failure(self) -> None:
        with pytest.raises(pytest.fail.Exception, match="parse cleanly"):
            assert_parse_failures(PROFILE, {"id": "x"}, None)

    def test_wrong_fields(self) -> None:
        strict = route("/", query={"a": param.number, "b": param.number})
        with pytest.raises(AssertionError, match="Expected query failures"):
            assert_parse_failures(strict, {}, {"search": "?a=x"}, query=("a", "b"))


class TestPackaging:
    def test_testing_extra_provides_pytest(self) -> None:
        pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
        extras = tomllib.loads(pyproject.read_text())["project"]["optional-dependencies"]
        assert any(req.startswith("pytest") for req in extras["testing"])
