"""Tests for perch.errors: exception hierarchy and error messages."""

from collections.abc import Iterator
from contextlib import contextmanager

import pytest

from perch import param, route
from perch.errors import (
    BuildError,
    ConfigurationError,
    DecodeError,
    ParseError,
    PerchError,
    TemplateMismatchError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_type",
        [BuildError, ConfigurationError, DecodeError, ParseError, TemplateMismatchError],
    )
    def test_all_are_perch_errors(self, error_type: type[Exception]) -> None:
        assert issubclass(error_type, PerchError)


class TestBuildError:
    def test_str_with_parameter(self) -> None:
        err = BuildError("id", "missing required path parameter")
        assert str(err) == "'id': missing required path parameter"

    def test_str_without_parameter(self) -> None:
        assert str(BuildError(reason="expected str")) == "expected str"

    def test_with_parameter_returns_copy(self) -> None:
        err = BuildError(reason="bad")
        named = err.with_parameter("page")
        assert named.parameter == "page"
        assert named.reason == "bad"
        assert err.parameter is None

    def test_identity_equality(self) -> None:
        assert BuildError("id", "bad") != BuildError("id", "bad")


class TestDecodeError:
    def test_str(self) -> None:
        err = DecodeError("age", "abc", "not a number")
        assert str(err) == "cannot decode 'age' from 'abc': not a number"

    def test_str_unnamed(self) -> None:
        assert str(DecodeError(raw_value="x")) == "cannot decode value from 'x'"

    def test_with_parameter(self) -> None:
        err = DecodeError(raw_value="x").with_parameter("id")
        assert err.parameter == "id"
        assert err.raw_value == "x"


class TestTemplateMismatchError:
    def test_lists_extra_and_missing(self) -> None:
        err = TemplateMismatchError(
            template="/users/:id", extra_keys=("slug",), missing_keys=("id",)
        )
        message = str(err)
        assert "/users/:id" in message
        assert "unexpected keys slug" in message
        assert "missing keys id" in message

    def test_pathname(self) -> None:
        err = TemplateMismatchError(template="/users/:id", pathname="/posts")
        assert "path '/posts' does not match" in str(err)


class TestParseError:
    def test_collect(self) -> None:
        failures = [DecodeError("id", "x"), DecodeError("age", "y")]
        err = ParseError.collect(failures, part="path")
        assert len(err.failures) == 2
        assert err.parameters == ("id", "age")
        assert err.part == "path"

    def test_str_mentions_every_failure(self) -> None:
        err = ParseError.collect([DecodeError("id", "x"), DecodeError("age", "y")], part="path")
        message = str(err)
        assert message.startswith("2 path parameter(s) failed to decode")
        assert "'id'" in message
        assert "'age'" in message

    def test_raisable(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            raise ParseError.collect([DecodeError("id", "x")], part="query")
        assert exc_info.value.parameters == ("id",)


@contextmanager
def _passthrough() -> Iterator[None]:
    yield


class TestThroughContextManager:
    @pytest.mark.parametrize(
        "error",
        [
            BuildError("id", "bad"),
            DecodeError("id", "x", "not a number"),
            TemplateMismatchError(template="/users/:id", missing_keys=("id",)),
            ParseError.collect([DecodeError("id", "x")], part="path"),
        ],
    )
    def test_type_preserved(self, error: PerchError) -> None:
        with pytest.raises(type(error)) as exc_info:
            with _passthrough():
                raise error
        assert exc_info.value is error

    def test_parse_error_from_route(self) -> None:
        user = route("/users/:id", {"id": param.number})
        with pytest.raises(ParseError) as exc_info:
            with _passthrough():
                user.parse_path({"id": "x"})
        assert exc_info.value.parameters == ("id",)
