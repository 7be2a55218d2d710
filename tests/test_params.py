"""Tests for perch.param: the built-in transformer catalog."""

from datetime import UTC, date, datetime

import pytest

from perch import param
from perch.errors import BuildError, DecodeError


class TestString:
    def test_round_trip(self) -> None:
        assert param.string.decode(param.string.encode("hello world")) == "hello world"

    def test_empty_string(self) -> None:
        assert param.string.encode("") == ""
        assert param.string.decode("") == ""

    def test_rejects_non_str(self) -> None:
        with pytest.raises(BuildError):
            param.string.encode(5)

    def test_rejects_list(self) -> None:
        with pytest.raises(DecodeError):
            param.string.decode(["a", "b"])


class TestNumber:
    @pytest.mark.parametrize("value", [0, 42, -7, 3.5, -0.25, 1e-9])
    def test_round_trip(self, value: float) -> None:
        assert param.number.decode(param.number.encode(value)) == value

    def test_int_stays_int(self) -> None:
        assert isinstance(param.number.decode("42"), int)

    def test_float_stays_float(self) -> None:
        assert isinstance(param.number.decode("1.0"), float)

    def test_normalizations(self) -> None:
        assert param.number.decode("+5") == 5
        assert param.number.decode("1e3") == 1000.0

    @pytest.mark.parametrize("raw", ["", "abc", "1.2.3", " 1", "nan", "inf", "0x10"])
    def test_rejects_malformed(self, raw: str) -> None:
        with pytest.raises(DecodeError) as exc_info:
            param.number.decode(raw)
        assert exc_info.value.raw_value == raw

    def test_rejects_bool(self) -> None:
        with pytest.raises(BuildError):
            param.number.encode(True)

    def test_rejects_non_finite(self) -> None:
        with pytest.raises(BuildError):
            param.number.encode(float("inf"))


class TestBoolean:
    def test_round_trip(self) -> None:
        assert param.boolean.encode(True) == "true"
        assert param.boolean.encode(False) == "false"
        assert param.boolean.decode("true") is True
        assert param.boolean.decode("false") is False

    def test_numeric_forms(self) -> None:
        assert param.boolean.decode("1") is True
        assert param.boolean.decode("0") is False

    def test_rejects_other_text(self) -> None:
        with pytest.raises(DecodeError):
            param.boolean.decode("yes")

    def test_rejects_int(self) -> None:
        with pytest.raises(BuildError):
            param.boolean.encode(1)


class TestNull:
    def test_round_trip(self) -> None:
        assert param.null.encode(None) == "null"
        assert param.null.decode("null") is None

    def test_rejects_other(self) -> None:
        with pytest.raises(DecodeError):
            param.null.decode("nil")
        with pytest.raises(BuildError):
            param.null.encode(0)


class TestDate:
    def test_datetime_round_trip(self) -> None:
        value = datetime(2024, 3, 1, 12, 30, tzinfo=UTC)
        assert param.date.encode(value) == "2024-03-01T12:30:00+00:00"
        assert param.date.decode(param.date.encode(value)) == value

    def test_date_round_trip(self) -> None:
        value = date(2024, 3, 1)
        assert param.date.encode(value) == "2024-03-01"
        decoded = param.date.decode("2024-03-01")
        assert decoded == value
        assert type(decoded) is date

    def test_rejects_malformed(self) -> None:
        with pytest.raises(DecodeError):
            param.date.decode("2024-13-40")

    def test_rejects_string_value(self) -> None:
        with pytest.raises(BuildError):
            param.date.encode("2024-03-01")


class TestOneOf:
    def test_strings(self) -> None:
        sort = param.one_of("new", "top")
        assert sort.encode("top") == "top"
        assert sort.decode("new") == "new"

    def test_rejects_outside_set(self) -> None:
        sort = param.one_of("new", "top")
        with pytest.raises(DecodeError):
            sort.decode("old")
        with pytest.raises(BuildError):
            sort.encode("old")

    def test_numbers_decode_to_numbers(self) -> None:
        size = param.one_of(10, 25, 50)
        assert size.decode("25") == 25
        assert size.encode(50) == "50"

    def test_bool_not_confused_with_int(self) -> None:
        flag = param.one_of(1, 0)
        with pytest.raises(BuildError):
            flag.encode(True)

    def test_optional_fallback(self) -> None:
        tab = param.one_of("posts", "likes").optional("posts")
        assert tab.decode("other") == "posts"

    def test_requires_values(self) -> None:
        with pytest.raises(TypeError):
            param.one_of()


class TestArrayOf:
    def test_encode(self) -> None:
        assert param.array_of(param.number).encode([1, 2]) == ["1", "2"]

    def test_decode_list(self) -> None:
        assert param.array_of(param.number).decode(["1", "2"]) == [1, 2]

    def test_decode_single_string(self) -> None:
        assert param.array_of(param.string).decode("a") == ["a"]

    def test_preserves_order(self) -> None:
        tags = param.array_of(param.string)
        assert tags.decode(tags.encode(["b", "a", "c"])) == ["b", "a", "c"]

    def test_element_failure(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            param.array_of(param.number).decode(["1", "x"])
        assert exc_info.value.raw_value == "x"

    def test_optional_elements_fall_back(self) -> None:
        ids = param.array_of(param.number.optional(0))
        assert ids.decode(["1", "x"]) == [1, 0]

    def test_rejects_scalar(self) -> None:
        with pytest.raises(BuildError):
            param.array_of(param.string).encode("ab")

    def test_rejects_nesting(self) -> None:
        with pytest.raises(TypeError):
            param.array_of(param.array_of(param.string))

    def test_multiple_flag(self) -> None:
        assert param.array_of(param.string).multiple is True
        assert param.string.multiple is False


class TestCustom:
    def test_composite_value_to_single_string(self) -> None:
        point = param.custom(
            lambda p: f"{p[0]},{p[1]}",
            lambda raw: tuple(int(part) for part in raw.split(",")),
            name="point",
        )
        assert point.encode((3, 4)) == "3,4"
        assert point.decode("3,4") == (3, 4)
        assert repr(point) == "param.point"

    def test_decoder_errors_become_decode_errors(self) -> None:
        integer = param.custom(str, int)
        with pytest.raises(DecodeError):
            integer.decode("x")
