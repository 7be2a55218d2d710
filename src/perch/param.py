"""Built-in transformers.

A namespace of immutable transformer values and pure factories. Import the
module and pick what you need::

    from perch import param

    user_id = param.number
    tab = param.one_of("posts", "likes").optional("posts")
    tags = param.array_of(param.string)

Every value here is frozen, so sharing ``param.string`` between routes is
safe; ``.optional()`` and the factories always return new transformers.

Normalizations (wire text that does not round-trip byte-for-byte):

- ``number``: ``"+5"`` decodes to ``5``, ``"1e3"`` to ``1000.0``.
- ``boolean``: ``"1"``/``"0"`` decode to ``True``/``False``; encode always
  writes ``"true"``/``"false"``.
- ``date``: a timezone written as ``Z`` is re-encoded as ``+00:00``.
"""

import math
import re
from collections.abc import Callable
from datetime import date as _date
from datetime import datetime
from typing import Any

from perch.codecs.transformer import Transformer
from perch.errors import DecodeError

__all__ = [
    "Transformer",
    "array_of",
    "boolean",
    "custom",
    "date",
    "null",
    "number",
    "one_of",
    "string",
]

_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?\d+")
_DATE_ONLY = re.compile(r"\d{4}-\d{2}-\d{2}")


# -- string --


def _encode_string(value: Any) -> str:
    if not isinstance(value, str):
        msg = f"expected str, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def _decode_string(raw: Any) -> str:
    if not isinstance(raw, str):
        raise DecodeError(raw_value=raw, reason="expected a single value")
    return raw


# -- number --


def _encode_number(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"expected int or float, got {type(value).__name__}"
        raise TypeError(msg)
    if isinstance(value, float):
        if not math.isfinite(value):
            msg = f"{value!r} is not a finite number"
            raise ValueError(msg)
        return repr(value)
    return str(value)


def _decode_number(raw: Any) -> int | float:
    if not isinstance(raw, str) or not _NUMBER.fullmatch(raw):
        raise DecodeError(raw_value=raw, reason="not a number")
    if _INTEGER.fullmatch(raw):
        return int(raw)
    return float(raw)


# -- boolean --


def _encode_boolean(value: Any) -> str:
    if not isinstance(value, bool):
        msg = f"expected bool, got {type(value).__name__}"
        raise TypeError(msg)
    return "true" if value else "false"


def _decode_boolean(raw: Any) -> bool:
    if raw in ("true", "1"):
        return True
    if raw in ("false", "0"):
        return False
    raise DecodeError(raw_value=raw, reason="expected true or false")


# -- null --


def _encode_null(value: Any) -> str:
    if value is not None:
        msg = f"expected None, got {type(value).__name__}"
        raise TypeError(msg)
    return "null"


def _decode_null(raw: Any) -> None:
    if raw != "null":
        raise DecodeError(raw_value=raw, reason="expected null")


# -- date --


def _encode_date(value: Any) -> str:
    if not isinstance(value, _date):
        msg = f"expected date or datetime, got {type(value).__name__}"
        raise TypeError(msg)
    return value.isoformat()


def _decode_date(raw: Any) -> _date:
    if not isinstance(raw, str):
        raise DecodeError(raw_value=raw, reason="expected a single value")
    if _DATE_ONLY.fullmatch(raw):
        return _date.fromisoformat(raw)
    return datetime.fromisoformat(raw)


string: Transformer[str] = Transformer(_encode_string, _decode_string, kind="string")
number: Transformer[int | float] = Transformer(_encode_number, _decode_number, kind="number")
boolean: Transformer[bool] = Transformer(_encode_boolean, _decode_boolean, kind="boolean")
null: Transformer[None] = Transformer(_encode_null, _decode_null, kind="null")
date: Transformer[_date] = Transformer(_encode_date, _decode_date, kind="date")


def _literal_text(value: Any) -> str:
    if isinstance(value, bool):
        return _encode_boolean(value)
    if isinstance(value, int | float):
        return _encode_number(value)
    if isinstance(value, str):
        return value
    msg = f"one_of literals must be str, int, float or bool, got {type(value).__name__}"
    raise TypeError(msg)


def one_of(*allowed: Any) -> Transformer[Any]:
    """Transformer accepting only the given literals.

    Literals are matched by wire text, so ``one_of(1, 2)`` decodes ``"2"``
    to ``2``::

        sort = param.one_of("new", "top")
        sort.decode("top")    # -> "top"
        sort.decode("old")    # raises DecodeError
    """
    if not allowed:
        msg = "one_of() needs at least one allowed value"
        raise TypeError(msg)
    by_text = {_literal_text(value): value for value in allowed}

    def encode(value: Any) -> str:
        text = _literal_text(value)
        if text not in by_text or type(by_text[text]) is not type(value):
            msg = f"{value!r} is not one of {', '.join(map(repr, allowed))}"
            raise ValueError(msg)
        return text

    def decode(raw: Any) -> Any:
        if not isinstance(raw, str) or raw not in by_text:
            raise DecodeError(raw_value=raw, reason=f"expected one of {', '.join(by_text)}")
        return by_text[raw]

    label = f"one_of({', '.join(map(repr, allowed))})"
    return Transformer(encode, decode, kind="one_of", label=label)


def array_of(inner: Transformer[Any]) -> Transformer[list[Any]]:
    """Transformer for a list whose elements use *inner*.

    Encodes to a list of strings, one per element. Decode accepts a list or
    a single string (a one-element list). Elements that fail an optional
    *inner* decode to its fallback.

    Path parameters arrive from the matcher as one joined string, so an
    array on a path placeholder decodes as a single element; use a
    ``custom`` transformer that splits explicitly instead.
    """
    if inner.multiple:
        msg = "array_of() cannot nest array transformers"
        raise TypeError(msg)

    def encode(values: Any) -> list[str]:
        if isinstance(values, str | bytes) or not isinstance(values, list | tuple):
            msg = f"expected list or tuple, got {type(values).__name__}"
            raise TypeError(msg)
        encoded: list[str] = []
        for item in values:
            text = inner.encode(item)
            if not isinstance(text, str):
                msg = f"array element {item!r} did not encode to a string"
                raise TypeError(msg)
            encoded.append(text)
        return encoded

    def decode(raw: Any) -> list[Any]:
        items = [raw] if isinstance(raw, str) else raw
        if not isinstance(items, list | tuple):
            raise DecodeError(raw_value=raw, reason="expected a list")
        return [inner.decode(item) for item in items]

    label = f"array_of({inner!r})"
    return Transformer(encode, decode, kind="array", multiple=True, inner=inner, label=label)


def custom(
    encode: Callable[[Any], Any],
    decode: Callable[[Any], Any],
    *,
    name: str = "custom",
    multiple: bool = False,
) -> Transformer[Any]:
    """Wrap a user-authored encode/decode pair.

    *decode* may raise ``DecodeError``, ``ValueError`` or ``TypeError`` on
    bad input; all three are reported as ``DecodeError``. Set *multiple*
    when the wire form is a list of strings (query fields only).
    """
    return Transformer(encode, decode, kind="custom", multiple=multiple, label=name)
