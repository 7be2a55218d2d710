"""Immutable raw query string parameters.

Implements ``Mapping[str, str | None]`` and the ``MultiValueMapping`` protocol.
Values are raw wire text, percent-decoded but not yet run through a
transformer.
"""

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from urllib.parse import unquote_plus

# key[] and key[3] both collapse to key
_BRACKETED = re.compile(r"(?P<base>.+?)\[(?P<index>\d*)\]")


@dataclass(frozen=True, slots=True)
class _Entry:
    position: int
    index: int | None
    value: str | None  # still percent-encoded; None for a bare key


class QueryParams(Mapping[str, str | None]):
    """Immutable query string parameters.

    Attributes:
        _data: Field name -> raw (percent-encoded) values in wire order.
        _raw: Raw query string, without the leading ``?``.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    ``get_split`` also splits each value on a delimiter (comma arrays).

    Bracketed keys are normalized: ``tag[]=a&tag[]=b`` and
    ``tag[1]=b&tag[0]=a`` both read as ``tag`` -> ``["a", "b"]``.
    A bare key (``?flag``) reads as ``None``; ``?flag=`` reads as ``""``.
    """

    _data: dict[str, list[str | None]]
    _raw: str

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: str = "") -> None:
        raw = query_string[1:] if query_string.startswith("?") else query_string
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_data", _parse(raw))

    def __getitem__(self, key: str) -> str | None:
        return _decode(self._data[key][0])

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    @property
    def raw(self) -> str:
        return self._raw

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return _decode(values[0])
        return default

    def get_list(self, key: str) -> list[str | None]:
        """Return all values for *key*."""
        return [_decode(v) for v in self._data.get(key, [])]

    def get_split(self, key: str, sep: str = ",") -> list[str]:
        """Return all values for *key*, each split on *sep* before decoding.

        Splitting happens on the encoded text, so an element containing an
        escaped delimiter (``%2C``) stays whole.
        """
        result: list[str] = []
        for value in self._data.get(key, []):
            if value is None or value == "":
                continue
            result.extend(unquote_plus(part) for part in value.split(sep))
        return result


def _decode(value: str | None) -> str | None:
    return None if value is None else unquote_plus(value)


def _parse(raw: str) -> dict[str, list[str | None]]:
    entries: dict[str, list[_Entry]] = {}
    for position, pair in enumerate(raw.split("&")):
        if not pair:
            continue
        if "=" in pair:
            raw_key, _, value = pair.partition("=")
            entry_value: str | None = value
        else:
            raw_key, entry_value = pair, None
        key = unquote_plus(raw_key)
        index: int | None = None
        bracketed = _BRACKETED.fullmatch(key)
        if bracketed is not None:
            key = bracketed["base"]
            if bracketed["index"]:
                index = int(bracketed["index"])
        entries.setdefault(key, []).append(_Entry(position, index, entry_value))

    return {
        key: [
            e.value
            for e in sorted(items, key=lambda e: (e.index is None, e.index or 0, e.position))
        ]
        for key, items in entries.items()
    }
