"""Query codec: typed values in and out of a query string.

Every query field is optional. The navigation layer does not match routes
on the query string, and users edit or strip it by hand, so a missing field
parses to ``None`` (or its transformer's fallback) rather than failing.
Malformed values still fail unless the transformer is optional.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any
from urllib.parse import quote

from perch._internal.multimap import MultiValueMapping
from perch.codecs.transformer import Transformer
from perch.config import QueryFormat
from perch.errors import BuildError, DecodeError, ParseError
from perch.http.query import QueryParams

_NUMERIC_BOOLEANS = {"true": "1", "false": "0"}


class QueryCodec:
    """Builds and parses the search part of a location.

    Usage::

        codec = QueryCodec({"page": param.number, "tags": param.array_of(param.string)})
        codec.build({"page": 2, "tags": ["a", "b"]})  # -> "?page=2&tags=a&tags=b"
        codec.parse("?page=2&tags=a&tags=b")         # -> {"page": 2, "tags": ["a", "b"]}

    Fields are written in declaration order. An empty list writes nothing
    (except in ``comma`` format), so it parses back as ``None``; declare
    ``param.array_of(...).optional([])`` to read it as ``[]``.
    """

    __slots__ = ("_format", "_params")

    def __init__(
        self,
        params: Mapping[str, Transformer[Any]] | None = None,
        query_format: QueryFormat | None = None,
    ) -> None:
        self._params: Mapping[str, Transformer[Any]] = MappingProxyType(dict(params or {}))
        self._format = query_format or QueryFormat()

    @property
    def params(self) -> Mapping[str, Transformer[Any]]:
        return self._params

    @property
    def format(self) -> QueryFormat:
        return self._format

    # -- build --

    def build(self, values: Mapping[str, Any] | None = None) -> str:
        """Serialize *values* to ``"?..."``, or ``""`` when nothing is written.

        Raises ``BuildError`` for undeclared keys or values a transformer rejects.
        """
        values = values or {}
        for key in values:
            if key not in self._params:
                raise BuildError(key, "not a declared query parameter")

        pairs: list[str] = []
        for name, transformer in self._params.items():
            if name not in values:
                continue
            value = values[name]
            key = quote(name, safe="")
            if value is None:
                pairs.extend(self._null_pairs(key))
                continue
            try:
                encoded = transformer.encode(value)
            except BuildError as exc:
                raise exc.with_parameter(name) from exc
            if transformer.leaf_kind == "boolean":
                encoded = self._format_boolean(encoded)
            if isinstance(encoded, list):
                pairs.extend(self._array_pairs(name, key, encoded))
            elif isinstance(encoded, str):
                pairs.append(f"{key}={quote(encoded, safe='')}")
            else:
                raise BuildError(name, f"encoded to {type(encoded).__name__}, expected str or list")
        return "?" + "&".join(pairs) if pairs else ""

    def _null_pairs(self, key: str) -> list[str]:
        match self._format.null_format:
            case "empty":
                return [f"{key}="]
            case "bare":
                return [key]
            case _:
                return []

    def _format_boolean(self, encoded: Any) -> Any:
        if self._format.boolean_format != "numeric":
            return encoded
        if isinstance(encoded, list):
            return [_NUMERIC_BOOLEANS.get(item, item) for item in encoded]
        return _NUMERIC_BOOLEANS.get(encoded, encoded)

    def _array_pairs(self, name: str, key: str, items: list[Any]) -> list[str]:
        for item in items:
            if not isinstance(item, str):
                raise BuildError(name, f"array element encoded to {type(item).__name__}, expected str")
        encoded = [quote(item, safe="") for item in items]
        match self._format.array_format:
            case "brackets":
                return [f"{key}[]={item}" for item in encoded]
            case "indices":
                return [f"{key}[{i}]={item}" for i, item in enumerate(encoded)]
            case "comma":
                return [f"{key}={','.join(encoded)}"]
            case _:
                return [f"{key}={item}" for item in encoded]

    # -- parse --

    def parse(self, search: str | MultiValueMapping | None) -> dict[str, Any]:
        """Decode every declared field from *search* (with or without ``?``).

        *search* may also be an already parsed ``MultiValueMapping``.
        Absent fields resolve to ``None`` or their fallback. Raises one
        ``ParseError`` listing every present field that failed to decode
        through a required transformer. Undeclared keys are ignored.
        """
        raw = search if isinstance(search, MultiValueMapping) else QueryParams(search or "")
        result: dict[str, Any] = {}
        failures: list[DecodeError] = []
        for name, transformer in self._params.items():
            # absent key or explicit null
            raw_value = self._raw_value(raw, name, transformer) if name in raw else None
            if raw_value is None:
                result[name] = transformer.fallback if transformer.is_optional else None
                continue
            try:
                result[name] = transformer.decode(raw_value)
            except DecodeError as exc:
                failures.append(exc.with_parameter(name))
        if failures:
            raise ParseError.collect(failures, part="query")
        return result

    def _raw_value(self, raw: MultiValueMapping, name: str, transformer: Transformer[Any]) -> Any:
        """Wire text for *name*; ``None`` means an explicit null."""
        null_format = self._format.null_format
        if transformer.multiple:
            if self._format.array_format == "comma":
                return raw.get_split(name)
            return [value for value in raw.get_list(name) if value is not None]
        value = raw.get(name)
        if value is None:
            return None if null_format == "bare" else ""
        if value == "" and null_format == "empty":
            return None
        return value

    def __repr__(self) -> str:
        return f"QueryCodec({dict(self._params)!r})"


def query(query_format: QueryFormat | None = None, **params: Transformer[Any]) -> QueryCodec:
    """Declare a query codec: ``query(page=param.number.optional(1))``."""
    return QueryCodec(params, query_format)
