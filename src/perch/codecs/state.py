"""State codec: an opaque payload carried beside the URL.

Navigation layers attach application state to a location without putting
it in the address. Perch does not interpret it; the route delegates to
whatever encode/decode pair the application supplies.
"""

from typing import Any

from perch.codecs.transformer import Transformer
from perch.errors import BuildError, DecodeError


class StateCodec:
    """Builds and parses the state attached to a location.

    Usage::

        codec = StateCodec(param.custom(dataclasses.asdict, lambda d: Draft(**d)))
        codec.build(Draft(title="x"))    # -> {"title": "x"}
        codec.parse({"title": "x"})      # -> Draft(title="x")

    ``StateCodec()`` with no transformer is the codec of a route without
    state: it parses to ``None`` and refuses to build a value.
    """

    __slots__ = ("_transformer",)

    def __init__(self, transformer: Transformer[Any] | None = None) -> None:
        self._transformer = transformer

    @property
    def transformer(self) -> Transformer[Any] | None:
        return self._transformer

    def build(self, value: Any) -> Any:
        """Encode *value* for the navigation layer; ``None`` stays ``None``."""
        if value is None:
            return None
        if self._transformer is None:
            raise BuildError("state", "route does not declare a state codec")
        try:
            return self._transformer.encode(value)
        except BuildError as exc:
            raise exc.with_parameter("state") from exc

    def parse(self, raw_state: Any) -> Any:
        """Decode a location's raw state.

        Absent state parses to ``None`` (or the transformer's fallback).
        Raises ``DecodeError`` if a required transformer rejects it.
        """
        if self._transformer is None:
            return None
        if raw_state is None:
            return self._transformer.fallback if self._transformer.is_optional else None
        try:
            return self._transformer.decode(raw_state)
        except DecodeError as exc:
            raise exc.with_parameter("state") from exc

    def __repr__(self) -> str:
        return f"StateCodec({self._transformer!r})"


def state(encode: Any, decode: Any) -> StateCodec:
    """Declare a state codec from an encode/decode pair."""
    return StateCodec(Transformer(encode, decode, label="state"))
