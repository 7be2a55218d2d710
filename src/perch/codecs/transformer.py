"""Transformer: the atomic encode/decode pair.

A Transformer converts one typed value to its wire text and back. Codecs
never touch values directly; they hand each field to its transformer.

Transformers are frozen. ``optional()`` returns a new transformer whose
``decode`` never raises; the original is unchanged::

    page = param.number.optional(1)
    page.decode("abc")   # -> 1
    param.number.decode("abc")   # raises DecodeError
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from perch._internal.types import Decoder, Encoder
from perch.errors import BuildError, DecodeError

logger = logging.getLogger("perch.codecs")

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Transformer(Generic[T]):
    """An immutable encode/decode pair with optional/fallback semantics.

    Attributes:
        encoder: Converts a value to ``str`` (or ``list[str]``).
        decoder: Converts wire text back to a value. May raise
            ``DecodeError``, ``ValueError`` or ``TypeError`` on bad input.
        kind: Short name of the built-in this came from (``"custom"`` otherwise).
            Query formatting uses it to recognise booleans.
        multiple: True when the wire form is a list of strings.
        inner: Element transformer for array transformers.
        is_optional: Decode never raises; absent or bad input yields ``fallback``.
        fallback: Value substituted when optional and input is absent or invalid.
    """

    encoder: Encoder
    decoder: Decoder
    kind: str = "custom"
    multiple: bool = False
    inner: "Transformer[Any] | None" = None
    is_optional: bool = False
    fallback: Any = None
    label: str = field(default="", compare=False)

    def encode(self, value: T) -> Any:
        """Encode *value* to wire text.

        Raises ``BuildError`` if the encoder rejects the value.
        """
        try:
            return self.encoder(value)
        except BuildError:
            raise
        except (TypeError, ValueError) as exc:
            raise BuildError(reason=str(exc) or f"cannot encode {value!r}") from exc

    def decode(self, raw: Any) -> T:
        """Decode wire text to a value.

        ``None`` means the field was absent. Optional transformers return
        their fallback for absent or malformed input; required ones raise
        ``DecodeError``.
        """
        if raw is None:
            if self.is_optional:
                return self.fallback
            raise DecodeError(raw_value=None, reason="value is required")
        try:
            return self.decoder(raw)
        except (DecodeError, TypeError, ValueError) as exc:
            if self.is_optional:
                logger.debug("%r: falling back to %r for %r (%s)", self, self.fallback, raw, exc)
                return self.fallback
            if isinstance(exc, DecodeError):
                raise
            raise DecodeError(raw_value=raw, reason=str(exc)) from exc

    def optional(self, fallback: Any = None) -> "Transformer[T]":
        """Return an optional copy that substitutes *fallback* on failure."""
        return replace(self, is_optional=True, fallback=fallback)

    @property
    def leaf_kind(self) -> str:
        """Kind of the element transformer for arrays, else this kind."""
        if self.inner is not None:
            return self.inner.leaf_kind
        return self.kind

    def __repr__(self) -> str:
        name = self.label or self.kind
        if not self.is_optional:
            return f"param.{name}"
        if self.fallback is None:
            return f"param.{name}.optional()"
        return f"param.{name}.optional({self.fallback!r})"
